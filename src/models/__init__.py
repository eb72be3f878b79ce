"""
Models package for pagetags

Contains data structures and type definitions for the render pipeline.
"""

from .state import ProgramState, pipeline
from .page import Page, FilterResult, RenderRequest, META_HEADERS

__all__ = [
    "ProgramState",
    "pipeline",
    "Page",
    "FilterResult",
    "RenderRequest",
    "META_HEADERS",
]
