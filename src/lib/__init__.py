"""
pagetags - Tag-based page filtering for static sites

Pages declare tags; a page may declare a filter selecting which tagged
pages appear in its page list.
"""

__version__ = "1.0.0"
__author__ = "Rudolph Pienaar"
__email__ = "rudolph.pienaar@gmail.com"

from .tags import tags_parse, filter_resolve, pages_filter
from .plugin import TagsPlugin
from .content import ContentLoader, ContentError
from .log import LOG, state_connectToLogger

__all__ = [
    "tags_parse",
    "filter_resolve",
    "pages_filter",
    "TagsPlugin",
    "ContentLoader",
    "ContentError",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
