"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, List, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the render pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, currentPage, query, outputFile
        - env_check: queryParams, envOK
        - content_load: pagesLoaded
        - pages_render: renderResults
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Content directory holding the page sources
        outputdir: Directory for the rendered JSON payloads
        verbosity: Logging verbosity level (1-3)
        currentPage: Id of the single page to render (None renders all pages)
        query: Raw KEY=VALUE query arguments from the CLI
        outputFile: Output file name in single-page mode
        envOK: Environment validation passed
        queryParams: Parsed query parameters
        pagesLoaded: Pages read from the content directory
        renderResults: Output file name -> rendered template variables
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    currentPage: Optional[str] = field(default=None)
    query: Optional[List[str]] = field(default=None)
    outputFile: str = field(default="")

    # Pipeline state
    envOK: bool = field(default=False)
    queryParams: Dict[str, str] = field(default_factory=dict)
    pagesLoaded: Optional[List[Any]] = field(default=None)  # List[Page] at runtime
    renderResults: Optional[Dict[str, Dict[str, Any]]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Merges CLI options with explicitly provided directories to create
        the initial program state for the render pipeline.

        Args:
            options: Parsed CLI arguments (currentPage, query, etc.)
            inputdir: Directory containing page sources
            outputdir: Directory for render output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        # Only keep options that are ProgramState fields
        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            content_load,
            pages_render,
            results_report
        )

    This is equivalent to:
        results_report(pages_render(content_load(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
