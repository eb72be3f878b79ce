#!/usr/bin/env python3
"""
pagetags - Tag-based page filtering for static sites

Renders the page list of one or more pages of a content directory, applying
each page's Tags/Filter meta headers, and writes the resulting template
variables as JSON.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Page meta headers:
    Tags: news, blog          tags that apply to the page
    Filter: news              only pages with one of these tags are listed
    FilterGetParam: tag       query parameter adding further filter tags

Usage:
    pagetags inputdir/ outputdir/ [--currentPage ID] [--query KEY=VALUE ...]

    Without --currentPage every page is rendered as its own request and
    written to outputdir/<page id>.json.

Examples:
    # Render every page
    pagetags content/ output/

    # Render the front page as if requested with ?tag=news
    pagetags content/ output/ --currentPage index --query tag=news

    # Verbose output
    pagetags content/ output/ -vv
"""

import sys
import json
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import Any, Dict

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import TagsPlugin, ContentLoader, ContentError, __version__, LOG, state_connectToLogger
from .models import ProgramState, RenderRequest, pipeline


DISPLAY_TITLE = r"""
                        _
  _ __   __ _  __ _  ___| |_ __ _  __ _ ___
 | '_ \ / _` |/ _` |/ _ \ __/ _` |/ _` / __|
 | |_) | (_| | (_| |  __/ || (_| | (_| \__ \
 | .__/ \__,_|\__, |\___|\__\__,_|\__, |___/
 |_|          |___/               |___/

  Tag-based page filtering
"""

# Define CLI arguments
parser = ArgumentParser(
    description="pagetags - Tag-based page filtering for static sites",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--currentPage",
    default=None,
    type=str,
    help="Id of the page to render (relative path without extension). Defaults to every page",
)

parser.add_argument(
    "--query",
    action="append",
    default=None,
    type=str,
    help="Request query parameter as KEY=VALUE (can be repeated)",
)

parser.add_argument(
    "--outputFile",
    default=appsettings.default_output_file,
    type=str,
    help="Output file name when rendering a single page",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and parse request arguments.

    Verifies that the content directory exists, creates the output
    directory and parses --query arguments into query parameters.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - queryParams: Dict of query parameter name -> value
            - envOK: True if environment is valid

    Exits:
        1 if the content directory is missing or a query argument is malformed
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.inputdir or not state.inputdir.is_dir():
        print(f"Error: Content directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    LOG(f"Content directory: {state.inputdir}", level=2)

    query_params: Dict[str, str] = {}
    for item in state.query or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            print(f"Error: Query parameter must be KEY=VALUE, got: {item}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        query_params[name] = value
    state.queryParams = query_params
    LOG(f"Query parameters: {query_params}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    state.envOK = True
    return state


def content_load(inputstate: ProgramState) -> ProgramState:
    """
    Read every page source of the content directory.

    Args:
        inputstate: Program state with a validated inputdir

    Returns:
        ProgramState with added field:
            - pagesLoaded: List[Page] with raw meta values

    Exits:
        1 if a page can't be read or --currentPage names an unknown page
    """

    state = inputstate.copy()

    LOG("Loading pages...", level=1)

    headers = TagsPlugin().metaHeaders_register({})
    try:
        loader = ContentLoader(str(state.inputdir), headers=headers)
        state.pagesLoaded = loader.pages_load()
    except ContentError as e:
        print(f"Content error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Loaded {len(state.pagesLoaded)} pages", level=2)

    if state.currentPage and state.currentPage not in {p.id for p in state.pagesLoaded}:
        print(f"Error: Page not found: {state.currentPage}", file=sys.stderr)
        sys.exit(1)
    return state


def payload_make(variables: Dict[str, Any]) -> Dict[str, Any]:
    """Convert render template variables to a JSON-serialisable payload"""
    current_page = variables.get('current_page')
    return {
        'current_page': current_page.id if current_page else None,
        'pages': [page.summary_make() for page in variables['pages']],
        appsettings.all_tags_variable: variables[appsettings.all_tags_variable],
    }


def pages_render(inputstate: ProgramState) -> ProgramState:
    """
    Render the page list of the requested page(s).

    Each rendered page is an independent request: its own meta parse,
    its own filter run and its own accumulated tags.

    Args:
        inputstate: Program state with pagesLoaded

    Returns:
        ProgramState with added field:
            - renderResults: Dict of output file name -> payload

    Exits:
        1 if no pages were loaded, two pages share an output file name,
        or an output file can't be written
    """

    state = inputstate.copy()

    LOG("Rendering page lists...", level=1)

    if state.pagesLoaded is None:
        print("Error: No pages loaded", file=sys.stderr)
        sys.exit(1)

    plugin = TagsPlugin()
    if state.currentPage:
        targets = [(state.outputFile, p) for p in state.pagesLoaded if p.id == state.currentPage]
    else:
        targets = [(appsettings.outputName_make(p.id), p) for p in state.pagesLoaded]

    seen: Dict[str, str] = {}
    for output_name, page in targets:
        if output_name in seen:
            print(
                f"Error: Pages {seen[output_name]} and {page.id} both render to {output_name}",
                file=sys.stderr,
            )
            sys.exit(1)
        seen[output_name] = page.id

    results: Dict[str, Dict[str, Any]] = {}
    for output_name, page in targets:
        request = RenderRequest(current_page=page, query_params=state.queryParams)
        payload = payload_make(plugin.request_render(state.pagesLoaded, request))
        output_file = state.outputdir / output_name
        try:
            output_file.write_text(json.dumps(payload, indent=2), encoding='utf-8')
        except OSError as e:
            print(f"Error writing {output_file}: {e}", file=sys.stderr)
            sys.exit(1)
        LOG(f"Wrote {output_file} ({len(payload['pages'])} pages)", level=2)
        results[output_name] = payload

    state.renderResults = results
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the rendered pages.

    Args:
        inputstate: Program state with renderResults populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if renderResults is None
    """
    state: ProgramState = inputstate.copy()
    if state.renderResults is None:
        print("Error: Rendering failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Rendering successful!", level=1)
    LOG(f"  Pages rendered: {len(state.renderResults)}", level=1)
    for output_name, payload in state.renderResults.items():
        LOG(
            f"  {output_name}: {len(payload['pages'])} pages, "
            f"{len(payload[appsettings.all_tags_variable])} tags",
            level=2,
        )
    LOG(f"  Output: {state.outputdir}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="pagetags - Tag-based page filtering",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - render tag-filtered page lists of a content directory.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and parse query arguments
        2. content_load: Read page sources and their meta blocks
        3. pages_render: Filter the page list per rendered page
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
            - currentPage: Optional[str] - Page to render
            - query: Optional[List[str]] - KEY=VALUE query parameters
            - outputFile: str - Output file name in single-page mode
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing page sources
        outputdir: Directory where JSON payloads will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, content_load, pages_render, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
