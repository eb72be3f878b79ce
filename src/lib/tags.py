"""
Tag and filter parsing, and tag-based page filtering

The core of pagetags. Pages declare tags ("Tags: news, blog") and may
declare a filter ("Filter: news") restricting which pages appear in their
page list. Everything here is a plain function over plain data so that any
host pipeline can call it at the right point of a render.

Two stages per render:
1. Parsing: raw comma-separated strings become TagSets (lists of str)
2. Filtering: the current page's filter selects pages sharing a tag

Tag comparison is asymmetric: filter tags are trimmed when resolved, page
tags are trimmed only for the comparison and are otherwise kept as written,
including in the accumulated all_tags list.

Example:
    >>> tags_parse("news, blog")
    ['news', ' blog']
    >>> filter_resolve(" news", None, {})
    ['news']
"""

from typing import Any, Iterable, List, Mapping, Optional

from ..config import appsettings
from ..models.page import Page, FilterResult
from .log import LOG


def tags_parse(raw: Any, separator: Optional[str] = None) -> List[str]:
    """
    Split a raw meta string into a list of tags

    Segments keep their surrounding whitespace and empty segments are kept.
    Anything that is not a non-empty string parses to an empty list.

    Args:
        raw: Raw header value (usually str, possibly None or another type)
        separator: Tag separator (defaults to appsettings.tag_separator)

    Returns:
        Tags in order of appearance

    Example:
        >>> tags_parse("a, b ,c")
        ['a', ' b ', 'c']
        >>> tags_parse(None)
        []
    """
    if not isinstance(raw, str) or len(raw) <= 0:
        return []
    return raw.split(separator or appsettings.tag_separator)


def filter_resolve(
    page_filter_raw: Any,
    query_param_name: Any,
    query_params: Optional[Mapping[str, str]],
) -> List[str]:
    """
    Resolve the effective filter of a page

    Tags from the named query parameter come first, followed by the page's
    own Filter header. Every resulting tag is trimmed.

    Args:
        page_filter_raw: Raw "Filter" header value
        query_param_name: Raw "FilterGetParam" header value naming a query parameter
        query_params: Request query parameters (None means no parameters)

    Returns:
        Trimmed filter tags, query-sourced tags first

    Example:
        >>> filter_resolve("y,z", "f", {"f": "x,y"})
        ['x', 'y', 'y', 'z']
    """
    url_filter: List[str] = []
    if (
        isinstance(query_param_name, str)
        and query_param_name
        and query_params
        and query_param_name in query_params
    ):
        url_filter = tags_parse(query_params[query_param_name])
        LOG(f"Query parameter '{query_param_name}' adds filter {url_filter}", level=3)

    return [tag.strip() for tag in url_filter + tags_parse(page_filter_raw)]


def tags_intersect(page_tags: Iterable[str], filter_tags: Iterable[str]) -> bool:
    """Check whether any str page tag, trimmed, equals a filter tag"""
    wanted = {tag for tag in filter_tags if isinstance(tag, str)}
    return any(isinstance(tag, str) and tag.strip() in wanted for tag in page_tags)


def tags_get(page: Page, key: str = 'tags') -> List[str]:
    """Read a materialised TagSet from page meta; anything else reads as empty"""
    value = page.meta.get(key)
    if isinstance(value, list):
        return value
    return []


def pages_filter(pages: Iterable[Page], current_page: Optional[Page]) -> FilterResult:
    """
    Filter the page collection by the current page's filter

    A page is kept when at least one of its tags (trimmed for comparison)
    equals a filter tag. Tags of kept pages are accumulated untrimmed and
    without deduplication. Without a current page, or with an empty filter,
    all pages pass through and nothing is accumulated.

    Args:
        pages: Full page collection, in site order
        current_page: Page being rendered, with meta already parsed

    Returns:
        FilterResult holding the kept pages (order preserved) and all_tags

    Example:
        Pages tagged "news", "blog,news", "misc" with filter ["news"]:
        FilterResult(pages=[first, second], all_tags=["news", "blog", "news"])
    """
    pages = list(pages)
    if current_page is None:
        return FilterResult(pages=pages)

    filter_tags = tags_get(current_page, 'filter')
    if not filter_tags:
        return FilterResult(pages=pages)

    LOG(f"Filtering {len(pages)} pages for '{current_page.id}' by {filter_tags}", level=2)

    result = FilterResult(pages=[])
    for page in pages:
        page_tags = tags_get(page)
        if tags_intersect(page_tags, filter_tags):
            result.pages.append(page)
            result.all_tags.extend(page_tags)
            LOG(f"Kept {page.id} (tags: {page_tags})", level=3)
        else:
            LOG(f"Dropped {page.id} (tags: {page_tags})", level=3)

    LOG(f"Kept {len(result.pages)} of {len(pages)} pages", level=2)
    return result
