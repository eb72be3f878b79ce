"""
Page and filtering data models

Type-safe structures passed between the host adapter and the tag core.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Page:
    """
    A single page of the site

    Owned by the host (the content loader in this package). The tag core
    only reads and normalises entries of ``meta``; it never creates pages.

    Attributes:
        id: Relative source path without extension (e.g., "blog/first-post")
        url: Site URL derived from the id (e.g., "/blog/first-post")
        meta: Parsed meta headers keyed by meta key ("tags", "filter", ...)
        content: Page body following the meta block
        path: Source file, if the page was read from disk

    Example:
        Page(id="index", url="/", meta={"tags": "news, blog"}, content="Hi")
    """
    id: str
    url: str = ""
    meta: Dict[str, Any] = field(default_factory=dict)
    content: str = ""
    path: Optional[Path] = None

    def summary_make(self) -> Dict[str, Any]:
        """JSON-serialisable view of the page for template output"""
        return {"id": self.id, "url": self.url, "meta": dict(self.meta)}


@dataclass
class FilterResult:
    """
    Result of filtering the page collection for one render

    Returned by pages_filter(). A fresh instance is built per render, so
    ``all_tags`` never carries tags over from another request.

    Attributes:
        pages: Kept pages, in input order
        all_tags: Tags of every kept page, untrimmed, duplicates retained

    Example:
        Pages tagged "news" and "blog,news" kept by filter ["news"]:
        FilterResult(pages=[...], all_tags=["news", "blog", "news"])
    """
    pages: List[Page]
    all_tags: List[str] = field(default_factory=list)


@dataclass
class RenderRequest:
    """
    One page-render request

    Attributes:
        current_page: Page being served, or None
        query_params: Request query parameters (name -> value)
    """
    current_page: Optional[Page] = None
    query_params: Dict[str, str] = field(default_factory=dict)


# Meta key -> meta header name, registered with the host
META_HEADERS: Dict[str, str] = {
    'tags': 'Tags',
    'filter': 'Filter',
    'filterGetParam': 'FilterGetParam',
}
