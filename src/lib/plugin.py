"""
Host adapter exposing the tag core as render lifecycle hooks

A host pipeline calls these hooks in order for every render:

1. metaHeaders_register: once, to learn the Tags/Filter/FilterGetParam headers
2. meta_parse: for every page, after its meta block was read
3. pages_load: once the page collection and current page are known
4. pageRendering_prepare: before templates are rendered

The plugin holds no per-render state. The accumulated tags travel in the
FilterResult returned by pages_load and handed to pageRendering_prepare.
"""

from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

from ..config import appsettings
from ..models.page import Page, FilterResult, RenderRequest, META_HEADERS
from .tags import tags_parse, filter_resolve, pages_filter
from .log import LOG


class TagsPlugin:
    """
    Tag filtering hooks for a page-rendering host

    Example:
        >>> plugin = TagsPlugin()
        >>> variables = plugin.request_render(pages, RenderRequest(current_page=pages[0]))
        >>> variables['all_tags']
        ['news', 'blog', 'news']
    """

    def metaHeaders_register(self, headers: Dict[str, str]) -> Dict[str, str]:
        """
        Register the meta header fields read by this plugin

        Args:
            headers: Host map of meta key -> header name, updated in place

        Returns:
            The updated headers map
        """
        headers.update(META_HEADERS)
        return headers

    def meta_parse(
        self, meta: Dict[str, Any], query_params: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Turn a page's raw tags and filter headers into lists

        Args:
            meta: Parsed meta of one page, updated in place
            query_params: Request query parameters for the FilterGetParam lookup

        Returns:
            The updated meta dict
        """
        meta['tags'] = tags_parse(meta.get('tags'))
        meta['filter'] = filter_resolve(
            meta.get('filter'), meta.get('filterGetParam'), query_params
        )
        return meta

    def pages_load(
        self,
        pages: List[Page],
        current_page: Optional[Page],
        previous_page: Optional[Page] = None,
        next_page: Optional[Page] = None,
    ) -> FilterResult:
        """
        Filter the page collection for the page being served

        previous_page and next_page are accepted for hook compatibility and
        left untouched.
        """
        return pages_filter(pages, current_page)

    def pageRendering_prepare(
        self, variables: Dict[str, Any], result: FilterResult
    ) -> Dict[str, Any]:
        """
        Expose the filtered pages and accumulated tags to templates

        Args:
            variables: Template variables, updated in place
            result: FilterResult of this render

        Returns:
            The updated variables dict
        """
        variables['pages'] = list(result.pages)
        variables[appsettings.all_tags_variable] = list(result.all_tags)
        return variables

    def request_render(self, pages: List[Page], request: RenderRequest) -> Dict[str, Any]:
        """
        Run every hook for one render request

        Pages are copied before their meta is parsed, so the same raw
        collection can serve any number of requests.

        Args:
            pages: Page collection with raw meta
            request: Current page and query parameters

        Returns:
            Template variables: "pages", "current_page" and the all-tags variable
        """
        parsed = [
            replace(page, meta=self.meta_parse(dict(page.meta), request.query_params))
            for page in pages
        ]

        current_page = None
        if request.current_page is not None:
            current_id = request.current_page.id
            current_page = next((page for page in parsed if page.id == current_id), None)
            if current_page is None:
                # Served page outside the collection
                current_page = replace(
                    request.current_page,
                    meta=self.meta_parse(dict(request.current_page.meta), request.query_params),
                )
            LOG(f"Rendering {current_id}", level=2)

        result = self.pages_load(parsed, current_page)
        variables: Dict[str, Any] = {'current_page': current_page}
        return self.pageRendering_prepare(variables, result)
