"""
Content loader for page sources

Reads a directory of Markdown pages into Page objects. Each page may start
with a YAML meta block:

    ---
    Title: Front page
    Tags: news, blog
    Filter: news
    FilterGetParam: tag
    ---
    Page body...

The comment form "/* ... */" is accepted as well. Header names are matched
case-insensitively against the registered meta headers, so "Tags" and
"tags" both land in meta["tags"].
"""

import re
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..config import appsettings
from ..models.page import Page, META_HEADERS
from .log import LOG


class ContentError(Exception):
    """Raised when page sources cannot be read or their meta block is invalid"""
    pass


class ContentLoader:
    """
    Loads page sources from a content directory.

    A loader is configured with the host's registered meta headers
    (meta key -> header name); the pagetags headers are always included.
    """

    def __init__(self, content_dir: str, headers: Optional[Dict[str, str]] = None):
        """
        Prepare a loader for a content directory.

        Args:
            content_dir: Directory containing page sources
            headers: Registered meta headers (meta key -> header name)

        Raises:
            ContentError: If the content directory doesn't exist
        """
        self.content_dir = Path(content_dir)
        if not self.content_dir.is_dir():
            raise ContentError(
                f"Content directory not found: {self.content_dir}"
            )

        headers = {**META_HEADERS, **(headers or {})}
        # Header name (lower-cased) -> meta key
        self.header_keys: Dict[str, str] = {
            name.lower(): key for key, name in headers.items()
        }

    def pages_load(self) -> List[Page]:
        """Load every page under the content directory, ordered by relative path"""
        pattern = f"*{appsettings.content_extension}"
        paths = sorted(
            self.content_dir.rglob(pattern),
            key=lambda p: p.relative_to(self.content_dir).as_posix(),
        )
        pages = [self.page_read(path) for path in paths if path.is_file()]
        LOG(f"Loaded {len(pages)} pages from {self.content_dir}", level=2)
        return pages

    def page_read(self, path: Path) -> Page:
        """
        Read a single page source.

        Args:
            path: Page source inside the content directory

        Returns:
            Page with raw (unparsed) meta values

        Raises:
            ContentError: If the file can't be read or its meta block is invalid
        """
        try:
            source = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ContentError(f"Failed to read {path}: {e}")

        block, body = self.metaBlock_split(source)
        meta = self.meta_map(self.metaBlock_parse(block, path))

        page_id = path.relative_to(self.content_dir).with_suffix('').as_posix()
        LOG(f"Read {page_id}: {meta}", level=3)
        return Page(
            id=page_id,
            url=appsettings.url_make(page_id),
            meta=meta,
            content=body,
            path=path,
        )

    def metaBlock_split(self, source: str) -> Tuple[str, str]:
        """
        Separate the meta block from the page body.

        Returns:
            (meta block text, body); the block is "" if the page has none

        Example:
            "---\\nTags: a\\n---\\nBody" -> ("Tags: a", "Body")
        """
        delimiter = re.escape(appsettings.meta_delimiter)
        patterns = (
            rf'\A(?:\ufeff)?{delimiter}[ \t]*\r?\n(.*?)(?:\r?\n)?^{delimiter}[ \t]*(?:\r?\n|\Z)',
            r'\A(?:\ufeff)?/\*[ \t]*\r?\n(.*?)(?:\r?\n)?^\*/[ \t]*(?:\r?\n|\Z)',
        )
        for pattern in patterns:
            match = re.match(pattern, source, re.DOTALL | re.MULTILINE)
            if match:
                return match.group(1), source[match.end():]
        return "", source

    def metaBlock_parse(self, block: str, path: Path) -> Dict[str, Any]:
        """Parse meta block YAML into a dict of header name -> value"""
        if not block.strip():
            return {}
        try:
            meta: Any = yaml.safe_load(block)
        except yaml.YAMLError as e:
            raise ContentError(f"Failed to parse meta block of {path}: {e}")
        if meta is None:
            return {}
        if not isinstance(meta, dict):
            raise ContentError(f"Meta block of {path} is not a mapping")
        return meta

    def meta_map(self, raw_meta: Dict[str, Any]) -> Dict[str, Any]:
        """
        Map header names to meta keys and flatten values to raw strings.

        YAML lists are joined with the tag separator so the tag parser
        always receives the string form a meta header would have had.
        """
        meta: Dict[str, Any] = {}
        for name, value in raw_meta.items():
            header = str(name).lower()
            key = self.header_keys.get(header, header)
            meta[key] = self.value_flatten(value)
        return meta

    @staticmethod
    def value_flatten(value: Any) -> Any:
        """Convert a YAML value to the string form of a meta header"""
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, list):
            separator = appsettings.tag_separator
            return separator.join("" if item is None else str(item) for item in value)
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
