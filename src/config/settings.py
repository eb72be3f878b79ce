"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use PAGETAGS_ prefix (e.g., PAGETAGS_TAG_SEPARATOR=";").

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use PAGETAGS_ prefix.

    Examples:
        PAGETAGS_TAG_SEPARATOR=;
        PAGETAGS_ALL_TAGS_VARIABLE=tag_cloud
        PAGETAGS_CONTENT_EXTENSION=.markdown
    """

    model_config = SettingsConfigDict(
        env_prefix="PAGETAGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Parser configuration
    tag_separator: str = Field(
        default=",",
        min_length=1,
        description="Separator between tags in Tags/Filter meta headers",
    )

    # Template configuration
    all_tags_variable: str = Field(
        default="all_tags",
        description="Template variable name receiving the accumulated tags",
    )

    # Content configuration
    content_extension: str = Field(
        default=".md",
        description="File extension of page sources in the content directory",
    )

    meta_delimiter: str = Field(
        default="---",
        description="Line delimiting the YAML meta block at the top of a page",
    )

    # Output configuration
    default_output_file: str = Field(
        default="pages.json",
        description="Output file name when rendering a single page",
    )

    def outputName_make(self, page_id: str) -> str:
        """
        Generate the output file name for a rendered page.

        Args:
            page_id: Page id (relative path without extension)

        Returns:
            Flat JSON file name (e.g., "blog__first-post.json")

        Example:
            >>> settings = AppSettings()
            >>> settings.outputName_make('blog/first-post')
            'blog__first-post.json'
        """
        return page_id.replace("/", "__") + ".json"

    def url_make(self, page_id: str) -> str:
        """
        Derive the site URL of a page from its id.

        Trailing "index" segments collapse to the directory URL.

        Example:
            >>> settings = AppSettings()
            >>> settings.url_make('blog/index')
            '/blog/'
            >>> settings.url_make('about')
            '/about'
        """
        if page_id == "index":
            return "/"
        if page_id.endswith("/index"):
            return "/" + page_id[: -len("index")]
        return "/" + page_id


# Singleton instance - import this in your code
appsettings = AppSettings()
