"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use DOCZ_ prefix (e.g., DOCZ_ENABLE_KATEX=true).

Settings can also be loaded from a .env file in the project root. The
settings object is frozen: it is built once by the caller and passed
explicitly into the pipeline, never read from module globals.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use DOCZ_ prefix.

    Examples:
        DOCZ_ENABLE_KATEX=true
        DOCZ_ASSET_ROOT=/static/vendor
        DOCZ_FENCED_DIRECTIVES='["@code", "@math"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    # Tokenizer configuration
    fenced_directives: List[str] = Field(
        default_factory=lambda: ["@code", "@math", "@style", "@css"],
        description="Directives whose body is captured verbatim up to @end",
    )

    stuck_limit: int = Field(
        default=1000,
        ge=1,
        description="Consecutive no-progress scanner iterations before TokenizerStuck",
    )

    # Rendering configuration
    highlight_code: bool = Field(
        default=False,
        description="Syntax highlight @code blocks that carry a language attribute",
    )

    class_css_heuristic: bool = Field(
        default=False,
        description="Redirect inline-span class values that look like CSS into style",
    )

    # Vendored asset configuration
    enable_katex: bool = Field(
        default=False,
        description="Link the vendored KaTeX build into <head>",
    )

    enable_tailwind: bool = Field(
        default=False,
        description="Link the vendored Tailwind theme into <head>",
    )

    asset_root: str = Field(
        default="/third_party",
        description="URL prefix under which vendored assets are served",
    )

    vendor_lock_path: str = Field(
        default="third_party/VENDOR.lock",
        description="Path of the vendored asset lock file",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output during compilation",
    )
