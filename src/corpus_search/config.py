"""Centralized configuration for corpus-search using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from corpus_search.search.analyzers import (
    DEFAULT_MARKUP_EXTENSIONS,
    DEFAULT_PLAIN_TEXT_EXTENSIONS,
    ExtensionMap,
)


def _split_extensions(value: str) -> list[str]:
    return [ext.strip().lstrip(".").lower() for ext in value.split(",") if ext.strip().lstrip(".")]


class Settings(BaseSettings):
    """Typed configuration loaded from ``CORPUS_SEARCH_*`` environment variables.

    Command-line flags override these values for a single invocation.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORPUS_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    index_file: Path = Field(default=Path("index.json"), description="Index file read and written by the CLI")
    result_limit: int = Field(default=10, ge=1, description="Default number of search results to print")

    markup_extensions: str = Field(
        default=",".join(DEFAULT_MARKUP_EXTENSIONS),
        description="Comma-separated extensions tokenized as XML markup",
    )
    plain_text_extensions: str = Field(
        default=",".join(DEFAULT_PLAIN_TEXT_EXTENSIONS),
        description="Comma-separated extensions tokenized as plain text",
    )

    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=False, description="Emit structured JSON logs")

    @model_validator(mode="after")
    def _check_extensions(self) -> "Settings":
        overlap = set(self.get_markup_extensions()) & set(self.get_plain_text_extensions())
        if overlap:
            raise ValueError(
                f"Extensions configured as both markup and plain text: {', '.join(sorted(overlap))}"
            )
        return self

    def get_markup_extensions(self) -> list[str]:
        return _split_extensions(self.markup_extensions)

    def get_plain_text_extensions(self) -> list[str]:
        return _split_extensions(self.plain_text_extensions)

    def build_extension_map(self) -> ExtensionMap:
        return ExtensionMap.from_extensions(
            markup=self.get_markup_extensions(),
            plain_text=self.get_plain_text_extensions(),
        )
