"""Shared pieces of the block and page document models."""

from __future__ import annotations

from typing import Annotated, Any, Literal
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

LINK_SCHEMES = ("", "http", "https", "mailto", "tel")


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid URL")
    return value


def _check_url_or_empty(value: str) -> str:
    if value == "":
        return value
    return _check_url(value)


def _check_link(value: str) -> str:
    if urlparse(value.strip()).scheme not in LINK_SCHEMES:
        raise ValueError("Link must be an http(s), mailto or tel URL, or a relative path")
    return value


# Absolute URL kept exactly as entered (no normalisation, so documents round-trip)
Url = Annotated[str, AfterValidator(_check_url)]
UrlOrEmpty = Annotated[str, AfterValidator(_check_url_or_empty)]
# Link target for calls to action; relative paths have no scheme
Link = Annotated[str, AfterValidator(_check_link)]


class DocumentModel(BaseModel):
    """Base for everything stored inside a page body.

    Field names are snake_case in Python and camelCase in the stored JSON.
    Unknown keys are dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> dict[str, Any]:
        """Serialise to the JSON-compatible shape that is persisted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BlockBase(DocumentModel):
    """Fields every block shares, whatever its type.

    ``settings`` holds presentation overrides (className, backgroundColor,
    textColor, padding, margin) and is not validated.
    """

    id: str = Field(min_length=1)
    settings: dict[str, Any] = Field(default_factory=dict)


class SEO(DocumentModel):
    """Search and social metadata for a page."""

    title: str = Field(min_length=1, max_length=60)
    description: str = Field(min_length=1, max_length=160)
    keywords: list[str] | None = None
    og_image: UrlOrEmpty | None = None
    og_type: Literal["website", "article", "blog"] = "website"
