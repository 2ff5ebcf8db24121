"""Validation entry points for blocks and page documents.

Validation never raises for bad input. It returns a :class:`ValidationResult`
holding either the typed value or a list of :class:`ValidationIssue` entries,
so callers at the untrusted-input boundary can report every problem at once.
An unrecognised block type is reported as :class:`UnknownBlock`, which is a
separate outcome from a failed validation of a known type.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import pydantic

from blockcms.blocks.registry import BLOCK_DEFINITIONS, get_block_definition
from blockcms.blocks.schema import PageBody, PageInput

T = TypeVar("T")


@dataclass(frozen=True)
class ValidationIssue:
    """One problem, located by a dotted path such as ``body.blocks.2.data.title``."""

    path: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


@dataclass
class ValidationResult(Generic[T]):
    value: T | None = None
    errors: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and self.value is not None

    def unwrap(self) -> T:
        """Return the value, or raise ``DocumentValidationError`` with the issues."""
        if not self.ok:
            from blockcms.lib.exceptions import DocumentValidationError

            raise DocumentValidationError(self.errors)
        return self.value


@dataclass(frozen=True)
class UnknownBlock:
    """A block whose ``type`` tag has no registered definition."""

    block_type: str
    block_id: str | None = None


BlockValidation = ValidationResult[Any] | UnknownBlock


def _format_loc(loc: tuple[Any, ...]) -> list[str]:
    """Turn a pydantic location into path segments.

    Discriminated unions add the tag as an extra segment after the list index
    (``blocks.0.hero.data``); it is dropped so paths read ``blocks.0.data``.
    """
    parts: list[str] = []
    for i, segment in enumerate(loc):
        if (
            isinstance(segment, str)
            and segment in BLOCK_DEFINITIONS
            and i >= 2
            and isinstance(loc[i - 1], int)
            and loc[i - 2] == "blocks"
        ):
            continue
        parts.append(str(segment))
    return parts


def _message_for(error: Mapping[str, Any], parts: list[str]) -> str:
    error_type = error.get("type")
    ctx = error.get("ctx") or {}
    if error_type == "missing":
        name = parts[-1] if parts else "value"
        return f"{name} is required"
    if error_type == "union_tag_invalid":
        return f"Unknown block type {ctx.get('tag')!r}"
    if error_type == "union_tag_not_found":
        return "Block type is required"
    if error_type == "string_pattern_mismatch" and parts and parts[-1] == "slug":
        return "Slug must be lowercase alphanumeric with hyphens"
    message = str(error.get("msg", "Invalid value"))
    # Custom validators raise ValueError; pydantic prefixes their message
    return message.removeprefix("Value error, ")


def issues_from_pydantic(
    exc: pydantic.ValidationError,
    prefix: tuple[str, ...] = (),
) -> list[ValidationIssue]:
    issues = []
    for error in exc.errors():
        parts = [*prefix, *_format_loc(tuple(error.get("loc", ())))]
        issues.append(ValidationIssue(path=".".join(parts), message=_message_for(error, parts)))
    return issues


def validate_block(block_type: str, raw_data: Any) -> BlockValidation:
    """Validate a block's ``data`` payload against the schema for its type.

    Missing optional fields receive their defaults. Paths in the returned
    issues are relative to the data payload (``title``, ``images.0.url``).
    """
    definition = get_block_definition(block_type)
    if definition is None:
        return UnknownBlock(block_type=block_type)

    try:
        value = definition.data_model.model_validate(raw_data if raw_data is not None else {})
    except pydantic.ValidationError as exc:
        return ValidationResult(errors=issues_from_pydantic(exc))
    return ValidationResult(value=value)


def validate_block_entry(raw_block: Any) -> BlockValidation:
    """Validate a whole stored block (``id``, ``type``, ``settings``, ``data``).

    Returns ``UnknownBlock`` when the type tag is not registered; the id is
    still checked first so a malformed envelope is always reported.
    """
    if not isinstance(raw_block, Mapping):
        return ValidationResult(errors=[ValidationIssue(path="", message="Block must be an object")])

    issues: list[ValidationIssue] = []
    block_id = raw_block.get("id")
    if not isinstance(block_id, str) or not block_id:
        issues.append(ValidationIssue(path="id", message="Block ID is required"))

    block_type = raw_block.get("type")
    if not isinstance(block_type, str) or not block_type:
        issues.append(ValidationIssue(path="type", message="Block type is required"))
        return ValidationResult(errors=issues)

    result = validate_block(block_type, raw_block.get("data"))
    if isinstance(result, UnknownBlock):
        if issues:
            return ValidationResult(errors=issues)
        return UnknownBlock(block_type=block_type, block_id=block_id)

    settings = raw_block.get("settings")
    if settings is not None and not isinstance(settings, Mapping):
        issues.append(ValidationIssue(path="settings", message="Settings must be an object"))

    issues.extend(
        ValidationIssue(path=f"data.{issue.path}" if issue.path else "data", message=issue.message)
        for issue in result.errors
    )
    if issues:
        return ValidationResult(errors=issues)

    block = {
        "id": block_id,
        "type": block_type,
        "settings": dict(settings or {}),
        "data": result.value,
    }
    return ValidationResult(value=block)


def validate_page_body(raw: Any) -> ValidationResult[PageBody]:
    try:
        return ValidationResult(value=PageBody.model_validate(raw))
    except pydantic.ValidationError as exc:
        return ValidationResult(errors=issues_from_pydantic(exc))


def validate_page(raw: Any) -> ValidationResult[PageInput]:
    """Validate a full page submission.

    The document is rejected as a whole if any part fails, and every failing
    block is reported under ``body.blocks.<index>``.
    """
    try:
        return ValidationResult(value=PageInput.model_validate(raw))
    except pydantic.ValidationError as exc:
        return ValidationResult(errors=issues_from_pydantic(exc))


def dump_page_input(page: PageInput) -> dict[str, Any]:
    """Serialise a validated page to the JSON shape accepted by ``validate_page``."""
    return page.to_document()
