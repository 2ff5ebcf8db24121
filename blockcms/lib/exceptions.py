"""Error types and Litestar exception handlers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from litestar import Request, Response
from litestar.exceptions import ClientException, HTTPException
from litestar.status_codes import HTTP_409_CONFLICT, HTTP_500_INTERNAL_SERVER_ERROR

from blockcms.lib import observability

if TYPE_CHECKING:
    from blockcms.blocks.validation import ValidationIssue

logger = logging.getLogger(__name__)


class DocumentValidationError(ClientException):
    """Untrusted input failed validation.

    Carries the structured issue list so API clients can highlight the
    offending fields.
    """

    def __init__(self, issues: Sequence[ValidationIssue], detail: str = "Validation failed") -> None:
        self.issues = list(issues)
        super().__init__(
            detail=detail,
            extra={"errors": [issue.as_dict() for issue in self.issues]},
        )


class ConflictError(HTTPException):
    """A uniqueness constraint (slug, name, email) would be violated."""

    status_code = HTTP_409_CONFLICT


class BlockRenderError(Exception):
    """A single block's renderer failed."""

    def __init__(self, block_id: str, block_type: str, cause: BaseException) -> None:
        self.block_id = block_id
        self.block_type = block_type
        self.cause = cause
        super().__init__(f"Failed to render block {block_id!r} ({block_type}): {cause}")


def _accepts_html(request: Request) -> bool:
    """Browsers send text/html in Accept; API clients do not."""
    accept = request.headers.get("accept", "")
    return "text/html" in accept


def _render_error_page(request: Request, status_code: int, message: str) -> Response:
    template = request.app.template_engine.get_template("error.html")
    content = template.render(
        status_code=status_code,
        message=message,
        site_name=request.app.state.settings.site.name,
    )
    return Response(content=content, status_code=status_code, media_type="text/html")


def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Handle HTTP exceptions with HTML for browsers, JSON for APIs."""
    status_code = exc.status_code
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    if _accepts_html(request):
        return _render_error_page(request, status_code, detail)

    content: dict = {"status_code": status_code, "detail": detail}
    if isinstance(exc.extra, dict) and "errors" in exc.extra:
        content["errors"] = exc.extra["errors"]
    return Response(content=content, status_code=status_code, media_type="application/json")


def internal_server_error_handler(request: Request, exc: Exception) -> Response:
    """Log unexpected exceptions and answer without leaking details."""
    status_code = HTTP_500_INTERNAL_SERVER_ERROR

    if not observability.exception(
        "Unhandled exception on {method} {path}",
        method=request.method,
        path=request.url.path,
    ):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    if _accepts_html(request):
        return _render_error_page(request, status_code, "An unexpected error occurred.")

    return Response(
        content={"status_code": status_code, "detail": "Internal Server Error"},
        status_code=status_code,
        media_type="application/json",
    )
