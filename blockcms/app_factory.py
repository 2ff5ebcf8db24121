"""Building blocks for the Litestar application: sessions, templates, handlers."""

from __future__ import annotations

import hashlib
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from litestar.contrib.jinja import JinjaTemplateEngine
from litestar.exceptions import HTTPException
from litestar.middleware.session.client_side import CookieBackendConfig
from litestar.template import TemplateConfig

from blockcms.lib.exceptions import http_exception_handler, internal_server_error_handler
from blockcms.lib.markdown import render_markdown

EXCEPTION_HANDLERS: dict[type[Exception], Any] = {
    HTTPException: http_exception_handler,
    Exception: internal_server_error_handler,
}


def create_session_config(
    secret_key: str,
    max_age: int = 86400,
    secure: bool = False,
    cookie_domain: str | None = None,
) -> CookieBackendConfig:
    """Encrypted cookie sessions; the AES key is derived from ``secret_key``."""
    return CookieBackendConfig(
        secret=hashlib.sha256(secret_key.encode()).digest(),
        key="session",
        max_age=max_age,
        httponly=True,
        secure=secure,
        samesite="lax",
        domain=cookie_domain,
    )


def get_template_directories() -> list[Path]:
    """``./templates`` overrides the packaged templates of the same name."""
    return [
        Path(os.getcwd()) / "templates",
        Path(__file__).parent / "templates",
    ]


def build_template_engine_callback(extra_globals: dict[str, Any]) -> Callable:
    def configure_engine(engine: JinjaTemplateEngine):
        engine.engine.globals.update({"now": datetime.now, **extra_globals})
        engine.engine.filters["markdown"] = render_markdown

    return configure_engine


def create_template_config(directories: list[Path], engine_callback: Callable) -> TemplateConfig:
    return TemplateConfig(
        directory=directories,
        engine=JinjaTemplateEngine,
        engine_callback=engine_callback,
    )
