"""ASGI application factory.

    hypercorn blockcms.asgi:app
"""

from __future__ import annotations

import logging
from typing import Any

from advanced_alchemy.config import EngineConfig
from advanced_alchemy.extensions.litestar import (
    AsyncSessionConfig,
    SQLAlchemyAsyncConfig,
    SQLAlchemyPlugin,
)
from litestar import Litestar
from litestar.datastructures import State

from blockcms.admin import ADMIN_CONTROLLERS
from blockcms.app_factory import (
    EXCEPTION_HANDLERS,
    build_template_engine_callback,
    create_session_config,
    create_template_config,
    get_template_directories,
)
from blockcms.auth.services import sync_roles_to_database
from blockcms.config import Settings, get_settings
from blockcms.controllers import AuthController, WebController
from blockcms.db.base import Base
from blockcms.db import models as _models  # noqa: F401  registers tables on Base.metadata
from blockcms.lib import observability

logger = logging.getLogger(__name__)


def create_db_config(settings: Settings) -> SQLAlchemyAsyncConfig:
    if "sqlite" in settings.db.url:
        engine_config = EngineConfig(echo=settings.db.echo)
    else:
        engine_config = EngineConfig(
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.pool_overflow,
            pool_timeout=settings.db.pool_timeout,
            pool_pre_ping=True,
            echo=settings.db.echo,
        )

    return SQLAlchemyAsyncConfig(
        connection_string=settings.db.url,
        metadata=Base.metadata,
        create_all=False,
        session_config=AsyncSessionConfig(expire_on_commit=False),
        engine_config=engine_config,
    )


def create_app(settings: Settings | None = None) -> Any:
    """Build the Litestar app, wrapped for logfire when it is enabled."""
    settings = settings or get_settings()
    observability.configure(settings)

    db_config = create_db_config(settings)
    session_config = create_session_config(
        secret_key=settings.secret_key,
        max_age=settings.session.max_age,
        secure=not settings.debug,
        cookie_domain=settings.session.cookie_domain,
    )

    engine_callback = build_template_engine_callback(
        extra_globals={"site_name": settings.site.name},
    )
    template_config = create_template_config(get_template_directories(), engine_callback)

    async def on_startup(_app: Litestar) -> None:
        """Create missing tables and write the default roles."""
        engine = db_config.get_engine()
        if settings.db.create_all:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        try:
            async with db_config.get_session() as session:
                await sync_roles_to_database(session)
        except Exception:
            logger.warning("Could not sync default roles at startup", exc_info=True)

        observability.instrument_sqlalchemy(engine)

    app = Litestar(
        on_startup=[on_startup],
        route_handlers=[WebController, AuthController, *ADMIN_CONTROLLERS],
        plugins=[SQLAlchemyPlugin(config=db_config)],
        middleware=[session_config.middleware],
        template_config=template_config,
        exception_handlers=EXCEPTION_HANDLERS,
        state=State({"settings": settings}),
        debug=settings.debug,
    )
    return observability.instrument_app(app)


def __getattr__(name: str):
    # Built on first access so importing this module needs no SECRET_KEY
    if name == "app":
        application = create_app()
        globals()["app"] = application
        return application
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
