"""Command line interface: ``blockcms serve``, ``secret``, ``validate``, ``sync-roles``."""

import asyncio
import base64
import json
import re
import secrets
import signal
import sys
from pathlib import Path

import click


@click.group()
@click.version_option(package_name="blockcms")
def cli():
    """blockcms - a block-based content management system."""
    pass


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--port", default=8080, type=int, help="Port to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option("--workers", default=1, type=int, help="Number of worker processes")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging level",
)
def serve(host, port, reload, workers, log_level):
    """Run the server with hypercorn."""
    from hypercorn.asyncio import serve as hypercorn_serve
    from hypercorn.config import Config

    config = Config()
    config.application_path = "blockcms.asgi:app"
    config.bind = [f"{host}:{port}"]
    config.workers = 1 if reload else workers
    config.loglevel = log_level.upper()
    config.include_server_header = False

    if reload:
        config.use_reloader = True
        from hypercorn.run import run
        run(config)
        return

    from blockcms.asgi import create_app

    app = create_app()
    shutdown_event = asyncio.Event()

    loop = asyncio.new_event_loop()
    loop.add_signal_handler(signal.SIGINT, shutdown_event.set)
    loop.add_signal_handler(signal.SIGTERM, shutdown_event.set)
    try:
        loop.run_until_complete(hypercorn_serve(app, config, shutdown_trigger=shutdown_event.wait))
    finally:
        loop.close()


def _write_env_key(env_path: Path, key: str) -> None:
    content = env_path.read_text() if env_path.exists() else ""
    pattern = re.compile(r"^SECRET_KEY=.*$", re.MULTILINE)
    line = f"SECRET_KEY={key}"
    if pattern.search(content):
        content = pattern.sub(line, content)
    else:
        if content and not content.endswith("\n"):
            content += "\n"
        content += line + "\n"
    env_path.write_text(content)


@cli.command()
@click.option("--write", type=click.Path(), default=None, help="Write SECRET_KEY to a .env file")
@click.option(
    "--format",
    "fmt",
    default="urlsafe",
    type=click.Choice(["urlsafe", "hex", "base64"]),
    help="Output format for the secret key",
)
@click.option("--length", default=32, type=int, help="Number of random bytes")
def secret(write, fmt, length):
    """Generate a secret key for session cookies."""
    if fmt == "urlsafe":
        key = secrets.token_urlsafe(length)
    elif fmt == "hex":
        key = secrets.token_hex(length)
    else:
        key = base64.b64encode(secrets.token_bytes(length)).decode("ascii")

    if write:
        _write_env_key(Path(write), key)
        click.echo(f"SECRET_KEY written to {write}")
    else:
        click.echo(key)


@cli.command()
@click.argument("file", type=click.File("r"))
@click.option("--body-only", is_flag=True, help="Validate a page body instead of a full page")
def validate(file, body_only):
    """Validate a page JSON document (use - for stdin)."""
    from blockcms.blocks.validation import dump_page_input, validate_page, validate_page_body

    try:
        document = json.load(file)
    except json.JSONDecodeError as exc:
        click.echo(f"Invalid JSON: {exc}", err=True)
        sys.exit(2)

    result = validate_page_body(document) if body_only else validate_page(document)
    if not result.ok:
        for issue in result.errors:
            click.echo(f"{issue.path or '<root>'}: {issue.message}", err=True)
        sys.exit(1)

    value = result.value.to_document() if body_only else dump_page_input(result.value)
    click.echo(json.dumps(value, indent=2))


@cli.command("sync-roles")
def sync_roles():
    """Create the default roles and permissions in the database."""
    from blockcms.asgi import create_db_config
    from blockcms.auth.services import sync_roles_to_database
    from blockcms.config import get_settings
    from blockcms.db.base import Base

    db_config = create_db_config(get_settings())

    async def run() -> None:
        engine = db_config.get_engine()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with db_config.get_session() as session:
            await sync_roles_to_database(session)
        await engine.dispose()

    asyncio.run(run())
    click.echo("Default roles and permissions are in place.")


if __name__ == "__main__":
    cli()
