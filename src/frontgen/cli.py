"""CLI entry point for frontgen."""

import asyncio
import logging
import sys
from pathlib import Path

import click
import uvicorn

from . import share as share_codec
from .app import FrontendGenerator
from .client import CompletionClient
from .config import DEFAULT_REFERER, Config
from .core import FRAMEWORKS, HTML
from .errors import FrontgenError
from .session_store import SessionStore
from .storage import JsonFileStore, MemoryStore


@click.group()
def main():
    """Generate front-end code from prompts and iterate on it in a live preview."""
    pass


@main.command()
@click.option("--port", default=8080, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Logging verbosity.",
)
@click.option("--ephemeral", is_flag=True, help="Keep chats in memory only.")
def serve(port: int, host: str, log_level: str, ephemeral: bool):
    """Start the web interface."""
    from .server import create_app

    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        app = create_app(storage=MemoryStore() if ephemeral else None)
    except FrontgenError as e:
        raise click.ClickException(e.message)
    click.echo(f"Starting frontgen on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=log_level, reload=False)


@main.command()
@click.argument("prompt")
@click.option("--framework", default=HTML, type=click.Choice(FRAMEWORKS), help="Output kind.")
@click.option("--new", "new_chat", is_flag=True, help="Start a new chat instead of continuing the active one.")
def generate(prompt: str, framework: str, new_chat: bool):
    """Run one generation round and print the resulting code."""
    try:
        config = Config.from_env()
    except FrontgenError as e:
        raise click.ClickException(e.message)

    gen = FrontendGenerator(SessionStore(JsonFileStore(config.data_path)), CompletionClient(config))
    gen.boot()
    if new_chat:
        gen.new_chat()

    outcome = asyncio.run(gen.generate(prompt, framework))
    if not outcome.ok:
        click.echo(f"Error: {gen.ui.error or outcome.error}", err=True)
        sys.exit(1)
    click.echo(outcome.code)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--base-url", default=DEFAULT_REFERER, help="Page URL the share link points at.")
def share(file: Path, base_url: str):
    """Print a share link for the code in FILE."""
    click.echo(share_codec.share_url(base_url, file.read_text(encoding="utf-8")))


@main.command()
@click.argument("token_or_url")
def unshare(token_or_url: str):
    """Decode a share token (or share link) and print the code."""
    token = share_codec.parse_fragment(token_or_url) or token_or_url
    code = share_codec.decode(token)
    if code is None:
        click.echo("Error: not a valid share token", err=True)
        sys.exit(1)
    click.echo(code)
