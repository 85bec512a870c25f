from __future__ import annotations

import logging
from typing import Optional

import typer
import uvicorn

from autoadmin import __version__
from autoadmin.config import get_settings

app = typer.Typer(add_completion=False, help="autoadmin CLI")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def start(
    host: Optional[str] = typer.Option(None, help="Bind host"),
    port: Optional[int] = typer.Option(None, help="Bind port"),
    reload: bool = typer.Option(False, help="Auto-reload on changes (dev)"),
) -> None:
    """Serve the demo admin panel."""
    settings = get_settings()
    _configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "autoadmin.api.app:create_app",
        factory=True,
        host=host or settings.HOST,
        port=port or settings.PORT,
        reload=reload,
    )


@app.command()
def version() -> None:
    typer.echo(__version__)


@app.command()
def routes(
    database_url: str = typer.Option("sqlite://", help="Database used to build the demo app"),
) -> None:
    """List the routes registered by the demo admin panel."""
    from autoadmin.api.app import create_app

    fastapi_app = create_app(database_url=database_url)
    for route in fastapi_app.routes:
        methods = ",".join(sorted(getattr(route, "methods", None) or []))
        typer.echo(f"{methods:<12} {route.path}")


if __name__ == "__main__":
    app()
