"""Serve command: run the HTTP API with uvicorn."""

import typer
import uvicorn
from loguru import logger
from rich.console import Console
from rich.panel import Panel

from ...config.settings import load_settings
from ...core.exceptions import ConfigError
from ...server.app import create_app

console = Console()


def serve_command(
    host: str | None = typer.Option(
        None, "--host", help="Bind address (default: HOST env or 0.0.0.0)"
    ),
    port: int | None = typer.Option(
        None, "--port", "-p", help="Bind port (default: PORT env or 3000)", min=1
    ),
    reload: bool = typer.Option(
        False, "--reload", help="Reload on code changes (development only)"
    ),
) -> None:
    """🌐 Start the analysis HTTP API."""
    try:
        settings = load_settings()
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1) from e

    bind_host = host or settings.host
    bind_port = port or settings.port

    key_status = (
        "[green]configured[/green]"
        if settings.api_key_configured
        else "[yellow]not set (demo mode)[/yellow]"
    )
    console.print(
        Panel.fit(
            f"[bold]Java Code Analyzer[/bold]\n"
            f"API key: {key_status}\n"
            f"Health:  http://localhost:{bind_port}/api/health\n"
            f"Analyze: http://localhost:{bind_port}/api/analyze",
            border_style="blue",
        )
    )
    logger.info(f"Starting server on {bind_host}:{bind_port}")

    if reload:
        uvicorn.run(
            "java_code_analyzer.server.app:create_app",
            factory=True,
            host=bind_host,
            port=bind_port,
            reload=True,
            log_level=settings.log_level.lower(),
        )
        return

    uvicorn.run(
        create_app(settings),
        host=bind_host,
        port=bind_port,
        log_level=settings.log_level.lower(),
    )
