"""Command-line entry point for Java Code Analyzer."""

import sys
from typing import Any

import typer
from loguru import logger

from .. import __version__
from .commands.analyze import analyze_command
from .commands.serve import serve_command

app = typer.Typer(
    name="java-code-analyzer",
    help="☕ AI-assisted defect reports for Java code",
    no_args_is_help=True,
)


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def configure_logging(level: str, sink: Any = None) -> None:
    """Replace loguru's default sink with a single sink at ``level``.

    Records carry the request id bound by the HTTP middleware; records
    logged outside a request show "-".
    """
    logger.configure(extra={"request_id": "-"})
    logger.remove()
    logger.add(
        sys.stderr if sink is None else sink,
        level=level.upper(),
        format=LOG_FORMAT,
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"java-code-analyzer {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    log_level: str = typer.Option(
        "INFO", "--log-level", envvar="LOG_LEVEL", help="Log level"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    configure_logging(log_level)


app.command("serve")(serve_command)
app.command("analyze")(analyze_command)


if __name__ == "__main__":
    app()
