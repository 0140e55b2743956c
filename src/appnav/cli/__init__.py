"""appnav CLI for generating app maps."""

from __future__ import annotations

import logfire
import typer
from rich.console import Console

from appnav import __version__
from appnav.cli.commands import detect, init, install, run
from appnav.core.config import get_settings

app = typer.Typer(
    name="appnav",
    help="Visual route mapping of running web applications for AI coding assistants",
    no_args_is_help=True,
)
console = Console()

# Add command groups
app.add_typer(init.app, name="init", help="Write an appnav config for this project")
app.add_typer(run.app, name="run", help="Generate the app map")
app.add_typer(install.app, name="install", help="Install Playwright browsers")
app.add_typer(detect.app, name="detect", help="Detect project framework and configuration")


@app.callback()
def configure() -> None:
    """Configure logging once per process."""
    settings = get_settings()
    logfire.configure(
        service_name="appnav",
        environment=settings.environment,
        send_to_logfire="if-token-present",
        console=logfire.ConsoleOptions(min_log_level=settings.log_level),
    )


@app.command()
def version() -> None:
    """Show the CLI version."""
    console.print(f"appnav version {__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


__all__ = ["app", "main"]
