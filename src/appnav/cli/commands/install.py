"""Install command for appnav CLI."""

from __future__ import annotations

import subprocess
import sys

import typer
from rich.console import Console

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
def install(
    browser: str = typer.Option("chromium", "--browser", "-b", help="Browser to install."),
) -> None:
    """Install the Playwright browser used for captures."""
    console.print(f"[blue]Installing Playwright {browser}...[/blue]")

    try:
        with console.status("Installing browsers..."):
            subprocess.run(
                [sys.executable, "-m", "playwright", "install", browser],
                check=True,
            )
    except subprocess.CalledProcessError as e:
        console.print(f"[red]Error:[/red] Playwright install exited with {e.returncode}")
        raise typer.Exit(1) from None

    console.print("[green]✓[/green] Playwright browsers installed")
