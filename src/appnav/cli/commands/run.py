"""Run command for appnav CLI."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from appnav.analyzer.detector import detect_framework
from appnav.cli.config import load_project_config
from appnav.core.config import NavigatorConfig
from appnav.core.errors import AppNavError
from appnav.core.service import generate_app_map
from appnav.crawler.models import AppMap

app = typer.Typer()
console = Console()


def apply_overrides(
    config: NavigatorConfig,
    port: int | None = None,
    output: str | None = None,
    headless: bool | None = None,
    parallel: bool | None = None,
) -> NavigatorConfig:
    """Return a copy of config with command-line overrides applied."""
    updates: dict = {}
    if port is not None:
        updates["base_url"] = f"http://localhost:{port}"
    if output is not None:
        updates["output_dir"] = output
    if headless is not None:
        updates["headless"] = headless
    if parallel is not None:
        updates["parallel"] = parallel
    return config.model_copy(update=updates)


def format_summary(app_map: AppMap, output_dir: str) -> str:
    summary = app_map.summary
    lines = [
        f"Routes mapped: [blue]{summary.successful_captures}/{summary.total_routes}[/blue]",
        f"Interactive elements: [blue]{summary.total_elements}[/blue]",
        f"Average load time: [blue]{summary.average_load_time}ms[/blue]",
        f"Performance score: [blue]{summary.performance_score}/100[/blue]",
        f"Output directory: [blue]{output_dir}[/blue]",
    ]
    if summary.total_errors > 0:
        lines.append(f"[yellow]Performance issues: {summary.total_errors}[/yellow]")
    return "\n".join(lines)


@app.callback(invoke_without_command=True)
def run(
    config_path: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file. Defaults to appnav.config.yml in the project root.",
    ),
    port: int | None = typer.Option(
        None, "--port", "-p", min=1, max=65535, help="Override dev server port."
    ),
    output: str | None = typer.Option(None, "--output", "-o", help="Override output directory."),
    headless: bool | None = typer.Option(
        None, "--headless/--no-headless", help="Run with or without a visible browser."
    ),
    parallel: bool | None = typer.Option(
        None, "--parallel/--sequential", help="Capture routes in parallel."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show full error details."),
    project_root: Path = typer.Option(Path("."), "--project-root", "-C"),
) -> None:
    """Crawl the running app and generate the app map.

    Examples:

        appnav run

        appnav run --port 5173 --parallel

        appnav run --config ci.appnav.yml --output artifacts/app-map
    """
    project_root = project_root.resolve()

    try:
        config, source = load_project_config(project_root, config_path)
    except AppNavError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if source is None:
        console.print("[yellow]No configuration file found, using defaults[/yellow]")
    if not config.framework:
        config = config.model_copy(update={"framework": detect_framework(project_root).value})

    config = apply_overrides(config, port, output, headless, parallel)

    try:
        with console.status("Generating app map..."):
            app_map = asyncio.run(generate_app_map(config, project_root))
    except Exception as e:
        console.print("[red]Navigation failed[/red]")
        console.print(f"[red]Error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1) from None

    console.print(
        Panel(
            format_summary(app_map, config.output_dir),
            title="App map generated",
            border_style="green",
        )
    )
