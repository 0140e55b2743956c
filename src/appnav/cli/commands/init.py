"""Init command for appnav CLI."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from appnav.analyzer.detector import detect_dev_port, detect_framework
from appnav.cli.config import default_config_path
from appnav.core.config import NavigatorConfig, find_config_file, save_navigator_config
from appnav.crawler.models import FrameworkType

app = typer.Typer()
console = Console()

PACKAGE_SCRIPTS = {
    "appnav:map": "appnav run",
    "appnav:install": "appnav install",
}


def update_package_scripts(project_root: Path) -> bool:
    """Add appnav scripts to package.json. Returns False if it could not be updated."""
    package_path = project_root / "package.json"
    try:
        package = json.loads(package_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return False

    scripts = package.setdefault("scripts", {})
    for name, command in PACKAGE_SCRIPTS.items():
        scripts.setdefault(name, command)

    package_path.write_text(json.dumps(package, indent=2) + "\n", encoding="utf-8")
    return True


@app.callback(invoke_without_command=True)
def init(
    framework: FrameworkType | None = typer.Option(
        None,
        "--framework",
        "-f",
        help="Framework type. Auto-detected from package.json if not provided.",
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        min=1,
        max=65535,
        help="Dev server port. Auto-detected if not provided.",
    ),
    output: str = typer.Option(
        "cursor-app-map",
        "--output",
        "-o",
        help="Output directory for the app map.",
    ),
    headless: bool = typer.Option(True, "--headless/--no-headless", help="Run headless."),
    parallel: bool = typer.Option(
        False, "--parallel/--sequential", help="Capture routes in parallel."
    ),
    exclude: list[str] | None = typer.Option(
        None,
        "--exclude",
        "-x",
        help="Regex pattern of routes to exclude. Can be repeated.",
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file."),
    project_root: Path = typer.Option(Path("."), "--project-root", "-C"),
) -> None:
    """Write an appnav.config.yml for this project.

    Examples:

        appnav init

        appnav init --framework nextjs --port 3001 --exclude "^/admin"
    """
    project_root = project_root.resolve()

    existing = find_config_file(project_root)
    if existing and not force:
        console.print(
            f"[yellow]Configuration already exists:[/yellow] {existing}\n"
            "Use [blue]--force[/blue] to overwrite it."
        )
        raise typer.Exit(1)

    if framework is None:
        framework = detect_framework(project_root)
        console.print(f"[dim]Detected framework:[/dim] {framework.value}")
    if port is None:
        port = detect_dev_port(project_root, framework)

    try:
        config = NavigatorConfig(
            framework=framework.value,
            base_url=f"http://localhost:{port}",
            output_dir=output,
            headless=headless,
            parallel=parallel,
            exclude_routes=exclude or [],
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise typer.Exit(1) from None

    config_path = existing or default_config_path(project_root)
    save_navigator_config(config, config_path)

    if update_package_scripts(project_root):
        console.print("[green]✓[/green] package.json scripts updated")
    else:
        console.print("[yellow]Could not update package.json scripts[/yellow]")

    console.print(
        Panel(
            f"Framework: [blue]{framework.value}[/blue]\n"
            f"Base URL: [blue]{config.base_url}[/blue]\n"
            f"Output: [blue]{config.output_dir}[/blue]\n\n"
            "Next steps:\n"
            "1. Install browsers: [blue]appnav install[/blue]\n"
            "2. Start your dev server\n"
            "3. Generate the app map: [blue]appnav run[/blue]",
            title=f"Configuration saved to {config_path.name}",
            border_style="green",
        )
    )
