"""Detect command for appnav CLI."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from appnav.adapters.registry import get_route_provider
from appnav.analyzer.detector import detect_project_info, port_from_script, read_package_json

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
def detect(
    project_root: Path = typer.Option(
        Path("."),
        "--project-root",
        "-C",
        help="Project directory to inspect.",
    ),
) -> None:
    """Detect the project framework and dev server configuration."""
    project_root = project_root.resolve()
    info = detect_project_info(project_root)
    provider = get_route_provider(info.framework, project_root)
    scripts = (read_package_json(project_root) or {}).get("scripts", {})

    table = Table(title="Detection Results", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Framework", info.framework.value)
    table.add_row("Route discovery", provider.kind.value)
    table.add_row("Dev command", scripts.get("dev", "[yellow]Not found[/yellow]"))
    table.add_row("Build command", scripts.get("build", "[yellow]Not found[/yellow]"))
    port = port_from_script(scripts.get("dev")) or provider.get_dev_port()
    table.add_row("Dev port", str(port))
    if info.name:
        table.add_row("Package", f"{info.name} {info.version or ''}".strip())
    console.print(table)

    console.print("\n[blue]To initialize with these settings:[/blue]")
    console.print(f"[dim]appnav init --framework {info.framework.value}[/dim]")
