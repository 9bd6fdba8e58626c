from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from regedit.cli.ensure import Ensure
from regedit.registry.codec import load_registry


@click.command("show")
@click.argument(
    "registry_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
def show_cmd(registry_file: Path) -> None:
    """Summarize REGISTRY_FILE and list its packages."""
    with Ensure.reported_errors():
        reg = load_registry(registry_file)

    console = Console(width=200)
    console.print(f"[bold]{escape(reg.name)}[/bold] {reg.uuid}", highlight=False)
    if reg.repo is not None:
        console.print(f"repo: {reg.repo}", markup=False, highlight=False)
    if reg.description is not None:
        console.print(reg.description, markup=False, highlight=False)
    console.print(f"{len(reg.packages)} packages", highlight=False)

    if not reg.packages:
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("name", style="cyan", no_wrap=True)
    table.add_column("uuid", no_wrap=True)
    table.add_column("path", no_wrap=True)
    for pkg_uuid, entry in sorted(reg.packages.items(), key=lambda item: item[1]["name"]):
        table.add_row(escape(entry["name"]), pkg_uuid, escape(entry["path"]))
    console.print(table)
