from pathlib import Path

import click

from regedit.cli.ensure import Ensure
from regedit.cli.output import user_output
from regedit.cli.registry_file import canonical_text
from regedit.registry.codec import load_registry, save_registry


@click.command("fmt")
@click.argument(
    "registry_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--check", is_flag=True, help="Exit 1 if the file is not canonical; don't write.")
def fmt_cmd(registry_file: Path, check: bool) -> None:
    """Rewrite REGISTRY_FILE in canonical layout."""
    with Ensure.reported_errors():
        reg = load_registry(registry_file)
        canonical = canonical_text(registry_file, reg)
        current = registry_file.read_text(encoding="utf-8")
        if current == canonical:
            user_output(f"{registry_file} is already canonical")
            return

        if check:
            Ensure.fail(f"{registry_file} is not canonical")

        save_registry(registry_file, reg)

    user_output(click.style("✓", fg="green") + f" Rewrote {registry_file}")
