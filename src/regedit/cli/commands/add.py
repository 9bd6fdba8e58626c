from pathlib import Path

import click

from regedit.cli.ensure import Ensure
from regedit.cli.output import user_output
from regedit.cli.registry_file import canonical_text
from regedit.registry.codec import load_registry, save_registry
from regedit.registry.data import push
from regedit.registry.project import Project

_EXISTING_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.command("add")
@click.argument("registry_file", type=_EXISTING_FILE)
@click.argument("project_file", type=_EXISTING_FILE)
def add_cmd(registry_file: Path, project_file: Path) -> None:
    """Add the package described by PROJECT_FILE to REGISTRY_FILE.

    An existing entry with the same UUID is replaced. The registry file is
    written back in canonical layout.
    """
    with Ensure.reported_errors():
        reg = load_registry(registry_file)
        project = Project.from_file(project_file)
        previous = reg.packages.get(str(project.uuid))
        push(reg, project)

        canonical_text(registry_file, reg)
        save_registry(registry_file, reg)

    entry = reg.packages[str(project.uuid)]
    action = "Updated" if previous is not None else "Added"
    user_output(
        click.style("✓", fg="green")
        + f" {action} {project.name} ({project.uuid}) at {entry['path']}"
    )
