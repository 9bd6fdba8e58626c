import click

from regedit.cli.ensure import Ensure
from regedit.cli.output import machine_output
from regedit.registry.paths import package_relpath


@click.command("path")
@click.argument("name")
def path_cmd(name: str) -> None:
    """Print where package NAME is stored inside a registry."""
    with Ensure.reported_errors():
        machine_output(package_relpath(name))
