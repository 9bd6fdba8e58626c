import click

from regedit.cli.commands.add import add_cmd
from regedit.cli.commands.config import config_group
from regedit.cli.commands.fmt import fmt_cmd
from regedit.cli.commands.path import path_cmd
from regedit.cli.commands.show import show_cmd
from regedit.cli.commands.sync import sync_cmd
from regedit.cli.ensure import Ensure
from regedit.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="regedit")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output and echo git commands.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Mirror package registries locally and edit their Registry.toml."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        with Ensure.reported_errors():
            ctx.obj = create_context(verbose=verbose)


cli.add_command(add_cmd)
cli.add_command(config_group)
cli.add_command(fmt_cmd)
cli.add_command(path_cmd)
cli.add_command(show_cmd)
cli.add_command(sync_cmd)


def main() -> None:
    """CLI entry point used by the `regedit` console script."""
    cli()
