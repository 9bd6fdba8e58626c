import click

from regedit.cli.ensure import Ensure
from regedit.cli.output import machine_output, user_output
from regedit.core.context import RegEditContext
from regedit.registry.sync import get_registry


@click.command("sync")
@click.argument("location")
@click.option(
    "--no-reset",
    is_flag=True,
    help="Fetch without resetting to the remote branch, keeping local commits.",
)
@click.pass_obj
def sync_cmd(ctx: RegEditContext, location: str, no_reset: bool) -> None:
    """Clone or update the registry at LOCATION and print its local path.

    The first sync of a LOCATION clones it and files it under the registry's
    UUID. Later syncs point origin at LOCATION, check out the remote's default
    branch, fetch it and (unless --no-reset) hard-reset to it.
    """
    with Ensure.reported_errors():
        tree = get_registry(
            location,
            git=ctx.git,
            cache=ctx.cache,
            gitconfig=ctx.config.gitconfig,
            force_reset=ctx.config.force_reset and not no_reset,
        )
        ctx.cache.save()

    user_output(click.style("✓", fg="green") + f" {location} is registry {tree.uuid}")
    machine_output(str(tree.path))
