from dataclasses import replace
from pathlib import Path

import click

from regedit.cli.ensure import Ensure
from regedit.cli.output import machine_output, user_output
from regedit.core.config import RegEditConfig
from regedit.core.context import RegEditContext

_KEYS = ("cache_root", "force_reset", "git_timeout")


def _format_value(config: RegEditConfig, key: str) -> str:
    if key.startswith("gitconfig."):
        name = key.removeprefix("gitconfig.")
        Ensure.invariant(name in config.gitconfig, f"Key not found: {key}")
        return config.gitconfig[name]

    match key:
        case "cache_root":
            return str(config.cache_root)
        case "force_reset":
            return str(config.force_reset).lower()
        case "git_timeout":
            return "none" if config.git_timeout is None else f"{config.git_timeout:g}"
        case _:
            Ensure.fail(f"Invalid key: {key}")


def _parse_boolean_value(value: str, key: str) -> bool:
    Ensure.invariant(
        value.lower() in ("true", "false"), f"Invalid boolean value for {key}: {value}"
    )
    return value.lower() == "true"


def _parse_timeout(value: str) -> float | None:
    if value.lower() == "none":
        return None
    try:
        timeout = float(value)
    except ValueError:
        Ensure.fail(f"Invalid number for git_timeout: {value}")
    Ensure.invariant(timeout > 0, f"git_timeout must be positive: {value}")
    return timeout


def _update_field(config: RegEditConfig, key: str, value: str) -> RegEditConfig:
    if key.startswith("gitconfig."):
        name = key.removeprefix("gitconfig.")
        Ensure.invariant(bool(name), f"Invalid key: {key}")
        return replace(config, gitconfig={**config.gitconfig, name: value})

    match key:
        case "cache_root":
            Ensure.invariant(bool(value), "cache_root must not be empty")
            return replace(config, cache_root=Path(value).expanduser())
        case "force_reset":
            return replace(config, force_reset=_parse_boolean_value(value, key))
        case "git_timeout":
            return replace(config, git_timeout=_parse_timeout(value))
        case _:
            Ensure.fail(f"Invalid key: {key}")


@click.group("config")
def config_group() -> None:
    """Manage regedit configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: RegEditContext) -> None:
    """Print configuration keys and their effective values."""
    store = ctx.config_store
    if not store.exists():
        user_output(f"No config file at {store.path()}; showing defaults")

    for key in _KEYS:
        machine_output(f"{key}={_format_value(ctx.config, key)}")
    for name, value in sorted(ctx.config.gitconfig.items()):
        machine_output(f"gitconfig.{name}={value}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: RegEditContext, key: str) -> None:
    """Print the effective value of KEY."""
    machine_output(_format_value(ctx.config, key))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: RegEditContext, key: str, value: str) -> None:
    """Store VALUE for KEY in the config file.

    Keys are cache_root, force_reset, git_timeout ("none" clears it) and
    gitconfig.<name>.
    """
    store = ctx.config_store
    with Ensure.reported_errors():
        updated = _update_field(store.load(), key, value)
        store.save(updated)
    user_output(click.style("✓", fg="green") + f" Set {key}={value} in {store.path()}")
