"""Configuration data structures and loading.

Provides immutable configuration loaded from ~/.regedit/config.toml:

    cache_root = "~/.regedit/registries"
    force_reset = true
    git_timeout = 300

    [gitconfig]
    "user.name" = "RegEdit"
"""

import os
import tomllib
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit

CACHE_ENV_VAR = "REGEDIT_CACHE"


def _default_home() -> Path:
    return Path.home() / ".regedit"


@dataclass(frozen=True)
class RegEditConfig:
    """Immutable configuration data.

    Loaded once at the CLI entry point and stored in RegEditContext.
    """

    cache_root: Path
    gitconfig: Mapping[str, str] = field(default_factory=dict)
    force_reset: bool = True
    git_timeout: float | None = None

    @staticmethod
    def default() -> "RegEditConfig":
        return RegEditConfig(cache_root=_default_home() / "registries")


def config_from_dict(data: Mapping[str, object], *, source: Path) -> RegEditConfig:
    """Build a RegEditConfig from parsed TOML, falling back to defaults.

    Raises:
        ValueError: If a key has the wrong type
    """
    defaults = RegEditConfig.default()

    cache_root = data.get("cache_root", str(defaults.cache_root))
    if not isinstance(cache_root, str) or not cache_root:
        raise ValueError(f"'cache_root' must be a non-empty string in {source}")

    gitconfig = data.get("gitconfig", {})
    if not isinstance(gitconfig, Mapping) or not all(
        isinstance(v, str) for v in gitconfig.values()
    ):
        raise ValueError(f"'gitconfig' must be a table of strings in {source}")

    force_reset = data.get("force_reset", defaults.force_reset)
    if not isinstance(force_reset, bool):
        raise ValueError(f"'force_reset' must be a boolean in {source}")

    git_timeout = data.get("git_timeout")
    if git_timeout is not None:
        if isinstance(git_timeout, bool) or not isinstance(git_timeout, int | float):
            raise ValueError(f"'git_timeout' must be a number in {source}")
        git_timeout = float(git_timeout)

    return RegEditConfig(
        cache_root=Path(cache_root).expanduser(),
        gitconfig=dict(gitconfig),
        force_reset=force_reset,
        git_timeout=git_timeout,
    )


def apply_env_overrides(config: RegEditConfig, environ: Mapping[str, str]) -> RegEditConfig:
    """Apply REGEDIT_CACHE on top of a loaded config."""
    override = environ.get(CACHE_ENV_VAR)
    if not override:
        return config
    return RegEditConfig(
        cache_root=Path(override).expanduser(),
        gitconfig=config.gitconfig,
        force_reset=config.force_reset,
        git_timeout=config.git_timeout,
    )


class ConfigStore(ABC):
    """Abstract interface for config operations.

    Provides dependency injection for config access, enabling in-memory
    implementations for tests without touching filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if config exists."""
        ...

    @abstractmethod
    def load(self) -> RegEditConfig:
        """Load config, returning defaults when none exists.

        Raises:
            ValueError: If config is malformed
        """
        ...

    @abstractmethod
    def save(self, config: RegEditConfig) -> None:
        """Save config."""
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the config file (for error messages and debugging)."""
        ...


class FilesystemConfigStore(ConfigStore):
    """Production implementation that reads/writes ~/.regedit/config.toml."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path

    def exists(self) -> bool:
        return self.path().exists()

    def load(self) -> RegEditConfig:
        config_path = self.path()
        if not config_path.exists():
            return RegEditConfig.default()

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Malformed config at {config_path}: {e}") from e
        return config_from_dict(data, source=config_path)

    def save(self, config: RegEditConfig) -> None:
        """Save config, preserving formatting and comments of an existing file.

        Raises:
            PermissionError: If directory or file cannot be written
        """
        config_path = self.path()
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.exists():
            with config_path.open(encoding="utf-8") as f:
                doc = tomlkit.load(f)
        else:
            doc = tomlkit.document()
            doc.add(tomlkit.comment("regedit configuration"))

        doc["cache_root"] = str(config.cache_root)
        doc["force_reset"] = config.force_reset
        if config.git_timeout is None:
            doc.pop("git_timeout", None)
        else:
            doc["git_timeout"] = config.git_timeout

        gitconfig = tomlkit.table()
        for key, value in config.gitconfig.items():
            gitconfig[key] = value
        doc["gitconfig"] = gitconfig

        with config_path.open("w", encoding="utf-8") as f:
            tomlkit.dump(doc, f)

    def path(self) -> Path:
        if self._config_path is not None:
            return self._config_path
        return _default_home() / "config.toml"


class InMemoryConfigStore(ConfigStore):
    """Test implementation that stores config in memory without touching filesystem."""

    def __init__(self, config: RegEditConfig | None = None) -> None:
        """Initialize in-memory config store.

        Args:
            config: Initial config state (None = config doesn't exist)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> RegEditConfig:
        if self._config is None:
            return RegEditConfig.default()
        return self._config

    def save(self, config: RegEditConfig) -> None:
        self._config = config

    def path(self) -> Path:
        return Path("/fake/regedit/config.toml")


def load_config(store: ConfigStore, environ: Mapping[str, str] | None = None) -> RegEditConfig:
    """Load config from `store` and apply environment overrides."""
    env = os.environ if environ is None else environ
    return apply_env_overrides(store.load(), env)
