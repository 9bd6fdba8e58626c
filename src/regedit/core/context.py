"""Application context with dependency injection."""

import logging
from dataclasses import dataclass
from pathlib import Path

from regedit.core.config import (
    ConfigStore,
    FilesystemConfigStore,
    InMemoryConfigStore,
    RegEditConfig,
    load_config,
)
from regedit.core.git.abc import Git
from regedit.core.git.printing import PrintingGit
from regedit.core.git.real import RealGit
from regedit.registry.cache import RegistryCache


@dataclass(frozen=True)
class RegEditContext:
    """Immutable context holding all dependencies for regedit operations.

    Created at CLI entry point and threaded through the application.
    The cache is the only mutable part: it learns URL -> UUID mappings as
    registries are synchronized.
    """

    git: Git
    config_store: ConfigStore
    config: RegEditConfig
    cache: RegistryCache

    @staticmethod
    def for_test(
        git: Git,
        *,
        cache_root: Path | None = None,
        config: RegEditConfig | None = None,
    ) -> "RegEditContext":
        """Create a context around a test Git (usually FakeGit).

        Args:
            git: The Git implementation to use
            cache_root: Cache directory; overrides `config.cache_root` when given
            config: Config to use (defaults to RegEditConfig.default())
        """
        if config is None:
            config = RegEditConfig.default()
        if cache_root is not None:
            config = RegEditConfig(
                cache_root=cache_root,
                gitconfig=config.gitconfig,
                force_reset=config.force_reset,
                git_timeout=config.git_timeout,
            )
        return RegEditContext(
            git=git,
            config_store=InMemoryConfigStore(config),
            config=config,
            cache=RegistryCache(config.cache_root),
        )


def create_context(*, verbose: bool, config_store: ConfigStore | None = None) -> RegEditContext:
    """Create production context with real implementations.

    Args:
        verbose: Log at DEBUG and echo each git operation to stderr
        config_store: Where to read config from (defaults to ~/.regedit/config.toml)
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    store = config_store if config_store is not None else FilesystemConfigStore()
    config = load_config(store)

    git: Git = RealGit(timeout=config.git_timeout)
    if verbose:
        git = PrintingGit(git)

    return RegEditContext(
        git=git,
        config_store=store,
        config=config,
        cache=RegistryCache.load(config.cache_root),
    )
