"""Bring local registry working trees up to date with their remotes."""

import logging
import shutil
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from uuid import UUID

from regedit.core.errors import FilesystemError, MalformedRegistryError
from regedit.core.git.abc import Git
from regedit.registry.cache import RegistryCache
from regedit.registry.codec import REGISTRY_FILE, load_registry
from regedit.registry.data import RegistryData

logger = logging.getLogger(__name__)

REMOTE = "origin"


@dataclass(frozen=True)
class WorkingTree:
    """Handle to a registry checkout inside the cache.

    Holds no lock; other callers may touch the same directory afterwards.
    """

    path: Path
    uuid: UUID

    @property
    def registry_file(self) -> Path:
        return self.path / REGISTRY_FILE

    def load(self) -> RegistryData:
        """Parse the Registry.toml of this working tree."""
        return load_registry(self.registry_file)


def get_registry(
    registry_url: str,
    *,
    git: Git,
    cache: RegistryCache,
    gitconfig: Mapping[str, str] | None = None,
    force_reset: bool = True,
) -> WorkingTree:
    """Return an up-to-date working tree of the registry at `registry_url`.

    The first time a URL is seen it is cloned to a temporary directory inside the
    cache, its Registry.toml is read for the registry UUID and the clone is moved
    to `<cache>/<uuid>`, replacing any stale copy. Later calls update that copy in
    place.

    Args:
        registry_url: Remote location understood by git
        git: Git implementation used for every operation
        cache: Cache holding the working trees
        gitconfig: Extra `-c key=value` settings for each git invocation
        force_reset: Hard-reset to the remote branch, discarding local commits

    Raises:
        ExternalToolError: If a git command fails
        DefaultBranchResolutionError: If the remote does not report a HEAD branch
        MalformedRegistryError: If a fresh clone has no usable Registry.toml
        FilesystemError: If a cache directory cannot be created, moved or removed
    """
    if gitconfig:
        git = git.with_config(gitconfig)

    if registry_url not in cache.registries:
        return _acquire_registry(git, cache, registry_url)

    reg_uuid = cache.registries[registry_url]
    registry_path = cache.registry_path(reg_uuid)

    if not registry_path.exists():
        logger.debug("Slot %s for %s is missing, cloning", registry_path, registry_url)
        _make_dirs(cache.path)
        git.clone(registry_url, registry_path)
    else:
        _update_working_tree(git, registry_path, registry_url, force_reset=force_reset)

    return WorkingTree(path=registry_path, uuid=reg_uuid)


def _update_working_tree(git: Git, repo: Path, registry_url: str, *, force_reset: bool) -> None:
    # Not transactional: a failure part way leaves the earlier steps applied.
    git.set_remote_url(repo, REMOTE, registry_url)
    branch = git.get_remote_default_branch(repo, REMOTE)
    logger.debug("Updating %s to %s/%s", repo, REMOTE, branch)
    git.checkout(repo, branch, force=True)
    git.fetch(repo, REMOTE, branch, prune_tags=True)
    if force_reset:
        git.reset_hard(repo, f"{REMOTE}/{branch}")


def _acquire_registry(git: Git, cache: RegistryCache, registry_url: str) -> WorkingTree:
    _make_dirs(cache.path)
    temp_path = _make_temp_dir(cache.path, ".clone-")

    try:
        git.clone(registry_url, temp_path)
        reg = _read_cloned_registry(temp_path, registry_url)

        registry_path = cache.registry_path(reg.uuid)
        if registry_path.exists():
            logger.warning("Replacing existing registry copy at %s", registry_path)
            _replace_slot(temp_path, registry_path, cache.path)
        else:
            _move(temp_path, registry_path)

        cache.registries[registry_url] = reg.uuid
        logger.debug("Cached %s as %s", registry_url, reg.uuid)
        return WorkingTree(path=registry_path, uuid=reg.uuid)
    finally:
        _discard_temp(temp_path)


def _replace_slot(clone_path: Path, registry_path: Path, cache_root: Path) -> None:
    # The old slot is set aside inside the cache root and restored if the new
    # clone cannot be moved in.
    stash = _make_temp_dir(cache_root, ".old-")
    set_aside = stash / registry_path.name
    try:
        _move(registry_path, set_aside)
        try:
            _move(clone_path, registry_path)
        except FilesystemError:
            _restore_slot(set_aside, registry_path)
            raise
    finally:
        _discard_temp(stash)


def _restore_slot(set_aside: Path, registry_path: Path) -> None:
    if registry_path.exists():
        shutil.rmtree(registry_path, ignore_errors=True)
    try:
        shutil.move(str(set_aside), str(registry_path))
    except OSError as e:
        logger.warning("Failed to restore %s from %s: %s", registry_path, set_aside, e)


def _make_temp_dir(parent: Path, prefix: str) -> Path:
    try:
        return Path(tempfile.mkdtemp(prefix=prefix, dir=parent))
    except OSError as e:
        raise FilesystemError(
            f"Failed to create temporary directory in {parent}: {e}", path=parent
        ) from e


def _read_cloned_registry(clone_path: Path, registry_url: str) -> RegistryData:
    registry_file = clone_path / REGISTRY_FILE
    if not registry_file.is_file():
        raise MalformedRegistryError(f"{registry_url} has no {REGISTRY_FILE}")
    return load_registry(registry_file)


def _make_dirs(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Failed to create directory {path}: {e}", path=path) from e


def _move(source: Path, destination: Path) -> None:
    try:
        shutil.move(str(source), str(destination))
    except OSError as e:
        raise FilesystemError(
            f"Failed to move {source} to {destination}: {e}", path=destination
        ) from e


def _discard_temp(path: Path) -> None:
    # Runs on the way out of a failure too, so it must not replace that error.
    if not path.exists():
        return
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.warning("Failed to remove temporary clone %s: %s", path, e)
