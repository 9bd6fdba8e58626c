"""Tests for get_registry() over FakeGit.

The fake copies fixture directories instead of talking to real remotes, so these
tests cover the cache state machine: first acquisition, reconciliation of a known
slot, re-cloning a pruned slot and cleanup after failures.
"""

import logging
import shutil
from pathlib import Path
from uuid import UUID

import pytest

from regedit.core.errors import (
    DefaultBranchResolutionError,
    ExternalToolError,
    FilesystemError,
    MalformedRegistryError,
)
from regedit.registry.cache import RegistryCache
from regedit.registry.sync import WorkingTree, get_registry
from tests.fakes.git import FakeGit
from tests.test_utils.registries import GENERAL_URL, GENERAL_UUID, write_registry_repo

FOO_UUID = "11111111-1111-1111-1111-111111111111"


def _setup(tmp_path: Path, **git_kwargs: object) -> tuple[FakeGit, RegistryCache, Path]:
    remote = write_registry_repo(tmp_path / "remote")
    git = FakeGit(remotes={GENERAL_URL: remote}, **git_kwargs)  # type: ignore[arg-type]
    cache = RegistryCache(tmp_path / "cache")
    return git, cache, remote


# ============================================================================
# First acquisition
# ============================================================================


def test_first_get_clones_into_uuid_slot(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path)

    tree = get_registry(GENERAL_URL, git=git, cache=cache)

    slot = cache.path / GENERAL_UUID
    assert tree == WorkingTree(path=slot, uuid=UUID(GENERAL_UUID))
    assert cache.registries == {GENERAL_URL: UUID(GENERAL_UUID)}
    assert (slot / "Registry.toml").is_file()
    assert git.operations == [("clone", GENERAL_URL)]


def test_first_get_leaves_no_temporary_directories(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path)

    get_registry(GENERAL_URL, git=git, cache=cache)

    assert [p.name for p in cache.path.iterdir()] == [GENERAL_UUID]


def test_first_get_replaces_stale_slot(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path)
    stale = cache.path / GENERAL_UUID
    stale.mkdir(parents=True)
    (stale / "leftover.txt").write_text("old", encoding="utf-8")

    get_registry(GENERAL_URL, git=git, cache=cache)

    assert not (stale / "leftover.txt").exists()
    assert (stale / "Registry.toml").is_file()


def test_first_get_clone_failure_leaves_cache_untouched(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path, failing_operations={"clone"})
    cache.path.mkdir()

    with pytest.raises(ExternalToolError):
        get_registry(GENERAL_URL, git=git, cache=cache)

    assert cache.registries == {}
    assert list(cache.path.iterdir()) == []


def test_first_get_unknown_remote_fails(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path)

    with pytest.raises(ExternalToolError) as exc_info:
        get_registry("https://example.com/missing.git", git=git, cache=cache)

    assert exc_info.value.returncode == 128
    assert cache.registries == {}


def test_first_get_without_registry_file_fails_and_cleans_up(tmp_path: Path) -> None:
    empty_remote = tmp_path / "empty"
    empty_remote.mkdir()
    (empty_remote / "README.md").write_text("not a registry", encoding="utf-8")
    git = FakeGit(remotes={GENERAL_URL: empty_remote})
    cache = RegistryCache(tmp_path / "cache")

    with pytest.raises(MalformedRegistryError):
        get_registry(GENERAL_URL, git=git, cache=cache)

    assert cache.registries == {}
    assert list(cache.path.iterdir()) == []


def test_cleanup_failure_does_not_mask_original_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    git, cache, _ = _setup(tmp_path, failing_operations={"clone"})

    def refuse_rmtree(path: object, *args: object, **kwargs: object) -> None:
        raise PermissionError(f"cannot remove {path}")

    monkeypatch.setattr("regedit.registry.sync.shutil.rmtree", refuse_rmtree)

    with caplog.at_level(logging.WARNING, logger="regedit.registry.sync"):
        with pytest.raises(ExternalToolError):
            get_registry(GENERAL_URL, git=git, cache=cache)

    assert "Failed to remove temporary clone" in caplog.text
    assert cache.registries == {}


def test_failed_move_into_existing_slot_restores_it(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    git, cache, _ = _setup(tmp_path)
    slot = cache.path / GENERAL_UUID
    slot.mkdir(parents=True)
    (slot / "keep.txt").write_text("local", encoding="utf-8")
    real_move = shutil.move

    def refuse_clone_move(src: str, dst: str, *args: object, **kwargs: object) -> object:
        if Path(src).name.startswith(".clone-"):
            raise PermissionError(f"cannot move {src}")
        return real_move(src, dst)

    monkeypatch.setattr("regedit.registry.sync.shutil.move", refuse_clone_move)

    with pytest.raises(FilesystemError) as exc_info:
        get_registry(GENERAL_URL, git=git, cache=cache)

    assert exc_info.value.path == slot
    assert cache.registries == {}
    assert [p.name for p in cache.path.iterdir()] == [GENERAL_UUID]
    assert (slot / "keep.txt").read_text(encoding="utf-8") == "local"
    assert not (slot / "Registry.toml").exists()


def test_failed_set_aside_leaves_existing_slot_in_place(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    git, cache, _ = _setup(tmp_path)
    slot = cache.path / GENERAL_UUID
    slot.mkdir(parents=True)
    (slot / "keep.txt").write_text("local", encoding="utf-8")

    def refuse_move(src: str, dst: str, *args: object, **kwargs: object) -> None:
        raise PermissionError(f"cannot move {src}")

    monkeypatch.setattr("regedit.registry.sync.shutil.move", refuse_move)

    with pytest.raises(FilesystemError):
        get_registry(GENERAL_URL, git=git, cache=cache)

    assert cache.registries == {}
    assert [p.name for p in cache.path.iterdir()] == [GENERAL_UUID]
    assert (slot / "keep.txt").is_file()


def test_failed_move_into_new_slot_cleans_up(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    git, cache, _ = _setup(tmp_path)

    def refuse_move(src: str, dst: str, *args: object, **kwargs: object) -> None:
        raise PermissionError(f"cannot move {src}")

    monkeypatch.setattr("regedit.registry.sync.shutil.move", refuse_move)

    with pytest.raises(FilesystemError) as exc_info:
        get_registry(GENERAL_URL, git=git, cache=cache)

    assert exc_info.value.path == cache.path / GENERAL_UUID
    assert "Failed to move" in str(exc_info.value)
    assert cache.registries == {}
    assert list(cache.path.iterdir()) == []


def test_uncreatable_cache_root_raises_filesystem_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    git, cache, _ = _setup(tmp_path)

    def refuse_mkdir(self: Path, *args: object, **kwargs: object) -> None:
        raise PermissionError(f"cannot create {self}")

    monkeypatch.setattr(Path, "mkdir", refuse_mkdir)

    with pytest.raises(FilesystemError) as exc_info:
        get_registry(GENERAL_URL, git=git, cache=cache)

    assert exc_info.value.path == cache.path
    assert "Failed to create directory" in str(exc_info.value)
    assert cache.registries == {}
    assert not cache.path.exists()
    assert git.operations == []


def test_temporary_directory_failure_raises_filesystem_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    git, cache, _ = _setup(tmp_path)

    def refuse_mkdtemp(*args: object, **kwargs: object) -> str:
        raise PermissionError("read-only cache")

    monkeypatch.setattr("regedit.registry.sync.tempfile.mkdtemp", refuse_mkdtemp)

    with pytest.raises(FilesystemError) as exc_info:
        get_registry(GENERAL_URL, git=git, cache=cache)

    assert exc_info.value.path == cache.path
    assert cache.registries == {}
    assert list(cache.path.iterdir()) == []
    assert git.operations == []


def test_two_urls_with_same_uuid_share_a_slot(tmp_path: Path) -> None:
    git, cache, remote = _setup(tmp_path)
    mirror_url = "https://mirror.example.com/General.git"
    git = FakeGit(remotes={GENERAL_URL: remote, mirror_url: remote})

    first = get_registry(GENERAL_URL, git=git, cache=cache)
    second = get_registry(mirror_url, git=git, cache=cache)

    assert first.path == second.path
    assert cache.registries[GENERAL_URL] == cache.registries[mirror_url]


# ============================================================================
# Known location
# ============================================================================


def test_second_get_reconciles_existing_slot(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path)
    get_registry(GENERAL_URL, git=git, cache=cache)

    tree = get_registry(GENERAL_URL, git=git, cache=cache)

    assert tree.path == cache.path / GENERAL_UUID
    assert git.operations[1:] == [
        ("set_remote_url", "origin", GENERAL_URL),
        ("get_remote_default_branch", "origin"),
        ("checkout", "main", "-f"),
        ("fetch", "origin", "main"),
        ("reset_hard", "origin/main"),
    ]


def test_reconcile_uses_branch_reported_by_remote(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path, default_branches={GENERAL_URL: "trunk"})
    get_registry(GENERAL_URL, git=git, cache=cache)

    get_registry(GENERAL_URL, git=git, cache=cache)

    assert ("checkout", "trunk", "-f") in git.operations
    assert ("fetch", "origin", "trunk") in git.operations
    assert git.operations[-1] == ("reset_hard", "origin/trunk")


def test_reconcile_without_force_reset_keeps_local_commits(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path)
    get_registry(GENERAL_URL, git=git, cache=cache)

    get_registry(GENERAL_URL, git=git, cache=cache, force_reset=False)

    assert "reset_hard" not in git.operation_names
    assert git.operation_names[-1] == "fetch"


def test_reconcile_fails_when_remote_reports_no_head_branch(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path, default_branches={GENERAL_URL: None})
    get_registry(GENERAL_URL, git=git, cache=cache)

    with pytest.raises(DefaultBranchResolutionError):
        get_registry(GENERAL_URL, git=git, cache=cache)

    assert "checkout" not in git.operation_names


def test_reconcile_points_origin_at_requested_location(tmp_path: Path) -> None:
    """A registry that moved keeps its slot; origin follows the new location."""
    remote = write_registry_repo(tmp_path / "remote")
    moved_url = "https://new-host.example.com/General.git"
    slot = tmp_path / "cache" / GENERAL_UUID
    write_registry_repo(slot)
    cache = RegistryCache(tmp_path / "cache", {moved_url: UUID(GENERAL_UUID)})
    git = FakeGit(remotes={moved_url: remote})

    get_registry(moved_url, git=git, cache=cache)

    assert git.remote_url(slot) == moved_url
    assert git.operations[0] == ("set_remote_url", "origin", moved_url)


def test_reconcile_picks_up_upstream_changes(tmp_path: Path) -> None:
    git, cache, remote = _setup(tmp_path)
    get_registry(GENERAL_URL, git=git, cache=cache)
    write_registry_repo(remote, packages={FOO_UUID: ("Foo", "F/Foo")})

    tree = get_registry(GENERAL_URL, git=git, cache=cache)

    assert tree.load().packages == {FOO_UUID: {"name": "Foo", "path": "F/Foo"}}


def test_known_location_with_missing_slot_clones_directly(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path)
    cache.registries[GENERAL_URL] = UUID(GENERAL_UUID)

    tree = get_registry(GENERAL_URL, git=git, cache=cache)

    assert git.operations == [("clone", GENERAL_URL)]
    assert tree.registry_file.is_file()
    assert tree.registry_file == cache.path / GENERAL_UUID / "Registry.toml"


def test_gitconfig_overlay_is_applied(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path)

    get_registry(GENERAL_URL, git=git, cache=cache, gitconfig={"user.name": "RegEdit"})

    assert git.config_overlays == [{"user.name": "RegEdit"}]


def test_working_tree_load_parses_registry(tmp_path: Path) -> None:
    git, cache, _ = _setup(tmp_path)

    tree = get_registry(GENERAL_URL, git=git, cache=cache)

    reg = tree.load()
    assert reg.name == "General"
    assert reg.uuid == tree.uuid
