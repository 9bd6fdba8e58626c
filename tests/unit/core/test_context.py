"""Tests for context creation."""

from pathlib import Path
from uuid import UUID

import pytest

from regedit.core.config import InMemoryConfigStore, RegEditConfig
from regedit.core.context import RegEditContext, create_context
from regedit.core.git.printing import PrintingGit
from regedit.core.git.real import RealGit
from regedit.registry.cache import RegistryCache
from tests.fakes.git import FakeGit


def test_create_context_uses_real_git_and_configured_cache(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("REGEDIT_CACHE", raising=False)
    store = InMemoryConfigStore(RegEditConfig(cache_root=tmp_path / "cache"))

    ctx = create_context(verbose=False, config_store=store)

    assert isinstance(ctx.git, RealGit)
    assert ctx.cache.path == tmp_path / "cache"
    assert ctx.config_store is store


def test_create_context_verbose_wraps_git(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REGEDIT_CACHE", raising=False)
    store = InMemoryConfigStore(RegEditConfig(cache_root=tmp_path / "cache"))

    ctx = create_context(verbose=True, config_store=store)

    assert isinstance(ctx.git, PrintingGit)


def test_create_context_restores_saved_index(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("REGEDIT_CACHE", raising=False)
    reg_uuid = UUID("23338594-aafe-5451-b93e-139f81909106")
    RegistryCache(tmp_path / "cache", {"https://example.com/General.git": reg_uuid}).save()
    store = InMemoryConfigStore(RegEditConfig(cache_root=tmp_path / "cache"))

    ctx = create_context(verbose=False, config_store=store)

    assert ctx.cache.registries == {"https://example.com/General.git": reg_uuid}


def test_for_test_overrides_cache_root(tmp_path: Path) -> None:
    git = FakeGit()

    ctx = RegEditContext.for_test(git, cache_root=tmp_path)

    assert ctx.git is git
    assert ctx.cache.path == tmp_path
    assert ctx.config.cache_root == tmp_path
    assert ctx.cache.registries == {}
