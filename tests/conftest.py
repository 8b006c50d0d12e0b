import os
import shutil
import stat
import subprocess
from pathlib import Path

import pytest

from zsh_bootstrap.logging_utils import reset_logging
from zsh_bootstrap.manifest import load_manifest
from zsh_bootstrap.options import RunOptions
from zsh_bootstrap.pipeline import BootstrapCtx

REAL_GIT = shutil.which("git")

requires_git = pytest.mark.skipif(REAL_GIT is None, reason="git is not installed")


@pytest.fixture(autouse=True)
def _isolated_logging():
    yield
    reset_logging()


@pytest.fixture
def home(tmp_path, monkeypatch):
    """A throwaway $HOME with XDG and framework variables cleared."""
    h = tmp_path / "home"
    h.mkdir()
    monkeypatch.setenv("HOME", str(h))
    for var in ("XDG_CACHE_HOME", "XDG_STATE_HOME", "XDG_CONFIG_HOME", "ZSH_CUSTOM", "ZSH"):
        monkeypatch.delenv(var, raising=False)
    return h


def make_executable(path: Path, body: str = "exit 0\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def fake_bin(tmp_path):
    d = tmp_path / "bin"
    d.mkdir()
    return d


def make_ctx(manifest_path=None, **opts) -> BootstrapCtx:
    return BootstrapCtx(options=RunOptions(**opts), manifest=load_manifest(manifest_path))


def git(*args, cwd=None):
    return subprocess.run(
        ["git", "-c", "user.name=zsh-bootstrap", "-c", "user.email=zsh-bootstrap@example.com", *args],
        cwd=str(cwd) if cwd else None,
        text=True,
        capture_output=True,
        check=True,
    )


def make_remote_repo(root: Path, name: str) -> str:
    """Create a one-commit repository and return its file:// URL."""
    repo = root / name
    repo.mkdir(parents=True)
    git("init", "-q", cwd=repo)
    (repo / f"{name}.zsh").write_text(f"# {name}\n")
    git("add", ".", cwd=repo)
    git("commit", "-q", "-m", "initial", cwd=repo)
    return repo.resolve().as_uri()


def snapshot(root: Path) -> dict:
    out = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            p = Path(dirpath) / name
            st = p.lstat()
            out[str(p.relative_to(root))] = (st.st_mode, st.st_size, st.st_mtime_ns)
    return out
