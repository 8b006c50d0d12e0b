"""End-to-end runs of the full step sequence against a fake toolchain.

zsh, curl, starship and atuin are stub executables on PATH, plugins are
cloned with the real git from local repositories, and the package manager
and remote downloads are replaced with recorders that must stay unused.
"""

import os
import re
from pathlib import Path

import pytest

from conftest import REAL_GIT, make_executable, make_remote_repo, requires_git
from zsh_bootstrap.lib import git as git_mod
from zsh_bootstrap.lib import pkg, remote
from zsh_bootstrap.main import run
from zsh_bootstrap.options import RunOptions

BACKUP_RE = re.compile(r"\.backup\.\d{14}(\.\d+)?$")


@pytest.fixture
def toolchain(home, tmp_path, fake_bin, monkeypatch):
    make_executable(fake_bin / "zsh")
    make_executable(fake_bin / "curl")
    make_executable(fake_bin / "starship", 'echo "# starship init for $2"\n')
    make_executable(fake_bin / "atuin", 'echo "# atuin init for $2"\n')
    monkeypatch.setenv("PATH", os.pathsep.join([str(fake_bin), os.path.dirname(REAL_GIT)]))
    monkeypatch.setenv("SHELL", str(fake_bin / "zsh"))
    (home / ".oh-my-zsh").mkdir()

    remotes = tmp_path / "remotes"
    manifest = tmp_path / "bootstrap.yaml"
    manifest.write_text(
        "plugins:\n"
        f"  - name: zsh-autosuggestions\n    url: {make_remote_repo(remotes, 'zsh-autosuggestions')}\n"
        f"  - name: zsh-syntax-highlighting\n    url: {make_remote_repo(remotes, 'zsh-syntax-highlighting')}\n"
    )

    installs = []
    monkeypatch.setattr(pkg, "run_cmd", lambda argv, **kw: installs.append(list(argv)))
    downloads = []
    monkeypatch.setattr(remote, "download", lambda url, dest, **kw: downloads.append(url))

    git_calls = []
    real_git_run = git_mod.run_cmd

    def git_spy(argv, **kwargs):
        git_calls.append(list(argv))
        return real_git_run(argv, **kwargs)

    monkeypatch.setattr(git_mod, "run_cmd", git_spy)

    return {"manifest": str(manifest), "installs": installs, "downloads": downloads, "git": git_calls}


def _backups(home: Path):
    return sorted(p for p in home.rglob("*") if BACKUP_RE.search(p.name))


@requires_git
def test_second_run_installs_nothing_reclones_nothing_and_backs_up_once(home, toolchain):
    options = RunOptions(manifest_path=toolchain["manifest"])

    first = run(options)

    assert first.report["decisions"]["60_plugins"]["states"] == {
        "zsh-autosuggestions": "cloned_fresh",
        "zsh-syntax-highlighting": "cloned_fresh",
    }
    assert (home / ".zshrc").is_file()
    assert (home / ".config" / "starship.toml").is_file()
    assert (home / ".config" / "atuin" / "config.toml").is_file()
    assert (home / ".cache" / "zsh-bootstrap" / "starship.zsh").read_text() == "# starship init for zsh\n"
    assert _backups(home) == []
    clones_after_first = sum(1 for c in toolchain["git"] if "clone" in c)
    assert clones_after_first == 2

    atuin_before = (home / ".config" / "atuin" / "config.toml").read_text()

    second = run(options)

    assert toolchain["installs"] == []
    assert toolchain["downloads"] == []
    assert sum(1 for c in toolchain["git"] if "clone" in c) == clones_after_first
    assert second.report["decisions"]["60_plugins"]["states"] == {
        "zsh-autosuggestions": "updated_cleanly",
        "zsh-syntax-highlighting": "updated_cleanly",
    }

    backups = _backups(home)
    assert sorted(p.name.split(".backup.")[0] for p in backups) == [".zshrc", "starship.toml"]
    assert (home / ".config" / "atuin" / "config.toml").read_text() == atuin_before
    assert second.report["decisions"]["85_init_snippets"]["written"] == []


@requires_git
def test_clean_run_replaces_everything_without_backups(home, toolchain):
    options = RunOptions(manifest_path=toolchain["manifest"])
    run(options)

    run(RunOptions(manifest_path=toolchain["manifest"], clean=True))

    assert _backups(home) == []
    assert toolchain["installs"] == []
