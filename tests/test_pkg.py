import pytest

from zsh_bootstrap.errors import CommandError, InstallError, PermissionDenied
from zsh_bootstrap.lib import pkg, privilege
from zsh_bootstrap.lib.command import CmdResult
from zsh_bootstrap.lib.pkg import InstallTarget, ensure_package
from zsh_bootstrap.options import RunOptions

ZSH = InstallTarget(command="zsh", package="zsh", display_name="Zsh")


@pytest.fixture
def apt_calls(monkeypatch):
    calls = []

    def fake_run(argv, **kwargs):
        calls.append(list(argv))
        return CmdResult(argv=list(argv), returncode=0, stdout="", stderr="")

    monkeypatch.setattr(pkg, "run_cmd", fake_run)
    return calls


def _path_has(monkeypatch, *commands):
    available = set(commands)
    monkeypatch.setattr(pkg, "which", lambda name: f"/usr/bin/{name}" if name in available else None)
    monkeypatch.setattr(privilege, "which", lambda name: f"/usr/bin/{name}" if name in available else None)


def test_present_command_is_a_noop(monkeypatch, apt_calls):
    _path_has(monkeypatch, "zsh")
    assert ensure_package(ZSH, RunOptions()) is False
    assert apt_calls == []


def test_capability_check_uses_command_not_package_name(monkeypatch, apt_calls):
    _path_has(monkeypatch, "fdfind")
    target = InstallTarget(command="fdfind", package="fd-find", display_name="fd")
    assert ensure_package(target, RunOptions()) is False
    assert apt_calls == []


def test_missing_command_installs_as_root_directly(monkeypatch, apt_calls):
    _path_has(monkeypatch)
    monkeypatch.setattr(privilege, "is_root", lambda: True)

    assert ensure_package(ZSH, RunOptions()) is True
    assert apt_calls == [["apt-get", "update"], ["apt-get", "install", "-y", "zsh"]]


def test_missing_command_uses_sudo_when_not_root(monkeypatch, apt_calls):
    _path_has(monkeypatch, "sudo")
    monkeypatch.setattr(privilege, "is_root", lambda: False)

    ensure_package(ZSH, RunOptions())

    assert apt_calls[0] == ["sudo", "apt-get", "update"]
    assert apt_calls[1] == ["sudo", "apt-get", "install", "-y", "zsh"]


def test_no_privilege_escalation_is_permission_denied(monkeypatch, apt_calls):
    _path_has(monkeypatch)
    monkeypatch.setattr(privilege, "is_root", lambda: False)

    with pytest.raises(PermissionDenied):
        ensure_package(ZSH, RunOptions())
    assert apt_calls == []


def test_dry_run_without_privilege_only_warns(monkeypatch, apt_calls, caplog):
    _path_has(monkeypatch)
    monkeypatch.setattr(privilege, "is_root", lambda: False)

    assert ensure_package(ZSH, RunOptions(dry_run=True)) is True
    assert "Root privileges would be required" in caplog.text


def test_apt_failure_is_install_error(monkeypatch):
    _path_has(monkeypatch)
    monkeypatch.setattr(privilege, "is_root", lambda: True)

    def failing_run(argv, **kwargs):
        if "install" in argv:
            raise CommandError("Command failed (100)", returncode=100)
        return CmdResult(argv=list(argv), returncode=0, stdout="", stderr="")

    monkeypatch.setattr(pkg, "run_cmd", failing_run)

    with pytest.raises(InstallError) as exc:
        ensure_package(ZSH, RunOptions())
    assert "Zsh" in str(exc.value)
