from pathlib import Path

import pytest

from zsh_bootstrap.errors import ManifestError
from zsh_bootstrap.manifest import PACKAGE_ROOT, load_manifest


def test_default_manifest_describes_the_standard_setup(home):
    m = load_manifest()

    assert m.package("shell").command == "zsh"
    assert m.package("vcs").display_name == "Git"
    assert m.framework_root == home / ".oh-my-zsh"
    assert [p.name for p in m.plugins] == ["zsh-autosuggestions", "zsh-syntax-highlighting"]
    assert m.plugins[1].path == home / ".oh-my-zsh" / "custom" / "plugins" / "zsh-syntax-highlighting"
    assert m.prompt.installer.args == ["-s", "--", "-y"]
    assert m.history.installer.interpreter == "bash"
    assert m.timeout == 300.0

    dests = [m.deploy_target(e, source=Path("x")).dest for e in m.configs]
    assert dests == [home / ".zshrc", home / ".config" / "starship.toml", home / ".config" / "atuin" / "config.toml"]


def test_default_config_sources_ship_with_the_package(home):
    m = load_manifest()
    sources = [m.deploy_target(e).source for e in m.configs if e.get("source")]
    assert sources == [PACKAGE_ROOT / "assets" / "starship.toml", PACKAGE_ROOT / "assets" / "atuin.toml"]
    assert all(s.is_file() for s in sources)


def test_only_history_config_keeps_existing(home):
    m = load_manifest()
    keep = [m.deploy_target(e, source=Path("x")).dest.name for e in m.configs if e.get("keep_existing")]
    assert keep == ["config.toml"]


def test_zsh_custom_environment_variable_moves_plugins(home, monkeypatch, tmp_path):
    monkeypatch.setenv("ZSH_CUSTOM", str(tmp_path / "custom"))
    m = load_manifest()
    assert m.plugins[0].path == tmp_path / "custom" / "plugins" / "zsh-autosuggestions"


def test_user_manifest_merges_over_defaults(home, tmp_path):
    (tmp_path / "cfg").mkdir()
    (tmp_path / "cfg" / "my-starship.toml").write_text("add_newline = false\n")
    user = tmp_path / "cfg" / "bootstrap.yaml"
    user.write_text(
        "network:\n"
        "  timeout: 30\n"
        "plugins:\n"
        "  - url: https://example.invalid/zsh-you-should-use.git\n"
        "configs:\n"
        "  - source: my-starship.toml\n"
        "    dest: ~/.config/starship.toml\n"
    )

    m = load_manifest(str(user))

    assert m.timeout == 30.0
    assert m.preview_lines == 5
    assert [p.name for p in m.plugins] == ["zsh-you-should-use"]
    assert m.deploy_target(m.configs[0]).source == tmp_path / "cfg" / "my-starship.toml"
    assert m.package("shell").command == "zsh"


def test_missing_user_manifest_is_an_error(tmp_path):
    with pytest.raises(ManifestError):
        load_manifest(str(tmp_path / "nope.yaml"))


def test_invalid_yaml_is_an_error(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("plugins: [unclosed\n")
    with pytest.raises(ManifestError):
        load_manifest(str(bad))


def test_non_mapping_manifest_is_an_error(tmp_path):
    bad = tmp_path / "list.yaml"
    bad.write_text("- just\n- a list\n")
    with pytest.raises(ManifestError):
        load_manifest(str(bad))


def test_installer_without_url_is_rejected(home, tmp_path):
    user = tmp_path / "m.yaml"
    user.write_text("prompt:\n  installer:\n    url: ''\n")
    with pytest.raises(ManifestError):
        load_manifest(str(user)).prompt
