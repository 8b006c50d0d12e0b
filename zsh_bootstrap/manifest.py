"""Provisioning manifest: what to install, from where, and where configs go.

The packaged default (manifests/bootstrap.yaml) is always loaded; an optional
user manifest is merged over it. Accessors return typed targets so steps
never poke at raw YAML.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ManifestError
from .lib.deploy import DeployTarget
from .lib.fonts import FontSpec
from .lib.git import RepoTarget, repo_name
from .lib.pkg import InstallTarget
from .lib.remote import DEFAULT_PREVIEW_LINES, DEFAULT_TIMEOUT

PACKAGE_ROOT = Path(__file__).resolve().parent
DEFAULT_MANIFEST = PACKAGE_ROOT / "manifests" / "bootstrap.yaml"


def expand_path(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(str(value))))


@dataclass(frozen=True)
class RemoteInstaller:
    url: str
    interpreter: str
    args: List[str]


@dataclass(frozen=True)
class ToolSpec:
    """A binary installed by a remote script (prompt or history tool)."""

    target: InstallTarget
    installer: RemoteInstaller
    init: List[str]


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def _anchor_sources(raw: Dict[str, Any], base_dir: Path) -> None:
    """Make relative config sources absolute against the manifest that names them."""
    for entry in raw.get("configs") or []:
        if not isinstance(entry, dict) or not entry.get("source"):
            continue
        src = expand_path(entry["source"])
        if not src.is_absolute():
            entry["source"] = os.path.normpath(base_dir / src)


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in manifest {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ManifestError(f"Manifest must be a mapping/dict: {path}")
    _anchor_sources(raw, path.parent)
    return raw


@dataclass(frozen=True)
class Manifest:
    raw: Dict[str, Any]

    def _section(self, key: str) -> Dict[str, Any]:
        value = self.raw.get(key) or {}
        if not isinstance(value, dict):
            raise ManifestError(f"manifest: {key} must be a mapping")
        return value

    def _install_target(self, section: Dict[str, Any], where: str) -> InstallTarget:
        command = section.get("command")
        if not command:
            raise ManifestError(f"manifest: {where}.command is required")
        return InstallTarget(
            command=str(command),
            package=str(section.get("package") or command),
            display_name=str(section.get("display_name") or command),
        )

    def _installer(self, section: Dict[str, Any], where: str) -> RemoteInstaller:
        inst = section.get("installer") or {}
        if not inst.get("url"):
            raise ManifestError(f"manifest: {where}.installer.url is required")
        args = inst.get("args") or []
        if not isinstance(args, list):
            raise ManifestError(f"manifest: {where}.installer.args must be a list")
        return RemoteInstaller(
            url=str(inst["url"]),
            interpreter=str(inst.get("interpreter") or "bash"),
            args=[str(a) for a in args],
        )

    def package(self, role: str) -> InstallTarget:
        return self._install_target(self._section("packages").get(role) or {}, f"packages.{role}")

    @property
    def timeout(self) -> Optional[float]:
        value = self._section("network").get("timeout", DEFAULT_TIMEOUT)
        return float(value) if value else None

    @property
    def preview_lines(self) -> int:
        return int(self._section("network").get("preview_lines", DEFAULT_PREVIEW_LINES))

    @property
    def framework_name(self) -> str:
        return str(self._section("framework").get("display_name") or "shell framework")

    @property
    def framework_root(self) -> Path:
        return expand_path(self._section("framework").get("root") or "~/.oh-my-zsh")

    @property
    def framework_installer(self) -> RemoteInstaller:
        return self._installer(self._section("framework"), "framework")

    @property
    def custom_dir(self) -> Path:
        """$ZSH_CUSTOM if set, else <framework root>/custom."""
        env = os.environ.get("ZSH_CUSTOM")
        return expand_path(env) if env else self.framework_root / "custom"

    @property
    def plugins(self) -> List[RepoTarget]:
        entries = self.raw.get("plugins") or []
        if not isinstance(entries, list):
            raise ManifestError("manifest: plugins must be a list")
        out: List[RepoTarget] = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("url"):
                raise ManifestError(f"manifest: plugin entry needs a url: {entry!r}")
            url = str(entry["url"])
            name = str(entry.get("name") or repo_name(url))
            out.append(RepoTarget(url=url, path=self.custom_dir / "plugins" / name))
        return out

    def tool(self, key: str) -> ToolSpec:
        section = self._section(key)
        return ToolSpec(
            target=self._install_target(section, key),
            installer=self._installer(section, key),
            init=[str(a) for a in (section.get("init") or [])],
        )

    @property
    def prompt(self) -> ToolSpec:
        return self.tool("prompt")

    @property
    def history(self) -> ToolSpec:
        return self.tool("history")

    @property
    def font(self) -> FontSpec:
        section = self._section("font")
        if not section.get("url"):
            raise ManifestError("manifest: font.url is required")
        return FontSpec(
            name=str(section.get("name") or "Nerd Font"),
            url=str(section["url"]),
            directory=expand_path(section.get("directory") or "~/.local/share/fonts"),
            marker=str(section.get("marker") or ""),
            patterns=[str(p) for p in (section.get("patterns") or ["*NerdFont*.ttf", "*NerdFont*.otf"])],
        )

    @property
    def init_cache(self) -> Path:
        return expand_path(self.raw.get("init_cache") or "~/.cache/zsh-bootstrap")

    @property
    def configs(self) -> List[Dict[str, Any]]:
        """Config entries: `dest` plus either `source` or `render`."""
        entries = self.raw.get("configs") or []
        if not isinstance(entries, list):
            raise ManifestError("manifest: configs must be a list")
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("dest"):
                raise ManifestError(f"manifest: config entry needs a dest: {entry!r}")
            if not (entry.get("source") or entry.get("render")):
                raise ManifestError(f"manifest: config entry needs a source or render: {entry!r}")
        return entries

    def deploy_target(self, entry: Dict[str, Any], source: Optional[Path] = None) -> DeployTarget:
        return DeployTarget(
            source=source if source is not None else expand_path(entry["source"]),
            dest=expand_path(entry["dest"]),
            keep_existing=bool(entry.get("keep_existing", False)),
        )

    @property
    def zshrc_fragments(self) -> List[Dict[str, Any]]:
        fragments = self._section("zshrc").get("fragments") or []
        if not isinstance(fragments, list):
            raise ManifestError("manifest: zshrc.fragments must be a list")
        return fragments


def load_manifest(path: Optional[str] = None) -> Manifest:
    """Load the packaged manifest, merged with the manifest at path if given."""

    raw = _load_yaml(DEFAULT_MANIFEST)
    if path:
        user = Path(path).expanduser().absolute()
        if not user.exists():
            raise ManifestError(f"Manifest not found: {path}")
        raw = _deep_merge(raw, _load_yaml(user))
    return Manifest(raw=raw)
