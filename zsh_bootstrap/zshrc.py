"""Render ~/.zshrc from an ordered list of fragments.

Each fragment may carry inline text, a file to source (guarded by a
readability test), or both. Fragments are grouped by their `order` and
keep manifest order within a group, so plugin highlighting always comes after
other plugins and init snippets, and user overrides always come last.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .errors import ManifestError

ORDER = ("early", "framework", "body", "init", "highlighting", "overrides")

HEADER = """\
# ~/.zshrc, generated by zsh-bootstrap.
# Put personal additions in ~/.zshrc.local; it is sourced last.
# Tool init code is cached under $ZSH_BOOTSTRAP_CACHE; rerun zsh-bootstrap after
# upgrading starship or atuin to refresh it.
"""


@dataclass(frozen=True)
class Fragment:
    name: str
    order: str = "body"
    text: str = ""
    source: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Fragment":
        name = str(d.get("name") or "").strip()
        if not name:
            raise ManifestError(f"zshrc fragment needs a name: {d!r}")
        order = str(d.get("order") or "body")
        if order not in ORDER:
            raise ManifestError(f"zshrc fragment {name}: unknown order {order!r} (expected one of {', '.join(ORDER)})")
        text = str(d.get("text") or "")
        source = d.get("source")
        if not text and not source:
            raise ManifestError(f"zshrc fragment {name}: needs text or source")
        return cls(name=name, order=order, text=text, source=str(source) if source else None)


def ordered(fragments: Iterable[Fragment]) -> List[Fragment]:
    # sorted() is stable, so manifest order survives inside each group.
    return sorted(fragments, key=lambda f: ORDER.index(f.order))


def _home_relative(path: Path) -> str:
    home = os.path.expanduser("~")
    s = str(path)
    if s == home or s.startswith(home + os.sep):
        return "$HOME" + s[len(home):]
    return s


def render_fragment(fragment: Fragment) -> str:
    lines = [f"# --- {fragment.name} ---"]
    if fragment.text:
        lines.append(fragment.text.rstrip("\n"))
    if fragment.source:
        lines.append(f'[[ -r "{fragment.source}" ]] && source "{fragment.source}"')
    return "\n".join(lines) + "\n"


def render_zshrc(fragments: Iterable[Dict[str, Any]], *, init_cache: Path) -> str:
    """Return the full .zshrc text for the given fragment mappings."""

    parsed = [Fragment.from_dict(d) for d in fragments]
    names = [f.name for f in parsed]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ManifestError(f"duplicate zshrc fragment names: {', '.join(duplicates)}")

    parts = [HEADER, f'ZSH_BOOTSTRAP_CACHE="{_home_relative(init_cache)}"\n']
    parts.extend(render_fragment(f) for f in ordered(parsed))
    return "\n".join(parts)
