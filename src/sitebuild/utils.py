"""Small helpers for config lookups and shell-style glob matching.

Globs follow the usual build-tool rules: `*` and `?` stay within one path
segment, `**` spans any number of segments, names starting with a dot are only
matched by a pattern segment that itself starts with a dot, and a leading `!`
excludes whatever the pattern matches. Patterns are evaluated in order, so a
later pattern overrides an earlier one.
"""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple


def _get(d: Dict, *keys, default=None):
    cur = d
    for k in keys:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(k)
        if cur is None:
            return default
    return cur


def _split(path: str) -> List[str]:
    return [p for p in path.replace("\\", "/").strip("/").split("/") if p not in ("", ".")]


def _match_parts(pat: Sequence[str], parts: Sequence[str]) -> bool:
    if not pat:
        return not parts
    head = pat[0]
    if head == "**":
        for i in range(len(parts) + 1):
            if i > 0 and parts[i - 1].startswith("."):
                break
            if _match_parts(pat[1:], parts[i:]):
                return True
        return False
    if not parts:
        return False
    name = parts[0]
    if name.startswith(".") and not head.startswith("."):
        return False
    return fnmatch.fnmatchcase(name, head) and _match_parts(pat[1:], parts[1:])


def match_glob(path: str, pattern: str) -> bool:
    """Match a relative, `/`-separated path against a single glob pattern."""
    return _match_parts(_split(pattern), _split(path))


def matches_any(path: str, patterns: Iterable[str], inherited: bool = False) -> bool:
    """Apply an ordered pattern list (with `!` negations) to one path."""
    selected = inherited
    for pattern in patterns:
        if pattern.startswith("!"):
            if selected and match_glob(path, pattern[1:]):
                selected = False
        elif not selected and match_glob(path, pattern):
            selected = True
    return selected


def expand_globs(cwd: Path, patterns: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Return (dirs, files) under `cwd` selected by `patterns`, relative to `cwd`.

    A selected directory selects everything beneath it unless a negated
    pattern excludes it. Hidden entries are never walked.
    """
    dirs: List[str] = []
    files: List[str] = []
    if not cwd.is_dir():
        return dirs, files
    chosen: Dict[str, bool] = {"": False}
    for root, subdirs, names in os.walk(cwd):
        subdirs[:] = sorted(d for d in subdirs if not d.startswith("."))
        rel_root = Path(root).relative_to(cwd).as_posix()
        rel_root = "" if rel_root == "." else rel_root
        inherited = chosen.get(rel_root, False)
        for d in subdirs:
            rel = f"{rel_root}/{d}" if rel_root else d
            chosen[rel] = matches_any(rel, patterns, inherited)
            if chosen[rel]:
                dirs.append(rel)
        for name in sorted(names):
            if name.startswith("."):
                continue
            rel = f"{rel_root}/{name}" if rel_root else name
            if matches_any(rel, patterns, inherited):
                files.append(rel)
    return dirs, files
