"""Site build configuration.

The YAML document (see `configs/site.yaml`) is parsed once into an immutable
`SiteConfig`. Every destination is the resolved output directory joined with a
fixed subpath; nothing here checks that source files exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

import yaml

from .errors import ConfigError
from .utils import _get


DEFAULT_CONFIG = "configs/site.yaml"

DEFAULT_OUTPUT_DIR = "../jto.github.io"

DEFAULT_STYLES = {
    "assets/css/main.css": "_assets/less/main.less",
    "assets/css/blog.css": "_assets/less/blog.less",
    "assets/css/resume.css": "_assets/less/resume.less",
}

DEFAULT_COPY_GROUPS = [
    {"name": "articles", "cwd": "_assets", "src": ["articles/**"], "dest": "assets/"},
    {"name": "scripts", "cwd": "_assets", "src": ["js/*"], "dest": "assets/"},
    {"name": "images", "cwd": "_assets", "src": ["images/*"], "dest": "assets/"},
    {"name": "fonts", "cwd": "_assets", "src": ["font/*"], "dest": "assets/"},
    {
        "name": "scala_is_faster_than_java",
        "cwd": "_assets",
        "src": ["scala_is_faster_than_java/*"],
        "dest": "assets/",
    },
]

DEFAULT_WATCH_GROUPS = {
    "less": {"files": ["_assets/**/*.less"], "tasks": ["less-build"]},
    "assets": {"files": ["_assets/**", "!_assets/**/*.less"], "tasks": ["assets-copy"]},
    "jekyllSources": {
        "files": ["*.html", "*.yml", "_posts/**", "_layouts/**", "_includes/**"],
        "tasks": ["jekyll-build"],
    },
}


@dataclass(frozen=True)
class PathMapping:
    sources: Tuple[str, ...]
    dest: Path


@dataclass(frozen=True)
class StyleMapping:
    source: Path
    dest: Path


@dataclass(frozen=True)
class CopyGroup:
    name: str
    cwd: Path
    patterns: Tuple[str, ...]
    dest: Path


@dataclass(frozen=True)
class WatchGroup:
    name: str
    patterns: Tuple[str, ...]
    tasks: Tuple[str, ...]


@dataclass(frozen=True)
class SiteConfig:
    root: Path
    output_dir: Path
    keep_hidden: bool
    generator: Tuple[str, ...]
    compiler: Tuple[str, ...]
    include_paths: Tuple[Path, ...]
    strict_imports: bool
    styles: Tuple[StyleMapping, ...]
    copy_groups: Tuple[CopyGroup, ...]
    watch_groups: Tuple[WatchGroup, ...]
    debounce_ms: int = 1600

    @classmethod
    def from_params(cls, params: dict, root: Path | None = None) -> "SiteConfig":
        root = Path(root or _get(params, "project", "root", default=".")).resolve()
        output_dir = (root / _get(params, "site", "output_dir", default=DEFAULT_OUTPUT_DIR)).resolve()
        if root == output_dir or root.is_relative_to(output_dir):
            # Clearing the output directory would delete the site sources
            raise ConfigError(f"site.output_dir must not contain the project root: {output_dir}")

        styles_files = _get(params, "styles", "files", default=DEFAULT_STYLES)
        if not isinstance(styles_files, dict):
            raise ConfigError("styles.files must map destination paths to LESS sources")
        styles = tuple(
            StyleMapping(source=root / _str(src, f"styles.files[{dest}]"), dest=_under(output_dir, dest))
            for dest, src in styles_files.items()
        )

        groups = []
        copy_groups = _get(params, "assets", "groups", default=DEFAULT_COPY_GROUPS)
        if not isinstance(copy_groups, list):
            raise ConfigError("assets.groups must be a list of copy groups")
        for i, g in enumerate(copy_groups):
            if not isinstance(g, dict) or "src" not in g:
                raise ConfigError(f"assets.groups[{i}] needs at least a 'src' list")
            groups.append(
                CopyGroup(
                    name=str(g.get("name") or f"group{i}"),
                    cwd=root / _str(g.get("cwd", "."), f"assets.groups[{i}].cwd"),
                    patterns=_words(g["src"], f"assets.groups[{i}].src"),
                    dest=_under(output_dir, g.get("dest", "")),
                )
            )

        watch_cfg = _get(params, "watch", "groups", default=DEFAULT_WATCH_GROUPS)
        if not isinstance(watch_cfg, dict):
            raise ConfigError("watch.groups must map group names to {files, tasks}")
        watch_groups = tuple(
            WatchGroup(
                name=name,
                patterns=_words(_get(g, "files", default=[]), f"watch.groups.{name}.files"),
                tasks=_words(_get(g, "tasks", default=[]), f"watch.groups.{name}.tasks"),
            )
            for name, g in watch_cfg.items()
        )
        for wg in watch_groups:
            if not wg.patterns or not wg.tasks:
                raise ConfigError(f"watch group '{wg.name}' needs both 'files' and 'tasks'")

        return cls(
            root=root,
            output_dir=output_dir,
            keep_hidden=bool(_get(params, "site", "keep_hidden", default=True)),
            generator=_words(_get(params, "site", "generator", default=["jekyll", "build"]), "site.generator"),
            compiler=_words(_get(params, "styles", "compiler", default=["lessc"]), "styles.compiler"),
            include_paths=tuple(
                root / p for p in _words(_get(params, "styles", "include_paths", default=["_assets/less"]), "styles.include_paths")
            ),
            strict_imports=bool(_get(params, "styles", "strict_imports", default=True)),
            styles=styles,
            copy_groups=tuple(groups),
            watch_groups=watch_groups,
            debounce_ms=_int(_get(params, "watch", "debounce_ms", default=1600), "watch.debounce_ms"),
        )

    def categories(self) -> Mapping[str, Tuple[PathMapping, ...]]:
        """Read-only view of asset category -> source globs and destination."""
        cats = {
            "stylesheets": tuple(
                PathMapping(sources=(str(s.source),), dest=s.dest) for s in self.styles
            )
        }
        for g in self.copy_groups:
            cats[g.name] = (PathMapping(sources=g.patterns, dest=g.dest),)
        return MappingProxyType(cats)

    def validate_tasks(self, known: Iterable[str]) -> None:
        known = set(known)
        for wg in self.watch_groups:
            missing = [t for t in wg.tasks if t not in known]
            if missing:
                raise ConfigError(
                    f"watch group '{wg.name}' references unknown task(s): {', '.join(missing)}"
                )


def _words(value, key: str = "value") -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, (str, int, float)) for v in value):
        raise ConfigError(f"{key} must be a string or a list of strings, got {value!r}")
    return tuple(str(v) for v in value)


def _int(value, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from e


def _str(value, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a path string, got {value!r}")
    return value


def _under(output_dir: Path, sub: str) -> Path:
    p = Path(_str(sub, "destination"))
    if p.is_absolute() or ".." in p.parts:
        raise ConfigError(f"Destination must stay inside the output directory: {sub}")
    return output_dir / p


def load_config(path: str | Path) -> dict:
    p = Path(path)
    with open(p, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {p} must be a mapping")
    return data


def load_site_config(path: str | Path | None = None) -> SiteConfig:
    """Load a SiteConfig from YAML; a missing default config falls back to built-ins."""
    if path is None or (str(path) == DEFAULT_CONFIG and not Path(path).exists()):
        return SiteConfig.from_params({})
    return SiteConfig.from_params(load_config(path))
