from __future__ import annotations

import sys
import textwrap
from pathlib import Path

import pytest

from sitebuild.cli import discover_tasks
from sitebuild.config import SiteConfig
from sitebuild.core import Pipeline


FAKE_LESSC = """
    import sys
    from pathlib import Path

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    src, dest = Path(args[0]), Path(args[1])
    text = src.read_text()
    if "@import" in text and "--strict-imports" in sys.argv:
        sys.stderr.write("FileError: '" + text.split('"')[1] + "' wasn't found\\n")
        sys.exit(1)
    dest.write_text("/* compiled */\\n" + text)
"""

FAKE_JEKYLL = """
    import json
    import sys
    from pathlib import Path

    dest = Path(sys.argv[sys.argv.index("-d") + 1])
    seen = sorted(p.name for p in dest.iterdir())
    (Path(__file__).parent / "jekyll_seen.json").write_text(json.dumps(seen))
    if "--fail" in sys.argv:
        sys.stderr.write("Liquid Exception: boom\\n")
        sys.exit(3)
    (dest / "index.html").write_text("<html></html>")
"""


def _script(directory: Path, name: str, body: str) -> Path:
    path = directory / name
    path.write_text(textwrap.dedent(body))
    return path


@pytest.fixture
def project(tmp_path):
    """A minimal site checkout with LESS sources and assets."""
    root = tmp_path / "site-src"
    less = root / "_assets" / "less"
    less.mkdir(parents=True)
    for name in ("main", "blog", "resume"):
        (less / f"{name}.less").write_text(f"@color: #333;\n.{name} {{ color: @color; }}\n")
    (root / "_assets" / "js").mkdir()
    (root / "_assets" / "js" / "site.js").write_text("console.log('hi');\n")
    (root / "_assets" / "images" / "x").mkdir(parents=True)
    (root / "_assets" / "images" / "x" / "y.png").write_bytes(b"\x89PNG")
    (root / "_assets" / "images" / "logo.png").write_bytes(b"\x89PNG")
    (root / "_assets" / "font").mkdir()
    (root / "_assets" / "font" / "icons.woff").write_bytes(b"wOFF")
    (root / "_assets" / "articles" / "a1" / "data").mkdir(parents=True)
    (root / "_assets" / "articles" / "a1" / "data" / "t.csv").write_text("a,b\n")
    (root / "_assets" / "scala_is_faster_than_java").mkdir()
    (root / "_assets" / "scala_is_faster_than_java" / "bench.txt").write_text("fast\n")
    (root / "index.html").write_text("<h1>home</h1>\n")
    return root


@pytest.fixture
def tools(tmp_path):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    return {
        "lessc": _script(bin_dir, "fake_lessc.py", FAKE_LESSC),
        "jekyll": _script(bin_dir, "fake_jekyll.py", FAKE_JEKYLL),
        "seen": bin_dir / "jekyll_seen.json",
    }


@pytest.fixture
def make_config(project, tools, tmp_path):
    def _make(**overrides) -> SiteConfig:
        params = {
            "site": {
                "output_dir": str(tmp_path / "out"),
                "generator": [sys.executable, str(tools["jekyll"]), "build"],
            },
            "styles": {"compiler": [sys.executable, str(tools["lessc"])]},
        }
        for section, values in overrides.items():
            params.setdefault(section, {}).update(values)
        return SiteConfig.from_params(params, root=project)

    return _make


@pytest.fixture
def site_config(make_config):
    return make_config()


@pytest.fixture
def pipeline():
    return Pipeline(tasks=discover_tasks(), name="test")
