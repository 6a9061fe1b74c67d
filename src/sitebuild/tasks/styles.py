"""LESS compilation task.

Runs the external `lessc` compiler once per configured stylesheet mapping.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import List

from ..config import SiteConfig, StyleMapping
from ..core import task
from ..errors import StyleBuildError
from ..logging import get_logger


def lessc_command(config: SiteConfig, mapping: StyleMapping) -> List[str]:
    cmd = list(config.compiler)
    if config.include_paths:
        cmd.append("--include-path=" + os.pathsep.join(str(p) for p in config.include_paths))
    if config.strict_imports:
        cmd.append("--strict-imports")
    cmd += [str(mapping.source), str(mapping.dest)]
    return cmd


def compile_less(config: SiteConfig, mapping: StyleMapping) -> Path:
    mapping.dest.parent.mkdir(parents=True, exist_ok=True)
    cmd = lessc_command(config, mapping)
    try:
        proc = subprocess.run(cmd, cwd=config.root, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise StyleBuildError(f"LESS compiler not found: {config.compiler[0]}") from e
    if proc.returncode != 0:
        raise StyleBuildError(
            f"lessc failed for {mapping.source} (exit {proc.returncode}):\n"
            + (proc.stderr or proc.stdout or "").strip()
        )
    return mapping.dest


@task(name="less-build")
def less_build(config: SiteConfig) -> List[Path]:
    """Compile LESS stylesheets into the output directory."""
    logger = get_logger("sitebuild.tasks.less-build")
    written = []
    for mapping in config.styles:
        logger.info("lessc %s -> %s", mapping.source, mapping.dest)
        written.append(compile_less(config, mapping))
    logger.info("Compiled %d stylesheet(s)", len(written))
    return written
