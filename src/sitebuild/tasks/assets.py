"""Static asset copying."""

from __future__ import annotations

import shutil
from pathlib import Path

from ..config import CopyGroup, SiteConfig
from ..core import task
from ..errors import AssetCopyError
from ..logging import get_logger
from ..utils import expand_globs


def _copy_linked_dir(src: Path, target: Path) -> int:
    copied = 0

    def copy(s, d):
        nonlocal copied
        copied += 1
        return shutil.copy2(s, d)

    shutil.copytree(
        src, target, copy_function=copy, dirs_exist_ok=True, ignore=shutil.ignore_patterns(".*")
    )
    return copied


def copy_group(group: CopyGroup, logger=None) -> int:
    """Copy every match of `group.patterns` under `group.cwd` into `group.dest`.

    Relative paths are preserved and nothing at the destination is deleted.
    Returns the number of files copied.
    """
    logger = logger or get_logger("sitebuild.tasks.assets-copy")
    dirs, files = expand_globs(group.cwd, group.patterns)
    if not dirs and not files:
        logger.warning("No files matched %s in %s", ", ".join(group.patterns), group.cwd)
        return 0
    linked = 0
    for rel in dirs:
        src = Path(group.cwd) / rel
        if src.is_symlink():
            # os.walk does not descend into linked directories
            linked += _copy_linked_dir(src, group.dest / rel)
            logger.debug("Followed linked directory %s", src)
        else:
            (group.dest / rel).mkdir(parents=True, exist_ok=True)
    for rel in files:
        target = group.dest / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(Path(group.cwd) / rel, target)
    logger.debug("Copied %d file(s) for group %s", len(files) + linked, group.name)
    return len(files) + linked


@task(name="assets-copy")
def assets_copy(config: SiteConfig) -> int:
    """Copy scripts, images, fonts and article bundles into the output directory."""
    logger = get_logger("sitebuild.tasks.assets-copy")
    copied = 0
    failures: dict[str, str] = {}
    for group in config.copy_groups:
        try:
            copied += copy_group(group, logger)
        except OSError as e:
            logger.error("Copy failed for group %s: %s", group.name, e)
            failures[group.name] = str(e)
    logger.info("Copied %d file(s) into %s", copied, config.output_dir)
    if failures:
        raise AssetCopyError(failures)
    return copied
