"""Logger setup for the `sitebuild` tree.

The CLI, the pipeline and every task log under `sitebuild.*`. The first use
installs the console format and takes the level from `SITEBUILD_LOG_LEVEL`;
`configure` can later raise or lower the level and add a rotating log file.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path


ROOT_LOGGER = "sitebuild"
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

_configured = False


def _level(name: str | None) -> int:
    level = logging.getLevelName((name or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def configure(level: str | None = None, log_file: Path | None = None) -> logging.Logger:
    global _configured
    tree = logging.getLogger(ROOT_LOGGER)
    if not _configured:
        logging.basicConfig(format=LOG_FORMAT)
        tree.setLevel(_level(os.getenv("SITEBUILD_LOG_LEVEL")))
        _configured = True
    if level:
        tree.setLevel(_level(level))
    if log_file is not None:
        target = os.path.abspath(log_file)
        # One handler per file, even if the CLI callback runs more than once
        if not any(
            isinstance(h, RotatingFileHandler) and h.baseFilename == target
            for h in tree.handlers
        ):
            Path(target).parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(target, maxBytes=1_000_000, backupCount=3)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            tree.addHandler(handler)
    return tree


def get_logger(name: str) -> logging.Logger:
    configure()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
