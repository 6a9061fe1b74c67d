"""Error types raised by build tasks and configuration loading."""

from __future__ import annotations


class TaskError(Exception):
    """A build task failed; the runner stops the current chain."""


class StyleBuildError(TaskError):
    """The LESS compiler exited non-zero or could not be started."""


class SiteGenerateError(TaskError):
    """The site generator exited non-zero or could not be started."""


class AssetCopyError(TaskError):
    def __init__(self, failures: dict[str, str]):
        self.failures = dict(failures)
        detail = "; ".join(f"{name}: {msg}" for name, msg in self.failures.items())
        super().__init__(f"Asset copy failed for {len(self.failures)} group(s): {detail}")


class ConfigError(ValueError):
    """Malformed site configuration or a reference to an unknown task."""
