"""Long-running watch task; also the default task."""

from __future__ import annotations

from ..config import SiteConfig
from ..core import Pipeline, alias, task
from ..watch import Watcher


@task(name="watch")
def watch(config: SiteConfig, pipeline: Pipeline) -> None:
    """Rebuild on changes to stylesheets, assets or Jekyll sources."""
    Watcher(config, pipeline).run()


default = alias("default", ["watch"], description="Same as watch.")
