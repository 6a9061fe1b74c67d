"""File watcher that dispatches change batches to build tasks.

Changes come from `watchfiles.watch`, which debounces bursts of filesystem
events into one batch. Each batch is matched against the configured watch
groups and every matching group's tasks run once, one group at a time, in
declaration order. Events arriving while a task runs are picked up by the
next batch.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

from watchfiles import Change, DefaultFilter, watch

from .config import SiteConfig, WatchGroup
from .logging import get_logger
from .utils import matches_any


ChangeBatch = Set[Tuple[Change, str]]


class Watcher:
    def __init__(
        self,
        config: SiteConfig,
        pipeline,
        changes: Optional[Iterable[ChangeBatch]] = None,
    ):
        self.config = config
        self.pipeline = pipeline
        self._changes = changes
        self.logger = get_logger("sitebuild.watch")

    def change_stream(self) -> Iterable[ChangeBatch]:
        if self._changes is not None:
            return self._changes
        # Keep generated output from retriggering the watcher
        ignore = [str(self.config.output_dir)]
        return watch(
            self.config.root,
            watch_filter=DefaultFilter(ignore_paths=ignore),
            debounce=self.config.debounce_ms,
        )

    def relative_paths(self, batch: ChangeBatch) -> List[str]:
        rel: List[str] = []
        for _, raw in batch:
            p = Path(raw)
            if p.is_absolute():
                try:
                    p = p.relative_to(self.config.root)
                except ValueError:
                    continue
            rel.append(p.as_posix())
        return sorted(set(rel))

    def groups_for(self, paths: Iterable[str]) -> List[WatchGroup]:
        paths = list(paths)
        return [
            g
            for g in self.config.watch_groups
            if any(matches_any(p, g.patterns) for p in paths)
        ]

    def handle(self, batch: ChangeBatch) -> List[str]:
        """Run the tasks of every group matched by `batch`; return the group names."""
        paths = self.relative_paths(batch)
        triggered = []
        for group in self.groups_for(paths):
            self.logger.info(
                ">> %s changed (%s); running %s",
                group.name,
                ", ".join(p for p in paths if matches_any(p, group.patterns)),
                ", ".join(group.tasks),
            )
            triggered.append(group.name)
            try:
                self.pipeline.run(self.config, group.tasks)
            except Exception as e:  # noqa: BLE001
                self.logger.error("%s failed, still watching: %s", ", ".join(group.tasks), e)
        return triggered

    def run(self) -> None:
        self.logger.info(
            "Watching %s (%s). Ctrl+C to stop.",
            self.config.root,
            ", ".join(g.name for g in self.config.watch_groups),
        )
        try:
            for batch in self.change_stream():
                self.handle(batch)
        except KeyboardInterrupt:
            self.logger.info("Stopped watching.")
