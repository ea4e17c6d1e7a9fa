"""Polling watcher that reruns the build when sources or views change.

A running build is never interrupted. Changes that land while it runs are
seen on the next poll and produce one follow-up build; bursts of changes are
debounced into a single rebuild.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable

from twstrata.builder import collect_view_files
from twstrata.config import TwStrataConfig
from twstrata.errors import TwStrataError

logger = logging.getLogger(__name__)

Snapshot = dict[Path, tuple[int, int]]


class Watcher:
    """Watches the source directory and the view globs of a config."""

    def __init__(
        self,
        config: TwStrataConfig,
        build: Callable[[], object],
        *,
        interval: float | None = None,
        debounce: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self._build = build
        self._interval = config.watch_interval if interval is None else interval
        self._debounce = config.watch_debounce if debounce is None else debounce
        self._sleep = sleep
        self._snapshot: Snapshot = {}
        self.stop_event = threading.Event()

    def _watched_files(self) -> list[Path]:
        files: list[Path] = []
        source_dir = self.config.source_path
        out_dir = self.config.out_path.resolve()
        if source_dir.is_dir():
            for path in sorted(source_dir.rglob("*.css")):
                # Hidden files include the engine's staged inputs.
                if path.name.startswith("."):
                    continue
                resolved = path.resolve()
                if out_dir in resolved.parents:
                    continue
                files.append(resolved)
        files.extend(collect_view_files(self.config.views, self.config.root))
        return files

    def snapshot(self) -> Snapshot:
        snap: Snapshot = {}
        for path in self._watched_files():
            try:
                stat = path.stat()
            except OSError:
                continue
            snap[path] = (stat.st_mtime_ns, stat.st_size)
        return snap

    @staticmethod
    def diff(before: Snapshot, after: Snapshot) -> list[Path]:
        """Paths that were added, removed or modified between two snapshots."""
        changed = [p for p, sig in after.items() if before.get(p) != sig]
        changed.extend(p for p in before if p not in after)
        return changed

    def start(self) -> None:
        """Record the current file state as the baseline."""
        self._snapshot = self.snapshot()

    def poll(self) -> list[Path]:
        current = self.snapshot()
        changed = self.diff(self._snapshot, current)
        self._snapshot = current
        return changed

    def rebuild(self) -> bool:
        """Run the build; fatal build errors are logged and watching goes on."""
        try:
            self._build()
        except TwStrataError as exc:
            logger.error("Build failed: %s", exc)
            return False
        return True

    def run(self, max_builds: int | None = None) -> int:
        """Poll until stopped (or until *max_builds* rebuilds); return the count."""
        self.start()
        logger.info(
            "Watching for changes in %s and %d view pattern(s)",
            self.config.source_path,
            len(self.config.views),
        )
        builds = 0
        while not self.stop_event.is_set():
            changed = self.poll()
            if not changed:
                self._sleep(self._interval)
                continue
            while True:
                self._sleep(self._debounce)
                more = self.poll()
                if not more:
                    break
                changed.extend(more)
            for path in dict.fromkeys(changed):
                logger.info("File changed: %s", path)
            self.rebuild()
            builds += 1
            if max_builds is not None and builds >= max_builds:
                break
        return builds

    def stop(self) -> None:
        self.stop_event.set()
