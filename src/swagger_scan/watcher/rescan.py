"""Keep a scan report of a PHP source tree current while its files change."""

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine, Iterable
from pathlib import Path
from typing import Any

from watchfiles import Change, DefaultFilter, awatch

from swagger_scan.core.config import get_exclude_dirs
from swagger_scan.core.languages import is_supported_path
from swagger_scan.core.scan import scan_paths
from swagger_scan.models import ScanReport

logger = logging.getLogger(__name__)

ReportCallback = Callable[[ScanReport, set[Path]], Coroutine[Any, Any, None]]


class PhpSourceFilter(DefaultFilter):
    """Pass changes to PHP sources that are not inside an excluded directory."""

    def __init__(self, exclude: Iterable[str]) -> None:
        super().__init__(ignore_dirs=(*DefaultFilter.ignore_dirs, *exclude))

    def __call__(self, change: Change, path: str) -> bool:
        return is_supported_path(Path(path)) and super().__call__(change, path)


class RescanWatcher:
    """Rescans ``directory`` after each debounced batch of PHP changes.

    Every rescan builds a fresh report with ``scan_paths`` in a worker thread
    and hands it to ``on_report`` together with the changed paths.
    """

    def __init__(
        self,
        directory: str | Path,
        on_report: ReportCallback,
        exclude: Iterable[str] | None = None,
        debounce_ms: int = 400,
    ) -> None:
        self._directory = Path(directory)
        self._on_report = on_report
        self._exclude = list(get_exclude_dirs() if exclude is None else exclude)
        self._debounce_ms = debounce_ms
        self._task: asyncio.Task[None] | None = None

    async def rescan(self, changed: set[Path]) -> ScanReport:
        report = await asyncio.to_thread(scan_paths, [self._directory], self._exclude)
        await self._on_report(report, changed)
        return report

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info("Watching %s for PHP changes", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        changes_iter = awatch(
            self._directory,
            watch_filter=PhpSourceFilter(self._exclude),
            debounce=self._debounce_ms,
        )
        async for changes in changes_iter:
            changed = {Path(path) for _, path in changes}
            logger.info("Rescanning %s after %d changed file(s)", self._directory, len(changed))
            try:
                await self.rescan(changed)
            except (OSError, ValueError):
                # A file can vanish between the change event and the scan.
                logger.exception("Rescan of %s failed", self._directory)
