import asyncio
import contextlib
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from swagger_scan.cli.scan import render_summary
from swagger_scan.models import ScanReport
from swagger_scan.watcher.rescan import RescanWatcher

console = Console()


def watch(
    directory: Annotated[str, typer.Argument(help="Directory to watch.")] = ".",
    exclude: Annotated[list[str] | None, typer.Option(help="Directory name to skip; repeatable.")] = None,
    debounce: Annotated[int, typer.Option(help="Milliseconds to wait for changes to settle.")] = 400,
) -> None:
    """Rescan a directory whenever one of its PHP files changes."""
    if not Path(directory).is_dir():
        console.print(f"[red]Not a directory: {directory}[/red]")
        raise typer.Exit(1)

    async def _show(report: ScanReport, changed: set[Path]) -> None:
        if changed:
            console.print(f"[green]Changed[/green] {', '.join(sorted(str(p) for p in changed))}")
        render_summary(report)

    async def _run() -> None:
        watcher = RescanWatcher(directory, _show, exclude, debounce)
        await watcher.rescan(set())
        await watcher.start()
        try:
            await watcher.wait()
        finally:
            await watcher.stop()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run())
