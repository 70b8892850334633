from collections.abc import Sequence
from enum import Enum
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from swagger_scan.core.scan import scan_paths
from swagger_scan.models import ScanReport

console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    JSON = "json"
    TABLE = "table"


def _render_table(title: str, headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(title=title, show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def render_summary(report: ScanReport) -> None:
    _render_table(
        "Resources",
        ["resourcePath", "apis", "operations"],
        [
            (r.resource_path, len(r.apis), sum(len(api.operations) for api in r.apis))
            for r in report.resources
        ],
    )
    _render_table(
        "Models",
        ["id", "class", "properties"],
        [(m.id, m.php_class or "", len(m.properties)) for m in report.models],
    )
    warnings = sum(1 for d in report.diagnostics if d.severity == "warning")
    console.print(
        f"Scanned {len(report.files)} file(s): {len(report.partials)} partial(s), "
        f"{warnings} warning(s), {len(report.diagnostics) - warnings} notice(s)"
    )


def scan(
    paths: Annotated[list[str], typer.Argument(help="PHP files or directories to scan.")],
    output: Annotated[OutputFormat, typer.Option("--format", "-f", help="Output format.")] = OutputFormat.JSON,
    exclude: Annotated[
        list[str] | None,
        typer.Option(help="Directory name to skip; repeatable. Defaults to SWAGGER_SCAN_EXCLUDE."),
    ] = None,
    strict: Annotated[bool, typer.Option(help="Exit with status 2 when any warning was reported.")] = False,
) -> None:
    """Extract Swagger resources and models from PHP doc-comments."""
    try:
        report = scan_paths(paths, exclude)
    except (FileNotFoundError, ValueError) as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    if not report.files:
        err_console.print("[red]No PHP files found.[/red]")
        raise typer.Exit(1)

    if output is OutputFormat.JSON:
        typer.echo(report.model_dump_json(by_alias=True, exclude_none=True, indent=2))
    else:
        render_summary(report)

    if strict and any(d.severity == "warning" for d in report.diagnostics):
        raise typer.Exit(2)
