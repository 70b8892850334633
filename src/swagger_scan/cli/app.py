import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from swagger_scan.cli.scan import scan
from swagger_scan.cli.watch import watch
from swagger_scan.core.config import get_log_level

app = typer.Typer(
    name="swagger-scan",
    help="Extract Swagger API metadata from PHP doc-comments.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (default from SWAGGER_SCAN_LOG_LEVEL or WARNING)."),
    ] = None,
) -> None:
    logging.basicConfig(
        level=(log_level or get_log_level()).upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


app.command("scan")(scan)
app.command("watch")(watch)


def main() -> None:
    app()
