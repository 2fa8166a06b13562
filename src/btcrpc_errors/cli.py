"""Command-line interface for btcrpc_errors.

Commands:
    decode        Decode an RPC error response into category, case and fields
    broadcast     Classify a ``sendrawtransaction`` rejection
    check-tables  Compile case tables and summarise them

Exit codes: 0 on success, 1 when the input cannot be decoded or a table is
invalid.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from btcrpc_errors import __version__
from btcrpc_errors.core.config import LogConfig
from btcrpc_errors.core.logging import configure_logging
from btcrpc_errors.exceptions import DecodeError, SpecError
from btcrpc_errors.rpc.broadcast import parse_sendrawtransaction_error
from btcrpc_errors.rpc.decoder import RpcErrorDecoder
from btcrpc_errors.rpc.models import RpcError
from btcrpc_errors.rpc.tables import load_case_tables

console = Console()

app = typer.Typer(
    name="btcrpc-errors",
    help="Classify Bitcoin Core RPC error responses",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"btcrpc-errors v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            "-L",
            help="Logging level (DEBUG, INFO, WARNING, ERROR)",
            envvar="BTCRPC_ERRORS_LOG_LEVEL",
        ),
    ] = "WARNING",
    log_format: Annotated[
        str,
        typer.Option(
            "--log-format",
            help="Log format (console, json)",
            envvar="BTCRPC_ERRORS_LOG_FORMAT",
        ),
    ] = "console",
) -> None:
    """Classify Bitcoin Core RPC error responses."""
    try:
        config = LogConfig(level=log_level.upper(), format=log_format)
    except ValidationError as e:
        console.print(f"[red]Logging configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None
    configure_logging(
        level=config.level,
        format=config.format,
        file_path=config.file_path,
        include_timestamps=config.include_timestamps,
    )


def _read_text(text: str) -> str:
    return sys.stdin.read() if text == "-" else text


def _error_to_dict(error: RpcError) -> dict[str, Any]:
    return {
        "code": error.code,
        "message": error.message,
        "category": error.category.rpc_name if error.category is not None else None,
        "case": error.case,
        "fields": list(error.detail.fields) if error.detail is not None else [],
    }


@app.command()
def decode(
    text: str = typer.Argument(..., help="Response text, or '-' to read stdin"),
    strict: bool = typer.Option(
        False, "--strict", help="Require the text to be exactly one JSON object",
    ),
    tables: Path | None = typer.Option(
        None, "--tables", "-t", help="Case tables YAML (default: packaged tables)",
        exists=True, readable=True,
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Decode an RPC error response."""
    try:
        decoder = RpcErrorDecoder(load_case_tables(tables))
        error = decoder.decode(_read_text(text), strict=strict)
    except (DecodeError, SpecError, ValueError, yaml.YAMLError) as e:
        if json_output:
            typer.echo(json.dumps({"error": type(e).__name__, "detail": str(e)}))
        else:
            console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    if json_output:
        typer.echo(json.dumps(_error_to_dict(error)))
        return

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="bold cyan")
    table.add_column("Value")
    table.add_row("Code", str(error.code))
    table.add_row(
        "Category",
        error.category.rpc_name if error.category is not None else "[yellow]unknown[/yellow]",
    )
    if error.detail is not None:
        table.add_row("Case", escape(error.detail.case))
        for i, value in enumerate(error.detail.fields):
            table.add_row(f"Field {i}", escape(repr(value)))
    table.add_row("Message", escape(error.message))
    console.print(table)


@app.command()
def broadcast(
    text: str = typer.Argument(..., help="Client error text, or '-' to read stdin"),
) -> None:
    """Classify a 'sendrawtransaction RPC error: {...}' string."""
    try:
        result = parse_sendrawtransaction_error(_read_text(text))
    except DecodeError as e:
        console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    if result is None:
        console.print("[yellow]Not a sendrawtransaction rejection[/yellow]")
        raise typer.Exit(1)
    console.print(escape(str(result)))


@app.command("check-tables")
def check_tables(
    tables: Path | None = typer.Argument(
        None, help="Case tables YAML (default: packaged tables)",
        exists=True, readable=True,
    ),
) -> None:
    """Compile case tables and list their cases."""
    try:
        decoder = RpcErrorDecoder(load_case_tables(tables))
    except ValidationError as e:
        console.print(f"[red]Invalid case tables:[/red]\n{escape(str(e))}")
        raise typer.Exit(1) from None
    except (SpecError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    summary = Table(title="Case Tables")
    summary.add_column("Code", justify="right", style="cyan")
    summary.add_column("Category", style="bold")
    summary.add_column("Cases", justify="right")
    summary.add_column("Patterns", justify="right")
    summary.add_column("Catch-all", style="dim")
    for category, classifier in sorted(decoder.classifiers.items()):
        summary.add_row(
            str(int(category)),
            category.rpc_name,
            str(len(classifier.case_names)),
            str(len(classifier.entries)),
            classifier.catch_all or "-",
        )
    console.print(summary)
    console.print("[green]All tables compiled[/green]")


if __name__ == "__main__":
    app()
