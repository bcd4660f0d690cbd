"""docsniff CLI - doc comment checks for PHP token dumps."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from docsniff import __version__
from docsniff.config import load_config
from docsniff.sniffs import FileResult, RunSummary, SniffRunner, tag_table

app = typer.Typer(
    name="docsniff",
    help="docsniff - Check file and class doc comments in PHP token dumps.",
    add_completion=False,
)

# Rich consoles for output
console = Console()
err_console = Console(stderr=True)

# Exit code conventions
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Bad input or configuration
EXIT_VALIDATION_FAILED = 2  # Errors reported for the checked files


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------


def _output_success(message: str, quiet: bool = False) -> None:
    """Print a success message."""
    if not quiet:
        console.print(f"[green]Success:[/green] {message}")


def _output_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[red]Error:[/red] {message}")


def _exit_error(message: str, exit_code: int = EXIT_USER_ERROR) -> None:
    """Print error and exit."""
    _output_error(message)
    raise typer.Exit(code=exit_code)


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _file_result_to_dict(result: FileResult) -> dict[str, Any]:
    return {
        "source": result.source,
        "status": result.status,
        "diagnostics": [
            {
                "line": d.line,
                "position": d.position,
                "severity": d.severity,
                "code": d.code,
                "kind": d.kind,
                "message": d.text,
            }
            for d in result.diagnostics
        ],
        "metrics": [
            {"position": m.position, "name": m.name, "value": m.value} for m in result.metrics
        ],
    }


def _summary_to_dict(summary: RunSummary) -> dict[str, Any]:
    return {
        "status": summary.status,
        "files_checked": summary.files_checked,
        "errors": summary.errors,
        "warnings": summary.warnings,
        "files": [_file_result_to_dict(r) for r in summary.results],
    }


def _print_file_result(result: FileResult) -> None:
    """Print the diagnostics of one file as a table."""
    if not result.diagnostics:
        return

    table = Table(title=escape(result.source), title_justify="left")
    table.add_column("Line", justify="right")
    table.add_column("Severity")
    table.add_column("Code", style="cyan")
    table.add_column("Message")

    for d in result.diagnostics:
        severity = "[red]ERROR[/red]" if d.severity == "error" else "[yellow]WARNING[/yellow]"
        table.add_row(
            str(d.line) if d.line is not None else "-",
            severity,
            d.code,
            escape(d.text),
        )

    console.print(table)


# -----------------------------------------------------------------------------
# Version and Main Callbacks
# -----------------------------------------------------------------------------


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"docsniff version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """docsniff - Check file and class doc comments in PHP token dumps."""
    pass


# -----------------------------------------------------------------------------
# Check Command
# -----------------------------------------------------------------------------


@app.command()
def check(
    paths: list[Path] = typer.Argument(
        ...,
        help="JSON token dumps to check.",
    ),
    enforce_package_naming: bool | None = typer.Option(
        None,
        "--enforce-package-naming/--no-enforce-package-naming",
        help="Report @package/@subpackage names that are not underscore names.",
    ),
    report_php_version: bool | None = typer.Option(
        None,
        "--report-php-version/--no-report-php-version",
        help="Warn when a file comment does not mention the PHP version.",
    ),
    sequential: bool = typer.Option(
        False,
        "--sequential",
        help="Check files one after another instead of in parallel.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output for CI.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging.",
    ),
) -> None:
    """Check the doc comments of one or more token dumps.

    Exits with code 2 if any error is reported. Warnings do not cause failure.
    """
    _configure_logging(verbose)

    try:
        config = load_config(
            cli_overrides={
                "enforce_package_naming": enforce_package_naming,
                "report_missing_php_version": report_php_version,
            }
        )
    except ValueError as e:
        _exit_error(f"Invalid configuration: {e}")
        return

    runner = SniffRunner(config, parallel=not sequential)
    summary = runner.check_paths(paths)

    if json_output:
        console.print_json(json.dumps(_summary_to_dict(summary)))
    else:
        if not quiet:
            for result in summary.results:
                _print_file_result(result)

        counts = (
            f"{summary.files_checked} file(s), "
            f"{summary.errors} error(s), {summary.warnings} warning(s)"
        )
        if summary.status == "pass":
            _output_success(f"Doc comments OK: {counts}", quiet)
        else:
            _output_error(f"Doc comment check failed: {counts}")

    if summary.status == "fail":
        raise typer.Exit(code=EXIT_VALIDATION_FAILED)


# -----------------------------------------------------------------------------
# Rules Command
# -----------------------------------------------------------------------------


@app.command()
def rules(
    scope: str = typer.Option(
        "class",
        "--scope",
        "-s",
        help="Comment scope to show: file or class.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    ),
) -> None:
    """Show the tag rules for file or class doc comments."""
    try:
        tags = tag_table(scope)  # type: ignore[arg-type]
    except KeyError:
        _exit_error(f"Unknown scope '{scope}'. Use 'file' or 'class'.")
        return

    if json_output:
        data = [
            {
                "tag": rule.name,
                "required": rule.required,
                "allow_multiple": rule.allow_multiple,
                "order": rule.order_text,
            }
            for rule in tags
        ]
        console.print_json(json.dumps({"scope": scope, "tags": data}))
        return

    table = Table(title=f"{scope.capitalize()} comment tags", title_justify="left")
    table.add_column("Tag", style="cyan")
    table.add_column("Required")
    table.add_column("Multiple")
    table.add_column("Order")
    for rule in tags:
        table.add_row(
            rule.name,
            "yes" if rule.required else "no",
            "yes" if rule.allow_multiple else "no",
            rule.order_text,
        )
    console.print(table)


if __name__ == "__main__":
    app()
