"""logward CLI entry point.

Provides the `logward` command with subcommands:
  - sanitize: Mask sensitive values in a log file or stdin
  - validate: Load a config file and show what it masks
  - categories: List data categories and their detection patterns
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Optional

import typer
from rich.console import Console

from logward import __version__

if TYPE_CHECKING:
    from logward.masking.engine import SanitizationEngine

app = typer.Typer(
    name="logward",
    help="Mask sensitive values in log text: JSON, key=value pairs, free text and URLs.",
    no_args_is_help=True,
)

_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        _console.print(f"logward {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """logward: sensitive data masking for log text."""


def _build_engine(config_path: Path | None) -> SanitizationEngine:
    """Load config (or defaults) and build an engine, exiting on errors."""
    from logward.config.defaults import default_config
    from logward.config.loader import ConfigValidationError, load_config
    from logward.masking.builder import EngineBuilder
    from logward.masking.patterns import ConfigurationError

    if config_path is None:
        config = default_config()
    else:
        try:
            config = load_config(config_path)
        except FileNotFoundError as e:
            _console.print(f"[bold red]Error:[/bold red] {e}", highlight=False)
            raise typer.Exit(1) from None
        except ConfigValidationError as e:
            _console.print(f"[bold red]Config error:[/bold red] {e}", highlight=False)
            raise typer.Exit(1) from None

    builder = EngineBuilder(config).with_default_formatters()
    try:
        return builder.build()
    except ConfigurationError as e:
        _console.print(f"[bold red]Config error:[/bold red] {e}", highlight=False)
        for err in e.errors:
            _console.print(f"  - {err}", highlight=False)
        raise typer.Exit(1) from None


# ---------------------------------------------------------------------------
# sanitize command
# ---------------------------------------------------------------------------


@app.command()
def sanitize(
    source: Annotated[
        Optional[Path],
        typer.Argument(
            help="Log file to sanitize. Reads stdin when omitted.",
        ),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to logward.yaml. Without this, the built-in default fields are used.",
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Write sanitized text to this file instead of stdout.",
        ),
    ] = None,
    output_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print a JSON summary (line counts and sanitized text) instead of plain text.",
        ),
    ] = False,
) -> None:
    """Mask sensitive values in a log file, line by line.

    Each line is masked on its own, so a key and its value split across
    two lines are not matched.

    Examples:
      logward sanitize app.log                          # default fields, to stdout
      logward sanitize app.log -c logward.yaml -o clean.log
      kubectl logs pod | logward sanitize -c logward.yaml
    """
    engine = _build_engine(config)

    if source is None:
        text = sys.stdin.read()
    else:
        if not source.exists():
            _console.print(f"[bold red]Error:[/bold red] File not found: {source}", highlight=False)
            raise typer.Exit(1)
        text = source.read_text(encoding="utf-8")

    lines = text.splitlines(keepends=True)
    sanitized_lines = [engine.sanitize(line) or line for line in lines]
    changed = sum(1 for before, after in zip(lines, sanitized_lines) if before != after)
    sanitized_text = "".join(sanitized_lines)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(sanitized_text, encoding="utf-8")

    if output_json:
        data = {
            "line_count": len(lines),
            "changed_lines": changed,
            "sanitized_text": sanitized_text,
        }
        if output is not None:
            data["output_file"] = str(output)
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
    elif output is None:
        sys.stdout.write(sanitized_text)
        sys.stdout.flush()

    if output is not None:
        _console.print(
            f"[#00ff88]✓[/#00ff88] {changed} of {len(lines)} line(s) masked → {output}",
            highlight=False,
        )


# ---------------------------------------------------------------------------
# validate command
# ---------------------------------------------------------------------------


@app.command()
def validate(
    config: Annotated[
        Path,
        typer.Argument(help="Path to logward.yaml to validate."),
    ],
) -> None:
    """Load a config file, compile every field, and show what it masks."""
    from logward.report import print_config_report

    engine = _build_engine(config)
    print_config_report(engine, _console)
    _console.print(f"[#00ff88]✓[/#00ff88] {config} is valid", highlight=False)


# ---------------------------------------------------------------------------
# categories command
# ---------------------------------------------------------------------------


@app.command()
def categories() -> None:
    """List data categories and their default detection patterns."""
    from logward.report import print_categories

    print_categories(_console)
