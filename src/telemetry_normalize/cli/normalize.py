"""Normalize command for telemetry-normalize CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from telemetry_normalize.settings import SettingsLoadError


def normalize(
    input_file: Annotated[
        Path,
        typer.Argument(help="Record JSON file to normalize (.json or .json.gz)"),
    ],
    base_path: Annotated[
        str,
        typer.Option("--base-path", "-b", help="Application base path to strip from paths"),
    ],
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help="Record kind: event, envelope or profile"),
    ] = "event",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output filename (default: input.normalized.json)"),
    ] = None,
    runtime_version: Annotated[
        str | None,
        typer.Option("--runtime-version", help="Runtime version written to contexts.runtime"),
    ] = None,
    settings: Annotated[
        Path | None,
        typer.Option("--settings", help="Custom settings JSON file"),
    ] = None,
    max_size: Annotated[
        int | None,
        typer.Option("--max-size", help="Max file size in MB (default: 100, 0=unlimited)"),
    ] = 100,
) -> None:
    """Rewrite local paths and strip PII from a telemetry record.

    Absolute paths under the base path become app:/// paths. Events also get
    their runtime context replaced and their User-Agent header and server
    name removed.

    Args:
        input_file: Record JSON file to normalize
        base_path: Application base path to strip from paths
        kind: Record kind (event, envelope, profile)
        output: Output filename (default: input.normalized.json)
        runtime_version: Runtime version written to contexts.runtime
        settings: Custom settings JSON file to merge with defaults
        max_size: Maximum file size in MB (default: 100, 0=unlimited)

    Example:
        telemetry-normalize normalize crash.json --base-path /opt/myapp
        telemetry-normalize normalize replay.json --kind envelope -b /opt/myapp
        telemetry-normalize normalize crash.json -b /opt/myapp --runtime-version 31.2.0
        telemetry-normalize normalize big.json -b /opt/myapp --max-size 0  # No size limit
    """
    from telemetry_normalize.normalization import (
        RECORD_KINDS,
        RecordSizeError,
        RecordValidationError,
        normalize_record_file,
    )
    from telemetry_normalize.settings import load_runtime_context

    if not input_file.exists():
        typer.echo(f"Error: File not found: {input_file}", err=True)
        raise typer.Exit(1)

    if kind not in RECORD_KINDS:
        typer.echo(f"Error: kind must be one of {', '.join(RECORD_KINDS)}, got {kind}", err=True)
        raise typer.Exit(1)

    if max_size is not None and max_size < 0:
        typer.echo(f"Error: max-size must be >= 0, got {max_size}", err=True)
        raise typer.Exit(1)

    max_size_bytes: int | None = None
    if max_size is not None and max_size > 0:
        max_size_bytes = max_size * 1024 * 1024

    typer.echo(f"Normalizing {kind} {input_file}...")
    typer.echo(f"  Base path: {base_path}")

    try:
        runtime = load_runtime_context(runtime_version, settings)
        result_path = normalize_record_file(
            input_file,
            output,
            kind=kind,
            base_path=base_path,
            runtime=runtime,
            settings_path=settings,
            max_size=max_size_bytes,
        )
    except RecordSizeError as e:
        size_mb = e.size / 1024 / 1024
        limit_mb = e.max_size / 1024 / 1024
        typer.echo(f"Error: File too large ({size_mb:.1f} MB > {limit_mb:.1f} MB limit)", err=True)
        typer.echo("  Use --max-size to increase limit or --max-size 0 to disable", err=True)
        raise typer.Exit(1) from None
    except RecordValidationError as e:
        typer.echo(f"Error: Invalid {kind} file: {e}", err=True)
        raise typer.Exit(1) from None
    except json.JSONDecodeError as e:
        typer.echo(f"Error: Invalid JSON in record file: {e.msg} at line {e.lineno}", err=True)
        raise typer.Exit(1) from None
    except SettingsLoadError as e:
        typer.echo(f"Error: Failed to load settings: {e}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError as e:
        typer.echo(f"Error: File not found: {e.filename}", err=True)
        raise typer.Exit(1) from None
    except PermissionError as e:
        typer.echo(f"Error: Permission denied: {e.filename}", err=True)
        raise typer.Exit(1) from None
    except OSError as e:
        typer.echo(f"Error: I/O error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(f"  Normalized: {result_path}")
    typer.echo()
    typer.echo(f"Check the result before sharing: telemetry-normalize validate {result_path} -b {base_path}")
