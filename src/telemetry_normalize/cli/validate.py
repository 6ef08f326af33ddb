"""Validate command for telemetry-normalize CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer


def validate(
    record_file: Annotated[
        Path | None,
        typer.Argument(help="Record JSON file to validate"),
    ] = None,
    directory: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Directory to scan for record files"),
    ] = None,
    base_path: Annotated[
        str | None,
        typer.Option("--base-path", "-b", help="Application base path that must not appear"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", "-s", help="Treat warnings as errors"),
    ] = False,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Scan directory recursively"),
    ] = False,
) -> None:
    """Validate record files for leftover local paths and PII.

    Scans normalized records for the base path, home directory paths,
    User-Agent headers and server names that should not be shipped.

    Args:
        record_file: Single record file to validate
        directory: Directory containing record files to scan
        base_path: Application base path that must not appear
        strict: Treat warnings as errors (exit code 1)
        recursive: Scan directory recursively for record files

    Example:
        telemetry-normalize validate crash.normalized.json -b /opt/myapp
        telemetry-normalize validate --dir ./fixtures --recursive
        telemetry-normalize validate crash.normalized.json --strict
    """
    from telemetry_normalize.validation import validate_record_file

    record_files: list[Path] = []

    if directory:
        if not directory.exists():
            typer.echo(f"Error: Directory not found: {directory}", err=True)
            raise typer.Exit(1)

        if recursive:
            record_files.extend(directory.rglob("*.json"))
            record_files.extend(directory.rglob("*.json.gz"))
        else:
            record_files.extend(directory.glob("*.json"))
            record_files.extend(directory.glob("*.json.gz"))
    elif record_file:
        if not record_file.exists():
            typer.echo(f"Error: File not found: {record_file}", err=True)
            raise typer.Exit(1)
        record_files.append(record_file)
    else:
        typer.echo("Error: Provide either a record file or --dir option", err=True)
        raise typer.Exit(1)

    if not record_files:
        typer.echo("No record files found")
        raise typer.Exit(0)

    total_errors = 0
    total_warnings = 0

    for file_path in sorted(record_files):
        try:
            findings = validate_record_file(file_path, base_path)
        except json.JSONDecodeError as e:
            typer.echo(f"[ERROR] {file_path}: Invalid JSON: {e.msg} at line {e.lineno}", err=True)
            total_errors += 1
            continue

        if findings:
            typer.echo(f"\n{file_path}:")
            for finding in findings:
                icon = "[ERROR]" if finding.severity == "error" else "[WARN]"
                typer.echo(f"  {icon} [{finding.location}]")
                typer.echo(f"     {finding.field}: {finding.value}")
                typer.echo(f"     Reason: {finding.reason}")

                if finding.severity == "error":
                    total_errors += 1
                else:
                    total_warnings += 1
        else:
            typer.echo(f"[OK] {file_path}: Clean")

    typer.echo(f"\nSummary: {total_errors} errors, {total_warnings} warnings")

    if total_errors > 0:
        raise typer.Exit(1)
    if strict and total_warnings > 0:
        raise typer.Exit(1)
