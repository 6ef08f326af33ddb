"""Main CLI entry point for telemetry-normalize.

Provides commands for:
- normalize: Rewrite local paths and strip PII from a record file
- validate: Check record files for leftover paths and PII
"""

from __future__ import annotations

try:
    import typer
except ImportError as e:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install telemetry-normalize[cli]"
    ) from e

from telemetry_normalize.cli.normalize import normalize
from telemetry_normalize.cli.validate import validate

app = typer.Typer(
    name="telemetry-normalize",
    help="Normalize local paths in telemetry records.",
    no_args_is_help=True,
)

app.command()(normalize)
app.command()(validate)


def version_callback(value: bool) -> None:
    """Print version and exit.

    Args:
        value: True if --version flag was provided
    """
    if value:
        from telemetry_normalize import __version__

        typer.echo(f"telemetry-normalize {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    r"""Normalize local paths in telemetry records.

    \b
    Examples:
        telemetry-normalize normalize crash.json --base-path /opt/myapp
        telemetry-normalize normalize replay.json -k envelope -b /opt/myapp
        telemetry-normalize validate crash.normalized.json -b /opt/myapp
    """


if __name__ == "__main__":
    app()
