"""Command line front end: send one BibTeX document and print what the service returned."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from .client import BibtexImportClient
from .config import ClientSettings
from .logger import get_logger

EXAMPLE_ENTRY = """@article{an-id,
    title = "A Title",
    author = "John Smith and Mary Stone"
}
"""

app = typer.Typer(add_completion=False, help="Post BibTeX to an import-bibtex service.")


def _read_source(source: Optional[str]) -> str:
    if source is None:
        return EXAMPLE_ENTRY
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise typer.BadParameter(f"cannot read {source}: {e}", param_hint="SOURCE") from e


@app.command()
def run(
    source: Optional[str] = typer.Argument(
        None, help="BibTeX file to send ('-' for stdin). Defaults to a built-in example entry."
    ),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", help="Service URL."),
    connect_timeout: Optional[float] = typer.Option(None, "--connect-timeout", help="Connect timeout (seconds)."),
    read_timeout: Optional[float] = typer.Option(None, "--read-timeout", help="Read timeout (seconds)."),
) -> None:
    """Send the document, print the response status and, on 200, the returned JSON."""
    overrides = {
        "endpoint": endpoint,
        "connect_timeout_seconds": connect_timeout,
        "read_timeout_seconds": read_timeout,
    }
    try:
        settings = ClientSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e

    get_logger(level=settings.log_level)
    bibtex_text = _read_source(source)

    with BibtexImportClient.from_settings(settings) as client:
        result = client.submit_safely(bibtex_text)

    # Failures are reported, not raised; the command still exits normally.
    if not result.ok:
        if result.error.response is not None:
            typer.echo(result.error.response.status_line)
        typer.echo(str(result.error), err=True)
        return

    response = result.response
    typer.echo(response.status_line)
    if response.json is not None:
        typer.echo(json.dumps(response.json, indent=2, ensure_ascii=False))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
