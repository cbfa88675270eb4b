"""
cli.py — Command-line interface for ytflow.

Provides the `ytflow` command group (registered as a console script in
pyproject.toml):

    serve       Run the HTTP API with uvicorn.
    info        Print video metadata as JSON.
    transcribe  Transcribe a video (Whisper with OPENAI_API_KEY, captions otherwise).
    download    Save one rendition of a video to disk.

Usage examples:
    ytflow serve --port 8000
    ytflow info "https://youtu.be/dQw4w9WgXcQ"
    ytflow transcribe "https://www.youtube.com/watch?v=dQw4w9WgXcQ" --format json
    ytflow download "https://youtu.be/dQw4w9WgXcQ" --format mp3
"""

from __future__ import annotations

import json
import sys

import click

from ytflow.config import get_settings
from ytflow.errors import YtflowError
from ytflow.formats import OUTPUT_FORMATS, QUALITY_MAP, sanitize_title
from ytflow.logging_config import setup_logging
from ytflow.orchestrator import DownloadService, FallbackRedirect, TranscriptionService


def _fail(exc: YtflowError) -> None:
    # No traceback: the message already says what went wrong.
    click.echo(f"Error: {exc.message}", err=True)
    sys.exit(1)


def _write_or_echo(text: str, output: str | None) -> None:
    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.write("\n")
        click.echo(f"Written to {output}", err=True)
    else:
        click.echo(text)


# ---------------------------------------------------------------------------
# CLI group — the top-level `ytflow` command
# ---------------------------------------------------------------------------

@click.group()
@click.option("--log-level", default=None, help="Override YTFLOW_LOG_LEVEL (DEBUG, INFO, ...).")
def main(log_level: str | None) -> None:
    """
    ytflow — YouTube metadata, downloads and transcripts.
    """
    setup_logging(log_level or get_settings().log_level)


# ---------------------------------------------------------------------------
# Subcommand: serve
# ---------------------------------------------------------------------------

@main.command()
@click.option("--host", default=None, help="Bind address (default: YTFLOW_HOST).")
@click.option("--port", type=int, default=None, help="Port (default: YTFLOW_PORT).")
@click.option("--reload", is_flag=True, default=False, help="Reload on code changes.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Run the HTTP API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "ytflow.api:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# Subcommand: info
# ---------------------------------------------------------------------------

@main.command()
@click.argument("url")
def info(url: str) -> None:
    """
    Print metadata for the video at URL as JSON.
    """
    service = DownloadService.from_settings(get_settings())
    try:
        payload = service.describe(url)
    except YtflowError as exc:
        _fail(exc)
        return
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Subcommand: transcribe
# ---------------------------------------------------------------------------

@main.command()
@click.argument("url")
@click.option(
    "--language", "-l",
    default="auto",
    show_default=True,
    help="Language hint for Whisper; 'auto' lets it detect the language.",
)
@click.option(
    "--format", "-f",
    "fmt",                           # avoid shadowing the builtin "format"
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output: transcript text only, or the full JSON response.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write output to a file instead of stdout.",
)
def transcribe(url: str, language: str, fmt: str, output: str | None) -> None:
    """
    Transcribe the video at URL.

    Uses Whisper when OPENAI_API_KEY is set, YouTube captions otherwise.
    """
    service = TranscriptionService.from_settings(get_settings())
    try:
        payload = service.transcribe(url, language=language)
    except YtflowError as exc:
        _fail(exc)
        return

    click.echo(f"Source: {payload['source']}", err=True)
    if fmt == "json":
        text = json.dumps(payload, indent=2, ensure_ascii=False)
    else:
        text = payload["transcript"]
    _write_or_echo(text, output)


# ---------------------------------------------------------------------------
# Subcommand: download
# ---------------------------------------------------------------------------

@main.command()
@click.argument("url")
@click.option(
    "--format", "-f",
    "fmt",
    type=click.Choice(list(OUTPUT_FORMATS), case_sensitive=False),
    default="mp4",
    show_default=True,
    help="Output container.",
)
@click.option(
    "--quality", "-q",
    type=click.Choice(list(QUALITY_MAP)),
    default="1080p",
    show_default=True,
    help="Quality tier for video downloads (falls back to 720p, then any).",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Destination file.  Defaults to '<title>.<format>' in the current directory.",
)
def download(url: str, fmt: str, quality: str, output: str | None) -> None:
    """
    Save one rendition of the video at URL.

    When the file can't be produced, prints a third-party downloader link
    instead and exits with status 2.
    """
    service = DownloadService.from_settings(get_settings())
    try:
        result = service.fetch_file(url, fmt=fmt, quality=quality)
    except YtflowError as exc:
        _fail(exc)
        return

    if isinstance(result, FallbackRedirect):
        click.echo(f"Could not download ({result.reason}).", err=True)
        click.echo(f"Try: {result.location}")
        sys.exit(2)

    path = output or f"{sanitize_title(result.title)}.{result.fmt}"
    with open(path, "wb") as fh:
        fh.write(result.content)
    click.echo(f"Saved {len(result.content)} bytes to {path}", err=True)
