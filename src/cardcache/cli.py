"""Typer CLI definition for cardcache."""

import asyncio
import logging
from dataclasses import replace
from pathlib import Path

import typer

from .cache.models import AssetKind
from .config import generate_config, get_config_path, load_config
from .errors import (
    CacheError,
    DownloadFailed,
    InvalidImageData,
    InvalidInput,
    IOFailure,
    NetworkError,
)
from .services import CacheServices

app = typer.Typer(help="Fetch, inspect and clear the flashcard content cache")

_state: dict = {"debug": False, "root": None}


def format_size(size_bytes: int) -> str:
    """Format a byte count for humans, e.g. 1536 -> "1.5 KB"."""
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


def describe_error(error: Exception) -> str:
    """Turn an exception into the one-line message shown to the user."""
    if isinstance(error, DownloadFailed):
        return f"Download failed with HTTP {error.status_code}"
    if isinstance(error, NetworkError):
        return f"Network error: {error}"
    if isinstance(error, InvalidImageData):
        return "Invalid image data"
    if isinstance(error, IOFailure):
        return f"Cache I/O failed: {error}"
    if isinstance(error, (InvalidInput, CacheError, ValueError)):
        return str(error)
    if isinstance(error, RuntimeError):
        return f"Failed to play audio: {error}"
    return "An unexpected error occurred"


def _fail(error: Exception) -> typer.Exit:
    if _state["debug"]:
        typer.echo(f"Debug - {type(error).__name__}: {error!r}", err=True)
    else:
        typer.echo(f"Error: {describe_error(error)}", err=True)
    return typer.Exit(1)


def _parse_kinds(kind: str | None) -> list[AssetKind]:
    if kind is None:
        return list(AssetKind)
    try:
        return [AssetKind(kind)]
    except ValueError:
        choices = ", ".join(k.value for k in AssetKind)
        raise typer.BadParameter(f"kind must be one of: {choices}") from None


def _run(action):
    """Run an async action against freshly built services."""

    async def runner():
        config = load_config()
        if _state["root"] is not None:
            config = replace(config, cache=replace(config.cache, root=_state["root"]))
        async with CacheServices.create(config) as services:
            return await action(services)

    return asyncio.run(runner())


def _play(path: Path) -> None:
    from .audio import AudioPlayer

    AudioPlayer().play_file(path)


@app.callback()
def main(
    debug: bool = typer.Option(
        False, "--debug", help="Show verbose error messages and cache activity"
    ),
    root: Path | None = typer.Option(
        None, "--root", help="Cache root directory (from config if omitted)"
    ),
) -> None:
    """Fetch, inspect and clear the flashcard content cache."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    _state["debug"] = debug
    _state["root"] = root


@app.command()
def audio(
    text: str = typer.Argument(..., help="Text to synthesize"),
    lang: str = typer.Option(..., "-l", "--lang", help="Language code, e.g. es"),
    play: bool = typer.Option(False, "--play", help="Play the audio afterwards"),
) -> None:
    """Get synthesized speech for TEXT, downloading it on a cache miss."""
    try:
        path = _run(lambda services: services.audio.get(text, lang))
        typer.echo(str(path))
        if play:
            _play(path)
    except (CacheError, ValueError, RuntimeError, OSError) as e:
        raise _fail(e) from None


@app.command()
def image(url: str = typer.Argument(..., help="Photo URL")) -> None:
    """Get the photo at URL, downloading and validating it on a cache miss."""

    async def action(services: CacheServices):
        loaded = await services.image.load_image(url)
        return services.image.cached_path(url), loaded.size

    try:
        path, (width, height) = _run(action)
        typer.echo(f"{path} ({width}x{height})")
    except (CacheError, ValueError, OSError) as e:
        raise _fail(e) from None


@app.command()
def preview(
    url: str = typer.Argument(..., help="Voice-preview clip URL"),
    play: bool = typer.Option(False, "--play", help="Play the clip afterwards"),
) -> None:
    """Get the voice-preview clip at URL, downloading it on a cache miss."""
    try:
        path = _run(lambda services: services.preview.get(url))
        typer.echo(str(path))
        if play:
            _play(path)
    except (CacheError, ValueError, RuntimeError, OSError) as e:
        raise _fail(e) from None


@app.command()
def repair(
    kind: str = typer.Argument(..., help="Asset kind: image or preview"),
    local_path: str = typer.Argument(..., help="Previously recorded local path"),
    url: str | None = typer.Option(None, "--url", help="Remote URL to restore from"),
) -> None:
    """Restore a recorded file from its remote URL if it went missing."""
    if kind not in (AssetKind.IMAGE.value, AssetKind.PREVIEW.value):
        raise typer.BadParameter("kind must be one of: image, preview")

    try:
        result = _run(
            lambda services: services.for_kind(kind).repair(local_path, url)
        )
    except (CacheError, ValueError) as e:
        raise _fail(e) from None

    if not result.available:
        typer.echo("Unavailable")
        raise typer.Exit(1)

    typer.echo(str(result.path))
    if result.repaired:
        typer.echo(f"New local path: {result.new_key}")


@app.command()
def size(
    kind: str | None = typer.Option(None, "-k", "--kind", help="Limit to one kind"),
) -> None:
    """Show the disk usage of each cache."""
    kinds = _parse_kinds(kind)

    async def action(services: CacheServices):
        return {k.value: services.for_kind(k).size_bytes() for k in kinds}

    try:
        sizes = _run(action)
    except (CacheError, ValueError) as e:
        raise _fail(e) from None

    for name, total in sizes.items():
        typer.echo(f"{name}: {format_size(total)}")
    if len(sizes) > 1:
        typer.echo(f"total: {format_size(sum(sizes.values()))}")


@app.command()
def clear(
    kind: str | None = typer.Option(None, "-k", "--kind", help="Limit to one kind"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation"),
) -> None:
    """Delete cached files."""
    kinds = _parse_kinds(kind)
    if not yes:
        names = ", ".join(k.value for k in kinds)
        typer.confirm(f"Delete all cached {names} files?", abort=True)

    async def action(services: CacheServices):
        return {k.value: services.for_kind(k).clear() for k in kinds}

    try:
        removed = _run(action)
    except (CacheError, ValueError) as e:
        raise _fail(e) from None

    for name, count in removed.items():
        typer.echo(f"{name}: removed {count} files")


@app.command()
def purge(
    kind: str | None = typer.Option(None, "-k", "--kind", help="Limit to one kind"),
) -> None:
    """Delete cached files that are empty, truncated or undecodable."""
    kinds = _parse_kinds(kind)

    async def action(services: CacheServices):
        return {k.value: services.for_kind(k).purge_invalid() for k in kinds}

    try:
        removed = _run(action)
    except (CacheError, ValueError) as e:
        raise _fail(e) from None

    for name, count in removed.items():
        typer.echo(f"{name}: removed {count} invalid files")


@app.command("list")
def list_entries(kind: str = typer.Argument(..., help="Asset kind")) -> None:
    """List cached files of one kind with their sizes."""
    (asset_kind,) = _parse_kinds(kind)

    async def action(services: CacheServices):
        store = services.for_kind(asset_kind).store
        entries = []
        for key in store.keys():
            entry = store.entry(key)
            if entry is not None:
                entries.append((entry.key, entry.size_bytes))
        return entries

    try:
        entries = _run(action)
    except (CacheError, ValueError, OSError) as e:
        raise _fail(e) from None

    if not entries:
        typer.echo("No cached files")
        return
    for key, size_bytes in entries:
        typer.echo(f"{format_size(size_bytes):>10}  {key}")


@app.command()
def config(
    init: bool = typer.Option(False, "--init", help="Write the default config file"),
) -> None:
    """Show the config file location, optionally (re)generating it."""
    if init:
        path = generate_config()
        typer.echo(f"Generated {path}")
        return
    typer.echo(str(get_config_path()))
