import json
import logging
import re
import sys
from dataclasses import asdict
from pathlib import Path

import click

from .adapters.genius import search_song
from .attribution import parse_lyrics
from .exceptions import FetchError, SourceError, UnsupportedSiteError, VocalsplitError
from .models import Song, SongResult
from .registry import get_adapter
from .report import ReportFormatter
from .stats import aggregate_album_stats, album_insights, summarize_stats

logger = logging.getLogger(__name__)


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower()
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _default_filename(artist: str, title: str, extension: str) -> str:
    stem = "-".join(s for s in (_slugify(artist), _slugify(title)) if s) or "lyrics"
    return f"{stem}.{extension}"


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _load_song(source: str, artist: str | None, token: str | None) -> Song:
    """Resolve SOURCE (URL, lyrics file, or title to search) into a Song."""
    if artist:
        hit = search_song(artist, source, token)
        song = get_adapter(hit.url).scrape(hit.url)
        song.title = song.title or hit.title
        song.artist = song.artist or hit.artist
        return song

    if _is_url(source):
        return get_adapter(source).scrape(source)

    path = Path(source)
    if not path.is_file():
        raise SourceError(source, "neither a URL nor a readable file")
    try:
        lyrics = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceError(source, str(exc)) from exc
    return Song(
        title=path.stem.replace("-", " ").replace("_", " ").title(),
        artist="",
        lyrics=lyrics,
    )


def _error_message(exc: VocalsplitError) -> str:
    if isinstance(exc, FetchError):
        msg = f"Error: Could not fetch {exc.url}"
        if exc.status_code:
            msg += f" (HTTP {exc.status_code})"
        if exc.status_code == 401:
            msg += " - check your Genius API token"
        return msg
    return f"Error: {exc}"


@click.command()
@click.argument("sources", nargs=-1, required=True, metavar="SOURCE...")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <artist>-<title>.txt).")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Emit JSON instead of the text report.")
@click.option("--artist", default=None, metavar="NAME",
              help="Treat SOURCE as a song title and look it up on Genius.")
@click.option("--token", envvar="GENIUS_ACCESS_TOKEN", default=None, metavar="TOKEN",
              help="Genius API token (env: GENIUS_ACCESS_TOKEN).")
@click.option("-v", "--verbose", is_flag=True, default=False,
              help="Log debug output to stderr.")
def main(
    sources: tuple[str, ...],
    output_path: str | None,
    stdout: bool,
    as_json: bool,
    artist: str | None,
    token: str | None,
    verbose: bool,
) -> None:
    """Annotate song lyrics with who sings each line.

    \b
    SOURCE may be:
      - a genius.com lyrics URL
      - a local text file with [Section: Vocalists] headers
      - a song title, together with --artist

    Several SOURCEs produce one report per song plus an album summary.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if artist and not token:
        click.echo(
            "Error: A Genius API token is required for --artist lookups "
            "(use --token or set GENIUS_ACCESS_TOKEN).",
            err=True,
        )
        sys.exit(1)

    if len(sources) > 1:
        _run_album(sources, output_path, as_json, artist, token)
        return

    # --- Fetch ---
    source = sources[0]
    try:
        song = _load_song(source, artist, token)
    except UnsupportedSiteError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo("Supported sites: genius.com", err=True)
        sys.exit(1)
    except VocalsplitError as exc:
        click.echo(_error_message(exc), err=True)
        sys.exit(1)

    # --- Analyse + render ---
    analysis = parse_lyrics(song.lyrics)
    summary = summarize_stats(analysis.vocalist_stats)
    formatter = ReportFormatter()
    if as_json:
        text = json.dumps(formatter.to_dict(song, analysis, summary), indent=2, ensure_ascii=False) + "\n"
    else:
        text = formatter.render(song, analysis, summary)

    # --- Output ---
    if stdout:
        click.echo(text, nl=False)
        return

    extension = "json" if as_json else "txt"
    dest = Path(output_path) if output_path else Path(_default_filename(song.artist, song.title, extension))
    dest.write_text(text, encoding="utf-8")
    click.echo(f"Written to {dest}")


def _run_album(
    sources: tuple[str, ...],
    output_path: str | None,
    as_json: bool,
    artist: str | None,
    token: str | None,
) -> None:
    """Process every source, keep going past failures, and append a roll-up."""
    formatter = ReportFormatter()
    results: list[SongResult] = []
    reports: list[str] = []
    documents: list[dict] = []

    for number, source in enumerate(sources, start=1):
        try:
            song = _load_song(source, artist, token)
        except VocalsplitError as exc:
            logger.warning("Skipping %s: %s", source, exc)
            click.echo(_error_message(exc), err=True)
            results.append(SongResult(title=source, track_number=number, error=str(exc)))
            continue

        analysis = parse_lyrics(song.lyrics)
        summary = summarize_stats(analysis.vocalist_stats)
        results.append(SongResult(title=song.title, summary=summary, track_number=number))
        reports.append(formatter.render(song, analysis, summary))
        documents.append(formatter.to_dict(song, analysis, summary))

    album = aggregate_album_stats(results)
    if as_json:
        document = {
            "songs": documents,
            "album": asdict(album),
            "insights": asdict(album_insights(album)),
        }
        text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    else:
        text = "\n".join([*reports, formatter.render_album(album)])

    if output_path:
        Path(output_path).write_text(text, encoding="utf-8")
        click.echo(f"Written to {output_path}")
    else:
        click.echo(text, nl=False)

    if not album.processed_songs:
        sys.exit(1)
