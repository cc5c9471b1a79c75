"""Text and JSON rendering of vocalist analyses.

Text report layout for one song::

    Title: I Want It That Way
    Artist: Backstreet Boys

    ANNOTATED LYRICS
    ------------------------------
    [Brian Littrell] <b>You are my fire</b>
    [Nick Carter] Tell me why

    VOCALIST STATISTICS
    ------------------------------
    Total Lines: 2
    Total Words: 7
    Vocalists: 2

    Brian Littrell: 1 lines (50.0%), 4 words (57.1%)
    Nick Carter: 1 lines (50.0%), 3 words (42.9%)

Usage::

    from vocalsplit.report import ReportFormatter
    text = ReportFormatter().render(song, analysis, summary)

JSON output (:meth:`ReportFormatter.to_dict`) uses the camelCase keys
downstream tooling expects: ``attributedLines``, ``vocalistStats``,
``totalLines``, ``linesPercentage`` and so on.
"""

from dataclasses import asdict

from .models import AlbumStats, LyricsAnalysis, Song, StatsSummary
from .stats import album_insights

_RULE = "-" * 30


class ReportFormatter:
    """Render analysis results to text or JSON-ready dicts."""

    def render(self, song: Song, analysis: LyricsAnalysis, summary: StatsSummary) -> str:
        """Return the text report for one song, ending with a single newline."""
        parts: list[str] = [f"Title: {song.title}", f"Artist: {song.artist}"]
        if song.source_url:
            parts.append(f"Source: {song.source_url}")

        parts += ["", "ANNOTATED LYRICS", _RULE]
        parts.extend(f"[{line.vocalist}] {line.text}" for line in analysis.attributed_lines)

        parts += ["", "VOCALIST STATISTICS", _RULE]
        parts.extend(_summary_lines(summary))
        return "\n".join(parts) + "\n"

    def to_dict(self, song: Song, analysis: LyricsAnalysis, summary: StatsSummary) -> dict:
        return {
            "songInfo": {
                "title": song.title,
                "artist": song.artist,
                "sourceUrl": song.source_url,
            },
            "attributedLines": [asdict(line) for line in analysis.attributed_lines],
            "vocalistStats": {
                name: asdict(counts) for name, counts in analysis.vocalist_stats.items()
            },
            "summary": summary_to_dict(summary),
        }

    def render_album(self, album: AlbumStats, title: str = "Album") -> str:
        """Return the text roll-up for several songs."""
        insights = album_insights(album)
        parts: list[str] = [
            f"ALBUM ANALYSIS: {title}",
            "=" * 50,
            f"Total Songs: {album.total_songs}",
            f"Successfully Processed: {album.processed_songs}",
            f"Success Rate: {album.success_rate}%",
            f"Total Lines Analyzed: {album.total_lines}",
            f"Total Words Analyzed: {album.total_words}",
        ]

        if album.vocalist_distribution:
            parts += ["", "VOCALIST DISTRIBUTION", _RULE]
            ranked = sorted(
                album.vocalist_distribution.items(), key=lambda kv: kv[1].lines, reverse=True
            )
            for name, stats in ranked:
                parts += [
                    f"{name}:",
                    f"  Lines: {stats.lines} ({stats.lines_percentage}%)",
                    f"  Words: {stats.words} ({stats.words_percentage}%)",
                    f"  Songs Appeared: {stats.songs_appeared}/{album.processed_songs}",
                    f"  Avg Lines/Song: {stats.average_lines_per_song}",
                    f"  Consistency: {insights.participation[name].consistency}",
                ]
            parts.append(f"Top Vocalist: {album.top_vocalist}")
            parts += [
                "",
                "INSIGHTS",
                _RULE,
                f"Dominant Vocalist: {insights.dominant_vocalist or 'None'}",
                f"Vocal Balance: {insights.vocalist_balance}",
            ]

        parts += ["", "SONG BREAKDOWN", _RULE]
        for index, row in enumerate(album.song_breakdown, start=1):
            number = row.track_number if row.track_number is not None else index
            parts.append(f"{number}. {row.title}")
            if row.status == "success":
                parts.append(f"   Lines: {row.lines}, Words: {row.words}")
                parts.append(f"   Vocalists: {', '.join(row.vocalists)}")
                parts.append(f"   Top Vocalist: {row.top_vocalist or 'Unknown'}")
            else:
                parts.append(f"   Failed: {row.error or 'Unknown error'}")
        return "\n".join(parts) + "\n"


def summary_to_dict(summary: StatsSummary) -> dict:
    return {
        "totalLines": summary.total_lines,
        "totalWords": summary.total_words,
        "vocalistCount": summary.vocalist_count,
        "vocalistStats": {
            name: {
                "lines": s.lines,
                "words": s.words,
                "linesPercentage": s.lines_percentage,
                "wordsPercentage": s.words_percentage,
            }
            for name, s in summary.vocalist_stats.items()
        },
    }


def _summary_lines(summary: StatsSummary) -> list[str]:
    lines = [
        f"Total Lines: {summary.total_lines}",
        f"Total Words: {summary.total_words}",
        f"Vocalists: {summary.vocalist_count}",
    ]
    if summary.vocalist_stats:
        lines.append("")
    for name, s in summary.vocalist_stats.items():
        lines.append(
            f"{name}: {s.lines} lines ({s.lines_percentage}%), "
            f"{s.words} words ({s.words_percentage}%)"
        )
    return lines
