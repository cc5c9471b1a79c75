"""Per-song and per-album vocalist statistics.

All percentages and averages are rounded half-up to one decimal place.
Percentages are ``0`` when the corresponding total is zero.
"""

from decimal import ROUND_HALF_UP, Decimal
from statistics import pstdev

from .models import (
    AlbumInsights,
    AlbumStats,
    AlbumVocalistStats,
    SongBreakdown,
    SongResult,
    StatsSummary,
    VocalistCounts,
    VocalistParticipation,
    VocalistSummary,
)


def _round1(value: float) -> float:
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _percentage(part: int, total: int) -> float:
    return _round1(part / total * 100) if total > 0 else 0


def summarize_stats(vocalist_stats: dict[str, VocalistCounts]) -> StatsSummary:
    """Add totals and line/word percentages to raw per-vocalist counts."""
    total_lines = sum(s.lines for s in vocalist_stats.values())
    total_words = sum(s.words for s in vocalist_stats.values())

    return StatsSummary(
        total_lines=total_lines,
        total_words=total_words,
        vocalist_count=len(vocalist_stats),
        vocalist_stats={
            name: VocalistSummary(
                lines=s.lines,
                words=s.words,
                lines_percentage=_percentage(s.lines, total_lines),
                words_percentage=_percentage(s.words, total_words),
            )
            for name, s in vocalist_stats.items()
        },
    )


def aggregate_album_stats(results: list[SongResult]) -> AlbumStats:
    """Roll per-song summaries up into album totals.

    Failed songs (no summary) count toward ``total_songs`` and appear in the
    breakdown but contribute nothing else.  The breakdown keeps input order
    except that rows which both carry a track number are ordered by it.
    """
    processed = [r for r in results if r.succeeded]
    album = AlbumStats(
        total_songs=len(results),
        processed_songs=len(processed),
        success_rate=_percentage(len(processed), len(results)),
    )

    for result in processed:
        summary = result.summary
        for name, s in summary.vocalist_stats.items():
            entry = album.vocalist_distribution.setdefault(name, AlbumVocalistStats())
            entry.lines += s.lines
            entry.words += s.words
            entry.songs_appeared += 1
            entry.song_percentages.append(s.lines_percentage)
        album.total_lines += summary.total_lines
        album.total_words += summary.total_words

    most = 0
    for name, entry in album.vocalist_distribution.items():
        entry.lines_percentage = _percentage(entry.lines, album.total_lines)
        entry.words_percentage = _percentage(entry.words, album.total_words)
        entry.average_lines_per_song = _round1(entry.lines / entry.songs_appeared)
        entry.average_words_per_song = _round1(entry.words / entry.songs_appeared)
        if entry.lines > most:
            album.top_vocalist, most = name, entry.lines

    album.song_breakdown = _song_breakdown(results)
    return album


def _song_breakdown(results: list[SongResult]) -> list[SongBreakdown]:
    rows = []
    for result in results:
        if result.succeeded:
            rows.append(
                SongBreakdown(
                    title=result.title,
                    status="success",
                    track_number=result.track_number,
                    lines=result.summary.total_lines,
                    words=result.summary.total_words,
                    vocalists=list(result.summary.vocalist_stats),
                    top_vocalist=result.summary.top_vocalist,
                )
            )
        else:
            rows.append(
                SongBreakdown(
                    title=result.title,
                    status="failed",
                    track_number=result.track_number,
                    error=result.error,
                )
            )

    # Numbered rows keep their slots but are reordered among themselves.
    numbered = sorted(
        (r for r in rows if r.track_number is not None), key=lambda r: r.track_number
    )
    it = iter(numbered)
    return [next(it) if r.track_number is not None else r for r in rows]


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

# (upper bound, label) pairs; values at or above the last bound get the fallback.
_BALANCE_LABELS = [(15, "very balanced"), (30, "fairly balanced"), (50, "somewhat unbalanced")]
_CONSISTENCY_LABELS = [(5, "very consistent"), (10, "consistent"), (20, "somewhat variable")]


def _label(value: float, thresholds: list[tuple[float, str]], fallback: str) -> str:
    for bound, label in thresholds:
        if value < bound:
            return label
    return fallback


def album_insights(album: AlbumStats) -> AlbumInsights:
    """Describe how evenly an album's vocals are shared.

    Balance comes from the spread between the largest and smallest album
    ``lines_percentage``.  Each vocalist's consistency comes from the
    population standard deviation of their per-song line percentages.
    """
    insights = AlbumInsights(dominant_vocalist=album.top_vocalist)
    if not album.vocalist_distribution:
        return insights

    shares = [entry.lines_percentage for entry in album.vocalist_distribution.values()]
    insights.vocalist_balance = _label(max(shares) - min(shares), _BALANCE_LABELS, "heavily unbalanced")

    for name, entry in album.vocalist_distribution.items():
        spread = pstdev(entry.song_percentages) if entry.song_percentages else 0
        insights.participation[name] = VocalistParticipation(
            songs_appeared=entry.songs_appeared,
            participation_rate=_percentage(entry.songs_appeared, album.processed_songs),
            average_contribution=entry.lines_percentage,
            consistency=_label(spread, _CONSISTENCY_LABELS, "highly variable"),
        )
    return insights
