from dataclasses import dataclass, field
from enum import Enum


class Format(str, Enum):
    """How a vocalist's lines are marked up in the lyrics."""

    PLAIN = "plain"
    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold-italic"


@dataclass
class VocalistSpec:
    """One vocalist named in a section header, e.g. ``<b>Brian</b>``."""

    name: str
    format: Format


@dataclass
class AttributedLine:
    """A lyric line and the vocalist who sings it.

    ``text`` is the trimmed original line, markup included.
    """

    vocalist: str
    text: str


@dataclass
class VocalistCounts:
    lines: int = 0
    words: int = 0


@dataclass
class LyricsAnalysis:
    """Result of attributing one lyric text."""

    attributed_lines: list[AttributedLine] = field(default_factory=list)
    vocalist_stats: dict[str, VocalistCounts] = field(default_factory=dict)


@dataclass
class VocalistSummary:
    lines: int
    words: int
    lines_percentage: float
    words_percentage: float


@dataclass
class StatsSummary:
    """Totals and per-vocalist shares for one song."""

    total_lines: int = 0
    total_words: int = 0
    vocalist_count: int = 0
    vocalist_stats: dict[str, VocalistSummary] = field(default_factory=dict)

    @property
    def top_vocalist(self) -> str | None:
        top, most = None, 0
        for name, stats in self.vocalist_stats.items():
            if stats.lines > most:
                top, most = name, stats.lines
        return top


@dataclass
class Song:
    """Lyrics for one song, reduced to formatting-only markup."""

    title: str
    artist: str
    lyrics: str
    source_url: str = ""


@dataclass
class SongResult:
    """Outcome of processing one song, as fed to the album roll-up."""

    title: str
    summary: StatsSummary | None = None
    track_number: int | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.summary is not None


@dataclass
class AlbumVocalistStats:
    lines: int = 0
    words: int = 0
    songs_appeared: int = 0
    lines_percentage: float = 0
    words_percentage: float = 0
    average_lines_per_song: float = 0
    average_words_per_song: float = 0
    song_percentages: list[float] = field(default_factory=list)


@dataclass
class SongBreakdown:
    title: str
    status: str  # "success" or "failed"
    track_number: int | None = None
    lines: int = 0
    words: int = 0
    vocalists: list[str] = field(default_factory=list)
    top_vocalist: str | None = None
    error: str | None = None


@dataclass
class AlbumStats:
    """Per-vocalist totals rolled up across every song of an album."""

    total_songs: int = 0
    processed_songs: int = 0
    success_rate: float = 0
    total_lines: int = 0
    total_words: int = 0
    vocalist_distribution: dict[str, AlbumVocalistStats] = field(default_factory=dict)
    top_vocalist: str | None = None
    song_breakdown: list[SongBreakdown] = field(default_factory=list)


@dataclass
class VocalistParticipation:
    songs_appeared: int
    participation_rate: float
    average_contribution: float
    consistency: str


@dataclass
class AlbumInsights:
    """Qualitative reading of an album's vocal split."""

    dominant_vocalist: str | None = None
    vocalist_balance: str = "unknown"
    participation: dict[str, VocalistParticipation] = field(default_factory=dict)
