"""Per-line vocalist attribution.

Lyric text arrives as lines of three kinds:

  HEADER  ``[Verse 1: <b>Brian</b>, Nick]``; sets who sings what follows
  BLANK   skipped
  LYRIC   attributed to one vocalist of the current section

Inside a section a lyric line belongs to the vocalist whose format matches
the markup the line *starts* with: ``<b>Now I can see</b> that...`` is the
bold singer's line even though it ends in plain text.  A ``<b>`` or ``<i>``
left open at the end of a line carries its vocalist forward until the line
that closes it.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto

from .models import AttributedLine, Format, LyricsAnalysis, VocalistCounts
from .vocalists import VocalistMap, parse_vocalist_list

logger = logging.getLogger(__name__)

UNKNOWN_VOCALIST = "Unknown"

HEADER_RE = re.compile(r"^\[([^\]]+)\]$")
TAG_RE = re.compile(r"<[^>]*>")
_OPEN_TAG_RE = re.compile(r"<(b|i)>")
_CLOSE_TAG_RE = re.compile(r"</(b|i)>")


class LineType(Enum):
    BLANK = auto()
    HEADER = auto()
    LYRIC = auto()


def classify_line(line: str) -> LineType:
    stripped = line.strip()
    if not stripped:
        return LineType.BLANK
    if HEADER_RE.match(stripped):
        return LineType.HEADER
    return LineType.LYRIC


def header_vocalist_list(line: str) -> str | None:
    """Return the vocalist list of a HEADER line, or None if it has no colon.

    ``[Verse 1: Nick Carter]`` → ``"Nick Carter"``; ``[Chorus]`` → ``None``.
    """
    m = HEADER_RE.match(line.strip())
    if not m:
        return None
    _, colon, vocalists = m.group(1).rpartition(":")
    if not colon:
        return None
    return vocalists.strip()


def count_words(line: str) -> int:
    """Count whitespace-separated words with all markup removed."""
    return len(TAG_RE.sub("", line).split())


def _default_vocalist(vocalists: VocalistMap) -> str:
    for name, fmt in vocalists.items():
        if fmt == Format.PLAIN:
            return name
    return next(iter(vocalists), UNKNOWN_VOCALIST)


def _find_format(vocalists: VocalistMap, fmt: Format) -> str | None:
    return next((name for name, f in vocalists.items() if f == fmt), None)


def determine_vocalist(line: str, vocalists: VocalistMap) -> str:
    """Pick the vocalist for a trimmed lyric line from its leading markup.

    Unformatted lines go to the ``plain`` vocalist.  A leading ``<b><i>``,
    ``<b>`` or ``<i>`` selects the vocalist with that format.  When nothing
    matches, the ``plain`` vocalist, then the first listed, then
    ``"Unknown"`` is used.
    """
    if not line.startswith("<"):
        return _default_vocalist(vocalists)

    candidates: list[Format] = []
    if line.startswith(("<b><i>", "<i><b>")):
        candidates.append(Format.BOLD_ITALIC)
    if line.startswith("<b>"):
        candidates.append(Format.BOLD)
    if line.startswith("<i>"):
        candidates.append(Format.ITALIC)

    for fmt in candidates:
        name = _find_format(vocalists, fmt)
        if name is not None:
            return name
    return _default_vocalist(vocalists)


@dataclass
class AttributionState:
    """The active section's vocalists plus any span left open across lines.

    Feed lines to :meth:`feed` in order.  ``open_tag`` is ``"b"`` or ``"i"``
    while a span opened on an earlier line has not yet been closed.
    """

    vocalists: VocalistMap = field(default_factory=dict)
    open_tag: str | None = None
    open_vocalist: str | None = None

    def close(self) -> None:
        self.open_tag = None
        self.open_vocalist = None

    def enter_section(self, header: str) -> None:
        """Start a new section.  A header without a colon keeps the vocalists."""
        self.close()
        vocalist_list = header_vocalist_list(header)
        if vocalist_list is not None:
            self.vocalists = parse_vocalist_list(vocalist_list)
            logger.debug("Section %s → %s", header.strip(), self.vocalists)

    def attribute(self, line: str) -> str | None:
        """Return the vocalist for a trimmed lyric line and advance the state.

        Returns None while no vocalist has been declared.
        """
        if not self.vocalists:
            return None

        if self.open_tag and self.open_vocalist:
            vocalist = self.open_vocalist
            if f"</{self.open_tag}>" in line:
                self.close()
            return vocalist

        vocalist = determine_vocalist(line, self.vocalists)
        opened = _OPEN_TAG_RE.search(line)
        if opened and not _CLOSE_TAG_RE.search(line):
            self.open_tag = opened.group(1)
            self.open_vocalist = vocalist
        return vocalist

    def feed(self, line: str) -> AttributedLine | None:
        """Process one raw line; return it attributed, or None if skipped."""
        lt = classify_line(line)
        if lt == LineType.BLANK:
            return None
        if lt == LineType.HEADER:
            self.enter_section(line)
            return None
        text = line.strip()
        vocalist = self.attribute(text)
        if vocalist is None:
            return None
        return AttributedLine(vocalist=vocalist, text=text)


def parse_lyrics(text: str) -> LyricsAnalysis:
    """Attribute every lyric line of *text* to a vocalist and count their share.

    Lines before the first header that names vocalists are dropped.  Never
    raises; malformed markup falls back to the section's default vocalist.
    """
    state = AttributionState()
    analysis = LyricsAnalysis()

    for raw in text.split("\n"):
        attributed = state.feed(raw)
        if attributed is None:
            continue
        counts = analysis.vocalist_stats.setdefault(attributed.vocalist, VocalistCounts())
        counts.lines += 1
        counts.words += count_words(attributed.text)
        analysis.attributed_lines.append(attributed)

    logger.debug(
        "Attributed %d line(s) to %d vocalist(s)",
        len(analysis.attributed_lines),
        len(analysis.vocalist_stats),
    )
    return analysis
