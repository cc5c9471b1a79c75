"""Vocalist-list parsing for section headers.

A header such as ``[Chorus: AJ, <i>AJ &amp; Brian</i> with <b>Nick</b>]``
declares who sings the section and which markup each singer's lines use.
The list after the colon is parsed in two passes:

  1. extract_tagged_vocalists(): names inside ``<b>``/``<i>`` spans
  2. parse_untagged_text():      what is left, split on ``&``, ``with`` and ``,``

parse_vocalist_list() merges both passes into one ordered mapping of
name → :class:`~vocalsplit.models.Format`.  Tagged names come first, in
the order they appear; untagged names follow.  A name seen twice keeps its
first position but takes the later format.
"""

import re
from dataclasses import dataclass

from .models import Format, VocalistSpec

VocalistMap = dict[str, Format]

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# Searched in this order.  Nested spans come first so that, for two matches
# starting at the same offset, the bold-italic reading wins the tie.
_SPAN_PATTERNS: list[tuple[re.Pattern, Format]] = [
    (re.compile(r"<b><i>([^<]+)</i></b>"), Format.BOLD_ITALIC),
    (re.compile(r"<i><b>([^<]+)</b></i>"), Format.BOLD_ITALIC),
    (re.compile(r"<b>([^<]+)</b>"), Format.BOLD),
    (re.compile(r"<i>([^<]+)</i>"), Format.ITALIC),
]

_WITH_PREFIX_RE = re.compile(r"^with ", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")
_LEADING_AMP_ENTITY_RE = re.compile(r"^\s*&amp;\s*")
_EDGE_DELIMITERS_RE = re.compile(r"^[,&\s]+|[,&\s]+$")

_SEPARATOR = "|"

# (pattern, replacement) pairs applied in order; entity before bare "&".
_DELIMITER_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"\s*&amp;\s*"), _SEPARATOR),
    (re.compile(r"\s*&\s*"), _SEPARATOR),
    (re.compile(r"\s+with\s+", re.IGNORECASE), _SEPARATOR),
    (re.compile(r"\s*,\s*"), _SEPARATOR),
    (re.compile(re.escape(_SEPARATOR) + "{2,}"), _SEPARATOR),
]

_WRAPPING_PARENS_RE = re.compile(r"^\(|\)$")


# ---------------------------------------------------------------------------
# Tagged spans
# ---------------------------------------------------------------------------


@dataclass
class SpanMatch:
    """A formatted span found in a vocalist list."""

    text: str  # the whole match, tags included
    content: str  # inner text, trimmed
    format: Format
    start: int
    end: int

    def overlaps(self, other: "SpanMatch") -> bool:
        return self.start < other.end and other.start < self.end


def find_span_matches(text: str) -> list[SpanMatch]:
    """Return every candidate span from every pattern family, sorted by start.

    Matches from different families may overlap; see :func:`resolve_overlaps`.
    """
    matches = [
        SpanMatch(
            text=m.group(0),
            content=m.group(1).strip(),
            format=fmt,
            start=m.start(),
            end=m.end(),
        )
        for pattern, fmt in _SPAN_PATTERNS
        for m in pattern.finditer(text)
    ]
    # sort() is stable, so same-start matches keep family order
    matches.sort(key=lambda m: m.start)
    return matches


def resolve_overlaps(matches: list[SpanMatch]) -> list[SpanMatch]:
    """Keep each match only if it does not intersect an already kept one.

    *matches* must be sorted by start offset.
    """
    kept: list[SpanMatch] = []
    for match in matches:
        if not any(match.overlaps(existing) for existing in kept):
            kept.append(match)
    return kept


def decode_name(name: str) -> str:
    """Decode ``&amp;`` so that duo names read ``AJ & Brian``."""
    return name.replace("&amp;", "&")


def extract_tagged_vocalists(text: str) -> tuple[list[VocalistSpec], str]:
    """Pull formatted vocalist names out of *text*.

    Returns the extracted specs in left-to-right order and the residual
    text with their spans removed and dangling delimiters trimmed.

    A leading ``with`` inside a span is a connective, not part of the name:
    ``<i>with Brian</i>`` yields ``Brian``.  Spans that are empty after
    dropping it are ignored and left in the residual.
    """
    specs: list[VocalistSpec] = []
    pieces: list[str] = []
    cursor = 0

    for match in resolve_overlaps(find_span_matches(text)):
        content = match.content
        if _WITH_PREFIX_RE.match(content):
            content = content[5:].strip()
        if not content:
            continue
        specs.append(VocalistSpec(name=decode_name(content), format=match.format))
        pieces.append(text[cursor:match.start])
        cursor = match.end
    pieces.append(text[cursor:])

    residual = _WHITESPACE_RE.sub(" ", "".join(pieces))
    residual = _LEADING_AMP_ENTITY_RE.sub("", residual)
    residual = _EDGE_DELIMITERS_RE.sub("", residual).strip()
    return specs, residual


# ---------------------------------------------------------------------------
# Untagged text
# ---------------------------------------------------------------------------


def normalize_delimiters(text: str) -> str:
    """Rewrite ``&amp;``, ``&``, ``with`` and ``,`` to a single separator."""
    for pattern, replacement in _DELIMITER_RULES:
        text = pattern.sub(replacement, text)
    return text.strip(_SEPARATOR)


def clean_segment(segment: str) -> str:
    segment = _WRAPPING_PARENS_RE.sub("", segment)
    return _WHITESPACE_RE.sub(" ", segment).strip()


def parse_untagged_text(text: str) -> list[VocalistSpec]:
    """Split plain (unformatted) vocalist text into ``plain`` specs."""
    if not text:
        return []
    specs = []
    for segment in normalize_delimiters(text).split(_SEPARATOR):
        cleaned = clean_segment(segment.strip())
        if cleaned:
            specs.append(VocalistSpec(name=decode_name(cleaned), format=Format.PLAIN))
    return specs


# ---------------------------------------------------------------------------
# Full parser
# ---------------------------------------------------------------------------


def parse_vocalist_list(text: str) -> VocalistMap:
    """Parse the vocalist list of a section header.

    Example::

        >>> parse_vocalist_list("AJ, <i>AJ &amp; Brian</i>")
        {'AJ & Brian': <Format.ITALIC: 'italic'>, 'AJ': <Format.PLAIN: 'plain'>}

    Returns an empty mapping for an empty string.  Never raises.
    """
    tagged, residual = extract_tagged_vocalists(text)
    vocalists: VocalistMap = {}
    for spec in [*tagged, *parse_untagged_text(residual)]:
        vocalists[spec.name] = spec.format
    return vocalists
