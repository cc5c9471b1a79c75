"""HTML cleanup shared by lyrics adapters.

Lyrics pages carry the vocalist cues we need as ``<b>``/``<i>`` markup,
buried among links, spans and annotation wrappers.  clean_lyrics_html()
reduces a lyrics container to text that keeps only formatting tags:

  - ``<br>``               → newline
  - ``<strong>`` / ``<em>`` → ``<b>`` / ``<i>``
  - other formatting tags  → kept as-is
  - everything else        → unwrapped (tag dropped, text kept)

Text is re-serialized by BeautifulSoup, so a literal ``&`` comes out as
``&amp;``; the vocalist parser decodes it.
"""

from bs4 import BeautifulSoup, NavigableString, Tag

# Tags that survive cleaning.  Only <b> and <i> carry meaning downstream.
FORMATTING_TAGS = frozenset(
    {
        "b", "strong", "i", "em", "u", "ins", "del", "s", "strike",
        "sup", "sub", "mark", "small", "big", "code", "kbd", "samp",
        "var", "abbr", "acronym", "cite", "dfn", "q", "tt",
    }
)

_RENAMES = {"strong": "b", "em": "i"}


def clean_fragment(element: Tag) -> str:
    """Return the inner content of *element* reduced to formatting markup."""
    for br in element.find_all("br"):
        br.replace_with(NavigableString("\n"))

    # Materialize first: unwrapping while iterating find_all() skips nodes.
    for tag in list(element.find_all(True)):
        if tag.name not in FORMATTING_TAGS:
            tag.unwrap()
            continue
        tag.name = _RENAMES.get(tag.name, tag.name)
        tag.attrs = {}

    return element.decode_contents()


def clean_lyrics_html(html: str) -> str:
    """Reduce an HTML snippet to newline-separated lyric text with formatting tags."""
    soup = BeautifulSoup(html, "html.parser")
    text = clean_fragment(soup)
    return "\n".join(line.rstrip() for line in text.splitlines()).strip()
