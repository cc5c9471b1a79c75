"""Adapter for genius.com lyrics pages.

URL pattern: genius.com/<Artist-slug>-<song-slug>-lyrics

Page structure:
    <meta property="og:title" content="Artist – Song Title">
    <div data-lyrics-container="true" class="Lyrics__Container-...">
        [Verse 1: <b>Brian</b>, Nick]<br>
        <a href="..."><span>lyric line</span></a><br>
        <div data-exclude-from-selection="true">...</div>   ← ads/embeds, dropped
    </div>
    <div data-lyrics-container="true" ...>...</div>    (long songs are split)

Vocalist cues are the ``<b>``/``<i>`` markup inside the containers, so the
HTML is cleaned down to those tags rather than flattened to text.

Song lookup by artist/title goes through the public API
(``api.genius.com/search``) and needs an access token.
"""

import json
import logging
from dataclasses import dataclass

import httpx
from bs4 import BeautifulSoup

from ..exceptions import FetchError, ParseError
from ..models import Song
from .base import SiteAdapter
from .utils import clean_fragment

logger = logging.getLogger(__name__)

SEARCH_URL = "https://api.genius.com/search"

_FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

_CONTAINER_SELECTOR = 'div[data-lyrics-container="true"], div[class^="Lyrics__Container"]'
_EXCLUDED_SELECTOR = '[data-exclude-from-selection="true"]'


@dataclass
class SearchHit:
    url: str
    title: str
    artist: str


class GeniusAdapter(SiteAdapter):
    """Adapter for genius.com lyrics pages."""

    @classmethod
    def can_handle(cls, url: str) -> bool:
        return "genius.com/" in url and url.rstrip("/").endswith("-lyrics")

    def fetch(self, url: str) -> str:
        try:
            resp = httpx.get(url, headers=_FETCH_HEADERS, follow_redirects=True, timeout=15)
        except httpx.RequestError as exc:
            raise FetchError(url, 0) from exc
        if resp.status_code != 200:
            raise FetchError(url, resp.status_code)
        return resp.text

    def extract(self, html: str, url: str) -> Song:
        soup = BeautifulSoup(html, "html.parser")

        containers = soup.select(_CONTAINER_SELECTOR)
        if not containers:
            raise ParseError(url, "No lyrics containers found")
        logger.debug("Found %d lyrics container(s) in %s", len(containers), url)

        parts = []
        for container in containers:
            for excluded in container.select(_EXCLUDED_SELECTOR):
                excluded.decompose()
            parts.append(clean_fragment(container).strip())
        lyrics = "\n\n".join(p for p in parts if p)
        if not lyrics:
            raise ParseError(url, "Lyrics containers are empty")

        artist, title = _artist_and_title(soup)
        return Song(
            title=title or _title_from_url(url),
            artist=artist,
            lyrics=lyrics,
            source_url=url,
        )


def search_song(artist: str, title: str, token: str) -> SearchHit:
    """Return the best Genius API match for *title* by *artist*.

    Raises FetchError on HTTP failures and ParseError when nothing matches.
    """
    try:
        resp = httpx.get(
            SEARCH_URL,
            params={"q": f"{title} by {artist}"},
            headers={"Authorization": f"Bearer {token}"},
            timeout=15,
        )
    except httpx.RequestError as exc:
        raise FetchError(SEARCH_URL, 0) from exc
    if resp.status_code != 200:
        raise FetchError(SEARCH_URL, resp.status_code)

    try:
        hits = resp.json()["response"]["hits"]
    except (KeyError, TypeError, json.JSONDecodeError) as exc:
        raise ParseError(SEARCH_URL, "Unexpected search response") from exc
    if not hits:
        raise ParseError(SEARCH_URL, f'No results for "{title}" by {artist}')

    result = hits[0]["result"]
    logger.debug("Search hit: %s (%s)", result.get("full_title"), result.get("url"))
    return SearchHit(
        url=result["url"],
        title=result.get("title") or title,
        artist=(result.get("primary_artist") or {}).get("name") or artist,
    )


def _artist_and_title(soup: BeautifulSoup) -> tuple[str, str]:
    """Split ``og:title`` ("Artist – Title") into its parts."""
    meta = soup.find("meta", attrs={"property": "og:title"})
    content = (meta.get("content") or "").strip() if meta else ""
    if " – " in content:
        artist, title = content.split(" – ", 1)
        return artist.strip(), title.strip()
    return "", content


def _title_from_url(url: str) -> str:
    """Derive a song title from the URL slug as a last-resort fallback."""
    slug = url.rstrip("/").split("/")[-1]
    slug = slug.removesuffix("-lyrics")
    return slug.replace("-", " ").title()
