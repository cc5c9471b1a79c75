import json
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from vocalsplit.adapters.genius import SearchHit
from vocalsplit.cli import _default_filename, _slugify, main
from vocalsplit.exceptions import FetchError, ParseError, SourceError, UnsupportedSiteError
from vocalsplit.models import Song

TEST_URL = "https://genius.com/Backstreet-boys-i-want-it-that-way-lyrics"

LYRICS = (
    "[Verse 1: <b>Brian Littrell</b>]\n"
    "<b>You are my fire</b>\n"
    "\n"
    "[Chorus: All]\n"
    "Tell me why\n"
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_song(title="I Want It That Way", artist="Backstreet Boys", lyrics=LYRICS) -> Song:
    return Song(title=title, artist=artist, lyrics=lyrics, source_url=TEST_URL)


def _mock_adapter(song=None) -> MagicMock:
    adapter = MagicMock()
    adapter.scrape.return_value = song or _make_song()
    return adapter


# ---------------------------------------------------------------------------
# _slugify / _default_filename
# ---------------------------------------------------------------------------


def test_slugify_basic():
    assert _slugify("I Want It That Way") == "i-want-it-that-way"
    assert _slugify("Backstreet Boys") == "backstreet-boys"


def test_slugify_apostrophe():
    assert _slugify("Ain't Nothin' but a Heartache") == "aint-nothin-but-a-heartache"


def test_default_filename():
    assert _default_filename("Backstreet Boys", "Larger than Life", "txt") == (
        "backstreet-boys-larger-than-life.txt"
    )


def test_default_filename_without_artist():
    assert _default_filename("", "Quit Playing Games", "json") == "quit-playing-games.json"


# ---------------------------------------------------------------------------
# --help
# ---------------------------------------------------------------------------


def test_help_output():
    result = CliRunner().invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Annotate song lyrics" in result.output
    assert "genius.com" in result.output


# ---------------------------------------------------------------------------
# --stdout
# ---------------------------------------------------------------------------


def test_stdout_flag_prints_report():
    with patch("vocalsplit.cli.get_adapter", return_value=_mock_adapter()):
        result = CliRunner().invoke(main, ["--stdout", TEST_URL])
    assert result.exit_code == 0
    assert "Title: I Want It That Way" in result.output
    assert "[Brian Littrell] <b>You are my fire</b>" in result.output
    assert "[All] Tell me why" in result.output


def test_stdout_json():
    with patch("vocalsplit.cli.get_adapter", return_value=_mock_adapter()):
        result = CliRunner().invoke(main, ["--stdout", "--json", TEST_URL])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["summary"]["totalLines"] == 2
    assert data["vocalistStats"]["All"] == {"lines": 1, "words": 3}


def test_stdout_flag_does_not_write_file(tmp_path):
    with patch("vocalsplit.cli.get_adapter", return_value=_mock_adapter()):
        with CliRunner().isolated_filesystem(temp_dir=tmp_path):
            result = CliRunner().invoke(main, ["--stdout", TEST_URL])
    assert result.exit_code == 0
    assert not any(tmp_path.rglob("*.txt"))


# ---------------------------------------------------------------------------
# File input and output
# ---------------------------------------------------------------------------


def test_local_file_source(tmp_path):
    lyrics_file = tmp_path / "larger_than_life.txt"
    lyrics_file.write_text(LYRICS, encoding="utf-8")
    result = CliRunner().invoke(main, ["--stdout", str(lyrics_file)])
    assert result.exit_code == 0
    assert "Title: Larger Than Life" in result.output
    assert "Brian Littrell: 1 lines (50.0%)" in result.output


def test_missing_file_exits_nonzero():
    result = CliRunner().invoke(main, ["--stdout", "does-not-exist.txt"])
    assert result.exit_code == 1
    assert "neither a URL nor a readable file" in result.output


def test_undecodable_file_exits_with_error(tmp_path):
    lyrics_file = tmp_path / "broken.txt"
    lyrics_file.write_bytes(b"\xff\xfe\x00[Verse")
    result = CliRunner().invoke(main, ["--stdout", str(lyrics_file)])
    assert result.exit_code == 1
    assert "Error: Cannot read lyrics from" in result.output


def test_output_file_written_with_flag(tmp_path):
    out_file = tmp_path / "report.txt"
    with patch("vocalsplit.cli.get_adapter", return_value=_mock_adapter()):
        result = CliRunner().invoke(main, ["-o", str(out_file), TEST_URL])
    assert result.exit_code == 0
    assert out_file.exists()
    assert "Title: I Want It That Way" in out_file.read_text()


def test_default_filename_derived_from_artist_and_title(tmp_path):
    with patch("vocalsplit.cli.get_adapter", return_value=_mock_adapter()):
        with CliRunner().isolated_filesystem(temp_dir=tmp_path):
            result = CliRunner().invoke(main, [TEST_URL])
    assert result.exit_code == 0
    assert "backstreet-boys-i-want-it-that-way.txt" in result.output


# ---------------------------------------------------------------------------
# --artist search
# ---------------------------------------------------------------------------


def test_artist_lookup_uses_search():
    hit = SearchHit(url=TEST_URL, title="I Want It That Way", artist="Backstreet Boys")
    with patch("vocalsplit.cli.search_song", return_value=hit) as search, \
            patch("vocalsplit.cli.get_adapter", return_value=_mock_adapter()) as get_adapter:
        result = CliRunner().invoke(
            main,
            ["--stdout", "--artist", "Backstreet Boys", "--token", "secret", "I Want It That Way"],
        )
    assert result.exit_code == 0
    search.assert_called_once_with("Backstreet Boys", "I Want It That Way", "secret")
    get_adapter.assert_called_once_with(TEST_URL)


def test_artist_lookup_reads_token_from_env():
    hit = SearchHit(url=TEST_URL, title="I Want It That Way", artist="Backstreet Boys")
    with patch("vocalsplit.cli.search_song", return_value=hit) as search, \
            patch("vocalsplit.cli.get_adapter", return_value=_mock_adapter()):
        result = CliRunner().invoke(
            main,
            ["--stdout", "--artist", "Backstreet Boys", "I Want It That Way"],
            env={"GENIUS_ACCESS_TOKEN": "from-env"},
        )
    assert result.exit_code == 0
    assert search.call_args[0][2] == "from-env"


def test_artist_lookup_without_token_fails():
    result = CliRunner().invoke(
        main,
        ["--stdout", "--artist", "Backstreet Boys", "I Want It That Way"],
        env={"GENIUS_ACCESS_TOKEN": ""},
    )
    assert result.exit_code == 1
    assert "token" in result.output


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


def test_unsupported_site_exits_nonzero():
    with patch(
        "vocalsplit.cli.get_adapter",
        side_effect=UnsupportedSiteError("https://nosite.com/song"),
    ):
        result = CliRunner().invoke(main, ["--stdout", "https://nosite.com/song"])
    assert result.exit_code != 0
    assert "Error" in result.output


def test_fetch_error_exits_nonzero():
    adapter = MagicMock()
    adapter.scrape.side_effect = FetchError(TEST_URL, 404)
    with patch("vocalsplit.cli.get_adapter", return_value=adapter):
        result = CliRunner().invoke(main, ["--stdout", TEST_URL])
    assert result.exit_code != 0
    assert "404" in result.output


def test_source_error_message():
    exc = SourceError("missing.txt", "neither a URL nor a readable file")
    assert exc.path == "missing.txt"
    assert str(exc) == "Cannot read lyrics from missing.txt: neither a URL nor a readable file"


def test_fetch_error_without_response_message():
    assert str(FetchError(TEST_URL, 0)) == f"no response fetching {TEST_URL}"
    assert str(FetchError(TEST_URL, 503)) == f"HTTP 503 fetching {TEST_URL}"


def test_parse_error_exits_nonzero():
    adapter = MagicMock()
    adapter.scrape.side_effect = ParseError(TEST_URL, "No lyrics containers found")
    with patch("vocalsplit.cli.get_adapter", return_value=adapter):
        result = CliRunner().invoke(main, ["--stdout", TEST_URL])
    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# Several sources
# ---------------------------------------------------------------------------


def test_several_sources_print_album_summary(tmp_path):
    first = tmp_path / "one.txt"
    second = tmp_path / "two.txt"
    first.write_text(LYRICS, encoding="utf-8")
    second.write_text("[Verse 1: Nick Carter]\nYou are my fire\n", encoding="utf-8")

    result = CliRunner().invoke(main, [str(first), str(second)])
    assert result.exit_code == 0
    assert "Title: One" in result.output
    assert "Title: Two" in result.output
    assert "ALBUM ANALYSIS" in result.output
    assert "Successfully Processed: 2" in result.output


def test_several_sources_continue_past_failures(tmp_path):
    good = tmp_path / "good.txt"
    good.write_text(LYRICS, encoding="utf-8")
    adapter = MagicMock()
    adapter.scrape.side_effect = FetchError(TEST_URL, 500)
    with patch("vocalsplit.cli.get_adapter", return_value=adapter):
        result = CliRunner().invoke(main, [TEST_URL, str(good)])
    assert result.exit_code == 0
    assert "Successfully Processed: 1" in result.output
    assert "HTTP 500" in result.output


def test_several_sources_json(tmp_path):
    first = tmp_path / "one.txt"
    first.write_text(LYRICS, encoding="utf-8")
    out_file = tmp_path / "album.json"
    result = CliRunner().invoke(main, ["--json", "-o", str(out_file), str(first), str(first)])
    assert result.exit_code == 0
    data = json.loads(out_file.read_text())
    assert len(data["songs"]) == 2
    assert data["album"]["processed_songs"] == 2
    assert data["album"]["vocalist_distribution"]["All"]["lines"] == 2


def test_several_sources_all_failed_exits_nonzero():
    result = CliRunner().invoke(main, ["missing-one.txt", "missing-two.txt"])
    assert result.exit_code != 0


def test_several_sources_continue_past_undecodable_file(tmp_path):
    good = tmp_path / "good.txt"
    good.write_text(LYRICS, encoding="utf-8")
    broken = tmp_path / "broken.txt"
    broken.write_bytes(b"\xff\xfe\x00[Verse")

    result = CliRunner().invoke(main, [str(good), str(broken)])
    assert result.exit_code == 0
    assert "Title: Good" in result.output
    assert "Successfully Processed: 1" in result.output
    assert "2. " + str(broken) in result.output


def test_several_sources_json_includes_insights(tmp_path):
    first = tmp_path / "one.txt"
    first.write_text(LYRICS, encoding="utf-8")
    result = CliRunner().invoke(main, ["--json", str(first), str(first)])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["insights"]["dominant_vocalist"] == "Brian Littrell"
    assert data["insights"]["participation"]["All"]["consistency"] == "very consistent"
