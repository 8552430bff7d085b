"""Test the tunebridge command"""

import json

import pytest
from click.testing import CliRunner

from tune_bridge import __version__
from tune_bridge import cli as cli_module
from tune_bridge.browser.selectors import SPOTIFY, YOUTUBE
from tune_bridge.cli import cli
from tune_bridge.core.models import Track
from tune_bridge.core.storage import save_tracks


YOUTUBE_URL = "https://music.youtube.com/playlist?list=PLtest"
SPOTIFY_URL = "https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M"
SEARCH = "https://music.apple.com/us/search?term="


@pytest.fixture
def runner(temp_dir, monkeypatch):
    """CliRunner in an empty working directory (no config.yaml)"""
    monkeypatch.chdir(temp_dir)
    return CliRunner()


@pytest.fixture
def use_factory(monkeypatch):
    """Replace Chrome with a FakeSessionFactory"""
    def install(factory):
        monkeypatch.setattr(cli_module, "ChromeSessionFactory", lambda browser_config: factory)
        return factory
    return install


@pytest.fixture
def no_browser(monkeypatch):
    """Fail the test if the CLI tries to start a browser"""
    def forbidden(browser_config):
        raise AssertionError("browser should not be started")
    monkeypatch.setattr(cli_module, "ChromeSessionFactory", forbidden)


@pytest.fixture
def playlist_file(temp_dir):
    path = temp_dir / "playlist.json"
    save_tracks(path, [Track("Foo", "Bar"), Track("Missing", "Nobody", "Album")])
    return path


class TestOptions:
    """Test option handling"""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert f"tune-bridge {__version__}" in result.stdout

    def test_no_arguments_shows_help(self, runner):
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "--from-json" in result.output

    def test_url_and_json_conflict(self, runner, playlist_file, no_browser):
        result = runner.invoke(cli, ["--url", YOUTUBE_URL, "--from-json", str(playlist_file)])

        assert result.exit_code == 1

    def test_links_out_requires_target(self, runner, playlist_file, no_browser):
        result = runner.invoke(cli, ["--from-json", str(playlist_file), "--links-out", "l.json"])

        assert result.exit_code == 1

    def test_missing_explicit_config(self, runner, playlist_file, no_browser):
        result = runner.invoke(cli, ["--from-json", str(playlist_file), "--config", "nope.yaml"])

        assert result.exit_code == 1
        assert "Configuration error" in result.stderr


class TestFromJson:
    """Test runs that start from a saved playlist"""

    def test_prints_playlist_json(self, runner, playlist_file, no_browser):
        result = runner.invoke(cli, ["--from-json", str(playlist_file)])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            {"name": "Foo", "artist": "Bar", "album": None},
            {"name": "Missing", "artist": "Nobody", "album": "Album"},
        ]

    def test_save_suppresses_stdout(self, runner, playlist_file, temp_dir, no_browser):
        out = temp_dir / "copy.json"

        result = runner.invoke(cli, ["--from-json", str(playlist_file), "--save", str(out)])

        assert result.exit_code == 0
        assert result.stdout == ""
        assert out.read_text(encoding="utf-8") == playlist_file.read_text(encoding="utf-8")

    def test_missing_playlist_file(self, runner, temp_dir, no_browser):
        result = runner.invoke(cli, ["--from-json", str(temp_dir / "missing.json")])

        assert result.exit_code == 2
        assert "Playlist file error" in result.stderr

    @pytest.mark.parametrize("content", [
        b'[{"name": ["a"], "artist": "X"}]',
        b'[{"name": "\xff\xfe", "artist": "X"}]',
    ])
    def test_invalid_playlist_file(self, runner, temp_dir, no_browser, content):
        path = temp_dir / "bad.json"
        path.write_bytes(content)

        result = runner.invoke(cli, ["--from-json", str(path)])

        assert result.exit_code == 2
        assert "Playlist file error" in result.stderr
        assert "Unexpected error" not in result.stderr

    def test_resolve_prints_links(
        self, runner, playlist_file, temp_dir, use_factory, make_factory, apple_search_page
    ):
        factory = use_factory(make_factory({
            SEARCH + "Foo - Bar": apple_search_page(("Foo", "https://music.apple.com/song/1")),
            SEARCH + "Missing - Nobody": apple_search_page(("Other", "https://x")),
        }))
        links_out = temp_dir / "apple.json"

        result = runner.invoke(cli, [
            "--from-json", str(playlist_file),
            "--target", "apple",
            "--links-out", str(links_out),
        ])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["https://music.apple.com/song/1"]
        assert json.loads(links_out.read_text(encoding="utf-8")) == [
            "https://music.apple.com/song/1"
        ]
        assert "Url not found for Nobody - Missing" in result.stderr
        assert factory.closed

    def test_unsupported_target(self, runner, playlist_file, use_factory, make_factory):
        factory = use_factory(make_factory())

        result = runner.invoke(cli, ["--from-json", str(playlist_file), "--target", "spotify"])

        assert result.exit_code == 1
        assert factory.opened == []


class TestFromUrl:
    """Test runs that extract a playlist in the browser"""

    def test_youtube_playlist(
        self, runner, use_factory, make_factory, make_session, youtube_row
    ):
        page = make_session(elements={YOUTUBE.row: [
            youtube_row("Foo", "Bar", "Baz", "3:00", ""),
        ]})
        factory = use_factory(make_factory({YOUTUBE_URL: page}))

        result = runner.invoke(cli, ["--url", YOUTUBE_URL])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == [{"name": "Foo", "artist": "Bar", "album": "Baz"}]
        assert page.closed
        assert factory.closed

    def test_spotify_playlist_saved(
        self, runner, temp_dir, use_factory, make_factory, make_session, spotify_row
    ):
        config = temp_dir / "config.yaml"
        config.write_text("scroll:\n  pause_seconds: 0\n", encoding="utf-8")
        rows = [spotify_row("One", "A"), spotify_row("Two", "B")]
        page = make_session(scripts={SPOTIFY.row: [rows[:1], rows, rows]})
        use_factory(make_factory({SPOTIFY_URL: page}))
        out = temp_dir / "spotify.json"

        result = runner.invoke(cli, ["--url", SPOTIFY_URL, "--save", str(out)])

        assert result.exit_code == 0
        assert json.loads(out.read_text(encoding="utf-8")) == [
            {"name": "One", "artist": "A", "album": None},
            {"name": "Two", "artist": "B", "album": None},
        ]

    def test_unknown_host(self, runner, use_factory, make_factory):
        factory = use_factory(make_factory())

        result = runner.invoke(cli, ["--url", "https://example.com/playlist/1"])

        assert result.exit_code == 1
        assert factory.opened == []

    def test_extraction_failure(self, runner, temp_dir, use_factory, make_factory, make_session):
        factory = use_factory(make_factory({YOUTUBE_URL: make_session()}))
        out = temp_dir / "never.json"

        result = runner.invoke(cli, ["--url", YOUTUBE_URL, "--save", str(out)])

        assert result.exit_code == 3
        assert not out.exists()
        assert factory.closed

    def test_navigation_failure(self, runner, use_factory, make_factory):
        use_factory(make_factory())

        result = runner.invoke(cli, ["--url", YOUTUBE_URL])

        assert result.exit_code == 3
        assert "Browser error" in result.stderr
