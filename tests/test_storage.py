"""Test playlist and link persistence"""

import json

import pytest

from tune_bridge.core import storage
from tune_bridge.core.exceptions import PlaylistFileError
from tune_bridge.core.models import Track
from tune_bridge.core.storage import load_tracks, save_links, save_tracks


class TestSaveTracks:
    """Test save_tracks()"""

    def test_writes_json_array(self, temp_dir, sample_tracks):
        path = temp_dir / "playlist.json"

        save_tracks(path, sample_tracks)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0] == {
            "name": "Bohemian Rhapsody",
            "artist": "Queen",
            "album": "A Night at the Opera",
        }
        assert data[2]["album"] is None
        assert len(data) == 3

    def test_reads_back_equal(self, temp_dir, sample_tracks):
        path = temp_dir / "playlist.json"
        save_tracks(path, sample_tracks)

        assert load_tracks(path) == sample_tracks

    def test_non_ascii_kept_readable(self, temp_dir):
        path = temp_dir / "playlist.json"
        save_tracks(path, [Track("Café", "Sigur Rós")])

        assert "Sigur Rós" in path.read_text(encoding="utf-8")

    def test_creates_parent_directories(self, temp_dir, sample_tracks):
        path = temp_dir / "nested" / "dir" / "playlist.json"
        save_tracks(path, sample_tracks)

        assert path.exists()

    def test_failed_write_leaves_existing_file(self, temp_dir, sample_tracks, monkeypatch):
        """Test that no partial JSON is left behind"""
        path = temp_dir / "playlist.json"
        path.write_text("[]\n", encoding="utf-8")

        def broken_dump(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(storage.json, "dump", broken_dump)

        with pytest.raises(PlaylistFileError):
            save_tracks(path, sample_tracks)

        assert path.read_text(encoding="utf-8") == "[]\n"
        assert [p.name for p in temp_dir.iterdir()] == ["playlist.json"]


class TestLoadTracks:
    """Test load_tracks() validation"""

    def test_missing_file(self, temp_dir):
        with pytest.raises(PlaylistFileError, match="not found"):
            load_tracks(temp_dir / "missing.json")

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "bad.json"
        path.write_text("[{", encoding="utf-8")

        with pytest.raises(PlaylistFileError, match="Invalid JSON"):
            load_tracks(path)

    def test_not_an_array(self, temp_dir):
        path = temp_dir / "obj.json"
        path.write_text('{"name": "Song"}', encoding="utf-8")

        with pytest.raises(PlaylistFileError, match="array"):
            load_tracks(path)

    def test_entry_not_an_object(self, temp_dir):
        path = temp_dir / "strings.json"
        path.write_text('["Song"]', encoding="utf-8")

        with pytest.raises(PlaylistFileError) as exc_info:
            load_tracks(path)

        assert exc_info.value.details["index"] == 0

    def test_invalid_entry_reports_index(self, temp_dir):
        path = temp_dir / "blank.json"
        path.write_text(
            '[{"name": "Song", "artist": "A"}, {"name": " ", "artist": "B"}]',
            encoding="utf-8",
        )

        with pytest.raises(PlaylistFileError) as exc_info:
            load_tracks(path)

        assert exc_info.value.details["index"] == 1

    @pytest.mark.parametrize("entry", [
        '{"name": 5, "artist": "X"}',
        '{"name": ["a"], "artist": "X"}',
        '{"name": "Song", "artist": true}',
        '{"artist": "X"}',
    ])
    def test_non_string_name_or_artist(self, temp_dir, entry):
        path = temp_dir / "types.json"
        path.write_text(f"[{entry}]", encoding="utf-8")

        with pytest.raises(PlaylistFileError) as exc_info:
            load_tracks(path)

        assert exc_info.value.details["index"] == 0

    def test_invalid_utf8(self, temp_dir):
        path = temp_dir / "latin1.json"
        path.write_bytes(b'[{"name": "\xff\xfe", "artist": "X"}]')

        with pytest.raises(PlaylistFileError, match="UTF-8"):
            load_tracks(path)

    def test_missing_or_empty_album_is_absent(self, temp_dir):
        path = temp_dir / "albums.json"
        path.write_text(
            '[{"name": "A", "artist": "X"}, {"name": "B", "artist": "X", "album": ""}]',
            encoding="utf-8",
        )

        assert [t.album for t in load_tracks(path)] == [None, None]


class TestSaveLinks:
    """Test save_links()"""

    def test_writes_array_of_strings(self, temp_dir):
        path = temp_dir / "apple.json"
        links = ["https://music.apple.com/song/1", "https://music.apple.com/song/2"]

        save_links(path, links)

        assert json.loads(path.read_text(encoding="utf-8")) == links

    def test_empty(self, temp_dir):
        path = temp_dir / "apple.json"
        save_links(path, [])

        assert json.loads(path.read_text(encoding="utf-8")) == []
