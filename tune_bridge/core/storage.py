"""
JSON persistence for playlists and resolved links.

A playlist is stored as a JSON array of {name, artist, album} objects in
presentation order, with album null when absent:

    [
      {"name": "Foo", "artist": "Bar", "album": null},
      {"name": "Baz", "artist": "Qux", "album": "Quux"}
    ]

Writes are atomic: the data goes to a temporary file next to the target
and is moved into place with os.replace, so an interrupted run never
leaves a half-written file behind.

Usage:
    from tune_bridge.core.storage import save_tracks, load_tracks

    save_tracks(Path("playlist.json"), tracks)
    tracks = load_tracks(Path("playlist.json"))
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable

from tune_bridge.core.exceptions import PlaylistFileError
from tune_bridge.core.logger import get_logger
from tune_bridge.core.models import Track


logger = get_logger(__name__)


def save_tracks(path: Path, tracks: Iterable[Track]) -> None:
    """
    Write a playlist to a JSON file.

    Args:
        path: Destination file. Parent directories are created.
        tracks: Tracks in presentation order.

    Raises:
        PlaylistFileError: If the file cannot be written.
    """
    data = [track.to_dict() for track in tracks]
    _write_json_atomic(path, data)
    logger.info(f"Saved {len(data)} tracks to {path}")


def save_links(path: Path, links: Iterable[str]) -> None:
    """
    Write resolved links to a JSON file as an array of strings.

    Args:
        path: Destination file. Parent directories are created.
        links: Resolved links in resolution order.

    Raises:
        PlaylistFileError: If the file cannot be written.
    """
    data = list(links)
    _write_json_atomic(path, data)
    logger.info(f"Saved {len(data)} links to {path}")


def load_tracks(path: Path) -> list[Track]:
    """
    Read a playlist previously written by save_tracks().

    Args:
        path: JSON file to read.

    Returns:
        Tracks in file order.

    Raises:
        PlaylistFileError: If the file is missing or unreadable, is not
                           valid JSON, is not an array of objects, or an
                           entry has a missing/blank name or artist.
    """
    if not path.exists():
        raise PlaylistFileError(
            f"Playlist file not found: {path}",
            details={"file_path": str(path)}
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise PlaylistFileError(
            f"Invalid JSON in playlist file: {e}",
            details={"file_path": str(path), "line": e.lineno}
        ) from e
    except UnicodeDecodeError as e:
        raise PlaylistFileError(
            f"Playlist file is not valid UTF-8: {e}",
            details={"file_path": str(path), "position": e.start}
        ) from e
    except OSError as e:
        raise PlaylistFileError(
            f"Failed to read playlist file: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e

    if not isinstance(raw, list):
        raise PlaylistFileError(
            "Playlist file must contain a JSON array",
            details={"file_path": str(path)}
        )

    tracks: list[Track] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise PlaylistFileError(
                f"Entry {index} in playlist file is not an object",
                details={"file_path": str(path), "index": index}
            )
        try:
            tracks.append(Track.from_dict(entry))
        except ValueError as e:
            raise PlaylistFileError(
                f"Entry {index} in playlist file is invalid: {e}",
                details={"file_path": str(path), "index": index, "entry": entry}
            ) from e

    logger.debug(f"Loaded {len(tracks)} tracks from {path}")
    return tracks


def _write_json_atomic(path: Path, data: Any) -> None:
    """
    Serialize data to path through a temporary file and os.replace.

    Raises:
        PlaylistFileError: On any filesystem error. The temporary file is
                           removed and the target is left untouched.
    """
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            json.dump(data, tmp, ensure_ascii=False, indent=2)
            tmp.write("\n")
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PlaylistFileError(
            f"Failed to write {path}: {e}",
            details={"file_path": str(path), "original_error": str(e)}
        ) from e
