"""
Data models shared by every platform.

This module defines the platform-agnostic track record produced by the
extractors, persisted to JSON, and consumed by the resolver.

Design Decisions:
    - Track is a frozen dataclass: a value object compared field by field
    - Album is None when the source rendered nothing, never ""
    - Dataclass equality is the dedup key used by the Spotify scroll loop

Usage:
    from tune_bridge.core.models import Track, dedupe_tracks

    track = Track.from_fields(" Song ", "Artist", "")
    # Track(name='Song', artist='Artist', album=None)
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class Track:
    """
    Immutable, platform-agnostic track record.

    Attributes:
        name: Track title as rendered by the source platform.
              Required, non-empty after trimming.
              Example: "Bohemian Rhapsody"

        artist: Artist string as rendered by the source platform.
                Required, non-empty after trimming.
                Example: "Queen"

        album: Album title, or None when the source rendered no album.
               Example: "A Night at the Opera"

    Class Methods:
        from_fields: Build from raw extracted strings (trims, maps "" to None).
        from_dict: Build from a persisted JSON object.

    Raises:
        ValueError: On construction with a blank name or artist.
    """

    name: str
    artist: str
    album: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Track name must be a non-empty string")
        if not isinstance(self.artist, str) or not self.artist.strip():
            raise ValueError("Track artist must be a non-empty string")
        if self.album is not None and not isinstance(self.album, str):
            raise ValueError("Track album must be a string or None")

    @classmethod
    def from_fields(
        cls,
        name: Optional[str],
        artist: Optional[str],
        album: Optional[str] = None
    ) -> "Track":
        """
        Create a Track from raw strings extracted from a page.

        Leading and trailing whitespace is removed from every field.
        An album that is None or blank after trimming becomes None.

        Args:
            name: Raw track name.
            artist: Raw artist string.
            album: Raw album string, possibly empty.

        Returns:
            Track with normalized fields.

        Raises:
            ValueError: If name or artist is missing or blank.
        """
        album = album.strip() if album else ""
        return cls(
            name=(name or "").strip(),
            artist=(artist or "").strip(),
            album=album or None,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Track":
        """
        Create a Track from a persisted JSON object.

        Args:
            data: Dict with 'name', 'artist' and optional 'album' keys.
                  A missing, null or empty album is treated as absent.

        Returns:
            Track instance.

        Raises:
            ValueError: If name or artist is missing, not a string or blank.
        """
        for key in ("name", "artist"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"Track {key} must be a string")
        album = data.get("album")
        if album is not None and not isinstance(album, str):
            raise ValueError("Track album must be a string or null")
        return cls.from_fields(data.get("name"), data.get("artist"), album)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-serializable dict.

        Returns:
            Dict with 'name', 'artist' and 'album' (None when absent).
        """
        return {"name": self.name, "artist": self.artist, "album": self.album}

    @property
    def search_query(self) -> str:
        """Query string used on target platforms: "{name} - {artist}"."""
        return f"{self.name} - {self.artist}"

    def __str__(self) -> str:
        return f"{self.artist} - {self.name}"


def dedupe_tracks(tracks: Iterable[Track]) -> list[Track]:
    """
    Remove duplicate tracks, keeping the first occurrence.

    Two tracks are duplicates when name, artist and album are all equal.

    Args:
        tracks: Tracks in presentation order.

    Returns:
        New list without duplicates, in first-seen order.

    Example:
        dedupe_tracks([a, b, a, c, b])  # [a, b, c]
    """
    seen: set[Track] = set()
    unique: list[Track] = []
    for track in tracks:
        if track in seen:
            continue
        seen.add(track)
        unique.append(track)
    return unique
