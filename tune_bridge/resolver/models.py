"""
Data models for cross-platform resolution.

This module defines the search result rows read from the target
platform's search page and the per-track resolution outcome.
"""

from dataclasses import dataclass
from typing import Optional

from tune_bridge.core.models import Track


@dataclass(frozen=True)
class Candidate:
    """
    Immutable representation of one row in a search results list.

    Attributes:
        title: Visible text of the row's anchor, normally the song name.
               Example: "Never Gonna Give You Up"

        href: Raw (still percent-encoded) link of the anchor, or None if
              the anchor has no href attribute.

        row_text: Visible text of the whole row. On Apple Music this
                  also holds the artist line, which the name_and_artist
                  policy checks.

        position: Index of the row in rendered order (0-based).
    """
    title: str
    href: Optional[str]
    row_text: str = ""
    position: int = 0


@dataclass(frozen=True)
class ResolveResult:
    """
    Outcome of resolving a single track.

    Attributes:
        track: The track that was looked up.
        url: Percent-decoded target link, or None when unmatched.
        reason: Why no link was produced (empty when resolved).
        candidates_checked: Number of result rows inspected.
    """
    track: Track
    url: Optional[str] = None
    reason: str = ""
    candidates_checked: int = 0

    @property
    def resolved(self) -> bool:
        return self.url is not None

    @classmethod
    def unmatched(cls, track: Track, reason: str, candidates_checked: int = 0) -> "ResolveResult":
        return cls(track=track, reason=reason, candidates_checked=candidates_checked)
