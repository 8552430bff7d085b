"""
Candidate match policies.

A policy decides whether a search result row is the track being looked
up. The resolver takes the first row, in rendered order, that the
policy accepts.

Policies:
    name:
        The row's title equals the track name, case-insensitively.
        Surrounding whitespace is ignored.

    name_and_artist:
        The name rule above, and the track's artist must appear in the
        row's visible text. Appearance is scored with
        rapidfuzz.fuzz.partial_ratio over normalized text and accepted
        at or above the configured threshold (0-100).

Dependencies:
    - rapidfuzz: Fuzzy string matching for the artist check
"""

import re
from typing import Callable

from rapidfuzz import fuzz

from tune_bridge.core.config import MATCH_POLICIES, ResolverConfig
from tune_bridge.core.exceptions import ConfigError
from tune_bridge.core.models import Track
from tune_bridge.resolver.models import Candidate


MatchPolicy = Callable[[Track, Candidate], bool]


def _normalize_text(text: str) -> str:
    """
    Normalize text for fuzzy comparison.

    Lowercases, drops punctuation and collapses whitespace.

    Example:
        "  The  Beatles! " -> "the beatles"
    """
    text = re.sub(r"[^\w\s]", "", text)
    return " ".join(text.split()).lower()


def names_match(track: Track, candidate: Candidate) -> bool:
    """
    Case-insensitive equality of track name and candidate title.

    Both sides are lowercased, not casefolded, so "Straße" and "STRASSE"
    differ. Surrounding whitespace of the rendered title is ignored.
    """
    return candidate.title.strip().lower() == track.name.strip().lower()


def artist_score(track: Track, candidate: Candidate) -> float:
    """
    Score how well the track's artist appears in the candidate row.

    Returns:
        rapidfuzz partial_ratio in [0, 100]; 0.0 if either side is empty
        after normalization.
    """
    artist = _normalize_text(track.artist)
    row_text = _normalize_text(candidate.row_text)
    if not artist or not row_text:
        return 0.0
    return fuzz.partial_ratio(artist, row_text)


def make_policy(config: ResolverConfig) -> MatchPolicy:
    """
    Build the match predicate selected by config.match_policy.

    Args:
        config: Resolver configuration.

    Returns:
        A function (track, candidate) -> bool.

    Raises:
        ConfigError: If the policy name is unknown.
    """
    if config.match_policy == "name":
        return names_match

    if config.match_policy == "name_and_artist":
        threshold = config.artist_threshold

        def name_and_artist(track: Track, candidate: Candidate) -> bool:
            return (
                names_match(track, candidate)
                and artist_score(track, candidate) >= threshold
            )

        return name_and_artist

    raise ConfigError(
        f"Unknown match policy: {config.match_policy}",
        details={"match_policy": config.match_policy, "allowed": list(MATCH_POLICIES)}
    )
