"""
Cross-platform resolution module for tune-bridge.

Components:
    - CrossPlatformResolver: Per-track search on the target platform
    - Candidate / ResolveResult: Search rows and lookup outcomes
    - policies: Rules deciding whether a search row is the track
    - resolve_tracks: Convenience entry point used by the CLI

Usage:
    from tune_bridge.resolver import resolve_tracks

    links = resolve_tracks(factory, tracks, Platform.APPLE, config)
"""

from tune_bridge.resolver.models import Candidate, ResolveResult
from tune_bridge.resolver.policies import artist_score, make_policy, names_match
from tune_bridge.resolver.resolver import (
    SEARCH_TARGETS,
    CrossPlatformResolver,
    get_search_selectors,
    resolve_tracks,
)

__all__ = [
    "Candidate",
    "ResolveResult",
    "CrossPlatformResolver",
    "SEARCH_TARGETS",
    "get_search_selectors",
    "resolve_tracks",
    "make_policy",
    "names_match",
    "artist_score",
]
