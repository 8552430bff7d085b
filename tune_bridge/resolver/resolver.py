"""
Cross-platform track resolution.

This module looks each Track up on a target platform's search page and
turns the first acceptable result into a link on that platform.

Resolution Algorithm (per track, independently):
    1. Open a fresh session on the search URL for "{name} - {artist}"
    2. Wait for the "Songs" results container
    3. Read every result row: anchor text, anchor href, row text
    4. Take the first row, in rendered order, accepted by the match policy
    5. Percent-decode its href and emit it
    6. Close the session, whatever happened

Failure Handling:
    Navigation failures, a missing results container and "no acceptable
    row" are all per-track outcomes: the track is omitted, a warning is
    logged (and written to unmatched_tracks.log when file logging is on),
    and the loop continues with the next track.

Usage:
    from tune_bridge.resolver import resolve_tracks

    links = resolve_tracks(factory, tracks, Platform.APPLE, config)
"""

from typing import Iterable, Optional
from urllib.parse import quote, unquote

from tune_bridge.browser.selectors import APPLE_MUSIC_SEARCH, SearchSelectors
from tune_bridge.browser.session import PageSession, SessionFactory
from tune_bridge.core.config import Config, ResolverConfig
from tune_bridge.core.exceptions import (
    ElementNotFound,
    NavigationError,
    NoMatchFound,
    UnsupportedPlatformError,
)
from tune_bridge.core.logger import (
    format_resolved_message,
    get_logger,
    log_unmatched_track,
)
from tune_bridge.core.models import Track
from tune_bridge.core.platforms import Platform
from tune_bridge.core.progress import ResolvingProgressBar
from tune_bridge.resolver.models import Candidate, ResolveResult
from tune_bridge.resolver.policies import MatchPolicy, make_policy


logger = get_logger(__name__)


# Platforms that can be searched, and how
SEARCH_TARGETS: dict[Platform, SearchSelectors] = {
    Platform.APPLE: APPLE_MUSIC_SEARCH,
}


def get_search_selectors(target: Platform) -> SearchSelectors:
    """
    Return the search selectors for a resolution target.

    Raises:
        UnsupportedPlatformError: If target has no search strategy.
    """
    try:
        return SEARCH_TARGETS[target]
    except KeyError:
        raise UnsupportedPlatformError(
            f"Cannot resolve tracks on {target.value}",
            details={
                "target": target.value,
                "supported": [p.value for p in SEARCH_TARGETS],
            }
        ) from None


class CrossPlatformResolver:
    """
    Resolves tracks to links on a target platform through its search page.

    Each track gets its own session, so one broken search page cannot
    leak state into the next lookup.

    Attributes:
        factory: Opens browser sessions.
        target: Platform being searched.
        selectors: Search page selectors for the target.
        config: Match policy, threshold and storefront.
        timeout: Element wait timeout, or None for the session default.
    """

    def __init__(
        self,
        factory: SessionFactory,
        target: Platform = Platform.APPLE,
        config: Optional[ResolverConfig] = None,
        timeout: Optional[float] = None
    ) -> None:
        """
        Initialize the resolver.

        Raises:
            UnsupportedPlatformError: If target cannot be searched.
            ConfigError: If the configured match policy is unknown.
        """
        self.factory = factory
        self.target = target
        self.selectors = get_search_selectors(target)
        self.config = config or ResolverConfig()
        self.timeout = timeout
        self._policy: MatchPolicy = make_policy(self.config)

    def search_url(self, track: Track) -> str:
        """
        Build the search URL for a track.

        Example:
            Track("Foo", "Bar") -> https://music.apple.com/us/search?term=Foo%20-%20Bar
        """
        return self.selectors.search_url.format(
            storefront=self.config.storefront,
            query=quote(track.search_query, safe=""),
        )

    def resolve(
        self,
        tracks: Iterable[Track],
        progress_bar: Optional[ResolvingProgressBar] = None
    ) -> list[str]:
        """
        Resolve tracks in order, dropping the ones without a match.

        Args:
            tracks: Tracks to look up.
            progress_bar: Optional bar updated once per track.

        Returns:
            Decoded links, in input order, one per resolved track.
        """
        links: list[str] = []
        unmatched = 0

        for track in tracks:
            result = self.resolve_track(track)

            if result.resolved:
                links.append(result.url)
                logger.debug(format_resolved_message(track.artist, track.name, result.url))
            else:
                unmatched += 1
                log_unmatched_track(logger, track.name, track.artist, result.reason)

            if progress_bar is not None:
                progress_bar.update(resolved=result.resolved)

        logger.info(
            f"Resolved {len(links)} tracks on {self.target.value} "
            f"({unmatched} without a match)"
        )
        return links

    def resolve_track(self, track: Track) -> ResolveResult:
        """
        Look a single track up.

        Never raises for per-track failures; they are reported in the
        returned ResolveResult instead.
        """
        url = self.search_url(track)
        logger.debug(f"Searching {self.target.value} for {track}: {url}")

        try:
            session = self.factory.open(url)
        except NavigationError as e:
            return ResolveResult.unmatched(track, f"search page failed to load: {e.message}")

        candidates: list[Candidate] = []
        try:
            candidates = self._read_candidates(session)
            match = self._select(track, candidates)
            return ResolveResult(
                track=track,
                url=unquote(match.href),
                candidates_checked=len(candidates),
            )
        except ElementNotFound:
            return ResolveResult.unmatched(track, "no song results")
        except NavigationError as e:
            return ResolveResult.unmatched(track, f"search page failed: {e.message}")
        except NoMatchFound as e:
            return ResolveResult.unmatched(track, e.message, len(candidates))
        finally:
            _close_quietly(session)

    def _read_candidates(self, session: PageSession) -> list[Candidate]:
        """
        Read every result row of the songs container.

        Raises:
            ElementNotFound: If the container or its rows never appear.
        """
        container = session.wait_for_element(self.selectors.results, self.timeout)
        rows = session.wait_for_children(container, self.selectors.candidate, self.timeout)

        candidates = []
        for position, row in enumerate(rows):
            anchor = session.query_child(row, self.selectors.link)
            if anchor is None:
                continue
            candidates.append(Candidate(
                title=session.text(anchor) or "",
                href=session.attribute(anchor, "href"),
                row_text=session.text(row) or "",
                position=position,
            ))
        return candidates

    def _select(self, track: Track, candidates: list[Candidate]) -> Candidate:
        """
        Return the first candidate accepted by the policy.

        Candidates without an href can never be emitted and are skipped.

        Raises:
            NoMatchFound: If no candidate is accepted.
        """
        for candidate in candidates:
            if candidate.href and self._policy(track, candidate):
                return candidate

        raise NoMatchFound(
            f"no result named '{track.name}' among {len(candidates)} candidates",
            details={"track": str(track), "policy": self.config.match_policy}
        )


def _close_quietly(session: PageSession) -> None:
    """Close a session, logging instead of raising on failure."""
    try:
        session.close()
    except Exception as e:
        logger.warning(f"Failed to close search session: {e}")


# =============================================================================
# Convenience Functions (called by CLI)
# =============================================================================

def resolve_tracks(
    factory: SessionFactory,
    tracks: list[Track],
    target: Platform,
    config: Config,
    progress_bar: Optional[ResolvingProgressBar] = None
) -> list[str]:
    """
    Convenience function for resolving a playlist on a target platform.

    Args:
        factory: Opens browser sessions.
        tracks: Tracks to resolve.
        target: Platform to search.
        config: Application configuration.
        progress_bar: Optional existing progress bar to use.

    Returns:
        Resolved links in input order.

    Raises:
        UnsupportedPlatformError: If target cannot be searched. Raised
            before any session is opened.
    """
    resolver = CrossPlatformResolver(
        factory,
        target,
        config.resolver,
        timeout=config.browser.element_timeout,
    )
    return resolver.resolve(tracks, progress_bar)
