"""
Spotify playlist extraction with scroll convergence.

The Spotify web player virtualizes its track list: only a window of rows
exists in the DOM, and more rows render as earlier ones are scrolled into
view. The extractor therefore repeats passes of query, scroll and parse
until a pass produces nothing new.

Pass Algorithm:
    1. Query every currently rendered row
    2. Skip the first len(collected) rows (already handled by earlier passes)
    3. Scroll each remaining row into view and read name and artist;
       a row missing either field is dropped with a warning
    4. Append rows not already collected (Track equality), in DOM order
    5. A failed query is retried and does not count as an idle pass
    6. Stop once max_idle_passes consecutive passes added nothing

Ceilings (ScrollConfig):
    max_passes, max_seconds and max_query_failures bound the loop. Hitting
    one raises ConvergenceTimeout with the tracks collected so far.

Usage:
    from tune_bridge.extractors.spotify import SpotifyExtractor

    with factory.open(playlist_url) as session:
        tracks = SpotifyExtractor(config.scroll).extract(session)
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Optional, Sequence

from tune_bridge.browser.selectors import SPOTIFY, SpotifySelectors
from tune_bridge.browser.session import ElementHandle, PageSession
from tune_bridge.core.config import ScrollConfig
from tune_bridge.core.exceptions import (
    ConvergenceTimeout,
    ElementNotFound,
    ExtractionError,
    NavigationError,
)
from tune_bridge.core.logger import get_logger
from tune_bridge.core.models import Track, dedupe_tracks
from tune_bridge.core.platforms import Platform
from tune_bridge.core.progress import CollectingProgressBar
from tune_bridge.extractors.base import BaseExtractor


logger = get_logger(__name__)


class ScrollPhase(str, Enum):
    """States of the scroll loop."""

    COLLECTING = "collecting"
    CONVERGED = "converged"
    TIMED_OUT = "timed_out"


@dataclass
class ScrollState:
    """
    Mutable bookkeeping for one run of the scroll loop.

    Attributes:
        started_at: Clock value when the loop started.
        phase: Current state.
        passes: Passes started, including failed ones.
        idle_passes: Consecutive completed passes that added nothing.
        query_failures: Consecutive passes whose row query failed.
        reason: Why the loop left COLLECTING.
    """
    started_at: float
    phase: ScrollPhase = ScrollPhase.COLLECTING
    passes: int = 0
    idle_passes: int = 0
    query_failures: int = 0
    reason: str = ""


class SpotifyExtractor(BaseExtractor):
    """
    Incremental extractor for Spotify playlist pages.

    Attributes:
        config: Loop ceilings and pause between passes.
        selectors: Row, name and artist selectors.
        timeout: Seconds to wait for rows, or None for the session default.
    """

    platform = Platform.SPOTIFY

    def __init__(
        self,
        config: Optional[ScrollConfig] = None,
        selectors: SpotifySelectors = SPOTIFY,
        timeout: Optional[float] = None,
        progress_bar: Optional[CollectingProgressBar] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            config: Scroll ceilings. Defaults to ScrollConfig().
            selectors: Spotify selectors.
            timeout: Row wait timeout.
            progress_bar: Optional bar updated after every pass.
            sleep: Pause function between passes.
            clock: Monotonic clock used for max_seconds.
        """
        self.config = config or ScrollConfig()
        self.selectors = selectors
        self.timeout = timeout
        self.progress_bar = progress_bar
        self._sleep = sleep
        self._clock = clock

    def extract(self, session: PageSession) -> list[Track]:
        """
        Collect every track of the playlist by scrolling until convergence.

        Args:
            session: Session opened on a Spotify playlist URL.

        Returns:
            Unique tracks in first-seen order.

        Raises:
            ExtractionError: If no track row appears on the page at all.
            ConvergenceTimeout: If a ceiling is hit before convergence.
        """
        try:
            session.wait_for_element(self.selectors.row, self.timeout)
        except ElementNotFound as e:
            raise ExtractionError(
                "Spotify playlist rows did not appear",
                details={"selector": self.selectors.row, **e.details}
            ) from e

        collected: list[Track] = []
        state = ScrollState(started_at=self._clock())

        while state.phase is ScrollPhase.COLLECTING:
            self._check_ceilings(state)
            if state.phase is not ScrollPhase.COLLECTING:
                break

            state.passes += 1
            try:
                rows = session.wait_for_elements(self.selectors.row, self.timeout)
            except (ElementNotFound, NavigationError) as e:
                state.query_failures += 1
                logger.warning(
                    f"Pass {state.passes}: row query failed "
                    f"({state.query_failures}/{self.config.max_query_failures}): {e}"
                )
                if state.query_failures >= self.config.max_query_failures:
                    state.phase = ScrollPhase.TIMED_OUT
                    state.reason = (
                        f"row query failed {state.query_failures} times in a row"
                    )
                else:
                    self._sleep(self.config.pause_seconds)
                continue

            state.query_failures = 0
            merged = dedupe_tracks(
                collected + list(self._parse_rows(session, rows[len(collected):]))
            )
            added = len(merged) - len(collected)
            collected = merged

            logger.debug(
                f"Pass {state.passes}: {len(rows)} rows rendered, "
                f"{added} new, {len(collected)} total"
            )
            if self.progress_bar is not None:
                self.progress_bar.update(collected=len(collected), passes=state.passes)

            if added:
                state.idle_passes = 0
            else:
                state.idle_passes += 1

            if state.idle_passes >= self.config.max_idle_passes:
                state.phase = ScrollPhase.CONVERGED
            else:
                self._sleep(self.config.pause_seconds)

        if state.phase is ScrollPhase.TIMED_OUT:
            raise ConvergenceTimeout(
                f"Spotify playlist did not converge: {state.reason} "
                f"({len(collected)} tracks collected)",
                details={"passes": state.passes, "collected": len(collected)},
                collected=collected,
            )

        logger.info(f"Got {len(collected)} tracks from Spotify in {state.passes} passes")
        return collected

    def _check_ceilings(self, state: ScrollState) -> None:
        """Move state to TIMED_OUT if the pass or time budget is spent."""
        if state.passes >= self.config.max_passes:
            state.phase = ScrollPhase.TIMED_OUT
            state.reason = f"reached {self.config.max_passes} passes"
            return

        elapsed = self._clock() - state.started_at
        if elapsed >= self.config.max_seconds:
            state.phase = ScrollPhase.TIMED_OUT
            state.reason = f"exceeded {self.config.max_seconds:g}s"

    def _parse_rows(
        self, session: PageSession, rows: Sequence[ElementHandle]
    ) -> Iterator[Track]:
        """
        Scroll each row into view and yield the ones that parse.

        Rows at the edge of the rendered window may be half built; those
        are dropped with a warning.
        """
        for row in rows:
            session.scroll_into_view(row)

            name_el = session.query_child(row, self.selectors.name)
            artist_el = session.query_child(row, self.selectors.artist)
            name = session.text(name_el) if name_el is not None else None
            artist = session.text(artist_el) if artist_el is not None else None

            if not name or not name.strip() or not artist or not artist.strip():
                logger.warning(
                    f"Dropping partially rendered row (name={name!r}, artist={artist!r})"
                )
                continue

            yield Track.from_fields(name, artist)
