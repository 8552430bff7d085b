"""Test Spotify scroll-convergence extraction"""

from unittest.mock import Mock

import pytest

from tune_bridge.browser.selectors import SPOTIFY
from tune_bridge.core.config import ScrollConfig
from tune_bridge.core.exceptions import (
    ConvergenceTimeout,
    ElementNotFound,
    ExtractionError,
    NavigationError,
)
from tune_bridge.core.models import Track
from tune_bridge.extractors.spotify import SpotifyExtractor


@pytest.fixture
def rows(spotify_row):
    """Ten distinct rows: Song 0 .. Song 9 by Artist"""
    return [spotify_row(f"Song {i}", "Artist") for i in range(10)]


def _tracks(*indexes):
    return [Track(f"Song {i}", "Artist") for i in indexes]


class TestConvergence:
    """Test the scroll loop's termination"""

    def test_growing_then_stable(self, make_session, rows, no_sleep):
        """Test that collection stops on the first pass without new rows"""
        session = make_session(scripts={SPOTIFY.row: [
            rows[:2],
            rows[:4],
            rows[:5],
            rows[:5],
        ]})

        tracks = SpotifyExtractor(sleep=no_sleep).extract(session)

        assert tracks == _tracks(0, 1, 2, 3, 4)
        assert session.queries == 4
        assert len(no_sleep.calls) == 3

    def test_each_row_scrolled_into_view_once(self, make_session, rows, no_sleep):
        session = make_session(scripts={SPOTIFY.row: [rows[:2], rows[:3], rows[:3]]})

        SpotifyExtractor(sleep=no_sleep).extract(session)

        assert session.scrolled == rows[:3]

    def test_duplicates_removed_in_first_seen_order(self, make_session, spotify_row, no_sleep):
        a = spotify_row("A", "X")
        b = spotify_row("B", "X")
        session = make_session(scripts={SPOTIFY.row: [[a, b, a], [a, b, a]]})

        tracks = SpotifyExtractor(sleep=no_sleep).extract(session)

        assert tracks == [Track("A", "X"), Track("B", "X")]

    def test_idle_allowance(self, make_session, rows, no_sleep):
        """Test that max_idle_passes consecutive idle passes are needed"""
        session = make_session(scripts={SPOTIFY.row: [
            rows[:2],
            rows[:2],
            rows[:3],
            rows[:3],
            rows[:3],
        ]})

        extractor = SpotifyExtractor(ScrollConfig(max_idle_passes=2), sleep=no_sleep)
        tracks = extractor.extract(session)

        assert tracks == _tracks(0, 1, 2)
        assert session.queries == 5

    def test_never_stops_while_rows_keep_arriving(self, make_session, rows, no_sleep):
        session = make_session(scripts={SPOTIFY.row: [rows[:i] for i in range(1, 11)]})

        extractor = SpotifyExtractor(ScrollConfig(max_passes=4), sleep=no_sleep)
        with pytest.raises(ConvergenceTimeout) as exc_info:
            extractor.extract(session)

        assert exc_info.value.collected == _tracks(0, 1, 2, 3)
        assert exc_info.value.details["passes"] == 4

    def test_partial_rows_dropped(self, make_session, spotify_row, no_sleep):
        """Test that a row missing its artist is skipped"""
        good = spotify_row("Good", "Artist")
        partial = spotify_row("Half", None)
        blank = spotify_row("   ", "Artist")
        session = make_session(scripts={SPOTIFY.row: [
            [good, partial, blank],
            [good, partial, blank],
        ]})

        tracks = SpotifyExtractor(sleep=no_sleep).extract(session)

        assert tracks == [Track("Good", "Artist")]

    def test_progress_bar_updated_every_pass(self, make_session, rows, no_sleep):
        progress_bar = Mock()
        session = make_session(scripts={SPOTIFY.row: [rows[:2], rows[:2]]})

        SpotifyExtractor(progress_bar=progress_bar, sleep=no_sleep).extract(session)

        progress_bar.update.assert_any_call(collected=2, passes=1)
        progress_bar.update.assert_called_with(collected=2, passes=2)


class TestFailures:
    """Test ceilings and query failures"""

    def test_no_rows_at_all(self, make_session, no_sleep):
        with pytest.raises(ExtractionError) as exc_info:
            SpotifyExtractor(sleep=no_sleep).extract(make_session())

        assert not isinstance(exc_info.value, ConvergenceTimeout)

    def test_failed_query_is_retried_and_not_idle(self, make_session, rows, no_sleep):
        session = make_session(scripts={SPOTIFY.row: [
            rows[:1],
            ElementNotFound("rows vanished"),
            rows[:2],
            rows[:2],
        ]})

        tracks = SpotifyExtractor(sleep=no_sleep).extract(session)

        assert tracks == _tracks(0, 1)

    def test_too_many_query_failures(self, make_session, rows, no_sleep):
        session = make_session(scripts={SPOTIFY.row: [
            rows[:2],
            NavigationError("tab crashed"),
            NavigationError("tab crashed"),
            NavigationError("tab crashed"),
        ]})

        extractor = SpotifyExtractor(ScrollConfig(max_query_failures=3), sleep=no_sleep)
        with pytest.raises(ConvergenceTimeout) as exc_info:
            extractor.extract(session)

        assert exc_info.value.collected == _tracks(0, 1)

    def test_time_ceiling(self, make_session, rows, no_sleep):
        times = iter([0.0, 1.0, 2.0, 30.0])
        session = make_session(scripts={SPOTIFY.row: [rows[:1], rows[:2], rows[:3]]})

        extractor = SpotifyExtractor(
            ScrollConfig(max_seconds=10),
            sleep=no_sleep,
            clock=lambda: next(times),
        )
        with pytest.raises(ConvergenceTimeout) as exc_info:
            extractor.extract(session)

        assert exc_info.value.collected == _tracks(0, 1)
        assert "10s" in exc_info.value.message
