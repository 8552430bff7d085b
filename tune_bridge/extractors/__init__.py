"""
Playlist extraction module for tune-bridge.

This module turns a playlist URL into an ordered list of Track records
by driving the browser through a PageSession.

Components:
    - BaseExtractor: Interface shared by all extractors
    - YouTubeExtractor: One-shot extraction of YouTube Music playlists
    - SpotifyExtractor: Scroll-convergence extraction of Spotify playlists
    - fetch_playlist: Classify a URL, pick the extractor, run it

Usage:
    from tune_bridge.extractors import fetch_playlist

    with ChromeSessionFactory(config.browser) as factory:
        tracks = fetch_playlist(factory, url, config)
"""

from typing import Optional

from tune_bridge.browser.session import SessionFactory
from tune_bridge.core.config import Config
from tune_bridge.core.exceptions import UnsupportedPlatformError
from tune_bridge.core.logger import get_logger
from tune_bridge.core.models import Track
from tune_bridge.core.platforms import Platform, classify
from tune_bridge.core.progress import CollectingProgressBar
from tune_bridge.extractors.base import BaseExtractor
from tune_bridge.extractors.spotify import SpotifyExtractor
from tune_bridge.extractors.youtube import YouTubeExtractor


logger = get_logger(__name__)


def get_extractor(
    platform: Platform,
    config: Config,
    progress_bar: Optional[CollectingProgressBar] = None
) -> BaseExtractor:
    """
    Return the extractor for a source platform.

    Args:
        platform: Platform of the playlist URL.
        config: Application configuration (timeouts, scroll ceilings).
        progress_bar: Optional bar for the Spotify scroll loop.

    Returns:
        A ready-to-use extractor.

    Raises:
        UnsupportedPlatformError: If playlists cannot be read from platform.
    """
    if platform is Platform.YOUTUBE:
        return YouTubeExtractor(timeout=config.browser.element_timeout)
    if platform is Platform.SPOTIFY:
        return SpotifyExtractor(
            config.scroll,
            timeout=config.browser.element_timeout,
            progress_bar=progress_bar,
        )
    raise UnsupportedPlatformError(
        f"Cannot extract playlists from {platform.value} URLs",
        details={"platform": platform.value}
    )


def fetch_playlist(
    factory: SessionFactory,
    url: str,
    config: Config,
    progress_bar: Optional[CollectingProgressBar] = None
) -> list[Track]:
    """
    Extract the playlist at url.

    The platform is decided from the URL host before any tab is opened.
    The session is closed on every path.

    Args:
        factory: Opens browser sessions.
        url: Playlist URL.
        config: Application configuration.
        progress_bar: Optional bar for the Spotify scroll loop.

    Returns:
        Tracks in presentation order.

    Raises:
        UnsupportedPlatformError: If the URL's host is not a source platform.
        NavigationError: If the playlist page fails to load.
        ExtractionError: If the playlist cannot be read.
    """
    platform = classify(url)
    if platform is Platform.UNKNOWN:
        raise UnsupportedPlatformError(
            f"Unrecognized playlist URL: {url}",
            details={"url": url, "platform": platform.value}
        )

    extractor = get_extractor(platform, config, progress_bar)
    logger.info(f"Fetching {platform.value} playlist: {url}")

    with factory.open(url) as session:
        return extractor.extract(session)


__all__ = [
    "BaseExtractor",
    "YouTubeExtractor",
    "SpotifyExtractor",
    "get_extractor",
    "fetch_playlist",
]
