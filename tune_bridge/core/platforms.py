"""
Platform classification from URLs.

The platform of a playlist or search URL is decided once, from the host
component alone, by exact match against a fixed allow-list.

Usage:
    from tune_bridge.core.platforms import Platform, classify

    classify("https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M")
    # Platform.SPOTIFY
"""

from enum import Enum
from typing import Optional
from urllib.parse import urlparse


class Platform(str, Enum):
    """Supported music services, plus UNKNOWN for everything else."""

    YOUTUBE = "youtube"
    APPLE = "apple"
    SPOTIFY = "spotify"
    UNKNOWN = "unknown"


# Exact host -> platform mapping. Hosts not listed here are UNKNOWN.
PLATFORM_HOSTS: dict[str, Platform] = {
    "music.youtube.com": Platform.YOUTUBE,
    "music.apple.com": Platform.APPLE,
    "itunes.apple.com": Platform.APPLE,
    "open.spotify.com": Platform.SPOTIFY,
    "spotify.com": Platform.SPOTIFY,
}


def classify(url: Optional[str]) -> Platform:
    """
    Map a URL to the platform that serves it.

    This function is total: it never raises. Empty input, input that
    does not parse as a URL, and unlisted hosts all give UNKNOWN.

    Args:
        url: Any string, typically a playlist or search URL.

    Returns:
        Platform matching the URL's host exactly.

    Examples:
        classify("https://music.youtube.com/playlist?list=PL...")  # YOUTUBE
        classify("https://www.spotify.com/")                       # UNKNOWN
        classify("")                                               # UNKNOWN
    """
    if not url:
        return Platform.UNKNOWN

    try:
        host = urlparse(url).hostname
    except (ValueError, TypeError, AttributeError):
        return Platform.UNKNOWN

    if not host:
        return Platform.UNKNOWN

    return PLATFORM_HOSTS.get(host, Platform.UNKNOWN)
