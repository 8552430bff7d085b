"""
CSS selectors for every page the tool reads.

All coupling to third-party page structure lives here. When a site
changes its layout, update the matching group; the extraction and
resolution algorithms take the group as a parameter and do not change.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class YouTubeSelectors:
    """
    YouTube Music playlist page.

    Attributes:
        row: One playlist entry.
        field: Text-bearing children of a row. A rendered row has exactly
               five: name, artist, album, duration, and a trailing empty one.
    """
    row: str = "ytmusic-responsive-list-item-renderer"
    field: str = "yt-formatted-string"


@dataclass(frozen=True)
class SpotifySelectors:
    """
    Spotify web player playlist page (virtualized track list).

    Attributes:
        row: One rendered track row.
        name: Track title link inside a row.
        artist: First artist link inside a row.
    """
    row: str = 'div[data-testid="tracklist-row"]'
    name: str = 'a[data-testid="internal-track-link"]'
    artist: str = 'a[href*="/artist/"]'


@dataclass(frozen=True)
class SearchSelectors:
    """
    Search results page of a resolution target.

    Attributes:
        search_url: URL template; {storefront} and {query} are filled in,
                    the query already percent-encoded.
        results: Container holding the song results.
        candidate: One result row inside the container.
        link: Anchor inside a row; its text is the song title.
    """
    search_url: str
    results: str
    candidate: str = "li"
    link: str = "a"


YOUTUBE = YouTubeSelectors()
SPOTIFY = SpotifySelectors()

APPLE_MUSIC_SEARCH = SearchSelectors(
    search_url="https://music.apple.com/{storefront}/search?term={query}",
    results='div[aria-label="Songs"]',
)
