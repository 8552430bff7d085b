"""
tune-bridge: Move playlists between streaming services.

Reads playlists from YouTube Music and Spotify web pages by driving a
real browser, and resolves each track to a link on Apple Music.

Workflow:
    1. Classify the playlist URL by host (YouTube Music, Spotify)
    2. Extract Track records from the rendered page
       (Spotify needs repeated scrolling until no new rows appear)
    3. Optionally persist the playlist as JSON
    4. Optionally search each track on the target platform and emit links

Subpackages:
    - core: Config, exceptions, logging, progress, models, storage
    - browser: PageSession abstraction and the Selenium/Chrome backend
    - extractors: YouTube Music and Spotify playlist extraction
    - resolver: Cross-platform track resolution
"""

__version__ = "0.1.0"
