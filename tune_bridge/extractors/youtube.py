"""
YouTube Music playlist extraction.

YouTube Music renders the whole playlist once the page has loaded, so a
single query over the list rows is enough.

Row Shape:
    Every playlist row holds exactly five text fields, in order:
        name, artist, album, duration, (empty)
    Duration and the trailing field are discarded. An empty album means
    the track has no album.

    Any other field count means the page layout changed. Mapping fields
    by position would then silently produce wrong tracks, so extraction
    stops with MalformedRowError instead.

Usage:
    from tune_bridge.extractors.youtube import YouTubeExtractor

    with factory.open(playlist_url) as session:
        tracks = YouTubeExtractor().extract(session)
"""

from typing import Optional

from tune_bridge.browser.selectors import YOUTUBE, YouTubeSelectors
from tune_bridge.browser.session import ElementHandle, PageSession
from tune_bridge.core.exceptions import ElementNotFound, ExtractionError, MalformedRowError
from tune_bridge.core.logger import get_logger
from tune_bridge.core.models import Track
from tune_bridge.core.platforms import Platform
from tune_bridge.extractors.base import BaseExtractor


logger = get_logger(__name__)


# name, artist, album, duration, trailing empty field
EXPECTED_FIELD_COUNT = 5


class YouTubeExtractor(BaseExtractor):
    """
    One-shot extractor for YouTube Music playlist pages.

    Attributes:
        selectors: Row and field selectors.
        timeout: Seconds to wait for the rows, or None for the session default.
    """

    platform = Platform.YOUTUBE

    def __init__(
        self,
        selectors: YouTubeSelectors = YOUTUBE,
        timeout: Optional[float] = None
    ) -> None:
        self.selectors = selectors
        self.timeout = timeout

    def extract(self, session: PageSession) -> list[Track]:
        """
        Extract every track of the playlist page.

        Args:
            session: Session opened on a YouTube Music playlist URL.

        Returns:
            Tracks in DOM order.

        Raises:
            ExtractionError: If no playlist row appears before the timeout.
            MalformedRowError: If any row does not have the expected shape.
        """
        try:
            rows = session.wait_for_elements(self.selectors.row, self.timeout)
        except ElementNotFound as e:
            raise ExtractionError(
                "YouTube Music playlist rows did not appear",
                details={"selector": self.selectors.row, **e.details}
            ) from e

        tracks = [
            self._parse_row(session, row, index)
            for index, row in enumerate(rows)
        ]
        logger.info(f"Got {len(tracks)} tracks from YouTube Music")
        return tracks

    def _parse_row(self, session: PageSession, row: ElementHandle, index: int) -> Track:
        """
        Map one row to a Track.

        Fields whose text cannot be read are left out, so they show up
        as a wrong field count.

        Raises:
            MalformedRowError: Wrong field count, or blank name/artist.
        """
        fields = [
            text
            for text in (
                session.text(child)
                for child in session.query_children(row, self.selectors.field)
            )
            if text is not None
        ]

        if len(fields) != EXPECTED_FIELD_COUNT:
            raise MalformedRowError(
                f"Expected {EXPECTED_FIELD_COUNT} text fields in playlist row "
                f"{index}, found {len(fields)}",
                details={"row_index": index, "fields": fields}
            )

        name, artist, album, _duration, _trailing = fields
        try:
            track = Track.from_fields(name, artist, album)
        except ValueError as e:
            raise MalformedRowError(
                f"Playlist row {index} has no name or artist",
                details={"row_index": index, "fields": fields}
            ) from e

        logger.debug(f"Row {index}: {track}")
        return track
