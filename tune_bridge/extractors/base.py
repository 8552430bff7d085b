"""
Base class for playlist extractors.
"""

from abc import ABC, abstractmethod

from tune_bridge.browser.session import PageSession
from tune_bridge.core.models import Track
from tune_bridge.core.platforms import Platform


class BaseExtractor(ABC):
    """
    Abstract base class for platform-specific playlist extractors.

    An extractor reads an already opened playlist page and returns the
    tracks it shows, in presentation order.

    Boundaries:
    - Extractors do NOT open or close sessions; the caller owns the session.
    - Extractors do NOT persist anything.
    - Extractors depend only on the PageSession interface.
    """

    platform: Platform = Platform.UNKNOWN

    @abstractmethod
    def extract(self, session: PageSession) -> list[Track]:
        """
        Extract the playlist shown in session.

        Args:
            session: Session opened on the playlist URL.

        Returns:
            Tracks in presentation order.

        Raises:
            ExtractionError: If the playlist cannot be read.
        """
