"""
Exception classes for tune-bridge.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message and an optional details
dictionary, so the CLI can print a clear diagnostic while the full log
keeps the context.

Exception Hierarchy:
    TuneBridgeError (base)
        ConfigError - Configuration file issues
        PlaylistFileError - Saved playlist JSON issues
        BrowserError - Browser/driver could not be started
        NavigationError - A page failed to load
        ElementNotFound - An expected selector never appeared
        ExtractionError - A playlist could not be extracted
            MalformedRowError - DOM shape changed (always fatal)
            ConvergenceTimeout - Scroll loop hit a ceiling
        UnsupportedPlatformError - No strategy for a platform
        NoMatchFound - Resolver found no candidate for a track
"""

from typing import Optional


class TuneBridgeError(Exception):
    """
    Base exception for all tune-bridge errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all tune-bridge errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., URL, selector).

    Example:
        try:
            tracks = fetch_playlist(factory, url, config)
        except TuneBridgeError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'url': URL that caused the error
                     - 'selector': CSS selector involved
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(TuneBridgeError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - Explicit --config path not found
        - config.yaml has invalid YAML syntax
        - Invalid field values (e.g., negative timeout, unknown match policy)

    Example:
        raise ConfigError(
            "'scroll.max_passes' must be a positive integer",
            details={'field': 'scroll.max_passes', 'value': -1}
        )
    """
    pass


class PlaylistFileError(TuneBridgeError):
    """
    Raised when a saved playlist JSON file cannot be read or written.

    This is a CRITICAL error: the requested input or output artifact
    cannot be produced.

    Common causes:
        - File not found
        - Invalid JSON syntax
        - Top-level value is not an array, or an entry lacks name/artist
        - Permission denied / disk full on write
    """
    pass


class BrowserError(TuneBridgeError):
    """
    Raised when the browser process or driver cannot be started.

    This is a CRITICAL error. Usually means Chrome is not installed or
    Selenium could not locate a matching driver.
    """
    pass


class NavigationError(TuneBridgeError):
    """
    Raised when a page fails to load.

    Common causes:
        - Network failure
        - Invalid URL
        - Browser process crashed or the tab could not be opened

    Fatal when loading the source playlist, NON-CRITICAL inside the
    resolver (the single track is dropped).
    """
    pass


class ElementNotFound(TuneBridgeError):
    """
    Raised when an expected selector never appears before the timeout.

    Transient inside the Spotify scroll loop (the pass is retried),
    fatal elsewhere.

    Example:
        raise ElementNotFound(
            "Timed out waiting for element",
            details={'selector': 'div[aria-label="Songs"]', 'timeout': 10}
        )
    """
    pass


class ExtractionError(TuneBridgeError):
    """
    Raised when a playlist cannot be extracted from its page.

    This is a CRITICAL error: without the track list there is nothing
    to save or resolve.
    """
    pass


class MalformedRowError(ExtractionError):
    """
    Raised when a rendered row violates the extractor's structural assumption.

    Always fatal. It signals a site-layout change: mapping fields from
    a row of the wrong shape would silently produce wrong tracks.

    Example:
        raise MalformedRowError(
            "Expected 5 text fields in playlist row, found 4",
            details={'row_index': 12, 'fields': ['Song', 'Artist', 'Album', '3:10']}
        )
    """
    pass


class ConvergenceTimeout(ExtractionError):
    """
    Raised when the scroll loop exceeds one of its ceilings.

    The ceilings are the maximum number of passes, the wall-clock limit,
    and the number of consecutive failed row queries.

    Attributes:
        collected: Tracks gathered before the ceiling was hit, in
                   first-seen order.
    """

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        collected: Optional[list] = None
    ) -> None:
        """
        Initialize with the partial result.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            collected: Tracks collected before giving up.
        """
        super().__init__(message, details)
        self.collected = list(collected or [])


class UnsupportedPlatformError(TuneBridgeError):
    """
    Raised when no extraction or search strategy exists for a platform.

    Example:
        raise UnsupportedPlatformError(
            "Cannot extract playlists from this URL",
            details={'url': url, 'platform': 'unknown'}
        )
    """
    pass


class NoMatchFound(TuneBridgeError):
    """
    Raised when the resolver finds no acceptable candidate for a track.

    This is a NON-CRITICAL error: it is caught inside the resolver loop
    and converted to an omission plus a warning.
    """
    pass
