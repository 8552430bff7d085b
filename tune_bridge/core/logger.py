"""
Logging configuration for tune-bridge.

This module sets up the logging system with multiple outputs:
    - Console: Real-time messages on stderr, tqdm/rich-compatible
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - unmatched_tracks.log: Tracks the resolver could not find on the target

Standard output is never used for logging: it carries the resolved
links (or the track JSON) so the tool can be piped.

Log File Locations:
    Log files are only written when logging.directory is set in
    config.yaml. Each run gets its own timestamped files.

Usage:
    from tune_bridge.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup (log_dir may be None)
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Opening playlist")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from tqdm import tqdm


# Log file name prefixes (timestamp is appended per run)
LOG_FULL_PREFIX = "log_full"
LOG_ERRORS_PREFIX = "log_errors"
UNMATCHED_TRACKS_PREFIX = "unmatched_tracks"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Noisy third-party loggers kept at WARNING on the console
QUIET_LOGGERS = ("selenium", "urllib3")


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Custom formatter that adds colors to console output.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        message = f"{colored_levelname}: {record.getMessage()}"
        if record.exc_info and record.levelno >= logging.ERROR:
            message += "\n" + self.formatException(record.exc_info)
        return message


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to the console without breaking progress bars.

    Progress bars redraw themselves in place on stderr. Writing through
    tqdm.write() keeps log lines above any active bar instead of tearing it.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        """
        Initialize the tqdm-compatible handler.

        Args:
            stream: Output stream for log messages. Defaults to the
                    current sys.stderr at emit time.
        """
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class UnmatchedTrackHandler(logging.Handler):
    """
    Handler that collects unresolved tracks into a report file.

    Records carrying 'unmatched_track_name' are written to
    unmatched_tracks.log in a short, human-readable format:

        Artist Name - Song Title
        Reason: no candidate named 'Song Title'

    The handler looks for these extra fields in log records:
        - 'unmatched_track_name': The track name
        - 'unmatched_track_artist': The artist
        - 'unmatched_track_reason': Why no link was produced

    Only records containing these fields are written.

    Usage:
        log_unmatched_track(logger, track, "search page did not load")
    """

    def __init__(self, report_path: Path) -> None:
        """
        Initialize the unmatched track handler.

        Args:
            report_path: Path to the report file. File will be created/overwritten.
        """
        super().__init__()
        self.report_path = report_path
        self.report_file: Optional[TextIO] = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "unmatched_track_name"):
            return

        if self.report_file is None:
            return

        try:
            name = getattr(record, "unmatched_track_name", "Unknown")
            artist = getattr(record, "unmatched_track_artist", "Unknown")
            reason = getattr(record, "unmatched_track_reason", "")

            self.report_file.write(f"{artist} - {name}\n")
            self.report_file.write(f"Reason: {reason}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """
        Close the report file handle.

        Safe to call multiple times.
        """
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Optional[Path] = None, verbose: bool = False) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any other operations.

    Args:
        log_dir: Directory for log files, or None for console-only logging.
        verbose: Show DEBUG messages on the console.

    Behavior:
        1. Configure root logger level to DEBUG and drop existing handlers
        2. Add the console handler (TqdmLoggingHandler, INFO or DEBUG)
        3. If log_dir is set:
           a. Create log_dir if it doesn't exist
           b. Add log_full_{timestamp}.log (DEBUG)
           c. Add log_errors_{timestamp}.log (ERROR only)
           d. Add unmatched_tracks_{timestamp}.log (UnmatchedTrackHandler)
        4. Quiet selenium/urllib3 chatter below WARNING

    See Also:
        log_unmatched_track(): Helper to log with the correct extra fields
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(
        log_dir / f"{LOG_FULL_PREFIX}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"{LOG_ERRORS_PREFIX}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    unmatched_handler = UnmatchedTrackHandler(
        log_dir / f"{UNMATCHED_TRACKS_PREFIX}_{timestamp}.log"
    )
    unmatched_handler.open()
    root_logger.addHandler(unmatched_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.
              This creates a hierarchy like 'tune_bridge.resolver.resolver'.

    Returns:
        logging.Logger: A logger instance configured by setup_logging().

    Note:
        Loggers obtained before setup_logging() is called still work;
        they simply propagate to whatever the root logger has.
    """
    return logging.getLogger(name)


def format_resolved_message(artist: str, name: str, url: str) -> str:
    """
    Format a 'Resolved' message with colors.

    Args:
        artist: Artist name.
        name: Track name.
        url: Resolved target-platform URL.

    Returns:
        Colored message string.
    """
    return (
        f"{Colors.GREEN}Resolved{Colors.RESET}: "
        f"{artist} - {name} -> "
        f"{Colors.CYAN}{url}{Colors.RESET}"
    )


def log_unmatched_track(
    logger: logging.Logger,
    track_name: str,
    artist: str,
    reason: str
) -> None:
    """
    Log a track that could not be resolved on the target platform.

    Logs a WARNING and attaches the extra fields that
    UnmatchedTrackHandler uses to write unmatched_tracks.log.

    Args:
        logger: The logger to use for the message.
        track_name: The name of the track.
        artist: The artist name.
        reason: Why no link was produced.

    Example:
        log_unmatched_track(logger, "Song Title", "Artist Name", "no candidate named 'Song Title'")
    """
    logger.warning(
        f"Url not found for {artist} - {track_name}: {reason}",
        extra={
            "unmatched_track_name": track_name,
            "unmatched_track_artist": artist,
            "unmatched_track_reason": reason,
        }
    )


def shutdown_logging() -> None:
    """
    Properly shut down the logging system.

    Flushes and closes every root handler, then removes them.
    Called from the CLI's finally block.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except (OSError, ValueError):
            pass
        root_logger.removeHandler(handler)
