"""
Core module for tune-bridge.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with console and file outputs
    - models: The platform-agnostic Track record
    - platforms: URL to platform classification
    - storage: JSON persistence for playlists and links

Usage:
    from tune_bridge.core import (
        Config, load_config,
        setup_logging, get_logger,
        Track, Platform, classify,
        TuneBridgeError, ConfigError
    )
"""

from tune_bridge.core.config import (
    BrowserConfig,
    Config,
    LoggingConfig,
    ResolverConfig,
    ScrollConfig,
    load_config,
)
from tune_bridge.core.exceptions import (
    BrowserError,
    ConfigError,
    ConvergenceTimeout,
    ElementNotFound,
    ExtractionError,
    MalformedRowError,
    NavigationError,
    NoMatchFound,
    PlaylistFileError,
    TuneBridgeError,
    UnsupportedPlatformError,
)
from tune_bridge.core.logger import (
    get_logger,
    log_unmatched_track,
    setup_logging,
    shutdown_logging,
)
from tune_bridge.core.models import Track, dedupe_tracks
from tune_bridge.core.platforms import Platform, classify
from tune_bridge.core.storage import load_tracks, save_links, save_tracks

__all__ = [
    # Config
    "Config",
    "BrowserConfig",
    "ScrollConfig",
    "ResolverConfig",
    "LoggingConfig",
    "load_config",
    # Exceptions
    "TuneBridgeError",
    "ConfigError",
    "PlaylistFileError",
    "BrowserError",
    "NavigationError",
    "ElementNotFound",
    "ExtractionError",
    "MalformedRowError",
    "ConvergenceTimeout",
    "UnsupportedPlatformError",
    "NoMatchFound",
    # Logger
    "setup_logging",
    "get_logger",
    "log_unmatched_track",
    "shutdown_logging",
    # Models
    "Track",
    "dedupe_tracks",
    "Platform",
    "classify",
    # Storage
    "save_tracks",
    "save_links",
    "load_tracks",
]
