"""
Configuration management for tune-bridge.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml.

The configuration file contains:
    - Browser settings (headless mode, timeouts, window size)
    - Scroll-loop ceilings for virtualized playlists
    - Resolver match policy and search storefront
    - Optional directory for log files

Configuration File Location:
    An explicit path can be given with --config. Otherwise config.yaml
    in the current working directory is used if it exists; when it does
    not, every setting takes its default.

Example config.yaml:
    browser:
      headless: true
      page_load_timeout: 30
      element_timeout: 10
      window_size: "1400,900"

    scroll:
      max_idle_passes: 1
      max_passes: 500
      max_seconds: 600
      max_query_failures: 5
      pause_seconds: 0.5

    resolver:
      match_policy: name        # name | name_and_artist
      artist_threshold: 90
      storefront: us

    logging:
      directory: null           # e.g. "~/.tunebridge/logs"
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from tune_bridge.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

# Match policies understood by the resolver
MATCH_POLICIES = ("name", "name_and_artist")


@dataclass(frozen=True)
class BrowserConfig:
    """
    Browser behavior configuration.

    Attributes:
        headless: Run Chrome without a visible window. The CLI flag
                  --show-browser overrides this to False.
        page_load_timeout: Seconds allowed for a navigation to finish.
        element_timeout: Seconds allowed for wait_for_* calls.
        window_size: "WIDTH,HEIGHT" passed to Chrome. A larger window
                     renders more rows of a virtualized list at once.
    """
    headless: bool = True
    page_load_timeout: float = 30.0
    element_timeout: float = 10.0
    window_size: str = "1400,900"


@dataclass(frozen=True)
class ScrollConfig:
    """
    Ceilings for the Spotify scroll-convergence loop.

    Attributes:
        max_idle_passes: Consecutive passes with zero new tracks before
                         the list is considered complete. 1 stops on the
                         first idle pass.
        max_passes: Total passes allowed before ConvergenceTimeout.
        max_seconds: Wall-clock seconds allowed before ConvergenceTimeout.
        max_query_failures: Consecutive failed row queries allowed before
                            ConvergenceTimeout.
        pause_seconds: Pause between passes so new rows can render.
    """
    max_idle_passes: int = 1
    max_passes: int = 500
    max_seconds: float = 600.0
    max_query_failures: int = 5
    pause_seconds: float = 0.5


@dataclass(frozen=True)
class ResolverConfig:
    """
    Cross-platform resolver configuration.

    Attributes:
        match_policy: "name" accepts the first candidate whose title equals
                      the track name (case-insensitive). "name_and_artist"
                      also requires the artist to appear in the candidate row.
        artist_threshold: Minimum rapidfuzz partial_ratio (0-100) for the
                          artist check of "name_and_artist".
        storefront: Apple Music storefront used in search URLs (e.g. "us").
    """
    match_policy: str = "name"
    artist_threshold: float = 90
    storefront: str = "us"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Log file configuration.

    Attributes:
        directory: Directory for log files, or None to log to the
                   console only. ~ is expanded.
    """
    directory: Optional[Path] = None


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() and treated as immutable (frozen dataclass).
    Use with_overrides() to apply CLI flags.

    Example:
        config = load_config()
        print(f"Headless: {config.browser.headless}")
        print(f"Policy: {config.resolver.match_policy}")
    """
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    scroll: ScrollConfig = field(default_factory=ScrollConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def with_overrides(self, headless: Optional[bool] = None) -> "Config":
        """
        Return a copy with command-line overrides applied.

        Args:
            headless: New headless setting, or None to keep the current one.

        Returns:
            Config: New frozen configuration.
        """
        if headless is None:
            return self
        return replace(self, browser=replace(self.browser, headless=headless))


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load and validate configuration from a YAML file.

    Args:
        config_path: Optional explicit path to config file. It must exist.
                     If None, looks for config.yaml in the current working
                     directory and falls back to defaults when it is absent.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit file is not found, the YAML is invalid,
                     or any field has an invalid value.

    Example:
        try:
            config = load_config()
        except ConfigError as e:
            print(f"Configuration error: {e.message}")
            sys.exit(1)
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return Config()
    elif not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except (IOError, UnicodeDecodeError) as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file is a valid "all defaults" configuration
    if raw_config is None:
        return Config()

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return Config(
        browser=_parse_browser_config(_section(raw_config, "browser")),
        scroll=_parse_scroll_config(_section(raw_config, "scroll")),
        resolver=_parse_resolver_config(_section(raw_config, "resolver")),
        logging=_parse_logging_config(_section(raw_config, "logging")),
    )


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    """
    Return a config section, or {} if it is missing or null.

    Raises:
        ConfigError: If the section is present but not a dictionary.
    """
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _positive_number(section: dict[str, Any], key: str, default: float, path: str) -> float:
    value = section.get(key)
    if value is None:
        return default
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(
            f"'{path}' must be a positive number",
            details={"field": path, "value": value}
        )
    return float(value)


def _positive_int(section: dict[str, Any], key: str, default: int, path: str) -> int:
    value = section.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(
            f"'{path}' must be a positive integer",
            details={"field": path, "value": value}
        )
    return value


def _parse_browser_config(section: dict[str, Any]) -> BrowserConfig:
    """
    Parse and validate the browser configuration section.

    Raises:
        ConfigError: If headless is not a boolean, a timeout is not
                     positive, or window_size is not "W,H".
    """
    defaults = BrowserConfig()

    headless = section.get("headless", defaults.headless)
    if not isinstance(headless, bool):
        raise ConfigError(
            "'browser.headless' must be true or false",
            details={"field": "browser.headless", "value": headless}
        )

    window_size = section.get("window_size", defaults.window_size)
    parts = str(window_size).split(",")
    if len(parts) != 2 or not all(p.strip().isdigit() for p in parts):
        raise ConfigError(
            "'browser.window_size' must look like \"1400,900\"",
            details={"field": "browser.window_size", "value": window_size}
        )

    return BrowserConfig(
        headless=headless,
        page_load_timeout=_positive_number(
            section, "page_load_timeout", defaults.page_load_timeout,
            "browser.page_load_timeout"
        ),
        element_timeout=_positive_number(
            section, "element_timeout", defaults.element_timeout,
            "browser.element_timeout"
        ),
        window_size=",".join(p.strip() for p in parts),
    )


def _parse_scroll_config(section: dict[str, Any]) -> ScrollConfig:
    """
    Parse and validate the scroll configuration section.

    Raises:
        ConfigError: If a ceiling is not positive or pause_seconds is negative.
    """
    defaults = ScrollConfig()

    pause = section.get("pause_seconds")
    if pause is None:
        pause = defaults.pause_seconds
    elif isinstance(pause, bool) or not isinstance(pause, (int, float)) or pause < 0:
        raise ConfigError(
            "'scroll.pause_seconds' must be a non-negative number",
            details={"field": "scroll.pause_seconds", "value": pause}
        )

    return ScrollConfig(
        max_idle_passes=_positive_int(
            section, "max_idle_passes", defaults.max_idle_passes, "scroll.max_idle_passes"
        ),
        max_passes=_positive_int(
            section, "max_passes", defaults.max_passes, "scroll.max_passes"
        ),
        max_seconds=_positive_number(
            section, "max_seconds", defaults.max_seconds, "scroll.max_seconds"
        ),
        max_query_failures=_positive_int(
            section, "max_query_failures", defaults.max_query_failures,
            "scroll.max_query_failures"
        ),
        pause_seconds=float(pause),
    )


def _parse_resolver_config(section: dict[str, Any]) -> ResolverConfig:
    """
    Parse and validate the resolver configuration section.

    Raises:
        ConfigError: If match_policy is unknown, artist_threshold is out of
                     range, or storefront is empty.
    """
    defaults = ResolverConfig()

    policy = section.get("match_policy", defaults.match_policy)
    if policy not in MATCH_POLICIES:
        raise ConfigError(
            f"'resolver.match_policy' must be one of: {', '.join(MATCH_POLICIES)}",
            details={"field": "resolver.match_policy", "value": policy}
        )

    threshold = section.get("artist_threshold", defaults.artist_threshold)
    if (
        isinstance(threshold, bool)
        or not isinstance(threshold, (int, float))
        or not 0 <= threshold <= 100
    ):
        raise ConfigError(
            "'resolver.artist_threshold' must be a number between 0 and 100",
            details={"field": "resolver.artist_threshold", "value": threshold}
        )

    storefront = section.get("storefront", defaults.storefront)
    if not isinstance(storefront, str) or not storefront.strip():
        raise ConfigError(
            "'resolver.storefront' must be a non-empty string",
            details={"field": "resolver.storefront"}
        )

    return ResolverConfig(
        match_policy=policy,
        artist_threshold=float(threshold),
        storefront=storefront.strip().lower(),
    )


def _parse_logging_config(section: dict[str, Any]) -> LoggingConfig:
    """
    Parse and validate the logging configuration section.

    Expands ~ to home directory and converts to absolute Path.
    Does NOT create the directory (that happens in setup_logging).

    Raises:
        ConfigError: If directory is present but not a non-empty string.
    """
    directory = section.get("directory")
    if directory is None:
        return LoggingConfig()

    if not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'logging.directory' must be a non-empty string or null",
            details={"field": "logging.directory"}
        )

    return LoggingConfig(directory=Path(directory.strip()).expanduser().resolve())
