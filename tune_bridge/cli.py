"""
Command-line interface for tune-bridge.

This module implements the CLI using Click, providing a single command
that reads a playlist (from a URL or a saved JSON file), optionally
saves it, and optionally resolves every track on another platform.
rich-click is used for the output colors.

Commands:
    tunebridge --url <playlist_url>                 Print the playlist as JSON
    tunebridge --url <url> --save playlist.json     Save the playlist
    tunebridge --url <url> --target apple           Print Apple Music links
    tunebridge --from-json playlist.json --target apple

Options:
    --links-out <file>                  Also write resolved links as JSON
    --show-browser                      Run Chrome visibly
    --config <file>                     Explicit config.yaml path
    --verbose                           Debug output on the console

Usage:
    # Extract a YouTube Music playlist and keep it
    tunebridge --url "https://music.youtube.com/playlist?list=..." --save playlist.json

    # Find the Spotify playlist's tracks on Apple Music
    tunebridge --url "https://open.spotify.com/playlist/..." --target apple

    # Resolve a saved playlist, writing links to a file as well
    tunebridge --from-json playlist.json --target apple --links-out apple.json

Output Streams:
    Standard output carries only results: one resolved link per line,
    or the playlist JSON when neither --save nor --target is given.
    Logs and progress bars go to standard error.

Configuration:
    config.yaml in the current directory is optional; defaults apply
    when it is absent. See config.yaml.example for every setting.

Exit Codes:
    0    Success
    1    Configuration or usage error
    2    Playlist file error (missing, unreadable, malformed)
    3    Browser, navigation or extraction error
    4    Other tune-bridge error
    130  Interrupted by user
"""

import json
import sys
from pathlib import Path
from typing import Optional

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "cli": [
        {
            "name": "Input Sources",
            "options": ["--url", "--from-json"],
        },
        {
            "name": "Output",
            "options": ["--save", "--target", "--links-out"],
        },
        {
            "name": "Advanced Options",
            "options": ["--show-browser", "--config", "--verbose"],
        },
        {
            "name": "Info",
            "options": ["--version", "--help"],
        },
    ],
}

from tune_bridge import __version__
from tune_bridge.browser import ChromeSessionFactory, SessionFactory
from tune_bridge.core import (
    BrowserError,
    Config,
    ConfigError,
    ElementNotFound,
    ExtractionError,
    NavigationError,
    Platform,
    PlaylistFileError,
    Track,
    TuneBridgeError,
    UnsupportedPlatformError,
    classify,
    get_logger,
    load_config,
    load_tracks,
    save_links,
    save_tracks,
    setup_logging,
    shutdown_logging,
)
from tune_bridge.core.exceptions import ConvergenceTimeout
from tune_bridge.core.progress import CollectingProgressBar, ResolvingProgressBar
from tune_bridge.extractors import fetch_playlist
from tune_bridge.resolver import get_search_selectors, resolve_tracks

logger = get_logger(__name__)


TARGET_CHOICES = [p.value for p in Platform if p is not Platform.UNKNOWN]


class OptionConflictError(click.UsageError):
    """Options that cannot be combined. Exits with 1 like other usage errors."""

    exit_code = 1


@click.command()
@click.option(
    "--url",
    type=str,
    default=None,
    metavar="<playlist-url>",
    help="YouTube Music or Spotify playlist URL"
)
@click.option(
    "--from-json", "from_json",
    type=click.Path(path_type=Path),
    default=None,
    metavar="<file.json>",
    help="Read the playlist from a file written by --save"
)
@click.option(
    "--save",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<file.json>",
    help="Write the playlist as JSON"
)
@click.option(
    "--target",
    type=click.Choice(TARGET_CHOICES, case_sensitive=False),
    default=None,
    help="Resolve every track on this platform and print the links"
)
@click.option(
    "--links-out", "links_out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<file.json>",
    help="Also write resolved links as a JSON array (needs --target)"
)
@click.option(
    "--show-browser",
    is_flag=True,
    help="Run Chrome with a visible window"
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml if present)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug messages"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    url: Optional[str],
    from_json: Optional[Path],
    save: Optional[Path],
    target: Optional[str],
    links_out: Optional[Path],
    show_browser: bool,
    config_path: Optional[Path],
    verbose: bool,
    version: bool
) -> None:
    """
    tune-bridge: Move playlists between streaming services.

    Reads a playlist from YouTube Music or Spotify by driving a browser,
    and finds each of its tracks on Apple Music.

    \b
    BASIC USAGE:
        tunebridge --url "https://music.youtube.com/playlist?list=..."
        tunebridge --url "https://open.spotify.com/playlist/..." --save p.json

    \b
    RESOLVE:
        tunebridge --url "https://..." --target apple
        tunebridge --from-json p.json --target apple --links-out apple.json
    """
    if version:
        click.echo(f"tune-bridge {__version__}")
        ctx.exit(0)

    if not url and not from_json:
        click.echo(ctx.get_help())
        ctx.exit(0)

    if url and from_json:
        raise OptionConflictError("Cannot use both --url and --from-json")

    if links_out and not target:
        raise OptionConflictError("--links-out requires --target")

    _run_workflow({
        "url": url,
        "from_json": from_json,
        "save": save,
        "target": Platform(target.lower()) if target else None,
        "links_out": links_out,
        "show_browser": show_browser,
        "config_path": config_path,
        "verbose": verbose,
    })


def _run_workflow(options: dict) -> None:
    """
    Execute the workflow based on CLI options.

    This is the main orchestration function that:
    1. Loads configuration and sets up logging
    2. Acquires the playlist (browser or JSON file)
    3. Saves it if requested
    4. Resolves it on the target platform if requested
    5. Prints the playlist JSON when nothing else was asked for

    Args:
        options: Dictionary with CLI options.

    Raises:
        SystemExit: On fatal errors (with appropriate exit code).
    """
    factory: Optional[ChromeSessionFactory] = None

    try:
        config = load_config(options["config_path"])
        if options["show_browser"]:
            config = config.with_overrides(headless=False)

        setup_logging(config.logging.directory, verbose=options["verbose"])
        logger.debug("tune-bridge starting")

        # Fail on an unsupported target before any browser work
        target: Optional[Platform] = options["target"]
        if target is not None:
            get_search_selectors(target)

        if options["url"] or target is not None:
            factory = ChromeSessionFactory(config.browser)

        if options["url"]:
            tracks = _fetch_from_url(factory, options["url"], config)
        else:
            tracks = load_tracks(options["from_json"])
            logger.info(f"Loaded {len(tracks)} tracks from {options['from_json']}")

        if options["save"]:
            save_tracks(options["save"], tracks)

        if target is not None:
            links = _resolve(factory, tracks, target, config)
            for link in links:
                click.echo(link)
            if options["links_out"]:
                save_links(options["links_out"], links)
        elif not options["save"]:
            click.echo(json.dumps(
                [track.to_dict() for track in tracks],
                indent=2,
                ensure_ascii=False,
            ))

    except (ConfigError, UnsupportedPlatformError) as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except PlaylistFileError as e:
        click.echo(f"Playlist file error: {e.message}", err=True)
        logger.debug(f"Details: {e.details}")
        sys.exit(2)

    except ConvergenceTimeout as e:
        click.echo(f"Extraction error: {e.message}", err=True)
        click.echo(
            f"{len(e.collected)} tracks were collected before giving up; "
            "raise the scroll limits in config.yaml to keep going",
            err=True
        )
        logger.error(f"Extraction error: {e.message}", exc_info=True)
        sys.exit(3)

    except (BrowserError, NavigationError, ElementNotFound, ExtractionError) as e:
        click.echo(f"Browser error: {e.message}", err=True)
        logger.error(f"Browser error: {e.message}", exc_info=True)
        sys.exit(3)

    except TuneBridgeError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        if factory is not None:
            factory.close()
        shutdown_logging()


def _fetch_from_url(factory: SessionFactory, url: str, config: Config) -> list[Track]:
    """
    Extract the playlist at url.

    Spotify extraction can take a while, so a pulsing bar shows tracks
    collected per scroll pass.
    """
    if classify(url) is Platform.SPOTIFY:
        with CollectingProgressBar() as progress_bar:
            return fetch_playlist(factory, url, config, progress_bar)
    return fetch_playlist(factory, url, config)


def _resolve(
    factory: SessionFactory,
    tracks: list[Track],
    target: Platform,
    config: Config
) -> list[str]:
    """Resolve tracks on target with a progress bar."""
    if not tracks:
        logger.info("Playlist is empty, nothing to resolve")
        return []

    logger.info(f"Resolving {len(tracks)} tracks on {target.value}")
    with ResolvingProgressBar(total=len(tracks)) as progress_bar:
        return resolve_tracks(factory, tracks, target, config, progress_bar)


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `tunebridge` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
