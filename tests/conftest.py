"""Test configuration and fixtures"""

import tempfile
from pathlib import Path
from typing import Callable
from urllib.parse import unquote

import pytest

from tune_bridge.browser.selectors import APPLE_MUSIC_SEARCH, SPOTIFY, YOUTUBE
from tune_bridge.browser.session import PageSession, SessionFactory
from tune_bridge.core.exceptions import ElementNotFound, NavigationError
from tune_bridge.core.models import Track


class FakeElement:
    """In-memory DOM node: text, attributes and children by selector"""

    def __init__(self, text=None, attrs=None, children=None):
        self.text = text
        self.attrs = attrs or {}
        self.children = children or {}

    def __repr__(self):
        return f"FakeElement({self.text!r})"


class FakePageSession(PageSession):
    """
    PageSession backed by FakeElements.

    elements maps a selector to the elements it matches. scripts maps a
    selector to successive results of wait_for_elements(); each entry is
    a list of elements or an exception to raise, and the last entry
    repeats once the script is exhausted.
    """

    def __init__(self, elements=None, scripts=None, close_error=None):
        self.elements = elements or {}
        self.scripts = {k: list(v) for k, v in (scripts or {}).items()}
        self.close_error = close_error
        self.queries = 0
        self.scrolled = []
        self.closed = False
        self.close_calls = 0

    def _next_scripted(self, selector):
        script = self.scripts[selector]
        item = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(item, Exception):
            raise item
        return list(item)

    def wait_for_element(self, selector, timeout=None):
        found = self.elements.get(selector)
        if not found and selector in self.scripts:
            found = next(
                (item for item in self.scripts[selector] if not isinstance(item, Exception)),
                None,
            )
        if not found:
            raise ElementNotFound(f"no {selector}", details={"selector": selector})
        return found[0]

    def wait_for_elements(self, selector, timeout=None):
        self.queries += 1
        if selector in self.scripts:
            return self._next_scripted(selector)
        found = self.elements.get(selector)
        if not found:
            raise ElementNotFound(f"no {selector}", details={"selector": selector})
        return list(found)

    def wait_for_children(self, handle, selector, timeout=None):
        found = handle.children.get(selector)
        if not found:
            raise ElementNotFound(f"no {selector} under {handle!r}", details={"selector": selector})
        return list(found)

    def query_child(self, handle, selector):
        children = handle.children.get(selector)
        return children[0] if children else None

    def query_children(self, handle, selector):
        return list(handle.children.get(selector, []))

    def text(self, handle):
        return handle.text

    def attribute(self, handle, name):
        return handle.attrs.get(name)

    def scroll_into_view(self, handle):
        self.scrolled.append(handle)

    def close(self):
        self.close_calls += 1
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeSessionFactory(SessionFactory):
    """
    SessionFactory serving prepared pages.

    pages maps a URL (percent-encoded or decoded) to a FakePageSession,
    or to an exception raised from open(). Unknown URLs raise
    NavigationError.
    """

    def __init__(self, pages=None):
        self.pages = pages or {}
        self.opened = []
        self.closed = False

    def open(self, url):
        self.opened.append(url)
        page = self.pages.get(url, self.pages.get(unquote(url)))
        if page is None:
            raise NavigationError(f"Failed to load {url}", details={"url": url})
        if isinstance(page, Exception):
            raise page
        return page

    def close(self):
        self.closed = True


def _youtube_row(*fields):
    return FakeElement(children={YOUTUBE.field: [FakeElement(text=f) for f in fields]})


def _spotify_row(name, artist):
    children = {}
    if name is not None:
        children[SPOTIFY.name] = [FakeElement(text=name)]
    if artist is not None:
        children[SPOTIFY.artist] = [FakeElement(text=artist)]
    return FakeElement(children=children)


def _apple_search_page(*candidates, **session_kwargs):
    """candidates: (title, href) or (title, href, row_text) tuples"""
    rows = []
    for candidate in candidates:
        title, href = candidate[0], candidate[1]
        row_text = candidate[2] if len(candidate) > 2 else title
        anchor = FakeElement(text=title, attrs={"href": href} if href else {})
        rows.append(FakeElement(text=row_text, children={APPLE_MUSIC_SEARCH.link: [anchor]}))
    container = FakeElement(children={APPLE_MUSIC_SEARCH.candidate: rows} if rows else {})
    return FakePageSession(elements={APPLE_MUSIC_SEARCH.results: [container]}, **session_kwargs)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def sample_tracks():
    """A small playlist with and without albums"""
    return [
        Track("Bohemian Rhapsody", "Queen", "A Night at the Opera"),
        Track("Imagine", "John Lennon", "Imagine"),
        Track("Some Single", "Someone"),
    ]


@pytest.fixture
def make_session() -> Callable[..., FakePageSession]:
    return FakePageSession


@pytest.fixture
def make_factory() -> Callable[..., FakeSessionFactory]:
    return FakeSessionFactory


@pytest.fixture
def element() -> Callable[..., FakeElement]:
    return FakeElement


@pytest.fixture
def youtube_row():
    return _youtube_row


@pytest.fixture
def spotify_row():
    return _spotify_row


@pytest.fixture
def apple_search_page():
    return _apple_search_page


@pytest.fixture
def no_sleep():
    """Records requested pauses instead of sleeping"""
    calls = []

    def sleep(seconds):
        calls.append(seconds)

    sleep.calls = calls
    return sleep
