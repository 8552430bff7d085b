"""
Page Session abstraction.

A PageSession is one isolated browser tab used for a single visit:
navigate, wait for selectors, query an element's subtree, read text and
attributes, scroll, close. Extractors and the resolver talk to the
browser only through this interface, which is what lets the tests drive
them with an in-memory fake.

Element handles are opaque: whatever the implementation returns from a
wait or query call is passed back to it unchanged.

Usage:
    with factory.open(url) as session:
        rows = session.wait_for_elements("li")
        for row in rows:
            link = session.query_child(row, "a")
            print(session.text(link), session.attribute(link, "href"))
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence


# Opaque handle to a rendered element (a WebElement for Selenium)
ElementHandle = Any


class PageSession(ABC):
    """
    One browser tab opened on a URL.

    Instances are created by SessionFactory.open(), already navigated.
    They are context managers: leaving the with-block closes the tab
    even when the body raised.

    Failure contract:
        - wait_for_* raise ElementNotFound on timeout, NavigationError if
          the browser session itself failed.
        - query_*, text and attribute never raise; they return None / [].
        - scroll_into_view never raises; failures are logged.
        - close never raises and is safe to call more than once.
    """

    @abstractmethod
    def wait_for_element(self, selector: str, timeout: Optional[float] = None) -> ElementHandle:
        """
        Block until an element matches selector and return the first one.

        Args:
            selector: CSS selector.
            timeout: Seconds to wait, or None for the session default.

        Raises:
            ElementNotFound: Nothing matched before the timeout.
            NavigationError: The browser session failed.
        """

    @abstractmethod
    def wait_for_elements(
        self, selector: str, timeout: Optional[float] = None
    ) -> Sequence[ElementHandle]:
        """
        Block until at least one element matches and return all current matches.

        Raises:
            ElementNotFound: Nothing matched before the timeout.
            NavigationError: The browser session failed.
        """

    @abstractmethod
    def wait_for_children(
        self, handle: ElementHandle, selector: str, timeout: Optional[float] = None
    ) -> Sequence[ElementHandle]:
        """
        Block until handle's subtree has a match and return all matches.

        Raises:
            ElementNotFound: Nothing matched before the timeout.
            NavigationError: The browser session failed.
        """

    @abstractmethod
    def query_child(self, handle: ElementHandle, selector: str) -> Optional[ElementHandle]:
        """Return the first match in handle's subtree, or None."""

    @abstractmethod
    def query_children(self, handle: ElementHandle, selector: str) -> Sequence[ElementHandle]:
        """Return all matches in handle's subtree (possibly empty)."""

    @abstractmethod
    def text(self, handle: ElementHandle) -> Optional[str]:
        """Return the element's rendered inner text, or None if unreadable."""

    @abstractmethod
    def attribute(self, handle: ElementHandle, name: str) -> Optional[str]:
        """Return the attribute value, or None if missing or unreadable."""

    @abstractmethod
    def scroll_into_view(self, handle: ElementHandle) -> None:
        """Scroll the element into the viewport. Best effort."""

    @abstractmethod
    def close(self) -> None:
        """Close the tab. Never raises, idempotent."""

    def __enter__(self) -> "PageSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class SessionFactory(ABC):
    """
    Opens PageSessions on a shared browser.

    The factory is passed explicitly to every extractor and resolver
    call instead of living in a global.
    """

    @abstractmethod
    def open(self, url: str) -> PageSession:
        """
        Open a new tab and navigate it to url.

        Returns:
            PageSession ready for queries.

        Raises:
            NavigationError: The page could not be loaded. No tab is
                             left open in that case.
        """
