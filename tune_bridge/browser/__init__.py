"""
Browser integration module for tune-bridge.

Components:
    - PageSession / SessionFactory: the interface extractors and the
      resolver use against a browser
    - ChromeSessionFactory: Selenium/Chrome implementation
    - selectors: every CSS selector tied to third-party page structure

Usage:
    from tune_bridge.browser import ChromeSessionFactory

    with ChromeSessionFactory(config.browser) as factory:
        with factory.open(url) as session:
            ...
"""

from tune_bridge.browser.chrome import ChromePageSession, ChromeSessionFactory
from tune_bridge.browser.session import ElementHandle, PageSession, SessionFactory

__all__ = [
    "ElementHandle",
    "PageSession",
    "SessionFactory",
    "ChromePageSession",
    "ChromeSessionFactory",
]
