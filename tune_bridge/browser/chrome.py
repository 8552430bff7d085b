"""
Selenium/Chrome implementation of the Page Session interface.

One Chrome process is started per run by ChromeSessionFactory. Every
PageSession is a separate tab of that browser; the session switches the
driver to its own tab before each operation, which is safe because the
application drives the browser from a single thread.

Usage:
    from tune_bridge.browser.chrome import ChromeSessionFactory

    with ChromeSessionFactory(config.browser) as factory:
        with factory.open("https://music.youtube.com/playlist?list=...") as session:
            rows = session.wait_for_elements("ytmusic-responsive-list-item-renderer")
"""

from typing import Optional, Sequence

from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from tune_bridge.browser.session import PageSession, SessionFactory
from tune_bridge.core.config import BrowserConfig
from tune_bridge.core.exceptions import BrowserError, ElementNotFound, NavigationError
from tune_bridge.core.logger import get_logger


logger = get_logger(__name__)


# Keeps the row centered so the virtualized list renders neighbours on both sides
SCROLL_INTO_VIEW_SCRIPT = "arguments[0].scrollIntoView({block: 'center'});"


def build_chrome_options(config: BrowserConfig) -> webdriver.ChromeOptions:
    """
    Build Chrome options from the browser configuration.

    Args:
        config: Browser settings (headless flag, window size).

    Returns:
        ChromeOptions ready for webdriver.Chrome().
    """
    options = webdriver.ChromeOptions()
    if config.headless:
        options.add_argument("--headless=new")
    options.add_argument(f"--window-size={config.window_size}")
    options.add_argument("--no-first-run")
    options.add_argument("--no-default-browser-check")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--lang=en-US")
    return options


class ChromePageSession(PageSession):
    """
    A single Chrome tab.

    Attributes:
        url: The URL the tab was opened on.
        default_timeout: Seconds used by wait_* calls when timeout is None.
    """

    def __init__(
        self,
        driver: WebDriver,
        window_handle: str,
        home_handle: str,
        url: str,
        default_timeout: float
    ) -> None:
        self._driver = driver
        self._handle = window_handle
        self._home_handle = home_handle
        self._closed = False
        self.url = url
        self.default_timeout = default_timeout

    def _activate(self) -> None:
        if self._driver.current_window_handle != self._handle:
            self._driver.switch_to.window(self._handle)

    def _wait(self, condition, selector: str, timeout: Optional[float], context=None):
        timeout = self.default_timeout if timeout is None else timeout
        try:
            self._activate()
            return WebDriverWait(context or self._driver, timeout).until(condition)
        except TimeoutException as e:
            raise ElementNotFound(
                f"Timed out after {timeout:g}s waiting for {selector}",
                details={"selector": selector, "timeout": timeout, "url": self.url}
            ) from e
        except WebDriverException as e:
            raise NavigationError(
                f"Browser session failed while waiting for {selector}: {e.msg or e}",
                details={"selector": selector, "url": self.url, "original_error": str(e)}
            ) from e

    def wait_for_element(self, selector: str, timeout: Optional[float] = None) -> WebElement:
        return self._wait(
            EC.presence_of_element_located((By.CSS_SELECTOR, selector)),
            selector,
            timeout,
        )

    def wait_for_elements(
        self, selector: str, timeout: Optional[float] = None
    ) -> Sequence[WebElement]:
        return self._wait(
            EC.presence_of_all_elements_located((By.CSS_SELECTOR, selector)),
            selector,
            timeout,
        )

    def wait_for_children(
        self, handle: WebElement, selector: str, timeout: Optional[float] = None
    ) -> Sequence[WebElement]:
        return self._wait(
            lambda element: element.find_elements(By.CSS_SELECTOR, selector) or False,
            selector,
            timeout,
            context=handle,
        )

    def query_child(self, handle: WebElement, selector: str) -> Optional[WebElement]:
        children = self.query_children(handle, selector)
        return children[0] if children else None

    def query_children(self, handle: WebElement, selector: str) -> Sequence[WebElement]:
        try:
            self._activate()
            return handle.find_elements(By.CSS_SELECTOR, selector)
        except WebDriverException as e:
            logger.debug(f"Query {selector} failed: {e.msg or e}")
            return []

    def text(self, handle: WebElement) -> Optional[str]:
        try:
            self._activate()
            # innerText includes text of rows scrolled out of the viewport
            value = handle.get_property("innerText")
            if value is None:
                value = handle.text
            return value
        except WebDriverException as e:
            logger.debug(f"Reading text failed: {e.msg or e}")
            return None

    def attribute(self, handle: WebElement, name: str) -> Optional[str]:
        try:
            self._activate()
            return handle.get_attribute(name)
        except WebDriverException as e:
            logger.debug(f"Reading attribute {name} failed: {e.msg or e}")
            return None

    def scroll_into_view(self, handle: WebElement) -> None:
        try:
            self._activate()
            self._driver.execute_script(SCROLL_INTO_VIEW_SCRIPT, handle)
        except WebDriverException as e:
            logger.warning(f"Could not scroll element into view: {e.msg or e}")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._activate()
            self._driver.close()
            self._driver.switch_to.window(self._home_handle)
        except WebDriverException as e:
            logger.warning(f"Failed to close tab for {self.url}: {e.msg or e}")


class ChromeSessionFactory(SessionFactory):
    """
    Owns the Chrome process and opens one tab per session.

    Use as a context manager; the browser is quit on exit even when the
    body raised.

    Attributes:
        config: Browser settings used to launch Chrome.

    Example:
        with ChromeSessionFactory(config.browser) as factory:
            tracks = fetch_playlist(factory, url, config)
    """

    def __init__(self, config: BrowserConfig) -> None:
        self.config = config
        self._driver: Optional[WebDriver] = None
        self._home_handle: Optional[str] = None

    def start(self) -> None:
        """
        Launch Chrome.

        Raises:
            BrowserError: If Chrome or its driver cannot be started.
        """
        if self._driver is not None:
            return

        logger.debug(
            f"Launching Chrome (headless={self.config.headless}, "
            f"window={self.config.window_size})"
        )
        try:
            # Selenium Manager locates a matching chromedriver
            driver = webdriver.Chrome(options=build_chrome_options(self.config))
        except WebDriverException as e:
            raise BrowserError(
                f"Failed to start Chrome: {e.msg or e}",
                details={"original_error": str(e)}
            ) from e

        driver.set_page_load_timeout(self.config.page_load_timeout)
        self._driver = driver
        self._home_handle = driver.current_window_handle

    def open(self, url: str) -> ChromePageSession:
        if self._driver is None:
            self.start()

        driver = self._driver
        try:
            driver.switch_to.new_window("tab")
        except WebDriverException as e:
            raise NavigationError(
                f"Failed to open a new tab: {e.msg or e}",
                details={"url": url, "original_error": str(e)}
            ) from e

        session = ChromePageSession(
            driver=driver,
            window_handle=driver.current_window_handle,
            home_handle=self._home_handle,
            url=url,
            default_timeout=self.config.element_timeout,
        )

        logger.debug(f"Navigating to {url}")
        try:
            driver.get(url)
        except WebDriverException as e:
            session.close()
            raise NavigationError(
                f"Failed to load {url}: {e.msg or e}",
                details={"url": url, "original_error": str(e)}
            ) from e

        return session

    def close(self) -> None:
        """Quit the browser. Safe to call more than once."""
        if self._driver is None:
            return
        try:
            self._driver.quit()
        except WebDriverException as e:
            logger.warning(f"Failed to quit Chrome cleanly: {e.msg or e}")
        finally:
            self._driver = None
            self._home_handle = None

    def __enter__(self) -> "ChromeSessionFactory":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
