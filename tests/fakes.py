"""
In-memory stand-ins for Playwright handles.

A DOM is a mapping of exact selector strings to lists of child elements, so
a test declares exactly which candidates of a selector chain match.
"""
from typing import Callable, Dict, List, Optional

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeout

Dom = Dict[str, List["FakeElement"]]


class FakeElement:
    def __init__(
        self,
        text: Optional[str] = None,
        attrs: Optional[Dict[str, str]] = None,
        children: Optional[Dom] = None,
        visible: bool = True,
        on_click: Optional[Callable[[], None]] = None,
        broken: bool = False,
    ):
        self.text = text
        self.attrs = attrs or {}
        self.children = children or {}
        self.visible = visible
        self.on_click = on_click
        self.broken = broken
        self.clicks = 0
        self.queries: List[str] = []

    async def query_selector_all(self, selector: str) -> List["FakeElement"]:
        self.queries.append(selector)
        if selector == ":scope":
            return [self]
        if selector.startswith("!!"):
            raise PlaywrightError(f"Unexpected token in selector {selector!r}")
        return list(self.children.get(selector, []))

    async def text_content(self) -> Optional[str]:
        if self.broken:
            raise PlaywrightError("Element is not attached to the DOM")
        return self.text

    async def get_attribute(self, name: str) -> Optional[str]:
        if self.broken:
            raise PlaywrightError("Element is not attached to the DOM")
        return self.attrs.get(name)

    async def is_visible(self) -> bool:
        return self.visible

    async def click(self) -> None:
        if self.broken:
            raise PlaywrightError("Element is not attached to the DOM")
        self.clicks += 1
        if self.on_click:
            self.on_click()


class FakeContext:
    def __init__(self, cookies: Optional[List[dict]] = None):
        self._cookies = list(cookies or [])
        self.closed = False

    async def add_cookies(self, cookies: List[dict]) -> None:
        self._cookies.extend(cookies)

    async def cookies(self) -> List[dict]:
        return list(self._cookies)

    async def close(self) -> None:
        self.closed = True


class FakePage(FakeElement):
    """
    A page whose DOM is produced by a router on every goto.

    router(url) returns the DOM for that URL; redirects rewrite the landing
    URL; urls listed in timeouts raise Playwright's TimeoutError, and urls
    mapped in failures raise its base Error with that message.
    """

    def __init__(
        self,
        router: Optional[Callable[[str], Dom]] = None,
        redirects: Optional[Dict[str, str]] = None,
        timeouts: Optional[List[str]] = None,
        failures: Optional[Dict[str, str]] = None,
        context: Optional[FakeContext] = None,
    ):
        super().__init__()
        self.url = "about:blank"
        self.router = router or (lambda url: {})
        self.redirects = redirects or {}
        self.timeouts = timeouts or []
        self.failures = failures or {}
        self.context = context or FakeContext()
        self.visits: List[str] = []
        self.filled: Dict[str, str] = {}
        self.waits: List[int] = []

    async def goto(self, url: str, wait_until: str = "load", timeout: int = 30000):
        self.visits.append(url)
        if url in self.timeouts:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded.")
        if url in self.failures:
            raise PlaywrightError(self.failures[url])
        self.url = self.redirects.get(url, url)
        self.children = self.router(self.url)

    async def wait_for_selector(self, selector: str, state: str = "visible", timeout: int = 30000):
        elements = self.children.get(selector, [])
        if state == "visible":
            elements = [e for e in elements if e.visible]
        if not elements:
            raise PlaywrightTimeout(f"Timeout {timeout}ms exceeded waiting for {selector!r}")
        return elements[0]

    async def fill(self, selector: str, value: str) -> None:
        self.filled[selector] = value

    async def wait_for_timeout(self, timeout: int) -> None:
        self.waits.append(timeout)

    async def title(self) -> str:
        return "LinkedIn"

    async def content(self) -> str:
        return "<html></html>"

    async def screenshot(self, path: str, full_page: bool = False) -> None:
        with open(path, "wb") as f:
            f.write(b"png")


def text(value: str) -> FakeElement:
    return FakeElement(text=value)


def link(href: str) -> FakeElement:
    return FakeElement(attrs={"href": href})


def login_form(on_submit: Optional[Callable[[], None]] = None) -> Dom:
    return {
        "input[name='session_key']": [FakeElement()],
        "input[name='session_password']": [FakeElement()],
        "button[type='submit']": [FakeElement(on_click=on_submit)],
    }


def search_row(href: Optional[str], name: Optional[str] = None, headline: Optional[str] = None) -> FakeElement:
    children: Dom = {}
    if href is not None:
        children["a[href*='/in/']"] = [link(href)]
    if name is not None:
        children[".entity-result__title-text a span[aria-hidden='true']"] = [text(name)]
    if headline is not None:
        children[".entity-result__primary-subtitle"] = [text(headline)]
    return FakeElement(children=children)


def results_page(rows: List[FakeElement]) -> Dom:
    container = FakeElement(children={".reusable-search__result-container": rows})
    return {".search-results-container": [container]}

