"""Shared fakes for the Playwright object graph."""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import pytest


class FakeLocator:
    def __init__(self, value: Any = None):
        self._value = value

    @property
    def first(self) -> "FakeLocator":
        return self

    async def count(self) -> int:
        return 0 if self._value is None else 1

    async def text_content(self) -> Optional[str]:
        return self._value if isinstance(self._value, str) else None

    async def get_attribute(self, name: str) -> Optional[str]:
        if isinstance(self._value, dict):
            return self._value.get(name)
        return None


class FakeResponse:
    def __init__(self, status: int = 200):
        self.status = status

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class FakePage:
    """Page whose DOM is a selector -> text (or attribute dict) mapping."""

    def __init__(
        self,
        elements: Optional[Dict[str, Any]] = None,
        response: Optional[FakeResponse] = None,
        goto_error: Optional[BaseException] = None,
    ):
        self.elements = elements or {}
        self.response = response if response is not None else FakeResponse()
        self.goto_error = goto_error
        self.closed = False
        self.close_calls = 0
        self.visited: List[str] = []
        self._handlers: Dict[str, List[Callable]] = {}

    def once(self, event: str, handler: Callable) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self.elements.get(selector))

    async def goto(self, url: str, **kwargs):
        self.visited.append(url)
        if self.goto_error is not None:
            raise self.goto_error
        return self.response

    async def close(self) -> None:
        self.close_calls += 1
        if self.closed:
            return
        self.closed = True
        for handler in self._handlers.pop("close", []):
            handler(self)


class FakeContext:
    def __init__(self, page_factory: Callable[[], FakePage], fail_new_page: bool = False):
        self.page_factory = page_factory
        self.fail_new_page = fail_new_page
        self.pages: List[FakePage] = []
        self.init_scripts: List[str] = []
        self.closed = False

    async def add_init_script(self, script: str) -> None:
        self.init_scripts.append(script)

    async def new_page(self) -> FakePage:
        if self.fail_new_page:
            raise RuntimeError("Target closed")
        page = self.page_factory()
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self, context: FakeContext):
        self.context = context
        self.context_options: Dict[str, Any] = {}
        self.closed = False

    async def new_context(self, **options) -> FakeContext:
        self.context_options = options
        return self.context

    async def close(self) -> None:
        self.closed = True


class FakeChromium:
    def __init__(self, owner: "FakePlaywrightFactory"):
        self.owner = owner

    async def launch(self, **kwargs) -> FakeBrowser:
        self.owner.launches += 1
        self.owner.launch_kwargs = kwargs
        # Yield so concurrent openers get a chance to race
        await asyncio.sleep(0)
        if self.owner.fail_launch:
            raise RuntimeError("Executable doesn't exist")
        context = FakeContext(self.owner.page_factory, self.owner.fail_new_page)
        self.owner.contexts.append(context)
        browser = FakeBrowser(context)
        self.owner.browsers.append(browser)
        return browser


class FakePlaywright:
    def __init__(self, owner: "FakePlaywrightFactory"):
        self.chromium = FakeChromium(owner)
        self.stopped = False

    async def stop(self) -> None:
        self.stopped = True


class FakePlaywrightFactory:
    """Stands in for ``async_playwright``: calling it returns a starter."""

    def __init__(self, page_factory: Optional[Callable[[], FakePage]] = None):
        self.page_factory = page_factory or FakePage
        self.fail_launch = False
        self.fail_new_page = False
        self.launches = 0
        self.launch_kwargs: Dict[str, Any] = {}
        self.contexts: List[FakeContext] = []
        self.browsers: List[FakeBrowser] = []
        self.instances: List[FakePlaywright] = []

    def __call__(self) -> "FakePlaywrightFactory":
        return self

    async def start(self) -> FakePlaywright:
        instance = FakePlaywright(self)
        self.instances.append(instance)
        return instance


@pytest.fixture
def playwright_factory() -> FakePlaywrightFactory:
    return FakePlaywrightFactory()
