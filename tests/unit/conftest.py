from typing import Dict, Optional

import pytest

from ui_query.utils.config import get_settings


class FakeElement:
    """In-memory stand-in for WebElement; flip attributes to simulate page changes."""

    def __init__(
        self,
        *,
        present: bool = True,
        displayed: bool = True,
        selected: bool = False,
        enabled: bool = True,
        text: str = "",
        attributes: Optional[Dict[str, str]] = None,
        properties: Optional[Dict[str, str]] = None,
        css: Optional[Dict[str, str]] = None,
    ):
        self.present = present
        self.displayed = displayed
        self.selected = selected
        self.enabled = enabled
        self.text_value = text
        self.attributes = dict(attributes or {})
        self.properties = dict(properties or {})
        self.css = dict(css or {})
        self.calls = 0

    async def is_present(self) -> bool:
        self.calls += 1
        return self.present

    async def is_displayed(self) -> bool:
        self.calls += 1
        return self.displayed

    async def is_selected(self) -> bool:
        return self.selected

    async def is_enabled(self) -> bool:
        return self.enabled

    async def is_clickable(self) -> bool:
        return self.displayed and self.enabled

    async def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    async def get_property(self, name: str) -> Optional[str]:
        return self.properties.get(name)

    async def get_css_value(self, name: str) -> str:
        return self.css.get(name, "")

    async def text(self) -> str:
        return self.text_value

    async def value(self) -> Optional[str]:
        return self.properties.get("value")

    async def class_name(self) -> Optional[str]:
        return self.attributes.get("class")


class FakeClock:
    """Millisecond clock whose sleep only advances time."""

    def __init__(self) -> None:
        self.now = 0
        self.sleeps: list[int] = []

    def __call__(self) -> int:
        return self.now

    async def sleep(self, ms: int) -> None:
        ms = max(0, ms)
        self.sleeps.append(ms)
        self.now += ms


@pytest.fixture
def make_element():
    return FakeElement


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fresh_settings(monkeypatch):
    """Reload settings from a clean environment for each test."""
    for key in ("POLLER", "POLL_TIMEOUT_MS", "POLL_INTERVAL_MS", "POLL_MAX_ATTEMPTS", "IGNORE_ERRORS"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()
