#!/usr/bin/env python3
"""
Search Wikipedia using chained queries and element waits.

Usage:
  python scripts/wikipedia_search.py            # headless
  HEADLESS=false python scripts/wikipedia_search.py
"""

import asyncio
import sys

from playwright.async_api import async_playwright

from ui_query import ElementPoller, Selector, Session, WaitConfig
from ui_query.utils.config import get_settings
from ui_query.utils.logger import configure_logging, get_logger

log = get_logger("wikipedia_search")


async def main() -> int:
    s = get_settings()
    configure_logging(s)
    async with async_playwright() as p:
        browser = await p.chromium.launch(**s.playwright_launch_kwargs())
        try:
            page = await browser.new_page()

            # Wait up to 20 seconds, polling every second, for every query on this session.
            session = Session(page, WaitConfig(poller=ElementPoller.timeout_with_interval(20000, 1000)))

            await page.goto("https://wikipedia.org", wait_until="domcontentloaded")
            form = await session.query(Selector.id("search-form")).first()

            # Each selector is tried once per poll; the first to match wins.
            search = await (
                form.query(Selector.css("thiswont.match"))
                .or_(Selector.id("searchInput"))
                .desc("search input")
                .first()
            )
            await search.handle.fill("selenium")

            button = await form.query(Selector.css("button[type='submit']")).desc("search button").first()
            await button.handle.click()

            # Wait until the button no longer exists (two different ways).
            await button.wait_until("Timed out waiting for button to become stale").stale()
            gone = await session.query(Selector.css("button[type='submit']")).nowait().not_exists()
            log.info(f"search button gone: {gone}")

            await session.query(Selector.class_name("firstHeading")).first()
            title = await page.title()
            log.info(f"Landed on: {title}")
            return 0 if title == "Selenium - Wikipedia" else 1
        finally:
            await browser.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
