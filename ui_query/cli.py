# ui_query/cli.py
from __future__ import annotations

"""Command-line interface
------------------------
Open a page and probe it with the chained query / waiter API:
check which fallback selector resolves, wait for an element state, or assert
that nothing matches. Also prints the effective configuration.
"""

import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import click
from playwright.async_api import Error as PlaywrightError

from ui_query.core.errors import NoSuchElementError, WaitTimeoutError
from ui_query.core.poller import ElementPoller
from ui_query.selectors.locator import parse_selector
from ui_query.utils.config import Settings, WaitConfig, get_settings
from ui_query.utils.logger import (
    attach_file_logger,
    bind,
    configure_logging,
    detach_file_logger,
    get_logger,
    set_log_level,
    unbind,
)

WAIT_STATES = ["displayed", "not-displayed", "enabled", "clickable", "selected", "stale"]


# -------- helpers --------


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _wait_config(settings: Settings, timeout_ms: Optional[int], interval_ms: int, nowait: bool, strict: bool) -> WaitConfig:
    if nowait:
        poller = ElementPoller.no_wait()
    elif timeout_ms is not None:
        poller = ElementPoller.timeout_with_interval(timeout_ms, interval_ms)
    else:
        poller = settings.default_poller()
    return WaitConfig(poller=poller, ignore_errors=not strict)


def _build_query(session, selectors: List[str], description: Optional[str]):
    parsed = [parse_selector(s) for s in selectors]
    query = session.query(parsed[0])
    for sel in parsed[1:]:
        query = query.or_(sel)
    if description:
        query = query.desc(description)
    return query


async def _open_and_run(url: str, settings: Settings, config: WaitConfig, job):
    """Launch a browser, open `url`, and run `job(session)` against it."""
    from playwright.async_api import async_playwright

    from ui_query.core.session import Session

    async with async_playwright() as p:
        browser_type = getattr(p, settings.BROWSER_TYPE.value)
        browser = await browser_type.launch(**settings.playwright_launch_kwargs())
        try:
            context = await browser.new_context(**settings.playwright_context_kwargs())
            page = await context.new_page()
            await page.goto(url, wait_until="domcontentloaded", timeout=settings.PAGE_LOAD_TIMEOUT)
            return await job(Session(page, config))
        finally:
            await browser.close()


def _failure(url: str, e: Exception) -> dict:
    return {"ok": False, "url": url, "error": str(e), "error_type": e.__class__.__name__}


def run_probe(
    url: str,
    selectors: List[str],
    description: Optional[str],
    until: Optional[str],
    config: WaitConfig,
    settings: Settings,
) -> dict:
    """Resolve the query, optionally wait for `until`; return a result dict."""

    async def job(session) -> dict:
        elem = await _build_query(session, selectors, description).first()
        result = {"ok": True, "url": url, "matched": elem.description}
        if until:
            waiter = elem.wait_until(f"element never became {until}")
            await getattr(waiter, until.replace("-", "_"))()
            result["state"] = until
        return result

    try:
        return asyncio.run(_open_and_run(url, settings, config, job))
    except (NoSuchElementError, WaitTimeoutError, PlaywrightError) as e:
        return _failure(url, e)


def run_absent(url: str, selectors: List[str], config: WaitConfig, settings: Settings) -> dict:
    async def job(session) -> dict:
        absent = await _build_query(session, selectors, None).not_exists()
        return {"ok": absent, "url": url, "absent": absent}

    try:
        return asyncio.run(_open_and_run(url, settings, config, job))
    except PlaywrightError as e:
        return _failure(url, e)


def _report(result: dict, as_json: bool) -> None:
    if as_json:
        _echo_json(result)
    elif result.get("ok"):
        click.echo(f"OK  {result['url']}" + (f" -> {result['matched']}" if "matched" in result else ""))
    else:
        prefix = f"{result['error_type']}: " if result.get("error_type") else ""
        click.echo(f"ERR {result['url']} -> {prefix}{result.get('error', 'still present')}")


# -------- CLI root --------


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from settings",
)
@click.version_option(package_name="ui-query-system")
def cli(log_level: Optional[str]):
    configure_logging(get_settings())
    if log_level:
        set_log_level(log_level.upper())


# -------- commands --------


@cli.command("config")
def cmd_config():
    """Print effective configuration (after .env & env vars)."""
    s = get_settings()
    data = json.loads(s.model_dump_json())
    data["default_poller"] = s.default_poller().describe()
    _echo_json(data)


_selector_option = click.option(
    "-s", "--selector", "selectors", multiple=True, required=True,
    help="strategy:value (css, xpath, text, role, id, class, name, tag, link, partial-link); repeat for fallbacks",
)
_timing_options = [
    click.option("--timeout-ms", type=int, default=None, help="Poll until this deadline (overrides POLLER)"),
    click.option("--interval-ms", type=int, default=None, help="Poll interval (default POLL_INTERVAL_MS)"),
    click.option("--nowait", is_flag=True, default=False, help="Single attempt, no polling"),
    click.option("--strict", is_flag=True, default=False, help="Abort on the first lookup/predicate error"),
    click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON"),
    click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Also write JSON logs here"),
]


def _with_timing(fn):
    for opt in reversed(_timing_options):
        fn = opt(fn)
    return fn


@cli.command("probe")
@click.argument("url")
@_selector_option
@click.option("--desc", "description", type=str, default=None, help="Label for the last selector")
@click.option("--until", type=click.Choice(WAIT_STATES), default=None, help="Wait for this state after matching")
@_with_timing
def cmd_probe(
    url: str,
    selectors: List[str],
    description: Optional[str],
    until: Optional[str],
    timeout_ms: Optional[int],
    interval_ms: Optional[int],
    nowait: bool,
    strict: bool,
    as_json: bool,
    log_file: Optional[str],
):
    """
    Find the first element matching any selector (tried in order each poll).

    Examples:
      ui-query probe https://wikipedia.org -s css:thiswont.match -s id:searchInput --desc "search input"
      ui-query probe https://example.org -s "text:More information" --until clickable --timeout-ms 5000
    """
    settings = get_settings()
    config = _wait_config(settings, timeout_ms, settings.POLL_INTERVAL_MS if interval_ms is None else interval_ms, nowait, strict)
    log = get_logger(__name__)
    handler = attach_file_logger(Path(log_file)) if log_file else None
    bind(probe_id=datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"), url=url)
    try:
        log.info(f"Probing {url} with {len(selectors)} selector(s) [{config.poller.describe()}]")
        result = run_probe(url, list(selectors), description, until, config, settings)
    finally:
        unbind("probe_id", "url")
        if handler is not None:
            detach_file_logger(handler)

    _report(result, as_json)
    sys.exit(0 if result.get("ok") else 1)


@cli.command("absent")
@click.argument("url")
@_selector_option
@_with_timing
def cmd_absent(
    url: str,
    selectors: List[str],
    timeout_ms: Optional[int],
    interval_ms: Optional[int],
    nowait: bool,
    strict: bool,
    as_json: bool,
    log_file: Optional[str],
):
    """Succeed once no selector matches anything."""
    settings = get_settings()
    config = _wait_config(settings, timeout_ms, settings.POLL_INTERVAL_MS if interval_ms is None else interval_ms, nowait, strict)
    handler = attach_file_logger(Path(log_file)) if log_file else None
    try:
        result = run_absent(url, list(selectors), config, settings)
    finally:
        if handler is not None:
            detach_file_logger(handler)

    _report(result, as_json)
    sys.exit(0 if result.get("ok") else 1)


def main() -> None:
    cli(prog_name="ui-query")


if __name__ == "__main__":
    main()
