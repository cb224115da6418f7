"""Drive a real Chromium tab with Playwright and run engine commands in it.

The page is opened once; the controller gets a fresh session on every main
frame navigation and the old one is cleaned up, the way a content script is
torn down on unload.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable

from autoapply.config import Settings, load_settings
from autoapply.controller import Command, ContentController
from autoapply.dom.live import LiveDocument
from autoapply.errors import AutoApplyError
from autoapply.log import get_logger

log = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT_MS = 20_000
NAVIGATION_TIMEOUT_MS = 25_000


def _sync_playwright():
    _pw = os.environ.get("PLAYWRIGHT_BROWSERS_PATH", "")
    if _pw and not Path(_pw).exists():
        os.environ.pop("PLAYWRIGHT_BROWSERS_PATH", None)
    try:
        from playwright.sync_api import sync_playwright
    except ImportError as exc:
        raise AutoApplyError("Playwright not installed. Run: pip install playwright && playwright install chromium") from exc
    return sync_playwright()


def run_in_browser(
    url: str,
    commands: Iterable[tuple[Command | str, dict[str, Any]]],
    controller: ContentController,
    *,
    settings: Settings | None = None,
    linger_ms: int = 0,
) -> list[dict[str, Any]]:
    """Open ``url``, dispatch ``commands`` in order and return their responses.

    Pending highlight and toast timers are drained before the tab closes;
    ``linger_ms`` keeps a headed window open a little longer to look at it.
    """
    settings = settings or load_settings()
    results: list[dict[str, Any]] = []

    with _sync_playwright() as p:
        browser = p.chromium.launch(headless=settings.headless)
        context = browser.new_context(
            viewport={"width": settings.viewport_width, "height": settings.viewport_height},
            user_agent=USER_AGENT,
        )
        page = context.new_page()
        page.set_default_timeout(DEFAULT_TIMEOUT_MS)

        try:
            log.info("Opening %s", url)
            page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)
            document = LiveDocument(page)
            controller.load(document)

            def _on_navigate(frame) -> None:
                if frame == page.main_frame:
                    log.info("Navigated to %s, resetting session", frame.url)
                    controller.load(document)

            page.on("framenavigated", _on_navigate)

            for command, payload in commands:
                response = controller.dispatch(command, **payload)
                log.info("%s → %s", Command(command).value, {k: v for k, v in response.items() if k != "job"})
                results.append(response)

            controller.wait_idle(sleep=page.wait_for_timeout)
            if linger_ms:
                page.wait_for_timeout(linger_ms)
        finally:
            controller.unload()
            browser.close()
    return results
