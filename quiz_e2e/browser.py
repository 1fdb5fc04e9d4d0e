from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

from playwright.sync_api import Browser, BrowserContext, Page, Playwright, sync_playwright

from quiz_e2e.config import Settings, get_settings
from quiz_e2e.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULT_LAUNCH_ARGS: Tuple[str, ...] = (
    "--start-maximized",
    "--disable-blink-features=AutomationControlled",
    "--disable-extensions",
    "--no-sandbox",
    "--disable-dev-shm-usage",
)
HIDE_WEBDRIVER_SCRIPT = (
    "Object.defineProperty(navigator, 'webdriver', { get: () => undefined });"
)


def _sanitize_timeout(value: Optional[float], fallback: float) -> float:
    candidate = value if value and value > 0 else fallback
    return max(candidate, 1e-2)


@dataclass(slots=True)
class BrowserRuntimeConfig:
    """Runtime tuning knobs for the Playwright session."""

    headless: bool = False
    channel: Optional[str] = None
    default_timeout: float = 20.0
    launch_args: Tuple[str, ...] = field(default_factory=lambda: DEFAULT_LAUNCH_ARGS)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "BrowserRuntimeConfig":
        resolved = settings or get_settings()
        return cls(
            headless=resolved.browser_headless,
            channel=resolved.browser_channel,
            default_timeout=resolved.wait_timeout_seconds,
        )


@dataclass(slots=True)
class BrowserSession:
    """Live Playwright objects backing a single quiz run."""

    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page

    def close(self) -> None:
        try:
            self.context.close()
            self.browser.close()
        finally:
            self.playwright.stop()


def launch_browser(config: Optional[BrowserRuntimeConfig] = None) -> BrowserSession:
    """
    Start Chromium with automation-detection flags disabled and a maximized,
    viewport-less context. Errors propagate to the caller untouched.
    """
    cfg = config or BrowserRuntimeConfig.from_settings()
    timeout_ms = int(_sanitize_timeout(cfg.default_timeout, 20.0) * 1000)

    playwright = sync_playwright().start()
    try:
        browser = playwright.chromium.launch(
            headless=cfg.headless,
            channel=cfg.channel,
            args=list(cfg.launch_args),
        )
        context = browser.new_context(no_viewport=True)
        context.add_init_script(HIDE_WEBDRIVER_SCRIPT)
        context.set_default_timeout(timeout_ms)
        context.set_default_navigation_timeout(timeout_ms)
        page = context.new_page()
    except Exception:
        playwright.stop()
        raise

    logger.debug(
        "Launched Chromium (headless=%s, channel=%s, timeout=%dms)",
        cfg.headless,
        cfg.channel,
        timeout_ms,
    )
    return BrowserSession(playwright=playwright, browser=browser, context=context, page=page)


@contextmanager
def browser_session(
    config: Optional[BrowserRuntimeConfig] = None,
) -> Iterator[BrowserSession]:
    """
    Yield a launched browser session and tear it down on exit.
    """
    session = launch_browser(config)
    try:
        yield session
    finally:
        session.close()
