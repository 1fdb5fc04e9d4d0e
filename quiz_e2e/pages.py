"""
Page object for the quiz application under test.

``QuizPage`` keeps every DOM detail (element IDs, CSS selectors, class tokens
and the JavaScript predicates used for bounded waits) in one place, so the
runner reads as a sequence of intentions rather than selectors. Bounded waits
raise Playwright's ``TimeoutError``; the runner turns those into step failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from playwright.sync_api import Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from quiz_e2e.browser import BrowserRuntimeConfig, BrowserSession, launch_browser
from quiz_e2e.config import Settings, get_settings
from quiz_e2e.logging_utils import get_logger

logger = get_logger(__name__)

OPTION_SELECTOR = "#optionsContainer .option"
RESULT_ITEM_SELECTOR = "#detailedAnalysis .result-item"
SELECTED_TOKEN = "selected"
CORRECT_TOKEN = "correct"

_CLICKABLE_PREDICATE = """
(id) => {
    const el = document.getElementById(id);
    if (!el || el.disabled) return false;
    const style = window.getComputedStyle(el);
    return el.getClientRects().length > 0 && style.visibility !== 'hidden';
}
"""
_OPTION_HAS_TOKEN_PREDICATE = """
([selector, index, token]) => {
    const el = document.querySelectorAll(selector)[index];
    return !!el && el.classList.contains(token);
}
"""
_TEXT_CHANGED_PREDICATE = """
([id, previous]) => {
    const el = document.getElementById(id);
    if (!el) return false;
    const text = el.innerText.trim();
    return text !== '' && text !== previous;
}
"""
_RESULT_TOKENS_SCRIPT = """
(items, [limit, token]) => items.slice(0, limit).map(el => el.classList.contains(token))
"""


class QuizPage:
    """Thin wrapper over a Playwright page exposing the quiz's element vocabulary."""

    def __init__(
        self,
        page: Page,
        *,
        timeout_ms: int = 20_000,
        settle_timeout_ms: int = 5_000,
    ) -> None:
        self._page = page
        self.timeout_ms = timeout_ms
        self.settle_timeout_ms = settle_timeout_ms

    @property
    def title(self) -> str:
        return self._page.title()

    @property
    def url(self) -> str:
        return self._page.url

    def _by_id(self, element_id: str) -> Locator:
        return self._page.locator(f"#{element_id}")

    def goto(self, url: str) -> None:
        self._page.goto(url, wait_until="load", timeout=self.timeout_ms)

    def exists(self, element_id: str) -> bool:
        return self._by_id(element_id).count() > 0

    def is_visible(self, element_id: str) -> bool:
        return self._by_id(element_id).is_visible()

    def is_enabled(self, element_id: str) -> bool:
        return self._by_id(element_id).is_enabled()

    def wait_for_attached(self, element_id: str) -> None:
        self._by_id(element_id).wait_for(state="attached", timeout=self.timeout_ms)

    def wait_for_visible(self, element_id: str) -> None:
        self._by_id(element_id).wait_for(state="visible", timeout=self.timeout_ms)

    def wait_for_clickable(self, element_id: str) -> None:
        self._page.wait_for_function(
            _CLICKABLE_PREDICATE, arg=element_id, timeout=self.timeout_ms
        )

    def wait_for_text_change(self, element_id: str, previous: str) -> None:
        """Block until ``element_id`` shows non-empty text different from ``previous``."""
        self._page.wait_for_function(
            _TEXT_CHANGED_PREDICATE,
            arg=[element_id, previous.strip()],
            timeout=self.timeout_ms,
        )

    def input_value(self, element_id: str) -> str:
        return self._by_id(element_id).input_value()

    def text(self, element_id: str) -> str:
        return self._by_id(element_id).inner_text().strip()

    def fill(self, element_id: str, value: str) -> None:
        self._by_id(element_id).fill(value)

    def select(self, element_id: str, value: str) -> None:
        self._by_id(element_id).select_option(value=value)

    def click(self, element_id: str) -> None:
        self._by_id(element_id).click()

    def option_texts(self) -> List[str]:
        return [text.strip() for text in self._page.locator(OPTION_SELECTOR).all_inner_texts()]

    def click_option(self, index: int) -> None:
        # DOM-level click so overlays or scroll position cannot intercept it.
        self._page.locator(OPTION_SELECTOR).nth(index).dispatch_event("click")

    def wait_for_option_selected(self, index: int) -> bool:
        """Return True once option ``index`` carries the selected marker, False on timeout."""
        try:
            self._page.wait_for_function(
                _OPTION_HAS_TOKEN_PREDICATE,
                arg=[OPTION_SELECTOR, index, SELECTED_TOKEN],
                timeout=self.settle_timeout_ms,
            )
        except PlaywrightTimeoutError:
            return False
        return True

    def result_item_count(self) -> int:
        return self._page.locator(RESULT_ITEM_SELECTOR).count()

    def result_correctness(self, limit: int) -> List[bool]:
        if limit <= 0:
            return []
        return self._page.eval_on_selector_all(
            RESULT_ITEM_SELECTOR, _RESULT_TOKENS_SCRIPT, [limit, CORRECT_TOKEN]
        )

    def screenshot(self, path: Path) -> None:
        self._page.screenshot(path=str(path))


@dataclass(slots=True)
class QuizSession:
    """A browser session paired with the page object the runner drives."""

    browser: BrowserSession
    page: QuizPage

    def close(self) -> None:
        self.browser.close()


def open_quiz_session(settings: Optional[Settings] = None) -> QuizSession:
    resolved = settings or get_settings()
    browser = launch_browser(BrowserRuntimeConfig.from_settings(resolved))
    page = QuizPage(
        browser.page,
        timeout_ms=resolved.wait_timeout_ms,
        settle_timeout_ms=resolved.settle_timeout_ms,
    )
    return QuizSession(browser=browser, page=page)
