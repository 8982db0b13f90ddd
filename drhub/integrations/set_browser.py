from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from drhub.errors import SourceShapeError, SourceUnavailableError

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

_BODY_TEXT_JS = "() => document.body ? document.body.innerText : ''"
_FALLBACK_TEXT_JS = (
    "() => { const pre = document.querySelector('pre');"
    " return (pre && pre.innerText) || (document.body ? document.body.textContent : ''); }"
)


class BrowserPage:
    """One open page; reads JSON endpoints the way a browser renders them."""

    def __init__(self, page: Any, *, timeout_ms: int) -> None:
        self._page = page
        self._timeout_ms = timeout_ms

    def read_text(self, url: str, *, wait_until: str = "domcontentloaded") -> str:
        self._page.goto(url, wait_until=wait_until, timeout=self._timeout_ms)
        content = self._page.evaluate(_BODY_TEXT_JS)
        if not content or not str(content).strip():
            content = self._page.evaluate(_FALLBACK_TEXT_JS)
        return str(content or "")

    def read_json(self, url: str, *, wait_until: str = "domcontentloaded") -> Any:
        content = self.read_text(url, wait_until=wait_until)
        if not content.strip():
            raise SourceUnavailableError(f"empty page content url={url}")
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            html = str(self._page.content() or "")
            print(
                f"[SOURCE][browser_json_error] url={url} content_length={len(content)} "
                f"content_snippet={content[:200]!r} html_snippet={html[:500]!r}",
                flush=True,
            )
            raise SourceShapeError(f"page content is not JSON url={url}") from exc


class SetBrowserClient:
    """Headless Chromium reader for set.or.th endpoints that reject plain HTTP clients."""

    _BLOCKED_RESOURCE_TYPES = frozenset({"image", "font", "stylesheet"})
    _LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]

    def __init__(
        self,
        *,
        executable_path: Optional[str] = None,
        timeout_sec: float = 60.0,
        playwright_factory: Optional[Callable[[], Any]] = None,
    ) -> None:
        self.executable_path = executable_path
        self.timeout_ms = int(timeout_sec * 1000)
        self._playwright_factory = playwright_factory or self._default_playwright_factory

    def _default_playwright_factory(self) -> Any:
        from playwright.sync_api import sync_playwright

        return sync_playwright()

    def _filter_request(self, route: Any) -> None:
        if route.request.resource_type in self._BLOCKED_RESOURCE_TYPES:
            route.abort()
        else:
            route.continue_()

    @contextmanager
    def session(self) -> Iterator[BrowserPage]:
        """Launch a browser, yield a page, and always close the browser afterwards."""
        playwright = self._playwright_factory().start()
        browser = None
        try:
            browser = playwright.chromium.launch(
                headless=True,
                executable_path=self.executable_path,
                args=self._LAUNCH_ARGS,
            )
            page = browser.new_page(user_agent=USER_AGENT)
            page.route("**/*", self._filter_request)
            yield BrowserPage(page, timeout_ms=self.timeout_ms)
        finally:
            if browser is not None:
                browser.close()
            playwright.stop()
