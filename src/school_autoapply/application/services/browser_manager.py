"""Browser manager implementation using Playwright."""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional, Set, TypeVar

from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright

from ...config import config
from ..interfaces import IBrowserManager, ILoggingService
from .logging_service import LoggingService

T = TypeVar("T")


@dataclass
class BrowserManagerOptions:
    """Launch options shared by every context of one manager."""

    headless: bool = field(default_factory=lambda: config.PLAYWRIGHT_HEADLESS)
    slow_mo: Optional[float] = field(default_factory=lambda: config.BROWSER_SLOW_MO_MS or None)
    user_agent: Optional[str] = field(default_factory=lambda: config.BROWSER_USER_AGENT or None)
    locale: str = field(default_factory=lambda: config.BROWSER_LOCALE)
    timezone_id: str = field(default_factory=lambda: config.BROWSER_TIMEZONE)
    viewport: Dict[str, int] = field(
        default_factory=lambda: {"width": config.VIEWPORT_WIDTH, "height": config.VIEWPORT_HEIGHT}
    )
    proxy: Optional[Dict[str, str]] = None
    args: Optional[List[str]] = None


@dataclass
class BrowserContextOptions:
    """
    Per-context options.

    ``disposable`` left as None means: tracked by ``new_context`` and closed
    by ``with_page``. True skips tracking, False keeps ``with_page`` from
    closing the context.
    """

    storage_state_path: Optional[str] = None
    extra_http_headers: Optional[Dict[str, str]] = None
    disposable: Optional[bool] = None


class BrowserManager(IBrowserManager):
    """
    Owns one Chromium process and the contexts opened on it.

    The browser is launched lazily on the first context request. Cleanup is
    best-effort: ``dispose`` never raises, so it can run in ``finally`` blocks
    without masking the original failure.
    """

    def __init__(self, options: Optional[BrowserManagerOptions] = None, logging_service: ILoggingService = None):
        """
        Initialize browser manager.

        Args:
            options: Launch options (config defaults if None)
            logging_service: Service for logging operations
        """
        self.options = options or BrowserManagerOptions()
        self.logger = logging_service or LoggingService(config.LOG_LEVEL)

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: Set[BrowserContext] = set()
        self._launch_lock = asyncio.Lock()

    @property
    def is_launched(self) -> bool:
        """Check if the browser process is running."""
        return self._browser is not None

    @property
    def tracked_context_count(self) -> int:
        """Number of contexts tracked for bulk cleanup."""
        return len(self._contexts)

    async def _ensure_browser(self) -> Browser:
        """Launch the browser once per manager. Launch failures propagate."""
        async with self._launch_lock:
            if self._browser is not None:
                return self._browser

            self.logger.info(f"🚀 Launching Chromium (headless={self.options.headless})...")
            self._playwright = await async_playwright().start()
            try:
                self._browser = await self._playwright.chromium.launch(
                    headless=self.options.headless,
                    slow_mo=self.options.slow_mo,
                    args=self.options.args,
                    proxy=self.options.proxy,
                )
            except Exception as e:
                self.logger.error(f"❌ Failed to launch Chromium: {e}")
                await self._stop_playwright()
                raise

            self.logger.info("✅ Chromium launched")
            return self._browser

    async def new_context(self, options: Optional[BrowserContextOptions] = None) -> BrowserContext:
        """
        Open an isolated context with fixed viewport, locale and timezone.

        Args:
            options: Storage state, extra headers and disposal mode

        Returns:
            The new BrowserContext
        """
        options = options or BrowserContextOptions()
        browser = await self._ensure_browser()

        context = await browser.new_context(
            viewport=self.options.viewport,
            locale=self.options.locale,
            timezone_id=self.options.timezone_id,
            user_agent=self.options.user_agent,
            storage_state=options.storage_state_path,
            extra_http_headers=options.extra_http_headers,
        )

        if not options.disposable:
            self._contexts.add(context)
            # Secondary bookkeeping for contexts closed behind our back
            context.on("close", lambda _: self._contexts.discard(context))

        self.logger.debug(f"🪟 Opened browser context ({len(self._contexts)} tracked)")
        return context

    async def close_context(self, context: BrowserContext) -> None:
        """Close a context and stop tracking it. Errors are swallowed."""
        self._contexts.discard(context)
        try:
            await context.close()
        except Exception as e:
            self.logger.debug(f"Ignoring context close error: {e}")

    async def with_page(
        self,
        handler: Callable[[BrowserContext], Awaitable[T]],
        options: Optional[BrowserContextOptions] = None,
    ) -> T:
        """
        Run ``handler`` inside a fresh context.

        Args:
            handler: Coroutine function receiving the context
            options: Context options; ``disposable=False`` keeps the context open

        Returns:
            Whatever ``handler`` returns
        """
        context = await self.new_context(options)
        try:
            return await handler(context)
        finally:
            if options is None or options.disposable is not False:
                await self.close_context(context)

    async def dispose(self) -> None:
        """Close all tracked contexts, then the browser. Idempotent and never raises."""
        contexts = list(self._contexts)
        self._contexts.clear()

        if contexts:
            results = await asyncio.gather(*(context.close() for context in contexts), return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    self.logger.debug(f"Ignoring context close error: {result}")

        if self._browser is not None:
            browser, self._browser = self._browser, None
            try:
                await browser.close()
                self.logger.info("🔚 Browser closed")
            except Exception as e:
                self.logger.debug(f"Ignoring browser close error: {e}")

        await self._stop_playwright()

    async def _stop_playwright(self) -> None:
        if self._playwright is None:
            return
        playwright, self._playwright = self._playwright, None
        try:
            await playwright.stop()
        except Exception as e:
            self.logger.debug(f"Ignoring Playwright stop error: {e}")
