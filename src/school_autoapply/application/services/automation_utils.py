"""Navigation, waiting and diagnostic-capture helpers shared by school scripts."""

from pathlib import Path
from typing import Optional

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ...config import config
from ...domain.errors import NavigationError
from ...domain.models import AutoApplyResult, RunArtifacts
from ...domain.services import sanitize_label
from ..interfaces import ILoggingService
from .logging_service import LoggingService, timing_decorator


class AutomationUtils:
    """
    Helpers for driving a page and capturing diagnostics.

    Screenshots and HTML dumps are diagnostic only: without a screenshot
    directory they are no-ops, and nothing in a run's control flow depends
    on them.
    """

    def __init__(
        self,
        screenshot_dir: Optional[str] = None,
        navigation_timeout_ms: Optional[int] = None,
        network_idle_timeout_ms: Optional[int] = None,
        logging_service: ILoggingService = None,
    ):
        """
        Initialize automation utils.

        Args:
            screenshot_dir: Directory for artifacts, or None to disable capture
            navigation_timeout_ms: Timeout for ``safe_navigate``
            network_idle_timeout_ms: Default timeout for network-idle waits
            logging_service: Service for logging operations
        """
        self.screenshot_dir = Path(screenshot_dir) if screenshot_dir else None
        self.navigation_timeout_ms = navigation_timeout_ms or config.NAVIGATION_TIMEOUT_MS
        self.network_idle_timeout_ms = network_idle_timeout_ms or config.NETWORK_IDLE_TIMEOUT_MS
        self.logger = logging_service or LoggingService(config.LOG_LEVEL)

    def ensure_dir(self, directory: Path) -> None:
        """Create ``directory`` and its parents if missing."""
        directory.mkdir(parents=True, exist_ok=True)

    @timing_decorator("navigation")
    async def safe_navigate(self, page: Page, url: str) -> None:
        """
        Navigate and wait for DOM content.

        Raises:
            NavigationError: If there is no response or its status is not ok
        """
        self.logger.info(f"🌐 Navigating to {url}")
        response = await page.goto(url, wait_until="domcontentloaded", timeout=self.navigation_timeout_ms)

        if response is None or not response.ok:
            raise NavigationError(url, response.status if response is not None else None)

    async def wait_for_network_idle(self, page: Page, timeout_ms: Optional[int] = None) -> None:
        """Wait for network idle. A timeout propagates; the caller decides whether it is fatal."""
        await page.wait_for_load_state("networkidle", timeout=timeout_ms or self.network_idle_timeout_ms)

    async def soft_wait_for_network_idle(self, page: Page, timeout_ms: Optional[int] = None) -> bool:
        """
        Wait for network idle, treating a timeout as "carry on".

        Returns:
            True if the network went idle, False on timeout
        """
        try:
            await self.wait_for_network_idle(page, timeout_ms)
            return True
        except PlaywrightTimeoutError:
            self.logger.warning("⚠️ Network did not go idle in time, continuing")
            return False

    async def collect_page_text(self, page: Page, limit: Optional[int] = None) -> str:
        """Visible body text, truncated to ``limit`` characters."""
        return await page.evaluate(
            "n => (document.body ? document.body.innerText : '').slice(0, n)", limit or config.PAGE_TEXT_CHARS
        )

    async def take_screenshot(self, page: Page, run_id: str, label: str) -> Optional[str]:
        """
        Write a full-page screenshot named ``{run_id}-{label}.png``.

        Returns:
            Path of the screenshot, or None when no directory is configured
        """
        if self.screenshot_dir is None:
            return None

        file_path = (self.screenshot_dir / f"{run_id}-{sanitize_label(label)}.png").resolve()
        self.ensure_dir(self.screenshot_dir)
        await page.screenshot(path=str(file_path), full_page=True)
        self.logger.info(f"📸 Screenshot saved to {file_path}")
        return str(file_path)

    async def persist_html_dump(self, page: Page, run_id: str) -> Optional[str]:
        """
        Write the page's full DOM to ``{run_id}-dom.html``.

        Returns:
            Path of the dump, or None when no directory is configured
        """
        if self.screenshot_dir is None:
            return None

        file_path = (self.screenshot_dir / f"{run_id}-dom.html").resolve()
        self.ensure_dir(self.screenshot_dir)
        html = await page.content()
        file_path.write_text(html, encoding="utf-8")
        self.logger.info(f"💾 HTML dump saved to {file_path}")
        return str(file_path)

    async def capture_failure_artifacts(self, page: Page, run_id: str, label: str) -> RunArtifacts:
        """
        Capture a screenshot and an HTML dump, swallowing each failure independently.

        Capture problems are logged but never raised, so they cannot mask
        the failure being diagnosed.
        """
        screenshot_path = None
        html_path = None

        try:
            screenshot_path = await self.take_screenshot(page, run_id, label)
        except Exception as e:
            self.logger.warning(f"⚠️ Screenshot capture failed: {e}")

        try:
            html_path = await self.persist_html_dump(page, run_id)
        except Exception as e:
            self.logger.warning(f"⚠️ HTML dump failed: {e}")

        return RunArtifacts(screenshot_path=screenshot_path, raw_html_path=html_path)

    @staticmethod
    def build_result_with_artifacts(
        base: AutoApplyResult, artifacts: Optional[RunArtifacts]
    ) -> AutoApplyResult:
        """Merge ``artifacts`` into ``base`` without mutating either."""
        return base.with_artifacts(artifacts)
