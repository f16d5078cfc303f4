"""Heuristic login: find credential inputs, fill them and submit."""

import asyncio
from typing import Optional, Sequence

from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ...config import config
from ...domain.models import LoginOutcome, UserLogin
from ..interfaces import ILoggingService
from .logging_service import LoggingService

EMAIL_SELECTORS = [
    'input[type="email"]',
    'input[name*="email" i]',
    'input[id*="email" i]',
]

USERNAME_SELECTORS = [
    'input[name*="user" i]',
    'input[id*="user" i]',
    'input[name*="login" i]',
]

PASSWORD_SELECTORS = [
    'input[type="password"]',
    'input[name*="pass" i]',
    'input[id*="pass" i]',
]

SUBMIT_SELECTORS = [
    'button[type="submit"]',
    'input[type="submit"]',
    'button:has-text("Sign in")',
    'button:has-text("Log in")',
    'button:has-text("Login")',
    'button:has-text("Continue")',
    'button:has-text("Submit")',
    'button:has-text("登录")',
    'button:has-text("继续")',
    'button:has-text("提交")',
]


async def locate_first(page: Page, selectors: Sequence[str]) -> Optional[Locator]:
    """First element matching the first selector that matches anything."""
    for selector in selectors:
        locator = page.locator(selector)
        if await locator.count():
            return locator.first
    return None


class LoginHandler:
    """
    Best-effort login on whatever page is currently open.

    Only the first match of each selector category is used, and success is
    never verified: the handler reports that an attempt was made, nothing more.
    """

    def __init__(
        self,
        submit_timeout_ms: Optional[int] = None,
        idle_timeout_ms: Optional[int] = None,
        logging_service: ILoggingService = None,
    ):
        self.submit_timeout_ms = submit_timeout_ms or config.LOGIN_SUBMIT_TIMEOUT_MS
        self.idle_timeout_ms = idle_timeout_ms or config.LOGIN_IDLE_TIMEOUT_MS
        self.logger = logging_service or LoggingService(config.LOG_LEVEL)

    async def maybe_login(self, page: Page, credentials: Optional[UserLogin] = None) -> bool:
        """
        Attempt a login if credentials and a login form are present.

        Returns:
            True if credentials were entered and submitted, False otherwise
        """
        outcome = await self.attempt_login(page, credentials)
        return outcome.attempted

    async def attempt_login(self, page: Page, credentials: Optional[UserLogin] = None) -> LoginOutcome:
        """Same as ``maybe_login`` but tells "no credentials" apart from "no form"."""
        if credentials is None or not credentials.has_identifier:
            return LoginOutcome.NO_CREDENTIALS

        email_input = await locate_first(page, EMAIL_SELECTORS)
        username_input = None if email_input else await locate_first(page, USERNAME_SELECTORS)
        password_input = await locate_first(page, PASSWORD_SELECTORS)

        identifier_input = email_input or username_input
        if password_input is None or identifier_input is None:
            self.logger.info("🔐 No login form found, skipping login")
            return LoginOutcome.FORM_NOT_FOUND

        if email_input is not None:
            identifier = credentials.email or credentials.username
        else:
            identifier = credentials.username or credentials.email
        await identifier_input.fill(identifier)

        if credentials.password:
            await password_input.fill(credentials.password)

        submit_button = await locate_first(page, SUBMIT_SELECTORS)
        if submit_button is None:
            self.logger.info("🔐 No submit control found, pressing Enter in password field")
            await password_input.press("Enter")
            return LoginOutcome.ENTER_PRESSED

        self.logger.info("🔐 Submitting login form")
        navigation = asyncio.ensure_future(self._soft_wait_for_navigation(page))
        try:
            await submit_button.click()
        except Exception:
            navigation.cancel()
            raise
        await navigation
        await self._soft_wait_for_idle(page)
        return LoginOutcome.SUBMITTED

    async def _soft_wait_for_navigation(self, page: Page) -> None:
        try:
            await page.wait_for_event("framenavigated", timeout=self.submit_timeout_ms)
            await page.wait_for_load_state("domcontentloaded", timeout=self.submit_timeout_ms)
        except PlaywrightTimeoutError:
            self.logger.debug("No navigation after login submit, continuing")

    async def _soft_wait_for_idle(self, page: Page) -> None:
        try:
            await page.wait_for_load_state("networkidle", timeout=self.idle_timeout_ms)
        except PlaywrightTimeoutError:
            self.logger.debug("Network did not go idle after login, continuing")
