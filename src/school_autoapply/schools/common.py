"""Helpers school scripts opt into: field remapping, submit discovery, verification."""

import asyncio
import re
import traceback
from typing import Any, Dict, List, Optional, Sequence

from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..application.interfaces import ILoggingService
from ..application.scripting import SchoolAutomationContext
from ..config import config
from ..domain.models import AutoApplyResult, AutoApplyTemplate, TemplateField

FieldOverrideMap = Dict[str, Dict[str, Any]]

DEFAULT_SUBMIT_PATTERN = r"submit|apply|继续|提交"

SUCCESS_TEXT_PATTERNS = [
    re.compile(r"success|成功|已提交|已完成|thank you|感谢|submitted|received", re.IGNORECASE),
    re.compile(r"application.*received|申请.*已收到|申请.*成功", re.IGNORECASE),
]
CONFIRMATION_URL_PATTERN = re.compile(r"confirm|success|thank|完成|成功", re.IGNORECASE)

_ALLOWED_OVERRIDES = {"label", "html_type", "metadata"}


def remap_template_fields(template: AutoApplyTemplate, overrides: FieldOverrideMap) -> List[TemplateField]:
    """
    Re-label template fields for one institution's page.

    Only fields named in ``overrides`` are returned, in override order, with
    the override values (label, html_type, metadata) applied. Overrides for
    fields the template lacks are skipped.

    Args:
        template: The caller's template
        overrides: field_id -> {"label": ..., "html_type": ..., "metadata": ...}

    Returns:
        Remapped fields; empty if no override matched
    """
    remapped = []
    for field_id, override in overrides.items():
        base = template.get_field(field_id)
        if base is None:
            continue
        unknown = set(override) - _ALLOWED_OVERRIDES
        if unknown:
            raise ValueError(f"Unsupported override keys for {field_id}: {sorted(unknown)}")
        remapped.append(base.with_overrides(**override))
    return remapped


async def locate_submit_button(
    page: Page, name_pattern: str = DEFAULT_SUBMIT_PATTERN, extra_selectors: Sequence[str] = ()
) -> Optional[Locator]:
    """First button matching the role/name pattern, a submit input, or an extra selector."""
    candidates = [
        page.get_by_role("button", name=re.compile(name_pattern, re.IGNORECASE)),
        page.locator('button[type="submit"]'),
        page.locator('input[type="submit"]'),
        *(page.locator(selector) for selector in extra_selectors),
    ]

    for locator in candidates:
        if await locator.count():
            return locator.first
    return None


async def soft_wait_for_navigation(
    page: Page, timeout_ms: int, wait_until: str = "domcontentloaded", logger: ILoggingService = None
) -> bool:
    """
    Wait for the next main-frame navigation to reach ``wait_until``.

    Returns:
        True if a navigation finished, False on timeout
    """
    try:
        await page.wait_for_event("framenavigated", timeout=timeout_ms)
        await page.wait_for_load_state(wait_until, timeout=timeout_ms)
        return True
    except PlaywrightTimeoutError:
        if logger:
            logger.warning("⚠️ No navigation after click, the form may have submitted in place")
        return False


async def click_and_wait(
    page: Page,
    locator: Locator,
    timeout_ms: Optional[int] = None,
    wait_until: str = "domcontentloaded",
    logger: ILoggingService = None,
) -> bool:
    """
    Click ``locator`` while waiting for the navigation it may trigger.

    Click errors propagate; a missing navigation does not.

    Returns:
        True if a navigation finished
    """
    navigation = asyncio.ensure_future(
        soft_wait_for_navigation(page, timeout_ms or config.SUBMIT_TIMEOUT_MS, wait_until, logger)
    )
    try:
        await locator.click()
    except Exception:
        navigation.cancel()
        raise
    return await navigation


async def verify_submission(page: Page) -> bool:
    """Check the page text and URL for signs of a successful submission."""
    try:
        page_text = await page.text_content("body") or ""
    except Exception:
        return False

    if any(pattern.search(page_text) for pattern in SUCCESS_TEXT_PATTERNS):
        return True
    return bool(CONFIRMATION_URL_PATTERN.search(page.url))


async def failure_result(ctx: SchoolAutomationContext, error: Exception, label: str) -> AutoApplyResult:
    """Failure result for a script-handled error, with screenshot and HTML dump when possible."""
    trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    artifacts = await ctx.utils.capture_failure_artifacts(ctx.page, ctx.run_id, label)
    return AutoApplyResult.failed(str(error), errors=[trace], artifacts=artifacts)
