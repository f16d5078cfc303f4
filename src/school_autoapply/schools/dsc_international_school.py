"""
DSC International School, lenient variant.

Fills fields one at a time and keeps going when a single field fails, then
reports how many fields were filled. A run that submits without a visible
confirmation still counts as a success; the message says so.
"""

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..application.scripting import SchoolAutomationContext, SchoolAutomationScript
from ..domain.errors import AutoApplyError, FieldNotLocatedError
from ..domain.models import AutoApplyResult
from .common import click_and_wait, failure_result, locate_submit_button, verify_submission

APPLY_URL = "https://www.dsc.edu.hk/admissions/applynow"

FORM_CONTAINER_SELECTOR = 'form, [role="form"], .form, #application-form'
FORM_WAIT_TIMEOUT_MS = 10000
SCROLL_TIMEOUT_MS = 3000
FIELD_PAUSE_MS = 200
POST_SUBMIT_PAUSE_MS = 2000

SUBMIT_PATTERN = r"submit|apply|提交|确认|send|提交申请"
EXTRA_SUBMIT_SELECTORS = [
    'button:has-text("Submit")',
    'button:has-text("提交")',
    'button:has-text("Apply")',
    'button:has-text("Send")',
    "#submit-button",
    "#apply-button",
    ".submit-btn",
    ".apply-button",
    "[data-submit]",
    "button.submit",
]


async def _wait_for_form(ctx: SchoolAutomationContext):
    page = ctx.page
    await ctx.utils.soft_wait_for_network_idle(page)
    try:
        await page.wait_for_selector(FORM_CONTAINER_SELECTOR, timeout=FORM_WAIT_TIMEOUT_MS)
        ctx.logger.debug("Form container detected")
    except PlaywrightTimeoutError:
        ctx.logger.warning("⚠️ No form container found, continuing anyway")
    await page.evaluate("() => window.scrollTo(0, 0)")


async def _fill_leniently(ctx: SchoolAutomationContext):
    """Fill each field on its own, returning (filled_count, failed_field_ids)."""
    page = ctx.page
    filled = 0
    failed = []

    for field in ctx.payload.fields:
        try:
            locator = await ctx.form_filler.locate_field(page, field)
            if locator is None:
                raise FieldNotLocatedError(field.field_id)
            try:
                await locator.scroll_into_view_if_needed(timeout=SCROLL_TIMEOUT_MS)
            except PlaywrightTimeoutError:
                ctx.logger.debug(f"Scroll timed out for {field.field_id}")
            await ctx.form_filler.fill_located(page, field, locator)
            filled += 1
            ctx.logger.debug(f"Filled {field.field_id}")
            await page.wait_for_timeout(FIELD_PAUSE_MS)
        except Exception as e:
            failed.append(field.field_id)
            ctx.logger.warning(f"⚠️ Could not fill {field.field_id}: {e}")

    return filled, failed


async def run(ctx: SchoolAutomationContext) -> AutoApplyResult:
    page = ctx.page
    try:
        await ctx.utils.safe_navigate(page, APPLY_URL)
        await _wait_for_form(ctx)

        filled, failed = await _fill_leniently(ctx)
        total = len(ctx.payload.fields)
        ctx.logger.info(f"📊 Filled {filled}/{total} fields")
        if failed:
            ctx.logger.warning(f"⚠️ Unfilled fields: {', '.join(failed)}")

        submit_button = await locate_submit_button(page, SUBMIT_PATTERN, EXTRA_SUBMIT_SELECTORS)
        if submit_button is None:
            raise AutoApplyError("No submit button found on the application form")

        await submit_button.scroll_into_view_if_needed()
        ctx.logger.info("📤 Submitting application")
        await click_and_wait(page, submit_button, logger=ctx.logger)
        await page.wait_for_timeout(POST_SUBMIT_PAUSE_MS)
        await ctx.utils.soft_wait_for_network_idle(page)

        if await verify_submission(page):
            ctx.logger.info("✅ Submission confirmed")
            message = f"Application submitted and confirmed ({filled}/{total} fields filled)."
        else:
            ctx.logger.warning("⚠️ Submission could not be confirmed")
            message = f"Application submitted but unconfirmed ({filled}/{total} fields filled)."
        return AutoApplyResult.succeeded(message)
    except Exception as e:
        ctx.logger.error(f"❌ DSC International School automation failed: {e}")
        return await failure_result(ctx, e, "dsc-international-school-error")


dsc_international_school_script = SchoolAutomationScript(
    id="dsc-international-school",
    name="德思齐国际学校 (DSC International School)",
    run=run,
    description="Field-by-field DSC application that tolerates individual field failures.",
    supports_login=False,
)
