"""DSC International School, 2025 intake. No login required."""

from ..application.scripting import SchoolAutomationContext, SchoolAutomationScript
from ..domain.models import AutoApplyResult
from .common import click_and_wait, failure_result, locate_submit_button, verify_submission

APPLY_URL = "https://www.dsc.edu.hk/admissions/applynow"

SUBMIT_PATTERN = r"submit|apply|提交|确认"
EXTRA_SUBMIT_SELECTORS = [
    'button:has-text("提交")',
    'button:has-text("确认")',
    "#submit-button",
    ".submit-btn",
]


async def run(ctx: SchoolAutomationContext) -> AutoApplyResult:
    page = ctx.page
    try:
        await ctx.utils.safe_navigate(page, APPLY_URL)
        await ctx.utils.soft_wait_for_network_idle(page)

        fields = ctx.payload.fields
        ctx.logger.info(f"📝 Filling {len(fields)} fields")
        await ctx.form_filler.fill_fields(page, fields)

        submit_button = await locate_submit_button(page, SUBMIT_PATTERN, EXTRA_SUBMIT_SELECTORS)
        if submit_button is not None:
            ctx.logger.info("📤 Submit button found, submitting")
            await click_and_wait(page, submit_button, wait_until="networkidle", logger=ctx.logger)
        else:
            ctx.logger.warning("⚠️ No submit button found")

        await ctx.utils.soft_wait_for_network_idle(page)

        if await verify_submission(page):
            ctx.logger.info("✅ Submission confirmed by page content")
        else:
            ctx.logger.warning("⚠️ Could not confirm the submission")

        return AutoApplyResult.succeeded("DSC HKIS 2025 application automation completed.")
    except Exception as e:
        ctx.logger.error(f"❌ DSC HKIS 2025 automation failed: {e}")
        return await failure_result(ctx, e, "dsc-hkis-2025-error")


dsc_hkis_2025_script = SchoolAutomationScript(
    id="dsc-hkis-2025",
    name="德思齐国际学校/DSC",
    run=run,
    description="DSC International School 2025 application, no login required.",
    supports_login=False,
)
