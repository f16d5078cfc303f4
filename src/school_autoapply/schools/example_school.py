"""Reference script showing the structure new school scripts follow."""

from ..application.scripting import SchoolAutomationContext, SchoolAutomationScript
from ..domain.models import AutoApplyResult
from .common import click_and_wait, failure_result, locate_submit_button, remap_template_fields

APPLY_URL = "https://example.edu/apply"

FIELD_OVERRIDES = {
    "english_first_name": {"label": "First Name"},
    "english_last_name": {"label": "Last Name"},
    "student_email": {"label": "Email"},
    "student_phone": {"label": "Phone"},
    "home_address": {"label": "Street Address"},
}


async def run(ctx: SchoolAutomationContext) -> AutoApplyResult:
    page = ctx.page
    try:
        await ctx.utils.safe_navigate(page, APPLY_URL)
        await ctx.login_handler.maybe_login(page, ctx.payload.user_login)
        await ctx.utils.wait_for_network_idle(page)

        remapped = remap_template_fields(ctx.payload.template, FIELD_OVERRIDES)
        fields = remapped or ctx.payload.fields
        await ctx.form_filler.fill_fields(page, fields)

        submit_button = await locate_submit_button(page)
        if submit_button is not None:
            await click_and_wait(page, submit_button, wait_until="networkidle", logger=ctx.logger)

        await ctx.utils.wait_for_network_idle(page)
        return AutoApplyResult.succeeded("Example school automation completed.")
    except Exception as e:
        ctx.logger.error(f"❌ Example school automation failed: {e}")
        return await failure_result(ctx, e, "example-school-error")


example_school_script = SchoolAutomationScript(
    id="example-school",
    name="Example International School",
    run=run,
    description="Demonstrates the structure required for new school automation scripts.",
    supports_login=True,
)
