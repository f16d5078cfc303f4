"""Scenarios against a real headless Chromium. Skipped when Chromium cannot launch."""

import asyncio
from pathlib import Path

import pytest

from school_autoapply.application.scripting import SchoolAutomationScript
from school_autoapply.application.services import (
    AutoApplyService,
    BrowserContextOptions,
    BrowserManager,
    BrowserManagerOptions,
    FormFiller,
    LoginHandler,
    NullFieldMapper,
    ScriptRegistry,
)
from school_autoapply.domain.models import (
    AutoApplyPayload,
    AutoApplyResult,
    AutoApplyTemplate,
    LoginOutcome,
    TemplateField,
    UserLogin,
)

from tests.fakes import RecordingLogger

APPLICATION_FORM = """
<form onsubmit="event.preventDefault(); document.body.dataset.submitted = 'yes'">
  <label for="fn">First Name</label><input id="fn" name="first">
  <textarea placeholder="Tell us about the student"></textarea>
  <label for="grade">Grade</label>
  <select id="grade"><option value="g7">Grade 7</option><option value="g8">Grade 8</option></select>
  <input type="radio" name="gender" value="male"> <input type="radio" name="gender" value="female">
  <label><input type="checkbox" name="agree_terms"> I agree</label>
  <button type="submit">Submit</button>
</form>
"""

LOGIN_FORM = """
<form onsubmit="event.preventDefault(); document.body.dataset.login = 'sent'">
  <input type="email" name="email"><input type="password" name="password">
  <button type="submit">Sign in</button>
</form>
"""


def _manager() -> BrowserManager:
    return BrowserManager(BrowserManagerOptions(headless=True, slow_mo=None), logging_service=RecordingLogger())


@pytest.fixture(scope="module")
def chromium() -> None:
    async def _try_launch():
        manager = _manager()
        try:
            await manager.new_context()
            return None
        except Exception as e:
            return e
        finally:
            await manager.dispose()

    error = asyncio.run(_try_launch())
    if error is not None:
        pytest.skip(f"Chromium unavailable: {error}")


def test_form_filler_against_real_dom(chromium) -> None:
    async def _run() -> None:
        manager = _manager()
        try:
            context = await manager.new_context()
            page = await context.new_page()
            await page.set_content(APPLICATION_FORM)

            filler = FormFiller(field_mapper=NullFieldMapper(), typing_delay_ms=0, logging_service=RecordingLogger())
            await filler.fill_fields(
                page,
                [
                    TemplateField("english_first_name", "Jane", label="First Name"),
                    TemplateField("about", "Curious and kind", label="About the student"),
                    TemplateField("grade", "grade 8"),
                    TemplateField("gender", "Female"),
                    TemplateField("agree_terms", True),
                ],
            )

            assert await page.locator("#fn").input_value() == "Jane"
            assert await page.locator("textarea").input_value() == "Curious and kind"
            assert await page.locator("#grade").input_value() == "g8"
            assert await page.locator('input[value="female"]').is_checked()
            assert not await page.locator('input[value="male"]').is_checked()
            assert await page.locator('input[name="agree_terms"]').is_checked()
        finally:
            await manager.dispose()

    asyncio.run(_run())


def test_login_handler_submits_real_form(chromium) -> None:
    async def _run() -> None:
        manager = _manager()
        try:
            context = await manager.new_context()
            page = await context.new_page()
            await page.set_content(LOGIN_FORM)

            handler = LoginHandler(submit_timeout_ms=300, idle_timeout_ms=300, logging_service=RecordingLogger())
            outcome = await handler.attempt_login(page, UserLogin(email="jane@example.com", password="secret"))

            assert outcome is LoginOutcome.SUBMITTED
            assert await page.locator('input[type="email"]').input_value() == "jane@example.com"
            assert await page.evaluate("() => document.body.dataset.login") == "sent"
        finally:
            await manager.dispose()

    asyncio.run(_run())


def test_browser_manager_tracks_and_disposes_contexts(chromium) -> None:
    async def _run() -> None:
        manager = _manager()
        try:
            tracked = await manager.new_context()
            await manager.new_context()
            await manager.new_context(BrowserContextOptions(disposable=True))
            assert manager.is_launched
            assert manager.tracked_context_count == 2

            await manager.close_context(tracked)
            assert manager.tracked_context_count == 1

            async def title(context):
                page = await context.new_page()
                await page.set_content("<title>Apply</title>")
                return await page.title()

            assert await manager.with_page(title) == "Apply"
            assert manager.tracked_context_count == 1

            await manager.with_page(title, BrowserContextOptions(disposable=False))
            assert manager.tracked_context_count == 2
        finally:
            await manager.dispose()
            await manager.dispose()

        assert not manager.is_launched
        assert manager.tracked_context_count == 0

    asyncio.run(_run())


def test_failed_run_captures_real_screenshot(chromium, tmp_path: Path) -> None:
    async def run(ctx) -> AutoApplyResult:
        await ctx.page.set_content(APPLICATION_FORM)
        await ctx.form_filler.fill_field(ctx.page, TemplateField("passport_number", "X123"))
        return AutoApplyResult.succeeded("unreachable")

    async def _run() -> None:
        service = AutoApplyService(
            registry=ScriptRegistry([SchoolAutomationScript(id="local-form", name="Local", run=run)]),
            logging_service=RecordingLogger(),
            browser_manager_factory=lambda payload, logger: BrowserManager(
                BrowserManagerOptions(headless=True, slow_mo=None), logging_service=logger
            ),
            field_mapper_factory=lambda logger: NullFieldMapper(),
        )
        payload = AutoApplyPayload(
            school_id="local-form",
            template=AutoApplyTemplate(template_id="tpl"),
            run_id="run-real",
            screenshot_dir=str(tmp_path),
        )

        result = await service.run(payload)

        assert not result.success
        assert result.message == "Unable to locate field passport_number"
        assert Path(result.artifacts.screenshot_path).stat().st_size > 0
        assert "First Name" in Path(result.artifacts.raw_html_path).read_text(encoding="utf-8")

    asyncio.run(_run())
