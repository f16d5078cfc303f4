import asyncio

import pytest

from school_autoapply.application.services.login_handler import LoginHandler
from school_autoapply.domain.models import LoginOutcome, UserLogin

from tests.fakes import FakeElement, FakePage, RecordingLogger


def _handler() -> LoginHandler:
    return LoginHandler(submit_timeout_ms=100, idle_timeout_ms=100, logging_service=RecordingLogger())


def _login_page(with_submit: bool = True, identifier: str = "email") -> FakePage:
    elements = []
    if identifier == "email":
        elements.append(FakeElement("input", attrs={"type": "email", "name": "login_email"}))
    else:
        elements.append(FakeElement("input", attrs={"type": "text", "name": "username"}))
    elements.append(FakeElement("input", attrs={"type": "password", "name": "pwd"}))
    if with_submit:
        elements.append(FakeElement("button", attrs={"type": "submit"}, text="Sign in"))
    return FakePage(elements)


def test_no_credentials_does_nothing() -> None:
    async def _run() -> None:
        page = _login_page()
        handler = _handler()

        assert await handler.attempt_login(page, None) is LoginOutcome.NO_CREDENTIALS
        assert await handler.maybe_login(page, UserLogin(password="secret")) is False
        assert page.actions == []

    asyncio.run(_run())


def test_missing_login_form_is_not_an_error() -> None:
    async def _run() -> None:
        page = FakePage([FakeElement("input", attrs={"type": "email"})])

        outcome = await _handler().attempt_login(page, UserLogin(email="a@b.c", password="secret"))

        assert outcome is LoginOutcome.FORM_NOT_FOUND
        assert page.actions == []

    asyncio.run(_run())


def test_email_form_is_filled_and_submitted() -> None:
    async def _run() -> None:
        page = _login_page()
        email, password, submit = page.elements

        attempted = await _handler().maybe_login(
            page, UserLogin(username="jane", email="jane@example.com", password="secret")
        )

        assert attempted is True
        assert email.value == "jane@example.com"
        assert password.value == "secret"
        assert page.actions_named("click")[0][1] is submit

    asyncio.run(_run())


def test_username_form_prefers_username() -> None:
    async def _run() -> None:
        page = _login_page(identifier="username")
        username = page.elements[0]

        outcome = await _handler().attempt_login(
            page, UserLogin(username="jane", email="jane@example.com", password="secret")
        )

        assert outcome is LoginOutcome.SUBMITTED
        assert username.value == "jane"

    asyncio.run(_run())


def test_enter_is_pressed_without_submit_control() -> None:
    async def _run() -> None:
        page = _login_page(with_submit=False)
        password = page.elements[1]

        outcome = await _handler().attempt_login(page, UserLogin(email="jane@example.com", password="secret"))

        assert outcome is LoginOutcome.ENTER_PRESSED
        assert page.actions_named("press") == [("press", password, "Enter")]

    asyncio.run(_run())


def test_submit_click_failure_propagates() -> None:
    async def _run() -> None:
        page = _login_page()
        page.click_error = RuntimeError("element detached")

        with pytest.raises(RuntimeError, match="element detached"):
            await _handler().attempt_login(page, UserLogin(email="jane@example.com", password="secret"))

    asyncio.run(_run())


def test_navigation_after_submit_is_awaited() -> None:
    async def _run() -> None:
        page = _login_page()
        page.navigates_on_click = True
        handler = _handler()

        outcome = await handler.attempt_login(page, UserLogin(email="jane@example.com", password="secret"))

        assert outcome is LoginOutcome.SUBMITTED
        assert not any("No navigation" in message for message in handler.logger.messages("DEBUG"))

    asyncio.run(_run())
