"""In-memory doubles for the Playwright objects the engine touches.

FakePage understands the small CSS subset the engine emits: tag names,
attribute tests (``=``, ``*=`` with optional ``i``), ``#id``, ``.class``,
``:not([...])`` and ``:has-text("...")``, comma-separated alternatives.
Anything else makes ``count()`` raise, like an invalid selector would.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from school_autoapply.application.interfaces import IBrowserManager, ILoggingService
from school_autoapply.application.services.logging_service import TimingContext

_ATTRIBUTE_RE = re.compile(r'\[([\w-]+)(?:(\*?=)"((?:[^"\\]|\\.)*)"(\s+i)?)?\]')
_ATTRIBUTE_TOKEN = r'\[[\w-]+(?:\*?="(?:[^"\\]|\\.)*"(?:\s+i)?)?\]'
_TOKEN = re.compile(
    r"(?P<not>:not\(" + _ATTRIBUTE_TOKEN + r"\))"
    r"|(?P<attr>" + _ATTRIBUTE_TOKEN + r")"
    r"|(?P<id>#[\w-]+)"
    r"|(?P<cls>\.[\w-]+)"
    r'|(?P<text>:has-text\("(?:[^"\\]|\\.)*"\))'
)


class InvalidSelectorError(Exception):
    pass


@dataclass
class FakeElement:
    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)
    label: Optional[str] = None
    text: str = ""
    checked: bool = False
    value: str = ""
    options: List[Dict[str, str]] = field(default_factory=list)
    selected: List[str] = field(default_factory=list)

    @property
    def input_type(self) -> str:
        return (self.attrs.get("type") or "text").lower()


def _split_alternatives(selector: str) -> List[str]:
    parts, depth, quoted, current = [], 0, False, ""
    for char in selector:
        if char == '"':
            quoted = not quoted
        elif not quoted and char in "([":
            depth += 1
        elif not quoted and char in ")]":
            depth -= 1
        if char == "," and not quoted and depth == 0:
            parts.append(current.strip())
            current = ""
            continue
        current += char
    parts.append(current.strip())
    return parts


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


def _attribute_matches(element: FakeElement, token: str) -> bool:
    match = _ATTRIBUTE_RE.fullmatch(token)
    name, operator, raw_value, insensitive = match.groups()
    actual = element.attrs.get(name)
    if actual is None:
        return False
    if operator is None:
        return True

    expected = _unescape(raw_value)
    if insensitive:
        actual, expected = actual.lower(), expected.lower()
    return expected in actual if operator == "*=" else actual == expected


def _compound_matches(element: FakeElement, compound: str) -> bool:
    tag_match = re.match(r"[a-z]+", compound)
    position = 0
    if tag_match:
        if element.tag != tag_match.group(0):
            return False
        position = tag_match.end()

    while position < len(compound):
        token = _TOKEN.match(compound, position)
        if token is None:
            raise InvalidSelectorError(f"Unsupported selector: {compound}")
        position = token.end()

        if token.group("not"):
            if _attribute_matches(element, token.group("not")[5:-1]):
                return False
        elif token.group("attr"):
            if not _attribute_matches(element, token.group("attr")):
                return False
        elif token.group("id"):
            if element.attrs.get("id") != token.group("id")[1:]:
                return False
        elif token.group("cls"):
            if token.group("cls")[1:] not in element.attrs.get("class", "").split():
                return False
        elif token.group("text"):
            wanted = _unescape(token.group("text")[11:-2]).lower()
            if wanted not in element.text.lower():
                return False
    return True


def select(elements: List[FakeElement], selector: str) -> List[FakeElement]:
    alternatives = _split_alternatives(selector)
    return [el for el in elements if any(_compound_matches(el, alt) for alt in alternatives)]


class FakeLocator:
    """Lazily re-resolves against the page, like a real Locator."""

    def __init__(self, page: "FakePage", resolve: Callable[[], List[FakeElement]], index: Optional[int] = None):
        self.page = page
        self._resolve = resolve
        self._index = index

    def _all(self) -> List[FakeElement]:
        found = self._resolve()
        if self._index is None:
            return found
        return found[self._index : self._index + 1]

    def _element(self) -> FakeElement:
        found = self._all()
        if not found:
            raise PlaywrightTimeoutError("Locator resolved to no element")
        return found[0]

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self.page, self._resolve, 0)

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self.page, self._resolve, index)

    async def count(self) -> int:
        return len(self._all())

    async def evaluate(self, script: str, arg: Any = None):
        element = self._element()
        if "tagName" in script:
            return element.tag
        if "el.options" in script:
            return [dict(option) for option in element.options]
        if "getAttribute('value')" in script:
            return [v for v in (element.attrs.get("value"), element.attrs.get("aria-label")) if v]
        if "el.type" in script:
            return element.input_type
        raise AssertionError(f"Unexpected element script: {script}")

    async def get_attribute(self, name: str) -> Optional[str]:
        return self._element().attrs.get(name)

    async def scroll_into_view_if_needed(self, timeout: Optional[float] = None) -> None:
        self.page.record("scroll", self._element())

    async def click(self, trial: bool = False, **kwargs) -> None:
        element = self._element()
        if trial:
            self.page.record("trial_click", element)
            return
        self.page.record("click", element)
        if self.page.click_error is not None:
            raise self.page.click_error
        if element.input_type == "checkbox":
            element.checked = not element.checked
        if self.page.on_click is not None:
            await self.page.on_click(element)

    async def fill(self, value: str) -> None:
        element = self._element()
        element.value = value
        self.page.record("fill", element, value)

    async def press_sequentially(self, value: str, delay: float = 0) -> None:
        element = self._element()
        element.value += value
        self.page.record("type", element, value)

    async def press(self, key: str) -> None:
        self.page.record("press", self._element(), key)

    async def check(self) -> None:
        element = self._element()
        if element.input_type == "radio":
            for other in self.page.elements:
                if other.input_type == "radio" and other.attrs.get("name") == element.attrs.get("name"):
                    other.checked = False
        element.checked = True
        self.page.record("check", element)

    async def is_checked(self) -> bool:
        return self._element().checked

    async def select_option(self, value) -> None:
        element = self._element()
        element.selected = list(value) if isinstance(value, list) else [value]
        self.page.record("select", element, value)


class FakeResponse:
    def __init__(self, status: int = 200):
        self.status = status

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class FakePage:
    """Page double holding a flat list of elements and an action log."""

    def __init__(self, elements: Optional[List[FakeElement]] = None, body_text: str = "", html: str = "<html></html>"):
        self.elements = list(elements or [])
        self.body_text = body_text
        self.html = html
        self.url = "about:blank"
        self.actions: List[tuple] = []
        self.evaluations: List[str] = []
        self.visited: List[str] = []
        self.closed = False

        self.response_status: Optional[int] = 200
        self.idle_times_out = False
        self.screenshot_error: Optional[Exception] = None
        self.click_error: Optional[Exception] = None
        self.on_click: Optional[Callable] = None
        self.navigates_on_click = False

    def record(self, action: str, element: FakeElement, value: Any = None) -> None:
        self.actions.append((action, element, value))

    def actions_named(self, action: str) -> List[tuple]:
        return [entry for entry in self.actions if entry[0] == action]

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, lambda: select(self.elements, selector))

    def get_by_label(self, text: str, exact: bool = False) -> FakeLocator:
        def resolve():
            wanted = text.lower()
            return [el for el in self.elements if el.label and wanted in el.label.lower()]

        return FakeLocator(self, resolve)

    def get_by_role(self, role: str, name=None) -> FakeLocator:
        def resolve():
            matches = []
            for el in self.elements:
                is_role = el.attrs.get("role") == role or (role == "button" and el.tag == "button")
                if is_role and (name is None or name.search(el.text)):
                    matches.append(el)
            return matches

        return FakeLocator(self, resolve)

    async def goto(self, url: str, wait_until: str = "load", timeout: Optional[float] = None):
        self.visited.append(url)
        self.url = url
        if self.response_status is None:
            return None
        return FakeResponse(self.response_status)

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        if state == "networkidle" and self.idle_times_out:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for networkidle")

    async def wait_for_event(self, event: str, timeout: Optional[float] = None):
        if event == "framenavigated" and self.navigates_on_click:
            return None
        raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {event}")

    async def wait_for_selector(self, selector: str, timeout: Optional[float] = None):
        if not select(self.elements, selector):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")
        return self.locator(selector).first

    async def wait_for_timeout(self, timeout: float) -> None:
        return None

    async def evaluate(self, script: str, arg: Any = None):
        self.evaluations.append(script)
        if "innerText" in script:
            return self.body_text[: arg] if arg is not None else self.body_text
        return None

    async def text_content(self, selector: str) -> str:
        return self.body_text

    async def content(self) -> str:
        return self.html

    async def screenshot(self, path: str, full_page: bool = False) -> bytes:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        with open(path, "wb") as f:
            f.write(b"\x89PNG")
        return b"\x89PNG"

    async def close(self) -> None:
        self.closed = True


class FakeContext:
    def __init__(self, page: FakePage):
        self.page = page
        self.closed = False
        self.close_calls = 0

    async def new_page(self) -> FakePage:
        return self.page

    async def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class FakeBrowserManager(IBrowserManager):
    """Hands out FakeContexts wrapping pages from ``page_factory``."""

    def __init__(self, page_factory: Callable[[], FakePage] = FakePage, launch_error: Optional[Exception] = None):
        self.page_factory = page_factory
        self.launch_error = launch_error
        self.contexts: List[FakeContext] = []
        self.context_options: List[Any] = []
        self.disposed = False

    async def new_context(self, options=None) -> FakeContext:
        if self.launch_error is not None:
            raise self.launch_error
        context = FakeContext(self.page_factory())
        self.contexts.append(context)
        self.context_options.append(options)
        return context

    async def with_page(self, handler, options=None):
        context = await self.new_context(options)
        try:
            return await handler(context)
        finally:
            await context.close()

    async def dispose(self) -> None:
        self.disposed = True

    @property
    def is_launched(self) -> bool:
        return bool(self.contexts)


class RecordingLogger(ILoggingService):
    """Logger that keeps (level, message) pairs instead of printing."""

    def __init__(self, context: Optional[Dict[str, str]] = None):
        self.context = dict(context or {})
        self.records: List[tuple] = []
        self.children: List["RecordingLogger"] = []

    def log(self, level: str, message: str) -> None:
        self.records.append((level.upper(), message))

    def debug(self, message: str) -> None:
        self.log("DEBUG", message)

    def info(self, message: str) -> None:
        self.log("INFO", message)

    def warning(self, message: str) -> None:
        self.log("WARNING", message)

    def error(self, message: str) -> None:
        self.log("ERROR", message)

    def time_operation(self, operation_name: str):
        return TimingContext(self, operation_name)

    def child(self, **context: str) -> "RecordingLogger":
        child = RecordingLogger({**self.context, **context})
        self.children.append(child)
        return child

    @property
    def lines(self) -> List[str]:
        return [f"{level}: {message}" for level, message in self.records]

    def messages(self, level: str) -> List[str]:
        return [message for record_level, message in self.records if record_level == level]


def text_input(label: Optional[str] = None, **attrs: str) -> FakeElement:
    return FakeElement("input", attrs={"type": "text", **attrs}, label=label)
