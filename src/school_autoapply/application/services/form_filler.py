"""Service for locating template fields on a page and writing their values."""

from typing import Awaitable, Callable, Iterable, List, Optional, Sequence

from playwright.async_api import Locator, Page

from ...config import config
from ...domain.errors import FieldNotLocatedError
from ...domain.models import FieldMappingSuggestion, TemplateField
from ...domain.services import build_search_terms, css_attribute_value
from ..interfaces import IFieldMapper, ILoggingService
from .field_mappers import NullFieldMapper
from .logging_service import LoggingService, timing_decorator

TEXT_INPUT_SELECTOR = 'input:not([type="checkbox"]):not([type="radio"]):not([type="file"])'
TEXTAREA_SELECTOR = "textarea"
SELECT_SELECTOR = "select"
CHECKBOX_SELECTOR = 'input[type="checkbox"]'
RADIO_SELECTOR = 'input[type="radio"]'
TEXT_CONTROLS = [TEXT_INPUT_SELECTOR, TEXTAREA_SELECTOR]

FALSY_STRINGS = {"", "false", "0", "no", "off"}

LocatorStrategy = Callable[[Page, Sequence[str]], Awaitable[Optional[Locator]]]


async def _first_match(page: Page, selectors: Iterable[str]) -> Optional[Locator]:
    for selector in selectors:
        locator = page.locator(selector)
        if await locator.count():
            return locator.first
    return None


def _attribute_selectors(bases: Sequence[str], attributes: Sequence[str], terms: Sequence[str]) -> List[str]:
    """One comma-joined selector per term, covering every base/attribute pair."""
    selectors = []
    for term in terms:
        value = css_attribute_value(term)
        parts = [f'{base}[{attribute}*="{value}" i]' for attribute in attributes for base in bases]
        selectors.append(", ".join(parts))
    return selectors


async def by_accessible_label(page: Page, terms: Sequence[str]) -> Optional[Locator]:
    """Any control whose accessible label contains a term."""
    for term in terms:
        locator = page.get_by_label(term, exact=False)
        if await locator.count():
            return locator.first
    return None


async def by_placeholder(page: Page, terms: Sequence[str]) -> Optional[Locator]:
    """Text input or textarea whose placeholder contains a term."""
    return await _first_match(page, _attribute_selectors(TEXT_CONTROLS, ["placeholder"], terms))


async def by_text_aria_label(page: Page, terms: Sequence[str]) -> Optional[Locator]:
    """Text input or textarea whose aria-label contains a term."""
    return await _first_match(page, _attribute_selectors(TEXT_CONTROLS, ["aria-label"], terms))


async def by_select_attributes(page: Page, terms: Sequence[str]) -> Optional[Locator]:
    """Select whose aria-label or data-testid contains a term."""
    return await _first_match(page, _attribute_selectors([SELECT_SELECTOR], ["aria-label", "data-testid"], terms))


async def by_checkbox_attributes(page: Page, terms: Sequence[str]) -> Optional[Locator]:
    """Checkbox whose name or aria-label contains a term."""
    return await _first_match(page, _attribute_selectors([CHECKBOX_SELECTOR], ["name", "aria-label"], terms))


async def by_radio_attributes(page: Page, terms: Sequence[str]) -> Optional[Locator]:
    """Radio button whose name or aria-label contains a term."""
    return await _first_match(page, _attribute_selectors([RADIO_SELECTOR], ["name", "aria-label"], terms))


# Order matters: the first strategy that resolves wins
DEFAULT_STRATEGIES: List[LocatorStrategy] = [
    by_accessible_label,
    by_placeholder,
    by_text_aria_label,
    by_select_attributes,
    by_checkbox_attributes,
    by_radio_attributes,
]


def coerce_checked(value) -> bool:
    """Boolean target state for a checkbox value."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() not in FALSY_STRINGS
    return bool(value)


class FormFiller:
    """
    Service that writes template fields into page controls.

    One instance serves one run: the page-text snapshot handed to the field
    mapper is computed once and reused for every field of the run.
    """

    def __init__(
        self,
        field_mapper: Optional[IFieldMapper] = None,
        typing_delay_ms: Optional[int] = None,
        preview_chars: Optional[int] = None,
        logging_service: ILoggingService = None,
        strategies: Optional[Sequence[LocatorStrategy]] = None,
    ):
        """
        Initialize form filler.

        Args:
            field_mapper: Fallback mapper for fields the heuristics miss
            typing_delay_ms: Per-character typing delay; 0 fills directly
            preview_chars: Length of the page-text snapshot for the mapper
            logging_service: Service for logging operations
            strategies: Locator strategies to run before the mapper
        """
        self.field_mapper = field_mapper or NullFieldMapper()
        self.typing_delay_ms = config.TYPING_DELAY_MS if typing_delay_ms is None else typing_delay_ms
        self.preview_chars = preview_chars or config.PAGE_PREVIEW_CHARS
        self.logger = logging_service or LoggingService(config.LOG_LEVEL)
        self.strategies = list(strategies) if strategies is not None else list(DEFAULT_STRATEGIES)

        self._page_preview: Optional[str] = None

    @timing_decorator("fill fields")
    async def fill_fields(self, page: Page, fields: Iterable[TemplateField]) -> None:
        """
        Fill fields strictly in order.

        Later fields may depend on UI state triggered by earlier ones, so
        fills are never concurrent. The first failure aborts the batch.
        """
        for field in fields:
            await self.fill_field(page, field)

    async def fill_field(self, page: Page, field: TemplateField) -> None:
        """
        Locate ``field`` and write its value according to the element kind.

        Raises:
            FieldNotLocatedError: If no strategy resolves the field
        """
        locator = await self.locate_field(page, field)
        if locator is None:
            raise FieldNotLocatedError(field.field_id)

        await self.fill_located(page, field, locator)

    async def fill_located(self, page: Page, field: TemplateField, locator: Locator) -> None:
        """Write ``field`` into an element already resolved by ``locate_field``."""
        node_name = await locator.evaluate("el => el.tagName.toLowerCase()")

        if node_name == "textarea":
            await self._fill_text(locator, field.text_value)
        elif node_name == "select":
            await self._select_value(locator, field.value)
        else:
            input_type = await locator.evaluate("el => (el.type || 'text').toLowerCase()")
            if input_type == "radio":
                await self._select_radio(page, locator, field.text_value)
            elif input_type == "checkbox":
                await self._toggle_checkbox(locator, field.value)
            else:
                await self._fill_text(locator, field.text_value)

        self.logger.debug(f"✏️ Filled {field.field_id} ({node_name})")

    async def _fill_text(self, locator: Locator, value: str) -> None:
        await locator.scroll_into_view_if_needed()
        try:
            await locator.click(trial=True)
        except Exception as e:
            self.logger.debug(f"Trial click skipped: {e}")
        await locator.fill("")
        if self.typing_delay_ms:
            await locator.press_sequentially(value, delay=self.typing_delay_ms)
        else:
            await locator.fill(value)

    async def _select_value(self, locator: Locator, value) -> None:
        await locator.scroll_into_view_if_needed()
        wanted = list(value) if isinstance(value, tuple) else [str(value)]

        options = await locator.evaluate(
            "el => Array.from(el.options).map(o => ({value: o.value, label: (o.label || o.textContent || '').trim()}))"
        )
        resolved = [self._resolve_option(options, item) for item in wanted]

        # Plain strings match either an option's value or its label
        await locator.select_option(resolved if isinstance(value, tuple) else resolved[0])

    @staticmethod
    def _resolve_option(options: List[dict], wanted: str) -> str:
        """Map a wanted value onto an option value, comparing value and label case-insensitively."""
        target = wanted.strip().lower()
        for option in options:
            if option["value"].strip().lower() == target or option["label"].strip().lower() == target:
                return option["value"]
        return wanted

    async def _select_radio(self, page: Page, locator: Locator, value: str) -> None:
        group_name = await locator.get_attribute("name")
        if not group_name:
            await locator.check()
            return

        target = value.lower()
        candidates = page.locator(f'{RADIO_SELECTOR}[name="{css_attribute_value(group_name)}"]')
        count = await candidates.count()
        for index in range(count):
            candidate = candidates.nth(index)
            exposed = await candidate.evaluate(
                "el => [el.getAttribute('value'), el.getAttribute('aria-label')].filter(Boolean)"
            )
            if any(target in text.lower() for text in exposed):
                await candidate.check()
                return

        self.logger.debug(f"No radio option in '{group_name}' matches '{value}', checking matched element")
        await locator.check()

    async def _toggle_checkbox(self, locator: Locator, value) -> None:
        should_check = coerce_checked(value)
        if await locator.is_checked() != should_check:
            await locator.click()

    async def locate_field(self, page: Page, field: TemplateField) -> Optional[Locator]:
        """
        Resolve ``field`` to a page element.

        Runs the locator strategies in order over the field's search terms,
        then asks the field mapper. Returns None when every layer fails.
        """
        terms = build_search_terms(field)

        for strategy in self.strategies:
            locator = await strategy(page, terms)
            if locator is not None:
                self.logger.debug(f"🎯 {field.field_id} resolved by {strategy.__name__}")
                return locator

        return await self._locate_with_mapper(page, field)

    async def _locate_with_mapper(self, page: Page, field: TemplateField) -> Optional[Locator]:
        suggestion = await self._try_mapper_suggestion(page, field)
        if suggestion is None:
            return None

        if suggestion.selector:
            try:
                locator = page.locator(suggestion.selector)
                if await locator.count():
                    self.logger.info(f"🧠 {field.field_id} resolved by mapper selector {suggestion.selector}")
                    return locator.first
            except Exception as e:
                self.logger.warning(f"⚠️ Ignoring mapper selector for {field.field_id}: {e}")

        for hint in suggestion.label_texts:
            locator = page.get_by_label(hint, exact=False)
            if await locator.count():
                self.logger.info(f"🧠 {field.field_id} resolved by mapper label hint '{hint}'")
                return locator.first

        return None

    async def _try_mapper_suggestion(self, page: Page, field: TemplateField) -> Optional[FieldMappingSuggestion]:
        try:
            if self._page_preview is None:
                self._page_preview = await page.evaluate(
                    "n => (document.body ? document.body.innerText : '').slice(0, n)", self.preview_chars
                )
            return await self.field_mapper.suggest(field, self._page_preview)
        except Exception as e:
            self.logger.warning(f"⚠️ Field mapper failed for {field.field_id}: {e}")
            return None
