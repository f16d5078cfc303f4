"""Pure search-term rules for locating template fields - no browser dependencies."""

import re
from typing import List

from ..models.template import TemplateField

_TOKEN_SEPARATORS = re.compile(r"[\s_\-]+")
_UNSAFE_LABEL_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def build_search_terms(field: TemplateField) -> List[str]:
    """
    Build the ordered, de-duplicated search terms for a field.

    The raw label and field ID come first, followed by their lowercase
    tokens split on whitespace, underscores and hyphens.

    Args:
        field: Template field to build terms for

    Returns:
        Search terms in the order locator strategies should try them
    """
    raw_terms: List[str] = []
    if field.label:
        raw_terms.append(field.label)
    raw_terms.append(field.field_id)

    tokens = [
        part.strip().lower()
        for term in raw_terms
        for part in _TOKEN_SEPARATORS.split(term)
        if part.strip()
    ]

    # dict keeps first-seen order
    return list(dict.fromkeys(raw_terms + tokens))


def css_attribute_value(term: str) -> str:
    """Escape a term for use inside a double-quoted CSS attribute selector."""
    return term.replace("\\", "\\\\").replace('"', '\\"')


def sanitize_label(label: str) -> str:
    """Make a label safe for use in an artifact file name."""
    return _UNSAFE_LABEL_CHARS.sub("_", label)
