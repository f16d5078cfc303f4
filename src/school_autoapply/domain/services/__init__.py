"""Domain services for school auto-apply runs."""

from .search_terms import build_search_terms, css_attribute_value, sanitize_label

__all__ = [
    "build_search_terms",
    "css_attribute_value",
    "sanitize_label",
]
