"""Domain model for field-mapper suggestions."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class FieldHints:
    """Page-text hints that may identify a field's control."""

    label_texts: Tuple[str, ...] = ()
    placeholders: Tuple[str, ...] = ()
    aria_labels: Tuple[str, ...] = ()
    data_test_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        for name in ("label_texts", "placeholders", "aria_labels", "data_test_ids"):
            object.__setattr__(self, name, tuple(getattr(self, name)))


@dataclass(frozen=True)
class FieldMappingSuggestion:
    """
    A mapper's guess at where a field lives.

    Either a raw selector, label hints, or both. Every suggestion is
    re-verified against the page before it is used.
    """

    confidence: float
    selector: Optional[str] = None
    hints: Optional[FieldHints] = None

    @property
    def label_texts(self) -> Tuple[str, ...]:
        """Label hints, empty when none were suggested."""
        return self.hints.label_texts if self.hints else ()
