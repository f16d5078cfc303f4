"""Interface for pluggable field mappers."""

from abc import ABC, abstractmethod
from typing import Optional

from ...domain.models import FieldMappingSuggestion, TemplateField


class IFieldMapper(ABC):
    """Suggests where a field lives when the built-in heuristics fail."""

    @abstractmethod
    async def suggest(self, field: TemplateField, page_text: str) -> Optional[FieldMappingSuggestion]:
        """
        Suggest a selector or label hints for ``field``.

        Args:
            field: Field the heuristics could not resolve
            page_text: Snapshot of the page's visible text

        Returns:
            Suggestion to verify against the page, or None
        """
