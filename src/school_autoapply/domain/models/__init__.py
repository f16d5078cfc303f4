"""Domain models for school auto-apply runs."""

from .field_mapping import FieldHints, FieldMappingSuggestion
from .login import LoginOutcome
from .payload import AutoApplyPayload, UserLogin
from .result import AutoApplyResult, RunArtifacts
from .template import AutoApplyTemplate, FieldHtmlType, FieldValue, TemplateField

__all__ = [
    "AutoApplyPayload",
    "AutoApplyResult",
    "AutoApplyTemplate",
    "FieldHints",
    "FieldHtmlType",
    "FieldMappingSuggestion",
    "FieldValue",
    "LoginOutcome",
    "RunArtifacts",
    "TemplateField",
    "UserLogin",
]
