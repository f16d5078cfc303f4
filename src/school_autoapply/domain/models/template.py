"""Domain model for institution-agnostic form templates."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

FieldValue = Union[str, List[str], Tuple[str, ...], bool]


class FieldHtmlType(Enum):
    """Type hint for the control a template field is expected to land in."""

    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"


@dataclass(frozen=True)
class TemplateField:
    """
    One value to be written into a target form.

    The field knows nothing about page markup; locating the control is the
    form filler's job. Immutable so a run can never rewrite the caller's data.
    """

    field_id: str
    value: FieldValue
    label: Optional[str] = None
    html_type: Optional[FieldHtmlType] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate field data on creation."""
        if not self.field_id or not self.field_id.strip():
            raise ValueError("Template field ID cannot be empty")

        # Lists become tuples so the value cannot be mutated mid-run
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(str(v) for v in self.value))

    @property
    def is_multi_value(self) -> bool:
        """Check if the value is a list of options."""
        return isinstance(self.value, tuple)

    @property
    def text_value(self) -> str:
        """Value rendered as text for inputs and textareas."""
        if isinstance(self.value, tuple):
            return ", ".join(self.value)
        if isinstance(self.value, bool):
            return "true" if self.value else "false"
        return "" if self.value is None else str(self.value)

    def with_overrides(self, **overrides: Any) -> "TemplateField":
        """Create a copy with label, html_type or metadata replaced."""
        data = {
            "field_id": self.field_id,
            "value": self.value,
            "label": self.label,
            "html_type": self.html_type,
            "metadata": self.metadata,
        }
        data.update(overrides)
        return TemplateField(**data)

    @classmethod
    def from_dict(cls, data: dict) -> "TemplateField":
        """Create a TemplateField from a camelCase or snake_case dictionary."""
        html_type = data.get("htmlType", data.get("html_type"))
        return cls(
            field_id=data.get("fieldId", data.get("field_id", "")),
            value=data.get("value", ""),
            label=data.get("label"),
            html_type=FieldHtmlType(html_type) if html_type else None,
            metadata=dict(data.get("metadata") or {}),
        )

    def to_dict(self) -> dict:
        """Convert to the caller's camelCase dictionary shape."""
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {
            "fieldId": self.field_id,
            "label": self.label,
            "value": value,
            "htmlType": self.html_type.value if self.html_type else None,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class AutoApplyTemplate:
    """Ordered collection of template fields for one application."""

    template_id: str
    fields: Tuple[TemplateField, ...] = ()
    name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Freeze field order on creation."""
        object.__setattr__(self, "fields", tuple(self.fields))

    def get_field(self, field_id: str) -> Optional[TemplateField]:
        """Find a field by its ID."""
        for template_field in self.fields:
            if template_field.field_id == field_id:
                return template_field
        return None

    @classmethod
    def from_dict(cls, data: dict) -> "AutoApplyTemplate":
        """Create a template from a dictionary."""
        return cls(
            template_id=str(data.get("id", data.get("template_id", "template"))),
            fields=tuple(TemplateField.from_dict(item) for item in data.get("fields", [])),
            name=data.get("name"),
            metadata=dict(data.get("metadata") or {}),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.template_id,
            "name": self.name,
            "fields": [template_field.to_dict() for template_field in self.fields],
            "metadata": dict(self.metadata),
        }
