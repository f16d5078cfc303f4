"""Exceptions raised by the automation engine."""

from typing import Optional


class AutoApplyError(Exception):
    """Base class for engine errors."""


class NavigationError(AutoApplyError):
    """A page failed to load or answered with a non-success status."""

    def __init__(self, url: str, status: Optional[int] = None):
        self.url = url
        self.status = status
        super().__init__(f"Failed to load {url} - status {status if status is not None else 'unknown'}")


class FieldNotLocatedError(AutoApplyError):
    """No locator strategy resolved a template field to a page element."""

    def __init__(self, field_id: str):
        self.field_id = field_id
        super().__init__(f"Unable to locate field {field_id}")
