"""Domain model for a requested automation run."""

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from .template import AutoApplyTemplate


@dataclass(frozen=True)
class UserLogin:
    """Credentials for institutions that require an account."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    extra: Dict[str, str] = field(default_factory=dict)

    @property
    def has_identifier(self) -> bool:
        """Check if either an email or a username was supplied."""
        return bool(self.email or self.username)

    @classmethod
    def from_dict(cls, data: dict) -> "UserLogin":
        """Create credentials from a dictionary."""
        return cls(
            username=data.get("username"),
            email=data.get("email"),
            password=data.get("password"),
            extra=dict(data.get("extra") or {}),
        )

    def __repr__(self) -> str:
        # Never leak the password into logs
        masked = "***" if self.password else None
        return f"UserLogin(username={self.username!r}, email={self.email!r}, password={masked})"


@dataclass(frozen=True)
class AutoApplyPayload:
    """
    One requested automation run.

    Constructed by the caller and never mutated; ``with_run_id`` returns a
    copy when the orchestrator has to assign an ID.
    """

    school_id: str
    template: AutoApplyTemplate
    user_login: Optional[UserLogin] = None
    run_id: Optional[str] = None
    locale: Optional[str] = None
    screenshot_dir: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate payload on creation."""
        if not self.school_id or not self.school_id.strip():
            raise ValueError("School ID cannot be empty")

    @property
    def fields(self):
        """Shortcut to the template's ordered fields."""
        return self.template.fields

    def with_run_id(self) -> "AutoApplyPayload":
        """Return this payload, or a copy with a fresh run ID if none is set."""
        if self.run_id:
            return self
        return replace(self, run_id=str(uuid.uuid4()))

    @classmethod
    def from_dict(cls, data: dict) -> "AutoApplyPayload":
        """Create a payload from the caller's camelCase JSON shape."""
        login = data.get("userLogin", data.get("user_login"))
        return cls(
            school_id=data.get("schoolId", data.get("school_id", "")),
            template=AutoApplyTemplate.from_dict(data.get("template") or {}),
            user_login=UserLogin.from_dict(login) if login else None,
            run_id=data.get("runId", data.get("run_id")),
            locale=data.get("locale"),
            screenshot_dir=data.get("screenshotDir", data.get("screenshot_dir")),
            metadata=dict(data.get("metadata") or {}),
        )
