"""Domain model for the outcome of a run."""

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple


@dataclass(frozen=True)
class RunArtifacts:
    """Diagnostic files and log lines captured during a run."""

    screenshot_path: Optional[str] = None
    raw_html_path: Optional[str] = None
    log_lines: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "log_lines", tuple(self.log_lines))

    @property
    def is_empty(self) -> bool:
        """Check if nothing was captured."""
        return not (self.screenshot_path or self.raw_html_path or self.log_lines)

    def merged_with(self, other: Optional["RunArtifacts"]) -> "RunArtifacts":
        """Create a new artifact set where values from ``other`` win when present."""
        if other is None:
            return self
        return RunArtifacts(
            screenshot_path=other.screenshot_path or self.screenshot_path,
            raw_html_path=other.raw_html_path or self.raw_html_path,
            log_lines=other.log_lines or self.log_lines,
        )

    def to_dict(self) -> dict:
        """Convert to the caller's camelCase dictionary shape."""
        return {
            "screenshotPath": self.screenshot_path,
            "rawHtmlPath": self.raw_html_path,
            "logLines": list(self.log_lines),
        }


@dataclass(frozen=True)
class AutoApplyResult:
    """
    Result of one automation run.

    Created once per run and never mutated after it is returned.
    """

    success: bool
    message: Optional[str] = None
    errors: Tuple[str, ...] = ()
    artifacts: Optional[RunArtifacts] = None

    def __post_init__(self):
        object.__setattr__(self, "errors", tuple(self.errors))

    def with_artifacts(self, artifacts: Optional[RunArtifacts]) -> "AutoApplyResult":
        """Create a copy with ``artifacts`` merged over the existing ones."""
        base = self.artifacts or RunArtifacts()
        return replace(self, artifacts=base.merged_with(artifacts))

    @classmethod
    def succeeded(cls, message: str) -> "AutoApplyResult":
        """Create a successful result."""
        return cls(success=True, message=message)

    @classmethod
    def failed(
        cls, message: str, errors: Iterable[str] = (), artifacts: Optional[RunArtifacts] = None
    ) -> "AutoApplyResult":
        """Create a failed result."""
        return cls(success=False, message=message, errors=tuple(errors), artifacts=artifacts)

    def to_dict(self) -> dict:
        """Convert to the caller's camelCase dictionary shape."""
        data = {"success": self.success, "message": self.message}
        if self.errors:
            data["errors"] = list(self.errors)
        if self.artifacts is not None:
            data["artifacts"] = self.artifacts.to_dict()
        return data
