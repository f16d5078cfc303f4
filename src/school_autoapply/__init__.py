"""School auto-apply: browser automation for school application forms."""

from .application.scripting import SchoolAutomationContext, SchoolAutomationScript
from .application.services import AutoApplyService, ScriptRegistry, default_registry
from .domain.models import (
    AutoApplyPayload,
    AutoApplyResult,
    AutoApplyTemplate,
    RunArtifacts,
    TemplateField,
    UserLogin,
)

__version__ = "0.1.0"

__all__ = [
    "AutoApplyPayload",
    "AutoApplyResult",
    "AutoApplyService",
    "AutoApplyTemplate",
    "RunArtifacts",
    "SchoolAutomationContext",
    "SchoolAutomationScript",
    "ScriptRegistry",
    "TemplateField",
    "UserLogin",
    "default_registry",
]
