"""Application services package."""

from .automation_utils import AutomationUtils
from .browser_manager import BrowserContextOptions, BrowserManager, BrowserManagerOptions
from .field_mappers import NullFieldMapper, SemanticFieldMapper
from .form_filler import FormFiller
from .logging_service import LoggingService
from .login_handler import LoginHandler
from .script_registry import ScriptRegistry, default_registry
from .auto_apply_service import AutoApplyService

__all__ = [
    "AutoApplyService",
    "AutomationUtils",
    "BrowserContextOptions",
    "BrowserManager",
    "BrowserManagerOptions",
    "FormFiller",
    "LoggingService",
    "LoginHandler",
    "NullFieldMapper",
    "ScriptRegistry",
    "SemanticFieldMapper",
    "default_registry",
]
