"""Contract between the orchestrator and per-institution automation scripts."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from playwright.async_api import BrowserContext, Page

from ..domain.models import AutoApplyPayload, AutoApplyResult
from .interfaces import IBrowserManager, ILoggingService

if TYPE_CHECKING:
    from .services.automation_utils import AutomationUtils
    from .services.form_filler import FormFiller
    from .services.login_handler import LoginHandler


@dataclass(frozen=True)
class SchoolAutomationContext:
    """Everything a script may use during one run. Owned exclusively by that run."""

    browser_manager: IBrowserManager
    context: BrowserContext
    page: Page
    form_filler: "FormFiller"
    login_handler: "LoginHandler"
    utils: "AutomationUtils"
    payload: AutoApplyPayload
    logger: ILoggingService

    @property
    def run_id(self) -> str:
        """Run ID assigned by the orchestrator."""
        return self.payload.run_id


ScriptRunner = Callable[[SchoolAutomationContext], Awaitable[AutoApplyResult]]


@dataclass(frozen=True)
class SchoolAutomationScript:
    """
    One institution's automation policy.

    Scripts are plain values of the same shape rather than subclasses: each
    supplies its own ``run`` coroutine and opts into shared helpers from
    ``school_autoapply.schools.common``.
    """

    id: str
    name: str
    run: ScriptRunner
    description: Optional[str] = None
    supports_login: bool = False

    def __post_init__(self):
        if not self.id or not self.id.strip():
            raise ValueError("Script ID cannot be empty")
