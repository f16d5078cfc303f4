"""Top-level orchestrator for auto-apply runs."""

import traceback
from typing import Callable, Dict, List, Optional

from ...config import config
from ...domain.models import AutoApplyPayload, AutoApplyResult, RunArtifacts
from ..interfaces import IBrowserManager, IFieldMapper, ILoggingService
from ..scripting import SchoolAutomationContext, SchoolAutomationScript
from .automation_utils import AutomationUtils
from .browser_manager import BrowserContextOptions, BrowserManager, BrowserManagerOptions
from .field_mappers import NullFieldMapper, SemanticFieldMapper
from .form_filler import FormFiller
from .logging_service import LoggingService
from .login_handler import LoginHandler
from .script_registry import ScriptRegistry, default_registry

BrowserManagerFactory = Callable[[AutoApplyPayload, ILoggingService], IBrowserManager]
FieldMapperFactory = Callable[[ILoggingService], IFieldMapper]

ERROR_ARTIFACT_LABEL = "auto-apply-error"


def default_browser_manager_factory(payload: AutoApplyPayload, logger: ILoggingService) -> IBrowserManager:
    """One Chromium process per run, honoring the payload's locale."""
    options = BrowserManagerOptions()
    if payload.locale:
        options.locale = payload.locale
    return BrowserManager(options, logging_service=logger)


def default_field_mapper_factory(logger: ILoggingService) -> IFieldMapper:
    """Semantic mapper when enabled in config, otherwise the null mapper."""
    if config.ENABLE_SEMANTIC_MAPPER:
        return SemanticFieldMapper(
            model_name=config.SEMANTIC_MODEL_NAME, min_score=config.SEMANTIC_MIN_SCORE, logging_service=logger
        )
    return NullFieldMapper()


class AutoApplyService:
    """
    Orchestrates one automation run per payload.

    RESPONSIBILITIES (Coordination Only):
    - Look up the institution's script
    - Build a fresh browser manager, form filler, login handler and utils per run
    - Convert escaping exceptions into a failure result with artifacts
    - Tear everything down on every path

    Runs share nothing but the script registry, so independent payloads can
    be awaited concurrently.
    """

    def __init__(
        self,
        registry: Optional[ScriptRegistry] = None,
        logging_service: ILoggingService = None,
        browser_manager_factory: Optional[BrowserManagerFactory] = None,
        field_mapper_factory: Optional[FieldMapperFactory] = None,
        default_screenshot_dir: Optional[str] = None,
    ):
        """
        Initialize the service with injected collaborators.

        Args:
            registry: Script registry (process-wide default if None)
            logging_service: Root logger; each run gets a scoped child
            browser_manager_factory: Builds the per-run browser manager
            field_mapper_factory: Builds the per-run field mapper
            default_screenshot_dir: Artifact directory when the payload has none
        """
        self.registry = registry if registry is not None else default_registry()
        self.logger = logging_service or LoggingService(config.LOG_LEVEL)
        self._browser_manager_factory = browser_manager_factory or default_browser_manager_factory
        self._field_mapper_factory = field_mapper_factory or default_field_mapper_factory
        self.default_screenshot_dir = default_screenshot_dir or config.AUTO_APPLY_SCREENSHOTS

    def register_script(self, script: SchoolAutomationScript) -> None:
        """Add or replace a script; the last registration for an ID wins."""
        self.registry.register(script)

    def available_scripts(self) -> List[Dict[str, Optional[str]]]:
        """Summaries of the registered scripts."""
        return [
            {"id": script.id, "name": script.name, "description": script.description}
            for script in self.registry.scripts()
        ]

    async def run(self, payload: AutoApplyPayload) -> AutoApplyResult:
        """
        Run the institution's script for ``payload``.

        Always returns exactly one result. An unknown institution fails fast
        without launching a browser.
        """
        payload = payload.with_run_id()
        run_id = payload.run_id

        script = self.registry.get(payload.school_id)
        if script is None:
            self.logger.warning(f"⚠️ No automation script registered for {payload.school_id}")
            return AutoApplyResult.failed(f"No automation script registered for {payload.school_id}")

        run_logger = self.logger.child(school_id=payload.school_id, run_id=run_id)
        browser_manager = self._browser_manager_factory(payload, run_logger)
        form_filler = FormFiller(field_mapper=self._field_mapper_factory(run_logger), logging_service=run_logger)
        login_handler = LoginHandler(logging_service=run_logger)
        utils = AutomationUtils(
            screenshot_dir=payload.screenshot_dir or self.default_screenshot_dir, logging_service=run_logger
        )

        context = None
        page = None
        try:
            with run_logger.time_operation(f"{script.id} run"):
                context = await browser_manager.new_context(BrowserContextOptions(disposable=True))
                page = await context.new_page()

                result = await script.run(
                    SchoolAutomationContext(
                        browser_manager=browser_manager,
                        context=context,
                        page=page,
                        form_filler=form_filler,
                        login_handler=login_handler,
                        utils=utils,
                        payload=payload,
                        logger=run_logger,
                    )
                )
                if not isinstance(result, AutoApplyResult):
                    raise TypeError(f"Script {script.id} returned {type(result).__name__}, expected AutoApplyResult")

            run_logger.info(f"{'✅' if result.success else '❌'} {script.name}: {result.message}")
            if not result.success:
                return utils.build_result_with_artifacts(result, RunArtifacts(log_lines=run_logger.lines))
            return result

        except Exception as e:
            run_logger.error(f"❌ Auto apply run failed: {e}")
            artifacts = RunArtifacts()
            if page is not None:
                artifacts = await utils.capture_failure_artifacts(page, run_id, ERROR_ARTIFACT_LABEL)

            failure = AutoApplyResult.failed(str(e) or "Auto apply failed", errors=[traceback.format_exc()])
            return utils.build_result_with_artifacts(
                failure, artifacts.merged_with(RunArtifacts(log_lines=run_logger.lines))
            )

        finally:
            await self._cleanup(browser_manager, context, page, run_logger)

    async def _cleanup(self, browser_manager: IBrowserManager, context, page, logger: ILoggingService) -> None:
        """Close page, context and browser; each step runs even if an earlier one failed."""
        if page is not None:
            try:
                await page.close()
            except Exception as e:
                logger.debug(f"Ignoring page close error: {e}")

        if context is not None:
            try:
                await context.close()
            except Exception as e:
                logger.debug(f"Ignoring context close error: {e}")

        try:
            await browser_manager.dispose()
        except Exception as e:
            logger.debug(f"Ignoring browser dispose error: {e}")
