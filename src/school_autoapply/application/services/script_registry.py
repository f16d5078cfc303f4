"""Registry mapping institution IDs to automation scripts."""

from typing import Dict, Iterable, List, Optional

from ...config import config
from ..interfaces import ILoggingService
from ..scripting import SchoolAutomationScript
from .logging_service import LoggingService


class ScriptRegistry:
    """
    Mapping from institution ID to script.

    Populated by explicit ``register`` calls; a later registration under the
    same ID replaces the earlier one. Runs only read from the registry.
    """

    def __init__(self, scripts: Iterable[SchoolAutomationScript] = (), logging_service: ILoggingService = None):
        self.logger = logging_service or LoggingService(config.LOG_LEVEL)
        self._scripts: Dict[str, SchoolAutomationScript] = {}
        for script in scripts:
            self.register(script)

    def register(self, script: SchoolAutomationScript) -> None:
        """Add or replace the script registered under ``script.id``."""
        previous = self._scripts.get(script.id)
        if previous is not None and previous is not script:
            self.logger.warning(f"⚠️ Script '{script.id}' ({previous.name}) replaced by {script.name}")
        self._scripts[script.id] = script

    def get(self, school_id: str) -> Optional[SchoolAutomationScript]:
        """Script registered under ``school_id``, or None."""
        return self._scripts.get(school_id)

    def __contains__(self, school_id: str) -> bool:
        return school_id in self._scripts

    def __len__(self) -> int:
        return len(self._scripts)

    def ids(self) -> List[str]:
        """Registered IDs in registration order."""
        return list(self._scripts)

    def scripts(self) -> List[SchoolAutomationScript]:
        """Registered scripts in registration order."""
        return list(self._scripts.values())


_default_registry: Optional[ScriptRegistry] = None


def default_registry() -> ScriptRegistry:
    """Process-wide registry, created on first use with the bundled school scripts."""
    global _default_registry
    if _default_registry is None:
        from ...schools import BUNDLED_SCRIPTS

        _default_registry = ScriptRegistry(BUNDLED_SCRIPTS)
    return _default_registry
