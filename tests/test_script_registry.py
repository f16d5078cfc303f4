import pytest

from school_autoapply.application.scripting import SchoolAutomationScript
from school_autoapply.application.services.script_registry import ScriptRegistry, default_registry
from school_autoapply.domain.models import AutoApplyResult

from tests.fakes import RecordingLogger


async def _noop(ctx) -> AutoApplyResult:
    return AutoApplyResult.succeeded("ok")


def _script(script_id: str, name: str = "School") -> SchoolAutomationScript:
    return SchoolAutomationScript(id=script_id, name=name, run=_noop)


def test_register_and_lookup() -> None:
    registry = ScriptRegistry([_script("b"), _script("a")], logging_service=RecordingLogger())

    assert "a" in registry
    assert "missing" not in registry
    assert registry.get("missing") is None
    assert len(registry) == 2
    assert registry.ids() == ["b", "a"]


def test_last_registration_wins_with_warning() -> None:
    logger = RecordingLogger()
    registry = ScriptRegistry(logging_service=logger)
    first, second = _script("dsc", "First"), _script("dsc", "Second")

    registry.register(first)
    registry.register(second)

    assert registry.get("dsc") is second
    assert len(registry) == 1
    assert any("replaced" in message for message in logger.messages("WARNING"))


def test_reregistering_same_script_is_silent() -> None:
    logger = RecordingLogger()
    script = _script("dsc")
    registry = ScriptRegistry([script, script], logging_service=logger)

    assert len(registry) == 1
    assert logger.messages("WARNING") == []


def test_script_requires_id() -> None:
    with pytest.raises(ValueError):
        _script(" ")


def test_default_registry_bundles_school_scripts() -> None:
    registry = default_registry()

    assert registry is default_registry()
    assert registry.ids() == ["example-school", "dsc-hkis-2025", "dsc-international-school"]
