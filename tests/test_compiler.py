"""Tests for the InteractiveStep compiler."""

import pytest

from kitchen_troubleshooting.data.step_catalog import build_steps
from kitchen_troubleshooting.domain.models import InteractiveStep, StepContent
from kitchen_troubleshooting.execution.compiler import compile_step, compile_steps
from kitchen_troubleshooting.state.models import AbstractStep


def _step(kind: str, step_id: str = "s1", **kwargs) -> AbstractStep:
    return AbstractStep(id=step_id, title="Some Step", kind=kind, **kwargs)


def _actions(step: InteractiveStep) -> list:
    return [(opt.action, opt.style) for opt in step.response_options]


class TestCompileStep:
    """Tests for per-kind compilation."""

    def test_safety_check_has_note_warnings_and_danger_escalation(self) -> None:
        compiled = compile_step(_step("safety_check", safety_level="danger"), 0, 4)
        assert compiled.title.startswith("🛡️")
        assert compiled.content.safety_note
        assert compiled.content.warnings
        assert [opt.value for opt in compiled.response_options] == ["safe", "unsafe"]
        assert _actions(compiled) == [("continue", "primary"), ("escalate", "danger")]
        assert compiled.safety_level == "danger"

    def test_visual_inspection_options(self) -> None:
        compiled = compile_step(_step("visual_inspection"), 1, 4)
        assert [opt.id for opt in compiled.response_options] == ["no_issues", "issues_found"]
        assert _actions(compiled) == [("continue", "primary"), ("escalate", "secondary")]

    def test_resolution_offers_complete_and_escalate(self) -> None:
        compiled = compile_step(_step("resolution"), 3, 4)
        assert [opt.id for opt in compiled.response_options] == ["resolved", "persists"]
        assert _actions(compiled) == [("complete", "primary"), ("escalate", "secondary")]

    @pytest.mark.parametrize("kind", ["operational_test", "diagnostic"])
    def test_default_options_are_continue_and_need_help(self, kind: str) -> None:
        compiled = compile_step(_step(kind), 2, 5)
        assert _actions(compiled) == [("continue", "primary"), ("escalate", "secondary")]

    def test_only_safety_check_carries_safety_note(self) -> None:
        for kind in ("visual_inspection", "operational_test", "diagnostic", "resolution"):
            assert compile_step(_step(kind), 1, 4).content.safety_note is None

    def test_instruction_names_equipment_and_issue(self) -> None:
        compiled = compile_step(
            _step("operational_test"), 2, 4,
            equipment_name="Combi Oven", issue_title="Not heating",
        )
        assert "Combi Oven" in compiled.content.instruction
        assert "Not heating" in compiled.content.instruction

    def test_defaults_when_names_missing(self) -> None:
        compiled = compile_step(_step("operational_test"), 0, 1)
        assert "equipment" in compiled.content.instruction
        assert "the issue" in compiled.content.instruction

    @pytest.mark.parametrize(
        ("index", "total", "expected"),
        [(0, 4, 0), (1, 4, 33), (2, 4, 67), (3, 4, 100), (0, 1, 0), (1, 9, 13), (3, 9, 38), (5, 9, 63)],
    )
    def test_progress_percentage(self, index: int, total: int, expected: int) -> None:
        assert compile_step(_step("diagnostic"), index, total).progress_percentage == expected

    def test_carries_id_number_and_estimate(self) -> None:
        compiled = compile_step(_step("diagnostic", step_id="temperature_check", time_estimate="3 minutes"), 2, 5)
        assert compiled.id == "temperature_check"
        assert compiled.step_number == 3
        assert compiled.estimated_time == "3 minutes"

    def test_missing_safety_level_defaults_to_safe(self) -> None:
        assert compile_step(_step("diagnostic"), 0, 2).safety_level == "safe"

    def test_unknown_kind_falls_back_to_diagnostic(self) -> None:
        odd = AbstractStep.model_construct(
            id="mystery", title="Mystery", kind="calibration",
            status="upcoming", safety_level=None, time_estimate=None,
        )
        compiled = compile_step(odd, 0, 1)
        assert compiled.kind == "diagnostic"
        assert compiled.title == "🩺 Mystery"
        assert _actions(compiled) == [("continue", "primary"), ("escalate", "secondary")]


class TestCompileSteps:
    def test_one_interactive_step_per_abstract_step(self) -> None:
        steps = build_steps("refrigeration", "Not cooling", "Walk-in Cooler")
        compiled = compile_steps(steps, equipment_name="Walk-in Cooler", issue_title="Not cooling")
        assert [c.id for c in compiled] == [s.id for s in steps]
        assert [c.step_number for c in compiled] == [1, 2, 3, 4, 5]


class TestStepContent:
    def test_coerce_plain_string(self) -> None:
        content = StepContent.coerce("Check the plug")
        assert content == StepContent(instruction="Check the plug")

    def test_coerce_legacy_dict(self) -> None:
        content = StepContent.coerce({"instruction": "Look", "details": ["a"], "safetyNote": "Careful"})
        assert content.details == ["a"]
        assert content.warnings == []
        assert content.safety_note == "Careful"

    def test_interactive_step_normalizes_string_content(self) -> None:
        step = InteractiveStep(
            id="x", step_number=1, title="X", description="X",
            kind="diagnostic", content="Plain text",
        )
        assert step.content.instruction == "Plain text"
