"""
Compiler - AbstractStep to InteractiveStep

Expands a plan-level AbstractStep into the renderable unit shown to staff:
an emoji-marked title, instructions naming the equipment and issue, a
checklist, warnings and the response buttons. Dispatch is an exhaustive
match on StepKind; anything unrecognised compiles as a generic diagnostic.
"""

import logging
from typing import List, Optional

from ..domain.models import InteractiveStep, ResponseOption, StepContent
from ..state.models import AbstractStep
from .progress import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_EQUIPMENT_NAME = "equipment"
DEFAULT_ISSUE_TITLE = "the issue"

SAFETY_NOTE = "Safety first - if anything seems unsafe, stop and contact a professional."

_KNOWN_KINDS = (
    "safety_check",
    "visual_inspection",
    "operational_test",
    "diagnostic",
    "resolution",
)


def compile_step(
    step: AbstractStep,
    index: int,
    total: int,
    *,
    equipment_name: Optional[str] = None,
    issue_title: Optional[str] = None,
) -> InteractiveStep:
    """
    Build the InteractiveStep for `step` at position `index` of a `total`-step plan.
    """
    equipment = equipment_name or DEFAULT_EQUIPMENT_NAME
    issue = issue_title or DEFAULT_ISSUE_TITLE

    match step.kind:
        case "safety_check":
            title, content, options = _safety_check(equipment)
        case "visual_inspection":
            title, content, options = _visual_inspection(equipment)
        case "operational_test":
            title, content, options = _operational_test(equipment, issue)
        case "resolution":
            title, content, options = _resolution(equipment, issue)
        case "diagnostic":
            title, content, options = _diagnostic(step, equipment, issue)
        case _:
            logger.warning(f"Unknown step kind '{step.kind}' for step {step.id}; compiling as diagnostic")
            title, content, options = _diagnostic(step, equipment, issue)

    return InteractiveStep(
        id=step.id,
        step_number=index + 1,
        title=title,
        description=content.instruction,
        kind=step.kind if step.kind in _KNOWN_KINDS else "diagnostic",
        content=content,
        response_options=options,
        progress_percentage=round_half_up(index / max(total - 1, 1) * 100),
        estimated_time=step.time_estimate,
        safety_level=step.safety_level or "safe",
    )


def compile_steps(
    steps: List[AbstractStep],
    *,
    equipment_name: Optional[str] = None,
    issue_title: Optional[str] = None,
) -> List[InteractiveStep]:
    """Compile a whole plan, 1:1 and in order."""
    total = len(steps)
    return [
        compile_step(step, index, total, equipment_name=equipment_name, issue_title=issue_title)
        for index, step in enumerate(steps)
    ]


# ==============================================================================
# Per-kind builders
# ==============================================================================


def _default_options(
    continue_id: str = "continue",
    continue_label: str = "✅ Continue",
    help_id: str = "need_help",
    help_label: str = "🤷 Need help",
) -> List[ResponseOption]:
    return [
        ResponseOption(
            id=continue_id,
            label=continue_label,
            value=continue_id,
            action="continue",
            style="primary",
        ),
        ResponseOption(
            id=help_id,
            label=help_label,
            value=help_id,
            action="escalate",
            style="secondary",
        ),
    ]


def _safety_check(equipment: str):
    content = StepContent(
        instruction=f"Before we begin troubleshooting your {equipment}, let's ensure it's safe to proceed.",
        details=[
            "Ensure the equipment is accessible and the area is clear",
            "Check that you have adequate lighting to see clearly",
            "Make sure no food is currently being processed",
            "Verify you have tools if needed (non-contact thermometer, flashlight)",
        ],
        warnings=[
            "Never attempt repairs on equipment that is still connected to power",
            "If you smell gas or see sparks, stop immediately and call for help",
            "Do not remove any panels or covers unless specifically instructed",
        ],
        safety_note=SAFETY_NOTE,
    )
    options = [
        ResponseOption(
            id="safe_to_proceed",
            label="✅ Area is safe to proceed",
            value="safe",
            action="continue",
            style="primary",
        ),
        ResponseOption(
            id="safety_concern",
            label="🚨 Safety concern detected",
            value="unsafe",
            action="escalate",
            style="danger",
        ),
    ]
    return "🛡️ Safety Check", content, options


def _visual_inspection(equipment: str):
    content = StepContent(
        instruction=f"Let's examine the external condition of your {equipment} for obvious issues.",
        details=[
            "Look for any visible damage to the exterior panels or casing",
            "Check all cables and connections for damage or looseness",
            "Inspect the power cord and plug for any damage",
            "Look for any unusual buildup of grease, ice, or debris",
        ],
        warnings=[
            "Do not touch any electrical connections while inspecting",
            "Be careful around sharp edges or hot surfaces",
        ],
    )
    options = [
        ResponseOption(
            id="no_issues",
            label="✅ Everything looks normal",
            value="no_issues",
            action="continue",
            style="primary",
        ),
        ResponseOption(
            id="issues_found",
            label="⚠️ Found some issues",
            value="issues_found",
            action="escalate",
            style="secondary",
        ),
    ]
    return "🔍 Visual Inspection", content, options


def _operational_test(equipment: str, issue: str):
    content = StepContent(
        instruction=f"Now let's test the basic operation of your {equipment} related to {issue}.",
        details=[
            "Turn the equipment on using normal operating procedures",
            "Listen for any unusual noises (grinding, clicking, buzzing)",
            "Observe the normal startup sequence",
            "Check that all indicators, lights, and displays are working",
        ],
    )
    options = _default_options(
        continue_id="working",
        continue_label="✅ Operating normally",
        help_id="not_working",
        help_label="❌ Still not working correctly",
    )
    return "🔧 Basic Operation Check", content, options


def _resolution(equipment: str, issue: str):
    content = StepContent(
        instruction=f"Let's confirm that {issue} on your {equipment} has been resolved.",
        details=[
            "Verify the issue has been resolved",
            "Test normal operation to confirm everything is working",
            "Clean up any tools or materials used",
        ],
    )
    options = [
        ResponseOption(
            id="resolved",
            label="✅ Issue resolved",
            value="resolved",
            action="complete",
            style="primary",
        ),
        ResponseOption(
            id="persists",
            label="🔄 Still not working",
            value="persists",
            action="escalate",
            style="secondary",
        ),
    ]
    return "✅ Resolution & Next Steps", content, options


_DIAGNOSTIC_DETAILS = {
    "temperature_check": [
        "Read the temperature shown on the display",
        "Measure the cabinet temperature with a probe or non-contact thermometer",
        "Check the door seals close fully all the way round",
        "Make sure the air vents are not blocked by stock",
    ],
    "heating_system_test": [
        "Confirm the unit is set to the expected temperature",
        "Check whether the heating indicator or burner lights up",
        "Note how long the unit takes to reach temperature",
        "Look for any error codes on the control panel",
    ],
    "water_system_check": [
        "Check the water supply valve is fully open",
        "Confirm the wash and rinse temperatures on the display",
        "Look for blocked spray arms or filters",
        "Check the drain is clear and not backing up",
    ],
}


def _diagnostic(step: AbstractStep, equipment: str, issue: str):
    content = StepContent(
        instruction=f"{step.title}: let's take some readings from your {equipment} to narrow down {issue}.",
        details=list(_DIAGNOSTIC_DETAILS.get(step.id, [])),
    )
    return f"🩺 {step.title}", content, _default_options()
