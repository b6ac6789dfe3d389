"""
Step Catalog - Troubleshooting Plans per Equipment Category

Builds the ordered plan of AbstractSteps for an equipment/issue pair. Every
plan opens with a safety check and closes with a resolution step; the
category lookup below contributes at most one diagnostic stage.
"""

from typing import Dict, List, Optional

from ..state.models import AbstractStep

# ==============================================================================
# CATEGORY DIAGNOSTICS
# ==============================================================================

CATEGORY_DIAGNOSTICS: Dict[str, AbstractStep] = {
    "refrigeration": AbstractStep(
        id="temperature_check",
        title="Temperature Check",
        kind="diagnostic",
        safety_level="caution",
        time_estimate="2-3 minutes",
    ),
    "cooking": AbstractStep(
        id="heating_system_test",
        title="Heating System Test",
        kind="diagnostic",
        safety_level="caution",
        time_estimate="3-4 minutes",
    ),
    "warewashing": AbstractStep(
        id="water_system_check",
        title="Water System Check",
        kind="diagnostic",
        safety_level="safe",
        time_estimate="2-3 minutes",
    ),
}


def build_steps(
    equipment_category: str,
    issue_title: str,
    equipment_name: Optional[str] = None,
) -> List[AbstractStep]:
    """
    Produce the ordered troubleshooting plan for an equipment category and issue.

    Pure: returns fresh AbstractSteps (all `upcoming`) on every call.

    Args:
        equipment_category: Equipment family, matched case-insensitively.
        issue_title: The selected issue; named in the operational test title.
        equipment_name: Display name, used in the visual inspection title.

    Returns:
        safety_check, visual_inspection, operational_test, [diagnostic], resolution.
    """
    subject = equipment_name or "Equipment"

    steps = [
        AbstractStep(
            id="safety_check",
            title="Safety Verification",
            kind="safety_check",
            safety_level="danger",
            time_estimate="1 minute",
        ),
        AbstractStep(
            id="visual_inspection",
            title=f"Visual Inspection of {subject}",
            kind="visual_inspection",
            safety_level="safe",
            time_estimate="2-3 minutes",
        ),
        AbstractStep(
            id="operational_test",
            title=f"Operational Test: {issue_title}" if issue_title else "Operational Test",
            kind="operational_test",
            safety_level="caution",
            time_estimate="3-5 minutes",
        ),
    ]

    diagnostic = CATEGORY_DIAGNOSTICS.get((equipment_category or "").strip().lower())
    if diagnostic:
        steps.append(diagnostic.model_copy())

    steps.append(
        AbstractStep(
            id="resolution",
            title="Resolution & Next Steps",
            kind="resolution",
            safety_level="safe",
            time_estimate="1-2 minutes",
        )
    )
    return steps
