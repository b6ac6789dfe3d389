"""
Domain Layer - Static Data Models

This module defines the static structure of a troubleshooting session: the
equipment and issue the staff member selected, and the compiled, renderable
InteractiveSteps (instructions plus response buttons) shown for each stage of
the plan. These objects never change once built.
"""

from dataclasses import dataclass, field
from typing import Literal, Optional, List, Union

"""
StepKind classifies what a troubleshooting stage asks the user to do:
- safety_check: Confirm the area and equipment are safe to work on
- visual_inspection: Look for obvious damage, leaks or buildup
- operational_test: Run the equipment and observe it
- diagnostic: Category-specific measurement (temperature, heating, water)
- resolution: Confirm the issue is fixed or escalate
"""
StepKind = Literal[
    "safety_check",
    "visual_inspection",
    "operational_test",
    "diagnostic",
    "resolution",
]

SafetyLevel = Literal["safe", "caution", "danger"]

ResponseAction = Literal["continue", "escalate", "complete"]

ResponseStyle = Literal["primary", "secondary", "danger"]


@dataclass(frozen=True)
class EquipmentContext:
    """
    The piece of kitchen equipment the session is about (resolved from a QR code).

    Attributes:
        id: Site equipment ID.
        display_name: Name shown to staff (e.g., "Walk-in Cooler").
        category: Equipment family used to pick diagnostic steps
            (refrigeration, cooking, warewashing, ice_production, food_prep).
        manufacturer / model / location_name: Descriptive context forwarded
            to the AI backend.
        is_critical_equipment: Whether downtime stops service.
    """
    id: str
    display_name: str
    category: str
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    location_name: Optional[str] = None
    is_critical_equipment: bool = False


@dataclass(frozen=True)
class IssueContext:
    """
    The problem the staff member picked for the equipment.

    Attributes:
        id: Issue catalog ID.
        title: Short name (e.g., "Not cooling").
        description: Longer explanation.
        severity: low | medium | high | critical.
        safety_risk: Whether the issue is known to carry a safety risk.
        requires_professional_service: Whether the fix normally needs a technician.
    """
    id: str
    title: str
    description: str = ""
    category: Optional[str] = None
    severity: Literal["low", "medium", "high", "critical"] = "medium"
    safety_risk: bool = False
    requires_professional_service: bool = False


@dataclass(frozen=True)
class ResponseOption:
    """
    One response button offered for an InteractiveStep.

    The `action` tag (not the label text) decides what the coordinator does
    with the answer.

    Attributes:
        id: Option key sent back by the client.
        label: Button text.
        value: Semantic payload echoed back and logged as the user response.
        action: continue | escalate | complete.
        style: primary | secondary | danger (danger marks an unsafe signal).
        next_step_id: Explicit target; overrides linear advancement when set.
    """
    id: str
    label: str
    value: str
    action: ResponseAction
    style: ResponseStyle = "primary"
    next_step_id: Optional[str] = None


@dataclass(frozen=True)
class StepContent:
    """
    Structured instruction block for an InteractiveStep.
    """
    instruction: str
    details: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    safety_note: Optional[str] = None

    @classmethod
    def coerce(cls, content: Union[str, dict, "StepContent"]) -> "StepContent":
        """
        Normalize legacy content shapes (plain string or loose dict) into StepContent.
        """
        if isinstance(content, StepContent):
            return content
        if isinstance(content, str):
            return cls(instruction=content)
        return cls(
            instruction=content.get("instruction", ""),
            details=list(content.get("details") or []),
            warnings=list(content.get("warnings") or []),
            safety_note=content.get("safety_note", content.get("safetyNote")),
        )


@dataclass(frozen=True)
class InteractiveStep:
    """
    Renderable compilation of an AbstractStep.

    Built together with its AbstractStep when a flow starts and never modified
    afterwards; only the AbstractStep's status moves.

    Attributes:
        id: Shared with the AbstractStep.
        step_number: 1-based position in the plan.
        progress_percentage: index / max(total - 1, 1) * 100, halves rounded up.
    """
    id: str
    step_number: int
    title: str
    description: str
    kind: StepKind
    content: StepContent
    response_options: List[ResponseOption] = field(default_factory=list)
    progress_percentage: int = 0
    estimated_time: Optional[str] = None
    safety_level: SafetyLevel = "safe"

    def __post_init__(self):
        if not isinstance(self.content, StepContent):
            object.__setattr__(self, "content", StepContent.coerce(self.content))

    def find_option(self, option_id: str) -> Optional[ResponseOption]:
        return next(
            (opt for opt in self.response_options if opt.id == option_id),
            None,
        )
