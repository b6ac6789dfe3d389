"""
Schemas - Flow Actions

The closed set of actions the flow reducer understands. Each action is a
Pydantic model tagged by `type`, so the same union validates JSON sent by a
client and is pattern-matched by the reducer.

Timestamps are captured when the action is built, which keeps the reducer a
pure function of (state, action).
"""

from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..domain.models import EquipmentContext, InteractiveStep, IssueContext
from ..state.models import (
    AbstractStep,
    SafetyFlagType,
    SafetySeverity,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InitializeFlow(BaseModel):
    type: Literal["INITIALIZE_FLOW"] = "INITIALIZE_FLOW"
    equipment: EquipmentContext
    issue: IssueContext
    steps: List[AbstractStep]


class AddInteractiveStep(BaseModel):
    type: Literal["ADD_INTERACTIVE_STEP"] = "ADD_INTERACTIVE_STEP"
    step: InteractiveStep


class NextStep(BaseModel):
    """Advance to an explicit step. ADVANCE_TO_STEP is accepted as an alias."""
    type: Literal["NEXT_STEP", "ADVANCE_TO_STEP"] = "NEXT_STEP"
    step_id: str
    response: Optional[str] = None
    timestamp: datetime = Field(default_factory=_now)


class CompleteStep(BaseModel):
    type: Literal["COMPLETE_STEP"] = "COMPLETE_STEP"
    step_id: str
    response: str
    timestamp: datetime = Field(default_factory=_now)


class SkipStep(BaseModel):
    type: Literal["SKIP_STEP"] = "SKIP_STEP"
    step_id: str
    reason: str = ""


class PreviousStep(BaseModel):
    type: Literal["PREVIOUS_STEP"] = "PREVIOUS_STEP"


class RestartFlow(BaseModel):
    type: Literal["RESTART_FLOW"] = "RESTART_FLOW"


class CompleteFlow(BaseModel):
    type: Literal["COMPLETE_FLOW"] = "COMPLETE_FLOW"
    outcome: Literal["completed", "escalated", "abandoned"]


class ResetFlow(BaseModel):
    type: Literal["RESET_FLOW"] = "RESET_FLOW"


class AddUserResponse(BaseModel):
    """Log an answer without moving the step pointer."""
    type: Literal["ADD_USER_RESPONSE"] = "ADD_USER_RESPONSE"
    step_id: str
    response: str
    timestamp: datetime = Field(default_factory=_now)


class TriggerSafetyEscalation(BaseModel):
    type: Literal["TRIGGER_SAFETY_ESCALATION"] = "TRIGGER_SAFETY_ESCALATION"
    flag_type: SafetyFlagType = "mechanical"
    severity: SafetySeverity = "warning"
    message: str = "Safety escalation triggered"
    timestamp: datetime = Field(default_factory=_now)


class RequestManagerApproval(BaseModel):
    type: Literal["REQUEST_MANAGER_APPROVAL"] = "REQUEST_MANAGER_APPROVAL"
    reason: str
    estimated_cost: Optional[float] = None
    timestamp: datetime = Field(default_factory=_now)


class RecordEscalation(BaseModel):
    type: Literal["RECORD_ESCALATION"] = "RECORD_ESCALATION"
    step_id: str
    reason: str
    approval_required: bool = False
    timestamp: datetime = Field(default_factory=_now)


FlowAction = Annotated[
    Union[
        InitializeFlow,
        AddInteractiveStep,
        NextStep,
        CompleteStep,
        SkipStep,
        PreviousStep,
        RestartFlow,
        CompleteFlow,
        ResetFlow,
        AddUserResponse,
        TriggerSafetyEscalation,
        RequestManagerApproval,
        RecordEscalation,
    ],
    Field(discriminator="type"),
]

