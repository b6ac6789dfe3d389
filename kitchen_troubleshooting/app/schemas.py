"""
API Layer - Request/Response Schemas

Pydantic models for API request and response validation.
"""

from typing import Annotated, List, Optional, Union

from pydantic import BaseModel, Field, model_validator

from ..domain.models import EquipmentContext, InteractiveStep, IssueContext
from ..execution.progress import FlowProgress
from ..schemas.actions import (
    CompleteFlow,
    NextStep,
    PreviousStep,
    ResetFlow,
    RestartFlow,
    SkipStep,
)
from ..state.models import (
    AbstractStep,
    EscalationRecord,
    FlowOutcome,
    FlowPhase,
    SafetyFlag,
    UserResponse,
)


class StartSessionRequest(BaseModel):
    equipment: EquipmentContext
    issue: IssueContext


class OptionResponse(BaseModel):
    option_id: str
    note: Optional[str] = None


class UserMessage(BaseModel):
    text: str = Field(..., min_length=1)


class ApprovalRequest(BaseModel):
    reason: str
    estimated_cost: Optional[float] = None


# Actions a client may send directly; the rest go through the coordinator.
NavigationAction = Annotated[
    Union[NextStep, SkipStep, PreviousStep, RestartFlow, CompleteFlow, ResetFlow],
    Field(discriminator="type"),
]


class ActionRequest(BaseModel):
    action: NavigationAction

    @model_validator(mode="after")
    def reject_answers(self) -> "ActionRequest":
        # Answers are screened by the escalation coordinator; use /responses.
        if isinstance(self.action, NextStep) and self.action.response is not None:
            raise ValueError("NEXT_STEP cannot carry a response here; post it to /responses")
        return self


class FlowRead(BaseModel):
    session_id: str
    phase: FlowPhase
    flow_outcome: Optional[FlowOutcome] = None
    current_step: Optional[AbstractStep] = None
    current_interactive_step: Optional[InteractiveStep] = None
    progress: FlowProgress
    steps: List[AbstractStep]
    user_responses: List[UserResponse]
    safety_flags: List[SafetyFlag]
    escalation_history: List[EscalationRecord]


class TurnResponse(BaseModel):
    route: str
    reply: Optional[str] = None
    recommended_contact: Optional[str] = None
    flow: FlowRead
