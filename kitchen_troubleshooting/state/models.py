"""
State Layer - Runtime Data Models

This module defines the runtime state of one troubleshooting session: the
plan-level AbstractSteps and their statuses, the append-only logs (user
responses, safety flags, escalations) and the aggregate FlowState owned by
the reducer.
"""

from datetime import datetime
from typing import List, Optional, Literal

from pydantic import BaseModel, Field

from ..domain.models import (
    EquipmentContext,
    InteractiveStep,
    IssueContext,
    SafetyLevel,
    StepKind,
)

StepStatus = Literal["upcoming", "current", "completed", "skipped"]

FlowOutcome = Literal["in_progress", "completed", "escalated", "abandoned"]

FlowPhase = Literal["idle", "active", "completed", "escalated", "abandoned"]

SafetyFlagType = Literal["gas", "electrical", "fire", "mechanical"]

SafetySeverity = Literal["warning", "danger", "critical"]

FINISHED_STATUSES = ("completed", "skipped")


class AbstractStep(BaseModel):
    """
    One stage of a troubleshooting plan, independent of rendering.
    """
    id: str
    title: str
    kind: StepKind
    status: StepStatus = "upcoming"
    safety_level: Optional[SafetyLevel] = None
    time_estimate: Optional[str] = None

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATUSES


class UserResponse(BaseModel):
    step_id: str
    response: str
    timestamp: datetime


class SafetyFlag(BaseModel):
    type: SafetyFlagType
    severity: SafetySeverity
    message: str
    triggered_at: datetime


class EscalationRecord(BaseModel):
    step_id: str
    reason: str
    timestamp: datetime
    approval_required: bool = False


class FlowState(BaseModel):
    """
    The aggregate state of a single troubleshooting flow.

    Only the reducer produces new FlowStates; nothing mutates one in place.
    The default instance is the Idle state.
    """
    is_flow_active: bool = False
    current_step_index: int = 0
    steps: List[AbstractStep] = Field(default_factory=list)
    interactive_steps: List[InteractiveStep] = Field(default_factory=list)
    user_responses: List[UserResponse] = Field(default_factory=list)
    equipment_context: Optional[EquipmentContext] = None
    issue_context: Optional[IssueContext] = None
    safety_flags: List[SafetyFlag] = Field(default_factory=list)
    escalation_history: List[EscalationRecord] = Field(default_factory=list)
    flow_outcome: Optional[FlowOutcome] = None

    @property
    def phase(self) -> FlowPhase:
        if self.is_flow_active:
            return "active"
        if self.flow_outcome in ("completed", "escalated", "abandoned"):
            return self.flow_outcome
        return "idle"

    @property
    def current_step(self) -> Optional[AbstractStep]:
        if not self.steps or not 0 <= self.current_step_index < len(self.steps):
            return None
        return self.steps[self.current_step_index]

    @property
    def has_critical_flag(self) -> bool:
        return any(flag.severity == "critical" for flag in self.safety_flags)
