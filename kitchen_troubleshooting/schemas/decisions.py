"""
Schemas - Escalation Decisions and Structured AI Replies

This module defines the Pydantic models produced by the Escalation Coordinator
and the strict JSON structure the AI backend must return when a flow is
escalated to it.
"""
from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel, Field

SafetyIssueType = Literal["gas_leak", "electrical", "fire_safety"]


class SafetyClassification(BaseModel):
    """
    Result of keyword-screening a message for safety-critical content.
    """
    requires_escalation: bool = False
    issue_type: Optional[SafetyIssueType] = None


class ResponseClassification(BaseModel):
    safety: Literal["safe", "caution", "danger"] = Field(
        "safe",
        description="Safety level of the situation described in the reply."
    )
    confidence: float = Field(
        0.8,
        ge=0.0,
        le=1.0,
        description="How confident you are that the guidance is correct (0.0 to 1.0)."
    )


class AssistantReply(BaseModel):
    """
    The strict JSON structure the AI backend must generate for an escalated flow.
    """
    content: str = Field(
        ...,
        description="The guidance to show the kitchen staff member. Be concise, practical and safe."
    )
    classification: ResponseClassification = Field(
        default_factory=ResponseClassification,
        description="Safety and confidence assessment of this reply."
    )


class EscalationRoute(str, Enum):
    """
    Where the coordinator sent a user response or message.

    CONTINUE: Default linear progression (step completed or advanced).
    COMPLETED: The user confirmed the issue is resolved; flow ended.
    SAFETY: Safety alert; the flow was ended as escalated.
    AI: Forwarded to the AI backend; the flow stays active.
    MANAGER_APPROVAL: Handed to a human approver; the flow was ended as escalated.
    IGNORED: Nothing to act on (no active flow, unknown option).
    """
    CONTINUE = "CONTINUE"
    COMPLETED = "COMPLETED"
    SAFETY = "SAFETY"
    AI = "AI"
    MANAGER_APPROVAL = "MANAGER_APPROVAL"
    IGNORED = "IGNORED"


class EscalationOutcome(BaseModel):
    route: EscalationRoute
    reply: Optional[str] = None
    classification: SafetyClassification = Field(default_factory=SafetyClassification)
    recommended_contact: Optional[str] = None
    ai_reply: Optional[AssistantReply] = None
