"""
Schemas - Actions, Decisions and Structured AI Replies

Defines the tagged action union consumed by the flow reducer and the Pydantic
models produced by the Escalation Coordinator and the AI backend.
"""

from kitchen_troubleshooting.schemas.actions import FlowAction
from kitchen_troubleshooting.schemas.decisions import (
    AssistantReply,
    EscalationOutcome,
    EscalationRoute,
    SafetyClassification,
)

__all__ = [
    "AssistantReply",
    "EscalationOutcome",
    "EscalationRoute",
    "FlowAction",
    "SafetyClassification",
]
