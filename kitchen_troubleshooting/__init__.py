"""
Kitchen Equipment Troubleshooting

Guided troubleshooting for commercial kitchen equipment: a deterministic
conversation-flow state machine over scripted diagnostic steps, with safety,
AI and human escalation paths.
"""

from kitchen_troubleshooting.domain import (
    EquipmentContext,
    InteractiveStep,
    IssueContext,
    ResponseOption,
    StepContent,
)
from kitchen_troubleshooting.state import (
    AbstractStep,
    EscalationRecord,
    FlowState,
    SafetyFlag,
    UserResponse,
)
from kitchen_troubleshooting.schemas import (
    AssistantReply,
    EscalationOutcome,
    EscalationRoute,
    FlowAction,
    SafetyClassification,
)
from kitchen_troubleshooting.data import build_steps
from kitchen_troubleshooting.execution import (
    FlowProgress,
    FlowStore,
    compile_step,
    compile_steps,
    get_progress,
    reduce_flow,
)

__all__ = [
    # Domain Layer
    "EquipmentContext",
    "InteractiveStep",
    "IssueContext",
    "ResponseOption",
    "StepContent",
    # State Layer
    "AbstractStep",
    "EscalationRecord",
    "FlowState",
    "SafetyFlag",
    "UserResponse",
    # Schemas
    "AssistantReply",
    "EscalationOutcome",
    "EscalationRoute",
    "FlowAction",
    "SafetyClassification",
    # Step Catalog
    "build_steps",
    # Execution Layer
    "FlowProgress",
    "FlowStore",
    "compile_step",
    "compile_steps",
    "get_progress",
    "reduce_flow",
]
