"""
State Layer - Runtime Data Models

Defines the runtime state that tracks a staff member's progress through a
troubleshooting flow: step statuses, responses, safety flags and escalations.
"""

from kitchen_troubleshooting.state.models import (
    AbstractStep,
    EscalationRecord,
    FlowState,
    SafetyFlag,
    UserResponse,
)

__all__ = [
    "AbstractStep",
    "EscalationRecord",
    "FlowState",
    "SafetyFlag",
    "UserResponse",
]
