"""
Domain Layer - Static Data Models

Defines the static objects of a troubleshooting session: equipment and issue
context, and the compiled InteractiveSteps with their response options.
"""

from kitchen_troubleshooting.domain.models import (
    EquipmentContext,
    InteractiveStep,
    IssueContext,
    ResponseOption,
    SafetyLevel,
    StepContent,
    StepKind,
)

__all__ = [
    "EquipmentContext",
    "InteractiveStep",
    "IssueContext",
    "ResponseOption",
    "SafetyLevel",
    "StepContent",
    "StepKind",
]
