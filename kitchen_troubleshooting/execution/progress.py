"""
Progress - Read-only Selectors over FlowState

Progress and time-remaining figures shown alongside the conversation. These
never change state; they are recomputed from the step statuses on demand.
"""

import math
import re
from typing import Dict, Optional

from pydantic import BaseModel

from ..state.models import AbstractStep, FlowState

# Minutes assumed for a step whose time_estimate has no number in it.
DEFAULT_MINUTES: Dict[str, int] = {
    "safety_check": 1,
    "visual_inspection": 2,
    "operational_test": 4,
    "diagnostic": 3,
    "resolution": 2,
}

_LEADING_INT = re.compile(r"(\d+)")


def round_half_up(value: float) -> int:
    """Round halves upwards: 12.5 -> 13, 0.5 -> 1."""
    return math.floor(value + 0.5)


class FlowProgress(BaseModel):
    completed: int
    skipped: int
    total: int
    percentage: int
    current_step_number: Optional[int] = None
    estimated_minutes_remaining: int = 0


def step_minutes(step: AbstractStep) -> int:
    """The first integer in `time_estimate` ("1-2 minutes" -> 1), else the per-kind default."""
    if step.time_estimate:
        match = _LEADING_INT.search(step.time_estimate)
        if match:
            return int(match.group(1))
    return DEFAULT_MINUTES.get(step.kind, 2)


def estimate_minutes_remaining(state: FlowState) -> int:
    """Sum of minutes for unfinished steps from the current index onward."""
    if not state.is_flow_active:
        return 0
    return sum(
        step_minutes(step)
        for step in state.steps[state.current_step_index:]
        if not step.is_finished
    )


def get_progress(state: FlowState) -> FlowProgress:
    """
    Progress counts only `completed` steps in the numerator; skipped steps stay
    in the denominator. Once no step is current or upcoming the flow is fully
    worked through and the percentage is 100.
    """
    total = len(state.steps)
    completed = sum(1 for step in state.steps if step.status == "completed")
    skipped = sum(1 for step in state.steps if step.status == "skipped")

    if total == 0:
        percentage = 0
    elif completed + skipped == total:
        percentage = 100
    else:
        percentage = min(99, round_half_up(completed / total * 100))

    current = state.current_step
    return FlowProgress(
        completed=completed,
        skipped=skipped,
        total=total,
        percentage=percentage,
        current_step_number=(
            state.current_step_index + 1
            if state.is_flow_active and current is not None
            else None
        ),
        estimated_minutes_remaining=estimate_minutes_remaining(state),
    )
