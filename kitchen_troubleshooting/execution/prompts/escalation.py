"""
Prompt building for escalations.

Assembles the messages sent to the AI backend when a flow is escalated, and
the canned safety message shown when a safety keyword short-circuits the flow.
"""

from typing import List, Optional

from ...state.models import FlowState
from .loader import render
from .templates import Template


def build_escalation_messages(state: FlowState, latest: str) -> List[dict]:
    """
    Compose the single escalation prompt from the flow context: equipment,
    issue, every recorded user response and the latest response or message.
    """
    user_prompt = render(
        Template.ESCALATION_REQUEST,
        equipment=state.equipment_context,
        issue=state.issue_context,
        current_step=state.current_step,
        responses=state.user_responses,
        latest=latest,
    )
    return [
        {"role": "system", "content": render(Template.ESCALATION_SYSTEM)},
        {"role": "user", "content": user_prompt},
    ]


def build_safety_alert(issue_type: Optional[str], equipment_name: Optional[str] = None) -> str:
    """Per-category safety message; a generic stop-work message when issue_type is None."""
    return render(
        Template.SAFETY_ALERT,
        issue_type=issue_type,
        equipment_name=equipment_name,
    )
