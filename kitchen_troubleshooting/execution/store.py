"""
Store - Single Owner of a Flow's State

A FlowStore holds the FlowState of one troubleshooting session and is the only
place actions are applied. Components that need the flow (the escalation
coordinator, the session service, the API) are handed the store explicitly;
there is no module-level flow.
"""

import logging
from typing import List, Optional

from ..domain.models import EquipmentContext, InteractiveStep, IssueContext
from ..state.models import AbstractStep, FlowState
from ..data.step_catalog import build_steps
from ..schemas.actions import AddInteractiveStep, FlowAction, InitializeFlow
from .compiler import compile_steps
from .progress import FlowProgress, get_progress
from .reducer import reduce_flow

logger = logging.getLogger(__name__)


class FlowStore:
    def __init__(self, state: Optional[FlowState] = None):
        self.state = state or FlowState()

    def dispatch(self, action: FlowAction) -> FlowState:
        """Apply one action. Actions are processed strictly in submission order."""
        self.state = reduce_flow(self.state, action)
        return self.state

    def start(
        self,
        equipment: EquipmentContext,
        issue: IssueContext,
        steps: Optional[List[AbstractStep]] = None,
    ) -> FlowState:
        """
        Initialize a flow and compile its InteractiveSteps together, 1:1.

        When `steps` is omitted the plan comes from the step catalog.
        """
        if steps is None:
            steps = build_steps(equipment.category, issue.title, equipment.display_name)

        self.dispatch(InitializeFlow(equipment=equipment, issue=issue, steps=steps))
        for interactive in compile_steps(
            steps,
            equipment_name=equipment.display_name,
            issue_title=issue.title,
        ):
            self.dispatch(AddInteractiveStep(step=interactive))

        logger.info(
            f"Started flow for {equipment.display_name} / '{issue.title}' with {len(steps)} steps"
        )
        return self.state

    # --- Selectors ---

    def current_step(self) -> Optional[AbstractStep]:
        return self.state.current_step

    def current_interactive_step(self) -> Optional[InteractiveStep]:
        current = self.state.current_step
        if not current:
            return None
        return next(
            (step for step in self.state.interactive_steps if step.id == current.id),
            None,
        )

    def progress(self) -> FlowProgress:
        return get_progress(self.state)

    def is_step_completed(self, step_id: str) -> bool:
        return any(
            step.id == step_id and step.status == "completed"
            for step in self.state.steps
        )
