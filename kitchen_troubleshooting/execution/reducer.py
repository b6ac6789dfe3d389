"""
Reducer - Conversation Flow State Machine

The single pure reduction function over FlowState. Every user-visible change
to a troubleshooting session is an action applied here; nothing else builds
a FlowState.

Phases are derived from (is_flow_active, flow_outcome):

    Idle ──INITIALIZE_FLOW──> Active ──COMPLETE_FLOW / steps exhausted──> Completed
                                │  └──critical safety flag / approval──> Escalated
                                └──COMPLETE_FLOW(abandoned)──────────────> Abandoned

INITIALIZE_FLOW and RESET_FLOW are accepted from any phase. Step actions are
only accepted while Active.

An action that does not apply (unknown step id, wrong phase, a stale button
press for a step that is no longer current) returns the *same* state object.
Nothing is raised: a UI must be able to dispatch a stale action safely.
"""

import logging
from typing import List, Optional

from ..state.models import (
    AbstractStep,
    EscalationRecord,
    FlowState,
    SafetyFlag,
    UserResponse,
)
from ..schemas.actions import (
    AddInteractiveStep,
    AddUserResponse,
    CompleteFlow,
    CompleteStep,
    FlowAction,
    InitializeFlow,
    NextStep,
    PreviousStep,
    RecordEscalation,
    RequestManagerApproval,
    ResetFlow,
    RestartFlow,
    SkipStep,
    TriggerSafetyEscalation,
)

logger = logging.getLogger(__name__)


def reduce_flow(state: FlowState, action: FlowAction) -> FlowState:
    """
    Apply `action` to `state` and return the resulting FlowState.
    """
    match action:
        case InitializeFlow():
            return _initialize(action)
        case ResetFlow():
            return FlowState()
        case AddInteractiveStep():
            return _add_interactive_step(state, action)
        case NextStep():
            return _advance_to(state, action)
        case CompleteStep():
            return _finish_current(state, action.step_id, "completed", action)
        case SkipStep():
            return _finish_current(state, action.step_id, "skipped", None)
        case PreviousStep():
            return _previous(state)
        case RestartFlow():
            return _restart(state)
        case CompleteFlow():
            return _complete_flow(state, action.outcome)
        case AddUserResponse():
            return _add_user_response(state, action)
        case TriggerSafetyEscalation():
            return _trigger_safety_escalation(state, action)
        case RequestManagerApproval():
            return _request_manager_approval(state, action)
        case RecordEscalation():
            return _record_escalation(state, action)
        case _:
            logger.warning(f"Unhandled flow action: {action!r}")
            return state


# ==========================================================================
# Lifecycle
# ==========================================================================


def _initialize(action: InitializeFlow) -> FlowState:
    return FlowState(
        is_flow_active=True,
        current_step_index=0,
        steps=_statuses_from(action.steps, 0),
        equipment_context=action.equipment,
        issue_context=action.issue,
        flow_outcome="in_progress",
    )


def _restart(state: FlowState) -> FlowState:
    # A critical safety flag keeps the flow closed until it is reset.
    if not state.steps or state.has_critical_flag:
        return _ignored(state, "RESTART_FLOW")

    return state.model_copy(update={
        "is_flow_active": True,
        "current_step_index": 0,
        "steps": _statuses_from(state.steps, 0),
        "user_responses": [],
        "flow_outcome": "in_progress",
    })


def _complete_flow(state: FlowState, outcome: str) -> FlowState:
    if not state.is_flow_active:
        return _ignored(state, "COMPLETE_FLOW")
    return _close(state, outcome)


def _close(state: FlowState, outcome: str, **extra) -> FlowState:
    """End the flow; a dangling `current` step is marked completed."""
    steps = [
        _with_status(step, "completed") if step.status == "current" else step
        for step in state.steps
    ]
    return state.model_copy(update={
        "is_flow_active": False,
        "flow_outcome": outcome,
        "steps": steps,
        **extra,
    })


# ==========================================================================
# Step navigation
# ==========================================================================


def _add_interactive_step(state: FlowState, action: AddInteractiveStep) -> FlowState:
    if not state.is_flow_active:
        return _ignored(state, "ADD_INTERACTIVE_STEP")
    # Callers must not add the same id twice; duplicates are not filtered here.
    return state.model_copy(update={
        "interactive_steps": [*state.interactive_steps, action.step],
    })


def _advance_to(state: FlowState, action: NextStep) -> FlowState:
    if not state.is_flow_active:
        return _ignored(state, action.type)

    target = _index_of(state.steps, action.step_id)
    if target is None:
        return _ignored(state, action.type, action.step_id)

    steps = []
    for index, step in enumerate(state.steps):
        if index < target:
            steps.append(step if step.status == "skipped" else _with_status(step, "completed"))
        elif index == target:
            steps.append(_with_status(step, "current"))
        else:
            steps.append(_with_status(step, "upcoming"))

    responses = state.user_responses
    if action.response is not None:
        answered = state.current_step
        responses = [
            *responses,
            UserResponse(
                step_id=answered.id if answered else action.step_id,
                response=action.response,
                timestamp=action.timestamp,
            ),
        ]

    return state.model_copy(update={
        "steps": steps,
        "current_step_index": target,
        "user_responses": responses,
    })


def _finish_current(
    state: FlowState,
    step_id: str,
    status: str,
    completion: Optional[CompleteStep],
) -> FlowState:
    """
    Mark the current step completed or skipped, then promote the next upcoming step.

    Running out of upcoming steps ends the flow as completed.
    """
    label = "COMPLETE_STEP" if completion else "SKIP_STEP"
    if not state.is_flow_active:
        return _ignored(state, label)

    index = _index_of(state.steps, step_id)
    if index is None or state.steps[index].status != "current":
        return _ignored(state, label, step_id)

    steps = list(state.steps)
    steps[index] = _with_status(steps[index], status)

    responses = state.user_responses
    if completion:
        responses = [
            *responses,
            UserResponse(
                step_id=step_id,
                response=completion.response,
                timestamp=completion.timestamp,
            ),
        ]

    # Skipped steps are never upcoming, so a skip is not revisited here.
    next_index = next(
        (i for i, step in enumerate(steps) if step.status == "upcoming"),
        None,
    )
    if next_index is None:
        logger.info(f"All steps finished after '{step_id}'; closing flow")
        return state.model_copy(update={
            "steps": steps,
            "user_responses": responses,
            "is_flow_active": False,
            "flow_outcome": "completed",
        })

    steps[next_index] = _with_status(steps[next_index], "current")
    return state.model_copy(update={
        "steps": steps,
        "user_responses": responses,
        "current_step_index": next_index,
    })


def _previous(state: FlowState) -> FlowState:
    if not state.is_flow_active or state.current_step_index == 0:
        return _ignored(state, "PREVIOUS_STEP")

    target = state.current_step_index - 1
    steps = [
        _with_status(step, "current") if index == target
        else _with_status(step, "upcoming") if index > target
        else step
        for index, step in enumerate(state.steps)
    ]
    return state.model_copy(update={
        "steps": steps,
        "current_step_index": target,
    })


# ==========================================================================
# Responses & escalation bookkeeping
# ==========================================================================


def _add_user_response(state: FlowState, action: AddUserResponse) -> FlowState:
    if not state.is_flow_active:
        return _ignored(state, "ADD_USER_RESPONSE")
    return state.model_copy(update={
        "user_responses": [
            *state.user_responses,
            UserResponse(
                step_id=action.step_id,
                response=action.response,
                timestamp=action.timestamp,
            ),
        ],
    })


def _trigger_safety_escalation(state: FlowState, action: TriggerSafetyEscalation) -> FlowState:
    if not state.steps:
        return _ignored(state, "TRIGGER_SAFETY_ESCALATION")

    flag = SafetyFlag(
        type=action.flag_type,
        severity=action.severity,
        message=action.message,
        triggered_at=action.timestamp,
    )
    flags = [*state.safety_flags, flag]

    if action.severity == "critical" and state.is_flow_active:
        logger.warning(f"Critical {action.flag_type} safety flag; ending flow as escalated")
        return _close(state, "escalated", safety_flags=flags)

    return state.model_copy(update={"safety_flags": flags})


def _request_manager_approval(state: FlowState, action: RequestManagerApproval) -> FlowState:
    current = state.current_step
    reason = action.reason
    if action.estimated_cost is not None:
        reason = f"{reason} (estimated cost: {action.estimated_cost:.2f})"

    record = EscalationRecord(
        step_id=current.id if current else "",
        reason=reason,
        timestamp=action.timestamp,
        approval_required=True,
    )
    history = [*state.escalation_history, record]

    if state.is_flow_active:
        return _close(state, "escalated", escalation_history=history)
    return state.model_copy(update={"escalation_history": history})


def _record_escalation(state: FlowState, action: RecordEscalation) -> FlowState:
    record = EscalationRecord(
        step_id=action.step_id,
        reason=action.reason,
        timestamp=action.timestamp,
        approval_required=action.approval_required,
    )
    return state.model_copy(update={
        "escalation_history": [*state.escalation_history, record],
    })


# ==========================================================================
# Helpers
# ==========================================================================


def _statuses_from(steps: List[AbstractStep], current: int) -> List[AbstractStep]:
    return [
        _with_status(step, "current" if index == current else "upcoming")
        for index, step in enumerate(steps)
    ]


def _with_status(step: AbstractStep, status: str) -> AbstractStep:
    if step.status == status:
        return step
    return step.model_copy(update={"status": status})


def _index_of(steps: List[AbstractStep], step_id: str) -> Optional[int]:
    return next((i for i, step in enumerate(steps) if step.id == step_id), None)


def _ignored(state: FlowState, action_type: str, step_id: Optional[str] = None) -> FlowState:
    target = f" (step '{step_id}')" if step_id else ""
    logger.debug(f"Ignoring {action_type}{target} in phase '{state.phase}'")
    return state
