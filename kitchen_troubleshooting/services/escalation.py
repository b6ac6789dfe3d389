"""
Escalation Coordinator

Consulted on every button response and every free-text message before the
flow advances. It decides between four paths:

1. Safety alert: a safety keyword (or an explicit "unsafe" answer) ends the
   flow as escalated and returns a blocking safety message.
2. AI backend: an `escalate` answer or a free-text question is logged as an
   escalation and forwarded to the LLM with the whole conversation so far.
   The flow stays active; the caller decides what to dispatch next.
3. Human approval: a manager approval request ends the flow as escalated.
4. Default: `continue` / `complete` answers move the flow forward.

The coordinator only changes the flow by dispatching actions on the store.
"""

import logging
from typing import Optional, Sequence, Tuple

from ..config import settings
from ..domain.models import ResponseOption
from ..execution.prompts import build_escalation_messages, build_safety_alert
from ..execution.store import FlowStore
from ..llm.interface import LLMProvider
from ..schemas.actions import (
    AddUserResponse,
    CompleteFlow,
    CompleteStep,
    NextStep,
    RecordEscalation,
    RequestManagerApproval,
    TriggerSafetyEscalation,
)
from ..schemas.decisions import (
    AssistantReply,
    EscalationOutcome,
    EscalationRoute,
    ResponseClassification,
    SafetyClassification,
)

logger = logging.getLogger(__name__)

# ==============================================================================
# Keyword classification
# ==============================================================================

# Each rule matches when every term in it occurs in the lowercased text.
# Categories are checked in this order; the first match wins.
SAFETY_RULES: Sequence[Tuple[str, Sequence[Tuple[str, ...]]]] = (
    ("gas_leak", (
        ("gas", "smell"),
        ("gas", "leak"),
        ("gas", "odor"),
        ("gas", "odour"),
        ("rotten egg",),
    )),
    ("electrical", (
        ("electric", "shock"),
        ("electric", "spark"),
        ("electric", "burning smell"),
        ("sparking",),
        ("exposed wire",),
    )),
    ("fire_safety", (
        ("fire",),
        ("smoke",),
        ("burning",),
        ("flames",),
    )),
)

ISSUE_FLAG_TYPES = {
    "gas_leak": "gas",
    "electrical": "electrical",
    "fire_safety": "fire",
}

# Professional best placed to take over each kind of hazard.
RECOMMENDED_CONTACTS = {
    "gas_leak": "gas_safe_engineer",
    "electrical": "electrician",
    "fire_safety": "emergency_services",
    None: "general_technician",
}


def classify(text: str) -> SafetyClassification:
    """
    Screen free text for safety-critical keywords.

    Priority is gas, then electrical, then fire/emergency, so
    "gas smell and sparking" classifies as gas_leak.
    """
    lowered = (text or "").lower()
    for issue_type, rules in SAFETY_RULES:
        if any(all(term in lowered for term in rule) for rule in rules):
            return SafetyClassification(requires_escalation=True, issue_type=issue_type)
    return SafetyClassification()


# ==============================================================================
# Coordinator
# ==============================================================================


class EscalationCoordinator:
    # DEPENDENCY INJECTION: the AI backend is any LLMProvider
    def __init__(self, llm_provider: LLMProvider, temperature: float = settings.LLM_TEMPERATURE):
        self.llm = llm_provider
        self.temperature = temperature

    async def handle_response(
        self,
        store: FlowStore,
        option_id: str,
        note: Optional[str] = None,
    ) -> EscalationOutcome:
        """
        Route a response-button press for the current step.

        Args:
            store: The flow the response belongs to.
            option_id: ResponseOption.id chosen by the user.
            note: Optional free text typed alongside the answer.
        """
        if not store.state.is_flow_active:
            logger.info(f"Response '{option_id}' received with no active flow")
            return EscalationOutcome(route=EscalationRoute.IGNORED)

        step = store.current_interactive_step()
        option = step.find_option(option_id) if step else None
        if option is None:
            logger.warning(f"Unknown response option '{option_id}' for current step")
            return EscalationOutcome(route=EscalationRoute.IGNORED)

        answer = f"{option.value}: {note}" if note else option.value

        classification = classify(note or "")
        if classification.requires_escalation:
            store.dispatch(AddUserResponse(step_id=step.id, response=answer))
            return self._raise_safety_alert(store, classification)

        match option.action:
            case "escalate":
                return await self._escalate(store, step.id, option, answer)
            case "complete":
                store.dispatch(AddUserResponse(step_id=step.id, response=answer))
                store.dispatch(CompleteFlow(outcome="completed"))
                logger.info(f"Flow completed at step '{step.id}'")
                return EscalationOutcome(
                    route=EscalationRoute.COMPLETED,
                    reply=(
                        "✅ Troubleshooting completed successfully! The issue should now be resolved. "
                        "If you need to log this maintenance action or have any other concerns, please let me know."
                    ),
                )
            case _:
                return self._advance(store, step.id, option, answer)

    async def handle_message(self, store: FlowStore, text: str) -> EscalationOutcome:
        """
        Route a free-text message: safety keywords short-circuit to a safety
        alert, everything else goes to the AI backend.
        """
        classification = classify(text)
        if classification.requires_escalation:
            return self._raise_safety_alert(store, classification)

        current = store.current_step()
        if store.state.is_flow_active and current:
            store.dispatch(RecordEscalation(
                step_id=current.id,
                reason=f"Free-text question forwarded to AI: {text}",
            ))
        return await self._ask_ai(store, text, classification)

    def request_manager_approval(
        self,
        store: FlowStore,
        reason: str,
        estimated_cost: Optional[float] = None,
    ) -> EscalationOutcome:
        """Hand the flow to a human approver. Ends an active flow as escalated."""
        store.dispatch(RequestManagerApproval(reason=reason, estimated_cost=estimated_cost))
        logger.info(f"Manager approval requested: {reason}")
        return EscalationOutcome(
            route=EscalationRoute.MANAGER_APPROVAL,
            reply="Your request has been sent to your manager for approval.",
        )

    # ==========================================================================
    # Paths
    # ==========================================================================

    def _advance(
        self,
        store: FlowStore,
        step_id: str,
        option: ResponseOption,
        answer: str,
    ) -> EscalationOutcome:
        if option.next_step_id:
            store.dispatch(NextStep(step_id=option.next_step_id, response=answer))
        else:
            store.dispatch(CompleteStep(step_id=step_id, response=answer))
        return EscalationOutcome(route=EscalationRoute.CONTINUE)

    async def _escalate(
        self,
        store: FlowStore,
        step_id: str,
        option: ResponseOption,
        answer: str,
    ) -> EscalationOutcome:
        store.dispatch(AddUserResponse(step_id=step_id, response=answer))

        # A danger-styled escalate button is the user declaring the situation unsafe.
        if option.style == "danger":
            store.dispatch(TriggerSafetyEscalation(
                flag_type="mechanical",
                severity="critical",
                message=f"User reported a safety concern at step '{step_id}'",
            ))
            logger.warning(f"User flagged a safety concern at step '{step_id}'")
            return EscalationOutcome(
                route=EscalationRoute.SAFETY,
                reply=build_safety_alert(None, self._equipment_name(store)),
                recommended_contact=RECOMMENDED_CONTACTS[None],
            )

        store.dispatch(RecordEscalation(
            step_id=step_id,
            reason=f"User answered '{option.label}'",
        ))
        return await self._ask_ai(store, answer, SafetyClassification())

    def _raise_safety_alert(
        self,
        store: FlowStore,
        classification: SafetyClassification,
    ) -> EscalationOutcome:
        issue_type = classification.issue_type
        message = build_safety_alert(issue_type, self._equipment_name(store))

        if store.state.is_flow_active:
            store.dispatch(TriggerSafetyEscalation(
                flag_type=ISSUE_FLAG_TYPES[issue_type],
                severity="critical",
                message=message,
            ))
        logger.warning(f"Safety escalation ({issue_type})")

        return EscalationOutcome(
            route=EscalationRoute.SAFETY,
            reply=message,
            classification=classification,
            recommended_contact=RECOMMENDED_CONTACTS[issue_type],
        )

    async def _ask_ai(
        self,
        store: FlowStore,
        latest: str,
        classification: SafetyClassification,
    ) -> EscalationOutcome:
        messages = build_escalation_messages(store.state, latest)
        try:
            reply = await self.llm.generate_structured_output(
                messages=messages,
                response_model=AssistantReply,
                temperature=self.temperature,
            )
        except Exception as e:
            logger.error(f"AI escalation failed: {e}")
            reply = AssistantReply(
                content=settings.AI_FALLBACK_REPLY,
                classification=ResponseClassification(safety="safe", confidence=0.0),
            )

        if reply.classification.safety == "danger" and store.state.is_flow_active:
            store.dispatch(TriggerSafetyEscalation(
                flag_type="mechanical",
                severity="danger",
                message=reply.content,
            ))
            logger.warning("AI reply classified as dangerous; safety flag recorded")

        return EscalationOutcome(
            route=EscalationRoute.AI,
            reply=reply.content,
            classification=classification,
            ai_reply=reply,
        )

    @staticmethod
    def _equipment_name(store: FlowStore) -> Optional[str]:
        equipment = store.state.equipment_context
        return equipment.display_name if equipment else None
