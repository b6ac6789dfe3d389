import logging

from fastapi import FastAPI, HTTPException, Depends, status
from fastapi.responses import Response

from .dependencies import get_troubleshooting_service
from ..config import settings
from ..execution.store import FlowStore
from ..schemas.decisions import EscalationOutcome
from ..services.exceptions import SessionNotFoundError
from ..services.troubleshooting import TroubleshootingService
from .schemas import (
    ActionRequest,
    ApprovalRequest,
    FlowRead,
    OptionResponse,
    StartSessionRequest,
    TurnResponse,
    UserMessage,
)

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title="Kitchen Equipment Troubleshooting")


def _to_flow_read(session_id: str, store: FlowStore) -> FlowRead:
    # Explicit mapping: FlowStore (domain) -> FlowRead (API DTO)
    state = store.state
    return FlowRead(
        session_id=session_id,
        phase=state.phase,
        flow_outcome=state.flow_outcome,
        current_step=store.current_step() if state.is_flow_active else None,
        current_interactive_step=store.current_interactive_step() if state.is_flow_active else None,
        progress=store.progress(),
        steps=state.steps,
        user_responses=state.user_responses,
        safety_flags=state.safety_flags,
        escalation_history=state.escalation_history,
    )


def _to_turn(session_id: str, outcome: EscalationOutcome, store: FlowStore) -> TurnResponse:
    return TurnResponse(
        route=outcome.route.value,
        reply=outcome.reply,
        recommended_contact=outcome.recommended_contact,
        flow=_to_flow_read(session_id, store),
    )


# --- Endpoints ---

@app.post(
    "/sessions",
    response_model=FlowRead,
    status_code=status.HTTP_201_CREATED
)
def start_session(
    request: StartSessionRequest,
    service: TroubleshootingService = Depends(get_troubleshooting_service)
):
    """Starts a troubleshooting flow for an equipment/issue pair."""
    session_id, store = service.start_session(request.equipment, request.issue)
    return _to_flow_read(session_id, store)


@app.get("/sessions/{session_id}", response_model=FlowRead)
def get_session(
    session_id: str,
    service: TroubleshootingService = Depends(get_troubleshooting_service)
):
    store = service.get_session(session_id)
    if not store:
        raise HTTPException(status_code=404, detail="Session not found")
    return _to_flow_read(session_id, store)


@app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: str,
    service: TroubleshootingService = Depends(get_troubleshooting_service)
):
    if not service.delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/sessions/{session_id}/responses", response_model=TurnResponse)
async def respond(
    session_id: str,
    body: OptionResponse,
    service: TroubleshootingService = Depends(get_troubleshooting_service)
):
    """A response-button press for the current step."""
    try:
        outcome, store = await service.respond(session_id, body.option_id, body.note)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _to_turn(session_id, outcome, store)


@app.post("/sessions/{session_id}/messages", response_model=TurnResponse)
async def send_message(
    session_id: str,
    message: UserMessage,
    service: TroubleshootingService = Depends(get_troubleshooting_service)
):
    """Free-text message: safety screening, then the AI backend."""
    try:
        outcome, store = await service.send_message(session_id, message.text)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _to_turn(session_id, outcome, store)


@app.post("/sessions/{session_id}/approval", response_model=TurnResponse)
def request_approval(
    session_id: str,
    body: ApprovalRequest,
    service: TroubleshootingService = Depends(get_troubleshooting_service)
):
    try:
        outcome, store = service.request_approval(session_id, body.reason, body.estimated_cost)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _to_turn(session_id, outcome, store)


@app.post("/sessions/{session_id}/actions", response_model=FlowRead)
def dispatch_action(
    session_id: str,
    body: ActionRequest,
    service: TroubleshootingService = Depends(get_troubleshooting_service)
):
    """Navigation (skip, previous, restart, finish, reset). Stale actions are no-ops."""
    try:
        store = service.dispatch(session_id, body.action)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _to_flow_read(session_id, store)
