"""
Troubleshooting Service - Application Orchestration Layer

Entry point for all session operations. It looks up the session's FlowStore,
starts flows from the step catalog, and routes every response and message
through the EscalationCoordinator before anything reaches the state machine.
"""

import logging
from typing import Optional, Tuple

from ..domain.models import EquipmentContext, IssueContext
from ..execution.store import FlowStore
from ..repositories.session import SessionRepository
from ..schemas.actions import FlowAction
from ..schemas.decisions import EscalationOutcome
from .escalation import EscalationCoordinator
from .exceptions import SessionNotFoundError

logger = logging.getLogger(__name__)

class TroubleshootingService:
    def __init__(
        self,
        session_repository: SessionRepository,
        coordinator: EscalationCoordinator,
    ):
        self.session_repo = session_repository
        self.coordinator = coordinator

    def start_session(
        self,
        equipment: EquipmentContext,
        issue: IssueContext,
    ) -> Tuple[str, FlowStore]:
        """Creates a session and starts its troubleshooting flow."""
        session_id = self.session_repo.create()
        store = self._load(session_id)
        store.start(equipment, issue)
        logger.info(f"Session {session_id} started for equipment {equipment.id}")
        return session_id, store

    def get_session(self, session_id: str) -> Optional[FlowStore]:
        """Retrieves a session (for resuming)."""
        return self.session_repo.get(session_id)

    def delete_session(self, session_id: str) -> bool:
        return self.session_repo.delete(session_id)

    async def respond(
        self,
        session_id: str,
        option_id: str,
        note: Optional[str] = None,
    ) -> Tuple[EscalationOutcome, FlowStore]:
        store = self._load(session_id)
        outcome = await self.coordinator.handle_response(store, option_id, note)
        return outcome, store

    async def send_message(self, session_id: str, text: str) -> Tuple[EscalationOutcome, FlowStore]:
        store = self._load(session_id)
        outcome = await self.coordinator.handle_message(store, text)
        return outcome, store

    def request_approval(
        self,
        session_id: str,
        reason: str,
        estimated_cost: Optional[float] = None,
    ) -> Tuple[EscalationOutcome, FlowStore]:
        store = self._load(session_id)
        outcome = self.coordinator.request_manager_approval(store, reason, estimated_cost)
        return outcome, store

    def dispatch(self, session_id: str, action: FlowAction) -> FlowStore:
        """Apply a navigation action (skip, previous, restart, ...) directly."""
        store = self._load(session_id)
        store.dispatch(action)
        return store

    def _load(self, session_id: str) -> FlowStore:
        store = self.session_repo.get(session_id)
        if store is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return store
