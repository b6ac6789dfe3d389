import uuid
from abc import ABC, abstractmethod
from typing import Optional, Dict

from ..execution.store import FlowStore


class SessionRepository(ABC):
    """
    Defines how the application accesses troubleshooting sessions.
    Each session owns exactly one FlowStore.
    """

    @abstractmethod
    def create(self) -> str:
        """Creates a new idle session and returns its ID."""
        pass

    @abstractmethod
    def get(self, session_id: str) -> Optional[FlowStore]:
        """Retrieves a session's flow store by ID."""
        pass

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Deletes a session. Returns True if found and deleted."""
        pass


class InMemorySessionRepository(SessionRepository):
    """
    Sessions live only as long as the process; flow state is never persisted.
    """

    def __init__(self):
        self._store: Dict[str, FlowStore] = {}

    def create(self) -> str:
        new_id = str(uuid.uuid4())
        self._store[new_id] = FlowStore()
        return new_id

    def get(self, session_id: str) -> Optional[FlowStore]:
        return self._store.get(session_id)

    def delete(self, session_id: str) -> bool:
        if session_id in self._store:
            del self._store[session_id]
            return True
        return False
