"""
Dependency Injection Wiring (Composition Root).

Instantiates the singleton services (LLM adapter, session repository,
escalation coordinator, troubleshooting service), wires them together and
caches them with @lru_cache so each is created once per process. Tests
override these through FastAPI's dependency_overrides.
"""


from functools import lru_cache
from fastapi import Depends

from ..config import settings
from ..llm.interface import LLMProvider
from ..llm.adapters.openai_adapter import OpenAIAdapter
from ..repositories.session import SessionRepository, InMemorySessionRepository
from ..services.escalation import EscalationCoordinator
from ..services.troubleshooting import TroubleshootingService

# LLM Provider (Singleton)
@lru_cache()
def get_llm_provider() -> LLMProvider:
    return OpenAIAdapter(
        api_key=settings.OPENAI_API_KEY,
        model_name=settings.OPENAI_MODEL
    )

# Session Repository (Singleton)
# Note: In-memory storage must be a singleton so sessions survive across requests!
@lru_cache()
def get_session_repository() -> SessionRepository:
    return InMemorySessionRepository()

# The Coordinator (Singleton Service)
@lru_cache()
def get_escalation_coordinator(
    llm: LLMProvider = Depends(get_llm_provider),
) -> EscalationCoordinator:
    return EscalationCoordinator(llm_provider=llm)

# The Troubleshooting Service (Singleton Service)
@lru_cache()
def get_troubleshooting_service(
    session_repo: SessionRepository = Depends(get_session_repository),
    coordinator: EscalationCoordinator = Depends(get_escalation_coordinator),
) -> TroubleshootingService:
    return TroubleshootingService(
        session_repository=session_repo,
        coordinator=coordinator,
    )
