from abc import ABC, abstractmethod
from typing import List, Type, TypeVar

from pydantic import BaseModel

# Generic type variable for the Pydantic model expected in structured responses.
T = TypeVar("T", bound=BaseModel)

class LLMProvider(ABC):
    """
    Contract for the AI backend that escalated flows are handed to
    (OpenAI, a local model, a test double, etc.).
    """

    @abstractmethod
    async def generate_structured_output(
        self,
        messages: List[dict],
        response_model: Type[T],
        temperature: float = 0.0
    ) -> T:
        """
        Generates a response from the LLM strictly matching the Pydantic 'response_model'.
        Retries, if any, are the provider's business.
        """
        pass
