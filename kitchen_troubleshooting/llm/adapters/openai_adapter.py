import logging
from typing import List, Type

from openai import AsyncOpenAI

from ..interface import LLMProvider, T
from ...config import settings

logger = logging.getLogger(__name__)


class OpenAIAdapter(LLMProvider):
    """AI backend for escalated flows, backed by OpenAI structured outputs."""

    def __init__(
        self,
        api_key: str,
        model_name: str = settings.OPENAI_MODEL,
        max_retries: int = settings.MAX_RETRIES,
    ):
        # The SDK retries transient failures itself; the coordinator never retries.
        self.client = AsyncOpenAI(api_key=api_key, max_retries=max_retries)
        self.model_name = model_name

    async def generate_structured_output(
        self,
        messages: List[dict],
        response_model: Type[T],
        temperature: float = 0.0
    ) -> T:
        completion = await self.client.beta.chat.completions.parse(
            model=self.model_name,
            messages=messages,
            response_format=response_model,
            temperature=temperature,
        )
        if completion.usage:
            logger.debug(
                f"{self.model_name} escalation reply used {completion.usage.total_tokens} tokens"
            )

        message = completion.choices[0].message
        if message.parsed is None:
            refusal = getattr(message, "refusal", None)
            logger.warning(f"{self.model_name} returned no {response_model.__name__}: {refusal}")
            raise ValueError(f"{self.model_name} returned no structured output")
        return message.parsed
