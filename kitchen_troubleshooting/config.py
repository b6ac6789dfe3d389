from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Security: Read from .env, never hardcode defaults here
    OPENAI_API_KEY: str

    # Model Configuration
    OPENAI_MODEL: str = "gpt-4o"

    # Generation Parameters
    LLM_TEMPERATURE: float = 0.0
    MAX_RETRIES: int = 2

    # Shown to staff when the AI backend cannot be reached
    AI_FALLBACK_REPLY: str = (
        "I couldn't reach the expert assistant just now. "
        "Please try again, or contact your maintenance team if the issue persists."
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

# Singleton instance
settings = Settings()
