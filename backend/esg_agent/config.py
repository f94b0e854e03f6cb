from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://esgagent:esgagent_dev_password@db:5432/esgagent"

    # OpenAI
    openai_api_key: str = ""
    chat_model: str = "gpt-4.1-mini"
    recommendation_model: str = "gpt-4.1-mini"
    chat_max_tokens: int = 2048
    recommendation_max_tokens: int = 6000

    # Conversation loop
    chat_max_iterations: int = 10  # model round-trips per chat request
    disconnect_poll_interval: float = 0.5  # seconds between client disconnect checks

    # Used in prompts when a company has no sector on record
    sector_label: str = "Oil & Gas"

    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    model_config = {"env_file": ".env"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
