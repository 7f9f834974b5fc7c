"""
multiagent_store.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (e.g., chat model API key).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration with defaults safe for local dev.
    A single settings object is injected across layers.
    """

    model_config = SettingsConfigDict(env_prefix="MAS_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "multiagent-store"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./store.db"
    seed_catalog: bool = True

    # Agents: "local" phrases agent output from templates, "llm" asks a chat model.
    agent_backend: Literal["local", "llm"] = "local"
    llm_base_url: str = "https://api.openai.com/v1"
    llm_api_key: str = Field(default="", repr=False)
    llm_model: str = "gpt-4o-mini"
    llm_timeout_seconds: float = 60.0

    # Store layout used by the location and navigation agents.
    store_aisles: int = Field(default=12, ge=1)

    # Orchestration bounds
    max_handoffs: int = Field(default=3, ge=0)
    groupchat_max_rounds: int = Field(default=8, ge=1)
    magentic_max_rounds: int = Field(default=10, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Every layer reads configuration from here; avoid reading os.environ elsewhere.
