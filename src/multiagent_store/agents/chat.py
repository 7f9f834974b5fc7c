"""
multiagent_store.agents.chat

HTTP client boundary for the chat model that phrases agent output.

Responsibilities:
- Call an OpenAI-compatible `/chat/completions` endpoint with bearer auth.
- Normalize transport and payload failures into `AgentBackendError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from multiagent_store.observability.logging import get_logger
from multiagent_store.settings import Settings

log = get_logger(__name__)


class AgentBackendError(Exception):
    pass


@dataclass(frozen=True, slots=True)
class ChatMessage:
    role: str
    content: str

    def as_payload(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class ChatModelClient:
    """
    Thin async wrapper over a chat-completions API. The caller owns the
    `httpx.AsyncClient` lifecycle (created on app startup, closed on shutdown).
    """

    def __init__(self, *, settings: Settings, http: httpx.AsyncClient) -> None:
        self._model = settings.llm_model
        self._http = http

    @classmethod
    def http_client_for(cls, settings: Settings) -> httpx.AsyncClient:
        headers = {}
        if settings.llm_api_key:
            headers["Authorization"] = f"Bearer {settings.llm_api_key}"
        return httpx.AsyncClient(
            base_url=settings.llm_base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(settings.llm_timeout_seconds),
        )

    async def complete(
        self,
        *,
        system: str,
        messages: list[ChatMessage],
        temperature: float = 0.2,
    ) -> str:
        payload: dict[str, Any] = {
            "model": self._model,
            "temperature": temperature,
            "messages": [{"role": "system", "content": system}]
            + [m.as_payload() for m in messages],
        }
        try:
            r = await self._http.post("/chat/completions", json=payload)
            r.raise_for_status()
            body = r.json()
        except httpx.HTTPStatusError as e:
            raise AgentBackendError(
                f"chat model returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise AgentBackendError(f"chat model request failed: {e}") from e

        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AgentBackendError("chat model response has no message content") from e
        if not isinstance(content, str) or not content.strip():
            raise AgentBackendError("chat model returned an empty message")

        usage = body.get("usage") or {}
        log.debug(
            "chat_completion",
            model=self._model,
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
        )
        return content.strip()


# --- Module Notes -----------------------------------------------------------
# No retries: failures surface to the route boundary, which logs them and answers 500.
