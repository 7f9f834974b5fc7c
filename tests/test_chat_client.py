"""
tests.test_chat_client

Chat-model boundary: payload shape, failure mapping, and the agents and
router that use it.
"""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from multiagent_store.agents.base import AgentContext, Findings, RetailAgent
from multiagent_store.agents.chat import AgentBackendError, ChatMessage, ChatModelClient
from multiagent_store.orchestration.routing import model_route
from multiagent_store.settings import Settings

Handler = Callable[[httpx.Request], httpx.Response]


def _settings() -> Settings:
    return Settings(env="test", agent_backend="llm", llm_api_key="sk-test", llm_model="demo-model")


def _client(handler: Handler) -> ChatModelClient:
    settings = _settings()
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="http://llm.test/v1",
        headers={"Authorization": f"Bearer {settings.llm_api_key}"},
    )
    return ChatModelClient(settings=settings, http=http)


def _reply(content: object) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})

    return handler


class _EchoAgent(RetailAgent):
    name = "inventory"
    instructions = "You are a test agent."

    async def find(self, ctx: AgentContext) -> Findings:
        return Findings(
            action="search_inventory", summary="Found 1 product.", facts={"matches": []}
        )


@pytest.mark.asyncio
async def test_complete_posts_system_and_messages() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "choices": [{"message": {"role": "assistant", "content": "  Aisle 4.  "}}],
                "usage": {"prompt_tokens": 12, "completion_tokens": 3},
            },
        )

    chat = _client(handler)
    out = await chat.complete(
        system="be brief", messages=[ChatMessage(role="user", content="where?")]
    )

    assert out == "Aisle 4."
    (req,) = seen
    assert req.url.path == "/v1/chat/completions"
    assert req.headers["authorization"] == "Bearer sk-test"
    payload = json.loads(req.content)
    assert payload["model"] == "demo-model"
    assert payload["messages"] == [
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "where?"},
    ]


@pytest.mark.asyncio
async def test_http_error_maps_to_backend_error() -> None:
    chat = _client(lambda request: httpx.Response(500, json={"error": "boom"}))
    with pytest.raises(AgentBackendError, match="HTTP 500"):
        await chat.complete(system="s", messages=[])


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "handler",
    [
        lambda request: httpx.Response(200, json={"choices": []}),
        lambda request: httpx.Response(200, json={"unexpected": True}),
        lambda request: httpx.Response(200, content=b"not json"),
        _reply(""),
        _reply(None),
    ],
)
async def test_unusable_payload_maps_to_backend_error(handler: Handler) -> None:
    with pytest.raises(AgentBackendError):
        await _client(handler).complete(system="s", messages=[])


@pytest.mark.asyncio
async def test_transport_failure_maps_to_backend_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(AgentBackendError):
        await _client(handler).complete(system="s", messages=[])


@pytest.mark.asyncio
async def test_agent_phrases_findings_through_chat_model() -> None:
    prompts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        prompts.append(json.loads(request.content)["messages"][-1]["content"])
        return httpx.Response(200, json={"choices": [{"message": {"content": "We have it!"}}]})

    agent = _EchoAgent(chat=_client(handler))
    out = await agent.run(AgentContext(query="tent"))

    assert out.step.result == "We have it!"
    assert out.step.agent == "inventory"
    assert "Shopper query: tent" in prompts[0]
    assert "Your findings: Found 1 product." in prompts[0]


@pytest.mark.asyncio
async def test_agent_without_chat_uses_template() -> None:
    out = await _EchoAgent().run(AgentContext(query="tent"))
    assert out.step.result == "Found 1 product."


@pytest.mark.asyncio
async def test_model_route_uses_reply_or_falls_back() -> None:
    names = ("inventory", "matchmaking", "location", "navigation")

    picked = await model_route(_client(_reply("Location.")), "tent please", names)
    assert picked == "location"

    picked = await model_route(_client(_reply("no idea")), "where is the tent?", names)
    assert picked == "location"

    picked = await model_route(_client(_reply("no idea")), "tent", names)
    assert picked == "inventory"
