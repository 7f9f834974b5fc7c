"""
tests.test_multiagent_api

Assist endpoints: body validation, strategy pinning and error mapping.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI

from multiagent_store.agents.chat import ChatModelClient
from multiagent_store.api.app import create_app
from multiagent_store.api.deps import dispatcher_dep
from multiagent_store.orchestration.base import AgentOrchestrationService
from multiagent_store.orchestration.dispatcher import OrchestrationDispatcher
from multiagent_store.orchestration.models import (
    MultiAgentRequest,
    MultiAgentResponse,
    OrchestrationType,
)
from multiagent_store.settings import Settings

BASE = "/api/multiagent/llm"
BAD_REQUEST = "Request body is required and must include a ProductQuery."

ALL_ROUTES = [
    f"{BASE}/assist",
    f"{BASE}/assist/sequential",
    f"{BASE}/assist/concurrent",
    f"{BASE}/assist/handoff",
    f"{BASE}/assist/groupchat",
    f"{BASE}/assist/magentic",
]

PINNED_ROUTES = [
    ("sequential", OrchestrationType.sequential),
    ("concurrent", OrchestrationType.concurrent),
    ("handoff", OrchestrationType.handoff),
    ("groupchat", OrchestrationType.groupchat),
    ("magentic", OrchestrationType.magentic),
]


class RecordingService(AgentOrchestrationService):
    orchestration_type = OrchestrationType.sequential

    def __init__(self, name: str) -> None:
        self.name = name
        self.requests: list[MultiAgentRequest] = []

    async def execute(self, request: MultiAgentRequest) -> MultiAgentResponse:
        self.requests.append(request)
        return MultiAgentResponse(
            orchestration_type=request.orchestration_type,
            orchestration_description=f"recorded by {self.name}",
        )


class FailingService(AgentOrchestrationService):
    orchestration_type = OrchestrationType.sequential

    async def execute(self, request: MultiAgentRequest) -> MultiAgentResponse:
        raise RuntimeError("secret connection string leaked")


def _install(app: FastAPI, services: dict[OrchestrationType, AgentOrchestrationService]) -> None:
    dispatcher = OrchestrationDispatcher(services)
    app.dependency_overrides[dispatcher_dep] = lambda: dispatcher


@pytest.mark.asyncio
@pytest.mark.parametrize("route", ALL_ROUTES)
async def test_missing_body_is_400(client: httpx.AsyncClient, route: str) -> None:
    r = await client.post(route)
    assert r.status_code == 400
    assert r.json()["detail"] == BAD_REQUEST


@pytest.mark.asyncio
@pytest.mark.parametrize("route", ALL_ROUTES)
@pytest.mark.parametrize(
    "body",
    [
        {"productQuery": ""},
        {"productQuery": "   \t"},
        {"orchestrationType": "handoff"},
        {"productQuery": None},
    ],
)
async def test_blank_query_is_400(client: httpx.AsyncClient, route: str, body: dict) -> None:
    r = await client.post(route, json=body)
    assert r.status_code == 400
    assert r.json()["detail"] == BAD_REQUEST


@pytest.mark.asyncio
@pytest.mark.parametrize("route", ALL_ROUTES)
async def test_malformed_json_is_400(client: httpx.AsyncClient, route: str) -> None:
    r = await client.post(
        route, content=b"{not json", headers={"content-type": "application/json"}
    )
    assert r.status_code == 400
    assert r.json()["detail"] == BAD_REQUEST

    r = await client.post(route, json={"productQuery": ["tent"]})
    assert r.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize(("suffix", "pinned"), PINNED_ROUTES)
async def test_fixed_routes_pin_orchestration_type(
    app: FastAPI, client: httpx.AsyncClient, suffix: str, pinned: OrchestrationType
) -> None:
    services = {t: RecordingService(t.value) for t in OrchestrationType}
    _install(app, services)
    try:
        # Caller asks for some other strategy; the route's pin must win.
        other = "magentic" if pinned != OrchestrationType.magentic else "concurrent"
        r = await client.post(
            f"{BASE}/assist/{suffix}",
            json={"productQuery": "tent", "orchestrationType": other},
        )
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 200
    assert r.json()["orchestrationType"] == pinned.value
    called = [s for s in services.values() if s.requests]
    assert called == [services[pinned]]
    assert services[pinned].requests[0].orchestration_type == pinned


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("concurrent", OrchestrationType.concurrent),
        ("GroupChat", OrchestrationType.groupchat),
        (2, OrchestrationType.handoff),
        ("Magentic", OrchestrationType.magentic),
        ("round-robin", OrchestrationType.sequential),
        (42, OrchestrationType.sequential),
    ],
)
async def test_generic_route_dispatches_by_tag(
    app: FastAPI, client: httpx.AsyncClient, tag: object, expected: OrchestrationType
) -> None:
    services = {t: RecordingService(t.value) for t in OrchestrationType}
    _install(app, services)
    try:
        r = await client.post(
            f"{BASE}/assist", json={"productQuery": "tent", "orchestrationType": tag}
        )
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 200
    assert services[expected].requests
    assert r.json()["orchestrationType"] == expected.value


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("route", "message"),
    [
        (f"{BASE}/assist", "An error occurred during orchestration processing."),
        (f"{BASE}/assist/sequential", "An error occurred during sequential processing."),
        (f"{BASE}/assist/concurrent", "An error occurred during concurrent processing."),
        (f"{BASE}/assist/handoff", "An error occurred during handoff processing."),
        (f"{BASE}/assist/groupchat", "An error occurred during group chat processing."),
        (f"{BASE}/assist/magentic", "An error occurred during MagenticOne processing."),
    ],
)
async def test_orchestration_failure_is_generic_500(
    app: FastAPI, client: httpx.AsyncClient, route: str, message: str
) -> None:
    _install(app, {t: FailingService() for t in OrchestrationType})
    try:
        r = await client.post(route, json={"productQuery": "tent"})
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 500
    assert r.json() == {"detail": message}
    assert "secret" not in r.text


@pytest.mark.asyncio
@pytest.mark.parametrize(("suffix", "pinned"), PINNED_ROUTES)
async def test_each_strategy_answers_end_to_end(
    client: httpx.AsyncClient, suffix: str, pinned: OrchestrationType
) -> None:
    r = await client.post(
        f"{BASE}/assist/{suffix}", json={"productQuery": "Do you have a camping tent?"}
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["orchestrationType"] == pinned.value
    assert body["orchestrationDescription"]
    assert body["orchestrationId"]
    assert body["steps"]
    assert {"agent", "action", "result", "timestamp"} <= set(body["steps"][0])
    assert body["navigationInstructions"]["startLocation"] == "Store entrance"
    assert "graph" in body["mermaidWorkflowRepresentation"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("suffix", "message"),
    [
        ("handoff", "An error occurred during handoff processing."),
        ("sequential", "An error occurred during sequential processing."),
    ],
)
async def test_chat_model_failure_surfaces_as_500(
    settings: Settings, suffix: str, message: str
) -> None:
    llm_settings = settings.model_copy(update={"agent_backend": "llm", "llm_api_key": "sk-test"})
    app = create_app(settings=llm_settings)
    broken = httpx.MockTransport(lambda request: httpx.Response(503, json={"error": "down"}))

    async with app.router.lifespan_context(app):
        async with httpx.AsyncClient(transport=broken, base_url="http://llm.test/v1") as http:
            app.state.chat_client = ChatModelClient(settings=llm_settings, http=http)
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                r = await client.post(
                    f"{BASE}/assist/{suffix}", json={"productQuery": "camping tent"}
                )

    assert r.status_code == 500
    assert r.json() == {"detail": message}
    assert "503" not in r.text
