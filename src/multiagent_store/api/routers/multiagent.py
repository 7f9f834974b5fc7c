"""
multiagent_store.api.routers.multiagent

Multi-agent assist endpoints.

Responsibilities:
- `/assist`: dispatch by the body's orchestration type.
- `/assist/{strategy}`: pin the orchestration type, then run that strategy.
- Map failures to 400 (bad body) and 500 (anything raised while orchestrating).
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, HTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from multiagent_store.api.deps import dispatcher_dep
from multiagent_store.observability.logging import get_logger
from multiagent_store.orchestration.base import AgentOrchestrationService
from multiagent_store.orchestration.dispatcher import OrchestrationDispatcher
from multiagent_store.orchestration.models import (
    MultiAgentRequest,
    MultiAgentResponse,
    OrchestrationType,
)

log = get_logger(__name__)

PREFIX = "/api/multiagent/llm"
BAD_REQUEST_DETAIL = "Request body is required and must include a ProductQuery."

router = APIRouter(prefix=PREFIX, tags=["multiagent"])


def _require_query(body: MultiAgentRequest | None) -> MultiAgentRequest:
    if body is None or not body.has_query:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=BAD_REQUEST_DETAIL)
    return body


async def _run(
    service: AgentOrchestrationService,
    body: MultiAgentRequest,
    *,
    label: str,
) -> MultiAgentResponse:
    log.info(
        "orchestration_started",
        orchestration_type=body.orchestration_type.value,
        product_query=body.product_query,
    )
    try:
        return await service.execute(body)
    except Exception as e:
        # No detail leaks to the caller; the traceback goes to the logs.
        log.error(
            "orchestration_failed",
            orchestration_type=body.orchestration_type.value,
            exc_info=e,
        )
        raise HTTPException(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred during {label} processing.",
        ) from e


async def _pinned(
    body: MultiAgentRequest | None,
    dispatcher: OrchestrationDispatcher,
    tag: OrchestrationType,
    *,
    label: str,
) -> MultiAgentResponse:
    request = _require_query(body)
    request.orchestration_type = tag
    return await _run(dispatcher.get(tag), request, label=label)


@router.post("/assist", response_model=MultiAgentResponse)
async def assist(
    body: MultiAgentRequest | None = Body(default=None),
    dispatcher: OrchestrationDispatcher = Depends(dispatcher_dep),
) -> MultiAgentResponse:
    request = _require_query(body)
    service = dispatcher.get(request.orchestration_type)
    return await _run(service, request, label="orchestration")


@router.post("/assist/sequential", response_model=MultiAgentResponse)
async def assist_sequential(
    body: MultiAgentRequest | None = Body(default=None),
    dispatcher: OrchestrationDispatcher = Depends(dispatcher_dep),
) -> MultiAgentResponse:
    return await _pinned(body, dispatcher, OrchestrationType.sequential, label="sequential")


@router.post("/assist/concurrent", response_model=MultiAgentResponse)
async def assist_concurrent(
    body: MultiAgentRequest | None = Body(default=None),
    dispatcher: OrchestrationDispatcher = Depends(dispatcher_dep),
) -> MultiAgentResponse:
    return await _pinned(body, dispatcher, OrchestrationType.concurrent, label="concurrent")


@router.post("/assist/handoff", response_model=MultiAgentResponse)
async def assist_handoff(
    body: MultiAgentRequest | None = Body(default=None),
    dispatcher: OrchestrationDispatcher = Depends(dispatcher_dep),
) -> MultiAgentResponse:
    return await _pinned(body, dispatcher, OrchestrationType.handoff, label="handoff")


@router.post("/assist/groupchat", response_model=MultiAgentResponse)
async def assist_groupchat(
    body: MultiAgentRequest | None = Body(default=None),
    dispatcher: OrchestrationDispatcher = Depends(dispatcher_dep),
) -> MultiAgentResponse:
    return await _pinned(body, dispatcher, OrchestrationType.groupchat, label="group chat")


@router.post("/assist/magentic", response_model=MultiAgentResponse)
async def assist_magentic(
    body: MultiAgentRequest | None = Body(default=None),
    dispatcher: OrchestrationDispatcher = Depends(dispatcher_dep),
) -> MultiAgentResponse:
    return await _pinned(body, dispatcher, OrchestrationType.magentic, label="MagenticOne")
