"""
multiagent_store.orchestration.base

Strategy interface and the LangGraph-backed implementation shared by all strategies.

Responsibilities:
- `AgentOrchestrationService`: the one method every strategy exposes.
- `GraphOrchestrationService`: compile the strategy's graph, run it, and map the
  final state into a `MultiAgentResponse`.
- Node helpers that adapt a `RetailAgent` to a graph node.
"""

from __future__ import annotations

import abc
import time
from collections.abc import Awaitable, Callable
from decimal import Decimal
from typing import Any, ClassVar

from langgraph.graph import StateGraph

from multiagent_store.agents.base import AgentContext, AgentOutput, RetailAgent
from multiagent_store.agents.chat import ChatModelClient
from multiagent_store.agents.retail import AgentRoster
from multiagent_store.observability.logging import get_logger, orchestration_context
from multiagent_store.orchestration.models import (
    ORCHESTRATION_DESCRIPTIONS,
    MultiAgentRequest,
    MultiAgentResponse,
    NavigationInstructions,
    OrchestrationType,
    ProductAlternative,
)
from multiagent_store.orchestration.state import OrchestrationState
from multiagent_store.settings import Settings

log = get_logger(__name__)

Node = Callable[[OrchestrationState], Awaitable[dict[str, Any]]]


class AgentOrchestrationService(abc.ABC):
    orchestration_type: ClassVar[OrchestrationType]

    @abc.abstractmethod
    async def execute(self, request: MultiAgentRequest) -> MultiAgentResponse:
        """
        Answer the request's product query with this strategy.
        """


class GraphOrchestrationService(AgentOrchestrationService):
    def __init__(
        self,
        *,
        roster: AgentRoster,
        settings: Settings,
        chat: ChatModelClient | None = None,
    ) -> None:
        self._roster = roster
        self._settings = settings
        self._chat = chat

    @abc.abstractmethod
    def build_graph(self) -> StateGraph:
        """
        Declare (but don't compile) this strategy's graph over `OrchestrationState`.
        """

    def recursion_limit(self) -> int:
        return 25

    def initial_state(self, request: MultiAgentRequest) -> OrchestrationState:
        return {"query": (request.product_query or "").strip(), "steps": [], "facts": {}}

    async def execute(self, request: MultiAgentRequest) -> MultiAgentResponse:
        response = MultiAgentResponse(
            orchestration_type=self.orchestration_type,
            orchestration_description=ORCHESTRATION_DESCRIPTIONS[self.orchestration_type],
        )
        graph = self.build_graph().compile()

        with orchestration_context(
            orchestration_id=str(response.orchestration_id),
            orchestration_type=self.orchestration_type.value,
        ):
            started = time.perf_counter()
            final: OrchestrationState = await graph.ainvoke(
                self.initial_state(request),
                config={"recursion_limit": self.recursion_limit()},
            )
            log.info(
                "orchestration_completed",
                steps=len(final.get("steps", [])),
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )

        facts = final.get("facts", {})
        response.steps = list(final.get("steps", []))
        response.alternatives = _alternatives(facts)
        navigation = facts.get("navigation")
        if navigation:
            response.navigation_instructions = NavigationInstructions.model_validate(navigation)
        response.mermaid_workflow_representation = graph.get_graph().draw_mermaid()
        return response


def agent_context(state: OrchestrationState, *, isolated: bool = False) -> AgentContext:
    # Isolated agents (concurrent fan-out) see only the query.
    if isolated:
        return AgentContext(query=state["query"])
    return AgentContext(
        query=state["query"],
        transcript=tuple(state.get("steps", [])),
        facts=dict(state.get("facts", {})),
    )


def agent_node(agent: RetailAgent) -> Node:
    async def _node(state: OrchestrationState) -> dict[str, Any]:
        out = await agent.run(agent_context(state))
        return {"steps": [out.step], "facts": out.facts}

    return _node


def made_progress(out: AgentOutput) -> bool:
    # An agent made progress if it added at least one non-empty fact to the ledger.
    return any(bool(v) for v in out.facts.values())


def _alternatives(facts: dict[str, Any]) -> list[ProductAlternative]:
    placements = {int(p["product_id"]): p for p in facts.get("placements", [])}
    out: list[ProductAlternative] = []
    for alt in facts.get("alternatives", []):
        spot = placements.get(int(alt["product_id"]), {})
        out.append(
            ProductAlternative(
                product_id=int(alt["product_id"]),
                name=str(alt["name"]),
                price=Decimal(str(alt["price"])),
                aisle=spot.get("aisle"),
                section=spot.get("section"),
            )
        )
    return out


# --- Module Notes -----------------------------------------------------------
# Graphs are compiled per request because the roster is bound to the request's
# DB session. Compilation is cheap relative to agent calls.
