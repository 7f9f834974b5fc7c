"""
multiagent_store.orchestration.strategies.handoff

Triage picks a first specialist; each specialist may hand the shopper on to the
next one it names. A specialist is visited at most once and the number of
handoffs is capped by `max_handoffs`.
"""

from __future__ import annotations

from typing import Any

from langgraph.graph import END, START, StateGraph

from multiagent_store.agents.base import RetailAgent
from multiagent_store.orchestration.base import GraphOrchestrationService, Node, agent_context
from multiagent_store.orchestration.models import AgentStep, OrchestrationType
from multiagent_store.orchestration.routing import keyword_route, model_route
from multiagent_store.orchestration.state import OrchestrationState

TRIAGE = "triage"


class HandoffOrchestrationService(GraphOrchestrationService):
    orchestration_type = OrchestrationType.handoff

    def recursion_limit(self) -> int:
        return len(self._roster) + 10

    def build_graph(self) -> StateGraph:
        graph = StateGraph(OrchestrationState)
        graph.add_node(TRIAGE, self._triage)
        graph.add_edge(START, TRIAGE)

        targets = {name: name for name in self._roster.names}
        targets[END] = END
        graph.add_conditional_edges(TRIAGE, _next_agent, targets)
        for agent in self._roster:
            graph.add_node(agent.name, self._specialist(agent))
            graph.add_conditional_edges(agent.name, _next_agent, targets)
        return graph

    async def _triage(self, state: OrchestrationState) -> dict[str, Any]:
        query = state["query"]
        if self._chat is not None:
            first = await model_route(self._chat, query, self._roster.names)
        else:
            first = keyword_route(query)
        step = AgentStep(agent=TRIAGE, action="route", result=f"Routing to the {first} agent.")
        return {"steps": [step], "next_agent": first, "visited": [], "handoffs": 0}

    def _specialist(self, agent: RetailAgent) -> Node:
        max_handoffs = self._settings.max_handoffs

        async def _node(state: OrchestrationState) -> dict[str, Any]:
            out = await agent.run(agent_context(state))
            visited = [*state.get("visited", []), agent.name]
            handoffs = int(state.get("handoffs", 0))

            target = out.handoff_to
            if target is None or target in visited or handoffs >= max_handoffs:
                target = None
            else:
                handoffs += 1

            return {
                "steps": [out.step],
                "facts": out.facts,
                "visited": visited,
                "handoffs": handoffs,
                "next_agent": target,
            }

        return _node


def _next_agent(state: OrchestrationState) -> str:
    return state.get("next_agent") or END
