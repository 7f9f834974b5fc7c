"""
multiagent_store.orchestration.strategies.group_chat

Round-robin group chat. A manager node picks each speaker in roster order;
speakers see the full transcript and ledger.

The chat ends when, after every agent has spoken at least once, either the
route is planned or a whole round went by without new facts. It never runs
more than `groupchat_max_rounds` turns.
"""

from __future__ import annotations

from typing import Any

from langgraph.graph import END, START, StateGraph

from multiagent_store.agents.base import RetailAgent
from multiagent_store.orchestration.base import (
    GraphOrchestrationService,
    Node,
    agent_context,
    made_progress,
)
from multiagent_store.orchestration.models import AgentStep, MultiAgentRequest, OrchestrationType
from multiagent_store.orchestration.state import OrchestrationState

MANAGER = "chat_manager"


class GroupChatOrchestrationService(GraphOrchestrationService):
    orchestration_type = OrchestrationType.groupchat

    def recursion_limit(self) -> int:
        # Each turn is two supersteps (manager + speaker).
        return 2 * self._settings.groupchat_max_rounds + 10

    def initial_state(self, request: MultiAgentRequest) -> OrchestrationState:
        state = super().initial_state(request)
        state.update({"turn": 0, "stale_turns": 0, "done": False, "next_agent": None})
        return state

    def build_graph(self) -> StateGraph:
        graph = StateGraph(OrchestrationState)
        graph.add_node(MANAGER, self._manager)
        graph.add_edge(START, MANAGER)

        targets = {name: name for name in self._roster.names}
        targets[END] = END
        graph.add_conditional_edges(MANAGER, _next_speaker, targets)
        for agent in self._roster:
            graph.add_node(agent.name, _speaker(agent))
            graph.add_edge(agent.name, MANAGER)
        return graph

    async def _manager(self, state: OrchestrationState) -> dict[str, Any]:
        turn = int(state.get("turn", 0))
        size = len(self._roster)
        reason = None
        if turn >= self._settings.groupchat_max_rounds:
            reason = f"reached the {self._settings.groupchat_max_rounds}-turn limit"
        elif turn >= size and state.get("facts", {}).get("navigation"):
            reason = "the shopper has products, locations and a route"
        elif turn >= size and int(state.get("stale_turns", 0)) >= size:
            reason = "a full round produced nothing new"

        if reason is None:
            return {"next_agent": self._roster.names[turn % size]}

        closing = AgentStep(
            agent=MANAGER,
            action="conclude",
            result=f"Conversation ended after {turn} turn(s): {reason}.",
        )
        return {"steps": [closing], "next_agent": None, "done": True}


def _speaker(agent: RetailAgent) -> Node:
    async def _node(state: OrchestrationState) -> dict[str, Any]:
        out = await agent.run(agent_context(state))
        stale = 0 if made_progress(out) else int(state.get("stale_turns", 0)) + 1
        return {
            "steps": [out.step],
            "facts": out.facts,
            "turn": int(state.get("turn", 0)) + 1,
            "stale_turns": stale,
        }

    return _node


def _next_speaker(state: OrchestrationState) -> str:
    if state.get("done"):
        return END
    return state.get("next_agent") or END
