"""
multiagent_store.orchestration.strategies.concurrent

Fan-out/fan-in: every agent works on the bare query in the same superstep, then
an aggregate node orders their steps and summarizes.
"""

from __future__ import annotations

from typing import Any

from langgraph.graph import END, START, StateGraph

from multiagent_store.agents.base import RetailAgent
from multiagent_store.orchestration.base import GraphOrchestrationService, Node, agent_context
from multiagent_store.orchestration.models import AgentStep, OrchestrationType
from multiagent_store.orchestration.state import OrchestrationState

AGGREGATE = "aggregate"


class ConcurrentOrchestrationService(GraphOrchestrationService):
    orchestration_type = OrchestrationType.concurrent

    def build_graph(self) -> StateGraph:
        graph = StateGraph(OrchestrationState)
        for agent in self._roster:
            graph.add_node(agent.name, _branch_node(agent))
            graph.add_edge(START, agent.name)
        graph.add_node(AGGREGATE, self._aggregate)
        # Join: aggregate waits for every branch.
        graph.add_edge(list(self._roster.names), AGGREGATE)
        graph.add_edge(AGGREGATE, END)
        return graph

    async def _aggregate(self, state: OrchestrationState) -> dict[str, Any]:
        branches = state.get("branch_steps", {})
        ordered = [branches[name] for name in self._roster.names if name in branches]
        facts = state.get("facts", {})
        summary = AgentStep(
            agent="orchestrator",
            action="aggregate_results",
            result=(
                f"Combined {len(ordered)} agent responses: "
                f"{len(facts.get('matches', []))} match(es), "
                f"{len(facts.get('alternatives', []))} alternative(s), "
                f"{len(facts.get('placements', []))} located product(s), "
                f"route {'planned' if facts.get('navigation') else 'not needed'}."
            ),
        )
        return {"steps": [*ordered, summary]}


def _branch_node(agent: RetailAgent) -> Node:
    async def _node(state: OrchestrationState) -> dict[str, Any]:
        out = await agent.run(agent_context(state, isolated=True))
        return {"branch_steps": {agent.name: out.step}, "facts": out.facts}

    return _node
