from __future__ import annotations

from langgraph.graph import END, START, StateGraph

from multiagent_store.orchestration.base import GraphOrchestrationService, agent_node
from multiagent_store.orchestration.models import OrchestrationType
from multiagent_store.orchestration.state import OrchestrationState


class SequentialOrchestrationService(GraphOrchestrationService):
    """
    inventory -> matchmaking -> location -> navigation, each agent reading the
    transcript and ledger left by the ones before it.
    """

    orchestration_type = OrchestrationType.sequential

    def build_graph(self) -> StateGraph:
        graph = StateGraph(OrchestrationState)
        previous = START
        for agent in self._roster:
            graph.add_node(agent.name, agent_node(agent))
            graph.add_edge(previous, agent.name)
            previous = agent.name
        graph.add_edge(previous, END)
        return graph
