"""
multiagent_store.orchestration.strategies.magentic

Manager-led orchestration in the Magentic-One style.

The manager drafts a plan (ordered agent names), then loops: check the fact
ledger, dispatch the next planned agent, record its facts. When an agent adds
nothing the manager re-plans once by putting matchmaking next. The loop stops
when the route is planned, the plan is exhausted, or `magentic_max_rounds`
agent calls have run; a final manager step summarizes the ledger.
"""

from __future__ import annotations

from typing import Any

from langgraph.graph import END, START, StateGraph

from multiagent_store.agents.base import RetailAgent
from multiagent_store.agents.chat import ChatMessage
from multiagent_store.agents.retail import INVENTORY, LOCATION, MATCHMAKING, NAVIGATION
from multiagent_store.orchestration.base import (
    GraphOrchestrationService,
    Node,
    agent_context,
    made_progress,
)
from multiagent_store.orchestration.models import AgentStep, MultiAgentRequest, OrchestrationType
from multiagent_store.orchestration.routing import intents
from multiagent_store.orchestration.state import OrchestrationState

MANAGER = "magentic_manager"
PLANNER = "planner"
PROGRESS = "progress"
FINAL = "final_answer"


def draft_plan(query: str) -> list[str]:
    plan = [INVENTORY]
    if MATCHMAKING in intents(query):
        plan.append(MATCHMAKING)
    plan += [LOCATION, NAVIGATION]
    return plan


class MagenticOrchestrationService(GraphOrchestrationService):
    orchestration_type = OrchestrationType.magentic

    def recursion_limit(self) -> int:
        # planner + final + two supersteps (progress + worker) per round + slack.
        return 2 * self._settings.magentic_max_rounds + 10

    def initial_state(self, request: MultiAgentRequest) -> OrchestrationState:
        state = super().initial_state(request)
        state.update({"plan": [], "replanned": False, "rounds": 0, "next_agent": None})
        return state

    def build_graph(self) -> StateGraph:
        graph = StateGraph(OrchestrationState)
        graph.add_node(PLANNER, self._planner)
        graph.add_node(PROGRESS, self._progress)
        graph.add_node(FINAL, self._final_answer)

        graph.add_edge(START, PLANNER)
        graph.add_edge(PLANNER, PROGRESS)

        targets = {name: name for name in self._roster.names}
        targets[FINAL] = FINAL
        graph.add_conditional_edges(PROGRESS, _dispatch, targets)
        for agent in self._roster:
            graph.add_node(agent.name, self._worker(agent))
            graph.add_edge(agent.name, PROGRESS)
        graph.add_edge(FINAL, END)
        return graph

    async def _planner(self, state: OrchestrationState) -> dict[str, Any]:
        plan = draft_plan(state["query"])
        result = "Plan: " + " -> ".join(plan) + "."
        if self._chat is not None:
            result = await self._chat.complete(
                system="You are the manager of a team of store agents. Explain the plan briefly.",
                messages=[ChatMessage(role="user", content=f"Query: {state['query']}\n{result}")],
            )
        step = AgentStep(agent=MANAGER, action="create_plan", result=result)
        return {"steps": [step], "plan": plan}

    async def _progress(self, state: OrchestrationState) -> dict[str, Any]:
        plan = list(state.get("plan", []))
        if state.get("facts", {}).get("navigation") or not plan:
            return {"next_agent": FINAL}
        if int(state.get("rounds", 0)) >= self._settings.magentic_max_rounds:
            return {"next_agent": FINAL}
        return {"next_agent": plan[0]}

    def _worker(self, agent: RetailAgent) -> Node:
        async def _node(state: OrchestrationState) -> dict[str, Any]:
            out = await agent.run(agent_context(state))
            remaining = list(state.get("plan", [])[1:])
            update: dict[str, Any] = {
                "steps": [out.step],
                "facts": out.facts,
                "rounds": int(state.get("rounds", 0)) + 1,
            }
            if (
                not made_progress(out)
                and not state.get("replanned")
                and agent.name != MATCHMAKING
                and MATCHMAKING not in remaining
            ):
                remaining.insert(0, MATCHMAKING)
                update["replanned"] = True
                update["steps"].append(
                    AgentStep(
                        agent=MANAGER,
                        action="replan",
                        result=f"The {agent.name} agent found nothing; asking matchmaking next.",
                    )
                )
            update["plan"] = remaining
            return update

        return _node

    async def _final_answer(self, state: OrchestrationState) -> dict[str, Any]:
        facts = state.get("facts", {})
        parts = [
            f"{len(facts.get('matches', []))} matching product(s)",
            f"{len(facts.get('alternatives', []))} alternative(s)",
            f"{len(facts.get('placements', []))} located product(s)",
        ]
        route = facts.get("navigation")
        if route:
            parts.append(f"a route of about {route['estimated_time']}")
        result = f"Completed after {int(state.get('rounds', 0))} agent call(s): " + ", ".join(parts)
        step = AgentStep(agent=MANAGER, action="final_answer", result=result + ".")
        return {"steps": [step]}


def _dispatch(state: OrchestrationState) -> str:
    return state.get("next_agent") or FINAL
