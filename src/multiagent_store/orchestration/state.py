"""
multiagent_store.orchestration.state

Typed state schema shared by every strategy graph.

Responsibilities:
- Define the contract between nodes (inputs/outputs).
- Declare which keys merge through reducers when nodes run in parallel.
"""

from __future__ import annotations

from typing import Annotated, Any, TypedDict

from multiagent_store.orchestration.models import AgentStep
from multiagent_store.orchestration.reducers import append_steps, merge_dicts


class OrchestrationState(TypedDict, total=False):
    query: str

    # Transcript and shared fact ledger (see agents.retail for ledger keys).
    steps: Annotated[list[AgentStep], append_steps]
    facts: Annotated[dict[str, Any], merge_dicts]

    # Concurrent: per-agent outputs collected before the fan-in node orders them.
    branch_steps: Annotated[dict[str, AgentStep], merge_dicts]

    # Handoff
    next_agent: str | None
    visited: list[str]
    handoffs: int

    # Group chat
    turn: int
    stale_turns: int

    # Magentic
    plan: list[str]
    replanned: bool
    rounds: int

    done: bool
