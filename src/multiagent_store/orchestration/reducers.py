"""
multiagent_store.orchestration.reducers

Reducers define how LangGraph merges partial state updates from nodes.

When several agents run in the same superstep (concurrent strategy) they update
the same keys; reducers make the merge deterministic.
"""

from __future__ import annotations

from typing import Any

from multiagent_store.orchestration.models import AgentStep


def append_steps(left: list[AgentStep] | None, right: list[AgentStep] | None) -> list[AgentStep]:
    """
    Append-only reducer for the transcript. Nodes return `{"steps": [step]}`.
    """

    if not left:
        return list(right or [])
    if not right:
        return list(left)
    return [*left, *right]


def merge_dicts(left: dict[str, Any] | None, right: dict[str, Any] | None) -> dict[str, Any]:
    """
    Shallow dict merge reducer (right wins on key collision).
    """

    if not left:
        return dict(right or {})
    if not right:
        return dict(left)
    return {**left, **right}
