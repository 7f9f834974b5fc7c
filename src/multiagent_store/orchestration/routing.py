"""
multiagent_store.orchestration.routing

Intent routing shared by the handoff triage and the magentic planner.

Responsibilities:
- Keyword intent detection over the shopper query.
- Optional chat-model routing, falling back to keywords on unusable replies.
"""

from __future__ import annotations

from multiagent_store.agents.chat import ChatMessage, ChatModelClient
from multiagent_store.agents.retail import INVENTORY, LOCATION, MATCHMAKING, NAVIGATION
from multiagent_store.observability.logging import get_logger

log = get_logger(__name__)

# Checked in order; first hit wins.
_INTENT_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (NAVIGATION, ("direction", "navigate", "route", "get to", "way to", "walk")),
    (LOCATION, ("where", "aisle", "locate", "located", "shelf", "section")),
    (MATCHMAKING, ("alternative", "instead", "similar", "cheaper", "recommend", "suggest")),
)


def intents(query: str) -> set[str]:
    q = query.lower()
    return {agent for agent, words in _INTENT_KEYWORDS if any(w in q for w in words)}


def keyword_route(query: str) -> str:
    q = query.lower()
    for agent, words in _INTENT_KEYWORDS:
        if any(w in q for w in words):
            return agent
    return INVENTORY


async def model_route(chat: ChatModelClient, query: str, candidates: tuple[str, ...]) -> str:
    reply = await chat.complete(
        system=(
            "You are the triage agent of a store assistant. Decide which specialist "
            f"should handle the shopper's request. Answer with exactly one of: "
            f"{', '.join(candidates)}."
        ),
        messages=[ChatMessage(role="user", content=query)],
        temperature=0.0,
    )
    picked = reply.strip().lower()
    for name in candidates:
        if name in picked:
            return name
    log.warning("model_route_unusable", reply=reply[:200])
    return keyword_route(query)
