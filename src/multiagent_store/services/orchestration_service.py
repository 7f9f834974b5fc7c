"""
multiagent_store.services.orchestration_service

Composition of the agent roster and the five strategy services.

Responsibilities:
- Bind the catalog lookup to the request's DB session.
- Build one service per orchestration type over a shared roster.
- Expose them through an `OrchestrationDispatcher`.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from multiagent_store.agents.catalog import CatalogLookup, StoreLayout
from multiagent_store.agents.chat import ChatModelClient
from multiagent_store.agents.retail import build_roster
from multiagent_store.db.repositories.products import ProductRepo
from multiagent_store.orchestration.base import GraphOrchestrationService
from multiagent_store.orchestration.dispatcher import OrchestrationDispatcher
from multiagent_store.orchestration.strategies import (
    ConcurrentOrchestrationService,
    GroupChatOrchestrationService,
    HandoffOrchestrationService,
    MagenticOrchestrationService,
    SequentialOrchestrationService,
)
from multiagent_store.settings import Settings

STRATEGIES: tuple[type[GraphOrchestrationService], ...] = (
    SequentialOrchestrationService,
    ConcurrentOrchestrationService,
    HandoffOrchestrationService,
    GroupChatOrchestrationService,
    MagenticOrchestrationService,
)


def build_dispatcher(
    *,
    session: AsyncSession,
    settings: Settings,
    chat: ChatModelClient | None = None,
) -> OrchestrationDispatcher:
    roster = build_roster(
        catalog=CatalogLookup(ProductRepo(session)),
        layout=StoreLayout(aisles=settings.store_aisles),
        chat=chat,
    )
    return OrchestrationDispatcher(
        {
            cls.orchestration_type: cls(roster=roster, settings=settings, chat=chat)
            for cls in STRATEGIES
        }
    )


# --- Module Notes -----------------------------------------------------------
# Orchestrations only read the catalog, so this layer never commits.
