"""
multiagent_store.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the chat client.
- Build the request-scoped orchestration dispatcher.
- Encapsulate app.state access patterns (engine/sessionmaker/chat client).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from multiagent_store.agents.chat import ChatModelClient
from multiagent_store.orchestration.dispatcher import OrchestrationDispatcher
from multiagent_store.services.orchestration_service import build_dispatcher
from multiagent_store.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The app factory pins its Settings on app.state; tests build apps with their own.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created during app startup in `multiagent_store.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Routers commit explicitly on writes.
    async with session_factory() as session:
        yield session


def chat_client_dep(request: Request) -> ChatModelClient | None:
    # None when agents run with the local backend.
    return getattr(request.app.state, "chat_client", None)


def dispatcher_dep(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    chat: ChatModelClient | None = Depends(chat_client_dep),
) -> OrchestrationDispatcher:
    return build_dispatcher(session=session, settings=settings, chat=chat)
