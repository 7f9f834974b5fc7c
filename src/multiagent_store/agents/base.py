"""
multiagent_store.agents.base

Shared agent contract.

Responsibilities:
- `AgentContext`: what an agent sees (query, transcript, shared fact ledger).
- `AgentOutput`: what an agent returns (a step, new facts, optional handoff).
- `RetailAgent`: findings first, phrasing second (template or chat model).
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any

from multiagent_store.agents.chat import ChatMessage, ChatModelClient
from multiagent_store.observability.logging import get_logger
from multiagent_store.orchestration.models import AgentStep

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AgentContext:
    query: str
    transcript: tuple[AgentStep, ...] = ()
    facts: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Findings:
    action: str
    summary: str
    facts: dict[str, Any] = field(default_factory=dict)
    handoff_to: str | None = None


@dataclass(frozen=True, slots=True)
class AgentOutput:
    step: AgentStep
    facts: dict[str, Any]
    handoff_to: str | None = None


class RetailAgent(abc.ABC):
    name: str
    instructions: str

    def __init__(self, *, chat: ChatModelClient | None = None) -> None:
        self._chat = chat

    @abc.abstractmethod
    async def find(self, ctx: AgentContext) -> Findings:
        """
        Compute structured findings for the query from the catalog and the ledger.
        """

    async def run(self, ctx: AgentContext) -> AgentOutput:
        findings = await self.find(ctx)
        result = await self._phrase(ctx, findings)
        log.info(
            "agent_step",
            agent=self.name,
            action=findings.action,
            facts=sorted(findings.facts),
            handoff_to=findings.handoff_to,
        )
        return AgentOutput(
            step=AgentStep(agent=self.name, action=findings.action, result=result),
            facts=dict(findings.facts),
            handoff_to=findings.handoff_to,
        )

    async def _phrase(self, ctx: AgentContext, findings: Findings) -> str:
        if self._chat is None:
            return findings.summary
        return await self._chat.complete(system=self.instructions, messages=_prompt(ctx, findings))


def _prompt(ctx: AgentContext, findings: Findings) -> list[ChatMessage]:
    lines = [f"Shopper query: {ctx.query}"]
    if ctx.transcript:
        lines.append("Conversation so far:")
        lines.extend(f"- {s.agent} ({s.action}): {s.result}" for s in ctx.transcript)
    lines.append(f"Your findings: {findings.summary}")
    lines.append("Reply to the shopper in two or three sentences using only these findings.")
    return [ChatMessage(role="user", content="\n".join(lines))]
