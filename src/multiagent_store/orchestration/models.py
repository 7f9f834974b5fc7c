"""
multiagent_store.orchestration.models

Request/response contract of the multi-agent assist endpoints.

Responsibilities:
- `OrchestrationType`: the closed set of strategies, with lenient parsing.
- `MultiAgentRequest` / `MultiAgentResponse` and their nested records.
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import Field, field_validator

from multiagent_store.schemas import CamelModel, Price


class OrchestrationType(enum.StrEnum):
    sequential = "sequential"
    concurrent = "concurrent"
    handoff = "handoff"
    groupchat = "groupchat"
    magentic = "magentic"

    @classmethod
    def parse(cls, raw: Any) -> OrchestrationType:
        """
        Lenient tag parsing: member values, member names in any case ("GroupChat",
        "group_chat"), and integer ordinals 0..4. Anything else is `sequential`.
        """

        if isinstance(raw, cls):
            return raw
        if isinstance(raw, bool):
            return cls.sequential
        if isinstance(raw, int):
            members = list(cls)
            return members[raw] if 0 <= raw < len(members) else cls.sequential
        if isinstance(raw, str):
            key = raw.strip().lower().replace("_", "").replace("-", "").replace(" ", "")
            if key.isdigit():
                return cls.parse(int(key))
            try:
                return cls(key)
            except ValueError:
                return cls.sequential
        return cls.sequential


ORCHESTRATION_DESCRIPTIONS: dict[OrchestrationType, str] = {
    OrchestrationType.sequential: (
        "Agents run one after another; each builds on the previous agent's output."
    ),
    OrchestrationType.concurrent: (
        "All agents work on the query in parallel; their results are aggregated."
    ),
    OrchestrationType.handoff: (
        "A triage step picks a specialist, which hands off to the next specialist as needed."
    ),
    OrchestrationType.groupchat: (
        "Agents take turns in a managed conversation, each seeing the transcript so far."
    ),
    OrchestrationType.magentic: (
        "A manager plans the work, dispatches agents and tracks progress until done."
    ),
}


class GeoLocation(CamelModel):
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)


class MultiAgentRequest(CamelModel):
    product_query: str | None = None
    orchestration_type: OrchestrationType = OrchestrationType.sequential
    user_id: str | None = Field(default=None, max_length=256)
    location: GeoLocation | None = None

    @field_validator("orchestration_type", mode="before")
    @classmethod
    def _lenient_orchestration_type(cls, v: Any) -> OrchestrationType:
        return OrchestrationType.parse(v)

    @property
    def has_query(self) -> bool:
        return bool(self.product_query and self.product_query.strip())


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class AgentStep(CamelModel):
    agent: str
    action: str
    result: str
    timestamp: datetime = Field(default_factory=_utcnow)


class ProductAlternative(CamelModel):
    product_id: int
    name: str
    price: Price
    aisle: int | None = None
    section: str | None = None


class NavigationStep(CamelModel):
    direction: str
    description: str
    landmark: str | None = None


class NavigationInstructions(CamelModel):
    start_location: str
    steps: list[NavigationStep] = Field(default_factory=list)
    estimated_time: str


class MultiAgentResponse(CamelModel):
    orchestration_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    orchestration_type: OrchestrationType
    orchestration_description: str
    steps: list[AgentStep] = Field(default_factory=list)
    alternatives: list[ProductAlternative] = Field(default_factory=list)
    navigation_instructions: NavigationInstructions | None = None
    mermaid_workflow_representation: str = ""
