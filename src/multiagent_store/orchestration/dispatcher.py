from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from multiagent_store.orchestration.base import AgentOrchestrationService
from multiagent_store.orchestration.models import OrchestrationType


class OrchestrationDispatcher:
    """
    Maps an orchestration tag to its service. Unrecognized tags fall back to
    the sequential service.
    """

    def __init__(self, services: Mapping[OrchestrationType, AgentOrchestrationService]) -> None:
        if OrchestrationType.sequential not in services:
            raise ValueError("a sequential orchestration service is required as the fallback")
        self._services = dict(services)

    def get(self, tag: Any) -> AgentOrchestrationService:
        key = OrchestrationType.parse(tag)
        return self._services.get(key, self._services[OrchestrationType.sequential])
