"""
multiagent_store.orchestration.strategies

One module per orchestration strategy.
"""

from multiagent_store.orchestration.strategies.concurrent import ConcurrentOrchestrationService
from multiagent_store.orchestration.strategies.group_chat import GroupChatOrchestrationService
from multiagent_store.orchestration.strategies.handoff import HandoffOrchestrationService
from multiagent_store.orchestration.strategies.magentic import MagenticOrchestrationService
from multiagent_store.orchestration.strategies.sequential import SequentialOrchestrationService

__all__ = [
    "ConcurrentOrchestrationService",
    "GroupChatOrchestrationService",
    "HandoffOrchestrationService",
    "MagenticOrchestrationService",
    "SequentialOrchestrationService",
]
