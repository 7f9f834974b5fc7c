"""
multiagent_store.orchestration

Multi-agent orchestration package (LangGraph state graphs).

Responsibilities:
- Request/response contract and the orchestration-type enum.
- Graph state schema and reducers.
- One orchestration service per strategy, plus the tag dispatcher.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Call sites should go through `OrchestrationDispatcher`; strategies are interchangeable.
