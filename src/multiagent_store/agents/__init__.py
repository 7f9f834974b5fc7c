"""
multiagent_store.agents

Retail agent package.

Responsibilities:
- The four store agents (inventory, matchmaking, location, navigation).
- The catalog lookup and chat-model boundaries agents depend on.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Agents never talk to HTTP routers or DB sessions directly; they go through
# `CatalogLookup` and `ChatModelClient`.
