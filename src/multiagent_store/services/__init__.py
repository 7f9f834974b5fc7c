"""
multiagent_store.services

Service-layer package.

Responsibilities:
- Wire request-scoped resources (DB session, chat client) into agents and strategies.
"""

# Package marker.
