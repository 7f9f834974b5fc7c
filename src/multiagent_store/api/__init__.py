"""
multiagent_store.api

API package for the Multi-Agent Store Assistant.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request validation + delegation to repositories/services.
