"""
multiagent_store.api.routers

One router module per API area (health, catalog, multi-agent assist).
"""
