"""
tests.test_agents

Query terms, store layout and route planning used by the retail agents.
"""

from __future__ import annotations

import pytest

from multiagent_store.agents.catalog import StoreLayout, query_terms
from multiagent_store.agents.retail import AgentRoster, InventoryAgent, plan_route
from multiagent_store.orchestration.routing import intents, keyword_route


def test_query_terms_drop_stopwords_and_plurals() -> None:
    assert query_terms("Do you have any camping tents?") == ["camping", "tent"]
    assert query_terms("boxes of glass") == ["box", "glass"]
    assert query_terms("Boots, boots and BOOTS") == ["boot"]
    assert query_terms("is it ok?") == []


@pytest.mark.parametrize(
    ("product_id", "aisle", "section"),
    [(1, 1, "A"), (12, 12, "A"), (13, 1, "B"), (30, 6, "C"), (49, 1, "A")],
)
def test_store_layout_places_products(product_id: int, aisle: int, section: str) -> None:
    spot = StoreLayout(aisles=12).place(product_id)
    assert (spot.aisle, spot.section) == (aisle, section)


def test_store_layout_needs_an_aisle() -> None:
    with pytest.raises(ValueError):
        StoreLayout(aisles=0)


def test_plan_route_visits_aisles_in_order() -> None:
    placements = [
        {"product_id": 3, "name": "Rain Jacket", "aisle": 3, "section": "A"},
        {"product_id": 1, "name": "Flashlight", "aisle": 1, "section": "A"},
        {"product_id": 15, "name": "Stove", "aisle": 3, "section": "B"},
    ]
    route = plan_route(placements)

    assert route["start_location"] == "Store entrance"
    directions = [s["direction"] for s in route["steps"]]
    assert directions == ["Start", "Walk straight", "Walk past 1 aisle(s)", "Finish"]
    assert "Flashlight" in route["steps"][1]["description"]
    assert "Rain Jacket (section A); Stove (section B)" in route["steps"][2]["description"]
    assert route["estimated_time"] == "5 minutes"


@pytest.mark.parametrize(
    ("query", "agent"),
    [
        ("How do I get to the tents?", "navigation"),
        ("Where are the lanterns?", "location"),
        ("Anything cheaper than this stove?", "matchmaking"),
        ("camping tent", "inventory"),
    ],
)
def test_keyword_route(query: str, agent: str) -> None:
    assert keyword_route(query) == agent


def test_intents_collects_every_hit() -> None:
    assert intents("where is something similar?") == {"location", "matchmaking"}
    assert intents("tent") == set()


def test_roster_requires_every_agent() -> None:
    with pytest.raises(ValueError):
        AgentRoster([InventoryAgent(catalog=None)])  # type: ignore[arg-type]
