"""
multiagent_store.agents.retail

The four store agents and the roster that groups them.

Responsibilities:
- inventory: direct catalog matches for the query.
- matchmaking: alternatives (related products, else the cheapest ones).
- location: aisle/section for matched or alternative products.
- navigation: walking directions from the entrance to the located aisles.

Ledger keys written: `matches`, `alternatives`, `placements`, `navigation`.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from multiagent_store.agents.base import AgentContext, Findings, RetailAgent
from multiagent_store.agents.catalog import CatalogLookup, ProductFact, StoreLayout
from multiagent_store.agents.chat import ChatModelClient

INVENTORY = "inventory"
MATCHMAKING = "matchmaking"
LOCATION = "location"
NAVIGATION = "navigation"

ROSTER_ORDER: tuple[str, ...] = (INVENTORY, MATCHMAKING, LOCATION, NAVIGATION)

_MAX_ALTERNATIVES = 3
_START_LOCATION = "Store entrance"


def _names(items: list[dict[str, Any]]) -> str:
    return ", ".join(str(i["name"]) for i in items)


class InventoryAgent(RetailAgent):
    name = INVENTORY
    instructions = (
        "You are the inventory agent of an outdoor and home-improvement store. "
        "You report which catalog products match what the shopper asked for."
    )

    def __init__(self, *, catalog: CatalogLookup, chat: ChatModelClient | None = None) -> None:
        super().__init__(chat=chat)
        self._catalog = catalog

    async def find(self, ctx: AgentContext) -> Findings:
        matches = [p.as_dict() for p in await self._catalog.matching(ctx.query)]
        if not matches:
            return Findings(
                action="search_inventory",
                summary=f"No catalog products match '{ctx.query}'.",
                facts={"matches": []},
                handoff_to=MATCHMAKING,
            )
        return Findings(
            action="search_inventory",
            summary=f"Found {len(matches)} matching product(s): {_names(matches)}.",
            facts={"matches": matches},
            handoff_to=LOCATION,
        )


class MatchmakingAgent(RetailAgent):
    name = MATCHMAKING
    instructions = (
        "You are the matchmaking agent of an outdoor and home-improvement store. "
        "You suggest alternative products the shopper may also consider."
    )

    def __init__(self, *, catalog: CatalogLookup, chat: ChatModelClient | None = None) -> None:
        super().__init__(chat=chat)
        self._catalog = catalog

    async def find(self, ctx: AgentContext) -> Findings:
        matches = ctx.facts.get("matches")
        if matches is None:
            matches = [p.as_dict() for p in await self._catalog.matching(ctx.query)]
        exclude = {int(m["product_id"]) for m in matches}

        picks: list[ProductFact] = await self._catalog.related(ctx.query, exclude_ids=exclude)
        basis = "related"
        if not picks:
            picks = await self._catalog.cheapest(limit=_MAX_ALTERNATIVES, exclude_ids=exclude)
            basis = "budget"
        alternatives = [p.as_dict() for p in picks[:_MAX_ALTERNATIVES]]

        if not alternatives:
            return Findings(
                action="suggest_alternatives",
                summary="There are no other products in the catalog to suggest.",
                facts={"alternatives": []},
            )
        label = "Related alternatives" if basis == "related" else "Budget-friendly picks"
        return Findings(
            action="suggest_alternatives",
            summary=f"{label}: {_names(alternatives)}.",
            facts={"alternatives": alternatives},
            handoff_to=LOCATION,
        )


class LocationAgent(RetailAgent):
    name = LOCATION
    instructions = (
        "You are the location agent of an outdoor and home-improvement store. "
        "You tell the shopper where products are shelved (aisle and section)."
    )

    def __init__(
        self,
        *,
        catalog: CatalogLookup,
        layout: StoreLayout,
        chat: ChatModelClient | None = None,
    ) -> None:
        super().__init__(chat=chat)
        self._catalog = catalog
        self._layout = layout

    async def find(self, ctx: AgentContext) -> Findings:
        wanted = _unique_products(ctx.facts.get("matches"), ctx.facts.get("alternatives"))
        if not wanted and "matches" not in ctx.facts:
            wanted = [p.as_dict() for p in await self._catalog.matching(ctx.query)]

        placements = []
        for item in wanted:
            spot = self._layout.place(int(item["product_id"]))
            placements.append({**item, "aisle": spot.aisle, "section": spot.section})

        if not placements:
            return Findings(
                action="locate_products",
                summary="Nothing to locate: no products were identified for this query.",
                facts={"placements": []},
            )
        where = "; ".join(
            f"{p['name']} in aisle {p['aisle']}, section {p['section']}" for p in placements
        )
        return Findings(
            action="locate_products",
            summary=f"Located {len(placements)} product(s): {where}.",
            facts={"placements": placements},
            handoff_to=NAVIGATION,
        )


class NavigationAgent(RetailAgent):
    name = NAVIGATION
    instructions = (
        "You are the navigation agent of an outdoor and home-improvement store. "
        "You give the shopper short walking directions through the store."
    )

    def __init__(
        self,
        *,
        catalog: CatalogLookup,
        layout: StoreLayout,
        chat: ChatModelClient | None = None,
    ) -> None:
        super().__init__(chat=chat)
        self._catalog = catalog
        self._layout = layout

    async def find(self, ctx: AgentContext) -> Findings:
        placements = ctx.facts.get("placements")
        if placements is None:
            placements = []
            for p in await self._catalog.matching(ctx.query):
                spot = self._layout.place(p.product_id)
                placements.append({**p.as_dict(), "aisle": spot.aisle, "section": spot.section})

        if not placements:
            return Findings(
                action="plan_route",
                summary="No route needed: there are no product locations to visit.",
                facts={},
            )

        route = plan_route(placements)
        stops = ", ".join(f"aisle {s['aisle']}" for s in _stops(placements))
        return Findings(
            action="plan_route",
            summary=f"Route from the {_START_LOCATION.lower()} via {stops}, "
            f"about {route['estimated_time']}.",
            facts={"navigation": route},
        )


def _unique_products(*groups: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    seen: set[int] = set()
    out: list[dict[str, Any]] = []
    for group in groups:
        for item in group or []:
            pid = int(item["product_id"])
            if pid in seen:
                continue
            seen.add(pid)
            out.append(item)
    return out


def _stops(placements: list[dict[str, Any]]) -> list[dict[str, Any]]:
    # One stop per aisle, visited in ascending aisle order.
    by_aisle: dict[int, list[dict[str, Any]]] = {}
    for p in placements:
        by_aisle.setdefault(int(p["aisle"]), []).append(p)
    return [{"aisle": aisle, "items": by_aisle[aisle]} for aisle in sorted(by_aisle)]


def plan_route(placements: list[dict[str, Any]]) -> dict[str, Any]:
    stops = _stops(placements)
    steps: list[dict[str, Any]] = [
        {
            "direction": "Start",
            "description": (
                f"Enter the store and pick up a basket at the {_START_LOCATION.lower()}."
            ),
            "landmark": "Customer service desk",
        }
    ]
    previous = 0
    for stop in stops:
        aisle = stop["aisle"]
        skipped = aisle - previous - 1
        turn = "Walk straight" if skipped <= 0 else f"Walk past {skipped} aisle(s)"
        items = "; ".join(f"{i['name']} (section {i['section']})" for i in stop["items"])
        steps.append(
            {
                "direction": turn,
                "description": f"Go to aisle {aisle} for {items}.",
                "landmark": f"Aisle {aisle} end cap",
            }
        )
        previous = aisle
    steps.append(
        {
            "direction": "Finish",
            "description": "Head back to the front of the store for checkout.",
            "landmark": "Checkout lanes",
        }
    )
    minutes = 2 + len(stops) + (stops[-1]["aisle"] // 3 if stops else 0)
    return {
        "start_location": _START_LOCATION,
        "steps": steps,
        "estimated_time": f"{minutes} minutes",
    }


class AgentRoster:
    """
    The fixed set of agents every strategy draws from, in roster order.
    """

    def __init__(self, agents: list[RetailAgent]) -> None:
        self._agents = {a.name: a for a in agents}
        missing = [n for n in ROSTER_ORDER if n not in self._agents]
        if missing:
            raise ValueError(f"roster is missing agents: {missing}")

    def __getitem__(self, name: str) -> RetailAgent:
        return self._agents[name]

    def __iter__(self) -> Iterator[RetailAgent]:
        return (self._agents[n] for n in ROSTER_ORDER)

    def __len__(self) -> int:
        return len(ROSTER_ORDER)

    @property
    def names(self) -> tuple[str, ...]:
        return ROSTER_ORDER


def build_roster(
    *,
    catalog: CatalogLookup,
    layout: StoreLayout,
    chat: ChatModelClient | None = None,
) -> AgentRoster:
    return AgentRoster(
        [
            InventoryAgent(catalog=catalog, chat=chat),
            MatchmakingAgent(catalog=catalog, chat=chat),
            LocationAgent(catalog=catalog, layout=layout, chat=chat),
            NavigationAgent(catalog=catalog, layout=layout, chat=chat),
        ]
    )
