"""Resource production for a dice roll."""

from __future__ import annotations

import collections
from collections.abc import Iterable

import pydantic

from ..models import board, player


class Production(pydantic.BaseModel):
    """One building's yield from one tile."""

    model_config = pydantic.ConfigDict(frozen=True)

    player_index: int
    resource: board.ResourceType
    amount: int


def produce(brd: board.Board, roll: int) -> list[Production]:
    """Return the production events triggered by *roll*.

    Every tile whose token equals *roll* yields, for each occupied corner,
    one event of ``building.resource_multiplier`` units to the building's
    owner.  Events come in tile order, then in each tile's corner order.  A
    player with buildings on several matching tiles gets one event per tile.
    The robber roll and the desert produce nothing.
    """
    if roll == board.NO_PRODUCTION_ROLL:
        return []

    events: list[Production] = []
    for tile in brd.tiles:
        if tile.number_token != roll:
            continue
        resource = tile.resource
        if resource is None:
            continue
        for vid in tile.vertex_ids:
            building = brd.vertices[vid].building
            if building is None:
                continue
            events.append(
                Production(
                    player_index=building.player_index,
                    resource=resource,
                    amount=building.resource_multiplier,
                )
            )
    return events


def summarize(events: Iterable[Production]) -> dict[int, player.Resources]:
    """Total *events* per player."""
    totals: dict[int, player.Resources] = collections.defaultdict(player.Resources)
    for event in events:
        current = totals[event.player_index]
        totals[event.player_index] = current.with_resource(
            event.resource, current.get(event.resource) + event.amount
        )
    return dict(totals)
