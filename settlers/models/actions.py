"""Pydantic action schemas for every legal game action.

Each action subclass carries the data needed to apply that action to a
GameState.  The ActionResult carries the outcome back to the caller.
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Literal

import pydantic


class ActionType(enum.StrEnum):
    """Discriminator values for every legal action type."""

    PLACE_SETTLEMENT = 'place_settlement'
    PLACE_ROAD = 'place_road'
    PLACE_CITY = 'place_city'
    ROLL_DICE = 'roll_dice'
    END_TURN = 'end_turn'


class BaseAction(pydantic.BaseModel):
    """Base for all game actions. Every action identifies its type and acting player."""

    player_index: int


class PlaceSettlement(BaseAction):
    """Place a settlement on a vertex."""

    action_type: Literal[ActionType.PLACE_SETTLEMENT] = ActionType.PLACE_SETTLEMENT
    vertex_id: int


class PlaceRoad(BaseAction):
    """Place a road on an edge."""

    action_type: Literal[ActionType.PLACE_ROAD] = ActionType.PLACE_ROAD
    edge_id: int


class PlaceCity(BaseAction):
    """Upgrade an existing settlement to a city on a vertex."""

    action_type: Literal[ActionType.PLACE_CITY] = ActionType.PLACE_CITY
    vertex_id: int


class RollDice(BaseAction):
    """Roll the two dice to start a main-phase turn."""

    action_type: Literal[ActionType.ROLL_DICE] = ActionType.ROLL_DICE


class EndTurn(BaseAction):
    """Pass without building."""

    action_type: Literal[ActionType.END_TURN] = ActionType.END_TURN


# Discriminated union of all action types for deserialization.
Action = Annotated[
    PlaceSettlement | PlaceRoad | PlaceCity | RollDice | EndTurn,
    pydantic.Field(discriminator='action_type'),
]


class ActionResult(pydantic.BaseModel):
    """Result returned by the processor after attempting to apply an action.

    The updated GameState is carried as ``Any`` here to avoid a circular
    import with ``game_state.py``; callers in the engine layer cast it to
    ``GameState`` explicitly.
    """

    success: bool
    error_message: str | None = None
    # Updated game state after the action (None on failure).
    updated_state: Any | None = None
