"""Player data models.

Tracks a player's resources, remaining build pieces and victory points
throughout the game.
"""

from __future__ import annotations

import enum

import pydantic

from .board import ResourceType


class PieceType(enum.StrEnum):
    """Purchasable pieces."""

    ROAD = 'road'
    SETTLEMENT = 'settlement'
    CITY = 'city'


class Resources(pydantic.BaseModel):
    """A collection of resource cards held by a player."""

    wood: int = 0
    brick: int = 0
    wheat: int = 0
    sheep: int = 0
    ore: int = 0

    def total(self) -> int:
        """Return the total number of resource cards."""
        return self.wood + self.brick + self.wheat + self.sheep + self.ore

    def can_afford(self, cost: Resources) -> bool:
        """Return True if these resources cover *cost*."""
        return all(self.get(r) >= cost.get(r) for r in ResourceType)

    def subtract(self, cost: Resources) -> Resources:
        """Return new Resources with cost subtracted. Does not validate sufficiency."""
        return Resources(
            wood=self.wood - cost.wood,
            brick=self.brick - cost.brick,
            wheat=self.wheat - cost.wheat,
            sheep=self.sheep - cost.sheep,
            ore=self.ore - cost.ore,
        )

    def add(self, other: Resources) -> Resources:
        """Return new Resources with another set added."""
        return Resources(
            wood=self.wood + other.wood,
            brick=self.brick + other.brick,
            wheat=self.wheat + other.wheat,
            sheep=self.sheep + other.sheep,
            ore=self.ore + other.ore,
        )

    def get(self, resource_type: ResourceType) -> int:
        """Return the count for a specific resource type."""
        return getattr(self, resource_type.value, 0)

    def with_resource(self, resource_type: ResourceType, amount: int) -> Resources:
        """Return new Resources with one field replaced."""
        data = self.model_dump()
        data[resource_type.value] = amount
        return Resources(**data)


# Inventory field tracking each piece type.
_INVENTORY_FIELD: dict[PieceType, str] = {
    PieceType.ROAD: 'roads_remaining',
    PieceType.SETTLEMENT: 'settlements_remaining',
    PieceType.CITY: 'cities_remaining',
}


class BuildInventory(pydantic.BaseModel):
    """Remaining building pieces a player can still place on the board."""

    roads_remaining: int = 15
    settlements_remaining: int = 5
    cities_remaining: int = 4

    def remaining(self, piece: PieceType) -> int:
        """Return how many pieces of *piece* are left."""
        return getattr(self, _INVENTORY_FIELD[piece])

    def with_remaining(self, piece: PieceType, count: int) -> BuildInventory:
        """Return a new inventory with one counter replaced."""
        data = self.model_dump()
        data[_INVENTORY_FIELD[piece]] = count
        return BuildInventory(**data)


class Player(pydantic.BaseModel):
    """A player's complete state."""

    player_index: int
    name: str
    color: str
    resources: Resources = pydantic.Field(default_factory=Resources)
    build_inventory: BuildInventory = pydantic.Field(default_factory=BuildInventory)
    victory_points: int = 0


class CostTable(pydantic.BaseModel):
    """Resource cost of each purchasable piece.

    Built once and handed to whoever needs prices; never mutated.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    road: Resources
    settlement: Resources
    city: Resources

    def cost_of(self, piece: PieceType) -> Resources:
        """Return the cost of *piece*."""
        return getattr(self, piece.value)


# Standard build costs.
STANDARD_COSTS = CostTable(
    road=Resources(wood=1, brick=1),
    settlement=Resources(wood=1, brick=1, wheat=1, sheep=1),
    city=Resources(wheat=2, ore=3),
)
