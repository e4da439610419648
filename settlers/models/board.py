"""Board data models.

Defines the hexagonal grid representation using cube coordinates, terrain
types, buildings, roads, vertices, edges, and the Board arena that owns them.
Every cross-reference (adjacency, occupancy, tile boundaries) is an integer
index into the Board's flat lists.
"""

from __future__ import annotations

import enum
import typing

import pydantic

NUM_TILES = 19
NUM_VERTICES = 54
NUM_EDGES = 72

# Token carried by the desert tile, which never produces.
NO_TOKEN = 0
# Dice total that produces nothing.
NO_PRODUCTION_ROLL = 7


class TileType(enum.StrEnum):
    """Terrain tile types and the resource each produces."""

    FOREST = 'forest'  # produces wood
    PASTURE = 'pasture'  # produces sheep
    FIELDS = 'fields'  # produces wheat
    HILLS = 'hills'  # produces brick
    MOUNTAINS = 'mountains'  # produces ore
    DESERT = 'desert'  # produces nothing


class ResourceType(enum.StrEnum):
    """The five resource types."""

    WOOD = 'wood'
    BRICK = 'brick'
    WHEAT = 'wheat'
    SHEEP = 'sheep'
    ORE = 'ore'


# Map from tile type to the resource it produces (desert excluded).
TILE_RESOURCE: dict[TileType, ResourceType] = {
    TileType.FOREST: ResourceType.WOOD,
    TileType.PASTURE: ResourceType.SHEEP,
    TileType.FIELDS: ResourceType.WHEAT,
    TileType.HILLS: ResourceType.BRICK,
    TileType.MOUNTAINS: ResourceType.ORE,
}


class BuildingType(enum.StrEnum):
    """Settlement or upgraded city."""

    SETTLEMENT = 'settlement'
    CITY = 'city'


class BuildingTraits(typing.NamedTuple):
    victory_points: int
    resource_multiplier: int
    upgradeable: bool


BUILDING_TRAITS: dict[BuildingType, BuildingTraits] = {
    BuildingType.SETTLEMENT: BuildingTraits(
        victory_points=1, resource_multiplier=1, upgradeable=True
    ),
    BuildingType.CITY: BuildingTraits(
        victory_points=2, resource_multiplier=2, upgradeable=False
    ),
}


class CubeCoord(pydantic.BaseModel):
    """Cube coordinates for a hex tile. Invariant: q + r + s == 0."""

    model_config = pydantic.ConfigDict(frozen=True)

    q: int
    r: int
    s: int

    @pydantic.model_validator(mode='after')
    def _check_plane(self) -> CubeCoord:
        if self.q + self.r + self.s != 0:
            raise ValueError(
                f'cube coordinate ({self.q}, {self.r}, {self.s}) does not sum to 0'
            )
        return self

    def distance(self, other: CubeCoord) -> int:
        """Return the hex distance between two coordinates."""
        return max(
            abs(self.q - other.q), abs(self.r - other.r), abs(self.s - other.s)
        )


class HexTile(pydantic.BaseModel):
    """A single terrain hex tile.

    ``vertex_ids`` lists the six corners of the hex in rotational order, so
    consecutive entries (wrapping from the last back to the first) are the
    endpoints of the tile's six sides.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    coord: CubeCoord
    tile_type: TileType
    number_token: int = NO_TOKEN  # NO_TOKEN for desert; 2–12 excluding 7
    vertex_ids: tuple[int, int, int, int, int, int]

    @pydantic.model_validator(mode='after')
    def _check_tile(self) -> HexTile:
        if len(set(self.vertex_ids)) != 6:
            raise ValueError(f'tile boundary has repeated vertices: {self.vertex_ids}')
        if self.tile_type == TileType.DESERT:
            if self.number_token != NO_TOKEN:
                raise ValueError('desert tile cannot carry a number token')
        elif (
            not 2 <= self.number_token <= 12
            or self.number_token == NO_PRODUCTION_ROLL
        ):
            raise ValueError(f'invalid number token {self.number_token}')
        return self

    @property
    def resource(self) -> ResourceType | None:
        """The resource this tile produces, or None for the desert."""
        return TILE_RESOURCE.get(self.tile_type)


class Building(pydantic.BaseModel):
    """A settlement or city placed on a vertex."""

    model_config = pydantic.ConfigDict(frozen=True)

    player_index: int
    building_type: BuildingType

    @property
    def victory_points(self) -> int:
        return BUILDING_TRAITS[self.building_type].victory_points

    @property
    def resource_multiplier(self) -> int:
        return BUILDING_TRAITS[self.building_type].resource_multiplier

    @property
    def upgradeable(self) -> bool:
        return BUILDING_TRAITS[self.building_type].upgradeable

    def upgraded(self) -> Building:
        """Return the city that replaces this settlement.

        Raises:
            ValueError: If the building is already a city.
        """
        if not self.upgradeable:
            raise ValueError(f'{self.building_type} cannot be upgraded')
        return Building(player_index=self.player_index, building_type=BuildingType.CITY)


class Road(pydantic.BaseModel):
    """A road placed on an edge."""

    model_config = pydantic.ConfigDict(frozen=True)

    player_index: int


class Vertex(pydantic.BaseModel):
    """An intersection point where settlements and cities can be placed.

    Each vertex is shared by up to three hex tiles and connects to up to three
    adjacent vertices.
    """

    vertex_id: int
    adjacent_vertex_ids: list[int] = pydantic.Field(default_factory=list)
    adjacent_tile_indices: list[int] = pydantic.Field(default_factory=list)
    building: Building | None = None

    @property
    def is_occupied(self) -> bool:
        return self.building is not None

    @property
    def owner(self) -> int | None:
        """player_index of the building here, or None when empty."""
        return self.building.player_index if self.building is not None else None


class Edge(pydantic.BaseModel):
    """A side of a hex tile where roads can be placed."""

    edge_id: int
    vertex_ids: tuple[int, int]  # the two vertices this edge connects
    road: Road | None = None

    @property
    def owner(self) -> int | None:
        """player_index of the road here, or None when empty."""
        return self.road.player_index if self.road is not None else None

    @pydantic.model_validator(mode='after')
    def _check_endpoints(self) -> Edge:
        if self.vertex_ids[0] == self.vertex_ids[1]:
            raise ValueError(f'edge {self.edge_id} is a self-loop')
        return self

    def touches(self, vertex_id: int) -> bool:
        """Return True if *vertex_id* is one of this edge's endpoints."""
        return vertex_id in self.vertex_ids

    def connects(self, vertex_a: int, vertex_b: int) -> bool:
        """Return True if this edge joins the two vertices, in either order."""
        return {vertex_a, vertex_b} == set(self.vertex_ids)

    def other_end(self, vertex_id: int) -> int:
        """Return the endpoint opposite *vertex_id*."""
        a, b = self.vertex_ids
        return b if vertex_id == a else a


class Board(pydantic.BaseModel):
    """The complete board: tiles, vertices and edges indexed by integer ID.

    The structure is fixed once generated; only ``Vertex.building`` and
    ``Edge.road`` change during a game.
    """

    tiles: list[HexTile]
    vertices: list[Vertex]
    edges: list[Edge]

    def tile_at(self, q: int, s: int, r: int) -> HexTile | None:
        """Return the tile at cube coordinates (q, s, r), or None."""
        for tile in self.tiles:
            if tile.coord.q == q and tile.coord.s == s and tile.coord.r == r:
                return tile
        return None

    def vertex(self, vertex_id: int) -> Vertex | None:
        """Return the vertex with *vertex_id*, or None if out of range."""
        if 0 <= vertex_id < len(self.vertices):
            return self.vertices[vertex_id]
        return None

    def edge(self, edge_id: int) -> Edge | None:
        """Return the edge with *edge_id*, or None if out of range."""
        if 0 <= edge_id < len(self.edges):
            return self.edges[edge_id]
        return None

    def find_edge(self, vertex_a: int, vertex_b: int) -> Edge | None:
        """Return the edge joining two vertices regardless of order, or None."""
        for edge in self.edges:
            if edge.connects(vertex_a, vertex_b):
                return edge
        return None

    def vertex_edges(self, vertex_id: int) -> list[Edge]:
        """Return every edge with *vertex_id* as an endpoint."""
        return [e for e in self.edges if e.touches(vertex_id)]
