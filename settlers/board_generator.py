"""Board generation algorithm.

Generates the standard 19-tile board with randomised terrain placement and
number-token assignment, then derives the full vertex/edge adjacency graph
so that the rules engine can check placements without re-deriving spatial
relationships.

Board geometry
--------------
The 19 hex slots and the six corner vertices of each slot are a fixed
incidence table (:data:`_TILE_VERTICES`).  Corners are listed in rotational
order, so the sides of a hex are the consecutive pairs::

    (v[0], v[1]), (v[1], v[2]), ..., (v[5], v[0])

Neighbouring hexes list the vertices they share with the same identifiers,
which is how the table encodes the board's shape.  Walking every tile's six
sides and keeping each unordered pair once yields the **72 edges**; edge IDs
are assigned in that discovery order.  The 19 slots use **54 vertices**.

Example: tile 0 is ``(0, 1, 2, 3, 4, 5)`` so its sides become edges 0–5,
``(0, 1)`` through ``(5, 0)``.  Tile 1, ``(6, 7, 8, 9, 2, 1)``, shares the
side ``(2, 1)`` with tile 0 and only adds the five sides it does not share.

Random assignment
-----------------
Terrain and tokens are placed by rejection sampling: draw uniformly, keep
the draw only while its quota is not yet used up.  This realises a random
permutation of the fixed multisets.  Tokens are drawn from 1–12; the zero
quotas for 1 and 7 mean those values are never kept.  Sampling has no
iteration cap and terminates with probability 1.
"""

from __future__ import annotations

import abc
import collections
import logging
import random

from .models.board import (
    NO_TOKEN,
    NUM_EDGES,
    NUM_TILES,
    NUM_VERTICES,
    Board,
    CubeCoord,
    Edge,
    HexTile,
    TileType,
    Vertex,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Board constants
# ---------------------------------------------------------------------------

# 19 hex positions as (q, s, r) cube coordinates: centre, ring 1, ring 2.
_BOARD_POSITIONS: list[tuple[int, int, int]] = [
    (0, 0, 0),
    (0, 1, -1),
    (-1, 1, 0),
    (-1, 0, 1),
    (0, -1, 1),
    (1, -1, 0),
    (1, 0, -1),
    (0, 2, -2),
    (-1, 2, -1),
    (-2, 2, 0),
    (-2, 1, 1),
    (-2, 0, 2),
    (-1, -1, 2),
    (0, -2, 2),
    (1, -2, 1),
    (2, -2, 0),
    (2, -1, -1),
    (2, 0, -2),
    (1, 1, -2),
]

# Corner vertex IDs of each slot above, in rotational order.
_TILE_VERTICES: list[tuple[int, int, int, int, int, int]] = [
    (0, 1, 2, 3, 4, 5),
    (6, 7, 8, 9, 2, 1),
    (2, 9, 10, 11, 12, 3),
    (4, 3, 12, 13, 14, 15),
    (16, 5, 4, 15, 17, 18),
    (19, 20, 0, 5, 16, 21),
    (22, 23, 6, 1, 0, 20),
    (24, 25, 26, 27, 8, 7),
    (8, 27, 28, 29, 10, 9),
    (10, 29, 30, 31, 32, 11),
    (12, 11, 32, 33, 34, 13),
    (14, 13, 34, 35, 36, 37),
    (17, 15, 14, 37, 38, 39),
    (40, 18, 17, 39, 41, 42),
    (43, 21, 16, 18, 40, 44),
    (45, 46, 19, 21, 43, 47),
    (48, 49, 22, 20, 19, 46),
    (50, 51, 52, 23, 22, 49),
    (52, 53, 24, 7, 6, 23),
]

# Terrain quotas, in the order terrain is drawn (must sum to 19).
_TERRAIN_QUOTAS: dict[TileType, int] = {
    TileType.FOREST: 4,
    TileType.PASTURE: 4,
    TileType.FIELDS: 4,
    TileType.HILLS: 3,
    TileType.MOUNTAINS: 3,
    TileType.DESERT: 1,
}

# Number-token quotas for every value that can be drawn (18 tokens).
_TOKEN_QUOTAS: dict[int, int] = {
    1: 0,
    2: 1,
    3: 2,
    4: 2,
    5: 2,
    6: 2,
    7: 0,
    8: 2,
    9: 2,
    10: 2,
    11: 2,
    12: 1,
}


class BoardLayoutError(ValueError):
    """Raised when the board incidence table is internally inconsistent."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class BoardGenerator(abc.ABC):
    """Produces a fresh, structurally valid :class:`Board` for one game."""

    @abc.abstractmethod
    def generate(self) -> Board:
        """Return a new board."""


class RandomBoardGenerator(BoardGenerator):
    """Standard generator with randomised terrain and number tokens.

    Args:
        seed: Optional integer seed for reproducible boards.  Ignored when
            *rng* is given.
        rng: Optional random source to draw from.

    Raises:
        BoardLayoutError: If the built-in incidence table is inconsistent.
    """

    def __init__(
        self, seed: int | None = None, rng: random.Random | None = None
    ) -> None:
        validate_layout(_BOARD_POSITIONS, _TILE_VERTICES)
        self._seed = seed
        self._rng = rng if rng is not None else random.Random(seed)

    def generate(self) -> Board:
        logger.debug('Generating board (seed=%r)', self._seed)
        tile_types = _assign_terrain(self._rng)
        tokens = _assign_tokens(self._rng, tile_types)

        tiles = [
            HexTile(
                coord=CubeCoord(q=q, r=r, s=s),
                tile_type=tile_type,
                number_token=token,
                vertex_ids=corners,
            )
            for (q, s, r), corners, tile_type, token in zip(
                _BOARD_POSITIONS, _TILE_VERTICES, tile_types, tokens, strict=True
            )
        ]
        vertices, edges = _build_grid_structure(tiles)
        return Board(tiles=tiles, vertices=vertices, edges=edges)


def generate_board(seed: int | None = None) -> Board:
    """Generate and return a randomised standard board.

    Args:
        seed: Optional integer seed for reproducible boards.

    Returns:
        A fully populated :class:`Board` instance with all adjacency data set.
    """
    return RandomBoardGenerator(seed=seed).generate()


def validate_layout(
    positions: list[tuple[int, int, int]],
    tile_vertices: list[tuple[int, ...]],
) -> None:
    """Check that a slot/corner incidence table describes a valid board.

    Raises:
        BoardLayoutError: On the first inconsistency found.
    """
    if len(positions) != NUM_TILES or len(tile_vertices) != NUM_TILES:
        raise BoardLayoutError(
            f'expected {NUM_TILES} slots, got {len(positions)} positions '
            f'and {len(tile_vertices)} boundaries'
        )
    if len(set(positions)) != NUM_TILES:
        raise BoardLayoutError('duplicate board positions')
    for q, s, r in positions:
        if q + s + r != 0:
            raise BoardLayoutError(f'position ({q}, {s}, {r}) does not sum to 0')

    seen: set[int] = set()
    for index, corners in enumerate(tile_vertices):
        if len(corners) != 6 or len(set(corners)) != 6:
            raise BoardLayoutError(f'tile {index} needs 6 distinct corners: {corners}')
        for vid in corners:
            if not 0 <= vid < NUM_VERTICES:
                raise BoardLayoutError(f'tile {index} has out-of-range vertex {vid}')
        seen.update(corners)
    if len(seen) != NUM_VERTICES:
        raise BoardLayoutError(
            f'boundaries use {len(seen)} vertices, expected {NUM_VERTICES}'
        )

    # Two slots share a side exactly when they are neighbours on the grid.
    coords = [CubeCoord(q=q, r=r, s=s) for q, s, r in positions]
    for i in range(NUM_TILES):
        for j in range(i + 1, NUM_TILES):
            shared = len(set(tile_vertices[i]) & set(tile_vertices[j]))
            distance = coords[i].distance(coords[j])
            if shared != (2 if distance == 1 else 0):
                raise BoardLayoutError(
                    f'tiles {i} and {j} share {shared} corners at distance {distance}'
                )

    pairs = _derive_edge_pairs(tile_vertices)
    if len(pairs) != NUM_EDGES:
        raise BoardLayoutError(
            f'boundaries derive {len(pairs)} edges, expected {NUM_EDGES}'
        )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _assign_terrain(rng: random.Random) -> list[TileType]:
    """Fill the 19 slots with terrain by rejection sampling against quotas."""
    choices = list(_TERRAIN_QUOTAS)
    counts: collections.Counter[TileType] = collections.Counter()
    tile_types: list[TileType] = []
    while len(tile_types) < NUM_TILES:
        tile_type = choices[rng.randrange(len(choices))]
        if counts[tile_type] < _TERRAIN_QUOTAS[tile_type]:
            counts[tile_type] += 1
            tile_types.append(tile_type)
    return tile_types


def _assign_tokens(rng: random.Random, tile_types: list[TileType]) -> list[int]:
    """Draw a number token for every producing tile; the desert gets NO_TOKEN."""
    counts: collections.Counter[int] = collections.Counter()
    tokens: list[int] = []
    for tile_type in tile_types:
        if tile_type == TileType.DESERT:
            tokens.append(NO_TOKEN)
            continue
        while True:
            token = rng.randint(1, 12)
            if counts[token] < _TOKEN_QUOTAS[token]:
                break
        counts[token] += 1
        tokens.append(token)
    return tokens


def _derive_edge_pairs(
    tile_vertices: list[tuple[int, ...]],
) -> list[tuple[int, int]]:
    """Return unique tile sides as vertex pairs, in discovery order."""
    seen: set[frozenset[int]] = set()
    pairs: list[tuple[int, int]] = []
    for corners in tile_vertices:
        for i in range(6):
            a = corners[i]
            b = corners[(i + 1) % 6]  # wrap from the last corner to the first
            key = frozenset((a, b))
            if key not in seen:
                seen.add(key)
                pairs.append((a, b))
    return pairs


def _build_grid_structure(
    tiles: list[HexTile],
) -> tuple[list[Vertex], list[Edge]]:
    """Compute all vertices and edges with their adjacency data.

    Returns:
        A pair ``(vertices, edges)`` where each list is indexed by the
        corresponding integer ID.
    """
    pairs = _derive_edge_pairs([t.vertex_ids for t in tiles])
    edges = [Edge(edge_id=eid, vertex_ids=pair) for eid, pair in enumerate(pairs)]

    # vertex_id → adjacent vertex IDs (distance rule)
    v_adj_vertices: dict[int, list[int]] = collections.defaultdict(list)
    for edge in edges:
        for vid in edge.vertex_ids:
            v_adj_vertices[vid].append(edge.other_end(vid))

    # vertex_id → adjacent tile indices
    v_adj_tiles: dict[int, list[int]] = collections.defaultdict(list)
    for tile_idx, tile in enumerate(tiles):
        for vid in tile.vertex_ids:
            v_adj_tiles[vid].append(tile_idx)

    vertices = [
        Vertex(
            vertex_id=vid,
            adjacent_vertex_ids=v_adj_vertices[vid],
            adjacent_tile_indices=v_adj_tiles[vid],
        )
        for vid in range(NUM_VERTICES)
    ]
    return vertices, edges
