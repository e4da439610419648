"""Unit tests for the board data models."""

from __future__ import annotations

import unittest

import pydantic

from settlers.board_generator import generate_board
from settlers.models.board import (
    NUM_EDGES,
    NUM_TILES,
    NUM_VERTICES,
    Building,
    BuildingType,
    CubeCoord,
    Edge,
    HexTile,
    ResourceType,
    Road,
    TileType,
)


class TestCubeCoord(unittest.TestCase):
    """Tests for CubeCoord model."""

    def test_off_plane_rejected(self) -> None:
        """Coordinates off the q + r + s == 0 plane are refused."""
        with self.assertRaises(pydantic.ValidationError):
            CubeCoord(q=1, r=1, s=0)

    def test_frozen(self) -> None:
        """CubeCoord is immutable."""
        coord = CubeCoord(q=0, r=0, s=0)
        with self.assertRaises(pydantic.ValidationError):
            coord.q = 1  # type: ignore[misc]

    def test_distance(self) -> None:
        """Distance counts hex steps between two coordinates."""
        self.assertEqual(
            CubeCoord(q=0, r=0, s=0).distance(CubeCoord(q=2, r=-2, s=0)), 2
        )


class TestHexTile(unittest.TestCase):
    """Tests for HexTile validation."""

    _CORNERS = (0, 1, 2, 3, 4, 5)

    def test_resource(self) -> None:
        """A producing tile maps its terrain to a resource."""
        tile = HexTile(
            coord=CubeCoord(q=0, r=0, s=0),
            tile_type=TileType.HILLS,
            number_token=5,
            vertex_ids=self._CORNERS,
        )
        self.assertEqual(tile.resource, ResourceType.BRICK)

    def test_desert_has_no_resource(self) -> None:
        """The desert yields nothing and carries the empty token."""
        tile = HexTile(
            coord=CubeCoord(q=0, r=0, s=0),
            tile_type=TileType.DESERT,
            vertex_ids=self._CORNERS,
        )
        self.assertIsNone(tile.resource)
        self.assertEqual(tile.number_token, 0)

    def test_desert_with_token_rejected(self) -> None:
        """A desert may not carry a number token."""
        with self.assertRaises(pydantic.ValidationError):
            HexTile(
                coord=CubeCoord(q=0, r=0, s=0),
                tile_type=TileType.DESERT,
                number_token=6,
                vertex_ids=self._CORNERS,
            )

    def test_seven_token_rejected(self) -> None:
        """7 is never printed on a tile."""
        with self.assertRaises(pydantic.ValidationError):
            HexTile(
                coord=CubeCoord(q=0, r=0, s=0),
                tile_type=TileType.FOREST,
                number_token=7,
                vertex_ids=self._CORNERS,
            )

    def test_repeated_corner_rejected(self) -> None:
        """The six corners of a tile must be distinct."""
        with self.assertRaises(pydantic.ValidationError):
            HexTile(
                coord=CubeCoord(q=0, r=0, s=0),
                tile_type=TileType.FOREST,
                number_token=8,
                vertex_ids=(0, 1, 2, 3, 4, 4),
            )


class TestBuilding(unittest.TestCase):
    def test_settlement_traits(self) -> None:
        """A settlement scores 1, produces 1 and can be upgraded."""
        b = Building(player_index=0, building_type=BuildingType.SETTLEMENT)
        self.assertEqual(b.victory_points, 1)
        self.assertEqual(b.resource_multiplier, 1)
        self.assertTrue(b.upgradeable)

    def test_upgrade_to_city(self) -> None:
        """Upgrading keeps the owner and doubles points and output."""
        settlement = Building(player_index=2, building_type=BuildingType.SETTLEMENT)
        city = settlement.upgraded()
        self.assertEqual(city.building_type, BuildingType.CITY)
        self.assertEqual(city.player_index, 2)
        self.assertEqual(city.victory_points, 2)
        self.assertEqual(city.resource_multiplier, 2)
        self.assertFalse(city.upgradeable)

    def test_city_cannot_upgrade(self) -> None:
        """A city is already the top tier."""
        city = Building(player_index=0, building_type=BuildingType.CITY)
        with self.assertRaises(ValueError):
            city.upgraded()


class TestEdge(unittest.TestCase):
    def test_self_loop_rejected(self) -> None:
        """An edge must join two different vertices."""
        with self.assertRaises(pydantic.ValidationError):
            Edge(edge_id=0, vertex_ids=(3, 3))

    def test_connects_either_order(self) -> None:
        """connects and other_end ignore endpoint order."""
        edge = Edge(edge_id=0, vertex_ids=(3, 8))
        self.assertTrue(edge.connects(3, 8))
        self.assertTrue(edge.connects(8, 3))
        self.assertFalse(edge.connects(3, 9))
        self.assertEqual(edge.other_end(3), 8)
        self.assertEqual(edge.other_end(8), 3)


class TestBoardQueries(unittest.TestCase):
    """Lookups on a generated board."""

    def setUp(self) -> None:
        self.board = generate_board(seed=42)

    def test_counts(self) -> None:
        """A board has 19 tiles, 54 vertices and 72 edges."""
        self.assertEqual(len(self.board.tiles), NUM_TILES)
        self.assertEqual(len(self.board.vertices), NUM_VERTICES)
        self.assertEqual(len(self.board.edges), NUM_EDGES)

    def test_ids_match_indices(self) -> None:
        """Each vertex and edge id equals its list position."""
        for i, v in enumerate(self.board.vertices):
            self.assertEqual(v.vertex_id, i)
        for i, e in enumerate(self.board.edges):
            self.assertEqual(e.edge_id, i)

    def test_tile_at(self) -> None:
        """tile_at finds tiles by (q, s, r)."""
        centre = self.board.tile_at(0, 0, 0)
        assert centre is not None
        self.assertEqual(centre.vertex_ids, (0, 1, 2, 3, 4, 5))
        # Slot 1 sits at (q, s, r) = (0, 1, -1).
        tile = self.board.tile_at(0, 1, -1)
        assert tile is not None
        self.assertEqual(tile.vertex_ids, (6, 7, 8, 9, 2, 1))
        self.assertEqual(tile.coord.r, -1)

    def test_tile_at_off_board(self) -> None:
        """Coordinates outside the board give None."""
        self.assertIsNone(self.board.tile_at(3, -3, 0))

    def test_out_of_range_lookups(self) -> None:
        """Ids outside the arena give None instead of raising."""
        self.assertIsNone(self.board.vertex(-1))
        self.assertIsNone(self.board.vertex(NUM_VERTICES))
        self.assertIsNone(self.board.edge(-1))
        self.assertIsNone(self.board.edge(NUM_EDGES))
        v = self.board.vertex(53)
        assert v is not None
        self.assertEqual(v.vertex_id, 53)

    def test_find_edge_known_ids(self) -> None:
        """Edges are numbered in discovery order."""
        first = self.board.find_edge(0, 1)
        assert first is not None
        self.assertEqual(first.edge_id, 0)
        shared = self.board.find_edge(1, 6)
        assert shared is not None
        self.assertEqual(shared.edge_id, 10)

    def test_find_edge_symmetric(self) -> None:
        """find_edge returns the same edge for either endpoint order."""
        for e in self.board.edges:
            a, b = e.vertex_ids
            self.assertIs(self.board.find_edge(a, b), e)
            self.assertIs(self.board.find_edge(b, a), e)

    def test_find_edge_missing(self) -> None:
        """Non-adjacent or identical vertices have no edge."""
        self.assertIsNone(self.board.find_edge(0, 2))
        self.assertIsNone(self.board.find_edge(0, 0))

    def test_vertex_edges(self) -> None:
        """The edges at a vertex lead to exactly its adjacent vertices."""
        edges = self.board.vertex_edges(0)
        self.assertEqual(
            {e.other_end(0) for e in edges},
            set(self.board.vertices[0].adjacent_vertex_ids),
        )

    def test_empty_board_is_unoccupied(self) -> None:
        """A fresh board has no buildings or roads."""
        self.assertFalse(any(v.is_occupied for v in self.board.vertices))
        self.assertTrue(all(e.road is None for e in self.board.edges))

    def test_owner(self) -> None:
        """A vertex reports the owner of its building."""
        v = self.board.vertices[4]
        self.assertIsNone(v.owner)
        v.building = Building(player_index=3, building_type=BuildingType.SETTLEMENT)
        self.assertEqual(v.owner, 3)
        self.assertTrue(v.is_occupied)

    def test_road_frozen(self) -> None:
        """Roads are immutable once placed."""
        road = Road(player_index=1)
        with self.assertRaises(pydantic.ValidationError):
            road.player_index = 2  # type: ignore[misc]

    def test_edge_owner(self) -> None:
        """An edge reports the owner of its road."""
        e = self.board.edges[7]
        self.assertIsNone(e.owner)
        e.road = Road(player_index=2)
        self.assertEqual(e.owner, 2)


if __name__ == '__main__':
    unittest.main()
