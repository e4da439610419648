"""Unit tests for the placement rules engine."""

from __future__ import annotations

import unittest

from settlers.board_generator import generate_board
from settlers.engine.processor import apply_action
from settlers.engine.rules import (
    StandardPlacementValidator,
    check_victory_condition,
    get_legal_actions,
)
from settlers.engine.turn_manager import create_initial_game_state
from settlers.models.actions import (
    EndTurn,
    PlaceCity,
    PlaceRoad,
    PlaceSettlement,
    RollDice,
)
from settlers.models.board import Board, Building, BuildingType, Road
from settlers.models.game_state import (
    SETUP_PHASES,
    GamePhase,
    GameState,
    PendingActionType,
)
from settlers.models.player import PieceType, Resources

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_2p_state(seed: int = 42) -> GameState:
    """Create a fresh 2-player game state for testing."""
    return create_initial_game_state(['Alice', 'Bob'], ['red', 'blue'], seed=seed)


def _finish_setup(state: GameState) -> GameState:
    """Play the setup phase by always taking the first legal action."""
    while state.phase in SETUP_PHASES:
        active = state.turn_state.player_index
        result = apply_action(state, get_legal_actions(state, active)[0])
        assert result.success, result.error_message
        state = result.updated_state
    return state


def _settle(
    brd: Board,
    vertex_id: int,
    player_index: int,
    building_type: BuildingType = BuildingType.SETTLEMENT,
) -> None:
    brd.vertices[vertex_id].building = Building(
        player_index=player_index, building_type=building_type
    )


def _road(brd: Board, edge_id: int, player_index: int) -> None:
    brd.edges[edge_id].road = Road(player_index=player_index)


# ---------------------------------------------------------------------------
# Validator predicates
# ---------------------------------------------------------------------------


class TestSettlementPredicate(unittest.TestCase):
    """Distance rule checks."""

    def setUp(self) -> None:
        self.board = generate_board(seed=42)
        self.validator = StandardPlacementValidator(self.board)

    def test_empty_board_allows_any_vertex(self) -> None:
        """Any vertex of an empty board accepts a settlement."""
        for vid in range(len(self.board.vertices)):
            self.assertTrue(self.validator.can_place_settlement(vid, 0, True))
            self.assertTrue(self.validator.can_place_settlement(vid, 0, False))

    def test_unknown_vertex(self) -> None:
        """Ids outside the board are refused."""
        self.assertFalse(self.validator.can_place_settlement(None, 0, True))
        self.assertFalse(self.validator.can_place_settlement(-1, 0, True))
        self.assertFalse(self.validator.can_place_settlement(54, 0, True))

    def test_missing_player_outside_setup(self) -> None:
        """A settlement needs a player outside setup."""
        self.assertFalse(self.validator.can_place_settlement(0, None, False))

    def test_occupied_vertex(self) -> None:
        """A vertex holding a building is refused."""
        _settle(self.board, 0, 0)
        self.assertFalse(self.validator.can_place_settlement(0, 0, True))
        self.assertFalse(self.validator.can_place_settlement(0, 1, False))

    def test_neighbours_blocked(self) -> None:
        """Vertices next to a building are refused."""
        _settle(self.board, 0, 0)
        for adj in (1, 5, 20):
            self.assertFalse(self.validator.can_place_settlement(adj, 1, True))

    def test_two_steps_away_allowed(self) -> None:
        """A vertex two steps from a building is allowed."""
        _settle(self.board, 0, 0)
        self.assertTrue(self.validator.can_place_settlement(2, 1, True))
        self.assertTrue(self.validator.can_place_settlement(2, 0, False))


class TestRoadPredicate(unittest.TestCase):
    def setUp(self) -> None:
        self.board = generate_board(seed=42)
        self.validator = StandardPlacementValidator(self.board)
        _settle(self.board, 0, 0)

    def test_setup_road_from_own_settlement(self) -> None:
        """In setup a road may start at the player's own settlement."""
        self.assertTrue(self.validator.can_place_road(0, 0, True))

    def test_setup_road_from_opponent_settlement(self) -> None:
        """In setup a road may not start at an opponent's settlement."""
        self.assertFalse(self.validator.can_place_road(0, 1, True))

    def test_setup_road_without_own_endpoint(self) -> None:
        """In setup a road must touch one of the player's buildings."""
        # Edge 2 joins vertices 2 and 3.
        self.assertFalse(self.validator.can_place_road(2, 0, True))

    def test_occupied_edge(self) -> None:
        """An edge holding a road is refused."""
        _road(self.board, 0, 0)
        self.assertFalse(self.validator.can_place_road(0, 0, True))
        self.assertFalse(self.validator.can_place_road(0, 0, False))

    def test_free_edge_outside_setup(self) -> None:
        """Outside setup the base road predicate only checks occupancy."""
        self.assertTrue(self.validator.can_place_road(2, 0, False))

    def test_unknown_edge_or_player(self) -> None:
        """Unknown edges and players are refused."""
        self.assertFalse(self.validator.can_place_road(None, 0, False))
        self.assertFalse(self.validator.can_place_road(72, 0, False))
        self.assertFalse(self.validator.can_place_road(0, None, True))


class TestUpgradePredicate(unittest.TestCase):
    def setUp(self) -> None:
        self.board = generate_board(seed=42)
        self.validator = StandardPlacementValidator(self.board)

    def test_own_settlement(self) -> None:
        """A player may upgrade their own settlement."""
        _settle(self.board, 10, 1)
        self.assertTrue(self.validator.can_upgrade_settlement(10, 1))

    def test_opponent_settlement(self) -> None:
        """An opponent's settlement cannot be upgraded."""
        _settle(self.board, 10, 1)
        self.assertFalse(self.validator.can_upgrade_settlement(10, 0))

    def test_city(self) -> None:
        """A city cannot be upgraded again."""
        _settle(self.board, 10, 1, BuildingType.CITY)
        self.assertFalse(self.validator.can_upgrade_settlement(10, 1))

    def test_empty_or_unknown(self) -> None:
        """Empty or unknown vertices cannot be upgraded."""
        self.assertFalse(self.validator.can_upgrade_settlement(10, 1))
        self.assertFalse(self.validator.can_upgrade_settlement(None, 1))
        self.assertFalse(self.validator.can_upgrade_settlement(99, 1))
        _settle(self.board, 10, 1)
        self.assertFalse(self.validator.can_upgrade_settlement(10, None))


class TestNetworkPredicates(unittest.TestCase):
    """Reachability through the player's own roads and buildings."""

    def setUp(self) -> None:
        self.board = generate_board(seed=42)
        self.validator = StandardPlacementValidator(self.board)
        _settle(self.board, 0, 0)
        _road(self.board, 0, 0)  # vertices 0-1

    def test_has_road_to(self) -> None:
        """has_road_to needs one of the player's roads at the vertex."""
        self.assertTrue(self.validator.has_road_to(1, 0))
        self.assertTrue(self.validator.has_road_to(0, 0))
        self.assertFalse(self.validator.has_road_to(2, 0))
        self.assertFalse(self.validator.has_road_to(1, 1))
        self.assertFalse(self.validator.has_road_to(None, 0))

    def test_touches_network_via_road(self) -> None:
        """An edge next to an own road joins the network."""
        # Edge 1 joins vertices 1 and 2.
        self.assertTrue(self.validator.touches_network(1, 0))
        self.assertFalse(self.validator.touches_network(1, 1))

    def test_touches_network_via_building(self) -> None:
        """An edge next to an own building joins the network."""
        self.assertTrue(self.validator.touches_network(5, 0))

    def test_disconnected_edge(self) -> None:
        """An edge away from the network is not connected."""
        self.assertFalse(self.validator.touches_network(2, 0))

    def test_opponent_building_does_not_block(self) -> None:
        """Opponent buildings do not cut a road network."""
        _road(self.board, 1, 0)  # vertices 1-2
        _settle(self.board, 2, 1)
        self.assertTrue(self.validator.touches_network(2, 0))

    def test_own_road_alone_is_not_network(self) -> None:
        """The edge's own road does not count as its connection."""
        self.board.vertices[0].building = None
        self.assertFalse(self.validator.touches_network(0, 0))


class TestEnumerators(unittest.TestCase):
    def setUp(self) -> None:
        self.board = generate_board(seed=42)
        self.validator = StandardPlacementValidator(self.board)

    def test_setup_settlements_on_empty_board(self) -> None:
        """Setup allows every vertex on an empty board."""
        self.assertEqual(len(self.validator.legal_settlement_vertices(0, True)), 54)

    def test_main_settlements_need_a_road(self) -> None:
        """Outside setup settlements need an own road at the vertex."""
        _settle(self.board, 0, 0)
        _road(self.board, 0, 0)
        self.assertEqual(self.validator.legal_settlement_vertices(0, False), [])
        _road(self.board, 1, 0)
        self.assertEqual(self.validator.legal_settlement_vertices(0, False), [2])

    def test_main_roads_extend_network(self) -> None:
        """Outside setup roads must extend the player's network."""
        _settle(self.board, 0, 0)
        expected = {e.edge_id for e in self.board.vertex_edges(0)}
        self.assertEqual(set(self.validator.legal_road_edges(0, False)), expected)

    def test_upgradeable_vertices(self) -> None:
        """Only the player's own settlements are listed for upgrade."""
        _settle(self.board, 0, 0)
        _settle(self.board, 10, 0, BuildingType.CITY)
        _settle(self.board, 30, 1)
        self.assertEqual(self.validator.upgradeable_vertices(0), [0])


# ---------------------------------------------------------------------------
# Legal actions
# ---------------------------------------------------------------------------


class TestLegalActions(unittest.TestCase):
    """Tests for get_legal_actions and the victory condition."""

    def setUp(self) -> None:
        self.state = _make_2p_state()

    def test_setup_settlement_all_vertices_initially(self) -> None:
        """At the start all 54 vertices should be available."""
        legal = get_legal_actions(self.state, 0)
        self.assertEqual(len(legal), 54)
        self.assertTrue(all(isinstance(a, PlaceSettlement) for a in legal))

    def test_setup_nonactive_player_no_actions(self) -> None:
        """Only the active player has legal actions."""
        self.assertEqual(get_legal_actions(self.state, 1), [])

    def test_setup_roads_touch_new_settlement(self) -> None:
        """The setup road must touch the settlement just placed."""
        result = apply_action(self.state, PlaceSettlement(player_index=0, vertex_id=12))
        state = result.updated_state
        legal = get_legal_actions(state, 0)
        self.assertTrue(legal)
        for a in legal:
            assert isinstance(a, PlaceRoad)
            self.assertTrue(state.board.edges[a.edge_id].touches(12))
        self.assertEqual(len(legal), len(state.board.vertex_edges(12)))

    def test_ended_game_has_no_actions(self) -> None:
        """A finished game offers nothing."""
        self.state.phase = GamePhase.ENDED
        self.assertEqual(get_legal_actions(self.state, 0), [])

    def test_roll_first_in_main_phase(self) -> None:
        """A main-phase turn starts with a roll."""
        state = _finish_setup(self.state)
        self.assertEqual(state.phase, GamePhase.MAIN)
        self.assertEqual(get_legal_actions(state, 0), [RollDice(player_index=0)])

    def test_build_with_empty_hand(self) -> None:
        """An empty hand can only pass."""
        state = _finish_setup(self.state)
        state.turn_state.pending_action = PendingActionType.BUILD
        self.assertEqual(get_legal_actions(state, 0), [EndTurn(player_index=0)])

    def test_build_small_hand_may_pass(self) -> None:
        """Below seven cards a player may build or pass."""
        state = _finish_setup(self.state)
        state.turn_state.pending_action = PendingActionType.BUILD
        state.players[0].resources = Resources(wood=1, brick=1)
        legal = get_legal_actions(state, 0)
        self.assertTrue(any(isinstance(a, PlaceRoad) for a in legal))
        self.assertIn(EndTurn(player_index=0), legal)

    def test_no_road_actions_without_pieces(self) -> None:
        """A player with the cost of a road but no road pieces cannot build one."""
        state = _finish_setup(self.state)
        state.turn_state.pending_action = PendingActionType.BUILD
        p = state.players[0]
        p.resources = Resources(wood=1, brick=1)
        p.build_inventory = p.build_inventory.with_remaining(PieceType.ROAD, 0)
        self.assertEqual(get_legal_actions(state, 0), [EndTurn(player_index=0)])

    def test_build_large_hand_must_build(self) -> None:
        """With seven or more cards a legal build must be made."""
        state = _finish_setup(self.state)
        state.turn_state.pending_action = PendingActionType.BUILD
        state.players[0].resources = Resources(wood=4, brick=4)
        legal = get_legal_actions(state, 0)
        self.assertTrue(legal)
        self.assertNotIn(EndTurn(player_index=0), legal)

    def test_large_hand_with_nothing_to_build_may_pass(self) -> None:
        """A large hand that buys nothing may still pass."""
        state = _finish_setup(self.state)
        state.turn_state.pending_action = PendingActionType.BUILD
        state.players[0].resources = Resources(sheep=9)
        self.assertEqual(get_legal_actions(state, 0), [EndTurn(player_index=0)])

    def test_city_actions_for_own_settlements(self) -> None:
        """City upgrades are offered on each own settlement."""
        state = _finish_setup(self.state)
        state.turn_state.pending_action = PendingActionType.BUILD
        state.players[0].resources = Resources(wheat=2, ore=3)
        cities = [a for a in get_legal_actions(state, 0) if isinstance(a, PlaceCity)]
        self.assertEqual(len(cities), 2)
        for a in cities:
            self.assertEqual(state.board.vertices[a.vertex_id].owner, 0)

    def test_check_victory_condition(self) -> None:
        """Ten points wins the game."""
        self.assertIsNone(check_victory_condition(self.state))
        self.state.players[1].victory_points = 10
        self.assertEqual(check_victory_condition(self.state), 1)


if __name__ == '__main__':
    unittest.main()
