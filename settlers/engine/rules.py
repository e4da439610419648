"""Placement rules engine.

Provides the placement validator used before every board mutation, plus
functions for computing legal actions and the victory condition.

The three base predicates (:meth:`PlacementValidator.can_place_settlement`,
:meth:`PlacementValidator.can_place_road`,
:meth:`PlacementValidator.can_upgrade_settlement`) check occupancy and the
distance rule only.  Reachability through the player's own road network is
checked separately by :meth:`StandardPlacementValidator.has_road_to` and
:meth:`StandardPlacementValidator.touches_network`; the ``legal_*``
enumerators combine both and are what the turn loop uses.

Predicates never raise: an unknown ID or a missing player yields ``False``.
"""

from __future__ import annotations

import abc

from ..models import actions, board, game_state, player
from . import bank

VICTORY_POINTS_TO_WIN = 10
# Holding this many cards or more forbids ending a turn while a build is possible.
MUST_BUILD_THRESHOLD = 7


class PlacementValidator(abc.ABC):
    """Rule predicates over one board.  Implementations never mutate it."""

    @abc.abstractmethod
    def can_place_settlement(
        self, vertex_id: int | None, player_index: int | None, setup: bool
    ) -> bool:
        """Return True if the distance rule allows a settlement at *vertex_id*."""

    @abc.abstractmethod
    def can_place_road(
        self, edge_id: int | None, player_index: int | None, setup: bool
    ) -> bool:
        """Return True if a road may go on *edge_id*."""

    @abc.abstractmethod
    def can_upgrade_settlement(
        self, vertex_id: int | None, player_index: int | None
    ) -> bool:
        """Return True if *player_index* owns a settlement at *vertex_id*."""


class StandardPlacementValidator(PlacementValidator):
    """Placement rules for the standard board."""

    def __init__(self, brd: board.Board) -> None:
        self._board = brd

    # ---- Base predicates ----------------------------------------------------

    def can_place_settlement(
        self, vertex_id: int | None, player_index: int | None, setup: bool
    ) -> bool:
        """Distance rule: the vertex and all its neighbours must be empty.

        Applies in every phase.  During normal play the caller must also
        confirm :meth:`has_road_to`; during setup nothing more is required.
        """
        vertex = self._vertex(vertex_id)
        if vertex is None or (player_index is None and not setup):
            return False
        if vertex.is_occupied:
            return False
        return not any(
            self._board.vertices[adj].is_occupied for adj in vertex.adjacent_vertex_ids
        )

    def can_place_road(
        self, edge_id: int | None, player_index: int | None, setup: bool
    ) -> bool:
        """The edge must be free.

        During setup one endpoint must hold the player's own building (the
        road extends from the settlement just placed).  During normal play
        the caller must also confirm :meth:`touches_network`.
        """
        edge = self._edge(edge_id)
        if edge is None or player_index is None or edge.road is not None:
            return False
        if setup:
            return any(
                self._board.vertices[vid].owner == player_index
                for vid in edge.vertex_ids
            )
        return True

    def can_upgrade_settlement(
        self, vertex_id: int | None, player_index: int | None
    ) -> bool:
        vertex = self._vertex(vertex_id)
        if vertex is None or player_index is None or vertex.building is None:
            return False
        b = vertex.building
        return b.player_index == player_index and b.upgradeable

    # ---- Network reachability -----------------------------------------------

    def has_road_to(self, vertex_id: int | None, player_index: int | None) -> bool:
        """Return True if one of the player's roads ends at *vertex_id*."""
        if self._vertex(vertex_id) is None or player_index is None:
            return False
        return any(e.owner == player_index for e in self._board.vertex_edges(vertex_id))

    def touches_network(self, edge_id: int | None, player_index: int | None) -> bool:
        """Return True if *edge_id* extends the player's buildings or roads.

        Either endpoint must hold an own building or be the end of another
        own road.
        """
        edge = self._edge(edge_id)
        if edge is None or player_index is None:
            return False
        for vid in edge.vertex_ids:
            if self._board.vertices[vid].owner == player_index:
                return True
            for other in self._board.vertex_edges(vid):
                if other.edge_id == edge.edge_id:
                    continue
                if other.owner == player_index:
                    return True
        return False

    # ---- Enumerators ----------------------------------------------------------

    def legal_settlement_vertices(self, player_index: int, setup: bool) -> list[int]:
        """Return vertex IDs where *player_index* may place a settlement."""
        return [
            v.vertex_id
            for v in self._board.vertices
            if self.can_place_settlement(v.vertex_id, player_index, setup)
            and (setup or self.has_road_to(v.vertex_id, player_index))
        ]

    def legal_road_edges(self, player_index: int, setup: bool) -> list[int]:
        """Return edge IDs where *player_index* may place a road."""
        return [
            e.edge_id
            for e in self._board.edges
            if self.can_place_road(e.edge_id, player_index, setup)
            and (setup or self.touches_network(e.edge_id, player_index))
        ]

    def upgradeable_vertices(self, player_index: int) -> list[int]:
        """Return vertex IDs holding a settlement *player_index* may upgrade."""
        return [
            v.vertex_id
            for v in self._board.vertices
            if self.can_upgrade_settlement(v.vertex_id, player_index)
        ]

    # ---- Lookups --------------------------------------------------------------

    def _vertex(self, vertex_id: int | None) -> board.Vertex | None:
        return None if vertex_id is None else self._board.vertex(vertex_id)

    def _edge(self, edge_id: int | None) -> board.Edge | None:
        return None if edge_id is None else self._board.edge(edge_id)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_legal_actions(
    state: game_state.GameState, player_index: int
) -> list[actions.Action]:
    """Return all legal actions for *player_index* given the current game state."""
    if state.phase == game_state.GamePhase.ENDED:
        return []
    if player_index != state.turn_state.player_index:
        return []

    validator = StandardPlacementValidator(state.board)
    pending = state.turn_state.pending_action

    # ---- Setup phases -------------------------------------------------------
    if state.phase in game_state.SETUP_PHASES:
        if pending == game_state.PendingActionType.PLACE_SETTLEMENT:
            return [
                actions.PlaceSettlement(player_index=player_index, vertex_id=vid)
                for vid in validator.legal_settlement_vertices(player_index, True)
            ]
        if pending == game_state.PendingActionType.PLACE_ROAD:
            return [
                actions.PlaceRoad(player_index=player_index, edge_id=eid)
                for eid in _setup_road_edges(state, validator, player_index)
            ]
        return []

    # ---- Main phase ---------------------------------------------------------
    if pending == game_state.PendingActionType.ROLL_DICE:
        return [actions.RollDice(player_index=player_index)]
    if pending == game_state.PendingActionType.BUILD:
        return _build_actions(state, validator, player_index)
    return []


def check_victory_condition(state: game_state.GameState) -> int | None:
    """Return the winner's player_index if any player has >= 10 VP, else None."""
    for p in state.players:
        if p.victory_points >= VICTORY_POINTS_TO_WIN:
            return p.player_index
    return None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _setup_road_edges(
    state: game_state.GameState,
    validator: StandardPlacementValidator,
    player_index: int,
) -> list[int]:
    """Setup roads must touch the settlement placed in the same step."""
    legal = validator.legal_road_edges(player_index, True)
    anchor = state.turn_state.setup_vertex_id
    if anchor is None:
        return legal
    return [eid for eid in legal if state.board.edges[eid].touches(anchor)]


def _build_actions(
    state: game_state.GameState,
    validator: StandardPlacementValidator,
    player_index: int,
) -> list[actions.Action]:
    p = state.players[player_index]
    ledger = bank.Bank(state.costs)
    result: list[actions.Action] = []

    # ---- Settlements --------------------------------------------------------
    if ledger.can_afford(p, player.PieceType.SETTLEMENT):
        for vid in validator.legal_settlement_vertices(player_index, False):
            result.append(
                actions.PlaceSettlement(player_index=player_index, vertex_id=vid)
            )

    # ---- Cities -------------------------------------------------------------
    if ledger.can_afford(p, player.PieceType.CITY):
        for vid in validator.upgradeable_vertices(player_index):
            result.append(actions.PlaceCity(player_index=player_index, vertex_id=vid))

    # ---- Roads --------------------------------------------------------------
    if ledger.can_afford(p, player.PieceType.ROAD):
        for eid in validator.legal_road_edges(player_index, False):
            result.append(actions.PlaceRoad(player_index=player_index, edge_id=eid))

    # Passing is only allowed below the hand limit, or when nothing can be built.
    if not result or p.resources.total() < MUST_BUILD_THRESHOLD:
        result.append(actions.EndTurn(player_index=player_index))
    return result
