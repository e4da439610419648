"""Game state model.

Captures the complete mutable state of a game in progress: the board, all
players, the current turn and the outcome once decided.
"""

from __future__ import annotations

import enum

import pydantic

from .board import Board
from .player import STANDARD_COSTS, CostTable, Player


class GamePhase(enum.StrEnum):
    """High-level phases of a game."""

    # Initial placement: settlement/road pairs placed 1→N order.
    SETUP_FORWARD = 'setup_forward'
    # Initial placement: settlement/road pairs placed N→1 order.
    SETUP_BACKWARD = 'setup_backward'
    # Main game: dice rolls and building.
    MAIN = 'main'
    # A player has won, or the round limit was reached.
    ENDED = 'ended'


SETUP_PHASES = (GamePhase.SETUP_FORWARD, GamePhase.SETUP_BACKWARD)


class PendingActionType(enum.StrEnum):
    """What the active player has to do next."""

    PLACE_SETTLEMENT = 'place_settlement'  # setup phase: place initial settlement
    PLACE_ROAD = 'place_road'  # setup phase: road touching that settlement
    ROLL_DICE = 'roll_dice'  # start of main turn
    BUILD = 'build'  # one build or end turn, after rolling


class TurnState(pydantic.BaseModel):
    """Transient state for the currently active turn."""

    player_index: int
    roll_value: int | None = None  # None until dice are rolled
    pending_action: PendingActionType = PendingActionType.ROLL_DICE
    # Vertex of the settlement just placed during setup.
    setup_vertex_id: int | None = None


class GameState(pydantic.BaseModel):
    """Complete snapshot of a game at any point in time."""

    players: list[Player]
    board: Board
    phase: GamePhase = GamePhase.SETUP_FORWARD
    turn_state: TurnState
    costs: CostTable = STANDARD_COSTS
    # Full history of dice roll totals for this game.
    dice_roll_history: list[int] = pydantic.Field(default_factory=list)
    # Number of complete rounds played.
    turn_number: int = 0
    # player_index of the winner once phase == ENDED, or None.
    winner_index: int | None = None
