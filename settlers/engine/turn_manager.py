"""Turn manager.

Handles game state initialization and turn-order advancement.
"""

from __future__ import annotations

from ..board_generator import BoardGenerator, RandomBoardGenerator
from ..models.game_state import (
    GamePhase,
    GameState,
    PendingActionType,
    TurnState,
)
from ..models.player import STANDARD_COSTS, CostTable, Player

MIN_PLAYERS = 2
MAX_PLAYERS = 4


def create_initial_game_state(
    player_names: list[str],
    colors: list[str],
    seed: int | None = None,
    generator: BoardGenerator | None = None,
    costs: CostTable = STANDARD_COSTS,
) -> GameState:
    """Create and return a fresh GameState ready for the setup phase.

    Args:
        player_names: Display names for each player (determines player count).
        colors: Colour names for each player (same length as names).
        seed: Optional RNG seed for a reproducible board.
        generator: Board generator to use instead of the seeded default.
        costs: Piece prices for this game.

    Returns:
        A :class:`GameState` in SETUP_FORWARD phase, player 0 to place first.

    Raises:
        ValueError: If the player count is outside 2–4.
    """
    if not MIN_PLAYERS <= len(player_names) <= MAX_PLAYERS:
        raise ValueError(
            f'need {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(player_names)}'
        )
    if generator is None:
        generator = RandomBoardGenerator(seed=seed)

    players = [
        Player(player_index=i, name=name, color=color)
        for i, (name, color) in enumerate(zip(player_names, colors, strict=True))
    ]
    return GameState(
        players=players,
        board=generator.generate(),
        phase=GamePhase.SETUP_FORWARD,
        turn_state=TurnState(
            player_index=0,
            pending_action=PendingActionType.PLACE_SETTLEMENT,
        ),
        costs=costs,
        turn_number=0,
    )


def advance_turn(game_state: GameState) -> GameState:
    """Advance the game to the next turn segment and return the modified state.

    Called after a road is placed during setup, or once the active player has
    built or passed during the main game.  Modifies ``game_state`` in place
    and returns it.
    """
    num_players = len(game_state.players)
    current = game_state.turn_state.player_index

    if game_state.phase in (GamePhase.SETUP_FORWARD, GamePhase.SETUP_BACKWARD):
        next_index, next_phase = get_next_setup_player(
            current, num_players, game_state.phase
        )
        game_state.phase = next_phase
        if next_phase == GamePhase.MAIN:
            game_state.turn_state = TurnState(
                player_index=0,
                pending_action=PendingActionType.ROLL_DICE,
            )
        else:
            game_state.turn_state = TurnState(
                player_index=next_index,
                pending_action=PendingActionType.PLACE_SETTLEMENT,
            )

    elif game_state.phase == GamePhase.MAIN:
        next_player = (current + 1) % num_players
        if next_player == 0:
            game_state.turn_number += 1
        game_state.turn_state = TurnState(
            player_index=next_player,
            pending_action=PendingActionType.ROLL_DICE,
        )

    return game_state


def get_next_setup_player(
    current_index: int, num_players: int, phase: GamePhase
) -> tuple[int, GamePhase]:
    """Compute the next player index and phase during setup.

    Returns:
        A ``(next_player_index, next_phase)`` tuple.

    Raises:
        ValueError: If *phase* is not a setup phase.
    """
    if phase == GamePhase.SETUP_FORWARD:
        if current_index == num_players - 1:
            return current_index, GamePhase.SETUP_BACKWARD
        return current_index + 1, GamePhase.SETUP_FORWARD

    if phase == GamePhase.SETUP_BACKWARD:
        if current_index == 0:
            return 0, GamePhase.MAIN
        return current_index - 1, GamePhase.SETUP_BACKWARD

    raise ValueError(f'get_next_setup_player called with non-setup phase: {phase}')
