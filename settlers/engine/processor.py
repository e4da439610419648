"""Action processor.

Applies a single game action to a GameState and returns the result.
This is a pure function: the original state is never modified.  Every
placement is checked by the placement validator before the board changes.
"""

from __future__ import annotations

import logging

from ..models import actions, board, game_state, player
from . import bank, dice, production, rules, turn_manager

logger = logging.getLogger(__name__)

DICE_SIDES = 6

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply_action(
    state: game_state.GameState,
    action: actions.Action,
    roller: dice.Dice | None = None,
) -> actions.ActionResult:
    """Apply *action* to *state* and return an :class:`ActionResult`.

    The original state is never modified; a deep copy is made first.
    On failure an :class:`ActionResult` with ``success=False`` is returned.

    Args:
        state: The state to act on.
        action: The action to apply.
        roller: Dice for :class:`~settlers.models.actions.RollDice`; a fresh
            unseeded :class:`~settlers.engine.dice.DiceRoller` when omitted.
    """
    state = state.model_copy(deep=True)

    try:
        _check_turn(state, action)
        _dispatch(state, action, roller)
    except ValueError as exc:
        return actions.ActionResult(success=False, error_message=str(exc))

    # Check for a winner after every action.
    if state.phase != game_state.GamePhase.ENDED:
        winner = rules.check_victory_condition(state)
        if winner is not None:
            state.phase = game_state.GamePhase.ENDED
            state.winner_index = winner
            logger.info('%s wins', state.players[winner].name)

    return actions.ActionResult(success=True, updated_state=state)


# ---------------------------------------------------------------------------
# Internal dispatch
# ---------------------------------------------------------------------------


def _check_turn(state: game_state.GameState, action: actions.Action) -> None:
    if state.phase == game_state.GamePhase.ENDED:
        raise ValueError('The game is over.')
    if action.player_index != state.turn_state.player_index:
        raise ValueError(f'It is not player {action.player_index}\'s turn.')


def _expect(state: game_state.GameState, pending: game_state.PendingActionType) -> None:
    if state.turn_state.pending_action != pending:
        raise ValueError(
            f'Expected {state.turn_state.pending_action}, not {pending}.'
        )


def _dispatch(
    state: game_state.GameState,
    action: actions.Action,
    roller: dice.Dice | None,
) -> None:
    """Mutate *state* in place according to *action* type."""
    if isinstance(action, actions.PlaceSettlement):
        _apply_place_settlement(state, action)
    elif isinstance(action, actions.PlaceRoad):
        _apply_place_road(state, action)
    elif isinstance(action, actions.PlaceCity):
        _apply_place_city(state, action)
    elif isinstance(action, actions.RollDice):
        _apply_roll_dice(state, roller if roller is not None else dice.DiceRoller())
    elif isinstance(action, actions.EndTurn):
        _apply_end_turn(state, action)
    else:
        raise ValueError(f'Unknown action {action!r}.')


# ---------------------------------------------------------------------------
# Action handlers
# ---------------------------------------------------------------------------


def _apply_place_settlement(
    state: game_state.GameState, action: actions.PlaceSettlement
) -> None:
    setup = state.phase in game_state.SETUP_PHASES
    _expect(
        state,
        game_state.PendingActionType.PLACE_SETTLEMENT
        if setup
        else game_state.PendingActionType.BUILD,
    )
    validator = rules.StandardPlacementValidator(state.board)
    if not validator.can_place_settlement(action.vertex_id, action.player_index, setup):
        raise ValueError(f'Vertex {action.vertex_id} violates the distance rule.')
    if not setup and not validator.has_road_to(action.vertex_id, action.player_index):
        raise ValueError(f'Vertex {action.vertex_id} is not reached by an own road.')

    p = state.players[action.player_index]
    ledger = bank.Bank(state.costs)
    if setup:
        ledger.take_piece(p, player.PieceType.SETTLEMENT)
    else:
        ledger.charge(p, player.PieceType.SETTLEMENT)

    building = board.Building(
        player_index=action.player_index,
        building_type=board.BuildingType.SETTLEMENT,
    )
    state.board.vertices[action.vertex_id].building = building
    p.victory_points += building.victory_points
    logger.info(
        '%d / %s: settlement on vertex %d', state.turn_number, p.name, action.vertex_id
    )

    if setup:
        state.turn_state.pending_action = game_state.PendingActionType.PLACE_ROAD
        state.turn_state.setup_vertex_id = action.vertex_id
    else:
        turn_manager.advance_turn(state)


def _apply_place_road(state: game_state.GameState, action: actions.PlaceRoad) -> None:
    setup = state.phase in game_state.SETUP_PHASES
    _expect(
        state,
        game_state.PendingActionType.PLACE_ROAD
        if setup
        else game_state.PendingActionType.BUILD,
    )
    validator = rules.StandardPlacementValidator(state.board)
    if not validator.can_place_road(action.edge_id, action.player_index, setup):
        raise ValueError(f'Edge {action.edge_id} is not available to this player.')

    p = state.players[action.player_index]
    ledger = bank.Bank(state.costs)
    if setup:
        _validate_setup_road(state, action)
        ledger.take_piece(p, player.PieceType.ROAD)
    else:
        if not validator.touches_network(action.edge_id, action.player_index):
            raise ValueError(f'Edge {action.edge_id} is not reachable by this player.')
        ledger.charge(p, player.PieceType.ROAD)

    edge = state.board.edges[action.edge_id]
    edge.road = board.Road(player_index=action.player_index)
    logger.info(
        '%d / %s: road on edge %d between vertices %d and %d',
        state.turn_number,
        p.name,
        edge.edge_id,
        *edge.vertex_ids,
    )

    turn_manager.advance_turn(state)


def _validate_setup_road(
    state: game_state.GameState, action: actions.PlaceRoad
) -> None:
    """Validate that the setup road touches the settlement just placed."""
    anchor = state.turn_state.setup_vertex_id
    if anchor is not None and not state.board.edges[action.edge_id].touches(anchor):
        raise ValueError('Setup road must touch the settlement just placed.')


def _apply_place_city(state: game_state.GameState, action: actions.PlaceCity) -> None:
    if state.phase in game_state.SETUP_PHASES:
        raise ValueError('Cities cannot be built during setup.')
    _expect(state, game_state.PendingActionType.BUILD)
    validator = rules.StandardPlacementValidator(state.board)
    if not validator.can_upgrade_settlement(action.vertex_id, action.player_index):
        raise ValueError(f'No own settlement at vertex {action.vertex_id}.')

    p = state.players[action.player_index]
    ledger = bank.Bank(state.costs)
    ledger.charge(p, player.PieceType.CITY)
    ledger.return_piece(p, player.PieceType.SETTLEMENT)

    vertex = state.board.vertices[action.vertex_id]
    settlement = vertex.building
    if settlement is None:
        raise ValueError(f'No own settlement at vertex {action.vertex_id}.')
    city = settlement.upgraded()
    vertex.building = city
    p.victory_points += city.victory_points - settlement.victory_points
    logger.info(
        '%d / %s: city on vertex %d', state.turn_number, p.name, vertex.vertex_id
    )

    turn_manager.advance_turn(state)


def _apply_roll_dice(state: game_state.GameState, roller: dice.Dice) -> None:
    if state.phase != game_state.GamePhase.MAIN:
        raise ValueError('Dice are only rolled in the main phase.')
    _expect(state, game_state.PendingActionType.ROLL_DICE)

    roll = roller.roll_two(DICE_SIDES)
    state.dice_roll_history.append(roll)
    state.turn_state.roll_value = roll
    logger.debug('Rolled %d', roll)

    events = production.produce(state.board, roll)
    bank.Bank(state.costs).credit(state.players, events)
    state.turn_state.pending_action = game_state.PendingActionType.BUILD


def _apply_end_turn(state: game_state.GameState, action: actions.EndTurn) -> None:
    if state.phase != game_state.GamePhase.MAIN:
        raise ValueError('Turns cannot be passed during setup.')
    _expect(state, game_state.PendingActionType.BUILD)
    legal = rules.get_legal_actions(state, action.player_index)
    if not any(isinstance(a, actions.EndTurn) for a in legal):
        raise ValueError(
            f'Holding {rules.MUST_BUILD_THRESHOLD} or more cards: must build.'
        )
    p = state.players[action.player_index]
    logger.info('%d / %s: pass', state.turn_number, p.name)

    turn_manager.advance_turn(state)
