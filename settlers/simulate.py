"""Random-play simulation runner.

Plays full games in which every player picks uniformly at random among its
legal actions, logging each placement and an end-of-round victory point
summary, and reports the outcome.

Usage::

    python -m settlers.simulate --players 3 --seed 7

The round limit comes from ``--rounds`` when given, otherwise from the YAML
config named by ``--config`` or ``SETTLERS_CONFIG`` (see :mod:`settlers.config`).
Without either file the limit is :data:`settlers.config.MAX_TURNS`.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import random
import sys
import time

import pydantic

from . import config
from .engine import dice, processor, rules, turn_manager
from .models import actions, board, game_state

logger = logging.getLogger(__name__)

_DEFAULT_NUM_PLAYERS = 4
_PLAYER_COLORS = ['red', 'blue', 'white', 'orange']


class RandomPlayer:
    """Picks uniformly at random from the legal moves."""

    def __init__(self, seed: int | None = None) -> None:
        """Initialise with an optional RNG seed for reproducibility."""
        self._rng = random.Random(seed)

    def choose_action(self, legal_actions: list[actions.Action]) -> actions.Action:
        """Return a uniformly random action from legal_actions."""
        return self._rng.choice(legal_actions)


class GameReport(pydantic.BaseModel):
    """Outcome of one simulated game."""

    winner_index: int | None
    rounds: int
    victory_points: list[int]
    action_count: int
    reached_round_limit: bool = False


# ---------------------------------------------------------------------------
# Game runner
# ---------------------------------------------------------------------------


def run_game(
    num_players: int = _DEFAULT_NUM_PLAYERS,
    seed: int | None = None,
    max_rounds: int = config.MAX_TURNS,
) -> GameReport:
    """Run a single random game to completion.

    When *max_rounds* complete rounds have been played without a winner, the
    player with the most victory points wins (the lowest seat on ties).
    """
    names = [f'Player{i}' for i in range(num_players)]
    colors = _PLAYER_COLORS[:num_players]
    state = turn_manager.create_initial_game_state(names, colors, seed=seed)
    roller = dice.DiceRoller(seed)
    ais = [
        RandomPlayer(None if seed is None else seed + i + 1)
        for i in range(num_players)
    ]

    logger.info('Board:\n%s', format_board(state.board))

    action_count = 0
    reached_limit = False
    while state.phase != game_state.GamePhase.ENDED:
        if state.phase == game_state.GamePhase.MAIN and state.turn_number >= max_rounds:
            reached_limit = True
            _end_by_points(state)
            break

        active = state.turn_state.player_index
        legal = rules.get_legal_actions(state, active)
        if not legal:
            logger.warning('%s has no legal action; stopping', names[active])
            break
        action = ais[active].choose_action(legal)
        result = processor.apply_action(state, action, roller)
        if not result.success or result.updated_state is None:
            logger.warning('Rejected %r: %s', action, result.error_message)
            break

        previous_round = state.turn_number
        state = result.updated_state
        action_count += 1
        if state.turn_number != previous_round:
            _log_round_summary(state, previous_round)

    winner = state.winner_index
    if winner is not None:
        logger.info(
            '%s wins with %d victory points',
            state.players[winner].name,
            state.players[winner].victory_points,
        )
    return GameReport(
        winner_index=winner,
        rounds=state.turn_number,
        victory_points=[p.victory_points for p in state.players],
        action_count=action_count,
        reached_round_limit=reached_limit,
    )


def run_simulation(
    num_games: int = 10,
    num_players: int = _DEFAULT_NUM_PLAYERS,
    start_seed: int = 0,
    max_rounds: int = config.MAX_TURNS,
) -> dict[str, object]:
    """Run *num_games* seeded games, print a report and return the statistics.

    Returns a dict with keys:
        - wins: list[int] (by seat index)
        - rounds: list[int] (per game)
        - round_limit_hits: int
        - elapsed: float (seconds)
    """
    t0 = time.monotonic()
    wins = [0] * num_players
    rounds: list[int] = []
    limit_hits = 0
    for game_idx in range(num_games):
        report = run_game(
            num_players, seed=start_seed + game_idx, max_rounds=max_rounds
        )
        rounds.append(report.rounds)
        if report.winner_index is not None:
            wins[report.winner_index] += 1
        if report.reached_round_limit:
            limit_hits += 1
    elapsed = time.monotonic() - t0

    _print_report(wins, rounds, limit_hits, num_games, elapsed)
    return {
        'wins': wins,
        'rounds': rounds,
        'round_limit_hits': limit_hits,
        'elapsed': elapsed,
    }


def format_board(brd: board.Board) -> str:
    """Render one line per tile: index, coordinates, terrain, token, corners."""
    lines = []
    for index, tile in enumerate(brd.tiles):
        c = tile.coord
        token = '-' if tile.number_token == board.NO_TOKEN else str(tile.number_token)
        corners = ' '.join(f'{vid:2d}' for vid in tile.vertex_ids)
        lines.append(
            f'{index:2d} ({c.q:2d},{c.s:2d},{c.r:2d}) '
            f'{tile.tile_type.value:<9} {token:>2}  [{corners}]'
        )
    return '\n'.join(lines)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _end_by_points(state: game_state.GameState) -> None:
    """Finish the game in favour of the highest score, lowest seat on ties."""
    best = max(state.players, key=lambda p: (p.victory_points, -p.player_index))
    state.phase = game_state.GamePhase.ENDED
    state.winner_index = best.player_index
    logger.info('Maximum rounds (%d) reached', state.turn_number)


def _log_round_summary(state: game_state.GameState, round_number: int) -> None:
    logger.info('End of round %d - victory points', round_number)
    for p in state.players:
        logger.info('  %s: %d VP', p.name, p.victory_points)


def _print_report(
    wins: list[int],
    rounds: list[int],
    round_limit_hits: int,
    num_games: int,
    elapsed: float,
) -> None:
    """Print a summary report to stdout."""
    print('=' * 50)
    print('Simulation Results')
    print('=' * 50)
    print(f'Games played:     {num_games}')
    print(f'Round limit hit:  {round_limit_hits}')
    print(f'Elapsed:          {elapsed:.1f}s')
    if rounds:
        print(f'Avg rounds/game:  {sum(rounds) / len(rounds):.1f}')
    print()
    print('Win rates by seat:')
    for i, count in enumerate(wins):
        pct = count / num_games * 100 if num_games > 0 else 0.0
        print(f'  Player {i}: {count:4d} wins  ({pct:.1f}%)')
    print('=' * 50)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description='Simulate random-play games')
    parser.add_argument(
        '--players',
        type=int,
        default=_DEFAULT_NUM_PLAYERS,
        choices=range(turn_manager.MIN_PLAYERS, turn_manager.MAX_PLAYERS + 1),
        help='Number of players (default: %(default)s)',
    )
    parser.add_argument('--games', type=int, default=1, help='Games to play')
    parser.add_argument('--seed', type=int, default=None, help='Seed of the first game')
    parser.add_argument(
        '--config', type=pathlib.Path, default=None, help='YAML file with "turns"'
    )
    parser.add_argument(
        '--rounds', type=int, default=None, help='Round limit (overrides --config)'
    )
    parser.add_argument(
        '-v', '--verbose', action='store_true', help='Log every placement'
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(message)s',
    )

    max_rounds = config.MAX_TURNS
    config_path = args.config or config.CONFIG_PATH
    if args.rounds is not None:
        max_rounds = args.rounds
    elif args.config is None and not config_path.exists():
        logger.info('No config at %s; round limit %d', config_path, max_rounds)
    else:
        try:
            max_rounds = config.load_config(config_path).turns
        except (OSError, config.ConfigError) as exc:
            print(f'Error: {exc}', file=sys.stderr)
            return 1

    if args.games == 1:
        report = run_game(args.players, seed=args.seed, max_rounds=max_rounds)
        print(report.model_dump_json(indent=2))
        return 0

    start_seed = args.seed if args.seed is not None else 0
    run_simulation(args.games, args.players, start_seed, max_rounds)
    return 0


if __name__ == '__main__':
    sys.exit(main())
