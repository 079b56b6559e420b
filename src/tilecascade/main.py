"""Entry point for a headless tilecascade session.

Builds a board, lets the random player make moves, and prints the
resulting board and score tally.
"""
import argparse
import logging
import string

from tilecascade.config import BoardConfig
from tilecascade.constants import GRID_HEIGHT, GRID_WIDTH, TYPE_COUNT
from tilecascade.events.bus import EVENT_SCORE_INCREMENT
from tilecascade.logging_config import setup_logging
from tilecascade.systems.grid import type_map
from tilecascade.systems.random_player_system import RandomPlayerSystem
from tilecascade.world import GameSession, create_game

logger = logging.getLogger(__name__)


def render_board(session: GameSession) -> str:
    """Top row first; one letter per type id, '.' for a destroyed cell."""
    board = session.board.board
    types = type_map(session.world)
    rows = []
    for y in reversed(range(board.height)):
        row = []
        for x in range(board.width):
            type_id = types.get((x, y))
            row.append('.' if type_id is None else string.ascii_uppercase[type_id % 26])
        rows.append(' '.join(row))
    return '\n'.join(rows)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tilecascade", description=__doc__.splitlines()[0])
    parser.add_argument("--width", type=int, default=GRID_WIDTH)
    parser.add_argument("--height", type=int, default=GRID_HEIGHT)
    parser.add_argument("--types", type=int, default=TYPE_COUNT)
    parser.add_argument("--moves", type=int, default=20)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--dt", type=float, default=1/60, help="simulated seconds per tick")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--log-file", default=None)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)
    config = BoardConfig(width=args.width, height=args.height, type_count=args.types)
    session = create_game(config, seed=args.seed)
    player = RandomPlayerSystem(session.world, session.event_bus, max_moves=args.moves)

    tally = {'score': 0, 'rounds': 0, 'best_combo': 0}

    def on_score(sender, **payload):
        tally['score'] += payload['matched_count'] * payload['combo']
        tally['rounds'] += 1
        tally['best_combo'] = max(tally['best_combo'], payload['combo'])

    session.event_bus.subscribe(EVENT_SCORE_INCREMENT, on_score)
    print(render_board(session))
    while not player.finished:
        session.tick(args.dt)
        session.run_until_idle(args.dt)
    print()
    print(render_board(session))
    print(f"moves={player.moves_made} rounds={tally['rounds']} "
          f"best_combo={tally['best_combo']} score={tally['score']}")
    return 0
