from tilecascade.main import build_parser, main, render_board
from tests.helpers import make_session, mark_destroyed, set_types


def test_render_board_lists_top_row_first():
    session = make_session(3, 2)
    set_types(session.world, [[0, 1, 2], [3, 4, 0]])
    mark_destroyed(session.world, [(1, 0)])
    assert render_board(session) == "A B C\nD . A"


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert (args.width, args.height, args.types) == (8, 8, 5)
    assert args.seed is None and not args.verbose


def test_main_runs_seeded_session(capsys):
    assert main(["--width", "6", "--height", "6", "--moves", "2", "--seed", "7", "--dt", "0.5"]) == 0
    out = capsys.readouterr().out
    summary = out.strip().splitlines()[-1]
    assert summary.startswith("moves=2 ")
    assert "score=" in summary
