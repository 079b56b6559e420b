import pytest

from tilecascade.systems.grid import cell_at
from tilecascade.systems.match import (
    find_all_matches,
    find_valid_swaps,
    live_snapshot,
    match_positions,
    origin_matches,
    predict_swap_creates_match,
)
from tests.helpers import filler_rows, make_session, mark_destroyed, set_types


def _board_with(width, height, cells, type_id=0):
    """Filler board with the given (x, y) cells overwritten to type_id."""
    session = make_session(width, height)
    rows = filler_rows(width, height)
    for x, y in cells:
        rows[height - 1 - y][x] = type_id
    set_types(session.world, rows)
    return session


def test_filler_board_has_no_matches():
    session = _board_with(6, 6, [])
    assert find_all_matches(session.world) == set()


@pytest.mark.parametrize("k", [3, 4, 5, 6])
def test_horizontal_run_of_k(k):
    session = _board_with(6, 4, [(x, 1) for x in range(k)])
    matches = find_all_matches(session.world)
    assert len(matches) == k
    assert match_positions(session.world, matches) == [(x, 1) for x in range(k)]


@pytest.mark.parametrize("k", [3, 4, 5])
def test_vertical_run_of_k(k):
    session = _board_with(4, 5, [(2, y) for y in range(k)])
    matches = find_all_matches(session.world)
    assert match_positions(session.world, matches) == [(2, y) for y in range(k)]


def test_pair_is_not_a_match():
    session = _board_with(5, 5, [(0, 0), (1, 0)])
    assert find_all_matches(session.world) == set()


def test_l_shape_counts_corner_once():
    cells = [(0, 0), (1, 0), (2, 0), (0, 1), (0, 2)]
    session = _board_with(5, 5, cells)
    world = session.world
    matches = find_all_matches(world)
    assert len(matches) == 5
    corner = origin_matches(live_snapshot(world), (0, 0))
    assert corner.count(cell_at(world, 0, 0)) == 1
    assert len(corner) == 5


def test_cross_shape():
    cells = [(2, 2), (1, 2), (3, 2), (2, 1), (2, 3)]
    session = _board_with(5, 5, cells)
    assert match_positions(session.world, find_all_matches(session.world)) == sorted(cells)


def test_two_separate_runs_are_merged_into_one_set():
    cells = [(0, 0), (1, 0), (2, 0), (4, 2), (4, 3), (4, 4)]
    session = _board_with(5, 5, cells)
    assert len(find_all_matches(session.world)) == 6


def test_destroyed_cell_breaks_run():
    session = _board_with(5, 5, [(0, 0), (1, 0), (2, 0)])
    mark_destroyed(session.world, [(1, 0)])
    assert find_all_matches(session.world) == set()


def test_destroyed_cell_never_in_result():
    session = _board_with(5, 5, [(0, 0), (1, 0), (2, 0), (3, 0)])
    world = session.world
    mark_destroyed(world, [(0, 0)])
    matches = find_all_matches(world)
    assert match_positions(world, matches) == [(1, 0), (2, 0), (3, 0)]
    assert origin_matches(live_snapshot(world), (0, 0)) == []


def test_boundary_runs_are_detected():
    session = _board_with(4, 4, [(3, 1), (3, 2), (3, 3)])
    assert match_positions(session.world, find_all_matches(session.world)) == [(3, 1), (3, 2), (3, 3)]


def test_predict_and_enumerate_valid_swaps():
    # Swapping (2, 0) with (2, 1) completes a horizontal run on the bottom row.
    session = _board_with(5, 5, [(0, 0), (1, 0), (2, 1)])
    world = session.world
    assert predict_swap_creates_match(world, (2, 0), (2, 1))
    assert ((2, 0), (2, 1)) in find_valid_swaps(world)
    assert not predict_swap_creates_match(world, (4, 4), (4, 3))
