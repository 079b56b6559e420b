from tilecascade.components.board_position import BoardPosition
from tilecascade.components.display_state import DisplayState
from tilecascade.constants import MOUSE_BUTTON_SECONDARY
from tilecascade.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_MOUSE_PRESS,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_REQUEST,
)
from tilecascade.systems.cascade_state_utils import get_or_create_cascade_state
from tilecascade.systems.grid import cell_at, iter_cells
from tilecascade.systems.match import find_all_matches
from tests.helpers import make_session, snapshot_types


def _record(session, name):
    events = []
    session.event_bus.subscribe(name, lambda sender, **payload: events.append(payload))
    return events


def test_board_builds_one_cell_per_slot():
    session = make_session(4, 3)
    world = session.world
    cells = list(iter_cells(world))
    assert len(cells) == 12
    assert len({cell for _, cell in cells}) == 12
    for (x, y), cell in cells:
        pos = world.component_for_entity(cell, BoardPosition)
        assert (pos.x, pos.y) == (x, y)
        assert world.component_for_entity(cell, DisplayState).at(x, y)
    assert not find_all_matches(world)


def test_first_click_selects_and_second_click_on_same_tile_deselects():
    session = make_session()
    selected = _record(session, EVENT_TILE_SELECTED)
    deselected = _record(session, EVENT_TILE_DESELECTED)
    session.event_bus.emit(EVENT_TILE_CLICK, x=1, y=1)
    assert session.board.selected == (1, 1)
    assert selected == [{"x": 1, "y": 1}]
    session.event_bus.emit(EVENT_TILE_CLICK, x=1, y=1)
    assert session.board.selected is None
    assert deselected[-1]["reason"] == "reselect"


def test_adjacent_click_requests_swap_and_clears_selection():
    session = make_session()
    requests = _record(session, EVENT_TILE_SWAP_REQUEST)
    deselected = _record(session, EVENT_TILE_DESELECTED)
    session.event_bus.emit(EVENT_TILE_CLICK, x=0, y=0)
    session.event_bus.emit(EVENT_TILE_CLICK, x=0, y=1)
    assert session.board.selected is None
    assert requests == [{"src": (0, 0), "dst": (0, 1)}]
    assert deselected[-1]["reason"] == "swap"


def test_distant_click_moves_selection():
    session = make_session()
    requests = _record(session, EVENT_TILE_SWAP_REQUEST)
    session.event_bus.emit(EVENT_TILE_CLICK, x=0, y=0)
    session.event_bus.emit(EVENT_TILE_CLICK, x=3, y=3)
    assert session.board.selected == (3, 3)
    assert requests == []


def test_out_of_bounds_click_is_ignored():
    session = make_session(3, 3)
    session.event_bus.emit(EVENT_TILE_CLICK, x=3, y=0)
    session.event_bus.emit(EVENT_TILE_CLICK, x=0, y=-1)
    assert session.board.selected is None


def test_secondary_click_clears_selection():
    session = make_session()
    deselected = _record(session, EVENT_TILE_DESELECTED)
    session.event_bus.emit(EVENT_TILE_CLICK, x=2, y=2)
    session.event_bus.emit(EVENT_MOUSE_PRESS, button=1)
    assert session.board.selected == (2, 2)
    session.event_bus.emit(EVENT_MOUSE_PRESS, button=MOUSE_BUTTON_SECONDARY)
    assert session.board.selected is None
    assert deselected == [{"reason": "secondary_click", "prev_x": 2, "prev_y": 2}]


def test_reset_board_regenerates_every_cell_without_matches():
    session = make_session(6, 6, 4, seed=3)
    changed = _record(session, EVENT_BOARD_CHANGED)
    cells_before = {pos: cell for pos, cell in iter_cells(session.world)}
    session.event_bus.emit(EVENT_TILE_CLICK, x=0, y=0)

    positions = session.board.reset_board()

    assert len(positions) == 36
    assert changed[-1]["reason"] == "reset"
    assert session.board.selected is None
    assert not find_all_matches(session.world)
    assert {pos: cell for pos, cell in iter_cells(session.world)} == cells_before


def test_reset_board_is_ignored_while_locked():
    session = make_session(4, 4)
    changed = _record(session, EVENT_BOARD_CHANGED)
    before = snapshot_types(session.world, 4, 4)
    get_or_create_cascade_state(session.world).locked = True
    assert session.board.reset_board() == []
    assert changed == []
    assert snapshot_types(session.world, 4, 4) == before


def test_boards_do_not_share_selection():
    first = make_session(3, 3)
    second = make_session(3, 3)
    first.event_bus.emit(EVENT_TILE_CLICK, x=0, y=0)
    assert first.board.selected == (0, 0)
    assert second.board.selected is None
    assert cell_at(first.world, 0, 0) is not None
