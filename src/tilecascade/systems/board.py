from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from esper import World

from tilecascade.components.board import Board
from tilecascade.components.board_position import BoardPosition
from tilecascade.components.cell_status import CellStatus
from tilecascade.components.display_state import DisplayState
from tilecascade.components.tile import TileType
from tilecascade.constants import MOUSE_BUTTON_SECONDARY, RESPAWN_MAX_ATTEMPTS
from tilecascade.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_MOUSE_PRESS,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_REQUEST,
    EventBus,
)
from tilecascade.systems.cascade_state_utils import get_or_create_cascade_state
from tilecascade.systems.grid import Position, get_board, is_adjacent, iter_cells
from tilecascade.systems.match import find_all_matches, find_valid_swaps
from tilecascade.systems.tile_generator import TileGenerator, get_tile_generator

logger = logging.getLogger(__name__)


def apply_layout(world: World, layout: Dict[Position, int]) -> List[Position]:
    """Write a full layout onto the existing cells and snap their display into place."""
    positions: List[Position] = []
    for pos, cell in iter_cells(world):
        world.component_for_entity(cell, TileType).type_id = layout[pos]
        world.component_for_entity(cell, CellStatus).destroyed = False
        display = world.component_for_entity(cell, DisplayState)
        display.x, display.y = pos
        display.scale = 1.0
        display.visible = True
        positions.append(pos)
    return positions


def respawn_full_board(
    world: World,
    generator: TileGenerator | None = None,
    *,
    max_attempts: int = RESPAWN_MAX_ATTEMPTS,
) -> List[Position]:
    """Refill the entire board with no matches and at least one valid move."""
    generator = generator or get_tile_generator(world)
    board = get_board(world)
    for _ in range(max_attempts):
        positions = apply_layout(world, generator.initial_layout(board.width, board.height))
        if find_all_matches(world):
            continue
        if not find_valid_swaps(world):
            continue
        return positions
    raise RuntimeError("Unable to respawn board without matches and valid swaps")


class BoardSystem:
    """Builds the grid of cells and turns clicks into swap requests.

    The current selection lives on this instance, so separate boards
    never share it.
    """

    def __init__(self, world: World, event_bus: EventBus, width: int = 8, height: int = 8):
        self.world = world
        self.event_bus = event_bus
        self.board_entity = self.world.create_entity()
        self.world.add_component(self.board_entity, Board(width=width, height=height))
        self.selected: Optional[Tuple[int, int]] = None
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self._init_board()

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    def _init_board(self):
        board = self.board
        layout = get_tile_generator(self.world).initial_layout(board.width, board.height)
        for x in range(board.width):
            for y in range(board.height):
                ent = self.world.create_entity(
                    BoardPosition(x=x, y=y),
                    TileType(type_id=layout[(x, y)]),
                    CellStatus(),
                    DisplayState(x=x, y=y),
                )
                board.cells[(x, y)] = ent
        logger.debug("Created %dx%d board", board.width, board.height)

    def reset_board(self) -> List[Position]:
        """Regenerate every cell with the initial-fill policy."""
        if get_or_create_cascade_state(self.world).locked:
            logger.debug("Ignoring board reset while a cascade is running")
            return []
        board = self.board
        positions = apply_layout(self.world, get_tile_generator(self.world).initial_layout(board.width, board.height))
        self._clear_selection("reset")
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason="reset", positions=positions)
        logger.info("Board reset")
        return positions

    def on_tile_click(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        if not self.board.in_bounds(x, y):
            return
        if get_or_create_cascade_state(self.world).locked:
            return
        if self.selected is None:
            self._select((x, y))
        elif self.selected == (x, y):
            self._clear_selection("reselect")
        elif is_adjacent(self.selected, (x, y)):
            src = self.selected
            self._clear_selection("swap")
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=(x, y))
        else:
            # Change selection to new tile
            self._select((x, y))

    def on_mouse_press(self, sender, **kwargs):
        if kwargs.get('button') != MOUSE_BUTTON_SECONDARY:
            return
        self._clear_selection("secondary_click")

    def _select(self, pos: Tuple[int, int]):
        self.selected = pos
        self.event_bus.emit(EVENT_TILE_SELECTED, x=pos[0], y=pos[1])

    def _clear_selection(self, reason: str):
        prev = self.selected
        if prev is None:
            return
        self.selected = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_x=prev[0], prev_y=prev[1])
