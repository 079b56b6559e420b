from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from esper import World

from tilecascade.components.board import Board
from tilecascade.components.board_position import BoardPosition
from tilecascade.components.cell_status import CellStatus
from tilecascade.components.tile import TileType
from tilecascade.errors import InvariantViolation, OutOfBounds

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


@dataclass(slots=True)
class GravityMove:
    cell: int
    source: Position
    target: Position


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def board_dimensions(world: World) -> Tuple[int, int] | None:
    for _, board in world.get_component(Board):
        return board.width, board.height
    return None


def is_adjacent(a: Position, b: Position) -> bool:
    ax, ay = a
    bx, by = b
    return (abs(ax - bx) == 1 and ay == by) or (abs(ay - by) == 1 and ax == bx)


def cell_at(world: World, x: int, y: int) -> int:
    """Return the cell entity stored at (x, y)."""
    board = get_board(world)
    if not board.in_bounds(x, y):
        raise OutOfBounds(x, y, board.width, board.height)
    cell = board.cells.get((x, y))
    if cell is None:
        _violation(f"No cell mapped at ({x}, {y})")
    position = world.component_for_entity(cell, BoardPosition)
    if (position.x, position.y) != (x, y):
        _violation(f"Cell {cell} mapped at ({x}, {y}) records ({position.x}, {position.y})")
    return cell


def index_of(world: World, cell: int) -> Optional[Position]:
    """Coordinate of a placed cell, or None when the cell is not on the grid."""
    position = world.try_component(cell, BoardPosition)
    if position is None:
        return None
    board = get_board(world)
    if board.cells.get((position.x, position.y)) != cell:
        return None
    return position.x, position.y


def require_index_of(world: World, cell: int) -> Position:
    pos = index_of(world, cell)
    if pos is None:
        _violation(f"Cell {cell} is not placed at its recorded coordinate")
    return pos


def swap_cells(world: World, a: int, b: int) -> None:
    """Exchange the grid positions of two placed cells."""
    pos_a = require_index_of(world, a)
    pos_b = require_index_of(world, b)
    _place(world, a, pos_b)
    _place(world, b, pos_a)


def iter_cells(world: World) -> Iterator[Tuple[Position, int]]:
    board = get_board(world)
    for x in range(board.width):
        for y in range(board.height):
            yield (x, y), board.cells[(x, y)]


def is_destroyed(world: World, cell: int) -> bool:
    return world.component_for_entity(cell, CellStatus).destroyed


def type_of(world: World, cell: int) -> int:
    return world.component_for_entity(cell, TileType).type_id


def type_map(world: World) -> Dict[Position, int]:
    """Return mapping of non-destroyed cell positions to their type ids."""
    mapping: Dict[Position, int] = {}
    for pos, cell in iter_cells(world):
        if is_destroyed(world, cell):
            continue
        mapping[pos] = type_of(world, cell)
    return mapping


def destroyed_cells(world: World) -> List[int]:
    """Destroyed cells, column by column from the bottom up."""
    return [cell for _, cell in iter_cells(world) if is_destroyed(world, cell)]


def compute_drop_plan(world: World) -> Dict[int, int]:
    """Map every surviving cell that must fall to its fall distance."""
    board = get_board(world)
    plan: Dict[int, int] = {}
    for x in range(board.width):
        gap = 0
        for y in range(board.height):
            cell = board.cells[(x, y)]
            if is_destroyed(world, cell):
                gap += 1
            elif gap:
                plan[cell] = gap
    return plan


def apply_drop_plan(world: World, plan: Dict[int, int]) -> List[GravityMove]:
    """Move planned cells down and stack the destroyed cells of each column on top."""
    board = get_board(world)
    columns = sorted({require_index_of(world, cell)[0] for cell in plan})
    moves: List[GravityMove] = []
    for x in columns:
        column = [board.cells[(x, y)] for y in range(board.height)]
        placement: Dict[int, int] = {}
        for y, cell in enumerate(column):
            if is_destroyed(world, cell):
                continue
            target = y - plan.get(cell, 0)
            if target in placement:
                _violation(f"Drop plan sends two cells to ({x}, {target})")
            placement[target] = cell
            if target != y:
                moves.append(GravityMove(cell=cell, source=(x, y), target=(x, target)))
        free_rows = [y for y in range(board.height) if y not in placement]
        vacated = [cell for cell in column if is_destroyed(world, cell)]
        if free_rows != list(range(board.height - len(vacated), board.height)):
            _violation(f"Column {x} does not leave its destroyed cells on top after a drop")
        placement.update(zip(free_rows, vacated))
        for y, cell in placement.items():
            _place(world, cell, (x, y))
    return moves


def _place(world: World, cell: int, pos: Position) -> None:
    board = get_board(world)
    board.cells[pos] = cell
    position = world.component_for_entity(cell, BoardPosition)
    position.x, position.y = pos


def _violation(message: str):
    logger.error(message)
    raise InvariantViolation(message)
