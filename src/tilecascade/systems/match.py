from __future__ import annotations

from typing import Dict, Iterable, List, Set, Tuple

from esper import World

from tilecascade.constants import MIN_RUN_NEIGHBOURS
from tilecascade.systems.grid import Position, board_dimensions, get_board, iter_cells, type_map

# (dx, dy) pairs walked from an origin; each axis pairs opposite directions.
UP = (0, 1)
DOWN = (0, -1)
LEFT = (-1, 0)
RIGHT = (1, 0)
AXES: Tuple[Tuple[Tuple[int, int], Tuple[int, int]], ...] = ((UP, DOWN), (LEFT, RIGHT))

Snapshot = Dict[Position, Tuple[int, int]]


def live_snapshot(world: World) -> Snapshot:
    """Map each non-destroyed position to (cell, type_id)."""
    snapshot: Snapshot = {}
    types = type_map(world)
    for pos, cell in iter_cells(world):
        if pos in types:
            snapshot[pos] = (cell, types[pos])
    return snapshot


def _walk(snapshot: Snapshot, origin: Position, direction: Tuple[int, int], type_id: int) -> List[int]:
    x, y = origin
    dx, dy = direction
    run: List[int] = []
    x, y = x + dx, y + dy
    # Destroyed and out-of-range positions are absent from the snapshot.
    while (x, y) in snapshot and snapshot[(x, y)][1] == type_id:
        run.append(snapshot[(x, y)][0])
        x, y = x + dx, y + dy
    return run


def origin_matches(snapshot: Snapshot, origin: Position) -> List[int]:
    """Cells a single origin contributes: qualifying axis neighbours plus itself once."""
    entry = snapshot.get(origin)
    if entry is None:
        return []
    cell, type_id = entry
    matched: List[int] = []
    for first, second in AXES:
        neighbours = _walk(snapshot, origin, first, type_id) + _walk(snapshot, origin, second, type_id)
        if len(neighbours) >= MIN_RUN_NEIGHBOURS:
            matched.extend(neighbours)
    if matched:
        matched.append(cell)
    return matched


def find_all_matches(world: World) -> Set[int]:
    """Detect every cell that belongs to a horizontal or vertical run of 3 or more."""
    snapshot = live_snapshot(world)
    matches: Set[int] = set()
    for origin in snapshot:
        matches.update(origin_matches(snapshot, origin))
    return matches


def match_positions(world: World, cells: Iterable[int]) -> List[Position]:
    board = get_board(world)
    wanted = set(cells)
    return sorted(pos for pos, cell in board.cells.items() if cell in wanted)


def _has_line_match(types: Dict[Position, int], pos: Position) -> bool:
    """Return True if a horizontal or vertical run of 3+ passes through pos."""
    tval = types.get(pos)
    if tval is None:
        return False
    for first, second in AXES:
        count = 0
        for dx, dy in (first, second):
            x, y = pos[0] + dx, pos[1] + dy
            while types.get((x, y)) == tval:
                count += 1
                x, y = x + dx, y + dy
        if count >= MIN_RUN_NEIGHBOURS:
            return True
    return False


def predict_swap_creates_match(
    world: World, src: Position, dst: Position, *, types: Dict[Position, int] | None = None
) -> bool:
    """Return True if swapping src/dst would create a run through either cell."""
    tile_map = types if types is not None else type_map(world)
    if src not in tile_map or dst not in tile_map:
        return False
    swapped = tile_map.copy()
    swapped[src], swapped[dst] = swapped[dst], swapped[src]
    return _has_line_match(swapped, src) or _has_line_match(swapped, dst)


def find_valid_swaps(world: World) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    dims = board_dimensions(world)
    if not dims:
        return []
    width, height = dims
    tile_map = type_map(world)
    swaps: List[Tuple[Position, Position]] = []
    for x in range(width):
        for y in range(height):
            pos = (x, y)
            if pos not in tile_map:
                continue
            for neighbour in ((x + 1, y), (x, y + 1)):
                if neighbour not in tile_map or tile_map[neighbour] == tile_map[pos]:
                    continue
                if predict_swap_creates_match(world, pos, neighbour, types=tile_map):
                    swaps.append((pos, neighbour))
    return swaps
