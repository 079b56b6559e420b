from __future__ import annotations

from typing import Iterable, Sequence

from esper import World

from tilecascade.components.cell_status import CellStatus
from tilecascade.components.tile import TileType
from tilecascade.config import BoardConfig
from tilecascade.events.bus import EVENT_TICK, EventBus
from tilecascade.systems.grid import cell_at
from tilecascade.world import GameSession, create_game


def drive_ticks(bus: EventBus, count: int = 60, dt: float = 0.02) -> None:
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)


def make_session(
    width: int = 5,
    height: int = 5,
    type_count: int = 5,
    *,
    seed: int = 0,
    reset_on_stalemate: bool = False,
) -> GameSession:
    config = BoardConfig(width=width, height=height, type_count=type_count, reset_on_stalemate=reset_on_stalemate)
    return create_game(config, seed=seed)


def set_types(world: World, rows: Sequence[Sequence[int]]) -> None:
    """Overwrite every cell's type; rows are listed top row first."""
    height = len(rows)
    for row_index, row in enumerate(rows):
        y = height - 1 - row_index
        for x, type_id in enumerate(row):
            cell = cell_at(world, x, y)
            world.component_for_entity(cell, TileType).type_id = type_id
            world.component_for_entity(cell, CellStatus).destroyed = False


def filler_rows(width: int, height: int, offset: int = 1) -> list[list[int]]:
    """Rows (top first) cycling through three types so no run of three exists."""
    return [
        [offset + (x + 2 * y) % 3 for x in range(width)]
        for y in reversed(range(height))
    ]


def snapshot_types(world: World, width: int, height: int) -> dict:
    return {
        (x, y): world.component_for_entity(cell_at(world, x, y), TileType).type_id
        for x in range(width)
        for y in range(height)
    }


def mark_destroyed(world: World, positions: Iterable[tuple[int, int]]) -> None:
    for x, y in positions:
        world.component_for_entity(cell_at(world, x, y), CellStatus).destroyed = True


class RefillSequence:
    """Deterministic stand-in for TileGenerator.refill_type."""

    def __init__(self, values: Sequence[int], fallback: int = 0):
        self.values = list(values)
        self.fallback = fallback

    def __call__(self) -> int:
        if self.values:
            return self.values.pop(0)
        return self.fallback
