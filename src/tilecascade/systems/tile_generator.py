from __future__ import annotations

import random
from typing import Dict, List

from esper import World

from tilecascade.systems.grid import Position


class TileGenerator:
    """Produces cell contents.

    The initial fill avoids creating a run of three with the two cells
    already placed to the left or below; refills draw from the full type
    set and may legally complete a new run, which is what lets cascades
    chain through refills.
    """

    def __init__(self, type_count: int, rng: random.Random | None = None):
        self.type_ids: List[int] = list(range(type_count))
        self.random = rng or random.Random()

    def initial_candidates(self, placed: Dict[Position, int], x: int, y: int) -> List[int]:
        available = list(self.type_ids)
        # Horizontal: exclude the type of a same-typed pair at (x-1, y), (x-2, y).
        if x >= 2:
            left1 = placed.get((x - 1, y))
            left2 = placed.get((x - 2, y))
            if left1 is not None and left1 == left2 and left1 in available:
                available.remove(left1)
        # Vertical: same for (x, y-1), (x, y-2).
        if y >= 2:
            down1 = placed.get((x, y - 1))
            down2 = placed.get((x, y - 2))
            if down1 is not None and down1 == down2 and down1 in available:
                available.remove(down1)
        return available

    def initial_type(self, placed: Dict[Position, int], x: int, y: int) -> int:
        return self.random.choice(self.initial_candidates(placed, x, y))

    def initial_layout(self, width: int, height: int) -> Dict[Position, int]:
        layout: Dict[Position, int] = {}
        for x in range(width):
            for y in range(height):
                layout[(x, y)] = self.initial_type(layout, x, y)
        return layout

    def refill_type(self) -> int:
        return self.random.choice(self.type_ids)


def get_tile_generator(world: World) -> TileGenerator:
    generator = getattr(world, "tile_generator", None)
    if isinstance(generator, TileGenerator):
        return generator
    raise RuntimeError("TileGenerator not attached to world")
