from __future__ import annotations

import logging
import random
from typing import Optional

from esper import World

from tilecascade.events.bus import EVENT_TICK, EVENT_TILE_SWAP_REQUEST, EventBus
from tilecascade.systems.cascade_state_utils import get_or_create_cascade_state
from tilecascade.systems.match import find_valid_swaps

logger = logging.getLogger(__name__)


class RandomPlayerSystem:
    """Requests a random valid swap whenever the board is idle."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rng: Optional[random.Random] = None,
        *,
        max_moves: Optional[int] = None,
        think_time: float = 0.0,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.random = rng or getattr(world, "random", None) or random.Random()
        self.max_moves = max_moves
        self.think_time = think_time
        self.moves_made = 0
        self.delay_remaining = think_time
        self.stuck = False
        event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def finished(self) -> bool:
        if self.stuck:
            return True
        return self.max_moves is not None and self.moves_made >= self.max_moves

    def on_tick(self, sender, **kwargs):
        if self.finished or get_or_create_cascade_state(self.world).locked:
            return
        self.delay_remaining -= kwargs.get('dt', 1/60)
        if self.delay_remaining > 0:
            return
        swaps = find_valid_swaps(self.world)
        if not swaps:
            logger.info("No valid swaps available; random player stops")
            self.stuck = True
            return
        src, dst = self.random.choice(swaps)
        self.moves_made += 1
        self.delay_remaining = self.think_time
        logger.debug("Random player move %d: %s <-> %s", self.moves_made, src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=src, dst=dst)
