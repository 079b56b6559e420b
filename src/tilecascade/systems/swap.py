from __future__ import annotations

import logging
from enum import Enum
from typing import Tuple

from esper import World

from tilecascade.errors import InvalidSwap, OutOfBounds
from tilecascade.events.bus import (
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from tilecascade.systems.cascade_state_utils import get_or_create_cascade_state
from tilecascade.systems.grid import cell_at, is_adjacent, is_destroyed, require_index_of, swap_cells
from tilecascade.systems.match import find_all_matches

logger = logging.getLogger(__name__)


class SwapOutcome(Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class SwapSystem:
    """Applies a tentative swap and keeps it only when it creates a match.

    An accepted swap is announced with EVENT_TILE_SWAP_VALID, which hands the
    board to the cascade system; a swap that matches nothing is reverted
    before EVENT_TILE_SWAP_INVALID goes out.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        try:
            self.try_swap_positions(src, dst)
        except OutOfBounds as exc:
            logger.debug("Swap request out of bounds: %s", exc)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason="out_of_bounds")
        except InvalidSwap as exc:
            logger.debug("%s", exc)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason=exc.reason)

    def try_swap_positions(self, src: Tuple[int, int], dst: Tuple[int, int]) -> SwapOutcome:
        a = cell_at(self.world, *src)
        b = cell_at(self.world, *dst)
        return self.try_swap(a, b)

    def try_swap(self, a: int, b: int) -> SwapOutcome:
        state = get_or_create_cascade_state(self.world)
        src = require_index_of(self.world, a)
        dst = require_index_of(self.world, b)
        if state.locked:
            raise InvalidSwap(src, dst, "locked")
        if not is_adjacent(src, dst):
            raise InvalidSwap(src, dst, "not_adjacent")
        if is_destroyed(self.world, a) or is_destroyed(self.world, b):
            raise InvalidSwap(src, dst, "destroyed")
        swap_cells(self.world, a, b)
        if not find_all_matches(self.world):
            swap_cells(self.world, a, b)
            logger.debug("Swap %s <-> %s rejected: no match", src, dst)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst, reason="no_match")
            return SwapOutcome.REJECTED
        logger.debug("Swap %s <-> %s accepted", src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst, cells=(a, b))
        return SwapOutcome.ACCEPTED
