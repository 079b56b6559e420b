from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set

from esper import World

from tilecascade.components.cascade_state import CascadePhase, CascadeState
from tilecascade.components.cell_status import CellStatus
from tilecascade.components.display_state import DisplayState
from tilecascade.components.tile import TileType
from tilecascade.config import BoardConfig
from tilecascade.constants import EMPTY_TYPE
from tilecascade.errors import InvariantViolation
from tilecascade.events.bus import (
    EVENT_ANIMATION_START,
    EVENT_ANIMATION_TASK_DONE,
    EVENT_BOARD_CHANGED,
    EVENT_BOARD_STALEMATE,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STARTED,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_INCREMENT,
    EVENT_TICK,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from tilecascade.systems.animation import KIND_DESTROY, KIND_MOVE
from tilecascade.systems.board import respawn_full_board
from tilecascade.systems.cascade_state_utils import get_or_create_cascade_state
from tilecascade.systems.grid import (
    apply_drop_plan,
    compute_drop_plan,
    destroyed_cells,
    iter_cells,
    require_index_of,
)
from tilecascade.systems.match import find_all_matches, find_valid_swaps, match_positions
from tilecascade.systems.tile_generator import get_tile_generator

logger = logging.getLogger(__name__)


class CascadeSystem:
    """Resolves a board after an accepted swap until no match remains.

    One episode runs Settling (the swapped pair) and then repeats
    Rematching -> Clearing -> Dropping -> Filling -> Settling. Clearing and
    Settling fan out one presentation task per cell; the engine only moves
    on during a tick on which every task of the current group has reported
    done. Grid state is final before each fan-out, so presentation never
    gates logic, and scoring is reported as soon as a match is detected.
    """

    def __init__(self, world: World, event_bus: EventBus, config: BoardConfig | None = None):
        self.world = world
        self.event_bus = event_bus
        self.config = config or getattr(world, "config", None) or BoardConfig()
        self._group = 0
        self._pending: Set[int] = set()
        self.event_bus.subscribe(EVENT_TILE_SWAP_VALID, self.on_swap_valid)
        self.event_bus.subscribe(EVENT_ANIMATION_TASK_DONE, self.on_task_done)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def state(self) -> CascadeState:
        return get_or_create_cascade_state(self.world)

    def is_busy(self) -> bool:
        return self.state.locked

    is_locked = is_busy

    def on_swap_valid(self, sender, **kwargs):
        self.begin(kwargs.get('cells') or ())

    def begin(self, cells: Iterable[int] = ()):
        """Lock the board and start an episode with the given cells moving into place."""
        state = self.state
        if state.locked:
            raise InvariantViolation("Cascade episode started while another is running")
        state.locked = True
        state.combo_count = 0
        state.episode += 1
        positions = [require_index_of(self.world, cell) for cell in cells]
        logger.info("Cascade episode %d started", state.episode)
        self.event_bus.emit(EVENT_CASCADE_STARTED, episode=state.episode, positions=positions)
        self._settle(self.config.swap_duration)

    def on_task_done(self, sender, **kwargs):
        if kwargs.get('group') != self._group:
            return
        self._pending.discard(kwargs.get('cell'))

    def on_tick(self, sender, **kwargs):
        state = self.state
        if state.phase is CascadePhase.IDLE or self._pending:
            return
        if state.phase is CascadePhase.SETTLING:
            self._rematch()
        elif state.phase is CascadePhase.CLEARING:
            self._drop()
            self._fill()
            self._settle(self.config.settle_duration)
        else:
            raise InvariantViolation(f"Cascade waiting in transient phase {state.phase}")

    # -- steps -------------------------------------------------------------

    def _rematch(self):
        state = self.state
        state.phase = CascadePhase.REMATCHING
        matches = find_all_matches(self.world)
        if not matches:
            self._finish()
            return
        state.combo_count += 1
        positions = match_positions(self.world, matches)
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.combo_count, positions=positions)
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), combo=state.combo_count)
        self.event_bus.emit(EVENT_SCORE_INCREMENT, matched_count=len(positions), combo=state.combo_count)
        self._clear(matches, positions)

    def _clear(self, matches: Set[int], positions: List[tuple]):
        self.state.phase = CascadePhase.CLEARING
        types = []
        ordered = []
        board_cells = {require_index_of(self.world, cell): cell for cell in matches}
        for pos in positions:
            cell = board_cells[pos]
            tile = self.world.component_for_entity(cell, TileType)
            types.append((pos[0], pos[1], tile.type_id))
            tile.type_id = EMPTY_TYPE
            self.world.component_for_entity(cell, CellStatus).destroyed = True
            ordered.append(cell)
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions, types=types)
        self._spawn(KIND_DESTROY, ordered, self.config.destroy_duration)

    def _drop(self):
        self.state.phase = CascadePhase.DROPPING
        moves = apply_drop_plan(self.world, compute_drop_plan(self.world))
        self.event_bus.emit(
            EVENT_GRAVITY_APPLIED,
            moves=[{'cell': m.cell, 'from': m.source, 'to': m.target} for m in moves],
        )

    def _fill(self):
        self.state.phase = CascadePhase.FILLING
        generator = get_tile_generator(self.world)
        by_column: Dict[int, List[tuple]] = {}
        for cell in destroyed_cells(self.world):
            x, y = require_index_of(self.world, cell)
            by_column.setdefault(x, []).append((y, cell))
        new_tiles = []
        for x, column in sorted(by_column.items()):
            vacated = len(column)
            # Top slot first; refills enter from above the board, keeping their order.
            for y, cell in sorted(column, reverse=True):
                self.world.component_for_entity(cell, TileType).type_id = generator.refill_type()
                self.world.component_for_entity(cell, CellStatus).destroyed = False
                display = self.world.component_for_entity(cell, DisplayState)
                display.x, display.y = x, y + vacated
                display.scale = 1.0
                display.visible = True
                new_tiles.append((x, y))
        self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=sorted(new_tiles))

    def _settle(self, duration: float):
        self.state.phase = CascadePhase.SETTLING
        moving = []
        for (x, y), cell in iter_cells(self.world):
            display = self.world.component_for_entity(cell, DisplayState)
            if not display.at(x, y):
                moving.append(cell)
        self._spawn(KIND_MOVE, moving, duration)

    def _finish(self):
        state = self.state
        state.phase = CascadePhase.IDLE
        state.locked = False
        self._pending.clear()
        logger.info("Cascade episode %d complete after %d round(s)", state.episode, state.combo_count)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=state.combo_count)
        if find_valid_swaps(self.world):
            return
        reset = self.config.reset_on_stalemate
        logger.info("No valid swaps left%s", ", respawning board" if reset else "")
        self.event_bus.emit(EVENT_BOARD_STALEMATE, reset=reset)
        if reset:
            positions = respawn_full_board(self.world)
            self.event_bus.emit(EVENT_BOARD_CHANGED, reason="stalemate_reset", positions=positions)

    def _spawn(self, kind: str, cells: List[int], duration: float):
        """Fan out one presentation task per cell; the next tick with none pending is the barrier."""
        self._group += 1
        self._pending = set(cells)
        self.event_bus.emit(EVENT_ANIMATION_START, kind=kind, items=list(cells), group=self._group, duration=duration)
