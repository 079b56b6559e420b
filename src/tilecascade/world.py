from __future__ import annotations

import random
from dataclasses import dataclass

from esper import World

from tilecascade.components.cascade_state import CascadeState
from tilecascade.config import BoardConfig
from tilecascade.events.bus import EVENT_TICK, EventBus
from tilecascade.systems.animation import AnimationSystem
from tilecascade.systems.board import BoardSystem
from tilecascade.systems.cascade import CascadeSystem
from tilecascade.systems.swap import SwapSystem
from tilecascade.systems.tile_generator import TileGenerator


def create_world(
    event_bus: EventBus,
    config: BoardConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    config = (config or BoardConfig()).validate()
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "config", config)
    setattr(world, "tile_generator", TileGenerator(config.type_count, world.random))

    # Register the shared cascade state resource.
    world.create_entity(CascadeState())
    return world


@dataclass(slots=True)
class GameSession:
    """One board with its systems wired to a shared bus."""

    world: World
    event_bus: EventBus
    board: BoardSystem
    swaps: SwapSystem
    cascade: CascadeSystem
    animation: AnimationSystem

    def tick(self, dt: float = 1/60) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    def run_until_idle(self, dt: float = 1/60, max_ticks: int = 100_000) -> int:
        """Tick until the running cascade episode (if any) has finished."""
        ticks = 0
        while self.cascade.is_busy():
            if ticks >= max_ticks:
                raise RuntimeError(f"Cascade still running after {max_ticks} ticks")
            self.tick(dt)
            ticks += 1
        return ticks


def create_game(
    config: BoardConfig | None = None,
    *,
    seed: int | None = None,
    event_bus: EventBus | None = None,
) -> GameSession:
    bus = event_bus or EventBus()
    world = create_world(bus, config, rng=random.Random(seed))
    config = world.config
    board = BoardSystem(world, bus, config.width, config.height)
    swaps = SwapSystem(world, bus)
    animation = AnimationSystem(world, bus)
    cascade = CascadeSystem(world, bus, config)
    return GameSession(world=world, event_bus=bus, board=board, swaps=swaps, cascade=cascade, animation=animation)
