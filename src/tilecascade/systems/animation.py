import logging
from typing import Dict, List, Set, Tuple

from esper import World

from tilecascade.animation_factory import AnimationFactory
from tilecascade.components.animation_destroy import DestroyAnimation
from tilecascade.components.animation_move import MoveAnimation
from tilecascade.components.display_state import DisplayState
from tilecascade.components.duration import Duration
from tilecascade.constants import DESTROY_GROW_SHARE, DESTROY_PEAK_SCALE
from tilecascade.events.bus import (EVENT_TICK, EventBus, EVENT_ANIMATION_START, EVENT_ANIMATION_TASK_DONE,
                                    EVENT_ANIMATION_COMPLETE)

logger = logging.getLogger(__name__)

KIND_DESTROY = 'destroy'
KIND_MOVE = 'move'


class AnimationSystem:
    """Drives per-cell tweens; each animation is its own entity.

    Only DisplayState is touched here, never the grid. Every animation
    reports EVENT_ANIMATION_TASK_DONE exactly once, and a group reports
    EVENT_ANIMATION_COMPLETE once all of its tasks are done.
    """
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.factory = AnimationFactory(world)
        # group -> (kind, items, cells still running)
        self._groups: Dict[int, Tuple[str, List[int], Set[int]]] = {}
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)

    def on_animation_start(self, sender, **kwargs):
        kind = kwargs.get('kind')
        group = kwargs.get('group')
        items = list(kwargs.get('items', []))
        if kind not in (KIND_DESTROY, KIND_MOVE) or group is None:
            return
        if group in self._groups:
            # Repeated start for a running group: its tasks are already spawned.
            return
        duration = kwargs.get('duration')
        if not items:
            self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=kind, items=[], group=group)
            return
        self._groups[group] = (kind, items, set(items))
        extra = {'duration': duration} if duration else {}
        if kind == KIND_DESTROY:
            self.factory.create_destroy_group(items, group, **extra)
        else:
            self.factory.create_move_group(items, group, **extra)

    def is_animating(self) -> bool:
        return bool(self._groups)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        # Destroy progression: grow to the peak scale, then shrink away.
        for ent, anim in list(self.world.get_component(DestroyAnimation)):
            d = self.world.component_for_entity(ent, Duration)
            anim.linear = min(1.0, anim.linear + dt / d.value)
            display = self.world.component_for_entity(anim.cell, DisplayState)
            display.scale = self._destroy_scale(anim.linear)
            if anim.linear >= 1.0:
                display.visible = False
                self._finish(ent, anim, KIND_DESTROY)
        # Move progression
        for ent, anim in list(self.world.get_component(MoveAnimation)):
            d = self.world.component_for_entity(ent, Duration)
            anim.linear = min(1.0, anim.linear + dt / d.value)
            display = self.world.component_for_entity(anim.cell, DisplayState)
            sx, sy = anim.start
            tx, ty = anim.target
            if anim.linear >= 1.0:
                display.x, display.y = tx, ty
                self._finish(ent, anim, KIND_MOVE)
            else:
                display.x = sx + (tx - sx) * anim.linear
                display.y = sy + (ty - sy) * anim.linear

    @staticmethod
    def _destroy_scale(linear: float) -> float:
        if linear <= DESTROY_GROW_SHARE:
            return 1.0 + (DESTROY_PEAK_SCALE - 1.0) * (linear / DESTROY_GROW_SHARE)
        shrink = (linear - DESTROY_GROW_SHARE) / (1.0 - DESTROY_GROW_SHARE)
        return max(0.0, DESTROY_PEAK_SCALE * (1.0 - shrink))

    def _finish(self, ent: int, anim, kind: str):
        if not anim.signalled:
            anim.signalled = True
            self.event_bus.emit(EVENT_ANIMATION_TASK_DONE, kind=kind, cell=anim.cell, group=anim.group)
            entry = self._groups.get(anim.group)
            if entry is not None:
                _, items, running = entry
                running.discard(anim.cell)
                if not running:
                    del self._groups[anim.group]
                    logger.debug("Animation group %d (%s) complete", anim.group, kind)
                    self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind=kind, items=items, group=anim.group)
        self._delete_animation_entity(ent)

    def _delete_animation_entity(self, ent: int):
        self.world.delete_entity(ent, immediate=True)
