from esper import World
from tilecascade.components.animation_destroy import DestroyAnimation
from tilecascade.components.animation_move import MoveAnimation
from tilecascade.components.board_position import BoardPosition
from tilecascade.components.display_state import DisplayState
from tilecascade.components.duration import Duration
from tilecascade.constants import DESTROY_DURATION, SETTLE_DURATION
from typing import List

class AnimationFactory:
    def __init__(self, world: World):
        self.world = world

    def create_destroy_group(self, cells: List[int], group: int, duration: float = DESTROY_DURATION) -> List[int]:
        ents = []
        for cell in cells:
            ent = self.world.create_entity()
            self.world.add_component(ent, DestroyAnimation(cell=cell, group=group))
            self.world.add_component(ent, Duration(duration))
            ents.append(ent)
        return ents

    def create_move_group(self, cells: List[int], group: int, duration: float = SETTLE_DURATION) -> List[int]:
        ents = []
        for cell in cells:
            display = self.world.component_for_entity(cell, DisplayState)
            target = self.world.component_for_entity(cell, BoardPosition)
            ent = self.world.create_entity()
            self.world.add_component(ent, MoveAnimation(
                cell=cell,
                group=group,
                start=(display.x, display.y),
                target=(float(target.x), float(target.y)),
            ))
            self.world.add_component(ent, Duration(duration))
            ents.append(ent)
        return ents
