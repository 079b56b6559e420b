from esper import World

from tilecascade.components.cascade_state import CascadeState


def get_or_create_cascade_state(world: World) -> CascadeState:
    """Return the shared CascadeState component, creating it if absent."""
    existing = list(world.get_component(CascadeState))
    if existing:
        return existing[0][1]
    world.create_entity(CascadeState())
    return list(world.get_component(CascadeState))[0][1]
