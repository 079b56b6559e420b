from dataclasses import dataclass
from enum import Enum


class CascadePhase(Enum):
    IDLE = "idle"
    CLEARING = "clearing"
    DROPPING = "dropping"
    FILLING = "filling"
    SETTLING = "settling"
    REMATCHING = "rematching"


@dataclass(slots=True)
class CascadeState:
    """Resolution state shared by the swap validator, input layer and engine."""

    locked: bool = False
    combo_count: int = 0
    phase: CascadePhase = CascadePhase.IDLE
    # Number of episodes started since the world was created.
    episode: int = 0
