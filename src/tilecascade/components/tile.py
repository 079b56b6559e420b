from dataclasses import dataclass

from tilecascade.constants import EMPTY_TYPE


@dataclass(slots=True)
class TileType:
    """Per-cell match category.

    Holds EMPTY_TYPE while the cell is destroyed and waiting for a refill.
    """
    type_id: int = EMPTY_TYPE
