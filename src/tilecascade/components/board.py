from dataclasses import dataclass, field
from typing import Dict, Tuple

@dataclass(slots=True)
class Board:
    """Grid dimensions plus the coordinate -> cell entity mapping."""
    width: int
    height: int
    cells: Dict[Tuple[int, int], int] = field(default_factory=dict)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height
