from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class MoveAnimation:
    cell: int
    group: int
    start: Tuple[float, float]
    target: Tuple[float, float]
    linear: float = 0.0  # 0..1
    signalled: bool = False
