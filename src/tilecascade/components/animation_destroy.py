from dataclasses import dataclass

@dataclass(slots=True)
class DestroyAnimation:
    cell: int
    group: int
    linear: float = 0.0  # 0..1; grow then shrink
    signalled: bool = False
