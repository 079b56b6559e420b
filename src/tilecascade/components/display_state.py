from dataclasses import dataclass

@dataclass(slots=True)
class DisplayState:
    """Visual state owned by the presentation layer, in grid units."""
    x: float
    y: float
    scale: float = 1.0
    visible: bool = True

    def at(self, x: float, y: float) -> bool:
        return self.x == x and self.y == y
