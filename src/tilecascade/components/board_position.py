from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Recorded grid coordinate of a cell; must agree with Board.cells."""
    x: int
    y: int

    def as_tuple(self) -> tuple[int, int]:
        return (self.x, self.y)
