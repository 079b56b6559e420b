"""Exception taxonomy for board operations."""


class BoardError(Exception):
    """Base class for every board-level failure."""


class OutOfBounds(BoardError, IndexError):
    """A coordinate fell outside the grid."""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"({x}, {y}) is outside a {width}x{height} grid")
        self.x = x
        self.y = y


class InvalidSwap(BoardError, ValueError):
    """A swap request that can never be applied (locked board, non-adjacent cells)."""

    def __init__(self, src, dst, reason: str):
        super().__init__(f"Cannot swap {src} and {dst}: {reason}")
        self.src = src
        self.dst = dst
        self.reason = reason


class InvariantViolation(BoardError, RuntimeError):
    """The grid mapping and a cell's recorded position disagree."""
