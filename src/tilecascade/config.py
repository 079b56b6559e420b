from dataclasses import dataclass

from tilecascade.constants import (
    DESTROY_DURATION,
    GRID_HEIGHT,
    GRID_WIDTH,
    MIN_TYPE_COUNT,
    SETTLE_DURATION,
    SWAP_DURATION,
    TYPE_COUNT,
)


@dataclass(slots=True)
class BoardConfig:
    """Construction-time board settings."""

    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    type_count: int = TYPE_COUNT
    reset_on_stalemate: bool = True
    swap_duration: float = SWAP_DURATION
    destroy_duration: float = DESTROY_DURATION
    settle_duration: float = SETTLE_DURATION

    def validate(self) -> "BoardConfig":
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.width}x{self.height}")
        if self.type_count < MIN_TYPE_COUNT:
            raise ValueError(f"type_count must be at least {MIN_TYPE_COUNT}, got {self.type_count}")
        for name in ("swap_duration", "destroy_duration", "settle_duration"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        return self
