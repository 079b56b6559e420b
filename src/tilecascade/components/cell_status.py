from dataclasses import dataclass

@dataclass(slots=True)
class CellStatus:
    """Per-cell destruction flag.

    destroyed: True from the moment the cell is matched until it is refilled.
    """
    destroyed: bool = False
