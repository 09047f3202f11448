"""
Grid geometry for subsector maps.

Cells are addressed by a row-major index or by 1-based ``(x, y)`` pairs, the
way subsector coordinates like ``0203`` are written. Two topologies are
available: square cells with Manhattan distance, and offset-column hexes.
"""

import math
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple, Union

Coordinate = Union[int, Tuple[int, int], Sequence[int]]

# W, N, E, S
SQUARE_DELTAS = [(-1, 0), (0, -1), (+1, 0), (0, +1)]

SQUARE_DELTAS_2 = [
    (-2, 0), (-1, -1), (0, -2), (+1, -1),
    (+2, 0), (+1, +1), (0, +2), (-1, +1),
]

# indexed by column parity: even columns sit half a hex lower than odd ones
HEX_DELTAS = [
    [(-1, 0), (0, -1), (+1, 0), (+1, +1), (0, +1), (-1, +1)],
    [(-1, -1), (0, -1), (+1, -1), (+1, 0), (0, +1), (-1, 0)],
]


class GridGeometry(ABC):
    """Coordinate transform and distance metric for a fixed-size grid."""

    name = "abstract"

    def __init__(self, cols: int, rows: int):
        if cols < 1 or rows < 1:
            raise ValueError(f"Grid must have at least one cell, got {cols}x{rows}")
        self.cols = cols
        self.rows = rows

    @property
    def size(self) -> int:
        return self.cols * self.rows

    def index_to_xy(self, i: int) -> Tuple[int, int]:
        """Convert a row-major cell index to 1-based ``(x, y)``."""
        if i is None or not 0 <= i < self.size:
            raise ValueError(f"Cell index {i} outside 0..{self.size - 1}")
        return i % self.cols + 1, i // self.cols + 1

    def xy_to_index(self, x: int, y: int) -> int:
        """Convert 1-based ``(x, y)`` back to a row-major cell index."""
        if not (1 <= x <= self.cols and 1 <= y <= self.rows):
            raise ValueError(f"Coordinates ({x}, {y}) outside {self.cols}x{self.rows} grid")
        return (y - 1) * self.cols + (x - 1)

    def resolve(self, coord: Coordinate) -> Tuple[int, int]:
        """Turn an index or an ``(x, y)`` pair into ``(x, y)``."""
        if isinstance(coord, bool):
            raise ValueError(f"Cannot resolve coordinate {coord!r}")
        if isinstance(coord, int):
            return self.index_to_xy(coord)
        try:
            x, y = coord
        except (TypeError, ValueError):
            raise ValueError(f"Cannot resolve coordinate {coord!r}") from None
        return int(x), int(y)

    def label(self, coord: Coordinate) -> str:
        """Four digit column/row label, e.g. ``0203``."""
        x, y = self.resolve(coord)
        return f"{x:02d}{y:02d}"

    @abstractmethod
    def distance(self, a: Coordinate, b: Coordinate) -> int:
        """Number of steps between two cells."""

    @abstractmethod
    def neighbors(self) -> List[int]:
        """Valid directions for neighbours one step away."""

    @abstractmethod
    def neighbor(self, coord: Coordinate, direction: int) -> Tuple[int, int]:
        """Coordinates of the neighbour one step away in ``direction``."""

    def _check_direction(self, coord, direction, valid: List[int]) -> None:
        if direction is None:
            raise ValueError(f"Undefined direction for {coord!r}")
        if direction not in valid:
            raise ValueError(
                f"Direction {direction} not supported for {self.name} {coord!r}"
            )


class SquareGeometry(GridGeometry):
    """Square cells, four neighbours, Manhattan distance."""

    name = "square"

    def distance(self, a: Coordinate, b: Coordinate) -> int:
        x1, y1 = self.resolve(a)
        x2, y2 = self.resolve(b)
        return abs(x2 - x1) + abs(y2 - y1)

    def neighbors(self) -> List[int]:
        return list(range(len(SQUARE_DELTAS)))

    def neighbors2(self) -> List[int]:
        return list(range(len(SQUARE_DELTAS_2)))

    def neighbor(self, coord: Coordinate, direction: int) -> Tuple[int, int]:
        self._check_direction(coord, direction, self.neighbors())
        x, y = self.resolve(coord)
        dx, dy = SQUARE_DELTAS[direction]
        return x + dx, y + dy

    def neighbor2(self, coord: Coordinate, direction: int) -> Tuple[int, int]:
        """Coordinates of the cell two steps away in ``direction`` (0 to 7)."""
        self._check_direction(coord, direction, self.neighbors2())
        x, y = self.resolve(coord)
        dx, dy = SQUARE_DELTAS_2[direction]
        return x + dx, y + dy


class HexGeometry(GridGeometry):
    """
    Flat-topped hexes in columns, odd columns shifted up half a hex.

    This is the layout of printed Traveller subsectors.
    """

    name = "hex"

    def distance(self, a: Coordinate, b: Coordinate) -> int:
        x1, y1 = self.resolve(a)
        x2, y2 = self.resolve(b)
        # tilt one axis by 60 degrees
        y1 -= math.ceil(x1 / 2)
        y2 -= math.ceil(x2 / 2)
        if x1 > x2:
            x1, y1, x2, y2 = x2, y2, x1, y1
        if y2 >= y1:
            return x2 - x1 + y2 - y1
        return max(x2 - x1, y1 - y2)

    def neighbors(self) -> List[int]:
        return list(range(6))

    def neighbor(self, coord: Coordinate, direction: int) -> Tuple[int, int]:
        self._check_direction(coord, direction, self.neighbors())
        x, y = self.resolve(coord)
        dx, dy = HEX_DELTAS[x % 2][direction]
        return x + dx, y + dy


GEOMETRIES = {
    SquareGeometry.name: SquareGeometry,
    HexGeometry.name: HexGeometry,
}


def get_geometry(name: str, cols: int, rows: int) -> GridGeometry:
    """Build a geometry strategy by name (``square`` or ``hex``)."""
    try:
        cls = GEOMETRIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown geometry '{name}', expected one of {sorted(GEOMETRIES)}"
        ) from None
    return cls(cols, rows)
