from array import array
from typing import FrozenSet, Iterator, NamedTuple, Tuple

from maze_stepper.core.config import ConfigurationError
from maze_stepper.core.topology import RECTANGULAR, Topology


class Cell(NamedTuple):
    """Read-only snapshot of one cell's state."""
    position: Tuple[int, int]
    openings: FrozenSet[int]
    carved_out: FrozenSet[int]


def _mask_to_set(mask: int) -> FrozenSet[int]:
    return frozenset(d for d in range(8) if mask & (1 << d))


class Grid:
    """
    width x height cells tagged with one Topology.

    Cell state is packed into two byte arrays indexed by y * width + x:
    - openings: bit d set iff a passage joins the cell to its neighbour in direction d
    - carved:   bit d set iff generation moved away from the cell in direction d
    """

    __slots__ = ('width', 'height', 'topology', 'openings', 'carved')

    def __init__(self, width: int, height: int, topology: Topology = RECTANGULAR):
        self.width = width
        self.height = height
        self.topology = topology
        # 1 byte per cell, degree is at most 6
        self.openings = array('B', bytes(width * height))
        self.carved = array('B', bytes(width * height))

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_index(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def cell(self, x: int, y: int) -> Cell:
        idx = self.get_index(x, y)
        return Cell((x, y), _mask_to_set(self.openings[idx]), _mask_to_set(self.carved[idx]))

    def carve_path(self, x: int, y: int, direction: int) -> Tuple[int, int]:
        """
        Opens the passage from (x, y) towards 'direction' and records the move
        in the cell's carved mask. The neighbour receives the OPPOSITE opening.
        Returns the neighbour coordinate.
        """
        idx1 = self.get_index(x, y)
        nx, ny = self.topology.project(x, y, direction)
        if not self.in_bounds(nx, ny):
            raise IndexError(f"Cannot carve {self.topology.direction_name(direction)} "
                             f"from ({x}, {y}): ({nx}, {ny}) is outside the grid")
        idx2 = ny * self.width + nx

        bit = 1 << direction
        self.carved[idx1] |= bit
        self.openings[idx1] |= bit
        self.openings[idx2] |= 1 << self.topology.opposite(direction)
        return nx, ny

    def has_opening(self, x: int, y: int, direction: int) -> bool:
        return (self.openings[self.get_index(x, y)] & (1 << direction)) != 0

    def has_carved(self, x: int, y: int, direction: int) -> bool:
        return (self.carved[self.get_index(x, y)] & (1 << direction)) != 0

    def get_neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int, int]]:
        """
        Yields (nx, ny, direction_to_neighbor) for all in-bounds neighbours, in direction order.
        Does NOT check openings.
        """
        for d in self.topology.directions():
            nx, ny = self.topology.project(x, y, d)
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield nx, ny, d

    def get_open_neighbors(self, x: int, y: int) -> Iterator[Tuple[int, int]]:
        """Yields (nx, ny) for neighbours joined to (x, y) by a passage."""
        mask = self.openings[self.get_index(x, y)]
        for nx, ny, d in self.get_neighbors(x, y):
            if mask & (1 << d):
                yield nx, ny

    def passage_count(self) -> int:
        # Each passage sets one opening bit on both of its cells
        return sum(bin(mask).count("1") for mask in self.openings) // 2

    def tile_name(self, x: int, y: int) -> str:
        return self.topology.tile_name(self.openings[self.get_index(x, y)])

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        for y in range(self.height):
            for x in range(self.width):
                yield x, y


def create_grid(width: int, height: int, topology: Topology = RECTANGULAR) -> Grid:
    if width < 1 or height < 1:
        raise ConfigurationError(f"Grid size must be at least 1x1, got {width}x{height}")
    return Grid(width, height, topology)
