from typing import Dict, Sequence, Tuple

# Rectangular direction indices (also the bit index in a cell's opening mask)
NORTH = 0
EAST = 1
SOUTH = 2
WEST = 3

# Hexagonal direction indices
HEX_NE = 0
HEX_SE = 1
HEX_S = 2
HEX_SW = 3
HEX_NW = 4
HEX_N = 5


class Topology:
    """
    Direction and adjacency math for one neighbour scheme.
    Holds no cell state: a grid is tagged with one of the module level instances.

    Offsets are looked up by row parity. Square grids use the same table for both parities.
    """

    __slots__ = ('name', 'names', 'degree', '_offsets')

    def __init__(self, name: str, names: Sequence[str],
                 even_offsets: Sequence[Tuple[int, int]],
                 odd_offsets: Sequence[Tuple[int, int]] = None):
        self.name = name
        self.names = tuple(names)
        self.degree = len(self.names)
        if odd_offsets is None:
            odd_offsets = even_offsets
        self._offsets = (tuple(even_offsets), tuple(odd_offsets))

        if self.degree % 2:
            raise ValueError(f"Topology '{name}' needs an even number of directions, got {self.degree}")
        for parity, table in enumerate(self._offsets):
            if len(table) != self.degree:
                raise ValueError(
                    f"Topology '{name}' defines {len(table)} offsets for parity {parity}, expected {self.degree}")

        # Adjacency must be symmetric for both row parities
        for y in (0, 1):
            for d in range(self.degree):
                nx, ny = self.project(0, y, d)
                if self.project(nx, ny, self.opposite(d)) != (0, y):
                    raise ValueError(
                        f"Topology '{name}': {self.names[d]} from row parity {y} does not round-trip")

    def directions(self) -> range:
        return range(self.degree)

    def check_direction(self, direction: int):
        if not 0 <= direction < self.degree:
            raise ValueError(f"Undefined direction {direction!r} for {self.name} topology")

    def opposite(self, direction: int) -> int:
        self.check_direction(direction)
        return (direction + self.degree // 2) % self.degree

    def project(self, x: int, y: int, direction: int) -> Tuple[int, int]:
        """Neighbour of (x, y) in 'direction'. No bounds checking."""
        self.check_direction(direction)
        dx, dy = self._offsets[y % 2][direction]
        return x + dx, y + dy

    @staticmethod
    def bit(direction: int) -> int:
        return 1 << direction

    @property
    def full_mask(self) -> int:
        return (1 << self.degree) - 1

    def direction_name(self, direction: int) -> str:
        self.check_direction(direction)
        return self.names[direction]

    def direction_from_name(self, name: str) -> int:
        try:
            return self.names.index(name.upper())
        except ValueError:
            raise ValueError(f"Unknown direction '{name}' for {self.name} topology") from None

    def tile_name(self, mask: int) -> str:
        """Sprite key for an opening mask: '-' where open, 'X' where walled, in direction order."""
        return ''.join('-' if mask & (1 << d) else 'X' for d in range(self.degree))

    def __repr__(self):
        return f"Topology({self.name!r}, degree={self.degree})"


RECTANGULAR = Topology(
    "rect",
    ("N", "E", "S", "W"),
    [(0, 1), (1, 0), (0, -1), (-1, 0)],
)

# Offset ("shoved") rows: NE/SE/SW/NW depend on row parity, N and S do not
HEXAGONAL = Topology(
    "hex",
    ("NE", "SE", "S", "SW", "NW", "N"),
    even_offsets=[(0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1), (1, 0)],
    odd_offsets=[(1, 1), (0, 1), (-1, 0), (0, -1), (1, -1), (1, 0)],
)

TOPOLOGIES: Dict[str, Topology] = {
    RECTANGULAR.name: RECTANGULAR,
    HEXAGONAL.name: HEXAGONAL,
}


def get_topology(name: str) -> Topology:
    try:
        return TOPOLOGIES[name]
    except KeyError:
        raise ValueError(f"Unknown topology '{name}', expected one of {sorted(TOPOLOGIES)}") from None
