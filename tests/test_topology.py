import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.core.topology import (
    HEXAGONAL, HEX_N, HEX_NE, HEX_NW, HEX_S, HEX_SE, HEX_SW,
    RECTANGULAR, NORTH, EAST, SOUTH, WEST, Topology, get_topology,
)


class TestTopology(unittest.TestCase):
    def test_projection_round_trip(self):
        for topology in (RECTANGULAR, HEXAGONAL):
            for x in range(-3, 4):
                for y in range(-3, 4):
                    for d in topology.directions():
                        nx, ny = topology.project(x, y, d)
                        back = topology.project(nx, ny, topology.opposite(d))
                        self.assertEqual(back, (x, y), f"{topology.name} {topology.names[d]} from {(x, y)}")

    def test_opposite_is_involution(self):
        for topology in (RECTANGULAR, HEXAGONAL):
            for d in topology.directions():
                self.assertNotEqual(topology.opposite(d), d)
                self.assertEqual(topology.opposite(topology.opposite(d)), d)

    def test_opposite_pairs(self):
        self.assertEqual(RECTANGULAR.opposite(NORTH), SOUTH)
        self.assertEqual(RECTANGULAR.opposite(EAST), WEST)
        self.assertEqual(HEXAGONAL.opposite(HEX_NE), HEX_SW)
        self.assertEqual(HEXAGONAL.opposite(HEX_SE), HEX_NW)
        self.assertEqual(HEXAGONAL.opposite(HEX_S), HEX_N)

    def test_rect_offsets(self):
        self.assertEqual(RECTANGULAR.project(2, 2, NORTH), (2, 3))
        self.assertEqual(RECTANGULAR.project(2, 2, EAST), (3, 2))
        self.assertEqual(RECTANGULAR.project(2, 2, SOUTH), (2, 1))
        self.assertEqual(RECTANGULAR.project(2, 2, WEST), (1, 2))

    def test_hex_offsets_depend_on_row_parity(self):
        # Even row
        self.assertEqual(HEXAGONAL.project(2, 2, HEX_NE), (2, 3))
        self.assertEqual(HEXAGONAL.project(2, 2, HEX_SE), (1, 3))
        self.assertEqual(HEXAGONAL.project(2, 2, HEX_SW), (1, 1))
        self.assertEqual(HEXAGONAL.project(2, 2, HEX_NW), (2, 1))
        # Odd row
        self.assertEqual(HEXAGONAL.project(2, 1, HEX_NE), (3, 2))
        self.assertEqual(HEXAGONAL.project(2, 1, HEX_SE), (2, 2))
        self.assertEqual(HEXAGONAL.project(2, 1, HEX_SW), (2, 0))
        self.assertEqual(HEXAGONAL.project(2, 1, HEX_NW), (3, 0))
        # Parity independent
        for y in (1, 2):
            self.assertEqual(HEXAGONAL.project(2, y, HEX_S), (1, y))
            self.assertEqual(HEXAGONAL.project(2, y, HEX_N), (3, y))

    def test_undefined_direction_fails_loudly(self):
        with self.assertRaises(ValueError):
            RECTANGULAR.project(0, 0, 4)
        with self.assertRaises(ValueError):
            HEXAGONAL.opposite(-1)
        with self.assertRaises(ValueError):
            HEXAGONAL.direction_name(6)

    def test_inconsistent_table_rejected(self):
        # Missing an offset
        with self.assertRaises(ValueError):
            Topology("short", ("N", "E", "S", "W"), [(0, 1), (1, 0), (0, -1)])
        # Opposites that do not undo each other
        with self.assertRaises(ValueError):
            Topology("skew", ("A", "B"), [(1, 0), (1, 0)])

    def test_names_and_lookup(self):
        self.assertEqual(RECTANGULAR.degree, 4)
        self.assertEqual(HEXAGONAL.degree, 6)
        self.assertEqual(HEXAGONAL.direction_from_name("sw"), HEX_SW)
        self.assertEqual(RECTANGULAR.direction_name(WEST), "W")
        self.assertIs(get_topology("hex"), HEXAGONAL)
        with self.assertRaises(ValueError):
            get_topology("tri")
        with self.assertRaises(ValueError):
            RECTANGULAR.direction_from_name("NE")

    def test_tile_name(self):
        self.assertEqual(RECTANGULAR.tile_name(0), "XXXX")
        self.assertEqual(RECTANGULAR.tile_name(0b0101), "-X-X")
        self.assertEqual(HEXAGONAL.tile_name(HEXAGONAL.full_mask), "------")
        self.assertEqual(HEXAGONAL.tile_name(1 << HEX_N), "XXXXX-")


if __name__ == '__main__':
    unittest.main()
