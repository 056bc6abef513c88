import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.algo.base import GeneratorState
from maze_stepper.algo.dfs import RecursiveBacktracker
from maze_stepper.core.analysis import MazeInspector
from maze_stepper.core.events import StepKind
from maze_stepper.core.grid import Grid
from maze_stepper.core.topology import HEXAGONAL


def popcount(mask):
    return bin(mask).count("1")


class TestBacktracker(unittest.TestCase):
    def test_rect_spanning_tree(self):
        w, h = 20, 20
        grid = Grid(w, h)
        RecursiveBacktracker(grid, (0, 0), (w - 1, h - 1), seed=42).run_all()

        self.assertEqual(grid.passage_count(), w * h - 1)
        self.assertTrue(all(mask for mask in grid.openings), "every cell should have an opening")
        self.assertEqual(MazeInspector.check_symmetry(grid), [])
        self.assertTrue(MazeInspector.is_perfect(grid))

    def test_hex_spanning_tree(self):
        grid = Grid(15, 12, HEXAGONAL)
        RecursiveBacktracker(grid, (7, 5), (0, 0), seed=7).run_all()

        self.assertEqual(grid.passage_count(), 15 * 12 - 1)
        self.assertEqual(MazeInspector.check_symmetry(grid), [])
        self.assertTrue(MazeInspector.is_perfect(grid))

    def test_degree_bound_and_carved_subset(self):
        for grid in (Grid(9, 7), Grid(9, 7, HEXAGONAL)):
            RecursiveBacktracker(grid, (4, 3), (0, 0), seed=3).run_all()
            full = grid.topology.full_mask
            for opened, carved in zip(grid.openings, grid.carved):
                self.assertEqual(opened & ~full, 0)
                self.assertLessEqual(popcount(opened), grid.topology.degree)
                # Every move away from a cell left an opening behind
                self.assertEqual(carved & ~opened, 0)
            # Each passage is carved exactly once
            self.assertEqual(sum(popcount(c) for c in grid.carved), grid.passage_count())

    def test_step_bound(self):
        for grid in (Grid(8, 6), Grid(8, 6, HEXAGONAL), Grid(1, 7)):
            n = grid.cell_count
            gen = RecursiveBacktracker(grid, (0, 0), (0, 0), seed=11)
            gen.run_all()
            self.assertLessEqual(gen.step_count, 2 * n)
            # n - 1 carves, n - 1 backtracks, one completing step
            self.assertEqual(gen.step_count, 2 * n - 1)

    def test_step_reports(self):
        grid = Grid(6, 6)
        gen = RecursiveBacktracker(grid, (2, 3), (5, 5), seed=5)
        kinds = []
        for step in gen.run():
            kinds.append(step.kind)
            if step.kind is StepKind.CARVE:
                self.assertEqual(len(step.changed), 2)
                (cx, cy), (nx, ny) = step.changed
                self.assertIn((nx, ny), set(grid.get_open_neighbors(cx, cy)))
            elif step.kind is StepKind.BACKTRACK:
                self.assertEqual(len(step.changed), 1)
            else:
                self.assertEqual(step.changed, ())
        self.assertEqual(kinds.count(StepKind.CARVE), 35)
        self.assertEqual(kinds.count(StepKind.BACKTRACK), 35)
        self.assertEqual(kinds[-1], StepKind.COMPLETE)
        self.assertEqual(gen.state, GeneratorState.COMPLETED)

    def test_target_reached_once(self):
        grid = Grid(10, 10)
        gen = RecursiveBacktracker(grid, (0, 0), (9, 9), seed=21)
        events = [step.target_path for step in gen.run() if step.target_path is not None]

        self.assertEqual(len(events), 1)
        path = events[0]
        self.assertEqual(path[0], (0, 0))
        self.assertEqual(path[-1], (9, 9))
        # Consecutive path cells are joined by passages
        for (ax, ay), b in zip(path, path[1:]):
            self.assertIn(b, set(grid.get_open_neighbors(ax, ay)))
        # Generation kept going after the target
        self.assertEqual(grid.passage_count(), 99)
        self.assertEqual(gen.target_path, path)

    def test_determinism(self):
        w, h = 10, 10
        grid1 = Grid(w, h)
        RecursiveBacktracker(grid1, (0, 0), (9, 9), seed=12345).run_all()

        grid2 = Grid(w, h)
        rec = RecursiveBacktracker(grid2, (0, 0), (9, 9), seed=12345)
        for _ in rec.run(): pass

        self.assertEqual(grid1.openings.tobytes(), grid2.openings.tobytes())

    def test_rect_5x5_scenario(self):
        grid = Grid(5, 5)
        RecursiveBacktracker(grid, (0, 0), (4, 4), seed=2024).run_all()

        self.assertEqual(grid.passage_count(), 24)
        self.assertEqual(len(MazeInspector.reachable_from(grid, (0, 0))), 25)

    def test_hex_3x3_scenario(self):
        grid = Grid(3, 3, HEXAGONAL)
        RecursiveBacktracker(grid, (1, 1), (2, 2), seed=1).run_all()

        self.assertEqual(grid.passage_count(), 8)
        self.assertEqual(MazeInspector.check_symmetry(grid), [])
        self.assertEqual(len(MazeInspector.reachable_from(grid, (1, 1))), 9)

    def test_single_cell(self):
        grid = Grid(1, 1)
        gen = RecursiveBacktracker(grid, (0, 0), (0, 0), seed=0)
        step = gen.step()

        self.assertEqual(step.kind, StepKind.COMPLETE)
        self.assertEqual(step.target_path, [(0, 0)])
        self.assertEqual(gen.state, GeneratorState.COMPLETED)
        self.assertEqual(gen.step_count, 1)
        self.assertEqual(grid.passage_count(), 0)

    def test_start_equals_end_reported_on_first_step(self):
        grid = Grid(4, 4)
        gen = RecursiveBacktracker(grid, (1, 1), (1, 1), seed=9)
        first = gen.step()
        self.assertEqual(first.target_path, [(1, 1)])
        self.assertTrue(all(step.target_path is None for step in gen.run()))

    def test_step_after_completion_raises(self):
        gen = RecursiveBacktracker(Grid(2, 2), (0, 0), (1, 1), seed=0)
        gen.run_all()
        with self.assertRaises(RuntimeError):
            gen.step()

    def test_cancel_stops_generation(self):
        grid = Grid(5, 5)
        gen = RecursiveBacktracker(grid, (0, 0), (4, 4), seed=0)
        for _ in range(3):
            gen.step()
        gen.cancel()
        self.assertEqual(gen.state, GeneratorState.CANCELLED)
        self.assertEqual(list(gen.run()), [])
        self.assertEqual(grid.passage_count(), 3)


if __name__ == '__main__':
    unittest.main()
