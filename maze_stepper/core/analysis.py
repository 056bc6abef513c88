from collections import deque
from typing import List, Set, Tuple

from maze_stepper.core.grid import Grid


class MazeInspector:
    @staticmethod
    def passage_count(grid: Grid) -> int:
        return grid.passage_count()

    @staticmethod
    def check_symmetry(grid: Grid) -> List[Tuple[int, int, int]]:
        """
        Returns every (x, y, direction) whose opening has no matching opening
        on the neighbour (or points outside the grid). Empty for a consistent grid.
        """
        topology = grid.topology
        broken = []
        for x, y in grid:
            mask = grid.openings[grid.get_index(x, y)]
            for d in topology.directions():
                if not mask & (1 << d):
                    continue
                nx, ny = topology.project(x, y, d)
                if not grid.in_bounds(nx, ny) or not grid.has_opening(nx, ny, topology.opposite(d)):
                    broken.append((x, y, d))
        return broken

    @staticmethod
    def reachable_from(grid: Grid, start: Tuple[int, int]) -> Set[Tuple[int, int]]:
        seen = {tuple(start)}
        queue = deque(seen)
        while queue:
            x, y = queue.popleft()
            for n in grid.get_open_neighbors(x, y):
                if n not in seen:
                    seen.add(n)
                    queue.append(n)
        return seen

    @staticmethod
    def is_perfect(grid: Grid) -> bool:
        """Connected and acyclic: every cell reachable and exactly cells - 1 passages."""
        if MazeInspector.check_symmetry(grid):
            return False
        if grid.passage_count() != grid.cell_count - 1:
            return False
        return len(MazeInspector.reachable_from(grid, (0, 0))) == grid.cell_count

    @staticmethod
    def calculate_stats(grid: Grid):
        dead_ends = 0
        corridors = 0  # 2 exits
        junctions = 0  # 3+ exits
        isolated = 0

        for mask in grid.openings:
            exits = bin(mask).count("1")
            if exits == 0: isolated += 1
            elif exits == 1: dead_ends += 1
            elif exits == 2: corridors += 1
            else: junctions += 1

        total = grid.cell_count
        return {
            "passages": grid.passage_count(),
            "dead_ends": dead_ends,
            "corridors": corridors,
            "junctions": junctions,
            "isolated": isolated,
            "dead_end_percent": (dead_ends / total) * 100 if total > 0 else 0
        }
