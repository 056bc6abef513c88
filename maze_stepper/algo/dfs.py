import logging
from typing import List, Tuple

from maze_stepper.algo.base import Generator, GeneratorState
from maze_stepper.core.events import Step, StepKind

logger = logging.getLogger(__name__)


class RecursiveBacktracker(Generator):
    """
    Randomized depth-first carve and backtrack, one move per step.

    The path is the current walk from the start cell to the frontier. Visited
    cells stay visited after a backtrack, so every cell reachable from the start
    is carved into exactly once and the result is a spanning tree.
    """

    def __init__(self, grid, start, end, seed=None, rng=None):
        super().__init__(grid, start, end, seed=seed, rng=rng)
        sx, sy = self.start
        self.path: List[Tuple[int, int]] = [self.start]
        # Dense visited flags keyed by cell index
        self.visited = bytearray(grid.cell_count)
        self.visited[grid.get_index(sx, sy)] = 1
        self.target_path: List[Tuple[int, int]] = None
        self._pending_target = None
        if self.start == self.end:
            self.target_path = [self.start]
            self._pending_target = self.target_path

    def _step(self) -> Step:
        grid = self.grid
        topology = grid.topology
        width, height = grid.width, grid.height

        # start == end is reached before any carve
        pending, self._pending_target = self._pending_target, None

        cx, cy = self.path[-1]
        carved = grid.carved[cy * width + cx]

        candidates = []
        for d in topology.directions():
            if carved & (1 << d):
                continue
            nx, ny = topology.project(cx, cy, d)
            if not (0 <= nx < width and 0 <= ny < height):
                continue
            if self.visited[ny * width + nx]:
                continue
            candidates.append(d)

        if not candidates:
            if len(self.path) == 1:
                self.state = GeneratorState.COMPLETED
                logger.debug("Generation complete after %d steps", self.step_count)
                return Step(StepKind.COMPLETE, (), pending)
            popped = self.path.pop()
            return Step(StepKind.BACKTRACK, (popped,), pending)

        direction = self.rng.choice(candidates)
        nxt = grid.carve_path(cx, cy, direction)
        self.path.append(nxt)
        self.visited[nxt[1] * width + nxt[0]] = 1

        if nxt == self.end and self.target_path is None:
            self.target_path = list(self.path)
            pending = self.target_path
            logger.debug("Target %s reached at depth %d", self.end, len(self.path))

        return Step(StepKind.CARVE, ((cx, cy), nxt), pending)
