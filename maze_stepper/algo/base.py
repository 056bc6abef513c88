import random
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterator, Tuple

from maze_stepper.core.events import Step
from maze_stepper.core.grid import Grid


class GeneratorState(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Generator(ABC):
    """
    Stepwise maze generator. Each step() mutates the grid in place and
    reports what changed; the caller decides how fast to step.
    Start and end are assumed to lie inside the grid.
    """

    def __init__(self, grid: Grid, start: Tuple[int, int], end: Tuple[int, int],
                 seed: int = None, rng: random.Random = None):
        self.grid = grid
        self.start = tuple(start)
        self.end = tuple(end)
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.state = GeneratorState.RUNNING
        self.step_count = 0

    @property
    def is_running(self) -> bool:
        return self.state is GeneratorState.RUNNING

    def step(self) -> Step:
        if self.state is not GeneratorState.RUNNING:
            raise RuntimeError(f"Cannot step a generator in state {self.state.value}")
        self.step_count += 1
        return self._step()

    @abstractmethod
    def _step(self) -> Step:
        """Performs exactly one unit of work."""

    def cancel(self):
        if self.state is GeneratorState.RUNNING:
            self.state = GeneratorState.CANCELLED

    def run(self) -> Iterator[Step]:
        """Yields steps until the generator completes or is cancelled."""
        while self.state is GeneratorState.RUNNING:
            yield self.step()

    def run_all(self):
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass
