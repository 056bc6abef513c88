import logging
import math
import random
import time
from typing import Callable, List, Optional, Tuple

from maze_stepper.algo.base import Generator, GeneratorState
from maze_stepper.algo.dfs import RecursiveBacktracker
from maze_stepper.core.config import ConfigurationError
from maze_stepper.core.events import RunListener, StepKind
from maze_stepper.core.grid import Grid, create_grid
from maze_stepper.core.topology import RECTANGULAR, Topology

logger = logging.getLogger(__name__)

# Seconds to wait after every step
DEFAULT_WAIT_TIME = 0.02
MIN_WAIT_TIME = 0.01
MAX_WAIT_TIME = 1.0


def clamp_wait_time(seconds: float) -> float:
    if math.isnan(seconds):
        return MIN_WAIT_TIME
    return max(MIN_WAIT_TIME, min(MAX_WAIT_TIME, seconds))


class RunHandle:
    """
    One run of a generator. Returned by RunController.start_run; callers use
    cancel() and adjust_wait_time() to steer it while it is being stepped.
    """

    def __init__(self, controller: "RunController", generator: Generator,
                 on_complete: Optional[Callable[[], None]], wait_time: float):
        self._controller = controller
        self.generator = generator
        self._on_complete = on_complete
        self._wait_time = clamp_wait_time(wait_time)
        self._notified = False
        self.superseded = False

    @property
    def grid(self) -> Grid:
        return self.generator.grid

    @property
    def state(self) -> GeneratorState:
        return self.generator.state

    @property
    def wait_time(self) -> float:
        return self._wait_time

    @property
    def step_count(self) -> int:
        return self.generator.step_count

    @property
    def target_path(self) -> Optional[List[Tuple[int, int]]]:
        return getattr(self.generator, "target_path", None)

    @property
    def is_active(self) -> bool:
        return not self.superseded and self.generator.is_running

    @property
    def _halted(self) -> bool:
        return self._notified or self.superseded

    def adjust_wait_time(self, seconds: float) -> float:
        self._wait_time = clamp_wait_time(seconds)
        logger.debug("Wait time set to %.3fs", self._wait_time)
        return self._wait_time

    def cancel(self):
        """Stops the run and fires the completion notification, once."""
        if self._notified:
            return
        self.generator.cancel()
        logger.info("Run cancelled after %d steps", self.generator.step_count)
        self._finish()

    def step(self) -> bool:
        """
        Performs one generator step and forwards its events.
        Returns True while the run should keep being stepped.
        """
        if not self.is_active:
            return False

        step = self.generator.step()
        listener = self._controller.listener

        for coord in step.changed:
            # A listener may cancel or supersede from inside a notification
            if self._halted:
                return False
            listener.on_cell_changed(coord)

        if step.target_path is not None and not self._halted:
            logger.info("Target reached, path length %d", len(step.target_path))
            listener.on_target_first_reached(list(step.target_path))

        if step.kind is StepKind.COMPLETE and not self.superseded:
            logger.info("Run complete: %d steps, %d passages",
                        self.generator.step_count, self.grid.passage_count())
            self._finish()
        return self.is_active

    def _finish(self):
        if self._notified:
            return
        self._notified = True
        self._controller._release(self)
        # Superseded runs are detached from the controller's listener
        if not self.superseded:
            self._controller.listener.on_run_complete()
        if self._on_complete is not None:
            self._on_complete()


class RunController:
    """
    Owns at most one active run and paces it.

    Starting a new run supersedes the active one: it stops being stepped and its
    on_complete callback is NOT invoked. Call cancel() on the old handle first
    when that notification is needed.
    """

    def __init__(self, listener: RunListener = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        self.listener = listener if listener is not None else RunListener()
        self._sleep = sleep
        self._clock = clock
        self._active: Optional[RunHandle] = None
        self._last_step_at: Optional[float] = None

    @property
    def active_run(self) -> Optional[RunHandle]:
        return self._active

    @staticmethod
    def create_grid(width: int, height: int, topology: Topology = RECTANGULAR) -> Grid:
        return create_grid(width, height, topology)

    def start_run(self, grid: Grid, start: Tuple[int, int], end: Tuple[int, int],
                  on_complete: Callable[[], None] = None, seed: int = None,
                  rng: random.Random = None, wait_time: float = DEFAULT_WAIT_TIME) -> RunHandle:
        for label, (x, y) in (("start", start), ("end", end)):
            if not grid.in_bounds(x, y):
                raise ConfigurationError(
                    f"{label} ({x}, {y}) is outside the {grid.width}x{grid.height} grid")

        if self._active is not None and self._active.is_active:
            logger.info("Superseding active run after %d steps", self._active.step_count)
            self._active.superseded = True

        generator = RecursiveBacktracker(grid, start, end, seed=seed, rng=rng)
        handle = RunHandle(self, generator, on_complete, wait_time)
        self._active = handle
        self._last_step_at = None
        logger.info("Starting %s run on %dx%d grid from %s to %s",
                    grid.topology.name, grid.width, grid.height, tuple(start), tuple(end))
        return handle

    def _release(self, handle: RunHandle):
        if self._active is handle:
            self._active = None

    def run_until_complete(self, handle: RunHandle = None) -> RunHandle:
        """Blocking loop: step, then wait for the current wait time, until the run ends."""
        handle = handle if handle is not None else self._active
        if handle is None:
            raise RuntimeError("No run to drive")
        while handle.step():
            # Read fresh so adjustments apply to the very next delay
            self._sleep(handle.wait_time)
        return handle

    def tick(self, now: float = None) -> bool:
        """
        Non-blocking variant for frame loops. Steps the active run once when
        its wait time has elapsed since the previous step.
        Returns True while a run is active.
        """
        handle = self._active
        if handle is None or not handle.is_active:
            return False
        now = self._clock() if now is None else now
        if self._last_step_at is not None and now - self._last_step_at < handle.wait_time:
            return True
        self._last_step_at = now
        return handle.step()
