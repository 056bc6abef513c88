from enum import Enum
from typing import List, NamedTuple, Optional, Sequence, Tuple

Coord = Tuple[int, int]


class StepKind(Enum):
    CARVE = "carve"
    BACKTRACK = "backtrack"
    COMPLETE = "complete"


class Step(NamedTuple):
    """
    What one generator step did.
    changed: (current, next) for a carve, (popped,) for a backtrack, () on completion.
    target_path: start..target coordinates on the step that first reaches the target.
    """
    kind: StepKind
    changed: Tuple[Coord, ...] = ()
    target_path: Optional[List[Coord]] = None


class RunListener:
    """
    Collaborator interface called by a run, in the order the algorithm performed the work.
    Subclasses override what they need.
    """

    def on_cell_changed(self, coord: Coord):
        pass

    def on_target_first_reached(self, coords: Sequence[Coord]):
        pass

    def on_run_complete(self):
        pass


class RecordingListener(RunListener):
    """Keeps every notification as (name, payload) tuples."""

    def __init__(self):
        self.events: List[Tuple[str, object]] = []

    def on_cell_changed(self, coord: Coord):
        self.events.append(("cell", coord))

    def on_target_first_reached(self, coords: Sequence[Coord]):
        self.events.append(("target", list(coords)))

    def on_run_complete(self):
        self.events.append(("complete", None))

    @property
    def changed_cells(self) -> List[Coord]:
        return [payload for name, payload in self.events if name == "cell"]

    @property
    def target_paths(self) -> List[List[Coord]]:
        return [payload for name, payload in self.events if name == "target"]

    @property
    def completions(self) -> int:
        return sum(1 for name, _ in self.events if name == "complete")
