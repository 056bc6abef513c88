from typing import List, NamedTuple, Tuple

from maze_stepper.core.topology import RECTANGULAR, Topology

# Interactive size limits
MIN_SIZE = 3
MAX_SIZE = 250


class ConfigurationError(ValueError):
    """Invalid run input. Raised before a run starts, never from inside a step."""


class RunParams(NamedTuple):
    width: int
    height: int
    start: Tuple[int, int]
    end: Tuple[int, int]
    topology: Topology = RECTANGULAR


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def validate_params(params: RunParams, min_size: int = MIN_SIZE, max_size: int = MAX_SIZE) -> List[str]:
    """Returns a list of problems with 'params'. Empty when the params can be run."""
    problems = []
    if not min_size <= params.width <= max_size:
        problems.append(f"width {params.width} outside [{min_size}, {max_size}]")
    if not min_size <= params.height <= max_size:
        problems.append(f"height {params.height} outside [{min_size}, {max_size}]")

    for label, (x, y) in (("start", params.start), ("end", params.end)):
        if not (0 <= x < params.width and 0 <= y < params.height):
            problems.append(f"{label} ({x}, {y}) outside {params.width}x{params.height} grid")
    return problems


def fix_params(params: RunParams, min_size: int = MIN_SIZE, max_size: int = MAX_SIZE) -> RunParams:
    """
    Puts every value back into range.
    Size is clamped. An out-of-range start coordinate snaps to 0 when it is
    below the size (i.e. negative), otherwise to the last cell.
    An out-of-range end coordinate always snaps to the last cell.
    """
    width = _clamp(params.width, min_size, max_size)
    height = _clamp(params.height, min_size, max_size)

    def fix_axis(value: int, size: int, is_end: bool) -> int:
        if 0 <= value < size:
            return value
        if not is_end and value < size:
            return 0
        return size - 1

    start = (fix_axis(params.start[0], width, False), fix_axis(params.start[1], height, False))
    end = (fix_axis(params.end[0], width, True), fix_axis(params.end[1], height, True))
    return RunParams(width, height, start, end, params.topology)


def check_params(params: RunParams, min_size: int = MIN_SIZE, max_size: int = MAX_SIZE) -> RunParams:
    problems = validate_params(params, min_size, max_size)
    if problems:
        raise ConfigurationError("; ".join(problems))
    return params
