import sys
import os
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.core.analysis import MazeInspector
from maze_stepper.core.grid import create_grid
from maze_stepper.core.run import RunController
from maze_stepper.core.topology import HEXAGONAL, RECTANGULAR


def benchmark_size(width: int, height: int, topology):
    print(f"\n--- Benchmarking {width}x{height} {topology.name} ({width*height:,} cells) ---")

    grid = create_grid(width, height, topology)
    # No pacing: measure the algorithm and event forwarding only
    controller = RunController(sleep=lambda _: None)
    handle = controller.start_run(grid, (0, 0), (width - 1, height - 1), seed=42)

    gen_start = time.time()
    controller.run_until_complete(handle)
    gen_time = time.time() - gen_start

    print(f"Steps: {handle.step_count:,} (bound {2 * width * height:,})")
    print(f"Generation Time: {gen_time:.4f}s")
    print(f"Speed: {(width*height)/gen_time:,.0f} cells/sec")
    print(f"Stats: {MazeInspector.calculate_stats(grid)}")


def run_suite():
    sizes = [
        (50, 50),
        (250, 250),   # Largest interactive size
        (1000, 1000),
    ]

    for topology in (RECTANGULAR, HEXAGONAL):
        for w, h in sizes:
            benchmark_size(w, h, topology)


if __name__ == "__main__":
    run_suite()
