import argparse
import sys
import os
import logging
import time

# Ensure project root is in path so we can import 'maze_stepper' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.core.config import ConfigurationError, RunParams, check_params, fix_params
from maze_stepper.core.topology import TOPOLOGIES, get_topology


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maze Stepper: observable step-by-step maze generation")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    gen_parser.add_argument("--width", type=int, default=20, help="Maze Width")
    gen_parser.add_argument("--height", type=int, default=20, help="Maze Height")
    gen_parser.add_argument("--topology", type=str, default="rect", choices=sorted(TOPOLOGIES),
                            help="Neighbour scheme")
    gen_parser.add_argument("--hex", action="store_const", const="hex", dest="topology",
                            help="Shortcut for --topology hex")
    gen_parser.add_argument("--start", type=int, nargs=2, metavar=("X", "Y"), help="Start cell (default 0 0)")
    gen_parser.add_argument("--end", type=int, nargs=2, metavar=("X", "Y"), help="Target cell (default: last cell)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--wait", type=float, default=None, help="Seconds between steps (0.01 - 1.0)")
    gen_parser.add_argument("--fix", action="store_true", help="Clamp out-of-range inputs instead of failing")
    gen_parser.add_argument("--paced", action="store_true", help="Honour the wait time in headless mode")
    gen_parser.add_argument("--tiles", action="store_true", help="Print the tile name of every cell")
    gen_parser.add_argument("--visual", action="store_true", help="Show visualization")
    gen_parser.add_argument("--record", action="store_true", help="Record generation video")
    return parser


def params_from_args(args) -> RunParams:
    start = tuple(args.start) if args.start else (0, 0)
    end = tuple(args.end) if args.end else (args.width - 1, args.height - 1)
    params = RunParams(args.width, args.height, start, end, get_topology(args.topology))
    if args.fix:
        return fix_params(params)
    return check_params(params)


def print_tiles(grid):
    # Top row first so north is up
    for y in reversed(range(grid.height)):
        print(" ".join(grid.tile_name(x, y) for x in range(grid.width)))


def run_generate(args, logger) -> int:
    from maze_stepper.core.analysis import MazeInspector
    from maze_stepper.core.events import RecordingListener
    from maze_stepper.core.grid import create_grid
    from maze_stepper.core.run import DEFAULT_WAIT_TIME, RunController

    try:
        params = params_from_args(args)
    except ConfigurationError as e:
        logger.error(f"Invalid run settings: {e}")
        return 2

    logger.info(f"Generating {params.width}x{params.height} {params.topology.name} maze "
                f"from {params.start} to {params.end}...")
    grid = create_grid(params.width, params.height, params.topology)
    wait_time = args.wait if args.wait is not None else DEFAULT_WAIT_TIME

    if args.visual or args.record:
        logger.info("Visual mode enabled - Opening window...")
        from maze_stepper.viz.renderer import Renderer
        renderer = Renderer(grid, record=args.record)
        if args.record:
            if not os.path.exists("recordings"):
                os.makedirs("recordings")
            renderer.recorder.output_file = renderer.recorder.default_filename(
                f"gen_{params.topology.name}_{params.width}x{params.height}")
            logger.info(f"Recording video to {renderer.recorder.output_file}")
        handle = renderer.start_run(params.start, params.end, seed=args.seed, wait_time=wait_time)
        renderer.init_window()
        renderer.run_loop()
    else:
        logger.info("Headless generation...")
        listener = RecordingListener()
        sleep = time.sleep if args.paced else (lambda _: None)
        controller = RunController(listener=listener, sleep=sleep)
        handle = controller.start_run(grid, params.start, params.end, seed=args.seed, wait_time=wait_time)
        controller.run_until_complete(handle)
        if listener.target_paths:
            logger.info(f"Target path length: {len(listener.target_paths[0])}")

    stats = MazeInspector.calculate_stats(grid)
    logger.info(f"Finished ({handle.state.value}) after {handle.step_count} steps. Stats: {stats}")

    if args.tiles:
        print_tiles(grid)
    print("Done.")
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("maze_stepper")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    if args.command == "generate":
        return run_generate(args, logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())
