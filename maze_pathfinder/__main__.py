"""Command-line entry point for Maze Path Finder."""

import argparse
import logging
import sys
from typing import Dict, List, Optional, Sequence

from .errors import InvalidConfiguration, PathfindingError
from .domain.types import (
    Coord, Grid, PathfindingResult, WeightsConfig,
    ALGORITHM_IDS, ALGORITHM_NAMES, DEFAULT_GRID_SIZE,
)
from .domain.engine import compare
from .utils.grid_factory import generate_maze_grid, generate_random_grid, render_ascii
from .utils.maze_serialization import (
    extract_maze_from_grid, grid_from_maze, load_maze, save_maze,
)

log = logging.getLogger("maze_pathfinder")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="maze_pathfinder",
        description="Run grid search algorithms and compare their results",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--maze", type=str, help="Path to a saved maze file")
    parser.add_argument("--size", type=int, default=DEFAULT_GRID_SIZE,
                        help="Grid size for a generated maze (5-30)")
    parser.add_argument("--density", type=float, default=None,
                        help="Scatter walls at this density instead of carving a maze")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for generation")
    parser.add_argument("--algorithm", choices=ALGORITHM_IDS + ("all",), default="all",
                        help="Algorithm to run")
    parser.add_argument("--weights", action="store_true",
                        help="Use cell weights as edge costs (generated grids get random weights)")
    parser.add_argument("--animate", action="store_true",
                        help="Drive the run step by step through the Qt controller")
    parser.add_argument("--interval", type=int, default=10,
                        help="Milliseconds between animation steps")
    parser.add_argument("--save", type=str, help="Save the maze to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def load_or_generate(args) -> tuple:
    """Grid, start and end from --maze or a freshly generated layout."""
    if args.maze:
        maze = load_maze(args.maze)
        return grid_from_maze(maze), maze.start, maze.end
    if args.density is not None:
        return generate_random_grid(args.size, args.density, seed=args.seed, weighted=args.weights)
    return generate_maze_grid(args.size, seed=args.seed, weighted=args.weights)


def format_comparison(results: Dict[str, PathfindingResult]) -> str:
    """Comparison table: one row per algorithm."""
    header = f"{'Algorithm':<10} {'Found':<6} {'Length':>6} {'Cost':>6} {'Explored':>9} {'Time (ms)':>10}"
    lines = [header, "-" * len(header)]
    for algorithm, result in results.items():
        cost = "-" if result.cost is None else str(result.cost)
        length = str(result.path_length) if result.found else "-"
        lines.append(
            f"{ALGORITHM_NAMES[algorithm]:<10} {('yes' if result.found else 'no'):<6} "
            f"{length:>6} {cost:>6} {result.nodes_explored:>9} {result.elapsed_ms:>10.2f}"
        )
    return "\n".join(lines)


def run_animated(grid: Grid, start: Coord, end: Coord, algorithms: Sequence[str],
                 weights_enabled: bool, interval: int) -> Dict[str, PathfindingResult]:
    """Run each algorithm through the timer-driven controller and draw the final frame."""
    from PySide6.QtCore import QCoreApplication
    from .app.controller import PathfinderController
    from .app.fsm import RunState

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    controller = PathfinderController(grid.size)
    controller.load_maze_data(extract_maze_from_grid(grid, start, end))
    controller.speed = interval

    finished = (RunState.COMPLETE, RunState.NO_PATH, RunState.CANCELLED, RunState.ERROR)
    controller.state_changed.connect(lambda state: app.quit() if state in finished else None)
    controller.error_occurred.connect(lambda message: log.error("%s", message))

    results = {}
    for algorithm in algorithms:
        controller.update_config(algorithm=algorithm, weights_enabled=weights_enabled)
        controller.start_run()
        app.exec()

        trace = controller.trace
        visited: List[Coord] = [e.coord for e in trace if e.kind == "visited"]
        path: List[Coord] = [e.coord for e in trace if e.kind == "path"]
        print(f"\n{ALGORITHM_NAMES[algorithm]}: {controller.status_message()}")
        print(render_ascii(controller.grid, start, end, visited=visited, path=path))
        if controller.result is not None:
            results[algorithm] = controller.result

    return results


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the command-line runner."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    algorithms = list(ALGORITHM_IDS) if args.algorithm == "all" else [args.algorithm]

    try:
        grid, start, end = load_or_generate(args)
        if args.save:
            save_maze(extract_maze_from_grid(grid, start, end), args.save)

        print(render_ascii(grid, start, end))
        if args.animate:
            results = run_animated(grid, start, end, algorithms, args.weights, args.interval)
        else:
            results = compare(grid, start, end, algorithms, WeightsConfig(enabled=args.weights))
    except InvalidConfiguration as e:
        log.error("Invalid configuration: %s", e)
        return 2
    except (OSError, PathfindingError) as e:
        log.error("%s", e)
        return 1

    print()
    print(format_comparison(results))
    return 0


if __name__ == "__main__":
    sys.exit(main())
