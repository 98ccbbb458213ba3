from __future__ import annotations

import argparse
import signal

import hurdle_logic as core
from hurdle_constants import (
    COURSE_LENGTH,
    DEFAULT_MANUAL_OBSTACLES,
    DEFAULT_OBSTACLE_MODE,
    GENE_DURATION,
    GENOME_LENGTH,
    MAX_GENERATIONS,
    MUTATION_RATE,
    OBSTACLE_MODES,
    POPULATION_SIZE,
    SEED,
)

if hasattr(signal, "SIGPIPE"):
    signal.signal(signal.SIGPIPE, signal.SIG_DFL)


safe_print = core.safe_print

Settings = core.Settings
Obstacle = core.Obstacle
Runner = core.Runner
Population = core.Population
LevelController = core.LevelController
Simulation = core.Simulation
GenerationSummary = core.GenerationSummary
FinalResult = core.FinalResult

normalize_settings = core.normalize_settings
difficulty_for = core.difficulty_for
parse_manual_entries = core.parse_manual_entries
build_manual_obstacles = core.build_manual_obstacles
generate_random_obstacles = core.generate_random_obstacles
enforce_obstacle_spacing = core.enforce_obstacle_spacing
build_course = core.build_course
random_genome = core.random_genome
weighted_selection = core.weighted_selection
crossover = core.crossover
mutate = core.mutate
elite_count_for = core.elite_count_for
should_log_generation = core.should_log_generation
format_generation_line = core.format_generation_line
evolve = core.evolve


def settings_from_args(args: argparse.Namespace) -> Settings:
    return normalize_settings(
        Settings(
            population_size=args.population_size,
            genome_length=args.genome_length,
            gene_duration=args.gene_duration,
            mutation_rate=args.mutation_rate,
            max_generations=args.generations,
            course_length=args.course_length,
            obstacle_mode=args.obstacle_mode,
            manual_obstacles=args.manual_obstacles,
        )
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evolve runners that learn to jump over a hurdle course.")
    parser.add_argument(
        "--population-size",
        type=int,
        default=POPULATION_SIZE,
        help=f"Runners per generation, clamped to 10-200 (default: {POPULATION_SIZE}).",
    )
    parser.add_argument(
        "--genome-length",
        type=int,
        default=GENOME_LENGTH,
        help=f"Number of decision slots per genome (default: {GENOME_LENGTH}).",
    )
    parser.add_argument(
        "--gene-duration",
        type=int,
        default=GENE_DURATION,
        help=f"Frames each genome slot stays active (default: {GENE_DURATION}).",
    )
    parser.add_argument(
        "--mutation-rate",
        type=float,
        default=MUTATION_RATE,
        help=f"Per-gene mutation probability, clamped to 0-1 (default: {MUTATION_RATE}).",
    )
    parser.add_argument(
        "--generations",
        type=int,
        default=MAX_GENERATIONS,
        help=f"Maximum generations before the run ends, clamped to 10-1000 (default: {MAX_GENERATIONS}).",
    )
    parser.add_argument(
        "--course-length",
        type=float,
        default=COURSE_LENGTH,
        help=f"Course length, clamped to 400-3000 (default: {COURSE_LENGTH}).",
    )
    parser.add_argument(
        "--obstacle-mode",
        choices=list(OBSTACLE_MODES),
        default=DEFAULT_OBSTACLE_MODE,
        help="Hurdle layout: random (procedural) or manual (from --manual-obstacles).",
    )
    parser.add_argument(
        "--manual-obstacles",
        default=DEFAULT_MANUAL_OBSTACLES,
        help=f"Comma-separated position:height entries for manual mode (default: '{DEFAULT_MANUAL_OBSTACLES}').",
    )
    parser.add_argument("--speed", type=float, default=1.0, help="Simulation steps per tick (default: 1).")
    parser.add_argument("--seed", type=int, default=SEED, help="Random seed for reproducibility.")
    parser.add_argument(
        "--log-interval",
        type=int,
        default=1,
        help="Print generation stats every N generations (default: 1).",
    )
    parser.add_argument(
        "--max-frames",
        type=int,
        default=None,
        help="Stop the run after this many simulation frames (default: no limit).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> Simulation:
    args = parse_args(argv)
    if args.max_frames is not None and args.max_frames <= 0:
        raise SystemExit("--max-frames must be a positive number of frames.")
    return evolve(
        settings=settings_from_args(args),
        seed=args.seed,
        log_interval=max(1, args.log_interval),
        speed=args.speed,
        max_frames=args.max_frames,
    )


if __name__ == "__main__":
    main()
