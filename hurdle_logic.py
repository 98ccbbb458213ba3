from __future__ import annotations

import math
import random
import re
from dataclasses import asdict, dataclass, replace

from hurdle_constants import (
    BASE_RANDOM_HURDLE_DIVISOR,
    BASE_SPEED,
    CANVAS_HEIGHT,
    COURSE_LENGTH,
    COURSE_LENGTH_RANGE,
    DEFAULT_MANUAL_OBSTACLES,
    DEFAULT_OBSTACLE_MODE,
    ELITE_RATIO,
    GENE_DURATION,
    GENOME_LENGTH,
    GRAVITY,
    GROUND_EPSILON,
    GROUND_MARGIN,
    HURDLE_MIN_GAP_FACTOR_BASE,
    JUMP_COOLDOWN_FRAMES,
    JUMP_REARM_RATIO,
    JUMP_THRESHOLD,
    JUMP_VELOCITY_MAX,
    JUMP_VELOCITY_MIN,
    MANUAL_DEFAULT_MULTIPLIER,
    MANUAL_HEIGHT_BOOST_PER_LEVEL,
    MANUAL_MIN_MULTIPLIER,
    MANUAL_OBSTACLE_WIDTH,
    MAX_GENERATIONS,
    MAX_GENERATIONS_RANGE,
    MAX_HURDLE_HEIGHT_MULTIPLIER,
    MIN_ELITE_COUNT,
    MUTATION_RATE,
    MUTATION_RATE_RANGE,
    MUTATION_STRENGTH,
    OBSTACLE_MODES,
    POPULATION_SIZE,
    POPULATION_SIZE_RANGE,
    RUNNER_RADIUS,
    RUNNER_START_X,
    SEED,
    SESSION_ADJECTIVES,
    SESSION_NOUNS,
    SPEED_MULTIPLIER_RANGE,
    STRIDE_SCALE,
)


def safe_print(*args, **kwargs) -> None:
    try:
        print(*args, **kwargs)
    except BrokenPipeError:
        raise SystemExit(0)


def session_codename(seed_value: int | None) -> str:
    key = int(SEED if seed_value is None else seed_value)
    adj = SESSION_ADJECTIVES[abs(key) % len(SESSION_ADJECTIVES)]
    noun = SESSION_NOUNS[(abs(key) // len(SESSION_ADJECTIVES)) % len(SESSION_NOUNS)]
    return f"{adj} {noun}"


def print_run_header(mode_label: str, seed_value: int | None) -> None:
    codename = session_codename(seed_value)
    resolved_seed = SEED if seed_value is None else int(seed_value)
    safe_print("=" * 64)
    safe_print(f"{mode_label} | Session: {codename} | Seed: {resolved_seed}")
    safe_print("Objective: evolve runners that clear every hurdle on the course.")
    safe_print("=" * 64)


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def map_value(value: float, in_min: float, in_max: float, out_min: float, out_max: float) -> float:
    span = in_max - in_min
    if span <= 0:
        return out_max if value >= in_max else out_min
    ratio = clamp((value - in_min) / span, 0.0, 1.0)
    return out_min + ratio * (out_max - out_min)


@dataclass
class Settings:
    population_size: int = POPULATION_SIZE
    genome_length: int = GENOME_LENGTH
    gene_duration: int = GENE_DURATION
    mutation_rate: float = MUTATION_RATE
    max_generations: int = MAX_GENERATIONS
    course_length: float = COURSE_LENGTH
    base_speed: float = BASE_SPEED
    gravity: float = GRAVITY
    jump_velocity_min: float = JUMP_VELOCITY_MIN
    jump_velocity_max: float = JUMP_VELOCITY_MAX
    jump_threshold: float = JUMP_THRESHOLD
    jump_cooldown_frames: int = JUMP_COOLDOWN_FRAMES
    runner_radius: float = RUNNER_RADIUS
    ground_margin: float = GROUND_MARGIN
    canvas_height: float = CANVAS_HEIGHT
    obstacle_mode: str = DEFAULT_OBSTACLE_MODE
    manual_obstacles: str = DEFAULT_MANUAL_OBSTACLES
    hurdle_min_gap_factor_base: float = HURDLE_MIN_GAP_FACTOR_BASE
    max_hurdle_height_multiplier: float = MAX_HURDLE_HEIGHT_MULTIPLIER

    @property
    def ground_y(self) -> float:
        return self.canvas_height - self.ground_margin

    @property
    def ground_center_y(self) -> float:
        return self.ground_y - self.runner_radius

    @property
    def runner_diameter(self) -> float:
        return self.runner_radius * 2

    @property
    def max_frames(self) -> int:
        return self.genome_length * self.gene_duration


def normalize_settings(settings: Settings) -> Settings:
    mode = settings.obstacle_mode if settings.obstacle_mode in OBSTACLE_MODES else DEFAULT_OBSTACLE_MODE
    return replace(
        settings,
        population_size=int(clamp(int(settings.population_size), *POPULATION_SIZE_RANGE)),
        genome_length=max(1, int(settings.genome_length)),
        gene_duration=max(1, int(settings.gene_duration)),
        mutation_rate=clamp(float(settings.mutation_rate), *MUTATION_RATE_RANGE),
        max_generations=int(clamp(int(settings.max_generations), *MAX_GENERATIONS_RANGE)),
        course_length=clamp(float(settings.course_length), *COURSE_LENGTH_RANGE),
        jump_cooldown_frames=max(0, int(settings.jump_cooldown_frames)),
        obstacle_mode=mode,
        manual_obstacles=(settings.manual_obstacles or "").strip(),
    )


@dataclass(frozen=True)
class Difficulty:
    gap_factor: float
    count_boost: float
    min_multiplier: float
    max_multiplier: float
    width_min: float
    width_max: float


def difficulty_for(
    level: int,
    base_gap_factor: float = HURDLE_MIN_GAP_FACTOR_BASE,
    max_cap: float = MAX_HURDLE_HEIGHT_MULTIPLIER,
) -> Difficulty:
    steps = max(1, int(level)) - 1
    growth = 1 + steps * 0.2
    width_min = max(8.0, 12 - steps * 0.7)
    return Difficulty(
        gap_factor=max(0.85, base_gap_factor / growth),
        count_boost=1 + steps * 0.25,
        min_multiplier=min(max_cap, 1.6 + steps * 0.2),
        max_multiplier=min(max_cap, 2.5 + steps * 0.35),
        width_min=width_min,
        width_max=max(width_min + 2, 18 - steps * 0.4),
    )


@dataclass
class Obstacle:
    id: str
    x: float
    width: float
    height: float
    hit: bool = False

    @property
    def right(self) -> float:
        return self.x + self.width


NUMERIC_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _parse_float(raw: str) -> float | None:
    # Reads the leading number and ignores trailing junk, so "1.2x" is 1.2.
    match = NUMERIC_PREFIX.match(raw)
    if match is None:
        return None
    value = float(match.group())
    return value if math.isfinite(value) else None


def parse_manual_entries(text: str, course_length: float) -> list[tuple[float, float]]:
    entries: list[tuple[float, float]] = []
    for raw_entry in (text or "").split(","):
        entry = raw_entry.strip()
        if not entry:
            continue
        parts = [part.strip() for part in entry.split(":")]
        position = _parse_float(parts[0])
        if position is None or position <= 50 or position >= course_length - 40:
            continue
        multiplier = _parse_float(parts[1]) if len(parts) > 1 else None
        if multiplier is None:
            multiplier = MANUAL_DEFAULT_MULTIPLIER
        entries.append((position, multiplier))
    return entries


def enforce_obstacle_spacing(obstacles: list[Obstacle], course_length: float, gap_factor: float) -> list[Obstacle]:
    spaced: list[Obstacle] = []
    for current in sorted(obstacles, key=lambda obstacle: obstacle.x):
        candidate = replace(current, hit=False)
        if not spaced:
            candidate.x = max(candidate.x, 80.0)
            spaced.append(candidate)
            continue

        previous = spaced[-1]
        min_gap = gap_factor * max(previous.width, candidate.width)
        lowest = previous.right + min_gap
        highest = course_length - 80 - candidate.width
        if highest < lowest:
            continue
        candidate.x = clamp(candidate.x, lowest, highest)
        spaced.append(candidate)
    return spaced


def generate_random_obstacles(settings: Settings, level: int, difficulty: Difficulty | None = None) -> list[Obstacle]:
    effective_level = max(1, int(level))
    if difficulty is None:
        difficulty = difficulty_for(
            effective_level, settings.hurdle_min_gap_factor_base, settings.max_hurdle_height_multiplier
        )
    length = settings.course_length
    diameter = settings.runner_diameter
    divisor = BASE_RANDOM_HURDLE_DIVISOR / difficulty.count_boost
    count = max(6 + (effective_level - 1), round_half_up(length / divisor))
    segment_length = max((length - 240) / count, diameter * 1.8)
    width_range = max(difficulty.width_max - difficulty.width_min, 0.0001)
    multiplier_range = max(difficulty.max_multiplier - difficulty.min_multiplier, 0.0001)

    obstacles: list[Obstacle] = []
    segment_start = 120.0
    for index in range(count):
        width = clamp(difficulty.width_min + random.random() * width_range, difficulty.width_min, difficulty.width_max)
        multiplier = clamp(
            difficulty.min_multiplier + random.random() * multiplier_range,
            difficulty.min_multiplier,
            difficulty.max_multiplier,
        )
        segment_end = segment_start + segment_length
        max_position = min(length - 140 - width, segment_end - width)
        min_position = max(segment_start, 80.0 + index * 20)
        if max_position <= min_position:
            max_position = min_position + settings.runner_radius * 4
        position_range = max(max_position - min_position, settings.runner_radius)
        position = clamp(min_position + random.random() * position_range, min_position, max_position)
        obstacles.append(Obstacle(id=f"rand-{index}", x=position, width=width, height=diameter * multiplier))

        segment_start += segment_length * random.uniform(0.5, 1.1)
        segment_start = min(segment_start, length - 180)

    return enforce_obstacle_spacing(obstacles, length, difficulty.gap_factor)


def build_manual_obstacles(settings: Settings, level: int, difficulty: Difficulty | None = None) -> list[Obstacle]:
    effective_level = max(1, int(level))
    if difficulty is None:
        difficulty = difficulty_for(
            effective_level, settings.hurdle_min_gap_factor_base, settings.max_hurdle_height_multiplier
        )
    entries = parse_manual_entries(settings.manual_obstacles, settings.course_length)
    if not entries:
        return generate_random_obstacles(settings, effective_level, difficulty)

    height_boost = 1 + (effective_level - 1) * MANUAL_HEIGHT_BOOST_PER_LEVEL
    obstacles: list[Obstacle] = []
    for index, (position, multiplier) in enumerate(entries):
        scaled = clamp(multiplier * height_boost, MANUAL_MIN_MULTIPLIER, settings.max_hurdle_height_multiplier)
        scaled = max(scaled, difficulty.min_multiplier)
        obstacles.append(
            Obstacle(
                id=f"manual-{index}",
                x=position,
                width=MANUAL_OBSTACLE_WIDTH,
                height=settings.runner_diameter * scaled,
            )
        )

    # Higher levels add hurdles instead of only raising the manual ones.
    if effective_level > 1:
        extra_pool = generate_random_obstacles(settings, effective_level, difficulty)
        extra_count = min(len(extra_pool), effective_level + math.ceil(len(obstacles) / 2))
        obstacles.extend(extra_pool[:extra_count])

    return enforce_obstacle_spacing(obstacles, settings.course_length, difficulty.gap_factor)


def build_course(settings: Settings, level: int, difficulty: Difficulty | None = None) -> list[Obstacle]:
    if settings.obstacle_mode == "manual":
        return build_manual_obstacles(settings, level, difficulty)
    return generate_random_obstacles(settings, level, difficulty)


class LevelController:
    def __init__(self, settings: Settings, level: int = 1):
        self.settings = settings
        self.level = max(1, int(level))
        self.level_best_distance = 0.0
        self.difficulty = self._difficulty()
        self.obstacles: list[Obstacle] = []
        self.reset_obstacles()

    def _difficulty(self) -> Difficulty:
        return difficulty_for(
            self.level,
            self.settings.hurdle_min_gap_factor_base,
            self.settings.max_hurdle_height_multiplier,
        )

    def reset_obstacles(self) -> list[Obstacle]:
        self.difficulty = self._difficulty()
        self.obstacles = build_course(self.settings, self.level, self.difficulty)
        self.clear_hits()
        return self.obstacles

    def increase_level(self) -> int:
        self.level += 1
        self.level_best_distance = 0.0
        self.reset_obstacles()
        return self.level

    def record_distance(self, distance: float) -> None:
        self.level_best_distance = max(self.level_best_distance, distance)

    def clear_hits(self) -> None:
        for obstacle in self.obstacles:
            obstacle.hit = False

    def reset(self) -> None:
        self.level = 1
        self.level_best_distance = 0.0
        self.reset_obstacles()


class Runner:
    """One genome-driven runner.

    The genome is read one slot per ``gene_duration`` frames. A slot value
    above the jump threshold triggers a jump whose strength grows with the
    value; every slot also nudges the stride speed around ``base_speed``.
    """

    def __init__(self, genome: list[float], settings: Settings):
        self.genome = list(genome)
        self.settings = settings
        self.radius = settings.runner_radius
        self.reset_state()

    def reset_state(self) -> None:
        self.x = RUNNER_START_X
        self.y = self.settings.ground_center_y
        self.vx = self.settings.base_speed
        self.vy = 0.0
        self.elapsed_frames = 0
        self.current_gene_index = -1
        self.jump_cooldown = 0
        self.can_trigger_jump = True
        self.distance = 0.0
        self.finished = False
        self.crashed = False
        self.success = False

    @property
    def timed_out(self) -> bool:
        return self.finished and not self.crashed and not self.success

    def is_on_ground(self) -> bool:
        return abs(self.y - self.settings.ground_center_y) < GROUND_EPSILON

    def update(self, obstacles: list[Obstacle]) -> None:
        if self.finished:
            return
        settings = self.settings

        self.elapsed_frames += 1
        gene_index = min(self.elapsed_frames // settings.gene_duration, len(self.genome) - 1)
        if gene_index != self.current_gene_index:
            self.current_gene_index = gene_index
            self.can_trigger_jump = True
        gene = self.genome[gene_index]

        if (
            self.is_on_ground()
            and self.jump_cooldown <= 0
            and self.can_trigger_jump
            and gene > settings.jump_threshold
        ):
            power = map_value(gene, settings.jump_threshold, 1.0, settings.jump_velocity_min, settings.jump_velocity_max)
            self.vy = -power
            self.can_trigger_jump = False
            self.jump_cooldown = settings.jump_cooldown_frames
        elif gene < settings.jump_threshold * JUMP_REARM_RATIO:
            self.can_trigger_jump = True

        if self.jump_cooldown > 0:
            self.jump_cooldown -= 1

        forward_velocity = self.vx + (gene - 0.5) * STRIDE_SCALE
        self.x += forward_velocity
        self.vy += settings.gravity
        self.y += self.vy
        if self.y > settings.ground_center_y:
            self.y = settings.ground_center_y
            self.vy = 0.0

        self.distance = max(self.distance, self.x)

        if self.x >= settings.course_length:
            self.distance = float(settings.course_length)
            self.success = True
            self.finished = True
            return

        obstacle = self.first_collision(obstacles)
        if obstacle is not None:
            obstacle.hit = True
            self.crashed = True
            self.finished = True
            return

        if self.elapsed_frames >= settings.max_frames:
            self.finished = True

    def first_collision(self, obstacles: list[Obstacle]) -> Obstacle | None:
        ground_y = self.settings.ground_y
        radius_sq = self.radius * self.radius
        for obstacle in obstacles:
            closest_x = clamp(self.x, obstacle.x, obstacle.right)
            closest_y = clamp(self.y, ground_y - obstacle.height, ground_y)
            dx = self.x - closest_x
            dy = self.y - closest_y
            if dx * dx + dy * dy <= radius_sq:
                return obstacle
        return None

    def clone(self) -> Runner:
        return Runner(self.genome, self.settings)

    def snapshot(self) -> dict[str, object]:
        return {
            "x": self.x,
            "y": self.y,
            "vx": self.vx,
            "vy": self.vy,
            "distance": self.distance,
            "gene_index": self.current_gene_index,
            "finished": self.finished,
            "crashed": self.crashed,
            "success": self.success,
        }


def random_genome(length: int) -> list[float]:
    return [random.random() for _ in range(length)]


def selection_weight(runner: Runner) -> float:
    return runner.distance + 1.0


def weighted_selection(pool: list[Runner]) -> Runner:
    if not pool:
        raise ValueError("Cannot select a parent from an empty pool.")
    total = sum(selection_weight(runner) for runner in pool)
    threshold = random.random() * total
    for runner in pool:
        threshold -= selection_weight(runner)
        if threshold <= 0:
            return runner
    return pool[0]


def crossover(parent_a: list[float], parent_b: list[float]) -> list[float]:
    cut_point = random.randrange(len(parent_a))
    return parent_a[:cut_point] + parent_b[cut_point:]


def mutate(genes: list[float], mutation_rate: float, mutation_strength: float = MUTATION_STRENGTH) -> list[float]:
    new_genes = genes[:]
    for i in range(len(new_genes)):
        if random.random() < mutation_rate:
            new_genes[i] = clamp(new_genes[i] + random.uniform(-mutation_strength, mutation_strength), 0.0, 1.0)
    return new_genes


def elite_count_for(population_size: int) -> int:
    return min(population_size, max(MIN_ELITE_COUNT, round_half_up(population_size * ELITE_RATIO)))


@dataclass
class GenerationStats:
    average_distance: float = 0.0
    best_distance: float = 0.0
    dropout_count: int = 0
    completed_count: int = 0
    timed_out_count: int = 0
    running_count: int = 0


@dataclass
class FinalResult:
    level: int
    best_distance: float
    generation: int
    reason: str = "max_generations"


@dataclass
class GenerationSummary:
    generation: int
    average_distance: float
    best_distance: float
    dropout_count: int
    completed_count: int
    timed_out_count: int
    level: int
    leveled_up: bool = False
    final_result: FinalResult | None = None

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


class Population:
    def __init__(self, settings: Settings, course: LevelController):
        self.settings = settings
        self.course = course
        self._breeding = False
        self.create_initial_population()

    def create_initial_population(self) -> None:
        self.individuals = [
            Runner(random_genome(self.settings.genome_length), self.settings)
            for _ in range(self.settings.population_size)
        ]
        self.generation = 1
        self.stats = GenerationStats()
        self.best_index: int | None = None
        self.overall_best = {"distance": 0.0, "generation": 1}
        self.final_result: FinalResult | None = None

    @property
    def elite_count(self) -> int:
        return elite_count_for(self.settings.population_size)

    @property
    def best_individual(self) -> Runner | None:
        if self.best_index is None:
            return None
        return self.individuals[self.best_index]

    @property
    def is_finished(self) -> bool:
        return self.final_result is not None

    def advance_one_frame(self, obstacles: list[Obstacle] | None = None) -> GenerationSummary | None:
        if self._breeding or self.is_finished:
            return None
        active_obstacles = self.course.obstacles if obstacles is None else obstacles

        active_count = 0
        for individual in self.individuals:
            if not individual.finished:
                individual.update(active_obstacles)
            if not individual.finished:
                active_count += 1
        self.update_stats()

        if active_count == 0:
            return self._breed_atomically()
        return None

    def force_advance(self) -> GenerationSummary | None:
        if self._breeding or self.is_finished:
            return None
        for individual in self.individuals:
            individual.finished = True
        return self._breed_atomically()

    def _breed_atomically(self) -> GenerationSummary:
        self._breeding = True
        try:
            return self.evaluate_and_breed()
        finally:
            self._breeding = False

    def update_stats(self) -> GenerationStats:
        total = 0.0
        best = 0.0
        best_index: int | None = None
        stats = GenerationStats()
        for index, individual in enumerate(self.individuals):
            total += individual.distance
            if individual.distance > best:
                best = individual.distance
                best_index = index
            if individual.crashed:
                stats.dropout_count += 1
            elif individual.success:
                stats.completed_count += 1
            elif individual.finished:
                stats.timed_out_count += 1
            else:
                stats.running_count += 1

        stats.average_distance = total / len(self.individuals) if self.individuals else 0.0
        stats.best_distance = best
        self.stats = stats
        self.best_index = best_index
        self.course.record_distance(best)
        if best_index is not None and best > self.overall_best["distance"]:
            self.overall_best = {"distance": best, "generation": self.generation}
        return stats

    def evaluate_and_breed(self) -> GenerationSummary:
        stats = self.update_stats()
        leveled_up = False
        if stats.completed_count > 0:
            self.course.increase_level()
            leveled_up = True

        summary = GenerationSummary(
            generation=self.generation,
            average_distance=stats.average_distance,
            best_distance=stats.best_distance,
            dropout_count=stats.dropout_count,
            completed_count=stats.completed_count,
            timed_out_count=stats.timed_out_count,
            level=self.course.level,
            leveled_up=leveled_up,
        )

        if self.generation >= self.settings.max_generations:
            self.final_result = FinalResult(
                level=self.course.level,
                best_distance=max(self.course.level_best_distance, stats.best_distance),
                generation=self.generation,
            )
            summary.final_result = self.final_result
            return summary

        self.individuals = self.breed_next_generation()
        self.best_index = None
        self.generation += 1
        self.course.clear_hits()
        return summary

    def breed_next_generation(self) -> list[Runner]:
        ranked = sorted(self.individuals, key=lambda runner: runner.distance, reverse=True)
        next_generation = [elite.clone() for elite in ranked[: self.elite_count]]

        while len(next_generation) < self.settings.population_size:
            parent_a = weighted_selection(ranked)
            parent_b = weighted_selection(ranked)
            child = crossover(parent_a.genome, parent_b.genome)
            child = mutate(child, self.settings.mutation_rate)
            next_generation.append(Runner(child, self.settings))
        return next_generation

    def leader(self) -> int | None:
        if not self.individuals:
            return None
        return max(range(len(self.individuals)), key=lambda index: self.individuals[index].x)


class Simulation:
    """Host-facing driver: run flags, speed multiplier and generation history.

    ``step`` advances exactly one frame and is clock independent; ``tick``
    mirrors one display frame and may run several steps at higher speeds.
    """

    def __init__(self, settings: Settings | None = None, speed_multiplier: float = 1.0):
        self.settings = settings or Settings()
        self.speed_multiplier = clamp(float(speed_multiplier), *SPEED_MULTIPLIER_RANGE)
        self.reset()

    def reset(self) -> None:
        self.course = LevelController(self.settings)
        self.population = Population(self.settings, self.course)
        self.running = True
        self.halted = False
        self.stop_reason = ""
        self.frame = 0
        self.history: list[GenerationSummary] = []

    @property
    def level(self) -> int:
        return self.course.level

    @property
    def obstacles(self) -> list[Obstacle]:
        return self.course.obstacles

    @property
    def final_result(self) -> FinalResult | None:
        return self.population.final_result

    @property
    def is_finished(self) -> bool:
        return self.population.is_finished

    def _record(self, summary: GenerationSummary | None) -> GenerationSummary | None:
        if summary is None:
            return None
        self.history.append(summary)
        if summary.final_result is not None:
            self.running = False
            self.halted = True
            self.stop_reason = summary.final_result.reason
        return summary

    def step(self) -> GenerationSummary | None:
        if self.is_finished:
            return None
        self.frame += 1
        return self._record(self.population.advance_one_frame(self.course.obstacles))

    def tick(self) -> list[GenerationSummary]:
        if not self.running or self.halted:
            return []
        summaries: list[GenerationSummary] = []
        for _ in range(max(1, round_half_up(self.speed_multiplier))):
            summary = self.step()
            if summary is not None:
                summaries.append(summary)
            if self.is_finished:
                break
        return summaries

    def set_speed(self, multiplier: float) -> float:
        self.speed_multiplier = clamp(float(multiplier), *SPEED_MULTIPLIER_RANGE)
        return self.speed_multiplier

    def toggle_running(self) -> bool:
        if self.is_finished:
            return False
        if self.halted:
            self.halted = False
            self.stop_reason = ""
        self.running = not self.running
        return self.running

    def stop(self) -> None:
        if self.is_finished:
            return
        self.running = False
        self.halted = True
        self.stop_reason = "user"

    def next_generation(self) -> GenerationSummary | None:
        return self._record(self.population.force_advance())

    def reconfigure(self, **changes: object) -> Settings:
        self.settings = normalize_settings(replace(self.settings, **changes))
        self.reset()
        return self.settings

    def run_until_finished(self, max_frames: int | None = None) -> FinalResult | None:
        while not self.is_finished:
            if max_frames is not None and self.frame >= max_frames:
                break
            self.step()
        return self.final_result

    def frame_snapshot(self) -> dict[str, object]:
        return {
            "frame": self.frame,
            "generation": self.population.generation,
            "level": self.course.level,
            "leader": self.population.leader(),
            "best_index": self.population.best_index,
            "level_best_distance": self.course.level_best_distance,
            "overall_best": dict(self.population.overall_best),
            "stats": asdict(self.population.stats),
            "runners": [runner.snapshot() for runner in self.population.individuals],
            "obstacles": [asdict(obstacle) for obstacle in self.course.obstacles],
        }


def should_log_generation(generation: int, total_generations: int | None, log_interval: int) -> bool:
    if log_interval <= 1:
        return True
    if generation == 1:
        return True
    if total_generations is not None and generation == total_generations:
        return True
    return generation % log_interval == 0


def format_generation_line(summary: GenerationSummary) -> str:
    return (
        f"Gen {summary.generation:02d} | avg distance={summary.average_distance:7.1f} | "
        f"best distance={summary.best_distance:7.1f} | dropouts={summary.dropout_count} | "
        f"completed={summary.completed_count} | level={summary.level}"
    )


def report_summary(summary: GenerationSummary, simulation: Simulation, log_interval: int) -> None:
    if should_log_generation(summary.generation, simulation.settings.max_generations, log_interval):
        safe_print(format_generation_line(summary))
    if summary.leveled_up:
        safe_print(
            f"Level up! Course cleared in generation {summary.generation}; "
            f"now level {summary.level} with {len(simulation.obstacles)} hurdles."
        )


def evolve(
    settings: Settings | None = None,
    seed: int | None = None,
    log_interval: int = 1,
    speed: float = 1.0,
    max_frames: int | None = None,
) -> Simulation:
    if seed is not None:
        random.seed(seed)

    simulation = Simulation(settings, speed_multiplier=speed)
    active = simulation.settings

    print_run_header("Headless Evolution", seed)
    safe_print(
        f"Course: length={active.course_length:.0f}, mode={active.obstacle_mode}, "
        f"hurdles={len(simulation.obstacles)} | population={active.population_size}, "
        f"genome={active.genome_length}x{active.gene_duration} frames, mutation={active.mutation_rate * 100:.1f}%"
    )

    while not simulation.is_finished:
        if max_frames is not None and simulation.frame >= max_frames:
            simulation.stop()
            safe_print("\nFrame budget exhausted. Ending run early.")
            break
        for summary in simulation.tick():
            report_summary(summary, simulation, log_interval)

    final = simulation.final_result
    if final is not None:
        safe_print(f"\nFinal level: {final.level} | final best distance: {final.best_distance:.1f}")
    else:
        safe_print(
            f"\nStopped ({simulation.stop_reason}) at generation {simulation.population.generation}, "
            f"level {simulation.level}."
        )
    return simulation
