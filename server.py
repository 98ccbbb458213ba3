from __future__ import annotations

import random
from dataclasses import asdict

from fastapi import FastAPI, Query
from fastapi.responses import HTMLResponse

import main

app = FastAPI(title="hurdle-lab service", version="1.0.0")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/")
def root() -> HTMLResponse:
        html = """
<!doctype html>
<html lang="en">
    <head>
        <meta charset="utf-8" />
        <meta name="viewport" content="width=device-width, initial-scale=1" />
        <title>hurdle-lab</title>
    </head>
    <body style="font-family: system-ui, sans-serif; margin: 2rem; line-height: 1.5;">
        <h1 style="margin: 0 0 0.5rem 0;">hurdle-lab</h1>
        <p style="margin-top: 0;">Runners evolve to jump a hurdle course, served as a minimal web service.</p>
        <ul>
            <li><a href="/difficulty?level=3">/difficulty?level=3</a></li>
            <li><a href="/course?level=1&seed=42">/course?level=1&seed=42</a></li>
            <li><a href="/simulate?generations=10&population_size=20&seed=42">/simulate?generations=10&population_size=20&seed=42</a></li>
            <li><a href="/docs">/docs</a></li>
            <li><a href="/health">/health</a></li>
        </ul>
    </body>
</html>
"""
        return HTMLResponse(content=html)


@app.get("/difficulty")
def difficulty(level: int = Query(default=1, ge=1, le=100, description="Difficulty level (1 = easiest)")) -> dict[str, object]:
    return {"level": level, **asdict(main.difficulty_for(level))}


@app.get("/course")
def course(
    level: int = Query(default=1, ge=1, le=100, description="Difficulty level used to lay out the hurdles"),
    course_length: float = Query(default=1000.0, ge=400, le=3000, description="Course length"),
    mode: str = Query(default="random", pattern="^(random|manual)$", description="Layout mode: random | manual"),
    manual: str = Query(default=main.DEFAULT_MANUAL_OBSTACLES, description="position:height entries for manual mode"),
    seed: int = Query(default=42, ge=0, description="Random seed for deterministic layouts"),
) -> dict[str, object]:
    random.seed(seed)
    settings = main.normalize_settings(
        main.Settings(course_length=course_length, obstacle_mode=mode, manual_obstacles=manual)
    )
    obstacles = main.build_course(settings, level)
    return {
        "level": level,
        "course_length": settings.course_length,
        "mode": settings.obstacle_mode,
        "obstacles": [asdict(obstacle) for obstacle in obstacles],
    }


@app.get("/simulate")
def simulate(
    generations: int = Query(default=10, ge=1, le=200, description="Maximum generations to run"),
    population_size: int = Query(default=20, ge=2, le=200, description="Runners per generation"),
    course_length: float = Query(default=1000.0, ge=400, le=3000, description="Course length"),
    mutation_rate: float = Query(default=0.05, ge=0.0, le=1.0, description="Per-gene mutation probability"),
    seed: int = Query(default=42, ge=0, description="Random seed for deterministic run"),
) -> dict[str, object]:
    random.seed(seed)
    simulation = main.Simulation(
        main.Settings(
            population_size=population_size,
            max_generations=generations,
            course_length=course_length,
            mutation_rate=mutation_rate,
        )
    )
    final = simulation.run_until_finished()

    return {
        "seed": seed,
        "generations": [summary.to_dict() for summary in simulation.history],
        "final": asdict(final) if final is not None else None,
    }
