"""Shared fixtures: headless pygame, a controllable clock and small test levels."""

from __future__ import annotations

import os
import random
import sys
from pathlib import Path
from typing import Callable, Iterator, Sequence

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame as pg
import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
GAME_ROOT = REPO_ROOT / "game"
for path in (REPO_ROOT, GAME_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from engine.dialogue import DialogueEngine
from engine.levels import LevelConfig, PlatformSpec, SpawnSpec, load_levels
from engine.player import InputState
from engine.simulation import Simulation


class FakeClock:
    """Wall clock stand-in so hold durations are exact."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


FLOOR = PlatformSpec("floor", -500.0, 600.0, 4000.0, 50.0)
DEFAULT_GOALS = tuple(SpawnSpec(1000.0 + 200.0 * v, 500.0, variant=v) for v in range(4))


def build_level(
    player_start: tuple[float, float] = (100.0, 540.0),
    platforms: Sequence[PlatformSpec] = (FLOOR,),
    boxes: Sequence[SpawnSpec] = (SpawnSpec(300.0, 560.0, variant=0),),
    goals: Sequence[SpawnSpec] = DEFAULT_GOALS,
    npcs: Sequence[SpawnSpec] = (),
    signs: Sequence[SpawnSpec] = (),
) -> LevelConfig:
    return LevelConfig(
        player_start=player_start,
        platforms=tuple(platforms),
        goals=tuple(goals),
        boxes=tuple(boxes),
        npcs=tuple(npcs),
        signs=tuple(signs),
    )


def run(sim: Simulation, frames: int, **held: bool) -> None:
    """Tick ``frames`` times with the given keys held."""

    for _ in range(frames):
        sim.tick(InputState(**held))


@pytest.fixture(scope="session")
def pygame_headless() -> Iterator[None]:
    pg.init()
    try:
        yield
    finally:
        pg.quit()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="session")
def bundled_levels() -> list[LevelConfig]:
    return load_levels(GAME_ROOT / "content" / "levels.yaml")


@pytest.fixture
def make_sim(clock: FakeClock) -> Callable[..., Simulation]:
    def factory(levels: Sequence[LevelConfig] | None = None, **kwargs) -> Simulation:
        kwargs.setdefault("dialogue", DialogueEngine(use_gemini=False))
        kwargs.setdefault("rng", random.Random(7))
        return Simulation(levels or [build_level()], clock=clock, **kwargs)

    return factory
