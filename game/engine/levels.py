"""Level definitions: YAML parsing, validation and entity construction."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from .entities import (
    VARIANT_COUNT,
    make_box,
    make_goal,
    make_npc,
    make_platform,
    make_sign,
)
from .world import GameState

DEFAULT_LEVELS_PATH = Path(__file__).resolve().parents[1] / "content" / "levels.yaml"


class LevelConfigError(ValueError):
    pass


@dataclass(frozen=True)
class PlatformSpec:
    id: str
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class SpawnSpec:
    x: float
    y: float
    variant: int | None = None
    text: str | None = None


@dataclass(frozen=True)
class LevelConfig:
    player_start: Tuple[float, float]
    platforms: Tuple[PlatformSpec, ...]
    goals: Tuple[SpawnSpec, ...]
    boxes: Tuple[SpawnSpec, ...]
    npcs: Tuple[SpawnSpec, ...] = field(default_factory=tuple)
    signs: Tuple[SpawnSpec, ...] = field(default_factory=tuple)

    def box_counts(self) -> List[int]:
        counts = [0] * VARIANT_COUNT
        for box in self.boxes:
            counts[box.variant] += 1
        return counts


# ------------------------------------------------------------------ validation
def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LevelConfigError(f"{where} must be a number, got {value!r}")
    return float(value)


def _pair(value: Any, where: str) -> Tuple[float, float]:
    if not (isinstance(value, (list, tuple)) and len(value) == 2):
        raise LevelConfigError(f"{where} must be [x, y]")
    return _number(value[0], where), _number(value[1], where)


def _variant(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < VARIANT_COUNT:
        raise LevelConfigError(f"{where} variant must be an integer 0-{VARIANT_COUNT - 1}, got {value!r}")
    return value


def _entries(level: Dict[str, Any], key: str, where: str, required: bool) -> List[Dict[str, Any]]:
    entries = level.get(key)
    if entries is None and not required:
        return []
    if not isinstance(entries, list) or (required and not entries):
        raise LevelConfigError(f'{where} "{key}" must be a non-empty list')
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise LevelConfigError(f"{where} {key}[{i}] must be a mapping")
    return entries


def parse_level(level: Any, index: int) -> LevelConfig:
    where = f"level {index + 1}"
    if not isinstance(level, dict):
        raise LevelConfigError(f"{where} must be a mapping")

    platforms = []
    for i, entry in enumerate(_entries(level, "platforms", where, required=True)):
        spot = f"{where} platforms[{i}]"
        platform_id = entry.get("id")
        if not isinstance(platform_id, str) or not platform_id:
            raise LevelConfigError(f"{spot} needs a string id")
        w = _number(entry.get("w"), f"{spot} w")
        h = _number(entry.get("h"), f"{spot} h")
        if w <= 0 or h <= 0:
            raise LevelConfigError(f"{spot} must have a positive size")
        platforms.append(
            PlatformSpec(platform_id, _number(entry.get("x"), f"{spot} x"), _number(entry.get("y"), f"{spot} y"), w, h)
        )

    def spawns(key: str, required: bool, with_variant: bool = False, with_text: bool = False):
        result = []
        for i, entry in enumerate(_entries(level, key, where, required)):
            spot = f"{where} {key}[{i}]"
            variant = _variant(entry.get("variant"), spot) if with_variant else None
            text = None
            if with_text:
                text = entry.get("text")
                if not isinstance(text, str) or not text.strip():
                    raise LevelConfigError(f"{spot} needs non-empty text")
            x = _number(entry.get("x"), f"{spot} x")
            y = _number(entry.get("y"), f"{spot} y")
            result.append(SpawnSpec(x, y, variant, text))
        return tuple(result)

    goals = spawns("goals", required=True, with_variant=True)
    boxes = spawns("boxes", required=True, with_variant=True)
    goal_variants = {goal.variant for goal in goals}
    for box in boxes:
        if box.variant not in goal_variants:
            raise LevelConfigError(f"{where} has a variant {box.variant} box but no matching goal")

    return LevelConfig(
        player_start=_pair(level.get("player_start"), f"{where} player_start"),
        platforms=tuple(platforms),
        goals=goals,
        boxes=boxes,
        npcs=spawns("npcs", required=False),
        signs=spawns("signs", required=False, with_text=True),
    )


def parse_levels(data: Any) -> List[LevelConfig]:
    levels = data.get("levels") if isinstance(data, dict) else None
    if not isinstance(levels, list) or not levels:
        raise LevelConfigError('"levels" must be a non-empty list')
    return [parse_level(level, i) for i, level in enumerate(levels)]


def load_levels(path: str | Path = DEFAULT_LEVELS_PATH) -> List[LevelConfig]:
    with open(path, "r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    return parse_levels(data)


# --------------------------------------------------------------- construction
def populate(
    state: GameState,
    config: LevelConfig,
    level_index: int,
    rng: random.Random | None = None,
) -> None:
    """Replace every level entity in ``state`` with fresh ones from ``config``.

    The player entity is kept; positioning it is the caller's job.
    """

    state.platforms = [make_platform(p.id, p.x, p.y, p.w, p.h) for p in config.platforms]
    state.goals = [
        make_goal(f"g-{level_index}-{i}", g.variant, g.x, g.y)
        for i, g in enumerate(config.goals)
    ]
    state.boxes = [
        make_box(f"b-{level_index}-{i}", b.variant, b.x, b.y, rng)
        for i, b in enumerate(config.boxes)
    ]
    state.npcs = [make_npc(f"npc-{level_index}-{i}", n.x, n.y) for i, n in enumerate(config.npcs)]
    state.signs = [
        make_sign(f"sign-{level_index}-{i}", s.x, s.y, s.text or "")
        for i, s in enumerate(config.signs)
    ]
    state.zone_progress = config.box_counts()
    state.level = level_index + 1
    state.level_complete = False
    state.game_complete = False
    state.game_over = False
