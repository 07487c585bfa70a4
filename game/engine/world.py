"""Mutable game state: entity collections, camera and per-level progress."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

import pygame as pg

from .entities import VARIANT_COUNT, Entity, make_player
from .geometry import center_distance

Vector2 = pg.math.Vector2


@dataclass
class GameState:
    """Everything the simulation mutates during a tick."""

    player: Entity = field(default_factory=make_player)
    platforms: List[Entity] = field(default_factory=list)
    boxes: List[Entity] = field(default_factory=list)
    goals: List[Entity] = field(default_factory=list)
    npcs: List[Entity] = field(default_factory=list)
    signs: List[Entity] = field(default_factory=list)
    camera: Vector2 = field(default_factory=Vector2)
    level: int = 1
    level_complete: bool = False
    game_complete: bool = False
    game_over: bool = False
    zone_progress: List[int] = field(default_factory=lambda: [0] * VARIANT_COUNT)

    # ------------------------------------------------------------------- flags
    @property
    def is_terminal(self) -> bool:
        return self.level_complete or self.game_complete or self.game_over

    # ----------------------------------------------------------------- lookups
    def held_box(self, holder_id: str | None = None) -> Entity | None:
        holder_id = holder_id or self.player.id
        for box in self.boxes:
            if box.held_by == holder_id:
                return box
        return None

    def free_boxes(self) -> List[Entity]:
        return [box for box in self.boxes if box.held_by is None]

    def player_obstacles(self) -> List[Entity]:
        """Platforms plus every box the player is not carrying."""

        return [*self.platforms, *(b for b in self.boxes if b.held_by != self.player.id)]


def nearest_within(
    origin: Entity,
    candidates: Iterable[Entity],
    radius: float,
) -> Entity | None:
    """Return the candidate whose center is closest to ``origin`` inside ``radius``.

    The radius is exclusive. Ties keep the earliest candidate.
    """

    nearest = None
    nearest_distance = float("inf")
    for candidate in candidates:
        distance = center_distance(origin, candidate)
        if distance < radius and distance < nearest_distance:
            nearest = candidate
            nearest_distance = distance
    return nearest
