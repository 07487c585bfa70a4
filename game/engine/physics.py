"""Axis-separated integration and collision response for every moving entity."""

from __future__ import annotations

from typing import Iterable, List

import pygame as pg

from .entities import Entity
from .geometry import overlaps
from .world import GameState

Vector2 = pg.math.Vector2

GRAVITY = 0.6
BOX_AIR_DECAY = 0.9
BOX_RESTITUTION = -0.5
BOX_LANDING_FRICTION = 0.9
CAMERA_GAIN = 0.1


# ---------------------------------------------------------------- resolution
def resolve_horizontal(
    entity: Entity,
    obstacles: Iterable[Entity],
    restitution: float | None = None,
) -> bool:
    """Push ``entity`` out of every obstacle it overlaps along x.

    The side is picked from the sign of ``vx``. Without ``restitution`` the
    velocity is zeroed; otherwise it is multiplied by it (a negative value
    bounces). Returns ``True`` if anything was hit.
    """

    hit = False
    for obstacle in obstacles:
        if obstacle is entity or not overlaps(entity, obstacle):
            continue
        hit = True
        if entity.vx > 0:
            entity.x = obstacle.x - entity.w
        elif entity.vx < 0:
            entity.x = obstacle.x + obstacle.w
        entity.vx = 0.0 if restitution is None else entity.vx * restitution
    return hit


def resolve_vertical(
    entity: Entity,
    obstacles: Iterable[Entity],
    landing_friction: float | None = None,
) -> bool:
    """Push ``entity`` out of overlapping obstacles along y.

    Only a downward contact grounds the entity. ``landing_friction`` scales
    ``vx`` on each landing. Returns ``True`` if the entity landed.
    """

    landed = False
    for obstacle in obstacles:
        if obstacle is entity or not overlaps(entity, obstacle):
            continue
        if entity.vy > 0:
            entity.y = obstacle.y - entity.h
            entity.vy = 0.0
            entity.grounded = True
            landed = True
            if landing_friction is not None:
                entity.vx *= landing_friction
        elif entity.vy < 0:
            entity.y = obstacle.y + obstacle.h
            entity.vy = 0.0
    return landed


# ----------------------------------------------------------------------- npcs
def step_npc(npc: Entity, platforms: Iterable[Entity], gravity: float = GRAVITY) -> None:
    """NPCs only fall and land; they never walk or touch boxes."""

    npc.vy += gravity
    npc.y += npc.vy
    npc.grounded = False
    resolve_vertical(npc, platforms)


# ---------------------------------------------------------------------- boxes
class BoxPhysics:
    """Advance free boxes and pin held boxes to their holder."""

    def __init__(
        self,
        gravity: float = GRAVITY,
        air_decay: float = BOX_AIR_DECAY,
        restitution: float = BOX_RESTITUTION,
        landing_friction: float = BOX_LANDING_FRICTION,
    ) -> None:
        self.gravity = gravity
        self.air_decay = air_decay
        self.restitution = restitution
        self.landing_friction = landing_friction

    def update(self, state: GameState) -> None:
        # List order decides who yields when three or more boxes pile up.
        for box in state.boxes:
            if box.held_by is not None:
                holder = self._holder(state, box.held_by)
                if holder is not None:
                    self.follow(box, holder)
                    continue
                box.held_by = None
            self._step_free(box, state.platforms, state.boxes)

    @staticmethod
    def follow(box: Entity, holder: Entity) -> None:
        box.stop()
        box.x = holder.x + (holder.w - box.w) / 2
        box.y = holder.y - box.h

    @staticmethod
    def _holder(state: GameState, holder_id: str) -> Entity | None:
        if state.player.id == holder_id:
            return state.player
        for npc in state.npcs:
            if npc.id == holder_id:
                return npc
        return None

    def _step_free(self, box: Entity, platforms: List[Entity], boxes: List[Entity]) -> None:
        others = [other for other in boxes if other is not box and other.held_by is None]

        box.vy += self.gravity
        box.vx *= self.air_decay

        box.x += box.vx
        resolve_horizontal(box, platforms, self.restitution)
        resolve_horizontal(box, others, self.restitution)

        box.y += box.vy
        box.grounded = False
        resolve_vertical(box, platforms, self.landing_friction)
        resolve_vertical(box, others, self.landing_friction)


# --------------------------------------------------------------------- camera
def follow_camera(
    camera: Vector2,
    target: Entity,
    viewport_width: float,
    gain: float = CAMERA_GAIN,
) -> None:
    """Ease the camera toward centring ``target`` horizontally."""

    target_x = target.x + target.w / 2 - viewport_width / 2
    camera.x += (target_x - camera.x) * gain
