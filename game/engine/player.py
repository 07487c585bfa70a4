"""Player controller logic for the side-scrolling platformer."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from .entities import Entity
from .physics import GRAVITY, resolve_horizontal, resolve_vertical
from .timers import JumpTimers

RUN_SPEED = 9.0
RUN_ACCEL = 0.8
WALK_SPEED = RUN_SPEED * 0.74
WALK_ACCEL = RUN_ACCEL * 0.74
GROUND_FRICTION = 0.85
AIR_FRICTION = 0.95
JUMP_FORCE = -15.0
JUMP_CUTOFF = -3.0


@dataclass
class InputState:
    """Held-key snapshot filled in by the front end."""

    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    run: bool = False
    interact: bool = False
    talk: bool = False
    inspect: bool = False

    def snapshot(self) -> "InputState":
        return replace(self)


class PlayerController:
    """Handle horizontal movement, gravity, jumping and collisions."""

    def __init__(
        self,
        walk_speed: float = WALK_SPEED,
        walk_accel: float = WALK_ACCEL,
        run_speed: float = RUN_SPEED,
        run_accel: float = RUN_ACCEL,
        ground_friction: float = GROUND_FRICTION,
        air_friction: float = AIR_FRICTION,
        gravity: float = GRAVITY,
        jump_force: float = JUMP_FORCE,
        jump_cutoff: float = JUMP_CUTOFF,
    ) -> None:
        self.walk_speed = walk_speed
        self.walk_accel = walk_accel
        self.run_speed = run_speed
        self.run_accel = run_accel
        self.ground_friction = ground_friction
        self.air_friction = air_friction
        self.gravity = gravity
        self.jump_force = jump_force
        self.jump_cutoff = jump_cutoff
        self.timers = JumpTimers()

    # ------------------------------------------------------------------ movement
    def apply_input(self, player: Entity, user_input: InputState) -> None:
        running = user_input.down or user_input.run
        accel = self.run_accel if running else self.walk_accel
        max_speed = self.run_speed if running else self.walk_speed

        if user_input.left:
            player.vx -= accel
            player.facing = -1
        if user_input.right:
            player.vx += accel
            player.facing = 1

        # Less damping in the air keeps jumps steerable
        player.vx *= self.ground_friction if player.grounded else self.air_friction
        player.vx = max(-max_speed, min(max_speed, player.vx))

    def apply_gravity(self, player: Entity) -> None:
        player.vy += self.gravity

    def update_jump(self, player: Entity, user_input: InputState) -> bool:
        """Run the coyote/buffer state machine and the short-hop cutoff."""

        jumped = self.timers.advance(player.grounded)
        if jumped:
            player.vy = self.jump_force
            player.grounded = False
        if not user_input.up and player.vy < self.jump_cutoff:
            player.vy = self.jump_cutoff
        return jumped

    def request_jump(self) -> None:
        self.timers.request = True

    # ---------------------------------------------------------------- collisions
    def move_horizontal(self, player: Entity, obstacles: Sequence[Entity]) -> None:
        player.x += player.vx
        resolve_horizontal(player, obstacles)

    def move_vertical(self, player: Entity, obstacles: Sequence[Entity]) -> None:
        player.y += player.vy
        player.grounded = False
        resolve_vertical(player, obstacles)

    def reset(self, player: Entity, x: float, y: float) -> None:
        player.x = x
        player.y = y
        player.stop()
        player.grounded = False
        player.held_by = None
        self.timers.reset()
