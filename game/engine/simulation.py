"""Per-frame orchestration of the waste sorting simulation."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from .dialogue import DialogueEngine, DialoguePanel, NarrativeDispatcher
from .interaction import Gestures, InteractionArbiter
from .levels import LevelConfig, populate
from .physics import BoxPhysics, follow_camera, step_npc
from .player import InputState, PlayerController
from .progress import ProgressReport, evaluate_progress
from .world import GameState

CANVAS_WIDTH = 1200
CANVAS_HEIGHT = 800
FALL_MARGIN = 200


@dataclass(frozen=True)
class Status:
    """Read-only summary handed to the HUD and overlay."""

    level: int
    zone_progress: Tuple[int, ...]
    level_complete: bool
    game_complete: bool
    game_over: bool


StatusListener = Callable[[Status], None]


class Simulation:
    """Own the game state and advance it one deterministic step per frame."""

    def __init__(
        self,
        levels: Sequence[LevelConfig],
        dialogue: DialogueEngine | None = None,
        viewport_width: float = CANVAS_WIDTH,
        canvas_height: float = CANVAS_HEIGHT,
        fall_margin: float = FALL_MARGIN,
        clock: Callable[[], float] = time.perf_counter,
        rng: random.Random | None = None,
        controller: PlayerController | None = None,
        box_physics: BoxPhysics | None = None,
    ) -> None:
        if not levels:
            raise ValueError("Simulation requires at least one level")
        self.levels = list(levels)
        self.viewport_width = viewport_width
        self.canvas_height = canvas_height
        self.fall_margin = fall_margin
        self.clock = clock
        self.rng = rng or random.Random()

        self.state = GameState()
        self.controller = controller or PlayerController()
        self.box_physics = box_physics or BoxPhysics()
        self.narrator = NarrativeDispatcher(dialogue or DialogueEngine())
        self.arbiter = InteractionArbiter(self.narrator)
        self.last_input = InputState()
        self.last_gestures = Gestures()
        self.last_progress = ProgressReport()
        self._listeners: List[StatusListener] = []

        self.load_level(0)

    # ------------------------------------------------------------------- status
    @property
    def panel(self) -> DialoguePanel:
        return self.narrator.panel

    @property
    def level_count(self) -> int:
        return len(self.levels)

    def status(self) -> Status:
        s = self.state
        return Status(s.level, tuple(s.zone_progress), s.level_complete, s.game_complete, s.game_over)

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def _publish(self) -> None:
        status = self.status()
        for listener in self._listeners:
            listener(status)

    # --------------------------------------------------------------- transitions
    def load_level(self, index: int) -> None:
        if not 0 <= index < len(self.levels):
            return
        config = self.levels[index]
        populate(self.state, config, index, self.rng)
        start_x, start_y = config.player_start
        self.controller.reset(self.state.player, start_x, start_y)
        self.arbiter.reset()
        self._publish()

    def next_level(self) -> None:
        next_index = self.state.level
        if next_index < len(self.levels):
            self.load_level(next_index)
        else:
            # Terminal flags are mutually exclusive.
            self.state.level_complete = False
            self.state.game_over = False
            self.state.game_complete = True
            self._publish()

    def reset_level(self) -> None:
        self.load_level(self.state.level - 1)

    def request_jump(self) -> None:
        self.controller.request_jump()

    def dismiss_dialogue(self) -> None:
        self.narrator.dismiss()

    # ---------------------------------------------------------------------- tick
    def tick(self, current: InputState) -> None:
        self.narrator.drain()
        self._step(current)
        # Taken even while frozen so a key held across a reset is not a fresh press.
        self.last_input = current.snapshot()

    def _step(self, current: InputState) -> None:
        state = self.state
        if state.is_terminal:
            return

        player = state.player
        if player.y > self.canvas_height + self.fall_margin:
            state.game_over = True
            self._publish()
            return

        controller = self.controller
        controller.apply_input(player, current)
        controller.apply_gravity(player)
        controller.update_jump(player, current)

        for npc in state.npcs:
            step_npc(npc, state.platforms, controller.gravity)

        obstacles = state.player_obstacles()
        controller.move_horizontal(player, obstacles)
        controller.move_vertical(player, obstacles)

        self.last_gestures = self.arbiter.update(state, current, self.last_input, self.clock())

        self.box_physics.update(state)

        self.last_progress = evaluate_progress(state)
        if self.last_progress.changed:
            self._publish()

        follow_camera(state.camera, player, self.viewport_width)
