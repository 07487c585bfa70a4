"""Edge-triggered talk, grab/place/throw and inspect gestures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .dialogue import SIGN_TITLE, NarrativeDispatcher, TopicKind
from .entities import Entity
from .geometry import overlaps
from .player import InputState
from .timers import PressTracker
from .world import GameState, nearest_within

TALK_RADIUS = 80.0
REACH_RADIUS = 60.0
INSPECT_RADIUS = 150.0
HOLD_THRESHOLD = 0.25  # seconds; a release at exactly this long throws
THROW_FORCE_X = 12.0
THROW_FORCE_Y = -6.0
PLACE_GAP = 5.0
THROW_LIFT = 10.0


class Outcome(Enum):
    NONE = "none"
    GRAB = "grab"
    PLACE = "place"
    THROW = "throw"


@dataclass
class Gestures:
    """What a single tick's input edges resolved to."""

    talked_to: Entity | None = None
    grab: Outcome = Outcome.NONE
    inspected: Entity | None = None
    inspect_requested: bool = False


def rising(now: bool, before: bool) -> bool:
    return now and not before


def falling(now: bool, before: bool) -> bool:
    return before and not now


def release_outcome(elapsed: float, threshold: float = HOLD_THRESHOLD) -> Outcome:
    return Outcome.THROW if elapsed >= threshold else Outcome.PLACE


class InteractionArbiter:
    """Turn input transitions into at most one outcome per gesture."""

    def __init__(
        self,
        narrator: NarrativeDispatcher,
        talk_radius: float = TALK_RADIUS,
        reach_radius: float = REACH_RADIUS,
        inspect_radius: float = INSPECT_RADIUS,
        hold_threshold: float = HOLD_THRESHOLD,
        throw_force: tuple[float, float] = (THROW_FORCE_X, THROW_FORCE_Y),
    ) -> None:
        self.narrator = narrator
        self.talk_radius = talk_radius
        self.reach_radius = reach_radius
        self.inspect_radius = inspect_radius
        self.hold_threshold = hold_threshold
        self.throw_force = throw_force
        self.press = PressTracker()

    def update(self, state: GameState, current: InputState, previous: InputState, now: float) -> Gestures:
        gestures = Gestures()
        # Captured before grabbing so a same-tick grab cannot also release.
        held = state.held_box()

        if rising(current.talk, previous.talk):
            gestures.talked_to = self.talk(state)

        if rising(current.interact, previous.interact):
            self.press.press(now)
            if held is None and self.grab(state) is not None:
                self.press.consume()
                gestures.grab = Outcome.GRAB

        if falling(current.interact, previous.interact):
            if held is not None and not self.press.consumed:
                gestures.grab = self.release(state, held, self.press.elapsed(now))

        if rising(current.inspect, previous.inspect):
            gestures.inspect_requested = True
            gestures.inspected = self.inspect(state)

        return gestures

    # ---------------------------------------------------------------------- talk
    def talk(self, state: GameState) -> Entity | None:
        player = state.player
        npc = nearest_within(player, state.npcs, self.talk_radius)
        if npc is not None:
            topic = nearest_within(player, state.boxes, float("inf"))
            self.narrator.request(TopicKind.TALK, topic.variant if topic else None)
            return npc
        sign = nearest_within(player, state.signs, self.talk_radius)
        if sign is not None:
            self.narrator.show(SIGN_TITLE, sign.content or "...")
        return sign

    # ------------------------------------------------------------- grab / throw
    def grab(self, state: GameState) -> Entity | None:
        player = state.player
        box = nearest_within(player, state.free_boxes(), self.reach_radius)
        if box is not None:
            box.held_by = player.id
            box.stop()
        return box

    def release(self, state: GameState, box: Entity, elapsed: float) -> Outcome:
        player = state.player
        box.held_by = None
        place_x = player.x + player.w / 2 - box.w / 2
        place_x += player.facing * (player.w / 2 + box.w / 2 + PLACE_GAP)

        outcome = release_outcome(elapsed, self.hold_threshold)
        if outcome is Outcome.PLACE:
            box.stop()
            box.x = place_x
            box.y = player.y + player.h - box.h
            if any(overlaps(box, platform) for platform in state.platforms):
                box.x = player.x + (player.w - box.w) / 2
        else:
            force_x, force_y = self.throw_force
            box.vx = player.vx + player.facing * force_x
            box.vy = force_y
            box.x = place_x
            box.y = player.y - THROW_LIFT
        return outcome

    # ------------------------------------------------------------------- inspect
    def inspect(self, state: GameState) -> Entity | None:
        target = state.held_box()
        if target is None:
            target = nearest_within(state.player, state.boxes, self.inspect_radius)
        self.narrator.request(TopicKind.INSPECT, target.variant if target else None)
        return target

    def reset(self) -> None:
        self.press.reset()
