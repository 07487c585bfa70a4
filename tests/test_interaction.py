"""Talk, grab, place/throw and inspect gestures."""

from __future__ import annotations

import pytest

from conftest import build_level, run
from engine.dialogue import (
    HEADMAN_LINES,
    HEADMAN_TITLE,
    INSPECT_TOPICS,
    NOTHING_NEARBY,
    SIGN_TITLE,
    DialogueEngine,
    NarrativeDispatcher,
)
from engine.entities import make_box, make_platform
from engine.interaction import HOLD_THRESHOLD, InteractionArbiter, Outcome, falling, release_outcome, rising
from engine.levels import SpawnSpec
from engine.player import InputState
from engine.world import GameState


def _arbiter() -> InteractionArbiter:
    return InteractionArbiter(NarrativeDispatcher(DialogueEngine()))


def _walk_to_first_box(sim) -> None:
    run(sim, 30)
    run(sim, 60, right=True)
    run(sim, 5)


def _tap(sim, clock=None, hold: float = 0.0) -> None:
    sim.tick(InputState(interact=True))
    if clock is not None:
        clock.advance(hold)
    sim.tick(InputState())


# ----------------------------------------------------------------------- edges
def test_edge_helpers() -> None:
    assert rising(True, False)
    assert not rising(True, True)
    assert falling(False, True)
    assert not falling(False, False)


@pytest.mark.parametrize(
    ("elapsed", "expected"),
    [(0.0, Outcome.PLACE), (0.249, Outcome.PLACE), (HOLD_THRESHOLD, Outcome.THROW), (1.5, Outcome.THROW)],
)
def test_release_threshold_is_inclusive(elapsed: float, expected: Outcome) -> None:
    assert release_outcome(elapsed) is expected


# ------------------------------------------------------------------------ grab
def test_grab_then_tap_places_beside_player(make_sim, bundled_levels) -> None:
    sim = make_sim(bundled_levels[:1])
    _walk_to_first_box(sim)
    player = sim.state.player
    assert player.x == 160.0
    assert player.facing == 1

    sim.tick(InputState(interact=True))
    assert sim.last_gestures.grab is Outcome.GRAB
    box = sim.state.held_box()
    assert box is not None and box.id == "b-0-0"
    assert (box.x, box.y) == (160.0, 500.0)

    # Releasing the key that grabbed must not also drop the box.
    sim.tick(InputState())
    assert sim.last_gestures.grab is Outcome.NONE
    assert box.held_by == player.id

    sim.tick(InputState(interact=True))
    assert sim.last_gestures.grab is Outcome.NONE
    sim.tick(InputState())
    assert sim.last_gestures.grab is Outcome.PLACE
    assert box.held_by is None
    assert (box.x, box.y) == (205.0, 560.0)
    assert (box.vx, box.vy) == (0.0, 0.0)


def test_holding_interact_exactly_threshold_throws(make_sim, bundled_levels, clock) -> None:
    sim = make_sim(bundled_levels[:1])
    _walk_to_first_box(sim)
    _tap(sim)
    box = sim.state.held_box()
    assert box is not None

    _tap(sim, clock, hold=HOLD_THRESHOLD)
    assert sim.last_gestures.grab is Outcome.THROW
    assert box.held_by is None
    assert sim.state.held_box() is None


def test_grab_picks_nearest_box_in_reach(make_sim) -> None:
    boxes = (SpawnSpec(150.0, 560.0, variant=0), SpawnSpec(60.0, 560.0, variant=1))
    sim = make_sim([build_level(boxes=boxes)])
    run(sim, 2)
    sim.tick(InputState(interact=True))
    assert sim.state.held_box().id == "b-0-1"


def test_nothing_in_reach_grabs_nothing(make_sim) -> None:
    sim = make_sim()
    run(sim, 2)
    _tap(sim)
    assert sim.last_gestures.grab is Outcome.NONE
    assert sim.state.held_box() is None
    assert not sim.arbiter.press.consumed


def test_held_key_does_not_repeat_grab(make_sim) -> None:
    boxes = (SpawnSpec(150.0, 560.0, variant=0), SpawnSpec(60.0, 560.0, variant=1))
    sim = make_sim([build_level(boxes=boxes)])
    run(sim, 2)
    run(sim, 20, interact=True)
    held = [box for box in sim.state.boxes if box.is_held]
    assert len(held) == 1


# --------------------------------------------------------------------- release
def _holding_state(player_x: float, facing: int, platforms=()) -> tuple[GameState, object]:
    state = GameState(platforms=list(platforms))
    state.player.x, state.player.y = player_x, 540.0
    state.player.facing = facing
    box = make_box("b", 1, player_x, 500.0)
    box.held_by = state.player.id
    state.boxes = [box]
    return state, box


def test_throw_adds_player_velocity_and_lifts_box() -> None:
    state, box = _holding_state(300.0, -1)
    state.player.vx = 3.0
    outcome = _arbiter().release(state, box, elapsed=0.4)
    assert outcome is Outcome.THROW
    assert (box.vx, box.vy) == (-9.0, -6.0)
    assert (box.x, box.y) == (255.0, 530.0)
    assert box.held_by is None


def test_place_falls_back_under_player_when_blocked() -> None:
    wall = make_platform("wall", 150.0, 0.0, 50.0, 800.0)
    state, box = _holding_state(100.0, 1, platforms=[wall])
    outcome = _arbiter().release(state, box, elapsed=0.1)
    assert outcome is Outcome.PLACE
    assert (box.x, box.y) == (100.0, 560.0)


def test_place_on_open_ground_uses_facing_side() -> None:
    state, box = _holding_state(300.0, -1)
    _arbiter().release(state, box, elapsed=0.0)
    assert (box.x, box.y) == (255.0, 560.0)


# ------------------------------------------------------------------------ talk
def test_talk_prefers_npc_and_names_nearest_box(make_sim) -> None:
    level = build_level(
        boxes=(SpawnSpec(300.0, 560.0, variant=2),),
        npcs=(SpawnSpec(120.0, 540.0),),
        signs=(SpawnSpec(130.0, 560.0, text="Rinse bottles first."),),
    )
    sim = make_sim([level])
    run(sim, 2)
    sim.tick(InputState(talk=True))
    assert sim.last_gestures.talked_to.id == "npc-0-0"
    assert sim.panel.title == HEADMAN_TITLE
    assert sim.panel.text == HEADMAN_LINES[2]
    assert sim.panel.visible and not sim.panel.loading


def test_talk_reads_sign_when_no_npc_in_range(make_sim) -> None:
    level = build_level(
        npcs=(SpawnSpec(600.0, 540.0),),
        signs=(SpawnSpec(130.0, 560.0, text="Rinse bottles first."),),
    )
    sim = make_sim([level])
    run(sim, 2)
    sim.tick(InputState(talk=True))
    assert sim.panel.title == SIGN_TITLE
    assert sim.panel.text == "Rinse bottles first."


def test_talk_fires_once_per_press(make_sim) -> None:
    sim = make_sim([build_level(npcs=(SpawnSpec(120.0, 540.0),))])
    run(sim, 2)
    before = sim.narrator.sequence
    run(sim, 10, talk=True)
    assert sim.narrator.sequence == before + 1


def test_talk_with_nobody_near_leaves_panel_hidden(make_sim) -> None:
    sim = make_sim()
    sim.tick(InputState(talk=True))
    assert sim.last_gestures.talked_to is None
    assert not sim.panel.visible


# --------------------------------------------------------------------- inspect
def test_inspect_with_no_box_nearby(make_sim) -> None:
    sim = make_sim()
    run(sim, 2)
    sim.tick(InputState(inspect=True))
    assert sim.last_gestures.inspect_requested
    assert sim.last_gestures.inspected is None
    assert sim.panel.text == NOTHING_NEARBY
    assert sim.panel.title == ""


def test_inspect_nearby_box_within_radius(make_sim) -> None:
    sim = make_sim([build_level(boxes=(SpawnSpec(220.0, 560.0, variant=3),))])
    run(sim, 2)
    sim.tick(InputState(inspect=True))
    assert sim.last_gestures.inspected.variant == 3
    assert (sim.panel.title, sim.panel.text) == INSPECT_TOPICS[3]


def test_inspect_prefers_held_box_over_nearer_one() -> None:
    state, held = _holding_state(300.0, 1)
    held.x = 900.0
    state.boxes.append(make_box("near", 3, 320.0, 560.0))
    arbiter = _arbiter()
    assert arbiter.inspect(state) is held
    assert arbiter.narrator.panel.title == INSPECT_TOPICS[1][0]
