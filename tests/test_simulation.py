"""Frame orchestration: falling, freezing, resets and level transitions."""

from __future__ import annotations

import pytest

from conftest import build_level, run
from engine.levels import PlatformSpec, SpawnSpec
from engine.player import InputState
from engine.simulation import Simulation, Status

LEDGE = PlatformSpec("ledge", 0.0, 600.0, 200.0, 50.0)


def _pit_level():
    # Player starts over open air to the right of a short ledge.
    return build_level(player_start=(400.0, 300.0), platforms=(LEDGE,), boxes=(SpawnSpec(50.0, 560.0, variant=0),))


def test_requires_levels() -> None:
    with pytest.raises(ValueError):
        Simulation([])


def test_falling_off_the_world_ends_the_run(make_sim) -> None:
    sim = make_sim([_pit_level()])
    statuses: list[Status] = []
    sim.subscribe(statuses.append)

    run(sim, 60)
    assert sim.state.game_over
    assert statuses[-1].game_over
    assert sim.state.player.y > 1000.0


def test_terminal_state_freezes_entities(make_sim) -> None:
    sim = make_sim([_pit_level()])
    run(sim, 60)
    assert sim.state.game_over
    frozen = (sim.state.player.x, sim.state.player.y, sim.state.camera.x)
    run(sim, 10, right=True)
    assert (sim.state.player.x, sim.state.player.y, sim.state.camera.x) == frozen


def test_input_snapshot_is_taken_while_frozen(make_sim) -> None:
    sim = make_sim([_pit_level()])
    run(sim, 60)
    sim.tick(InputState(interact=True))
    assert sim.last_input.interact


def test_reset_level_restores_spawn_and_clears_flags(make_sim) -> None:
    sim = make_sim([_pit_level()])
    run(sim, 60)
    sim.reset_level()
    state = sim.state
    assert not state.game_over
    assert (state.player.x, state.player.y) == (400.0, 300.0)
    assert (state.player.vx, state.player.vy) == (0.0, 0.0)
    assert state.zone_progress == [1, 0, 0, 0]
    assert [box.id for box in state.boxes] == ["b-0-0"]


def test_reset_discards_pending_jump(make_sim) -> None:
    sim = make_sim()
    run(sim, 3)
    sim.request_jump()
    sim.reset_level()
    run(sim, 3)
    assert sim.state.player.vy == 0.0
    assert sim.state.player.grounded


def test_next_level_advances_and_renumbers_boxes(make_sim) -> None:
    second = build_level(boxes=(SpawnSpec(200.0, 560.0, variant=1), SpawnSpec(260.0, 560.0, variant=2)))
    sim = make_sim([build_level(), second])
    sim.next_level()
    assert sim.state.level == 2
    assert [box.id for box in sim.state.boxes] == ["b-1-0", "b-1-1"]
    assert sim.state.zone_progress == [0, 1, 1, 0]


def test_next_level_past_the_last_completes_the_game(make_sim) -> None:
    sim = make_sim([build_level(boxes=(SpawnSpec(1020.0, 520.0, variant=0),))])
    sim.tick(InputState())
    assert sim.state.level_complete
    statuses: list[Status] = []
    sim.subscribe(statuses.append)
    sim.next_level()
    assert sim.state.game_complete
    assert sim.state.level == 1
    assert statuses[-1].game_complete
    status = sim.status()
    assert not status.level_complete
    assert sum((status.level_complete, status.game_complete, status.game_over)) == 1


def test_out_of_range_load_is_ignored(make_sim) -> None:
    sim = make_sim()
    run(sim, 5, right=True)
    before = sim.state.player.x
    sim.load_level(7)
    sim.load_level(-1)
    assert sim.state.level == 1
    assert sim.state.player.x == before


def test_completed_level_freezes_until_next(make_sim) -> None:
    first = build_level(boxes=(SpawnSpec(1020.0, 520.0, variant=0),))
    sim = make_sim([first, build_level()])
    sim.tick(InputState())
    assert sim.state.level_complete
    x = sim.state.player.x
    run(sim, 10, right=True)
    assert sim.state.player.x == x

    sim.next_level()
    assert not sim.state.level_complete
    assert sim.state.level == 2


def test_status_is_a_read_only_copy(make_sim) -> None:
    sim = make_sim()
    status = sim.status()
    assert status == Status(1, (1, 0, 0, 0), False, False, False)
    sim.state.zone_progress[0] = 9
    assert status.zone_progress == (1, 0, 0, 0)


def test_player_walks_over_bundled_level(make_sim, bundled_levels) -> None:
    sim = make_sim(bundled_levels)
    assert sim.level_count == 5
    run(sim, 30)
    assert sim.state.player.grounded
    assert not sim.state.is_terminal
