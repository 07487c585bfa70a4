"""Goal delivery bookkeeping and level completion."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .entities import VARIANT_COUNT
from .geometry import overlaps
from .world import GameState


@dataclass
class ProgressReport:
    delivered: List[str] = field(default_factory=list)
    remaining: List[int] = field(default_factory=lambda: [0] * VARIANT_COUNT)
    completed_now: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.delivered) or self.completed_now


def evaluate_progress(state: GameState) -> ProgressReport:
    """Remove boxes resting in their matching zone and recount the rest.

    Held boxes never count as delivered. Completion is sticky for the level.
    """

    report = ProgressReport()
    for box in state.boxes:
        if box.variant is None:
            continue
        delivered = box.held_by is None and any(
            goal.variant == box.variant and overlaps(box, goal) for goal in state.goals
        )
        if delivered:
            report.delivered.append(box.id)
        else:
            report.remaining[box.variant] += 1

    if report.delivered:
        gone = set(report.delivered)
        state.boxes = [box for box in state.boxes if box.id not in gone]

    state.zone_progress = list(report.remaining)
    if all(count == 0 for count in report.remaining) and not state.level_complete:
        state.level_complete = True
        report.completed_now = True
    return report
