"""Entity primitives and spawn factories for the waste sorting platformer."""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

Color = Tuple[int, int, int]

PLAYER_ID = "player"

PLAYER_SIZE = (40.0, 60.0)
BOX_SIZE = (40.0, 40.0)
NPC_SIZE = (40.0, 60.0)
SIGN_SIZE = (40.0, 40.0)
GOAL_SIZE = (120.0, 100.0)

# Thai municipal waste colours: red, blue, green, yellow.
VARIANT_NAMES: Tuple[str, ...] = ("Hazardous", "General", "Organic", "Recycle")
VARIANT_COLORS: Tuple[Color, ...] = (
    (239, 68, 68),
    (59, 130, 246),
    (34, 197, 94),
    (234, 179, 8),
)
WASTE_GLYPHS: Tuple[Tuple[str, ...], ...] = (
    ("\u2623\ufe0f", "\U0001f50b", "\U0001f489", "\U0001f9ea", "\u2620\ufe0f"),
    ("\U0001f961", "\U0001f9fb", "\U0001f962", "\U0001f36c", "\U0001f6ac"),
    ("\U0001f34e", "\U0001f34c", "\U0001f9b4", "\U0001f96c", "\U0001f41f"),
    ("\U0001f964", "\U0001f4f0", "\U0001f4e6", "\U0001f37e", "\U0001f96b"),
)
VARIANT_COUNT = len(VARIANT_NAMES)

PLAYER_COLOR: Color = (99, 102, 241)
NPC_COLOR: Color = (245, 158, 11)
SIGN_COLOR: Color = (161, 98, 7)
GROUND_COLOR: Color = (51, 65, 85)


class EntityType(Enum):
    PLAYER = "PLAYER"
    PLATFORM = "PLATFORM"
    BOX = "BOX"
    GOAL = "GOAL"
    NPC = "NPC"
    SIGN = "SIGN"


@dataclass(slots=True)
class Entity:
    id: str
    type: EntityType
    x: float
    y: float
    w: float
    h: float
    color: Color = (200, 200, 200)
    vx: float = 0.0
    vy: float = 0.0
    facing: int = 0
    grounded: bool = False
    held_by: str | None = None
    variant: int | None = None
    content: str | None = None

    @property
    def is_held(self) -> bool:
        return self.held_by is not None

    def stop(self) -> None:
        self.vx = 0.0
        self.vy = 0.0


def make_player(x: float = 0.0, y: float = 0.0) -> Entity:
    w, h = PLAYER_SIZE
    return Entity(PLAYER_ID, EntityType.PLAYER, x, y, w, h, PLAYER_COLOR, facing=1)


def make_platform(platform_id: str, x: float, y: float, w: float, h: float) -> Entity:
    return Entity(platform_id, EntityType.PLATFORM, x, y, w, h, GROUND_COLOR, grounded=True)


def make_goal(goal_id: str, variant: int, x: float, y: float) -> Entity:
    w, h = GOAL_SIZE
    return Entity(
        goal_id,
        EntityType.GOAL,
        x,
        y,
        w,
        h,
        VARIANT_COLORS[variant],
        grounded=True,
        variant=variant,
    )


def make_box(
    box_id: str,
    variant: int,
    x: float,
    y: float,
    rng: random.Random | None = None,
) -> Entity:
    """Spawn a waste box with a glyph picked from its category's set."""

    glyphs: Sequence[str] = WASTE_GLYPHS[variant]
    chooser = rng or random
    w, h = BOX_SIZE
    return Entity(
        box_id,
        EntityType.BOX,
        x,
        y,
        w,
        h,
        VARIANT_COLORS[variant],
        variant=variant,
        content=chooser.choice(glyphs),
    )


def make_npc(npc_id: str, x: float, y: float) -> Entity:
    w, h = NPC_SIZE
    return Entity(npc_id, EntityType.NPC, x, y, w, h, NPC_COLOR, facing=1, grounded=True)


def make_sign(sign_id: str, x: float, y: float, text: str) -> Entity:
    w, h = SIGN_SIZE
    return Entity(
        sign_id,
        EntityType.SIGN,
        x,
        y,
        w,
        h,
        SIGN_COLOR,
        facing=1,
        grounded=True,
        content=text,
    )
