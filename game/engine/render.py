"""Flat side-view renderer for the platformer scene."""

from __future__ import annotations

import math
from typing import Dict, Tuple

import pygame as pg

from .entities import VARIANT_NAMES, WASTE_GLYPHS, Entity
from .world import GameState

SKY_TOP = (135, 206, 235)
SKY_BOTTOM = (224, 247, 250)
HILL_COLOR = (148, 163, 184)
GRASS_COLOR = (74, 222, 128)
OUTLINE = (30, 41, 59)
PROMPT_DISTANCE = 150.0


class SideViewRenderer:
    """Draw the game state relative to the camera; it never mutates the state."""

    def __init__(self, width: int, height: int) -> None:
        self.width = 1
        self.height = 1
        self._sky: pg.Surface | None = None
        self._glyph_font = pg.font.SysFont("segoeuiemoji,notocoloremoji,arial", 24)
        self._label_font = pg.font.SysFont("arial", 14, bold=True)
        self._glyph_cache: Dict[Tuple[str, Tuple[int, int, int]], pg.Surface] = {}
        self.resize(width, height)

    # -------------------------------------------------------------------- sizing
    def resize(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self._sky = self._build_sky()

    def _build_sky(self) -> pg.Surface:
        sky = pg.Surface((self.width, self.height))
        for y in range(self.height):
            t = y / max(1, self.height - 1)
            color = tuple(int(a + (b - a) * t) for a, b in zip(SKY_TOP, SKY_BOTTOM))
            pg.draw.line(sky, color, (0, y), (self.width, y))
        return sky

    # ------------------------------------------------------------------- drawing
    def render(self, surface: pg.Surface, state: GameState, hold_progress: float = 0.0) -> None:
        """Draw one frame. ``hold_progress`` (0..1) fills the throw charge ring."""

        cam_x = int(state.camera.x)
        cam_y = int(state.camera.y)
        surface.blit(self._sky, (0, 0))
        self._draw_hills(surface, cam_x)

        for goal in state.goals:
            self._draw_goal(surface, goal, cam_x, cam_y)
        for platform in state.platforms:
            # Boundary walls stay invisible
            if platform.id.startswith("w"):
                continue
            rect = self._screen_rect(platform, cam_x, cam_y)
            pg.draw.rect(surface, platform.color, rect)
            pg.draw.rect(surface, GRASS_COLOR, (rect.x, rect.y, rect.w, min(rect.h, 10)))
            pg.draw.rect(surface, OUTLINE, rect, width=1)
        for npc in state.npcs:
            self._draw_actor(surface, npc, cam_x, cam_y)
            self._draw_prompt(surface, npc, state.player, "!", cam_x, cam_y)
        for sign in state.signs:
            rect = self._screen_rect(sign, cam_x, cam_y)
            pg.draw.rect(surface, (120, 72, 20), (rect.centerx - 3, rect.centery, 6, rect.h // 2 + 10))
            pg.draw.rect(surface, sign.color, rect.inflate(0, -12), border_radius=4)
            pg.draw.rect(surface, OUTLINE, rect.inflate(0, -12), width=2, border_radius=4)
            self._draw_prompt(surface, sign, state.player, "?", cam_x, cam_y)
        for box in state.boxes:
            self._draw_box(surface, box, cam_x, cam_y)

        self._draw_actor(surface, state.player, cam_x, cam_y)
        if hold_progress > 0.0:
            rect = self._screen_rect(state.player, cam_x, cam_y)
            arc = pg.Rect(0, 0, 28, 28)
            arc.midbottom = (rect.centerx, rect.top - 46)
            end = math.tau * min(1.0, hold_progress)
            pg.draw.arc(surface, (239, 68, 68), arc, 0.0, end, width=4)

    def _draw_hills(self, surface: pg.Surface, cam_x: int) -> None:
        offset = -(cam_x * 0.2) % 600
        for i in range(-1, self.width // 600 + 2):
            base_x = int(i * 600 + offset)
            points = [(base_x - 300, self.height), (base_x, self.height - 260), (base_x + 300, self.height)]
            pg.draw.polygon(surface, HILL_COLOR, points)

    def _draw_goal(self, surface: pg.Surface, goal: Entity, cam_x: int, cam_y: int) -> None:
        rect = self._screen_rect(goal, cam_x, cam_y)
        zone = pg.Surface(rect.size, pg.SRCALPHA)
        zone.fill((*goal.color, 52))
        pg.draw.rect(zone, (*goal.color, 200), zone.get_rect(), width=2, border_radius=6)
        surface.blit(zone, rect)
        variant = goal.variant or 0
        label = self._label_font.render(VARIANT_NAMES[variant], True, goal.color)
        surface.blit(label, label.get_rect(midtop=(rect.centerx, rect.top + 6)))
        icon = self._glyph(WASTE_GLYPHS[variant][0], goal.color, VARIANT_NAMES[variant][0])
        surface.blit(icon, icon.get_rect(center=rect.center))

    def _draw_box(self, surface: pg.Surface, box: Entity, cam_x: int, cam_y: int) -> None:
        rect = self._screen_rect(box, cam_x, cam_y)
        pg.draw.rect(surface, (217, 119, 6), rect, border_radius=4)
        pg.draw.rect(surface, box.color, rect.inflate(-8, -8), border_radius=3)
        pg.draw.rect(surface, (255, 255, 255) if box.is_held else OUTLINE, rect, width=2, border_radius=4)
        if box.content:
            glyph = self._glyph(box.content, (255, 255, 255), VARIANT_NAMES[box.variant or 0][0])
            surface.blit(glyph, glyph.get_rect(center=rect.center))

    def _draw_actor(self, surface: pg.Surface, actor: Entity, cam_x: int, cam_y: int) -> None:
        rect = self._screen_rect(actor, cam_x, cam_y)
        pg.draw.rect(surface, actor.color, rect, border_radius=8)
        eye_x = rect.x + (25 if actor.facing >= 0 else 5)
        pg.draw.rect(surface, (255, 255, 255), (eye_x, rect.y + 10, 10, 10))
        pg.draw.rect(surface, (0, 0, 0), (eye_x + (4 if actor.facing >= 0 else 2), rect.y + 12, 4, 6))

    def _draw_prompt(
        self, surface: pg.Surface, target: Entity, player: Entity, mark: str, cam_x: int, cam_y: int
    ) -> None:
        if pg.math.Vector2(player.x - target.x, player.y - target.y).length() >= PROMPT_DISTANCE:
            return
        rect = self._screen_rect(target, cam_x, cam_y)
        text = self._label_font.render(mark, True, (15, 23, 42))
        bubble = text.get_rect(midbottom=(rect.centerx, rect.top - 6)).inflate(10, 6)
        pg.draw.ellipse(surface, (255, 255, 255), bubble)
        surface.blit(text, text.get_rect(center=bubble.center))

    # ------------------------------------------------------------------- helpers
    @staticmethod
    def _screen_rect(entity: Entity, cam_x: int, cam_y: int) -> pg.Rect:
        return pg.Rect(int(entity.x) - cam_x, int(entity.y) - cam_y, int(entity.w), int(entity.h))

    def _glyph(self, text: str, color: Tuple[int, int, int], fallback: str = "?") -> pg.Surface:
        key = (text, color)
        cached = self._glyph_cache.get(key)
        if cached is None:
            try:
                cached = self._glyph_font.render(text, True, color)
            except (pg.error, UnicodeError):
                # Older SDL_ttf builds cannot shape characters outside the BMP.
                cached = self._glyph_font.render(fallback, True, color)
            self._glyph_cache[key] = cached
        return cached
