"""Entry point for the Eco-Sort waste sorting platformer."""

from __future__ import annotations

import random
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

import pygame as pg

from engine.dialogue import DialogueEngine
from engine.entities import VARIANT_COLORS, VARIANT_NAMES
from engine.levels import LevelConfigError, load_levels
from engine.player import InputState
from engine.render import SideViewRenderer
from engine.simulation import Simulation, Status
import settings as S


KEY_BINDINGS = {
    "left": (pg.K_LEFT, pg.K_a),
    "right": (pg.K_RIGHT, pg.K_d),
    "up": (pg.K_UP, pg.K_SPACE, pg.K_w),
    "down": (pg.K_DOWN, pg.K_s),
    "run": (pg.K_LSHIFT, pg.K_RSHIFT),
    "interact": (pg.K_e,),
    "talk": (pg.K_f,),
    "inspect": (pg.K_i,),
}
JUMP_KEYS = KEY_BINDINGS["up"]

CONTROLS = (
    "A / D : Move",
    "Shift / S : Run",
    "Space : Jump",
    "F : Talk / Read",
    "Tap E : Place item",
    "Hold E : Throw item",
    "I : Inspect waste",
    "R : Restart level",
    "G : Toggle Gemini",
)


@dataclass
class GameConfig:
    resolution: tuple[int, int]
    fps_limit: int
    canvas_height: int
    fall_margin: int
    levels_path: Path
    use_gemini: bool
    model_name: str
    seed: int | None


class GameApp:
    """High-level application wrapper providing lifecycle management."""

    def __init__(self, config: GameConfig) -> None:
        pg.init()
        pg.font.init()
        pg.display.set_caption("Eco-Sort Platformer")
        self.screen = pg.display.set_mode(config.resolution, pg.RESIZABLE)
        self.clock = pg.time.Clock()
        self.config = config

        levels = load_levels(config.levels_path)
        self.dialogue_engine = DialogueEngine(use_gemini=config.use_gemini, model_name=config.model_name)
        self.sim = Simulation(
            levels,
            dialogue=self.dialogue_engine,
            viewport_width=config.resolution[0],
            canvas_height=config.canvas_height,
            fall_margin=config.fall_margin,
            rng=random.Random(config.seed),
        )
        self.renderer = SideViewRenderer(*config.resolution)
        self.input = InputState()
        self.status: Status = self.sim.status()
        self.sim.subscribe(self._on_status)

        self.font = pg.font.SysFont("arial", 16)
        self.title_font = pg.font.SysFont("arial", 22, bold=True)
        self.dialogue_font = pg.font.SysFont("georgia", 20)
        self._banner = ""
        self._banner_timer = 0.0

    # ----------------------------------------------------------------- lifecycle
    def run(self) -> None:
        try:
            while True:
                dt = self.clock.tick(self.config.fps_limit) / 1000.0
                if not self._process_events():
                    break
                self._update(dt)
                self._draw()
                pg.display.flip()
        finally:
            self.dialogue_engine.shutdown()

    # ------------------------------------------------------------------- internals
    def _process_events(self) -> bool:
        for event in pg.event.get():
            if event.type == pg.QUIT:
                return False
            if event.type == pg.VIDEORESIZE:
                self.screen = pg.display.set_mode(event.size, pg.RESIZABLE)
                self.renderer.resize(*event.size)
                self.sim.viewport_width = event.size[0]
            if event.type != pg.KEYDOWN:
                continue
            if event.key == pg.K_ESCAPE:
                if not self.sim.panel.visible:
                    return False
                self.sim.dismiss_dialogue()
            if event.key in JUMP_KEYS:
                self.sim.request_jump()
            if event.key == pg.K_r:
                self.sim.reset_level()
            if event.key in (pg.K_RETURN, pg.K_n) and self.status.level_complete:
                self.sim.next_level()
            if event.key == pg.K_g:
                self.dialogue_engine.use_gemini = not self.dialogue_engine.use_gemini
                self._flash(f"Gemini narration {'ON' if self.dialogue_engine.use_gemini else 'OFF'}")
        return True

    def _update(self, dt: float) -> None:
        keys = pg.key.get_pressed()
        for name, bound in KEY_BINDINGS.items():
            setattr(self.input, name, any(keys[key] for key in bound))
        self.sim.tick(self.input)

        if self._banner_timer > 0.0:
            self._banner_timer -= dt
            if self._banner_timer <= 0.0:
                self._banner = ""

    def _on_status(self, status: Status) -> None:
        if status.level_complete and not self.status.level_complete:
            self._flash("Zone cleared! Press Enter for the next level.")
        self.status = status

    def _flash(self, message: str, seconds: float = 2.5) -> None:
        self._banner = message
        self._banner_timer = seconds

    def _hold_progress(self) -> float:
        press = self.sim.arbiter.press
        if not self.input.interact or press.consumed or self.sim.state.held_box() is None:
            return 0.0
        return press.elapsed(self.sim.clock()) / self.sim.arbiter.hold_threshold

    # ---------------------------------------------------------------------- hud
    def _draw(self) -> None:
        self.renderer.render(self.screen, self.sim.state, self._hold_progress())
        self._draw_hud()
        panel = self.sim.panel
        if panel.visible:
            body = "Thinking..." if panel.loading else panel.text
            self._draw_dialogue_box(panel.title, body)
        if self.status.game_over:
            self._draw_modal("GAME OVER", "You fell into the abyss. Press R to try again.", (220, 38, 38))
        elif self.status.game_complete:
            self._draw_modal("All zones sorted!", "The village is clean. Thank you!", (22, 163, 74))
        elif self.status.level_complete:
            self._draw_modal("Zone Cleared!", "Press Enter for the next level.", (22, 163, 74))

    def _draw_hud(self) -> None:
        panel = pg.Surface((250, 60 + 20 * len(CONTROLS)), pg.SRCALPHA)
        panel.fill((255, 255, 255, 220))
        title = self.title_font.render("Eco-Sort Platformer", True, (30, 41, 59))
        panel.blit(title, (12, 8))
        level = self.font.render(f"Level {self.status.level} / {self.sim.level_count}", True, (79, 70, 229))
        panel.blit(level, (12, 36))
        for i, line in enumerate(CONTROLS):
            panel.blit(self.font.render(line, True, (100, 116, 139)), (12, 60 + 20 * i))
        self.screen.blit(panel, (20, 20))

        counts = pg.Surface((240, 30 + 24 * len(VARIANT_NAMES)), pg.SRCALPHA)
        counts.fill((255, 255, 255, 220))
        heading = "Zone Cleared!" if self.status.level_complete else "Waste Collection"
        counts.blit(self.font.render(heading, True, (71, 85, 105)), (12, 6))
        for i, name in enumerate(VARIANT_NAMES):
            y = 30 + 24 * i
            pg.draw.rect(counts, VARIANT_COLORS[i], (12, y + 4, 12, 12), border_radius=2)
            remaining = self.status.zone_progress[i]
            color = (203, 213, 225) if remaining > 0 else (51, 65, 85)
            counts.blit(self.font.render(f"{name}: {remaining} left", True, color), (32, y))
        self.screen.blit(counts, counts.get_rect(topright=(self.screen.get_width() - 20, 20)))

        if self._banner:
            banner = self.font.render(self._banner, True, (250, 240, 180))
            self.screen.blit(banner, banner.get_rect(midtop=(self.screen.get_width() // 2, 20)))

    def _draw_modal(self, title: str, subtitle: str, accent: tuple[int, int, int]) -> None:
        shade = pg.Surface(self.screen.get_size(), pg.SRCALPHA)
        shade.fill((*accent, 90))
        self.screen.blit(shade, (0, 0))
        box = pg.Rect(0, 0, 460, 150)
        box.center = self.screen.get_rect().center
        pg.draw.rect(self.screen, (255, 255, 255), box, border_radius=24)
        pg.draw.rect(self.screen, accent, box, width=4, border_radius=24)
        heading = self.title_font.render(title, True, (30, 41, 59))
        self.screen.blit(heading, heading.get_rect(midtop=(box.centerx, box.top + 34)))
        sub = self.font.render(subtitle, True, (71, 85, 105))
        self.screen.blit(sub, sub.get_rect(midtop=(box.centerx, box.top + 84)))

    def _draw_dialogue_box(self, title: str, text: str) -> None:
        max_width = self.screen.get_width() - 80
        lines: List[str] = []
        for paragraph in text.splitlines():
            lines.extend(self._wrap_text(paragraph, max_width - 24, self.dialogue_font))
        if title:
            lines.insert(0, title)
        if not lines:
            return
        line_height = self.dialogue_font.get_linesize()
        box_height = line_height * len(lines) + 20
        box_rect = pg.Rect(40, self.screen.get_height() - box_height - 40, max_width, box_height)
        overlay = pg.Surface(box_rect.size, pg.SRCALPHA)
        overlay.fill((10, 12, 24, 200))
        pg.draw.rect(overlay, (120, 150, 255, 220), overlay.get_rect(), width=2, border_radius=12)
        self.screen.blit(overlay, box_rect)
        y = box_rect.top + 10
        for i, line in enumerate(lines):
            color = (250, 204, 21) if title and i == 0 else (230, 232, 250)
            rendered = self.dialogue_font.render(line, True, color)
            self.screen.blit(rendered, (box_rect.left + 12, y))
            y += line_height

    @staticmethod
    def _wrap_text(text: str, max_width: int, font: pg.font.Font) -> List[str]:
        words = text.split()
        if not words:
            return []
        lines: List[str] = []
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if font.size(candidate)[0] <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
        return lines


def build_config() -> GameConfig:
    resolution = (getattr(S, "WINDOW_W", 1200), getattr(S, "WINDOW_H", 800))
    fps_limit = getattr(S, "FPS", 60)
    levels_path = Path(__file__).resolve().parent / getattr(S, "LEVELS_FILE", "content/levels.yaml")
    return GameConfig(
        resolution=resolution,
        fps_limit=fps_limit,
        canvas_height=getattr(S, "CANVAS_HEIGHT", 800),
        fall_margin=getattr(S, "FALL_MARGIN", 200),
        levels_path=levels_path,
        use_gemini=getattr(S, "USE_GEMINI", False),
        model_name=getattr(S, "MODEL_NAME", "gemini-2.5-flash"),
        seed=getattr(S, "SEED", None),
    )


def main(argv: Iterable[str] | None = None) -> int:
    config = build_config()
    try:
        app = GameApp(config)
    except (OSError, LevelConfigError) as exc:
        print(f"Could not load levels from {config.levels_path}: {exc}", file=sys.stderr)
        return 1
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
