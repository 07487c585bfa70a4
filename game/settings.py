# ---- Display & timing ----
WINDOW_W = 1200
WINDOW_H = 800
FPS = 60

# ---- World ----
# Falling this far below the canvas bottom ends the run.
CANVAS_HEIGHT = 800
FALL_MARGIN = 200
LEVELS_FILE = "content/levels.yaml"
SEED = None  # set an int for repeatable box glyphs

# ---- Gemini (narration) ----
USE_GEMINI = False       # Press G in-game to toggle ON/OFF
MODEL_NAME = "gemini-2.5-flash"
