from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Final

API_ROOT: Final = "https://generativelanguage.googleapis.com/v1beta/models"
MODEL_NAME: Final = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
# (connect, read) seconds; narration runs off the game thread so a slow reply only delays text.
REQUEST_TIMEOUT: Final = (5, 20)
ERROR_LOG_PATH: Final = Path(os.getenv("ECOSORT_ERROR_LOG", Path(__file__).with_name("gemini_errors.log")))


def endpoint_for(model_name: str) -> str:
    return f"{API_ROOT}/{model_name}:generateContent"


def get_api_key() -> str | None:
    k = os.getenv("GOOGLE_API_KEY")
    if k:
        return k.strip()
    p = Path(__file__).with_name("api_key.txt")
    return p.read_text(encoding="utf-8").strip() if p.exists() else None


def log_error(message: str) -> None:
    """Append a timestamped narration error to the shared log file."""

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    entry = f"[{timestamp}] {message}\n"
    try:
        ERROR_LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        with ERROR_LOG_PATH.open("a", encoding="utf-8") as fh:
            fh.write(entry)
    except OSError:
        # A broken log file must never interrupt play.
        pass
