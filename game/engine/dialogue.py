"""Gemini-backed narration for NPC talk and waste inspection."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from queue import Empty, Queue
import sys
from threading import Lock
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import requests
from requests import exceptions as req_exc


# When the game is launched via ``python game/main.py`` the repository root is
# not automatically importable.  Inject it explicitly so ``config`` can be
# imported without requiring the package to be installed.
REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import gemini_config as CFG


NOTHING_NEARBY = "No waste found nearby."
SIGN_TITLE = "Did you know?"
HEADMAN_TITLE = "Village Headman"

INSPECT_TOPICS: Tuple[Tuple[str, str], ...] = (
    (
        "Red bin: hazardous waste",
        "Waste containing toxic, flammable or infectious material that can harm "
        "people, animals and the environment.\n"
        "Examples: flashlight batteries, light bulbs, car batteries.",
    ),
    (
        "Blue bin: general waste",
        "Waste that is not worth recycling or is hard to break down.\n"
        "Examples: snack wrappers, food-stained plastic bags, foam boxes.",
    ),
    (
        "Green bin: organic waste",
        "Waste that rots and decomposes easily and holds a lot of moisture.\n"
        "Examples: food scraps, fruit peels, vegetable trimmings.",
    ),
    (
        "Yellow bin: recyclable waste",
        "Leftovers that still have value and can be processed and used again.\n"
        "Examples: glass bottles, paper, drink cans, scrap metal.",
    ),
)

HEADMAN_LINES: Tuple[str, ...] = (
    "Batteries and bulbs are dangerous, child. They belong in the red bin, far from our rice fields.",
    "Wrappers, foam and dirty tissues cannot be saved. Put them in the blue bin.",
    "Peels and food scraps feed the soil again. The green bin is where they rest.",
    "Clean bottles, paper and cans can live a second life. Bring them to the yellow bin.",
)
HEADMAN_GENERAL = (
    "Sorting waste is easy, child. Yellow is for recycling, green for food scraps, "
    "blue for general waste and red for dangerous things like batteries. If we all "
    "sort before we throw, our village stays clean for a long time."
)


class TopicKind(Enum):
    TALK = "talk"
    INSPECT = "inspect"


@dataclass(frozen=True)
class Narration:
    title: str
    text: str


@dataclass
class DialoguePanel:
    """The externally visible dialogue slot read by the overlay."""

    title: str = ""
    text: str = ""
    loading: bool = False
    visible: bool = False


class DialogueEngine:
    """Return narration locally or via the Gemini API."""

    def __init__(self, use_gemini: bool = False, model_name: str | None = None):
        self.use_gemini = use_gemini
        self.model_name = model_name or CFG.MODEL_NAME
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="gemini")
        self._lock = Lock()
        self._cache: Dict[str, str] = {}

    # ------------------------------------------------------------------ lookups
    def local(self, kind: TopicKind, variant: int | None) -> Narration:
        """Deterministic narration for a category (``None`` means no waste nearby)."""

        if kind is TopicKind.INSPECT:
            if variant is None:
                return Narration("", NOTHING_NEARBY)
            title, text = INSPECT_TOPICS[variant]
            return Narration(title, text)
        if variant is None:
            return Narration(HEADMAN_TITLE, HEADMAN_GENERAL)
        return Narration(HEADMAN_TITLE, HEADMAN_LINES[variant])

    def submit(self, kind: TopicKind, variant: int | None) -> Future[Narration]:
        return self._executor.submit(self.fetch, kind, variant)

    def fetch(self, kind: TopicKind, variant: int | None) -> Narration:
        """Blocking lookup; never raises, falling back to local text instead."""

        fallback = self.local(kind, variant)
        if not self.use_gemini:
            return fallback
        prompt = self._prompt(kind, variant)
        with self._lock:
            cached = self._cache.get(prompt)
        if cached is not None:
            return Narration(fallback.title, cached)

        text, ok = self._fetch_gemini(prompt, fallback.text)
        if ok:
            with self._lock:
                self._cache[prompt] = text
        return Narration(fallback.title, text)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------ gemini
    def _prompt(self, kind: TopicKind, variant: int | None) -> str:
        if kind is TopicKind.INSPECT:
            title, _ = INSPECT_TOPICS[variant or 0]
            return (
                "You are the narrator of a 2D platformer about sorting waste. The "
                f"player is inspecting an item that belongs in the {title.lower()}. "
                "Describe it like an RPG item in at most two short sentences and "
                "say which bin it goes into."
            )
        topic = "waste sorting in general" if variant is None else INSPECT_TOPICS[variant][0]
        return (
            "You are the wise, kind Village Headman of a Thai village who cares "
            "deeply about the environment and is teaching the player to sort waste. "
            f'The player asks about "{topic}". Reply encouragingly in at most three '
            "sentences and name the bin colour if it applies. Bins: red for "
            "hazardous (batteries, bulbs, chemicals), blue for general (wrappers, "
            "foam, dirty tissues), green for organic (food scraps, leaves, peels), "
            "yellow for recyclables (clean bottles, glass, paper, cans)."
        )

    def _fetch_gemini(self, prompt: str, fallback: str) -> Tuple[str, bool]:
        key = CFG.get_api_key()
        if not key:
            CFG.log_error("Missing API key for Gemini request.")
            return "[Gemini] Missing API key. " + fallback, False

        response = None
        try:
            url = f"{CFG.endpoint_for(self.model_name)}?key={key}"
            body = {"contents": [{"parts": [{"text": prompt}]}]}
            response = requests.post(url, json=body, timeout=CFG.REQUEST_TIMEOUT)
            response.raise_for_status()
            data = response.json()
            text = self._extract_text(data.get("candidates", []))
            if not text:
                CFG.log_error(f"Gemini returned no text | prompt={prompt!r}")
                return fallback, False
            return text, True
        except req_exc.Timeout as exc:
            CFG.log_error(f"Gemini request failed: {exc} (timeout) | prompt={prompt!r}")
            return "[Gemini timeout] " + fallback, False
        except Exception as exc:  # noqa: BLE001 - narration must never stall the game
            extra = ""
            if response is not None:
                extra = f" | status={response.status_code} body={response.text[:500]!r}"
            CFG.log_error(f"Gemini request failed: {exc} | prompt={prompt!r}{extra}")
            return "[Gemini offline] " + fallback, False

    @staticmethod
    def _extract_text(candidates: Iterable[dict]) -> str:
        for candidate in candidates:
            parts: List[dict] = candidate.get("content", {}).get("parts", [])
            texts = [part.get("text", "").strip() for part in parts if part.get("text")]
            if texts:
                return " ".join(texts)
        return ""


class NarrativeDispatcher:
    """Fire-and-forget narration requests feeding a single dialogue panel.

    Every request bumps a sequence number; a finished lookup is applied only
    if no newer request or message has been issued since, so the latest
    request always wins.
    """

    def __init__(self, engine: DialogueEngine) -> None:
        self.engine = engine
        self.panel = DialoguePanel()
        self._sequence = 0
        self._results: Queue[Tuple[int, Narration]] = Queue()

    @property
    def sequence(self) -> int:
        return self._sequence

    def show(self, title: str, text: str) -> None:
        """Display static text immediately, superseding any pending lookup."""

        self._sequence += 1
        self.panel = DialoguePanel(title, text, loading=False, visible=True)

    def request(self, kind: TopicKind, variant: int | None) -> int:
        local = self.engine.local(kind, variant)
        if not self.engine.use_gemini or (kind is TopicKind.INSPECT and variant is None):
            self.show(local.title, local.text)
            return self._sequence

        self._sequence += 1
        sequence = self._sequence
        self.panel = DialoguePanel(local.title, "...", loading=True, visible=True)
        future = self.engine.submit(kind, variant)
        future.add_done_callback(
            lambda fut, seq=sequence, fb=local: self.deliver(seq, self._outcome(fut, fb))
        )
        return sequence

    def deliver(self, sequence: int, narration: Narration) -> None:
        """Queue a finished lookup; safe to call from worker threads."""

        self._results.put((sequence, narration))

    def drain(self) -> bool:
        """Apply queued results on the simulation thread. Returns ``True`` if the panel changed."""

        changed = False
        while True:
            try:
                sequence, narration = self._results.get_nowait()
            except Empty:
                break
            if sequence != self._sequence:
                continue
            self.panel = DialoguePanel(narration.title, narration.text, loading=False, visible=True)
            changed = True
        return changed

    def dismiss(self) -> None:
        # Closing the panel also drops whatever lookup is still in flight.
        self._sequence += 1
        self.panel = DialoguePanel()

    @staticmethod
    def _outcome(future: Future[Narration], fallback: Narration) -> Narration:
        try:
            return future.result()
        except Exception as exc:  # noqa: BLE001 - captured and logged here
            CFG.log_error(f"Narration worker failed: {exc}")
            return fallback
