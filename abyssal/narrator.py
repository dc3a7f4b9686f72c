"""
Assistant narration queue.

Messages are played back one at a time; each stays on display for its
requested duration before the next one is dequeued. Single producer,
single consumer, driven by the session scheduler.
"""

from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

from .data_types import Mission
from .scheduler import Scheduler
from .constants import (
    SAY_DURATION_DEFAULT,
    MISSION_LINE_DURATION,
    WARNING_DURATION,
    HINT_DURATION,
    FACT_DURATION,
    NARRATION_HISTORY_LIMIT,
)


@dataclass
class Utterance:
    """A narration line and how long it should stay on screen (seconds)"""
    text: str
    duration: float
    shown_at: Optional[float] = None


class Narrator:
    """
    FIFO message display for the on-board assistant.

    Attributes:
        current: Utterance on display, or None when idle
        history: Most recent accepted utterances, in submission order
            (bounded by ``history_limit``)
    """

    def __init__(self, scheduler: Scheduler,
                 on_display: Optional[Callable[[Optional[Utterance]], None]] = None,
                 history_limit: int = NARRATION_HISTORY_LIMIT):
        """
        Args:
            scheduler: Clock that times each display window
            on_display: Optional hook called with each displayed utterance,
                and with None when the display clears
            history_limit: Utterances retained in history and unread lines
        """
        self._scheduler = scheduler
        self._on_display = on_display
        self._queue: Deque[Utterance] = deque()
        self._unread: Deque[Utterance] = deque(maxlen=history_limit)
        self.current: Optional[Utterance] = None
        self.history: Deque[Utterance] = deque(maxlen=history_limit)

    @property
    def is_speaking(self) -> bool:
        return self.current is not None

    @property
    def backlog(self) -> int:
        return len(self._queue)

    def say(self, text: str, duration: float = SAY_DURATION_DEFAULT):
        """Queue a message; empty messages are ignored"""
        if not text:
            return

        utterance = Utterance(text=text, duration=duration)
        self.history.append(utterance)
        self._unread.append(utterance)
        self._queue.append(utterance)

        if not self.is_speaking:
            self._next()

    def _next(self):
        if not self._queue:
            self.current = None
            return

        utterance = self._queue.popleft()
        utterance.shown_at = self._scheduler.now
        self.current = utterance
        if self._on_display:
            self._on_display(utterance)

        self._scheduler.call_later(utterance.duration, self._clear, name="narration")

    def _clear(self):
        self.current = None
        if self._on_display:
            self._on_display(None)
        self._next()

    def lines(self) -> List[str]:
        return [u.text for u in self.history]

    def drain(self) -> List[str]:
        """Lines accepted since the previous drain, oldest first"""
        lines = [u.text for u in self._unread]
        self._unread.clear()
        return lines

    # ------------------------------------------------------------------
    # Canned lines
    # ------------------------------------------------------------------

    def mission_start(self, mission: Mission):
        self.say(mission.narration.intro, MISSION_LINE_DURATION)

    def mission_success(self, mission: Mission):
        self.say(mission.narration.success, MISSION_LINE_DURATION)

    def mission_failure(self, mission: Mission):
        self.say(mission.narration.failure, MISSION_LINE_DURATION)

    def hint(self, text: str):
        self.say(text, HINT_DURATION)

    def hazard_warning(self, hazard_type: str):
        self.say(f"Warning: {hazard_type} detected. Proceed with caution.", WARNING_DURATION)

    def predator_warning(self):
        self.say("Predator movement detected nearby.", WARNING_DURATION)

    def fact(self, text: str):
        self.say(text, FACT_DURATION)
