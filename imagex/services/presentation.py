"""Observable presentation state driven by the analysis pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from threading import RLock
from typing import Union

from ..types import Failure, PredictionResult, Success
from ..utils.text import format_result_text

logger = logging.getLogger(__name__)

IDLE_TEXT = "Tap image to select"
ANALYZING_TEXT = "Analyzing image..."


@dataclass(frozen=True, slots=True)
class Idle:
    @property
    def text(self) -> str:
        return IDLE_TEXT


@dataclass(frozen=True, slots=True)
class Analyzing:
    @property
    def text(self) -> str:
        return ANALYZING_TEXT


@dataclass(frozen=True, slots=True)
class Done:
    result: PredictionResult

    @property
    def is_failure(self) -> bool:
        return isinstance(self.result, Failure)

    @property
    def text(self) -> str:
        if isinstance(self.result, Success):
            return format_result_text(self.result.label)
        return self.result.message


PresentationState = Union[Idle, Analyzing, Done]
Observer = Callable[[PresentationState], None]


class PresentationStateMachine:
    """Holds the single live presentation state and notifies observers.

    Every call to :meth:`begin` hands out a new, strictly increasing run
    token. By default :meth:`finish` applies any result, so when runs overlap
    the one that finishes last wins. With ``discard_stale`` only the result
    carrying the most recent token is applied.
    """

    def __init__(self, *, discard_stale: bool = False) -> None:
        self.discard_stale = discard_stale
        self._state: PresentationState = Idle()
        self._observers: list[Observer] = []
        self._latest_token = 0
        self._lock = RLock()

    def current_state(self) -> PresentationState:
        with self._lock:
            return self._state

    @property
    def latest_token(self) -> int:
        with self._lock:
            return self._latest_token

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer`` for future transitions; returns an unsubscribe callable."""
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def begin(self) -> int:
        """Enter :class:`Analyzing` and return the token identifying this run."""
        with self._lock:
            self._latest_token += 1
            token = self._latest_token
            self._transition(Analyzing())
        return token

    def finish(self, token: int, result: PredictionResult) -> bool:
        """Enter ``Done(result)``; returns False when the result was discarded as stale."""
        with self._lock:
            if self.discard_stale and token != self._latest_token:
                logger.debug(
                    "Discarding result of run %d; run %d is newer.", token, self._latest_token
                )
                return False
            self._transition(Done(result))
        return True

    def _transition(self, state: PresentationState) -> None:
        # Called with the lock held so observers see transitions in order.
        self._state = state
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception:
                logger.exception("Presentation observer %r failed", observer)
