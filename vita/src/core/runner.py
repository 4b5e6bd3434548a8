"""
Vita - History-Aware Chat Runner
=================================
Wraps a ``Completer`` with per-session conversation memory.

State machine::

    IDLE ──invoke()──▶ AWAITING_MODEL ──response / error──▶ IDLE

On success the user turn and the assistant turn are appended to the
session's ``HistoryLog`` (in that order) and the reply is returned.  On
failure nothing is appended and the error propagates unchanged.
"""

from __future__ import annotations

import time
from enum import Enum

from vita.src.core.history import SessionRegistry
from vita.src.core.interfaces import Completer
from vita.src.core.prompt import render
from vita.src.utils.logger import get_logger

logger = get_logger(__name__)


class RunnerState(str, Enum):
    IDLE = "idle"
    AWAITING_MODEL = "awaiting_model"


class ChatRunner:
    """
    Parameters
    ----------
    completer
        The chat model adapter.
    registry
        Session store; injected so callers and tests own the history.
    history_window
        Render only the last *N* turns into the prompt (0 = all turns).
    """

    __slots__ = ("_completer", "_registry", "_window", "state")

    def __init__(self, completer: Completer, registry: SessionRegistry | None = None, history_window: int = 0) -> None:
        self._completer = completer
        self._registry = registry if registry is not None else SessionRegistry()
        self._window = history_window
        self.state = RunnerState.IDLE


    @property
    def registry(self) -> SessionRegistry:
        return self._registry


    def invoke(self, session_id: str, user_input: str, context: str) -> str:
        log = self._registry.get(session_id)
        messages = render(context, log.turns, user_input, window=self._window)

        t_llm = time.perf_counter()
        self.state = RunnerState.AWAITING_MODEL
        try:
            answer = self._completer.complete(messages)
        finally:
            self.state = RunnerState.IDLE
        llm_ms = (time.perf_counter() - t_llm) * 1000

        log.append_exchange(user_input, answer)
        logger.info("[RUNNER] Session '%s': %d message(s) sent, reply %d chars in %.1fms", session_id, len(messages), len(answer), llm_ms)
        return answer
