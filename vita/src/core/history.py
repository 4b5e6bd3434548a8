"""
Vita - Conversation History
============================
Process-lifetime, in-memory chat history.

``Turn``
    Immutable ``(role, text)`` record.
``HistoryLog``
    Append-only, ordered list of turns for one session.  A user turn and
    its assistant reply are appended together under a lock, so a reader
    never observes half an exchange.
``SessionRegistry``
    Maps session id → ``HistoryLog``; logs are created lazily on first use.
    Passed explicitly to the ``ChatRunner`` instead of living in a global.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterator, Literal

from vita.src.utils.logger import get_logger

logger = get_logger(__name__)

TurnRole = Literal["user", "assistant"]


@dataclass(frozen=True)
class Turn:
    role: TurnRole
    text: str


class HistoryLog:
    """Ordered, append-only sequence of ``Turn`` records."""

    __slots__ = ("session_id", "_turns", "_lock")

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self._turns: list[Turn] = []
        self._lock = threading.Lock()


    def append_exchange(self, user_text: str, assistant_text: str) -> None:
        """Append a user turn followed by its assistant reply."""
        with self._lock:
            self._turns.append(Turn("user", user_text))
            self._turns.append(Turn("assistant", assistant_text))
        logger.debug("Session '%s' now holds %d turn(s).", self.session_id, len(self._turns))


    @property
    def turns(self) -> tuple[Turn, ...]:
        """Snapshot of the log in chronological order."""
        with self._lock:
            return tuple(self._turns)


    def __len__(self) -> int:
        return len(self._turns)


    def __iter__(self) -> Iterator[Turn]:
        return iter(self.turns)


    def __repr__(self) -> str:
        return f"HistoryLog(session='{self.session_id}', turns={len(self)})"


class SessionRegistry:
    """Session id → ``HistoryLog`` mapping held for the process lifetime."""

    __slots__ = ("_logs", "_lock")

    def __init__(self) -> None:
        self._logs: dict[str, HistoryLog] = {}
        self._lock = threading.Lock()


    def get(self, session_id: str) -> HistoryLog:
        """Return the log for *session_id*, creating it on first use."""
        with self._lock:
            log = self._logs.get(session_id)
            if log is None:
                log = HistoryLog(session_id)
                self._logs[session_id] = log
                logger.info("Started session '%s'.", session_id)
            return log


    def __contains__(self, session_id: object) -> bool:
        return session_id in self._logs


    def session_ids(self) -> list[str]:
        with self._lock:
            return list(self._logs)
