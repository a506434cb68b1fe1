"""In-memory store for clarification sessions.

Sessions live only as long as the owning store; nothing is persisted and
there is no expiry. Every operation takes the store lock, and callers that
need a multi-step critical section (lookup, render, delete) can hold it
through ``locked()``.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .classifier import Complexity, TaskType

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    """Random component followed by a millisecond timestamp component."""
    return f"{secrets.token_hex(6)}{int(time.time() * 1000):x}"


@dataclass
class PromptSession:
    """One in-flight clarification exchange."""
    session_id: str
    original_prompt: str
    context: List[str] = field(default_factory=list)
    refinements: List[str] = field(default_factory=list)
    language: Optional[str] = None
    task_type: TaskType = TaskType.CODE
    complexity: Complexity = Complexity.MODERATE


class SessionStore:
    """Keyed table of clarification sessions."""

    def __init__(self) -> None:
        self._sessions: Dict[str, PromptSession] = {}
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator["SessionStore"]:
        with self._lock:
            yield self

    def create(self, session_id: str, session: PromptSession) -> None:
        """Store a session, replacing any entry with the same id."""
        with self._lock:
            self._sessions[session_id] = session
        logger.debug(f"Created session {session_id}")

    def get(self, session_id: str) -> Optional[PromptSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def update(self, session_id: str, **updates: Any) -> bool:
        """Shallow-merge fields into an existing session."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            for name, value in updates.items():
                if not hasattr(session, name):
                    raise AttributeError(f"PromptSession has no field {name!r}")
                setattr(session, name, value)
            return True

    def delete(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.debug(f"Deleted session {session_id}")
        return removed

    def list_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
