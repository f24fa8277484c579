# src/chatgate/core/registry.py

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, Field


class Session(BaseModel):
    """
    One configured credential/model pair.

    created_at is recorded but nothing expires on it.
    """
    session_id: str
    api_key: str
    model: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SessionRegistry:
    """
    In-memory session store, one per app instance.

    - put(session_id, api_key, model)   -> overwrite, last write wins
    - get(session_id)                   -> Session or None
    - count()                           -> distinct session ids stored

    No persistence, no eviction. Credentials are stored as given; checking
    them is the prober's job.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def put(self, session_id: str, api_key: str, model: str) -> Session:
        session = Session(session_id=session_id, api_key=api_key, model=model)
        with self._lock:
            self._sessions[session_id] = session
        return session

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)
