"""
Grading Log Models

In-memory storage for agent and orchestrator events, per session.
"""

from datetime import datetime
from typing import Dict, Any, Optional, List
from pydantic import BaseModel, Field
import threading


class GradingLogEntry(BaseModel):
    """Single grading/agent event."""

    timestamp: datetime = Field(default_factory=datetime.utcnow)
    session_id: str
    agent_name: str
    event_type: str
    stage: Optional[str] = None
    sentence: Optional[str] = None
    submitted_work: Optional[Dict[str, Any]] = None
    output: Optional[Dict[str, Any]] = None
    duration_ms: Optional[int] = None
    prompt: Optional[str] = None
    model: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class GradingLogStore:
    """In-memory storage for grading logs, thread-safe."""

    def __init__(self, max_logs_per_session: int = 200):
        self._logs: Dict[str, List[GradingLogEntry]] = {}
        self._lock = threading.Lock()
        self._max_logs = max_logs_per_session

    def add_log(self, entry: GradingLogEntry) -> None:
        with self._lock:
            session_id = entry.session_id
            if session_id not in self._logs:
                self._logs[session_id] = []
            self._logs[session_id].append(entry)
            if len(self._logs[session_id]) > self._max_logs:
                self._logs[session_id] = self._logs[session_id][-self._max_logs:]

    def get_logs(
        self,
        session_id: str,
        stage: Optional[str] = None,
        agent_name: Optional[str] = None,
    ) -> List[GradingLogEntry]:
        with self._lock:
            logs = self._logs.get(session_id, [])
            if stage:
                logs = [log for log in logs if log.stage == stage]
            if agent_name:
                logs = [log for log in logs if log.agent_name == agent_name]
            return list(logs)

    def clear_session(self, session_id: str) -> None:
        with self._lock:
            if session_id in self._logs:
                del self._logs[session_id]


_grading_log_store: Optional[GradingLogStore] = None


def get_grading_log_store() -> GradingLogStore:
    global _grading_log_store
    if _grading_log_store is None:
        _grading_log_store = GradingLogStore()
    return _grading_log_store
