"""Session management for the Socket.IO gateway.

Provides ConnectionSession dataclass and SessionStore for managing
per-connection state and the job currently running on that connection.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class ConnectionSession:
    """Per-connection state.

    Each Socket.IO connection has exactly one ConnectionSession and at most
    one running job.
    """

    sid: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # The running orchestrator task, cancelled on disconnect
    current_job: asyncio.Task | None = None
    current_job_id: str | None = None

    jobs_started: int = 0
    jobs_completed: int = 0
    jobs_failed: int = 0

    @property
    def is_busy(self) -> bool:
        """Whether a job is still running on this connection."""
        return self.current_job is not None and not self.current_job.done()

    def start_job(self, job_id: str, task: asyncio.Task) -> None:
        self.current_job = task
        self.current_job_id = job_id
        self.jobs_started += 1

    def finish_job(self, success: bool) -> None:
        """Record the outcome of the running job and release the slot."""
        if success:
            self.jobs_completed += 1
        else:
            self.jobs_failed += 1
        self.current_job = None
        self.current_job_id = None

    def cancel_job(self) -> bool:
        """Cancel the running job.

        Returns:
            True if a running job was cancelled.
        """
        if not self.is_busy:
            return False
        self.current_job.cancel()
        return True

    def duration_ms(self) -> int:
        delta = datetime.now(timezone.utc) - self.created_at
        return int(delta.total_seconds() * 1000)


class SessionStore:
    """In-memory session store indexed by Socket.IO sid."""

    def __init__(self) -> None:
        self._sessions: dict[str, ConnectionSession] = {}
        self._lock = asyncio.Lock()

    async def create(self, sid: str) -> ConnectionSession:
        """Create a new session.

        Args:
            sid: Socket.IO session ID.

        Returns:
            The newly created ConnectionSession.
        """
        async with self._lock:
            session = ConnectionSession(sid=sid)
            self._sessions[sid] = session
            return session

    async def get_by_sid(self, sid: str) -> ConnectionSession | None:
        return self._sessions.get(sid)

    async def delete(self, sid: str) -> ConnectionSession | None:
        """Delete session by Socket.IO session ID.

        Returns:
            The deleted session, or None if not found.
        """
        async with self._lock:
            return self._sessions.pop(sid, None)

    def count(self) -> int:
        """Return number of active sessions."""
        return len(self._sessions)
