"""
In-memory registry of live exercise sessions.

Bridges concurrent request handling to the single-threaded FrameProcessor:
every operation on a session runs under that session's lock, so frames are
applied one at a time in the order the lock is acquired, and an exercise
switch or finish never interleaves with a frame.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, TypeVar

from kinetic.config import Settings, get_settings
from kinetic.engine import FrameProcessor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionNotFoundError(KeyError):
    """No live session with the given id."""


class RegistryFullError(RuntimeError):
    """The maximum number of live sessions has been reached."""


@dataclass
class LiveSession:
    session_id: str
    processor: FrameProcessor
    lock: threading.Lock = field(default_factory=threading.Lock)


class SessionRegistry:
    """Holds FrameProcessors keyed by session id."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.settings = settings or get_settings()
        self._clock = clock
        self._sessions: Dict[str, LiveSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, exercise: str) -> LiveSession:
        """Create a session; raises UnsupportedExerciseError for a blank exercise name."""
        processor = FrameProcessor(exercise, settings=self.settings, clock=self._clock)
        session = LiveSession(session_id=str(uuid.uuid4()), processor=processor)

        with self._lock:
            if len(self._sessions) >= self.settings.max_active_sessions:
                raise RegistryFullError(
                    f"Maximum of {self.settings.max_active_sessions} live sessions reached"
                )
            self._sessions[session.session_id] = session

        logger.info(f"Session {session.session_id} created for {processor.exercise.display_name}")
        return session

    def get(self, session_id: str) -> LiveSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def run(self, session_id: str, operation: Callable[[FrameProcessor], T]) -> T:
        """Run ``operation`` against the session's processor under its lock."""
        session = self.get(session_id)
        with session.lock:
            return operation(session.processor)

    def remove(self, session_id: str) -> Optional[LiveSession]:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            logger.info(f"Session {session_id} removed")
        return session

    def clear(self):
        with self._lock:
            self._sessions.clear()


_registry_instance: Optional[SessionRegistry] = None
_registry_lock = threading.Lock()


def get_session_registry() -> SessionRegistry:
    """Get or create the global session registry."""
    global _registry_instance
    with _registry_lock:
        if _registry_instance is None:
            _registry_instance = SessionRegistry()
        return _registry_instance
