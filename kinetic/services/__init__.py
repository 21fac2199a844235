"""Session services."""

from kinetic.services.session_registry import (
    LiveSession,
    RegistryFullError,
    SessionNotFoundError,
    SessionRegistry,
    get_session_registry,
)

__all__ = [
    "LiveSession",
    "RegistryFullError",
    "SessionNotFoundError",
    "SessionRegistry",
    "get_session_registry",
]
