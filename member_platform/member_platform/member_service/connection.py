"""
Connection state of the member store.

The gateway's reconnect loop is the only writer; request gates and the
readiness probe only read it.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class StoreEventType(str, Enum):
    CONNECTED = "connected"
    ERROR = "error"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class StoreEvent:
    """A connection lifecycle event, or the outcome of a connection attempt."""

    type: StoreEventType
    error: Optional[BaseException] = None


class ConnectionMonitor:
    """Holds the current connection state and attempt bookkeeping."""

    def __init__(self):
        self._state = ConnectionState.DISCONNECTED
        self.attempts = 0
        self.last_error: Optional[BaseException] = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    def mark_connecting(self) -> None:
        self.attempts += 1
        self._transition(ConnectionState.CONNECTING)

    def mark_connected(self) -> None:
        self.attempts = 0
        self.last_error = None
        self._transition(ConnectionState.CONNECTED)

    def mark_disconnected(self, error: Optional[BaseException] = None) -> None:
        self.last_error = error
        self._transition(ConnectionState.DISCONNECTED)

    def snapshot(self) -> dict:
        return {
            "state": self._state.value,
            "attempts": self.attempts,
            "last_error": str(self.last_error) if self.last_error else None,
        }

    def _transition(self, new_state: ConnectionState) -> None:
        if new_state is not self._state:
            logger.debug("Store connection state: %s -> %s", self._state.value, new_state.value)
        self._state = new_state
