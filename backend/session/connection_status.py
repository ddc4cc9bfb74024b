"""
Connection status of an assist session.

Tracked separately from the recognition state machine: the session can be
IDLE with any connection status.
"""
from enum import Enum

class ConnectionStatus(Enum):
    DOWN = "DOWN"
    UP = "UP"
    CLOSING = "CLOSING"
