"""
Explicit state machines for the recorder and the socket connection.
"""

from enum import Enum

from voicerelay.errors import InvalidStateTransition


class RecorderState(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    RECORDING = "recording"
    STOPPING = "stopping"


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"
    ERRORED = "errored"


RECORDER_TRANSITIONS: dict[RecorderState, frozenset[RecorderState]] = {
    RecorderState.IDLE: frozenset({RecorderState.STARTING}),
    RecorderState.STARTING: frozenset({RecorderState.RECORDING, RecorderState.IDLE}),
    RecorderState.RECORDING: frozenset({RecorderState.STOPPING}),
    RecorderState.STOPPING: frozenset({RecorderState.IDLE}),
}

CONNECTION_TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    ConnectionState.CONNECTING: frozenset(
        {ConnectionState.OPEN, ConnectionState.ERRORED, ConnectionState.CLOSED}
    ),
    ConnectionState.OPEN: frozenset({ConnectionState.CLOSED, ConnectionState.ERRORED}),
    ConnectionState.ERRORED: frozenset({ConnectionState.CLOSED}),
    ConnectionState.CLOSED: frozenset(),
}


class StateMachine:
    """Holds a current state and only moves along the edges it was given."""

    def __init__(self, name: str, initial: Enum, transitions: dict):
        self.name = name
        self._state = initial
        self._transitions = transitions

    @property
    def state(self):
        return self._state

    def can_transition(self, target) -> bool:
        return target in self._transitions[self._state]

    def transition(self, target) -> None:
        if not self.can_transition(target):
            raise InvalidStateTransition(self.name, self._state, target)
        self._state = target


def recorder_machine() -> StateMachine:
    return StateMachine("recorder", RecorderState.IDLE, RECORDER_TRANSITIONS)


def connection_machine() -> StateMachine:
    return StateMachine("connection", ConnectionState.CONNECTING, CONNECTION_TRANSITIONS)
