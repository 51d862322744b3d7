"""Tests for the recorder and connection state machines."""

import pytest

from voicerelay.errors import InvalidStateTransition
from voicerelay.state import (
    ConnectionState,
    RecorderState,
    connection_machine,
    recorder_machine,
)


class TestRecorderMachine:
    """Test the recorder state machine."""

    def test_happy_path(self):
        machine = recorder_machine()
        for target in (
            RecorderState.STARTING,
            RecorderState.RECORDING,
            RecorderState.STOPPING,
            RecorderState.IDLE,
        ):
            machine.transition(target)
        assert machine.state is RecorderState.IDLE

    def test_starting_can_fall_back_to_idle(self):
        machine = recorder_machine()
        machine.transition(RecorderState.STARTING)
        machine.transition(RecorderState.IDLE)
        assert machine.state is RecorderState.IDLE

    def test_cannot_record_twice(self):
        machine = recorder_machine()
        machine.transition(RecorderState.STARTING)
        machine.transition(RecorderState.RECORDING)
        assert not machine.can_transition(RecorderState.STARTING)
        with pytest.raises(InvalidStateTransition, match="recording to starting"):
            machine.transition(RecorderState.STARTING)

    def test_cannot_stop_from_idle(self):
        with pytest.raises(InvalidStateTransition):
            recorder_machine().transition(RecorderState.STOPPING)


class TestConnectionMachine:
    """Test the connection state machine."""

    def test_starts_connecting(self):
        assert connection_machine().state is ConnectionState.CONNECTING

    def test_error_then_close(self):
        machine = connection_machine()
        machine.transition(ConnectionState.OPEN)
        machine.transition(ConnectionState.ERRORED)
        machine.transition(ConnectionState.CLOSED)
        assert machine.state is ConnectionState.CLOSED

    def test_closed_is_terminal(self):
        machine = connection_machine()
        machine.transition(ConnectionState.CLOSED)
        for target in ConnectionState:
            assert not machine.can_transition(target)

    def test_no_reopen_after_error(self):
        machine = connection_machine()
        machine.transition(ConnectionState.ERRORED)
        with pytest.raises(InvalidStateTransition):
            machine.transition(ConnectionState.OPEN)
