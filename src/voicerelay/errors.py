"""
Error taxonomy.

Backends and the transport raise these; the recording controller and the
playback bridge catch them at their boundary and turn them into a status
line update plus a log entry.
"""


class VoiceRelayError(Exception):
    """Base class for all voicerelay errors."""


class PermissionDenied(VoiceRelayError):
    """The user declined microphone access."""


class AudioSubsystemFailure(VoiceRelayError):
    """A recording, audio mode or playback call into the device layer failed."""


class TransportUnavailable(VoiceRelayError):
    """A send was attempted while the connection was not open."""


class TransportError(VoiceRelayError):
    """The socket reported a connection-level failure."""


class InvalidStateTransition(VoiceRelayError):
    """A state machine was asked to move along an edge it does not have."""

    def __init__(self, machine: str, current, target):
        super().__init__(f"{machine}: cannot go from {current.value} to {target.value}")
        self.current = current
        self.target = target
