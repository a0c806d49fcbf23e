"""Exception hierarchy for the OPC codec.

``FrameError`` subclasses describe a frame whose length prefix was readable,
so the decoder can discard exactly that frame and carry on with the stream.
I/O failures are not wrapped: the ``OSError`` raised by the sink or source
reaches the caller unchanged.
"""

from __future__ import annotations


class OPCError(Exception):
    """Base class for all codec errors."""


class PayloadTooLargeError(OPCError, ValueError):
    """An outgoing message does not fit the 16-bit length field."""

    def __init__(self, length: int, limit: int = 0xFFFF) -> None:
        self.length = length
        self.limit = limit
        super().__init__(f"Payload of {length} bytes exceeds the maximum of {limit}")


class FrameError(OPCError):
    """A complete frame was received but could not be turned into a message."""

    def __init__(self, channel: int, command: int, length: int, reason: str) -> None:
        self.channel = channel
        self.command = command
        self.length = length
        super().__init__(
            f"{reason} (channel={channel}, command=0x{command:02X}, length={length})"
        )

    @property
    def frame_size(self) -> int:
        """Bytes the offending frame occupies on the wire."""
        # channel + command + 2-byte length
        return 4 + self.length


class MalformedFrameError(FrameError):
    """The payload is too short for its declared command."""


class UnknownCommandError(FrameError):
    """The command byte is not one the protocol defines."""

    def __init__(self, channel: int, command: int, length: int) -> None:
        super().__init__(channel, command, length, "Unrecognized command")
