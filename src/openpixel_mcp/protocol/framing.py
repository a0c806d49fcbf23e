"""Frame builder and parser for the Open Pixel Control wire format.

Frame layout::

    +---------+---------+-----------------+---------------------+
    | Channel | Command |     Length      |       Payload       |
    | 1 byte  | 1 byte  | 2 bytes (BE)    |   ``length`` bytes  |
    +---------+---------+-----------------+---------------------+

- Channel: 0 is broadcast, 1-255 address a single strand
- Command: 0x00 set pixel colors, 0xFF system exclusive
- Length: big-endian byte count of the payload that follows

The length prefix alone decides where a frame ends, whatever the command.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import PayloadTooLargeError

DEFAULT_OPC_PORT = 7890
HEADER_SIZE = 4
MAX_PAYLOAD_SIZE = 0xFFFF
MAX_FRAME_SIZE = HEADER_SIZE + MAX_PAYLOAD_SIZE
BROADCAST_CHANNEL = 0


@dataclass(frozen=True)
class FrameHeader:
    """The fixed 4-byte prefix of every frame."""

    channel: int
    command: int
    length: int

    @property
    def frame_size(self) -> int:
        return HEADER_SIZE + self.length


@dataclass
class Frame:
    """A complete frame cut out of a byte stream."""

    channel: int
    command: int
    payload: bytes

    @property
    def size(self) -> int:
        return HEADER_SIZE + len(self.payload)

    def __repr__(self) -> str:
        return (
            f"Frame(channel={self.channel}, command=0x{self.command:02X}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )


def build_header(channel: int, command: int, length: int) -> bytes:
    """Build the 4-byte frame header.

    Raises:
        ValueError: If channel or command do not fit in a byte.
        PayloadTooLargeError: If ``length`` does not fit the 16-bit field.
    """
    if not 0 <= channel <= 255:
        raise ValueError(f"Channel must be 0-255, got {channel}")
    if not 0 <= command <= 255:
        raise ValueError(f"Command must be 0-255, got {command}")
    if length > MAX_PAYLOAD_SIZE:
        raise PayloadTooLargeError(length, MAX_PAYLOAD_SIZE)
    return bytes([channel, command]) + length.to_bytes(2, "big")


def build_frame(channel: int, command: int, payload: bytes = b"") -> bytes:
    """Build a complete frame: header followed by ``payload``.

    Args:
        channel: Target channel 0-255.
        command: Single-byte command tag.
        payload: Command-specific payload bytes.

    Returns:
        The frame bytes, ready to write to a stream.
    """
    return build_header(channel, command, len(payload)) + bytes(payload)


def parse_header(data: bytes | bytearray | memoryview) -> FrameHeader | None:
    """Parse the header at the start of ``data``.

    Returns:
        A ``FrameHeader``, or ``None`` if fewer than 4 bytes are available.
    """
    if len(data) < HEADER_SIZE:
        return None
    return FrameHeader(
        channel=data[0],
        command=data[1],
        length=int.from_bytes(data[2:4], "big"),
    )


def parse_frame(data: bytes | bytearray | memoryview) -> Frame | None:
    """Cut the first complete frame out of ``data``.

    Bytes after the frame are ignored. The payload is copied, so the
    returned ``Frame`` stays valid after ``data`` is modified.

    Returns:
        A ``Frame``, or ``None`` if the header or payload is still incomplete.
    """
    header = parse_header(data)
    if header is None or len(data) < header.frame_size:
        return None
    return Frame(
        channel=header.channel,
        command=header.command,
        payload=bytes(data[HEADER_SIZE : header.frame_size]),
    )
