"""OPC message model: a channel plus exactly one command payload.

Messages are immutable values. Construction normalizes the payload into
tuples and ``bytes`` but does not validate it; callers check
:meth:`Message.is_valid` before sending.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from ..protocol.commands import Command
from ..protocol.framing import BROADCAST_CHANNEL, MAX_PAYLOAD_SIZE

Pixel = tuple[int, int, int]

SYSTEM_ID_SIZE = 2


@dataclass(frozen=True)
class SetPixelColors:
    """RGB triples for the first ``len(pixels)`` pixels of a strand."""

    tag: ClassVar[Command] = Command.SET_PIXEL_COLORS

    pixels: tuple[Pixel, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "pixels", tuple(tuple(p) for p in self.pixels))

    def length(self) -> int:
        return 3 * len(self.pixels)

    def to_bytes(self) -> bytes:
        """Serialize the pixels as consecutive R, G, B bytes."""
        for index, pixel in enumerate(self.pixels):
            if len(pixel) != 3:
                raise ValueError(
                    f"Pixel {index} must have 3 components, got {len(pixel)}"
                )
        return bytes(component for pixel in self.pixels for component in pixel)

    @classmethod
    def from_bytes(cls, payload: bytes) -> SetPixelColors:
        """Split a payload into RGB triples, dropping a trailing partial triple."""
        usable = len(payload) - len(payload) % 3
        return cls(tuple(tuple(payload[i : i + 3]) for i in range(0, usable, 3)))

    def to_dict(self) -> dict:
        return {
            "command": "set_pixel_colors",
            "pixel_count": len(self.pixels),
            "pixels": [list(p) for p in self.pixels],
        }


@dataclass(frozen=True)
class SystemExclusive:
    """Vendor-specific message: a 2-byte system id and an opaque data block."""

    tag: ClassVar[Command] = Command.SYSTEM_EXCLUSIVE

    system_id: bytes
    data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "system_id", bytes(self.system_id))
        object.__setattr__(self, "data", bytes(self.data))

    def length(self) -> int:
        return SYSTEM_ID_SIZE + len(self.data)

    def to_bytes(self) -> bytes:
        if len(self.system_id) != SYSTEM_ID_SIZE:
            raise ValueError(
                f"System id must be {SYSTEM_ID_SIZE} bytes, got {len(self.system_id)}"
            )
        return self.system_id + self.data

    @classmethod
    def from_bytes(cls, payload: bytes) -> SystemExclusive:
        """Split a payload into system id and data.

        Raises:
            ValueError: If the payload is shorter than the system id.
        """
        if len(payload) < SYSTEM_ID_SIZE:
            raise ValueError(
                f"System exclusive payload needs at least {SYSTEM_ID_SIZE} bytes, "
                f"got {len(payload)}"
            )
        return cls(
            system_id=payload[:SYSTEM_ID_SIZE],
            data=payload[SYSTEM_ID_SIZE:],
        )

    def to_dict(self) -> dict:
        return {
            "command": "system_exclusive",
            "system_id": self.system_id.hex(),
            "data": self.data.hex(),
        }


Payload = Union[SetPixelColors, SystemExclusive]


@dataclass(frozen=True)
class Message:
    """A single OPC message.

    Channel 0 is a broadcast to every strand; channels 1-255 each
    address one strand.
    """

    channel: int
    command: Payload

    def length(self) -> int:
        """Serialized payload size in bytes."""
        return self.command.length()

    def is_valid(self) -> bool:
        """Whether the payload fits the 16-bit length field."""
        return self.length() <= MAX_PAYLOAD_SIZE

    def is_broadcast(self) -> bool:
        return self.channel == BROADCAST_CHANNEL

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "channel": self.channel,
            "broadcast": self.is_broadcast(),
            "length": self.length(),
            **self.command.to_dict(),
        }

    def __repr__(self) -> str:
        return (
            f"Message(channel={self.channel}, command={self.command.tag.name}, "
            f"length={self.length()})"
        )
