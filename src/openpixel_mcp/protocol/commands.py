"""Command tags and high-level frame builders.

The command byte selects how the payload of a frame is interpreted.
The protocol defines exactly two payload shapes.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Iterable, Sequence

from .framing import build_frame

if TYPE_CHECKING:
    from ..models.message import Message


class Command(IntEnum):
    """Command byte values."""

    SET_PIXEL_COLORS = 0x00
    SYSTEM_EXCLUSIVE = 0xFF


def build_message(message: Message) -> bytes:
    """Serialize a message into a complete frame.

    Raises:
        PayloadTooLargeError: If the payload exceeds 65535 bytes.
        ValueError: If the channel or any payload byte is out of range.
    """
    payload = message.command.to_bytes()
    return build_frame(message.channel, message.command.tag.value, payload)


def build_set_pixel_colors(channel: int, pixels: Iterable[Sequence[int]]) -> bytes:
    """Build a SetPixelColors frame.

    Args:
        channel: Target channel, 0 to broadcast.
        pixels: RGB triples in strand order.
    """
    from ..models.message import Message, SetPixelColors

    return build_message(Message(channel, SetPixelColors(pixels)))


def build_system_exclusive(channel: int, system_id: bytes, data: bytes = b"") -> bytes:
    """Build a SystemExclusive frame.

    Args:
        channel: Target channel, 0 to broadcast.
        system_id: Two-byte system identifier.
        data: Vendor-defined payload.
    """
    from ..models.message import Message, SystemExclusive

    return build_message(Message(channel, SystemExclusive(system_id, data)))
