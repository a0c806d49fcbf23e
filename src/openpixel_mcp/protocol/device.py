"""Structural types for the collaborators the codec talks to.

Anything with the right methods qualifies: ``io.BytesIO`` works as both a
sink and a source, and a socket works through ``sock.makefile("wb")`` and
``sock.makefile("rb", buffering=0)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..models.message import Message


class ByteSink(Protocol):
    def write(self, data: bytes) -> int | None: ...

    def flush(self) -> None: ...


class ByteSource(Protocol):
    """Returns up to ``size`` bytes, ``b""`` at end of stream, or ``None``
    when a non-blocking source has nothing ready."""

    def read(self, size: int) -> bytes | None: ...


class Device(Protocol):
    """Consumer of decoded messages.

    ``handle_message`` is called once per decoded message, in wire order.
    ``channel`` lets an outside dispatcher route messages to the device.
    """

    channel: int

    def handle_message(self, message: Message) -> None: ...
