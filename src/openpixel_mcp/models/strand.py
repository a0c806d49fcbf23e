"""In-memory pixel strands that apply received OPC messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..protocol.framing import BROADCAST_CHANNEL
from .message import Message, Pixel, SetPixelColors, SystemExclusive

logger = logging.getLogger(__name__)

BLACK: Pixel = (0, 0, 0)


@dataclass
class Strand:
    """A strand of ``pixel_count`` pixels listening on one channel.

    A SetPixelColors message with N pixels overwrites pixels ``0..N-1``;
    the rest keep their color, and data past the end of the strand is
    dropped.
    """

    channel: int
    pixel_count: int
    pixels: list[Pixel] = field(default_factory=list)
    last_system_exclusive: SystemExclusive | None = None
    messages_received: int = 0

    def __post_init__(self) -> None:
        if not 1 <= self.channel <= 255:
            raise ValueError(f"Strand channel must be 1-255, got {self.channel}")
        if self.pixel_count < 0:
            raise ValueError(f"Pixel count must not be negative, got {self.pixel_count}")
        if not self.pixels:
            self.pixels = [BLACK] * self.pixel_count

    def accepts(self, message: Message) -> bool:
        return message.is_broadcast() or message.channel == self.channel

    def handle_message(self, message: Message) -> None:
        if not self.accepts(message):
            return
        self.messages_received += 1

        command = message.command
        if isinstance(command, SetPixelColors):
            count = min(len(command.pixels), self.pixel_count)
            self.pixels[:count] = command.pixels[:count]
        elif isinstance(command, SystemExclusive):
            self.last_system_exclusive = command

    def to_dict(self) -> dict:
        return {
            "channel": self.channel,
            "pixel_count": self.pixel_count,
            "messages_received": self.messages_received,
            "pixels": [list(p) for p in self.pixels],
            "last_system_exclusive": (
                self.last_system_exclusive.to_dict()
                if self.last_system_exclusive
                else None
            ),
        }


class StrandBank:
    """Routes messages to strands by channel; broadcasts reach every strand."""

    channel = BROADCAST_CHANNEL

    def __init__(self) -> None:
        self._strands: dict[int, Strand] = {}

    def __len__(self) -> int:
        return len(self._strands)

    def __iter__(self):
        return iter(sorted(self._strands.values(), key=lambda s: s.channel))

    def add(self, strand: Strand) -> Strand:
        if strand.channel in self._strands:
            raise ValueError(f"Channel {strand.channel} already has a strand")
        self._strands[strand.channel] = strand
        return strand

    def remove(self, channel: int) -> Strand:
        try:
            return self._strands.pop(channel)
        except KeyError:
            raise KeyError(f"No strand on channel {channel}") from None

    def get(self, channel: int) -> Strand | None:
        return self._strands.get(channel)

    def clear(self) -> None:
        self._strands.clear()

    def handle_message(self, message: Message) -> None:
        if message.is_broadcast():
            targets = list(self._strands.values())
        else:
            strand = self._strands.get(message.channel)
            targets = [strand] if strand else []

        if not targets:
            logger.debug("No strand listening on channel %d", message.channel)
        for strand in targets:
            strand.handle_message(message)
