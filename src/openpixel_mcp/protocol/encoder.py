"""Write OPC messages to a byte sink."""

from __future__ import annotations

import logging

from ..models.message import Message
from .commands import build_message
from .device import ByteSink
from .errors import PayloadTooLargeError
from .framing import MAX_PAYLOAD_SIZE

logger = logging.getLogger(__name__)


class Encoder:
    """Serializes messages onto a sink such as a socket file or ``BytesIO``.

    Usage::

        encoder = Encoder(sock.makefile("wb"))
        encoder.send(Message(1, SetPixelColors([(255, 0, 0)] * 50)))
    """

    def __init__(self, sink: ByteSink) -> None:
        self._sink = sink

    @property
    def sink(self) -> ByteSink:
        return self._sink

    def send(self, message: Message) -> int:
        """Write one frame and flush the sink.

        The frame is fully built before the first write, so an invalid
        message leaves the sink untouched.

        Returns:
            Number of bytes in the frame.

        Raises:
            PayloadTooLargeError: If the payload exceeds 65535 bytes.
            ValueError: If the channel or any payload byte is out of range.
            OSError: If writing to or flushing the sink fails.
        """
        if not message.is_valid():
            raise PayloadTooLargeError(message.length(), MAX_PAYLOAD_SIZE)

        frame = build_message(message)
        self._sink.write(frame)
        self._sink.flush()

        logger.debug(
            "Sent %s on channel %d (%d payload bytes)",
            message.command.tag.name,
            message.channel,
            message.length(),
        )
        return len(frame)
