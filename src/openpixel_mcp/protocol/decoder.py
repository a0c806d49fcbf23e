"""Reassemble OPC messages from a byte stream.

Reads from a stream rarely line up with frame boundaries, so the decoder
keeps the bytes it has seen in a buffer and only cuts a frame out once the
whole of it, as announced by the length prefix, is present. The buffer never
holds more than one maximum-size frame.

Typical receive loop::

    decoder = FrameDecoder(conn.makefile("rb", buffering=0))
    while decoder.receive(device) is not ReceiveStatus.CLOSED:
        pass
"""

from __future__ import annotations

import logging
from enum import Enum

from .device import ByteSource, Device
from .errors import FrameError
from .framing import MAX_FRAME_SIZE, parse_frame, parse_header
from .parser import parse_message

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096


class ReceiveStatus(Enum):
    """Outcome of a single :meth:`FrameDecoder.receive` call."""

    DELIVERED = "delivered"
    INCOMPLETE = "incomplete"
    CLOSED = "closed"


class FrameDecoder:
    """Buffered frame decoder over an optional byte source.

    With a ``source`` the decoder pulls bytes itself, one read per
    ``receive`` call at most. Without one, bytes are pushed in with
    :meth:`feed`.
    """

    def __init__(
        self,
        source: ByteSource | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        self._source = source
        self._chunk_size = chunk_size
        self._buffer = bytearray()
        self._eof = False
        self._starved = False

    @property
    def buffered(self) -> int:
        """Number of bytes held but not yet consumed."""
        return len(self._buffer)

    @property
    def closed(self) -> bool:
        """Whether the source has reported end of stream."""
        return self._eof

    def feed(self, data: bytes) -> None:
        """Append bytes received by the caller.

        Raises:
            BufferError: If the buffer would grow past one maximum-size frame.
        """
        if len(self._buffer) + len(data) > MAX_FRAME_SIZE:
            raise BufferError(
                f"Feeding {len(data)} bytes would exceed the "
                f"{MAX_FRAME_SIZE}-byte receive buffer ({len(self._buffer)} held)"
            )
        self._buffer += data

    def _fill(self) -> None:
        """Read at most one chunk from the source into the buffer."""
        self._starved = True
        if self._source is None or self._eof:
            return

        room = MAX_FRAME_SIZE - len(self._buffer)
        data = self._source.read(min(self._chunk_size, room))
        if data is None:
            return
        if not data:
            self._eof = True
            logger.debug("Source reached end of stream")
            return

        self._buffer += data
        self._starved = False

    def receive(self, device: Device) -> ReceiveStatus:
        """Deliver the next complete message to ``device``, if there is one.

        The frame is released from the buffer after ``device.handle_message``
        returns, or raises.

        Returns:
            ``DELIVERED`` if a message was handed to the device,
            ``INCOMPLETE`` if more bytes are needed, ``CLOSED`` if the source
            has ended and no complete frame remains.

        Raises:
            UnknownCommandError: If the frame's command byte is not known.
            MalformedFrameError: If the payload is too short for its command.
            OSError: If reading from the source fails.

        After a ``FrameError`` the frame is still buffered; call :meth:`skip`
        to discard it and continue with the next one.
        """
        frame = parse_frame(self._buffer)
        if frame is None:
            self._fill()
            frame = parse_frame(self._buffer)

        if frame is None:
            if self._eof:
                if self._buffer:
                    logger.warning(
                        "Stream closed with %d bytes of an incomplete frame",
                        len(self._buffer),
                    )
                return ReceiveStatus.CLOSED
            return ReceiveStatus.INCOMPLETE

        message = parse_message(frame)
        logger.debug(
            "Received %s on channel %d (%d payload bytes)",
            message.command.tag.name,
            message.channel,
            len(frame.payload),
        )
        try:
            device.handle_message(message)
        finally:
            del self._buffer[: frame.size]
        return ReceiveStatus.DELIVERED

    def skip(self) -> int:
        """Discard the complete frame at the head of the buffer.

        Returns:
            Bytes discarded, or 0 if no complete frame is buffered.
        """
        header = parse_header(self._buffer)
        if header is None or len(self._buffer) < header.frame_size:
            return 0
        del self._buffer[: header.frame_size]
        logger.debug(
            "Skipped frame on channel %d (command 0x%02X, %d bytes)",
            header.channel,
            header.command,
            header.frame_size,
        )
        return header.frame_size

    def serve(self, device: Device, skip_invalid: bool = True) -> int:
        """Deliver messages until no more bytes can be had.

        Stops when the source closes, or, for push mode and non-blocking
        sources, when the buffered bytes are used up.

        Args:
            device: Receives every decoded message.
            skip_invalid: Log and skip frames that fail to decode instead
                of raising.

        Returns:
            Number of messages delivered.
        """
        delivered = 0
        while True:
            try:
                status = self.receive(device)
            except FrameError as e:
                if not skip_invalid:
                    raise
                logger.warning("Skipping frame: %s", e)
                self.skip()
                continue

            if status is ReceiveStatus.DELIVERED:
                delivered += 1
            elif status is ReceiveStatus.CLOSED or self._starved:
                break
        return delivered
