"""Tests for writing messages to a sink."""

import io
from unittest.mock import MagicMock

import pytest

from openpixel_mcp.models.message import Message, SetPixelColors, SystemExclusive
from openpixel_mcp.protocol.encoder import Encoder
from openpixel_mcp.protocol.errors import PayloadTooLargeError


def test_send_writes_frame():
    """The documented pixel scenario lands on the sink byte for byte."""
    sink = io.BytesIO()
    written = Encoder(sink).send(Message(4, SetPixelColors([[9, 9, 9]] * 10)))
    assert written == 34
    assert sink.getvalue() == bytes([4, 0, 0, 0x1E]) + bytes([9] * 30)


def test_send_system_exclusive():
    """System exclusive messages are written with id then data."""
    sink = io.BytesIO()
    Encoder(sink).send(Message(4, SystemExclusive(b"\x00\x00", bytes([8] * 10))))
    assert sink.getvalue() == bytes([4, 0xFF, 0, 0x0C, 0, 0]) + bytes([8] * 10)


def test_send_flushes():
    """Every send is followed by a flush."""
    sink = MagicMock()
    Encoder(sink).send(Message(1, SetPixelColors([(1, 2, 3)])))
    sink.write.assert_called_once_with(bytes([1, 0, 0, 3, 1, 2, 3]))
    sink.flush.assert_called_once_with()


def test_send_appends_in_order():
    """Consecutive sends appear on the sink in call order."""
    sink = io.BytesIO()
    encoder = Encoder(sink)
    encoder.send(Message(1, SetPixelColors([(1, 1, 1)])))
    encoder.send(Message(2, SystemExclusive(b"\xAA\xBB")))
    assert sink.getvalue() == (
        bytes([1, 0, 0, 3, 1, 1, 1]) + bytes([2, 0xFF, 0, 2, 0xAA, 0xBB])
    )


def test_send_rejects_oversized():
    """Oversized payloads raise before anything is written."""
    sink = MagicMock()
    message = Message(1, SystemExclusive(b"\x00\x00", bytes(0xFFFF)))
    with pytest.raises(PayloadTooLargeError) as exc_info:
        Encoder(sink).send(message)
    assert exc_info.value.length == 0xFFFF + 2
    sink.write.assert_not_called()
    sink.flush.assert_not_called()


def test_send_rejects_bad_channel():
    """A channel out of range is refused without touching the sink."""
    sink = MagicMock()
    with pytest.raises(ValueError):
        Encoder(sink).send(Message(256, SetPixelColors()))
    sink.write.assert_not_called()


def test_send_write_error_propagates():
    """I/O failures reach the caller unchanged."""
    sink = MagicMock()
    sink.write.side_effect = BrokenPipeError("peer closed")
    with pytest.raises(BrokenPipeError):
        Encoder(sink).send(Message(1, SetPixelColors()))
    sink.flush.assert_not_called()


def test_send_flush_error_propagates():
    """A failing flush is reported as well."""
    sink = MagicMock()
    sink.flush.side_effect = OSError("flush failed")
    with pytest.raises(OSError):
        Encoder(sink).send(Message(1, SetPixelColors()))


def test_sink_property():
    """The encoder exposes the sink it writes to."""
    sink = io.BytesIO()
    assert Encoder(sink).sink is sink
