"""Turn raw frames into messages."""

from __future__ import annotations

from ..models.message import Message, SetPixelColors, SystemExclusive
from .commands import Command
from .errors import MalformedFrameError, UnknownCommandError
from .framing import Frame

PAYLOAD_TYPES = {
    Command.SET_PIXEL_COLORS: SetPixelColors,
    Command.SYSTEM_EXCLUSIVE: SystemExclusive,
}


def parse_message(frame: Frame) -> Message:
    """Interpret a frame's payload according to its command byte.

    Raises:
        UnknownCommandError: If the command byte is not a known tag.
        MalformedFrameError: If the payload is too short for its command.
    """
    try:
        command = Command(frame.command)
    except ValueError:
        raise UnknownCommandError(
            frame.channel, frame.command, len(frame.payload)
        ) from None

    try:
        payload = PAYLOAD_TYPES[command].from_bytes(frame.payload)
    except ValueError as e:
        raise MalformedFrameError(
            frame.channel, frame.command, len(frame.payload), str(e)
        ) from e

    return Message(channel=frame.channel, command=payload)
