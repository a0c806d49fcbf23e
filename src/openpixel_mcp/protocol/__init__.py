"""Protocol layer: wire framing, command tags, frame builders, and errors."""

from .framing import DEFAULT_OPC_PORT, Frame, build_frame, parse_frame
from .commands import Command, build_message
from .errors import (
    OPCError,
    FrameError,
    MalformedFrameError,
    PayloadTooLargeError,
    UnknownCommandError,
)
