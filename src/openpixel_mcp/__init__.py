"""Open Pixel Control codec with an MCP inspection server."""

from .models.message import Message, SetPixelColors, SystemExclusive
from .protocol.decoder import FrameDecoder, ReceiveStatus
from .protocol.encoder import Encoder
from .protocol.framing import DEFAULT_OPC_PORT

__version__ = "0.1.0"
