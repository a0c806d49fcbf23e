"""MCP server entry point for inspecting Open Pixel Control traffic.

Exposes the OPC codec as tools, resources, and prompts via the Model
Context Protocol using the official Python MCP SDK with stdio transport.
Frames go in and out as hex strings; the server never opens a connection
to a pixel device itself.
"""

from __future__ import annotations

import io
import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .models.message import Message, SetPixelColors, SystemExclusive
from .models.strand import Strand, StrandBank
from .protocol.commands import Command, build_message
from .protocol.decoder import FrameDecoder, ReceiveStatus
from .protocol.device import Device
from .protocol.errors import FrameError
from .protocol.framing import (
    BROADCAST_CHANNEL,
    DEFAULT_OPC_PORT,
    HEADER_SIZE,
    MAX_PAYLOAD_SIZE,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "openpixel",
    instructions="Encode, decode, and simulate Open Pixel Control frames",
)

# Virtual strands fed by apply_frames
_bank = StrandBank()


class _MessageLog:
    """Device that records every message it is handed."""

    channel = BROADCAST_CHANNEL

    def __init__(self) -> None:
        self.messages: list[Message] = []

    def handle_message(self, message: Message) -> None:
        self.messages.append(message)


def _parse_hex(value: str) -> bytes:
    return bytes.fromhex(value.replace(":", " "))


def _decode(data: bytes, device: Device, skip_invalid: bool = True) -> dict[str, Any]:
    """Run ``data`` through a decoder, delivering messages to ``device``."""
    decoder = FrameDecoder(io.BytesIO(data))
    delivered = 0
    errors: list[str] = []

    while True:
        try:
            status = decoder.receive(device)
        except FrameError as e:
            errors.append(str(e))
            if not skip_invalid:
                break
            decoder.skip()
            continue

        if status is ReceiveStatus.DELIVERED:
            delivered += 1
        elif status is ReceiveStatus.CLOSED:
            break

    return {
        "delivered": delivered,
        "errors": errors,
        "trailing_bytes": decoder.buffered,
    }


def _encode(message: Message) -> dict[str, Any]:
    if not message.is_valid():
        return {
            "error": f"Payload of {message.length()} bytes exceeds "
            f"the maximum of {MAX_PAYLOAD_SIZE}"
        }
    try:
        frame = build_message(message)
    except ValueError as e:
        return {"error": str(e)}
    return {
        "channel": message.channel,
        "command": message.command.tag.name,
        "length": message.length(),
        "frame_size": len(frame),
        "hex": frame.hex(),
    }


# ─── CODEC TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def encode_pixels(channel: int, pixels: list[list[int]]) -> dict[str, Any]:
    """Encode a SetPixelColors frame.

    Args:
        channel: Target channel (0 broadcasts to every strand, 1-255 one strand).
        pixels: RGB triples, e.g. [[255, 0, 0], [0, 255, 0]].
    """
    return _encode(Message(channel, SetPixelColors(pixels)))


@mcp.tool()
def encode_system_exclusive(channel: int, system_id: str, data: str = "") -> dict[str, Any]:
    """Encode a SystemExclusive frame.

    Args:
        channel: Target channel (0-255).
        system_id: Two-byte system identifier as hex, e.g. "0001".
        data: Vendor-defined payload as hex.
    """
    try:
        message = Message(
            channel, SystemExclusive(_parse_hex(system_id), _parse_hex(data))
        )
    except ValueError as e:
        return {"error": f"Invalid hex: {e}"}
    return _encode(message)


@mcp.tool()
def decode_frames(hex_data: str, skip_invalid: bool = True) -> dict[str, Any]:
    """Decode a captured OPC byte stream into messages.

    Args:
        hex_data: Raw stream bytes as hex; may hold several frames.
        skip_invalid: Skip frames with unknown commands or short payloads
                      instead of stopping at the first one.
    """
    try:
        data = _parse_hex(hex_data)
    except ValueError as e:
        return {"error": f"Invalid hex: {e}"}

    log = _MessageLog()
    result = _decode(data, log, skip_invalid)
    result["messages"] = [m.to_dict() for m in log.messages]
    return result


# ─── STRAND TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def add_strand(channel: int, pixel_count: int) -> dict[str, Any]:
    """Create a virtual strand that listens on a channel.

    Args:
        channel: Channel 1-255.
        pixel_count: Number of pixels on the strand.
    """
    try:
        strand = _bank.add(Strand(channel, pixel_count))
    except ValueError as e:
        return {"error": str(e)}
    logger.info("Added strand on channel %d (%d pixels)", channel, pixel_count)
    return {"added": True, "channel": strand.channel, "pixel_count": strand.pixel_count}


@mcp.tool()
def remove_strand(channel: int) -> dict[str, Any]:
    """Remove the virtual strand on a channel.

    Args:
        channel: Channel 1-255.
    """
    try:
        _bank.remove(channel)
    except KeyError:
        return {"error": f"No strand on channel {channel}"}
    return {"removed": True, "channel": channel}


@mcp.tool()
def get_strand(channel: int) -> dict[str, Any]:
    """Read the current pixel colors of a virtual strand.

    Args:
        channel: Channel 1-255.
    """
    strand = _bank.get(channel)
    if strand is None:
        return {"error": f"No strand on channel {channel}"}
    return strand.to_dict()


@mcp.tool()
def apply_frames(hex_data: str) -> dict[str, Any]:
    """Decode a stream and apply its messages to the virtual strands.

    Frames that fail to decode are skipped and reported in ``errors``.

    Args:
        hex_data: Raw stream bytes as hex.
    """
    if not len(_bank):
        return {"error": "No strands defined. Use the 'add_strand' tool first."}
    try:
        data = _parse_hex(hex_data)
    except ValueError as e:
        return {"error": f"Invalid hex: {e}"}

    result = _decode(data, _bank)
    result["strands"] = [
        {"channel": s.channel, "messages_received": s.messages_received}
        for s in _bank
    ]
    return result


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("opc://protocol/constants")
def resource_protocol_constants() -> str:
    """Wire-format constants."""
    return json.dumps({
        "default_port": DEFAULT_OPC_PORT,
        "header_size": HEADER_SIZE,
        "max_payload_size": MAX_PAYLOAD_SIZE,
        "broadcast_channel": BROADCAST_CHANNEL,
        "commands": {c.name: c.value for c in Command},
    })


@mcp.resource("opc://strands/list")
def resource_strands_list() -> str:
    """Summary of the virtual strands."""
    strands = [
        {
            "channel": s.channel,
            "pixel_count": s.pixel_count,
            "messages_received": s.messages_received,
        }
        for s in _bank
    ]
    return json.dumps({"strands": strands})


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def build_animation_frame(description: str) -> str:
    """Guide the AI to turn a lighting description into OPC frames.

    Args:
        description: What the strand should show, e.g. "red to blue gradient".
    """
    return f"""Build OPC frames that show: {description}

Steps:
- Use add_strand to create a strand per channel you need
- Compute one RGB triple per pixel, in strand order starting at pixel 0
- Encode each channel's pixels with encode_pixels (channel 0 reaches every strand)
- Concatenate the hex frames and send them through apply_frames
- Check the result with get_strand

A single frame carries at most {MAX_PAYLOAD_SIZE // 3} pixels."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
