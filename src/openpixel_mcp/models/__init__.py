"""Data models for OPC messages and virtual pixel strands."""

from .message import Message, SetPixelColors, SystemExclusive
from .strand import Strand, StrandBank
