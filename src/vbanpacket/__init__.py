"""
pyVBANPacket: Python library for VBAN (audio over network) packets.

This library encodes and decodes the 28 byte VBAN packet header, wraps it
with payload into packets, and creates headers with per-stream frame counters.
"""

from __future__ import annotations

from .exceptions import (
    VBANAlreadyHasDataError,
    VBANBadMagicError,
    VBANError,
    VBANInvalidConfigurationError,
    VBANInvalidHeaderError,
    VBANInvalidPacketAttributeError,
    VBANMissingRequiredFieldError,
    VBANPacketError,
    VBANPayloadTooLargeError,
    VBANUnsupportedProtocolError,
)
from .factory import FactoryBuilder, FactoryConfig, HeaderFactory, PacketFactory, PacketFactoryBuilder
from .packet import MAX_PAYLOAD_SIZE, MAX_SIZE, VBANPacket, decode_packet
from .protocol import (
    HEADER_SIZE,
    AudioFormat,
    BitsPerSecond,
    Codec,
    CommandFormat,
    Format,
    Protocol,
    SampleRate,
    VBANHeader,
    decode_header,
    encode_header,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Field registry
    "AudioFormat",
    "BitsPerSecond",
    "Codec",
    "CommandFormat",
    "Format",
    "Protocol",
    "SampleRate",
    # Header
    "HEADER_SIZE",
    "VBANHeader",
    "decode_header",
    "encode_header",
    # Packet
    "MAX_PAYLOAD_SIZE",
    "MAX_SIZE",
    "VBANPacket",
    "decode_packet",
    # Factories
    "FactoryBuilder",
    "FactoryConfig",
    "HeaderFactory",
    "PacketFactory",
    "PacketFactoryBuilder",
    # Exceptions
    "VBANAlreadyHasDataError",
    "VBANBadMagicError",
    "VBANError",
    "VBANInvalidConfigurationError",
    "VBANInvalidHeaderError",
    "VBANInvalidPacketAttributeError",
    "VBANMissingRequiredFieldError",
    "VBANPacketError",
    "VBANPayloadTooLargeError",
    "VBANUnsupportedProtocolError",
]
