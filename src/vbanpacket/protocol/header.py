"""VBAN packet header encoding and decoding.

The header is a fixed 28 byte structure:

    offset  size  field
    0       4     magic "VBAN" (ASCII)
    4       1     protocol (bits 5-7) | data rate index (bits 0-4)
    5       1     samples - 1
    6       1     channel - 1
    7       1     codec (bits 4-7) | format index (bits 0-4)
    8       16    stream name, ASCII, zero padded
    24      4     frame counter, big-endian

The format and codec masks both include bit 4. Values that set bit 4 in one
field (Codec.VBCA, Codec.USER, CommandFormat.UTF8) are read back by the other
field as well. The masks are kept as they are for wire compatibility with
existing senders.

Reference: VBAN Specification, revision 10
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import Self, cast

from ..exceptions import (
    VBANBadMagicError,
    VBANInvalidConfigurationError,
    VBANInvalidHeaderError,
    VBANInvalidPacketAttributeError,
)
from .fields import (
    AudioFormat,
    Codec,
    DataRateValue,
    FormatValue,
    Protocol,
    data_rate_type_for,
    format_type_for,
    resolve_codec,
    resolve_data_rate,
    resolve_format,
    resolve_protocol,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Header Constants
# =============================================================================


HEADER_SIZE = 28
HEADER_MAGIC = b"VBAN"

PROTOCOL_BIT_MASK = 0b11100000  # Byte 4, bits 5-7: protocol tag
DATA_RATE_BIT_MASK = 0b00011111  # Byte 4, bits 0-4: sample rate / bit rate index

FORMAT_BIT_MASK = 0b00011111  # Byte 7, bits 0-4: format index
CODEC_BIT_MASK = 0b11110000  # Byte 7, bits 4-7: codec (overlaps FORMAT_BIT_MASK at bit 4)

COUNT_MINIMUM = 1  # Samples and channel are stored as value - 1
COUNT_MAXIMUM = 256

STREAM_NAME_SIZE = 16
STREAM_NAME_PADDING = b"\x00"

FRAME_COUNTER_MAXIMUM = 0xFFFFFFFF

_HEADER_STRUCT = struct.Struct(">4sBBBB16sI")

# =============================================================================
# Helper functions
# =============================================================================


def normalize_stream_name(stream_name: str) -> str:
    """Return stream_name as it will read back after a trip over the wire.

    Non-ASCII characters become '?', the name is truncated to 16 bytes and
    trailing NUL padding is dropped.
    """
    raw = stream_name.encode("ascii", errors="replace")[:STREAM_NAME_SIZE]
    return raw.rstrip(STREAM_NAME_PADDING).decode("ascii")


def check_header_fields(
    protocol: Protocol,
    data_rate: DataRateValue,
    samples: int,
    channel: int,
    format: FormatValue,
    codec: Codec,
) -> None:
    """Validate a set of header fields against each other.

    Raises:
        VBANUnsupportedProtocolError: If protocol is SERVICE
        VBANInvalidConfigurationError: If a field is out of range or belongs
            to a different protocol
    """
    if not isinstance(protocol, Protocol):
        raise VBANInvalidConfigurationError(f"Protocol must be a Protocol member, got {protocol!r}")

    data_rate_type = data_rate_type_for(protocol)
    if not isinstance(data_rate, data_rate_type):
        raise VBANInvalidConfigurationError(
            f"{protocol.name} requires a {data_rate_type.__name__} data rate, got {data_rate!r}"
        )

    format_type = format_type_for(protocol)
    if not isinstance(format, format_type):
        raise VBANInvalidConfigurationError(f"{protocol.name} requires a {format_type.__name__} format, got {format!r}")

    if not isinstance(codec, Codec):
        raise VBANInvalidConfigurationError(f"Codec must be a Codec member, got {codec!r}")

    for name, count in (("samples", samples), ("channel", channel)):
        if not isinstance(count, int) or isinstance(count, bool):
            raise VBANInvalidConfigurationError(f"{name} must be an integer, got {count!r}")

        if not COUNT_MINIMUM <= count <= COUNT_MAXIMUM:
            raise VBANInvalidConfigurationError(
                f"{name} must be in range [{COUNT_MINIMUM}, {COUNT_MAXIMUM}], got {count}"
            )


# =============================================================================
# VBANHeader
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class VBANHeader:
    """Decoded form of the 28 byte VBAN header.

    Instances are validated on construction and never change afterwards.
    Encoding a header and decoding the result yields an equal header, as long
    as neither format nor codec uses bit 4 of byte 7.

    Attributes:
        protocol: Sub-protocol tag (AUDIO, SERIAL or TEXT)
        data_rate: SampleRate for AUDIO, BitsPerSecond for SERIAL and TEXT
        samples: Samples per frame (AUDIO) in range 1-256
        channel: Channel count (AUDIO) or channel index in range 1-256
        format: AudioFormat, Format or CommandFormat depending on protocol
        codec: Payload codec
        stream_name: ASCII stream name, at most 16 bytes
        frame: Frame counter, 0 to 2**32 - 1
    """

    protocol: Protocol
    data_rate: DataRateValue
    samples: int
    channel: int
    format: FormatValue
    codec: Codec = Codec.PCM
    stream_name: str = ""
    frame: int = 0

    def __post_init__(self) -> None:
        check_header_fields(self.protocol, self.data_rate, self.samples, self.channel, self.format, self.codec)

        if not isinstance(self.frame, int) or not 0 <= self.frame <= FRAME_COUNTER_MAXIMUM:
            raise VBANInvalidConfigurationError(f"Frame counter out of range: {self.frame}")

        object.__setattr__(self, "stream_name", normalize_stream_name(self.stream_name))

    def to_bytes(self) -> bytes:
        return encode_header(self)

    def __bytes__(self) -> bytes:
        return encode_header(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        return cls(**_decode_fields(data))

    def payload_size(self) -> int | None:
        """Expected payload size of an uncompressed AUDIO frame.

        Returns:
            samples * channel * bytes per sample for AUDIO/PCM headers with a
            byte aligned format, otherwise None
        """
        if self.protocol is not Protocol.AUDIO or self.codec is not Codec.PCM:
            return None

        sample_size = cast(AudioFormat, self.format).sample_size
        if sample_size is None:
            return None

        return self.samples * self.channel * sample_size


# =============================================================================
# Encoding / decoding
# =============================================================================


def encode_header(header: VBANHeader) -> bytes:
    """Pack a header into its 28 byte wire form."""
    return _HEADER_STRUCT.pack(
        HEADER_MAGIC,
        header.protocol | header.data_rate,
        header.samples - 1,
        header.channel - 1,
        header.format | header.codec,
        header.stream_name.encode("ascii"),  # struct pads with NUL bytes
        header.frame,
    )


def decode_header(data: bytes) -> VBANHeader:
    """Unpack a 28 byte header.

    Each step is a hard gate; the first failing check raises.

    Args:
        data: Exactly HEADER_SIZE bytes

    Returns:
        The decoded header

    Raises:
        VBANInvalidHeaderError: If data is not exactly 28 bytes long
        VBANBadMagicError: If data does not start with 'VBAN'
        VBANUnsupportedProtocolError: If the protocol tag is SERVICE
        VBANInvalidPacketAttributeError: If protocol, data rate, format,
            codec or stream name hold an unknown value
    """
    return VBANHeader(**_decode_fields(data))


def _decode_fields(data: bytes) -> dict[str, object]:
    if len(data) != HEADER_SIZE:
        raise VBANInvalidHeaderError(f"Header must be exactly {HEADER_SIZE} bytes long, got {len(data)}")

    magic, rate_byte, samples_byte, channel_byte, format_byte, name_bytes, frame = _HEADER_STRUCT.unpack(data)

    if magic != HEADER_MAGIC:
        logger.debug("Rejected header with magic %r", magic)
        raise VBANBadMagicError(f"Invalid packet head: first bytes must be 'VBAN' [rcv={magic!r}]")

    protocol = resolve_protocol(rate_byte & PROTOCOL_BIT_MASK)
    data_rate = resolve_data_rate(protocol, rate_byte & DATA_RATE_BIT_MASK)

    # Byte range bounds both counts to 1-256
    samples = samples_byte + 1
    channel = channel_byte + 1

    format = resolve_format(protocol, format_byte & FORMAT_BIT_MASK)
    codec = resolve_codec(format_byte & CODEC_BIT_MASK)

    try:
        stream_name = name_bytes.rstrip(STREAM_NAME_PADDING).decode("ascii")
    except UnicodeDecodeError:
        raise VBANInvalidPacketAttributeError("stream_name", name_bytes) from None

    return {
        "protocol": protocol,
        "data_rate": data_rate,
        "samples": samples,
        "channel": channel,
        "format": format,
        "codec": codec,
        "stream_name": stream_name,
        "frame": frame,
    }
