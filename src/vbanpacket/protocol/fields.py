"""Field registry for the VBAN packet header.

This module holds the closed sets of values that may appear in a VBAN header.
It provides:

Classes:
    - Protocol: Sub-protocol tag (3 high bits of header byte 4)
    - SampleRate: Sample rate index for AUDIO streams (5 low bits of byte 4)
    - BitsPerSecond: Bit rate index for SERIAL and TEXT streams (5 low bits of byte 4)
    - AudioFormat: Sample data type for AUDIO streams (5 low bits of byte 7)
    - Format: Data type for SERIAL streams (5 low bits of byte 7)
    - CommandFormat: Stream type for TEXT streams (5 low bits of byte 7)
    - Codec: Payload codec (4 high bits of byte 7)

The meaning of the data rate and format fields depends on the protocol. The
protocol descriptor table below selects which enum applies, so a header is a
tagged union: Protocol is the tag, DataRateValue and FormatValue the payload.

Reference: VBAN Specification, revision 10
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from functools import lru_cache
from typing import Self

from ..exceptions import VBANInvalidPacketAttributeError, VBANUnsupportedProtocolError

# =============================================================================
# Rate tables (index -> rate)
# =============================================================================


_SAMPLE_RATE_HERTZ: tuple[int, ...] = (
    6000, 12000, 24000, 48000, 96000, 192000, 384000,
    8000, 16000, 32000, 64000, 128000, 256000, 512000,
    11025, 22050, 44100, 88200, 176400, 352800, 705600,
)  # fmt: skip

_BITS_PER_SECOND: tuple[int, ...] = (
    0, 110, 150, 300, 600, 1200, 2400, 4800, 9600, 14400, 19200,
    31250, 38400, 57600, 115200, 128000, 230400, 250000, 256000,
    460800, 921600, 1000000, 1500000, 2000000, 3000000,
)  # fmt: skip

# =============================================================================
# Registry enums
# =============================================================================


class Protocol(IntEnum):
    """VBAN sub-protocol, stored pre-shifted in bits 5-7 of byte 4."""

    AUDIO = 0x00
    SERIAL = 0x20
    TEXT = 0x40
    SERVICE = 0x60


class SampleRate(IntEnum):
    """Sample rate index for AUDIO streams."""

    HZ_6000 = 0
    HZ_12000 = 1
    HZ_24000 = 2
    HZ_48000 = 3
    HZ_96000 = 4
    HZ_192000 = 5
    HZ_384000 = 6
    HZ_8000 = 7
    HZ_16000 = 8
    HZ_32000 = 9
    HZ_64000 = 10
    HZ_128000 = 11
    HZ_256000 = 12
    HZ_512000 = 13
    HZ_11025 = 14
    HZ_22050 = 15
    HZ_44100 = 16
    HZ_88200 = 17
    HZ_176400 = 18
    HZ_352800 = 19
    HZ_705600 = 20

    @property
    def hertz(self) -> int:
        return _SAMPLE_RATE_HERTZ[self.value]

    @classmethod
    def from_hertz(cls, hertz: int) -> Self:
        """Look up the index for a sample rate in Hz.

        Raises:
            ValueError: If the rate is not one of the VBAN sample rates
        """
        try:
            return cls(_SAMPLE_RATE_HERTZ.index(hertz))
        except ValueError:
            raise ValueError(f"{hertz} Hz is not a VBAN sample rate") from None


class BitsPerSecond(IntEnum):
    """Bit rate index for SERIAL and TEXT streams."""

    BPS_0 = 0
    BPS_110 = 1
    BPS_150 = 2
    BPS_300 = 3
    BPS_600 = 4
    BPS_1200 = 5
    BPS_2400 = 6
    BPS_4800 = 7
    BPS_9600 = 8
    BPS_14400 = 9
    BPS_19200 = 10
    BPS_31250 = 11
    BPS_38400 = 12
    BPS_57600 = 13
    BPS_115200 = 14
    BPS_128000 = 15
    BPS_230400 = 16
    BPS_250000 = 17
    BPS_256000 = 18
    BPS_460800 = 19
    BPS_921600 = 20
    BPS_1000000 = 21
    BPS_1500000 = 22
    BPS_2000000 = 23
    BPS_3000000 = 24

    @property
    def bps(self) -> int:
        return _BITS_PER_SECOND[self.value]

    @classmethod
    def from_bps(cls, bps: int) -> Self:
        """Look up the index for a bit rate.

        Raises:
            ValueError: If the rate is not one of the VBAN bit rates
        """
        try:
            return cls(_BITS_PER_SECOND.index(bps))
        except ValueError:
            raise ValueError(f"{bps} bps is not a VBAN bit rate") from None


class AudioFormat(IntEnum):
    """Sample data type of an AUDIO stream."""

    BYTE8 = 0x00
    INT16 = 0x01
    INT24 = 0x02
    INT32 = 0x03
    FLOAT32 = 0x04
    FLOAT64 = 0x05
    BITS12 = 0x06
    BITS10 = 0x07

    @property
    def sample_size(self) -> int | None:
        """Bytes per sample, or None for the packed 12 and 10 bit formats."""
        return _AUDIO_SAMPLE_SIZE[self]


_AUDIO_SAMPLE_SIZE: dict[AudioFormat, int | None] = {
    AudioFormat.BYTE8: 1,
    AudioFormat.INT16: 2,
    AudioFormat.INT24: 3,
    AudioFormat.INT32: 4,
    AudioFormat.FLOAT32: 4,
    AudioFormat.FLOAT64: 8,
    AudioFormat.BITS12: None,
    AudioFormat.BITS10: None,
}


class Format(IntEnum):
    """Data type of a SERIAL stream."""

    BYTE8 = 0x00


class CommandFormat(IntEnum):
    """Stream type of a TEXT stream.

    UTF8 occupies bit 4, which the codec field also reads (see header.py).
    """

    ASCII = 0x00
    UTF8 = 0x10


class Codec(IntEnum):
    """Payload codec, stored pre-shifted in bits 4-7 of byte 7."""

    PCM = 0x00
    VBCA = 0x10
    VBCV = 0x20
    USER = 0xF0


DataRateValue = SampleRate | BitsPerSecond
FormatValue = AudioFormat | Format | CommandFormat

# =============================================================================
# Protocol descriptors
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class _ProtocolDescriptor:
    protocol: Protocol
    data_rate_type: type[SampleRate] | type[BitsPerSecond] | None  # None: unsupported
    format_type: type[AudioFormat] | type[Format] | type[CommandFormat] | None  # None: unsupported


_ProtocolTable: tuple[_ProtocolDescriptor, ...] = (
    _ProtocolDescriptor(
        protocol=Protocol.AUDIO,
        data_rate_type=SampleRate,
        format_type=AudioFormat,
    ),
    _ProtocolDescriptor(
        protocol=Protocol.SERIAL,
        data_rate_type=BitsPerSecond,
        format_type=Format,
    ),
    _ProtocolDescriptor(
        protocol=Protocol.TEXT,
        data_rate_type=BitsPerSecond,
        format_type=CommandFormat,
    ),
    # Recognized on the wire, never encoded or decoded
    _ProtocolDescriptor(
        protocol=Protocol.SERVICE,
        data_rate_type=None,
        format_type=None,
    ),
)


@lru_cache(maxsize=8)
def _find_protocol_descriptor(protocol: Protocol) -> _ProtocolDescriptor:
    for descriptor in _ProtocolTable:
        if descriptor.protocol is protocol:
            return descriptor

    raise RuntimeError(f"Protocol {protocol!r} missing from protocol table")


def _supported_descriptor(protocol: Protocol) -> _ProtocolDescriptor:
    descriptor = _find_protocol_descriptor(protocol)

    if descriptor.data_rate_type is None or descriptor.format_type is None:
        raise VBANUnsupportedProtocolError(f"Unsupported protocol: {protocol.name}")

    return descriptor


# =============================================================================
# Lookup functions
# =============================================================================


def resolve_protocol(tag: int) -> Protocol:
    """Map a pre-shifted protocol tag to a supported Protocol.

    Args:
        tag: Byte 4 masked with the protocol bits

    Returns:
        The matching protocol

    Raises:
        VBANInvalidPacketAttributeError: If the tag is not a known protocol
        VBANUnsupportedProtocolError: If the tag is SERVICE
    """
    try:
        protocol = Protocol(tag)
    except ValueError:
        raise VBANInvalidPacketAttributeError("protocol", tag) from None

    _supported_descriptor(protocol)

    return protocol


def resolve_data_rate(protocol: Protocol, index: int) -> DataRateValue:
    """Resolve a data rate index against the table that applies to protocol.

    Raises:
        VBANInvalidPacketAttributeError: If index is not in the table
        VBANUnsupportedProtocolError: If protocol is SERVICE
    """
    data_rate_type = data_rate_type_for(protocol)

    try:
        return data_rate_type(index)
    except ValueError:
        raise VBANInvalidPacketAttributeError(
            "data_rate", index, f"Invalid {data_rate_type.__name__} index for {protocol.name}: 0x{index:02X}"
        ) from None


def resolve_format(protocol: Protocol, index: int) -> FormatValue:
    """Resolve a format index against the table that applies to protocol.

    Raises:
        VBANInvalidPacketAttributeError: If index is not in the table
        VBANUnsupportedProtocolError: If protocol is SERVICE
    """
    format_type = format_type_for(protocol)

    try:
        return format_type(index)
    except ValueError:
        raise VBANInvalidPacketAttributeError(
            "format", index, f"Invalid {format_type.__name__} for {protocol.name}: 0x{index:02X}"
        ) from None


def resolve_codec(nibble: int) -> Codec:
    """Resolve a pre-shifted codec nibble.

    Raises:
        VBANInvalidPacketAttributeError: If nibble is a reserved codec selector
    """
    try:
        return Codec(nibble)
    except ValueError:
        raise VBANInvalidPacketAttributeError("codec", nibble, f"Invalid Codec selector: 0x{nibble:02X}") from None


def data_rate_type_for(protocol: Protocol) -> type[SampleRate] | type[BitsPerSecond]:
    data_rate_type = _find_protocol_descriptor(protocol).data_rate_type
    if data_rate_type is None:
        raise VBANUnsupportedProtocolError(f"Unsupported protocol: {protocol.name}")
    return data_rate_type


def format_type_for(protocol: Protocol) -> type[AudioFormat] | type[Format] | type[CommandFormat]:
    format_type = _find_protocol_descriptor(protocol).format_type
    if format_type is None:
        raise VBANUnsupportedProtocolError(f"Unsupported protocol: {protocol.name}")
    return format_type
