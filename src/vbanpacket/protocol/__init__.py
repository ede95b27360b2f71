"""Protocol layer components for VBAN header encoding/decoding.

This package contains the field registry and the header codec.

Reference: VBAN Specification, revision 10
"""

from .fields import (
    AudioFormat,
    BitsPerSecond,
    Codec,
    CommandFormat,
    DataRateValue,
    Format,
    FormatValue,
    Protocol,
    SampleRate,
)
from .header import (
    HEADER_SIZE,
    VBANHeader,
    decode_header,
    encode_header,
)

__all__ = [
    # Field registry
    "AudioFormat",
    "BitsPerSecond",
    "Codec",
    "CommandFormat",
    "DataRateValue",
    "Format",
    "FormatValue",
    "Protocol",
    "SampleRate",
    # Header codec
    "HEADER_SIZE",
    "VBANHeader",
    "decode_header",
    "encode_header",
]
