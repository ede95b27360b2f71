"""Header and packet factories with per-protocol defaults.

Classes:
    - FactoryConfig: Immutable per-stream header configuration
    - FactoryBuilder: Fluent builder seeded with protocol defaults
    - PacketFactoryBuilder: FactoryBuilder that builds a PacketFactory
    - HeaderFactory: Produces headers with a monotonic frame counter
    - PacketFactory: Produces packets around headers from a HeaderFactory

Default configuration per protocol:

    Protocol  Data rate    Samples  Channel  Format          Stream name
    AUDIO     48000 Hz     256      2        INT16           "Stream1"
    SERIAL    256000 bps   1        1        BYTE8           "MIDI1"
    TEXT      256000 bps   1        1        ASCII           "Command1"
    SERVICE   unsupported
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Self

from .exceptions import VBANMissingRequiredFieldError, VBANUnsupportedProtocolError
from .packet import VBANPacket
from .protocol.fields import (
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
from .protocol.header import FRAME_COUNTER_MAXIMUM, VBANHeader, check_header_fields, normalize_stream_name

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, kw_only=True)
class FactoryConfig:
    """Header fields shared by every header a factory creates.

    Validated on construction with the same rules as VBANHeader.
    """

    protocol: Protocol
    data_rate: DataRateValue
    samples: int
    channel: int
    format: FormatValue
    codec: Codec = Codec.PCM
    stream_name: str = ""

    def __post_init__(self) -> None:
        check_header_fields(self.protocol, self.data_rate, self.samples, self.channel, self.format, self.codec)

        object.__setattr__(self, "stream_name", normalize_stream_name(self.stream_name))


_DefaultsTable: dict[Protocol, FactoryConfig] = {
    Protocol.AUDIO: FactoryConfig(
        protocol=Protocol.AUDIO,
        data_rate=SampleRate.HZ_48000,
        samples=256,
        channel=2,
        format=AudioFormat.INT16,
        stream_name="Stream1",
    ),
    Protocol.SERIAL: FactoryConfig(
        protocol=Protocol.SERIAL,
        data_rate=BitsPerSecond.BPS_256000,
        samples=1,
        channel=1,
        format=Format.BYTE8,
        stream_name="MIDI1",
    ),
    Protocol.TEXT: FactoryConfig(
        protocol=Protocol.TEXT,
        data_rate=BitsPerSecond.BPS_256000,
        samples=1,
        channel=1,
        format=CommandFormat.ASCII,
        stream_name="Command1",
    ),
}


def default_config(protocol: Protocol) -> FactoryConfig:
    """Return the default configuration for protocol.

    Raises:
        VBANUnsupportedProtocolError: If protocol has no defaults (SERVICE)
    """
    try:
        return _DefaultsTable[protocol]
    except KeyError:
        raise VBANUnsupportedProtocolError(f"Unsupported protocol: {protocol!r}") from None


# =============================================================================
# Builder
# =============================================================================


class FactoryBuilder:
    """Builds a HeaderFactory, starting from the protocol defaults.

    Setting the protocol (in the constructor or via set_protocol) loads that
    protocol's defaults, replacing every field set before. All other fields
    are optional overrides.

    Example:
        factory = (
            FactoryBuilder(Protocol.AUDIO)
            .set_data_rate(SampleRate.HZ_44100)
            .set_stream_name("Mic")
            .build()
        )
    """

    protocol: Protocol | None
    data_rate: DataRateValue | None
    samples: int | None
    channel: int | None
    format: FormatValue | None
    codec: Codec
    stream_name: str | None

    def __init__(self, protocol: Protocol | None = None) -> None:
        """Initialize builder.

        Raises:
            VBANUnsupportedProtocolError: If protocol is SERVICE
        """
        self.protocol = None
        self.data_rate = None
        self.samples = None
        self.channel = None
        self.format = None
        self.codec = Codec.PCM
        self.stream_name = None

        if protocol is not None:
            self.set_protocol(protocol)

    def set_protocol(self, protocol: Protocol) -> Self:
        defaults = default_config(protocol)

        self.protocol = defaults.protocol
        self.data_rate = defaults.data_rate
        self.samples = defaults.samples
        self.channel = defaults.channel
        self.format = defaults.format
        self.codec = defaults.codec
        self.stream_name = defaults.stream_name

        return self

    def set_data_rate(self, data_rate: DataRateValue) -> Self:
        self.data_rate = data_rate
        return self

    def set_samples(self, samples: int) -> Self:
        """Set samples per frame (1-256)."""
        self.samples = samples
        return self

    def set_channel(self, channel: int) -> Self:
        """Set channel count (1-256)."""
        self.channel = channel
        return self

    def set_format(self, format: FormatValue) -> Self:
        self.format = format
        return self

    def set_codec(self, codec: Codec) -> Self:
        self.codec = codec
        return self

    def set_stream_name(self, stream_name: str) -> Self:
        self.stream_name = stream_name
        return self

    def build(self) -> HeaderFactory:
        """Validate the configuration and create a header factory.

        Raises:
            VBANMissingRequiredFieldError: If no protocol was set
            VBANInvalidConfigurationError: If a field is out of range or does
                not belong to the protocol
        """
        return HeaderFactory(self.build_config())

    def build_config(self) -> FactoryConfig:
        """Validate the builder fields and return them as a FactoryConfig.

        Raises:
            VBANMissingRequiredFieldError: If no protocol was set
            VBANInvalidConfigurationError: If a field is out of range or does
                not belong to the protocol
        """
        if self.protocol is None:
            raise VBANMissingRequiredFieldError("protocol")

        # Set together with the protocol, only missing if reset by hand
        for field in ("data_rate", "samples", "channel", "format", "stream_name"):
            if getattr(self, field) is None:
                raise VBANMissingRequiredFieldError(field)

        return FactoryConfig(
            protocol=self.protocol,
            data_rate=self.data_rate,  # type: ignore[arg-type]
            samples=self.samples,  # type: ignore[arg-type]
            channel=self.channel,  # type: ignore[arg-type]
            format=self.format,  # type: ignore[arg-type]
            codec=self.codec,
            stream_name=self.stream_name,  # type: ignore[arg-type]
        )


# =============================================================================
# Factories
# =============================================================================


class HeaderFactory:
    """Creates headers for one stream.

    The configuration is fixed at construction. Each call to create() stamps
    the current frame counter into the header and advances it, wrapping after
    2**32 - 1. create() is safe to call from several threads: no two calls
    get the same counter value.
    """

    config: FactoryConfig

    _counter: int
    _lock: threading.Lock

    def __init__(self, config: FactoryConfig) -> None:
        self.config = config

        self._counter = 0
        self._lock = threading.Lock()

        logger.debug("Created %s header factory for stream %r", config.protocol.name, config.stream_name)

    @staticmethod
    def builder(protocol: Protocol | None = None) -> FactoryBuilder:
        return FactoryBuilder(protocol)

    @staticmethod
    def protocol_default(protocol: Protocol) -> HeaderFactory:
        return FactoryBuilder(protocol).build()

    def create(self) -> VBANHeader:
        with self._lock:
            frame = self._counter
            self._counter = (frame + 1) & FRAME_COUNTER_MAXIMUM

        config = self.config
        return VBANHeader(
            protocol=config.protocol,
            data_rate=config.data_rate,
            samples=config.samples,
            channel=config.channel,
            format=config.format,
            codec=config.codec,
            stream_name=config.stream_name,
            frame=frame,
        )

    def counter(self) -> int:
        """Frame counter value the next header will carry."""
        with self._lock:
            return self._counter


class PacketFactory:
    """Creates packets, each around a fresh header from a HeaderFactory."""

    header_factory: HeaderFactory

    def __init__(self, header_factory: HeaderFactory) -> None:
        self.header_factory = header_factory

    @staticmethod
    def builder(protocol: Protocol | None = None) -> PacketFactoryBuilder:
        return PacketFactoryBuilder(protocol)

    @classmethod
    def protocol_default(cls, protocol: Protocol) -> PacketFactory:
        return cls(HeaderFactory.protocol_default(protocol))

    @property
    def config(self) -> FactoryConfig:
        return self.header_factory.config

    def create(self, data: bytes | None = None) -> VBANPacket:
        """Create a packet, optionally with payload attached.

        Raises:
            VBANPayloadTooLargeError: If data exceeds the payload limit
        """
        return VBANPacket(self.header_factory.create(), data)

    def counter(self) -> int:
        return self.header_factory.counter()


class PacketFactoryBuilder(FactoryBuilder):
    """FactoryBuilder whose build() returns a PacketFactory."""

    def build(self) -> PacketFactory:  # type: ignore[override]
        return PacketFactory(HeaderFactory(self.build_config()))
