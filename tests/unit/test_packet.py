"""Unit tests for the VBANPacket envelope."""

import pytest

from src.vbanpacket.exceptions import (
    VBANAlreadyHasDataError,
    VBANBadMagicError,
    VBANInvalidHeaderError,
    VBANPayloadTooLargeError,
)
from src.vbanpacket.packet import MAX_PAYLOAD_SIZE, MAX_SIZE, VBANPacket, decode_packet
from src.vbanpacket.protocol.fields import AudioFormat, Codec, Protocol, SampleRate
from src.vbanpacket.protocol.header import VBANHeader

# =============================================================================
# Test Constants - Duplicated from src for test isolation
# =============================================================================

TEST_HEADER_SIZE = 28
TEST_MAX_SIZE = 1436
TEST_MAX_PAYLOAD_SIZE = 1408


@pytest.fixture
def audio_header() -> VBANHeader:
    return VBANHeader(
        protocol=Protocol.AUDIO,
        data_rate=SampleRate.HZ_44100,
        samples=64,
        channel=2,
        format=AudioFormat.INT16,
        codec=Codec.PCM,
        stream_name="Stream1",
        frame=7,
    )


@pytest.mark.unit
class TestPacketConstants:
    def test_sizes(self) -> None:
        assert MAX_SIZE == TEST_MAX_SIZE
        assert MAX_PAYLOAD_SIZE == TEST_MAX_PAYLOAD_SIZE
        assert VBANPacket.MAX_PAYLOAD_SIZE == TEST_MAX_SIZE - TEST_HEADER_SIZE


@pytest.mark.unit
class TestPacketCreate:
    """Tests for creating packets and attaching payload."""

    def test_create_has_header_only(self, audio_header: VBANHeader) -> None:
        packet = VBANPacket.create(audio_header)

        assert packet.head is audio_header
        assert not packet.has_data
        assert packet.payload == b""
        assert packet.to_bytes() == audio_header.to_bytes()
        assert len(packet) == TEST_HEADER_SIZE

    def test_attach_data(self, audio_header: VBANHeader) -> None:
        payload = bytes(range(256))
        packet = VBANPacket.create(audio_header).attach_data(payload)

        assert packet.has_data
        assert packet.payload == payload
        assert bytes(packet) == audio_header.to_bytes() + payload
        assert len(packet) == TEST_HEADER_SIZE + 256

    def test_attach_data_in_constructor(self, audio_header: VBANHeader) -> None:
        packet = VBANPacket(audio_header, b"\x01\x02")

        assert packet.has_data
        assert packet.payload == b"\x01\x02"

    def test_attach_maximum_payload(self, audio_header: VBANHeader) -> None:
        packet = VBANPacket.create(audio_header).attach_data(b"\xaa" * TEST_MAX_PAYLOAD_SIZE)

        assert len(packet.to_bytes()) == TEST_MAX_SIZE
        assert len(packet.payload) == TEST_MAX_PAYLOAD_SIZE

    def test_attach_too_large_payload(self, audio_header: VBANHeader) -> None:
        packet = VBANPacket.create(audio_header)

        with pytest.raises(VBANPayloadTooLargeError, match="at most 1408"):
            packet.attach_data(b"\xaa" * (TEST_MAX_PAYLOAD_SIZE + 1))

        assert not packet.has_data
        assert packet.payload == b""

    def test_constructor_too_large_payload(self, audio_header: VBANHeader) -> None:
        with pytest.raises(VBANPayloadTooLargeError):
            VBANPacket(audio_header, bytes(TEST_MAX_SIZE))

    def test_attach_twice(self, audio_header: VBANHeader) -> None:
        packet = VBANPacket.create(audio_header).attach_data(b"first")

        with pytest.raises(VBANAlreadyHasDataError):
            packet.attach_data(b"second")

        assert packet.payload == b"first"

    def test_attach_empty_counts_as_attached(self, audio_header: VBANHeader) -> None:
        packet = VBANPacket.create(audio_header).attach_data(b"")

        with pytest.raises(VBANAlreadyHasDataError):
            packet.attach_data(b"x")

    def test_attach_bytearray_is_copied(self, audio_header: VBANHeader) -> None:
        buffer = bytearray(b"abc")
        packet = VBANPacket.create(audio_header).attach_data(buffer)
        buffer[0] = ord("z")

        assert packet.payload == b"abc"


@pytest.mark.unit
class TestPacketDecode:
    """Tests for decode_packet / VBANPacket.from_bytes."""

    def test_decode_header_only(self, sample_vban_headers: dict[str, bytes]) -> None:
        packet = decode_packet(sample_vban_headers["audio"])

        assert packet.head.stream_name == "Stream1"
        assert packet.payload == b""
        assert packet.has_data

    def test_decode_keeps_whole_payload(self, sample_vban_headers: dict[str, bytes]) -> None:
        payload = b"\x01\x02\x03\x04"
        packet = VBANPacket.from_bytes(sample_vban_headers["serial"] + payload)

        assert packet.head.protocol is Protocol.SERIAL
        assert packet.payload == payload
        assert packet.to_bytes() == sample_vban_headers["serial"] + payload

    def test_decode_round_trip(self, audio_header: VBANHeader) -> None:
        packet = VBANPacket(audio_header, b"\x10\x20" * 100)
        decoded = decode_packet(packet.to_bytes())

        assert decoded.head == audio_header
        assert decoded.payload == packet.payload

    def test_decode_maximum_size(self, sample_vban_headers: dict[str, bytes]) -> None:
        data = sample_vban_headers["audio"] + bytes(TEST_MAX_PAYLOAD_SIZE)
        assert len(decode_packet(data).payload) == TEST_MAX_PAYLOAD_SIZE

    def test_decode_too_large(self, sample_vban_headers: dict[str, bytes]) -> None:
        data = sample_vban_headers["audio"] + bytes(TEST_MAX_PAYLOAD_SIZE + 1)
        with pytest.raises(VBANPayloadTooLargeError):
            decode_packet(data)

    def test_decode_too_short(self, sample_vban_headers: dict[str, bytes]) -> None:
        with pytest.raises(VBANInvalidHeaderError, match="at least 28 bytes"):
            decode_packet(sample_vban_headers["audio"][:-1])

    def test_decode_propagates_header_errors(self, sample_vban_headers: dict[str, bytes]) -> None:
        with pytest.raises(VBANBadMagicError):
            decode_packet(b"XBAN" + sample_vban_headers["audio"][4:] + b"payload")
