"""Shared test fixtures for pyVBANPacket tests."""

from __future__ import annotations

import pytest


@pytest.fixture
def sample_vban_headers() -> dict[str, bytes]:
    """Default headers (frame 0) for each supported protocol, as sent on the wire."""
    return {
        "audio": b"VBAN"
        + bytes([0x03, 0xFF, 0x01, 0x01])  # AUDIO|48000 Hz, 256 samples, 2 channels, INT16|PCM
        + b"Stream1".ljust(16, b"\x00")
        + b"\x00\x00\x00\x00",
        "serial": b"VBAN"
        + bytes([0x32, 0x00, 0x00, 0x00])  # SERIAL|256000 bps, 1, 1, BYTE8|PCM
        + b"MIDI1".ljust(16, b"\x00")
        + b"\x00\x00\x00\x00",
        "text": b"VBAN"
        + bytes([0x52, 0x00, 0x00, 0x00])  # TEXT|256000 bps, 1, 1, ASCII|PCM
        + b"Command1".ljust(16, b"\x00")
        + b"\x00\x00\x00\x00",
    }
