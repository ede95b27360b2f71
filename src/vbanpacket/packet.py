"""VBAN packet envelope: a header plus an optional payload."""

from __future__ import annotations

import logging
from typing import Self

from .exceptions import VBANAlreadyHasDataError, VBANInvalidHeaderError, VBANPayloadTooLargeError
from .protocol.header import HEADER_SIZE, VBANHeader, decode_header

logger = logging.getLogger(__name__)

MAX_SIZE = 1436  # Header + payload, fits a UDP datagram on common MTUs
MAX_PAYLOAD_SIZE = MAX_SIZE - HEADER_SIZE


class VBANPacket:
    """Structural representation of a VBAN packet.

    A packet starts out with its header only. Payload can be attached once,
    after which the packet is final.

    Attributes:
        head: The packet header
    """

    MAX_SIZE = MAX_SIZE
    MAX_PAYLOAD_SIZE = MAX_PAYLOAD_SIZE

    # Public attributes
    head: VBANHeader

    # Private attributes
    _head_bytes: bytes
    _data: bytes
    _has_data: bool

    def __init__(self, head: VBANHeader, data: bytes | None = None) -> None:
        """Initialize packet.

        Args:
            head: Header to attach to the packet
            data: Optional payload, attached right away

        Raises:
            VBANPayloadTooLargeError: If data exceeds MAX_PAYLOAD_SIZE
        """
        self.head = head

        self._head_bytes = head.to_bytes()
        self._data = b""
        self._has_data = False

        if data is not None:
            self.attach_data(data)

    @classmethod
    def create(cls, head: VBANHeader) -> Self:
        """Create a packet with header bytes only."""
        return cls(head)

    @property
    def has_data(self) -> bool:
        return self._has_data

    def attach_data(self, data: bytes) -> Self:
        """Attach payload to this packet.

        Args:
            data: Payload bytes

        Returns:
            This packet

        Raises:
            VBANAlreadyHasDataError: If payload was attached before
            VBANPayloadTooLargeError: If the packet would exceed MAX_SIZE bytes
        """
        if self._has_data:
            raise VBANAlreadyHasDataError("Packet already has data attached")

        if len(data) > MAX_PAYLOAD_SIZE:
            raise VBANPayloadTooLargeError(
                f"Data is too large to be sent: {len(data)} bytes, must be at most {MAX_PAYLOAD_SIZE}"
            )

        self._data = bytes(data)
        self._has_data = True

        return self

    @property
    def payload(self) -> bytes:
        """Payload portion of the packet (empty if none attached)."""
        return self._data

    def to_bytes(self) -> bytes:
        """Header followed by payload."""
        return self._head_bytes + self._data

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __len__(self) -> int:
        return HEADER_SIZE + len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(head={self.head!r}, payload_size={len(self._data)})"

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        return cls(decode_header(_split_head(data)), data[HEADER_SIZE:])


def decode_packet(data: bytes) -> VBANPacket:
    """Split wire bytes into header and payload.

    The first 28 bytes go to the header codec, the rest is the payload.

    Raises:
        VBANInvalidHeaderError: If data is shorter than a header, or any
            header decoding failure (see decode_header)
        VBANPayloadTooLargeError: If data is longer than MAX_SIZE
    """
    return VBANPacket.from_bytes(data)


def _split_head(data: bytes) -> bytes:
    if len(data) < HEADER_SIZE:
        logger.debug("Rejected %d byte packet, shorter than header", len(data))
        raise VBANInvalidHeaderError(f"Packet must be at least {HEADER_SIZE} bytes long, got {len(data)}")

    return data[:HEADER_SIZE]
