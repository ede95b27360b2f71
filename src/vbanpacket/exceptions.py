"""VBAN exception classes."""

from __future__ import annotations

from typing import Any


class VBANError(Exception):
    """Base exception for all VBAN errors."""


class VBANInvalidHeaderError(VBANError):
    """Header bytes could not be decoded."""


class VBANBadMagicError(VBANInvalidHeaderError):
    """Header does not start with the 'VBAN' magic bytes."""


class VBANInvalidPacketAttributeError(VBANInvalidHeaderError):
    """Header field holds a value outside its closed set (data rate, format, codec, ...)."""

    attribute: str
    value: Any

    def __init__(self, attribute: str, value: Any, message: str | None = None) -> None:
        self.attribute = attribute
        self.value = value

        if message is None:
            message = f"Invalid {attribute}: 0x{value:02X}" if isinstance(value, int) else f"Invalid {attribute}: {value!r}"

        super().__init__(message)


class VBANUnsupportedProtocolError(VBANError):
    """Protocol is recognized but not supported (SERVICE)."""


class VBANInvalidConfigurationError(VBANError):
    """Header or factory configuration is out of range or inconsistent."""


class VBANMissingRequiredFieldError(VBANInvalidConfigurationError):
    """Builder was asked to build before a required field was set."""

    field: str

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Required field '{field}' is not set")


class VBANPacketError(VBANError):
    """Misuse of the packet envelope."""


class VBANAlreadyHasDataError(VBANPacketError):
    """Payload was already attached to the packet."""


class VBANPayloadTooLargeError(VBANPacketError):
    """Payload would push the packet past its maximum size."""
