# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Custom exceptions for the pysioparser codec.

All exceptions inherit from SioParserError, making it easy to catch every
codec failure with a single except clause:

    try:
        decoder.add_with_binary(header)
    except SioParserError as e:
        print(f"Bad packet: {e}")

The one malformed input that does NOT raise is an unknown packet type digit:
it is decoded into an ErrorPacket carrying "parser error" so that higher
layers can route it like any other packet.
"""

from __future__ import annotations

from typing import Any


class SioParserError(Exception):
    """
    Base exception for all pysioparser errors.

    All codec exceptions inherit from this class, allowing you to catch
    every parser-related error with a single except clause.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        self.hint = hint
        if hint:
            message = f"{message}\n\n  Hint: {hint}"
        super().__init__(message)


class EncodeError(SioParserError):
    """
    Raised when a packet cannot be encoded.

    Common causes:
    - Payload holds values that are not JSON serializable
    - Binary data in a packet type that cannot carry attachments
    """


class DecodeError(SioParserError):
    """Base exception for header decoding errors."""

    def __init__(self, message: str, encoded: str | None = None, *, hint: str | None = None) -> None:
        self.encoded = encoded
        super().__init__(message, hint=hint)


class IllegalAttachmentsError(DecodeError):
    """
    Raised when the attachment count segment of a binary header is invalid.

    This happens when:
    - The digits before '-' are missing or not all decimal digits
    - The '-' separator is missing
    - The count exceeds the configured maximum
    """

    def __init__(self, encoded: str, reason: str = "Illegal attachments") -> None:
        super().__init__(
            reason,
            encoded,
            hint="Binary packets must start with '<type><count>-', e.g. '51-'",
        )


class InvalidPayloadError(DecodeError):
    """Raised when the JSON remainder of a header cannot be parsed."""

    def __init__(self, encoded: str, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid payload: {detail}", encoded)


class InvalidAttachmentError(DecodeError):
    """Raised when a base64-tagged attachment does not hold valid base64 text."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(
            f"Invalid attachment: {detail}",
            hint="Send raw bytes, or set DecoderConfig(decode_base64=False) to keep tagged buffers as-is",
        )


class UnknownInputError(SioParserError):
    """
    Raised when an entry point receives the wrong kind of input.

    String entry points (add, add_with_binary) only accept str, and
    add_binary only accepts bytes-like or base64-tagged data.
    """

    def __init__(self, received: Any) -> None:
        self.received = received
        super().__init__(f"Unknown type: {type(received).__name__}")


class ReconstructionError(SioParserError):
    """
    Raised when binary data arrives out of sequence.

    Either a buffer was delivered with no binary header outstanding, or a
    second binary header arrived before the first one got all its
    attachments. Both indicate a transport or caller bug.
    """

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            hint="Use one Decoder per stream and feed each binary header's attachments in order",
        )


class PlaceholderError(SioParserError):
    """
    Raised when a placeholder references a buffer that does not exist.

    The declared attachment count and the placeholders in the payload
    disagree.
    """

    def __init__(self, num: Any, available: int) -> None:
        self.num = num
        self.available = available
        super().__init__(f"Placeholder {num!r} out of range ({available} buffers received)")
