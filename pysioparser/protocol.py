# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Socket.IO packet header grammar.

Header Format:
    <type>[<attachments>-][<nsp>,][<id>][<json data>]

Fields:
    - type (1 digit): PacketType value 0-6
    - attachments: Buffer count followed by '-', binary types only
    - nsp: Namespace starting with '/', omitted when it is '/'.
      A ',' separates it from a following id or payload.
    - id: Decimal acknowledgement id
    - json data: Remainder of the string, a single JSON value

Examples:
    2["hello",1]                 event, default namespace
    0/admin,{"token":"abc"}      connect to /admin with auth data
    3,4{"a":1}                   ack with id 4
    51-["x",{"_placeholder":true,"num":0}]
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from .exceptions import DecodeError, EncodeError, IllegalAttachmentsError, InvalidPayloadError
from .models import EncoderConfig
from .types import DEFAULT_NAMESPACE, BinaryPacket, ErrorPacket, Packet, PacketType, packet_for

logger = logging.getLogger(__name__)

PARSER_ERROR: str = "parser error"
ATTACHMENTS_SEPARATOR: str = "-"
FIELD_SEPARATOR: str = ","

_DIGITS = frozenset("0123456789")
_TYPE_DIGITS = {str(t.value): t for t in PacketType}


def encode_as_string(packet: Packet, config: EncoderConfig | None = None) -> str:
    """
    Encode a packet as a single header string.

    Args:
        packet: Packet to encode. Binary payloads must already hold
            placeholders instead of buffers.
        config: Optional JSON settings.

    Returns:
        Encoded header.

    Raises:
        EncodeError: If the payload is not JSON serializable.
    """
    config = config or EncoderConfig()
    parts = [str(int(packet.type))]

    if isinstance(packet, BinaryPacket):
        parts.append(str(packet.attachments))
        parts.append(ATTACHMENTS_SEPARATOR)

    # namespace is only written when it's not the default, and the ','
    # is only owed if another field follows
    owes_separator = False
    if packet.nsp and packet.nsp != DEFAULT_NAMESPACE:
        parts.append(packet.nsp)
        owes_separator = True

    if packet.id is not None:
        if owes_separator:
            parts.append(FIELD_SEPARATOR)
            owes_separator = False
        parts.append(str(packet.id))

    if packet.data is not None:
        if owes_separator:
            parts.append(FIELD_SEPARATOR)
        try:
            parts.append(
                json.dumps(
                    packet.data,
                    separators=(",", ":"),
                    ensure_ascii=config.ensure_ascii,
                    default=config.json_default,
                )
            )
        except (TypeError, ValueError) as e:
            raise EncodeError(
                f"Payload is not JSON serializable: {e}",
                hint="Use Encoder.encode_binary() for payloads with binary data",
            ) from e

    return "".join(parts)


def _scan_digits(encoded: str, start: int) -> int:
    """Return the index of the first non-digit at or after start."""
    end = start
    while end < len(encoded) and encoded[end] in _DIGITS:
        end += 1
    return end


def decode_string(
    encoded: str,
    *,
    max_attachments: int | None = None,
    object_hook: Callable[[dict[str, Any]], Any] | None = None,
) -> Packet:
    """
    Decode a header string into a packet.

    An unknown type digit is not an error: it yields
    ErrorPacket(data="parser error") so the caller can route it.

    Args:
        encoded: Header string.
        max_attachments: Reject binary headers announcing more buffers.
        object_hook: Passed to json.loads for the payload.

    Returns:
        Decoded packet. Binary packets still hold placeholders.

    Raises:
        IllegalAttachmentsError: If the attachment segment is malformed.
        DecodeError: If the id is out of range.
        InvalidPayloadError: If the payload is not valid JSON.
    """
    packet_type = _TYPE_DIGITS.get(encoded[:1])
    if packet_type is None:
        logger.debug("Unknown packet type in %r", encoded[:1])
        return ErrorPacket(data=PARSER_ERROR)

    fields: dict[str, Any] = {}
    cursor = 1

    if packet_type.is_binary:
        separator = encoded.find(ATTACHMENTS_SEPARATOR, cursor)
        count = encoded[cursor:separator] if separator != -1 else ""
        if not count or _scan_digits(count, 0) != len(count):
            raise IllegalAttachmentsError(encoded)
        try:
            attachments = int(count)
        except ValueError as e:
            raise IllegalAttachmentsError(encoded, f"Illegal attachments: {e}") from e
        if max_attachments is not None and attachments > max_attachments:
            raise IllegalAttachmentsError(
                encoded, f"Too many attachments: {attachments} > {max_attachments}"
            )
        fields["attachments"] = attachments
        cursor = separator + 1

    if encoded.startswith("/", cursor):
        end = encoded.find(FIELD_SEPARATOR, cursor)
        if end == -1:
            fields["nsp"] = encoded[cursor:]
            cursor = len(encoded)
        else:
            fields["nsp"] = encoded[cursor:end]
            cursor = end + 1
    else:
        fields["nsp"] = DEFAULT_NAMESPACE
        if encoded.startswith(FIELD_SEPARATOR, cursor):
            cursor += 1

    id_end = _scan_digits(encoded, cursor)
    if id_end > cursor:
        try:
            fields["id"] = int(encoded[cursor:id_end])
        except ValueError as e:
            raise DecodeError(f"Illegal id: {e}", encoded) from e
        cursor = id_end

    if cursor < len(encoded):
        try:
            fields["data"] = json.loads(encoded[cursor:], object_hook=object_hook)
        except (ValueError, RecursionError) as e:
            raise InvalidPayloadError(encoded, str(e)) from e

    return packet_for(packet_type, **fields)
