# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Binary attachment handling.

A packet payload may contain binary leaves anywhere inside nested lists and
dicts. Before the payload is written as JSON, every binary leaf is replaced
by a placeholder and moved to a flat list of buffers sent after the header:

    {"file": b"\\x00\\x01"}  ->  {"file": {"_placeholder": true, "num": 0}}
                                + buffers [b"\\x00\\x01"]

Placeholders are numbered in depth-first order. Reconstruction walks the
payload again and swaps each placeholder for buffers[num].

Binary values:
- bytes, bytearray, memoryview
- base64-tagged mappings: {"base64": True, "data": "<base64 text>"}
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from .exceptions import EncodeError, PlaceholderError
from .types import BINARY_COUNTERPARTS, BinaryPacket, Packet, packet_for

PLACEHOLDER_KEY: str = "_placeholder"
PLACEHOLDER_NUM: str = "num"


def is_binary(value: Any) -> bool:
    """Return True for raw buffers and base64-tagged binary mappings."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return True
    return isinstance(value, Mapping) and bool(value.get("base64")) and isinstance(value.get("data"), str)


def to_bytes(value: Any) -> bytes:
    """
    Normalize a binary value to bytes.

    Raises:
        TypeError: If value is not binary.
        ValueError: If a base64-tagged value holds invalid base64 text.
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if is_binary(value):
        try:
            return base64.b64decode(value["data"], validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 attachment: {e}") from e
    raise TypeError(f"Not binary data: {type(value).__name__}")


def has_binary(value: Any) -> bool:
    """Return True if value contains a binary leaf at any depth."""
    if is_binary(value):
        return True
    if isinstance(value, (list, tuple)):
        return any(has_binary(item) for item in value)
    if isinstance(value, Mapping):
        return any(has_binary(item) for item in value.values())
    return False


def make_placeholder(num: int) -> dict[str, Any]:
    """Build the placeholder for buffer number num."""
    return {PLACEHOLDER_KEY: True, PLACEHOLDER_NUM: num}


def is_placeholder(value: Any) -> bool:
    return isinstance(value, Mapping) and value.get(PLACEHOLDER_KEY) is True


def _deconstruct(value: Any, buffers: list[Any]) -> Any:
    if is_binary(value):
        placeholder = make_placeholder(len(buffers))
        buffers.append(value)
        return placeholder
    if isinstance(value, (list, tuple)):
        return [_deconstruct(item, buffers) for item in value]
    if isinstance(value, Mapping):
        return {key: _deconstruct(item, buffers) for key, item in value.items()}
    return value


def extract_buffers(payload: Any) -> tuple[Any, list[Any]]:
    """
    Replace every binary leaf in payload with a placeholder.

    Args:
        payload: JSON-compatible value, possibly holding binary leaves.

    Returns:
        (payload with placeholders, buffers in placeholder order).
        Buffers are returned exactly as found in the payload.
    """
    buffers: list[Any] = []
    return _deconstruct(payload, buffers), buffers


def _reconstruct(value: Any, buffers: list[Any]) -> Any:
    if is_placeholder(value):
        num = value.get(PLACEHOLDER_NUM)
        if not isinstance(num, int) or isinstance(num, bool) or not 0 <= num < len(buffers):
            raise PlaceholderError(num, len(buffers))
        return buffers[num]
    if isinstance(value, (list, tuple)):
        return [_reconstruct(item, buffers) for item in value]
    if isinstance(value, Mapping):
        return {key: _reconstruct(item, buffers) for key, item in value.items()}
    return value


def substitute_placeholders(payload: Any, buffers: list[Any]) -> Any:
    """
    Replace every placeholder in payload with its buffer.

    Raises:
        PlaceholderError: If a placeholder points past the end of buffers.
    """
    return _reconstruct(payload, buffers)


def deconstruct_packet(packet: Packet) -> tuple[Packet, list[Any]]:
    """
    Split a packet into a placeholder-bearing packet and its buffers.

    Events and acks carrying binary leaves are promoted to their binary
    counterparts. Binary packets get attachments set to the buffer count.

    Raises:
        EncodeError: If a packet type that cannot carry attachments holds
            binary data.
    """
    data, buffers = extract_buffers(packet.data)
    if isinstance(packet, BinaryPacket):
        return replace(packet, data=data, attachments=len(buffers)), buffers
    if not buffers:
        return packet, buffers
    if packet.type not in BINARY_COUNTERPARTS:
        raise EncodeError(
            f"{packet.type.name} packets cannot carry binary data",
            hint="Only events and acks may have binary attachments",
        )
    promoted = packet_for(
        BINARY_COUNTERPARTS[packet.type],
        nsp=packet.nsp,
        id=packet.id,
        data=data,
        attachments=len(buffers),
    )
    return promoted, buffers


def reconstruct_packet(packet: Packet, buffers: list[Any]) -> Packet:
    """Return packet with its placeholders replaced by buffers."""
    return replace(packet, data=substitute_placeholders(packet.data, buffers))
