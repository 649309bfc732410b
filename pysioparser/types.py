# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Packet type definitions for pysioparser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar

# Protocol revision implemented by this package
PROTOCOL: int = 4

DEFAULT_NAMESPACE: str = "/"


class PacketType(IntEnum):
    """Packet type tags, written on the wire as a single digit."""

    CONNECT = 0
    DISCONNECT = 1
    EVENT = 2
    ACK = 3
    ERROR = 4
    BINARY_EVENT = 5
    BINARY_ACK = 6

    @property
    def is_binary(self) -> bool:
        """Whether packets of this type carry an attachment count."""
        return self in (PacketType.BINARY_EVENT, PacketType.BINARY_ACK)


@dataclass(frozen=True)
class Packet:
    """
    A single protocol message.

    Attributes:
        nsp: Namespace the packet belongs to.
        id: Acknowledgement id, if the sender expects an ack.
        data: JSON-compatible payload, None when the packet has none.
    """

    type: ClassVar[PacketType]

    nsp: str = DEFAULT_NAMESPACE
    id: int | None = None
    data: Any = None


@dataclass(frozen=True)
class ConnectPacket(Packet):
    """Request or confirmation to join a namespace."""

    type: ClassVar[PacketType] = PacketType.CONNECT


@dataclass(frozen=True)
class DisconnectPacket(Packet):
    """Leave a namespace."""

    type: ClassVar[PacketType] = PacketType.DISCONNECT


@dataclass(frozen=True)
class EventPacket(Packet):
    """Application event without binary data."""

    type: ClassVar[PacketType] = PacketType.EVENT


@dataclass(frozen=True)
class AckPacket(Packet):
    """Acknowledgement without binary data."""

    type: ClassVar[PacketType] = PacketType.ACK


@dataclass(frozen=True)
class ErrorPacket(Packet):
    """Protocol or namespace error."""

    type: ClassVar[PacketType] = PacketType.ERROR


@dataclass(frozen=True)
class BinaryPacket(Packet):
    """
    Base for packets followed by binary attachments.

    Attributes:
        attachments: Number of buffers sent after the header.
    """

    attachments: int = 0


@dataclass(frozen=True)
class BinaryEventPacket(BinaryPacket):
    """Application event whose payload references binary attachments."""

    type: ClassVar[PacketType] = PacketType.BINARY_EVENT


@dataclass(frozen=True)
class BinaryAckPacket(BinaryPacket):
    """Acknowledgement whose payload references binary attachments."""

    type: ClassVar[PacketType] = PacketType.BINARY_ACK


PACKET_CLASSES: dict[PacketType, type[Packet]] = {
    PacketType.CONNECT: ConnectPacket,
    PacketType.DISCONNECT: DisconnectPacket,
    PacketType.EVENT: EventPacket,
    PacketType.ACK: AckPacket,
    PacketType.ERROR: ErrorPacket,
    PacketType.BINARY_EVENT: BinaryEventPacket,
    PacketType.BINARY_ACK: BinaryAckPacket,
}

# Binary counterpart used when an event or ack turns out to carry buffers
BINARY_COUNTERPARTS: dict[PacketType, PacketType] = {
    PacketType.EVENT: PacketType.BINARY_EVENT,
    PacketType.ACK: PacketType.BINARY_ACK,
}


def packet_for(packet_type: PacketType | int, **fields: Any) -> Packet:
    """
    Build the packet variant for a type tag.

    Args:
        packet_type: PacketType or its integer value.
        **fields: nsp, id, data and, for binary types, attachments.

    Returns:
        The matching Packet subclass instance.

    Raises:
        ValueError: If the tag is unknown.
        TypeError: If attachments is given for a non-binary type.
    """
    cls = PACKET_CLASSES[PacketType(packet_type)]
    return cls(**fields)
