# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
pysioparser - Socket.IO packet encoder and decoder.

Implements protocol revision 4 of the Socket.IO packet format with support for:
- All seven packet types (connect, disconnect, event, ack, error, binary event, binary ack)
- Namespaces and acknowledgement ids
- Binary attachments, extracted on encode and reassembled on decode
- Reactive (RxPY) stream operators

Quick Start:
    >>> from pysioparser import Encoder, EventPacket
    >>>
    >>> Encoder().encode(EventPacket(data=["hello", 1]))
    ['2["hello",1]']

Decoding:
    >>> from pysioparser import Decoder
    >>>
    >>> decoder = Decoder()
    >>> listener = decoder.on_decoded(print)
    >>> decoder.add('0/admin,{"token":"abc"}')
    ConnectPacket(nsp='/admin', id=None, data={'token': 'abc'})

Binary Attachments:
    >>> encodings = Encoder().encode_binary(EventPacket(data=["upload", b"\\x00\\x01"]))
    >>> header, *buffers = encodings
    >>> decoder.add_with_binary(header)
    >>> for buffer in buffers:
    ...     decoder.add_binary(buffer)
    BinaryEventPacket(nsp='/', id=None, data=['upload', b'\\x00\\x01'], attachments=1)
"""

from .binary import (
    deconstruct_packet,
    extract_buffers,
    has_binary,
    is_binary,
    is_placeholder,
    reconstruct_packet,
    substitute_placeholders,
)
from .exceptions import (
    DecodeError,
    EncodeError,
    IllegalAttachmentsError,
    InvalidAttachmentError,
    InvalidPayloadError,
    PlaceholderError,
    ReconstructionError,
    SioParserError,
    UnknownInputError,
)
from .models import DecoderConfig, EncoderConfig
from .parser import Decoder, Encoder
from .protocol import PARSER_ERROR, decode_string, encode_as_string
from .reactive import decode_wire_units, encode_packets
from .reconstructor import BinaryReconstructor, Collecting, Idle
from .types import (
    PROTOCOL,
    AckPacket,
    BinaryAckPacket,
    BinaryEventPacket,
    BinaryPacket,
    ConnectPacket,
    DisconnectPacket,
    ErrorPacket,
    EventPacket,
    Packet,
    PacketType,
    packet_for,
)

__version__ = "4.0.0"
__author__ = "Firefly Software Solutions Inc."
__license__ = "Apache-2.0"

__all__ = [
    # Codec
    "Encoder",
    "Decoder",
    "encode_as_string",
    "decode_string",
    "PARSER_ERROR",
    "PROTOCOL",
    # Reconstruction
    "BinaryReconstructor",
    "Idle",
    "Collecting",
    # Reactive
    "encode_packets",
    "decode_wire_units",
    # Binary
    "is_binary",
    "has_binary",
    "is_placeholder",
    "extract_buffers",
    "substitute_placeholders",
    "deconstruct_packet",
    "reconstruct_packet",
    # Packets
    "PacketType",
    "Packet",
    "BinaryPacket",
    "ConnectPacket",
    "DisconnectPacket",
    "EventPacket",
    "AckPacket",
    "ErrorPacket",
    "BinaryEventPacket",
    "BinaryAckPacket",
    "packet_for",
    # Configuration
    "EncoderConfig",
    "DecoderConfig",
    # Exceptions
    "SioParserError",
    "EncodeError",
    "DecodeError",
    "IllegalAttachmentsError",
    "InvalidAttachmentError",
    "InvalidPayloadError",
    "UnknownInputError",
    "ReconstructionError",
    "PlaceholderError",
]
