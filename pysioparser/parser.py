# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Socket.IO packet Encoder and Decoder.

Usage Patterns:

    # Encoding for a transport without binary support
    from pysioparser import Encoder, EventPacket
    encoder = Encoder()
    encoder.encode(EventPacket(data=["hello", 1]))   # ['2["hello",1]']

    # Encoding with attachments
    encoder.encode_binary(EventPacket(data=["file", b"\\x00\\x01"]))
    # ['51-["file",{"_placeholder":true,"num":0}]', b'\\x00\\x01']

    # Decoding
    from pysioparser import Decoder
    decoder = Decoder()
    decoder.on_decoded(lambda packet: print(packet))
    decoder.add_with_binary('51-["file",{"_placeholder":true,"num":0}]')
    decoder.add_binary(b"\\x00\\x01")   # prints the rebuilt packet
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Union

from reactivex import Observable, Subject
from reactivex.abc import DisposableBase

from .binary import deconstruct_packet, is_binary, to_bytes
from .exceptions import EncodeError, InvalidAttachmentError, ReconstructionError, UnknownInputError
from .models import DecoderConfig, EncoderConfig
from .protocol import decode_string, encode_as_string
from .reconstructor import BinaryReconstructor
from .types import BinaryPacket, Packet

logger = logging.getLogger(__name__)

WireUnit = Union[str, bytes]


class Encoder:
    """
    Turns packets into wire units.

    encode() always produces a single string. encode_binary() moves binary
    leaves out of the payload and produces the header followed by the
    buffers, in placeholder order.
    """

    def __init__(self, config: EncoderConfig | None = None) -> None:
        self.config = config or EncoderConfig()

    def encode(
        self,
        packet: Packet,
        callback: Callable[[list[str]], Any] | None = None,
    ) -> list[str]:
        """
        Encode a packet as a single string.

        Args:
            packet: Packet to encode.
            callback: Optional function called with the encodings
                (likely the transport's write).

        Returns:
            One-element list with the header string.

        Raises:
            EncodeError: If the payload is not JSON serializable.
        """
        encodings = [encode_as_string(packet, self.config)]
        if callback is not None:
            callback(encodings)
        return encodings

    def encode_binary(
        self,
        packet: Packet,
        callback: Callable[[list[WireUnit]], Any] | None = None,
    ) -> list[WireUnit]:
        """
        Encode a packet as a header string followed by its buffers.

        Events and acks holding binary data are sent as binary events and
        binary acks.

        Args:
            packet: Packet to encode.
            callback: Optional function called with the encodings.

        Returns:
            [header, buffer0, buffer1, ...].

        Raises:
            EncodeError: If the payload cannot be encoded.
        """
        deconstructed, buffers = deconstruct_packet(packet)
        encodings: list[WireUnit] = [encode_as_string(deconstructed, self.config)]
        try:
            encodings.extend(to_bytes(buffer) for buffer in buffers)
        except ValueError as e:
            raise EncodeError(str(e)) from e
        if callback is not None:
            callback(encodings)
        return encodings


class Decoder:
    """
    Turns wire units back into packets.

    Every fully decoded packet is pushed to the ``decoded`` observable in
    the order its input was added. Only one binary packet may be awaiting
    attachments at a time; use one Decoder per stream.

    Example:
        >>> decoder = Decoder()
        >>> packets = []
        >>> listener = decoder.on_decoded(packets.append)
        >>> decoder.add('2["hello",1]')
        >>> packets
        [EventPacket(nsp='/', id=None, data=['hello', 1])]
    """

    def __init__(self, config: DecoderConfig | None = None) -> None:
        self.config = config or DecoderConfig()
        self._reconstructor = BinaryReconstructor()
        self._subject: Subject[Packet] = Subject()

    @property
    def decoded(self) -> Observable[Packet]:
        """Observable stream of decoded packets."""
        return self._subject

    @property
    def is_reconstructing(self) -> bool:
        """Whether a binary packet is waiting for attachments."""
        return self._reconstructor.is_reconstructing

    def on_decoded(self, listener: Callable[[Packet], Any]) -> DisposableBase:
        """
        Register a listener for decoded packets.

        Returns:
            Disposable that unregisters the listener.
        """
        return self._subject.subscribe(on_next=listener)

    def _decode(self, encoded: Any) -> Packet:
        if not isinstance(encoded, str):
            raise UnknownInputError(encoded)
        return decode_string(
            encoded,
            max_attachments=self.config.max_attachments,
            object_hook=self.config.json_object_hook,
        )

    def _emit(self, packet: Packet) -> None:
        logger.debug("Decoded %s packet for %s", packet.type.name, packet.nsp)
        self._subject.on_next(packet)

    def add(self, encoded: str) -> None:
        """
        Decode a string-only packet and emit it.

        Binary headers are emitted as-is, placeholders included.

        Raises:
            UnknownInputError: If encoded is not a str.
            DecodeError: If the header is malformed.
        """
        self._emit(self._decode(encoded))

    def add_with_binary(self, encoded: str) -> None:
        """
        Decode a header that may be followed by attachments.

        Binary packets announcing attachments are held until add_binary()
        has delivered all of them; everything else is emitted immediately.

        Raises:
            UnknownInputError: If encoded is not a str.
            DecodeError: If the header is malformed.
            ReconstructionError: If a previous binary packet is still
                waiting for attachments.
        """
        packet = self._decode(encoded)
        if self._reconstructor.is_reconstructing:
            raise ReconstructionError(
                f"got a new header after {self._reconstructor.received} of "
                f"{self._reconstructor.expected} attachment(s)"
            )
        if isinstance(packet, BinaryPacket) and packet.attachments > 0:
            self._reconstructor.start(packet)
            return
        self._emit(packet)

    def add_binary(self, data: Any) -> None:
        """
        Feed the next attachment of the outstanding binary packet.

        Args:
            data: bytes-like buffer or base64-tagged mapping.

        Raises:
            UnknownInputError: If data is not binary.
            ReconstructionError: If no binary packet is outstanding.
            PlaceholderError: If the payload references a missing buffer.
            InvalidAttachmentError: If a base64-tagged buffer holds invalid
                base64.
        """
        if not is_binary(data):
            raise UnknownInputError(data)
        if self.config.decode_base64:
            try:
                data = to_bytes(data)
            except ValueError as e:
                raise InvalidAttachmentError(str(e)) from e
        packet = self._reconstructor.take_binary_data(data)
        if packet is not None:
            self._emit(packet)

    def destroy(self) -> None:
        """Discard any partially received binary packet without emitting."""
        self._reconstructor.finished_reconstruction()
