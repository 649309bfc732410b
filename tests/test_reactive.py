# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Tests for the reactive stream operators."""

import reactivex as rx
from reactivex import Subject

from pysioparser import (
    BinaryEventPacket,
    ConnectPacket,
    Decoder,
    EventPacket,
    ReconstructionError,
    decode_wire_units,
    encode_packets,
)


class TestEncodePackets:
    """Tests for encode_packets."""

    def test_binary_stream(self) -> None:
        """Test headers are followed by their buffers in order."""
        units = []
        rx.of(ConnectPacket(nsp="/a"), EventPacket(data=["f", b"\x01"])).pipe(
            encode_packets(),
        ).subscribe(on_next=units.append)

        assert units == ["0/a", '51-["f",{"_placeholder":true,"num":0}]', b"\x01"]

    def test_string_stream(self) -> None:
        """Test binary=False uses string-only encoding."""
        units = []
        rx.of(EventPacket(data=["a"]), EventPacket(id=2, data=[])).pipe(
            encode_packets(binary=False),
        ).subscribe(on_next=units.append)

        assert units == ['2["a"]', "22[]"]


class TestDecodeWireUnits:
    """Tests for decode_wire_units."""

    def test_roundtrip(self) -> None:
        """Test an encoded stream decodes back to its packets in order."""
        packets = [
            ConnectPacket(nsp="/a", data={"token": "t"}),
            EventPacket(data=["f", b"\x01", {"g": b"\x02"}]),
            EventPacket(nsp="/a", id=4, data=["plain"]),
        ]
        decoded = []
        rx.from_iterable(packets).pipe(
            encode_packets(),
            decode_wire_units(),
        ).subscribe(on_next=decoded.append)

        assert decoded == [
            packets[0],
            BinaryEventPacket(data=["f", b"\x01", {"g": b"\x02"}], attachments=2),
            packets[2],
        ]

    def test_error_forwarded(self) -> None:
        """Test decode errors terminate the stream via on_error."""
        errors = []
        decoded = []
        rx.of('2["a"]', b"\x00", '2["b"]').pipe(
            decode_wire_units(),
        ).subscribe(on_next=decoded.append, on_error=errors.append)

        assert decoded == [EventPacket(data=["a"])]
        assert len(errors) == 1
        assert isinstance(errors[0], ReconstructionError)

    def test_dispose_discards_partial_packet(self) -> None:
        """Test disposing the subscription resets the decoder."""
        decoder = Decoder()
        source: Subject = Subject()
        decoded = []
        subscription = source.pipe(decode_wire_units(decoder)).subscribe(on_next=decoded.append)

        source.on_next('52-[{"_placeholder":true,"num":0},{"_placeholder":true,"num":1}]')
        source.on_next(b"a")
        assert decoder.is_reconstructing

        subscription.dispose()
        assert not decoder.is_reconstructing
        assert decoded == []
