# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Tests for the Encoder, Decoder and BinaryReconstructor."""

import base64

import pytest

from pysioparser import (
    AckPacket,
    BinaryAckPacket,
    BinaryEventPacket,
    BinaryReconstructor,
    Collecting,
    ConnectPacket,
    Decoder,
    DecoderConfig,
    EncodeError,
    Encoder,
    ErrorPacket,
    EventPacket,
    Idle,
    IllegalAttachmentsError,
    InvalidAttachmentError,
    InvalidPayloadError,
    PlaceholderError,
    ReconstructionError,
    SioParserError,
    UnknownInputError,
    decode_string,
    substitute_placeholders,
)


@pytest.fixture
def decoder() -> Decoder:
    """Create a decoder."""
    return Decoder()


@pytest.fixture
def decoded(decoder: Decoder) -> list:
    """Collect every packet the decoder emits."""
    packets: list = []
    decoder.on_decoded(packets.append)
    return packets


class TestEncoder:
    """Tests for Encoder."""

    def test_encode_event(self) -> None:
        """Test string encoding of an event."""
        assert Encoder().encode(EventPacket(data=["hello", 1])) == ['2["hello",1]']

    def test_encode_callback(self) -> None:
        """Test the callback receives the encodings."""
        received = []
        result = Encoder().encode(ConnectPacket(nsp="/admin"), received.append)
        assert received == [["0/admin"]]
        assert result == ["0/admin"]

    def test_encode_binary_header_then_buffers(self) -> None:
        """Test buffers follow the header in placeholder order."""
        encodings = Encoder().encode_binary(EventPacket(data=["upload", {"a": b"\x00", "b": [b"\x01"]}]))
        assert encodings == [
            '52-["upload",{"a":{"_placeholder":true,"num":0},"b":[{"_placeholder":true,"num":1}]}]',
            b"\x00",
            b"\x01",
        ]

    def test_encode_binary_count_matches_buffers(self) -> None:
        """Test the header attachment count equals the number of buffers."""
        header, *buffers = Encoder().encode_binary(BinaryAckPacket(id=3, data=[b"a", b"b", b"c"]))
        assert decode_string(header).attachments == len(buffers) == 3

    def test_encode_binary_without_binary(self) -> None:
        """Test payloads without binary encode to a single header."""
        assert Encoder().encode_binary(EventPacket(data=["a"])) == ['2["a"]']
        assert Encoder().encode_binary(BinaryEventPacket(data=["a"])) == ['50-["a"]']

    def test_encode_binary_normalizes_buffers(self) -> None:
        """Test bytearray and base64-tagged values are sent as bytes."""
        tagged = {"base64": True, "data": base64.b64encode(b"\x02").decode()}
        _, first, second = Encoder().encode_binary(EventPacket(data=[bytearray(b"\x01"), tagged]))
        assert first == b"\x01"
        assert second == b"\x02"

    def test_encode_binary_invalid_base64(self) -> None:
        """Test a base64-tagged buffer with invalid text raises EncodeError."""
        with pytest.raises(EncodeError, match="Invalid base64"):
            Encoder().encode_binary(EventPacket(data=[{"base64": True, "data": "!!!"}]))

    def test_encode_binary_roundtrip(self) -> None:
        """Test substituting the buffers into the decoded header restores the payload."""
        data = ["file", {"name": "a.bin", "content": b"\x00\xff"}, [b"\x01", 2]]
        header, *buffers = Encoder().encode_binary(EventPacket(id=1, data=data))
        assert substitute_placeholders(decode_string(header).data, buffers) == data


class TestDecoderAdd:
    """Tests for Decoder.add."""

    def test_add_emits(self, decoder: Decoder, decoded: list) -> None:
        """Test string packets are emitted immediately."""
        decoder.add('2["hello",1]')
        assert decoded == [EventPacket(nsp="/", data=["hello", 1])]

    def test_add_order(self, decoder: Decoder, decoded: list) -> None:
        """Test packets are emitted in the order they were added."""
        decoder.add("0")
        decoder.add('3,4{"a":1}')
        decoder.add('0/admin,{"token":"abc"}')
        assert decoded == [
            ConnectPacket(),
            AckPacket(id=4, data={"a": 1}),
            ConnectPacket(nsp="/admin", data={"token": "abc"}),
        ]

    def test_add_unknown_type(self, decoder: Decoder, decoded: list) -> None:
        """Test unknown types are emitted as error packets."""
        decoder.add("9")
        assert decoded == [ErrorPacket(data="parser error")]

    def test_add_non_string(self, decoder: Decoder, decoded: list) -> None:
        """Test non-string input is rejected."""
        with pytest.raises(UnknownInputError):
            decoder.add(b"2[]")
        assert decoded == []

    def test_add_malformed(self, decoder: Decoder, decoded: list) -> None:
        """Test malformed headers raise and emit nothing."""
        with pytest.raises(IllegalAttachmentsError):
            decoder.add("5abc-")
        with pytest.raises(InvalidPayloadError):
            decoder.add('2["a"')
        assert decoded == []

    def test_multiple_listeners(self, decoder: Decoder) -> None:
        """Test every listener receives each packet and can unsubscribe."""
        first, second = [], []
        decoder.on_decoded(first.append)
        subscription = decoder.on_decoded(second.append)
        decoder.add("0")
        subscription.dispose()
        decoder.add("1")
        assert len(first) == 2
        assert len(second) == 1

    def test_decoded_observable(self, decoder: Decoder) -> None:
        """Test the decoded observable can be subscribed directly."""
        packets = []
        decoder.decoded.subscribe(on_next=packets.append)
        decoder.add("1/chat")
        assert packets[0].nsp == "/chat"


class TestDecoderBinary:
    """Tests for Decoder.add_with_binary and add_binary."""

    def test_single_attachment(self, decoder: Decoder, decoded: list) -> None:
        """Test a binary event is emitted once its buffer arrives."""
        header, buffer = Encoder().encode_binary(EventPacket(data=["x", [b"\x01\x02"]]))
        decoder.add_with_binary(header)
        assert decoded == []
        assert decoder.is_reconstructing

        decoder.add_binary(buffer)
        assert decoded == [BinaryEventPacket(data=["x", [b"\x01\x02"]], attachments=1)]
        assert not decoder.is_reconstructing

    def test_partial_attachments_never_emit(self, decoder: Decoder, decoded: list) -> None:
        """Test fewer buffers than declared emit nothing."""
        decoder.add_with_binary('53-[{"_placeholder":true,"num":0},{"_placeholder":true,"num":1},{"_placeholder":true,"num":2}]')
        decoder.add_binary(b"a")
        decoder.add_binary(b"b")
        assert decoded == []

        decoder.add_binary(b"c")
        assert len(decoded) == 1
        assert decoded[0].data == [b"a", b"b", b"c"]

    def test_buffers_substituted_in_feed_order(self, decoder: Decoder, decoded: list) -> None:
        """Test placeholder num maps to arrival position."""
        decoder.add_with_binary('62-/x,5[{"_placeholder":true,"num":1},{"_placeholder":true,"num":0}]')
        decoder.add_binary(b"first")
        decoder.add_binary(b"second")
        assert decoded == [BinaryAckPacket(nsp="/x", id=5, data=[b"second", b"first"], attachments=2)]

    def test_zero_attachments(self, decoder: Decoder, decoded: list) -> None:
        """Test a binary header with no attachments is emitted immediately."""
        decoder.add_with_binary('50-["a"]')
        assert decoded == [BinaryEventPacket(data=["a"], attachments=0)]
        assert not decoder.is_reconstructing

    def test_non_binary_header(self, decoder: Decoder, decoded: list) -> None:
        """Test add_with_binary emits non-binary packets immediately."""
        decoder.add_with_binary('2["a"]')
        assert decoded == [EventPacket(data=["a"])]

    def test_consecutive_binary_packets(self, decoder: Decoder, decoded: list) -> None:
        """Test a decoder can reassemble packets one after another."""
        encoder = Encoder()
        for payload in (["a", b"1"], ["b", b"2", b"3"]):
            header, *buffers = encoder.encode_binary(EventPacket(data=payload))
            decoder.add_with_binary(header)
            for buffer in buffers:
                decoder.add_binary(buffer)
        assert [p.data for p in decoded] == [["a", b"1"], ["b", b"2", b"3"]]

    def test_base64_attachment(self, decoder: Decoder, decoded: list) -> None:
        """Test base64-tagged attachments are decoded to bytes."""
        decoder.add_with_binary('51-[{"_placeholder":true,"num":0}]')
        decoder.add_binary({"base64": True, "data": base64.b64encode(b"\x07").decode()})
        assert decoded[0].data == [b"\x07"]

    def test_base64_kept_when_disabled(self) -> None:
        """Test decode_base64=False keeps attachments as received."""
        decoder = Decoder(DecoderConfig(decode_base64=False))
        packets = []
        decoder.on_decoded(packets.append)
        tagged = {"base64": True, "data": "Bw=="}
        decoder.add_with_binary('51-[{"_placeholder":true,"num":0}]')
        decoder.add_binary(tagged)
        assert packets[0].data == [tagged]

    def test_binary_without_header(self, decoder: Decoder, decoded: list) -> None:
        """Test binary data with no outstanding header is fatal."""
        with pytest.raises(ReconstructionError, match="not reconstructing"):
            decoder.add_binary(b"x")
        assert decoded == []

    def test_binary_non_binary_input(self, decoder: Decoder) -> None:
        """Test add_binary rejects non-binary input."""
        decoder.add_with_binary('51-[{"_placeholder":true,"num":0}]')
        with pytest.raises(UnknownInputError):
            decoder.add_binary("x")
        assert decoder.is_reconstructing

    def test_invalid_base64_attachment(self, decoder: Decoder, decoded: list) -> None:
        """Test an attachment with invalid base64 raises a codec error."""
        decoder.add_with_binary('51-[{"_placeholder":true,"num":0}]')
        with pytest.raises(InvalidAttachmentError, match="Invalid attachment") as exc_info:
            decoder.add_binary({"base64": True, "data": "!!!"})
        assert isinstance(exc_info.value, SioParserError)
        assert isinstance(exc_info.value.__cause__, ValueError)
        assert decoder.is_reconstructing
        assert decoded == []

    def test_header_while_reconstructing(self, decoder: Decoder, decoded: list) -> None:
        """Test a second header before all attachments arrive is fatal."""
        decoder.add_with_binary('52-[{"_placeholder":true,"num":0},{"_placeholder":true,"num":1}]')
        decoder.add_binary(b"a")
        with pytest.raises(ReconstructionError, match="1 of 2"):
            decoder.add_with_binary('2["a"]')
        assert decoded == []

    def test_add_with_binary_non_string(self, decoder: Decoder) -> None:
        """Test add_with_binary rejects non-string input."""
        with pytest.raises(UnknownInputError):
            decoder.add_with_binary(42)

    def test_max_attachments(self) -> None:
        """Test the configured attachment limit."""
        decoder = Decoder(DecoderConfig(max_attachments=1))
        with pytest.raises(IllegalAttachmentsError):
            decoder.add_with_binary('52-[{"_placeholder":true,"num":0},{"_placeholder":true,"num":1}]')
        assert not decoder.is_reconstructing

    def test_placeholder_out_of_range(self, decoder: Decoder, decoded: list) -> None:
        """Test mismatched placeholders are fatal and reset the decoder."""
        decoder.add_with_binary('51-[{"_placeholder":true,"num":3}]')
        with pytest.raises(PlaceholderError):
            decoder.add_binary(b"a")
        assert decoded == []
        assert not decoder.is_reconstructing

    def test_destroy(self, decoder: Decoder, decoded: list) -> None:
        """Test destroy drops a partial packet without emitting."""
        decoder.add_with_binary('52-[{"_placeholder":true,"num":0},{"_placeholder":true,"num":1}]')
        decoder.add_binary(b"a")
        decoder.destroy()
        assert decoded == []
        assert not decoder.is_reconstructing

        with pytest.raises(ReconstructionError):
            decoder.add_binary(b"b")

    def test_destroy_when_idle(self, decoder: Decoder, decoded: list) -> None:
        """Test destroy is a no-op on an idle decoder."""
        decoder.destroy()
        decoder.add("0")
        assert decoded == [ConnectPacket()]


class TestBinaryReconstructor:
    """Tests for BinaryReconstructor."""

    def test_initial_state(self) -> None:
        """Test a new reconstructor is idle."""
        recon = BinaryReconstructor()
        assert isinstance(recon.state, Idle)
        assert not recon.is_reconstructing
        assert recon.received == recon.expected == 0

    def test_collecting(self) -> None:
        """Test state while attachments arrive."""
        recon = BinaryReconstructor()
        packet = BinaryEventPacket(data=[{"_placeholder": True, "num": 0}, {"_placeholder": True, "num": 1}], attachments=2)
        recon.start(packet)
        assert recon.take_binary_data(b"a") is None

        state = recon.state
        assert isinstance(state, Collecting)
        assert state.packet == packet
        assert state.buffers == (b"a",)
        assert state.remaining == 1
        assert (recon.received, recon.expected) == (1, 2)

        result = recon.take_binary_data(b"b")
        assert result == BinaryEventPacket(data=[b"a", b"b"], attachments=2)
        assert isinstance(recon.state, Idle)

    def test_take_when_idle(self) -> None:
        """Test buffers without a packet are fatal."""
        with pytest.raises(ReconstructionError):
            BinaryReconstructor().take_binary_data(b"a")

    def test_start_twice(self) -> None:
        """Test only one reconstruction may be active."""
        recon = BinaryReconstructor()
        recon.start(BinaryEventPacket(attachments=1))
        with pytest.raises(ReconstructionError):
            recon.start(BinaryEventPacket(attachments=1))

    def test_reset(self) -> None:
        """Test reset is unconditional."""
        recon = BinaryReconstructor()
        recon.reset()
        recon.start(BinaryEventPacket(attachments=2))
        recon.take_binary_data(b"a")
        recon.finished_reconstruction()
        assert isinstance(recon.state, Idle)
        recon.start(BinaryEventPacket(attachments=1))
        assert recon.is_reconstructing
