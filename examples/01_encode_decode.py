#!/usr/bin/env python3
"""
01_encode_decode.py - Encoding and decoding plain packets

This example demonstrates:
- Building packets for each namespace/id/payload combination
- Encoding them to header strings
- Decoding headers back through a Decoder listener

Prerequisites:
    - pysioparser installed

Run with:
    python 01_encode_decode.py
"""

from pysioparser import AckPacket, ConnectPacket, Decoder, Encoder, EventPacket


def main():
    print("Encode / Decode Example")
    print("=" * 50)

    encoder = Encoder()
    decoder = Decoder()
    decoder.on_decoded(lambda packet: print(f"  decoded: {packet}"))

    packets = [
        ConnectPacket(nsp="/admin", data={"token": "abc"}),
        EventPacket(data=["chat message", {"text": "hi"}]),
        EventPacket(nsp="/admin", id=7, data=["kick", "bob"]),
        AckPacket(nsp="/admin", id=7, data=[True]),
    ]

    for packet in packets:
        (encoded,) = encoder.encode(packet)
        print(f"encoded: {encoded}")
        decoder.add(encoded)

    print("\nUnknown packet types decode to an error packet:")
    decoder.add("9")


if __name__ == "__main__":
    main()
