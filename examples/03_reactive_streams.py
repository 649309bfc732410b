#!/usr/bin/env python3
"""
03_reactive_streams.py - Encoding and decoding streams with RxPY

This example demonstrates:
- Piping packets through encode_packets()
- Piping wire units through decode_wire_units()
- Filtering decoded packets with reactivex operators

Prerequisites:
    - pysioparser installed

Run with:
    python 03_reactive_streams.py
"""

import reactivex as rx
from reactivex import operators as ops

from pysioparser import ConnectPacket, EventPacket, PacketType, decode_wire_units, encode_packets


def main():
    print("Reactive Streams Example")
    print("=" * 50)

    packets = rx.of(
        ConnectPacket(nsp="/chat"),
        EventPacket(nsp="/chat", data=["message", "hello"]),
        EventPacket(nsp="/chat", data=["file", b"\x00\x01\x02"]),
    )

    packets.pipe(
        encode_packets(),
        ops.do_action(on_next=lambda unit: print(f"  wire: {unit!r}")),
        decode_wire_units(),
        ops.filter(lambda packet: packet.type != PacketType.CONNECT),
    ).subscribe(
        on_next=lambda packet: print(f"✓ {packet.data}"),
        on_error=lambda e: print(f"✗ {e}"),
    )


if __name__ == "__main__":
    main()
