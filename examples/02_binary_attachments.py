#!/usr/bin/env python3
"""
02_binary_attachments.py - Sending binary data as attachments

This example demonstrates:
- Extracting binary leaves into attachments with encode_binary()
- Feeding the header and attachments to a Decoder one by one
- Handling sequencing errors

Prerequisites:
    - pysioparser installed

Run with:
    python 02_binary_attachments.py
"""

from pysioparser import Decoder, Encoder, EventPacket, ReconstructionError


def main():
    print("Binary Attachments Example")
    print("=" * 50)

    packet = EventPacket(
        id=1,
        data=["upload", {"name": "photo.png", "content": b"\x89PNG\r\n", "thumb": b"\x00\x01"}],
    )

    header, *buffers = Encoder().encode_binary(packet)
    print(f"header:  {header}")
    for i, buffer in enumerate(buffers):
        print(f"buffer {i}: {buffer!r}")

    decoder = Decoder()
    decoder.on_decoded(lambda p: print(f"\n✓ decoded: {p}"))

    decoder.add_with_binary(header)
    for buffer in buffers:
        print(f"  waiting... {decoder.is_reconstructing}")
        decoder.add_binary(buffer)

    print("\nFeeding a buffer with no header outstanding:")
    try:
        decoder.add_binary(b"stray")
    except ReconstructionError as e:
        print(f"✓ Caught ReconstructionError: {e}")


if __name__ == "__main__":
    main()
