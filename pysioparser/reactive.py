# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Reactive Streams support for pysioparser.

Provides RxPY operators that encode and decode whole streams, so a
transport exposed as an Observable can be piped straight into packets.

Example:
    >>> import reactivex as rx
    >>> from pysioparser import EventPacket
    >>> rx.of(EventPacket(data=["a", b"\\x01"])).pipe(
    ...     encode_packets(),
    ... ).subscribe(on_next=print)
    51-["a",{"_placeholder":true,"num":0}]
    b'\\x01'
"""

from __future__ import annotations

from typing import Any, Callable

import reactivex as rx
from reactivex import Observable
from reactivex.disposable import CompositeDisposable, Disposable

from .parser import Decoder, Encoder, WireUnit
from .types import Packet


def encode_packets(
    encoder: Encoder | None = None,
    binary: bool = True,
) -> Callable[[Observable[Packet]], Observable[WireUnit]]:
    """
    Create an operator that encodes packets into wire units.

    Args:
        encoder: Encoder to use, a default one if omitted.
        binary: Use encode_binary() (header then buffers) instead of the
            string-only encode().

    Returns:
        Operator function for use with pipe().
    """
    encoder = encoder or Encoder()
    encode = encoder.encode_binary if binary else encoder.encode

    def _encode_packets(source: Observable[Packet]) -> Observable[WireUnit]:
        def subscribe(observer: Any, scheduler: Any = None) -> Any:
            def on_next(packet: Packet) -> None:
                try:
                    units = encode(packet)
                except Exception as e:
                    observer.on_error(e)
                    return
                for unit in units:
                    observer.on_next(unit)

            return source.subscribe(
                on_next=on_next,
                on_error=observer.on_error,
                on_completed=observer.on_completed,
                scheduler=scheduler,
            )

        return rx.create(subscribe)

    return _encode_packets


def decode_wire_units(
    decoder: Decoder | None = None,
) -> Callable[[Observable[WireUnit]], Observable[Packet]]:
    """
    Create an operator that decodes wire units into packets.

    Strings are treated as headers (add_with_binary()), anything else as
    attachments (add_binary()). Decoding errors terminate the stream
    through on_error. Disposing the subscription discards any partially
    received binary packet.

    Args:
        decoder: Decoder to use, a fresh one per subscription if omitted.

    Returns:
        Operator function for use with pipe().
    """

    def _decode_wire_units(source: Observable[WireUnit]) -> Observable[Packet]:
        def subscribe(observer: Any, scheduler: Any = None) -> Any:
            active = decoder or Decoder()
            listener = active.on_decoded(observer.on_next)

            def on_next(unit: WireUnit) -> None:
                try:
                    if isinstance(unit, str):
                        active.add_with_binary(unit)
                    else:
                        active.add_binary(unit)
                except Exception as e:
                    active.destroy()
                    observer.on_error(e)

            subscription = source.subscribe(
                on_next=on_next,
                on_error=observer.on_error,
                on_completed=observer.on_completed,
                scheduler=scheduler,
            )
            return CompositeDisposable(subscription, listener, Disposable(active.destroy))

        return rx.create(subscribe)

    return _decode_wire_units
