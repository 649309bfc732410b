# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Reassembly of binary packets.

A binary header announces how many buffers follow it. The reconstructor
holds the decoded header while those buffers arrive and rebuilds the payload
once the last one is in:

    Idle --start(packet)--> Collecting --take_binary_data() x N--> Idle
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

from .binary import reconstruct_packet
from .exceptions import ReconstructionError
from .types import BinaryPacket, Packet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    """No binary packet outstanding."""


@dataclass(frozen=True)
class Collecting:
    """Waiting for the attachments of packet."""

    packet: BinaryPacket
    buffers: tuple[Any, ...] = field(default=())

    @property
    def remaining(self) -> int:
        return self.packet.attachments - len(self.buffers)


ReconstructionState = Union[Idle, Collecting]

IDLE = Idle()


class BinaryReconstructor:
    """
    Collects the buffer sequence of one binary packet at a time.

    Example:
        >>> recon = BinaryReconstructor()
        >>> recon.start(BinaryEventPacket(data=[{"_placeholder": True, "num": 0}], attachments=1))
        >>> recon.take_binary_data(b"\\x01")
        BinaryEventPacket(nsp='/', id=None, data=[b'\\x01'], attachments=1)
    """

    def __init__(self) -> None:
        self._state: ReconstructionState = IDLE

    @property
    def state(self) -> ReconstructionState:
        """Current state."""
        return self._state

    @property
    def is_reconstructing(self) -> bool:
        return isinstance(self._state, Collecting)

    @property
    def received(self) -> int:
        """Buffers received for the outstanding packet."""
        if isinstance(self._state, Collecting):
            return len(self._state.buffers)
        return 0

    @property
    def expected(self) -> int:
        """Attachments announced by the outstanding packet."""
        if isinstance(self._state, Collecting):
            return self._state.packet.attachments
        return 0

    def start(self, packet: BinaryPacket) -> None:
        """
        Begin collecting attachments for packet.

        Raises:
            ReconstructionError: If another packet is still collecting.
        """
        if isinstance(self._state, Collecting):
            raise ReconstructionError(
                f"got a binary header while {self._state.remaining} attachment(s) "
                "of the previous packet are outstanding"
            )
        logger.debug("Expecting %d attachment(s)", packet.attachments)
        self._state = Collecting(packet=packet)

    def take_binary_data(self, data: Any) -> Packet | None:
        """
        Add one received buffer.

        Args:
            data: Next buffer in send order.

        Returns:
            The rebuilt packet once all attachments are in, None while more
            are expected.

        Raises:
            ReconstructionError: If no binary packet is outstanding.
            PlaceholderError: If the payload references a missing buffer.
        """
        state = self._state
        if not isinstance(state, Collecting):
            raise ReconstructionError("got binary data when not reconstructing a packet")

        state = Collecting(packet=state.packet, buffers=state.buffers + (data,))
        if state.remaining > 0:
            self._state = state
            return None

        # cleared even when substitution fails
        self._state = IDLE
        logger.debug("Received all %d attachment(s)", len(state.buffers))
        return reconstruct_packet(state.packet, list(state.buffers))

    def finished_reconstruction(self) -> None:
        """Drop any outstanding packet and its buffers."""
        if isinstance(self._state, Collecting):
            logger.debug("Discarding packet with %d of %d attachment(s)", self.received, self.expected)
        self._state = IDLE

    reset = finished_reconstruction
