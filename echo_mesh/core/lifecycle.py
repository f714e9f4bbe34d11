"""Packet lifecycle simulator.

This module defines the PacketLifecycleSimulator, which creates one synthetic
packet per generation tick and ages every packet in a sliding window through
pending, transit and a terminal outcome.
"""

import itertools
import logging
from collections import Counter, deque
from typing import Deque, Dict, List, Tuple

from echo_mesh.config import DashboardConfig
from echo_mesh.core.enums import PacketStatus
from echo_mesh.core.packet import Packet
from echo_mesh.traffic.generators import (
    delivery_outcome,
    encryption_flag,
    node_pairs,
    packet_size,
)
from echo_mesh.utils.rng import SyntheticSource

logger = logging.getLogger(__name__)


class PacketLifecycleSimulator:
    """Owns the packet window and advances packet statuses.

    Attributes:
        config: Session configuration.
        source: Random source for all packet draws.
        window: The most recent packets, oldest first.
        created: Total number of packets created so far.
    """

    def __init__(self, config: DashboardConfig, source: SyntheticSource):
        self.config = config
        self.source = source
        self.window: Deque[Packet] = deque(maxlen=config.window_size)
        self.created = 0
        self._ids = itertools.count(1)

        self._next_pair = node_pairs(source, config.node_count, config.allow_loopback)
        self._next_size = packet_size(
            source, config.min_packet_size, config.packet_size_span
        )
        self._next_encrypted = encryption_flag(
            source, config.packet_encryption_probability
        )
        self._resolve = delivery_outcome(source, config.delivery_probability)

    @property
    def packets(self) -> Tuple[Packet, ...]:
        """Read-only snapshot of the window, oldest first."""
        return tuple(self.window)

    def create_packet(self, now: float) -> Packet:
        """Create a new pending packet and push it into the window.

        Args:
            now: Current time in milliseconds.

        Returns:
            The created Packet object.
        """
        sender, receiver = self._next_pair()
        packet = Packet(
            id=next(self._ids),
            sender=sender,
            receiver=receiver,
            size=self._next_size(),
            encrypted=self._next_encrypted(),
            created_at=now,
            payload=self.source.payload(self.config.payload_length),
        )
        if len(self.window) == self.window.maxlen:
            logger.debug("Evicting packet %d from window", self.window[0].id)
        self.window.append(packet)
        self.created += 1
        return packet

    def recompute_statuses(self, now: float) -> None:
        """Recompute the status of every packet in the window from its age."""
        for packet in self.window:
            before = packet.status
            after = packet.update_status(
                now,
                self._resolve,
                self.config.transit_after,
                self.config.terminal_after,
            )
            if after is not before:
                logger.debug(
                    "Packet %d %s -> %s", packet.id, before.value, after.value
                )

    def on_generation_tick(self, now: float) -> Packet:
        """Handle a generation tick: create one packet, then age the window.

        Args:
            now: Current time in milliseconds.

        Returns:
            The packet created on this tick.
        """
        packet = self.create_packet(now)
        self.recompute_statuses(now)
        return packet

    def transit_packets(self) -> List[Packet]:
        """Get packets currently moving between nodes."""
        return [p for p in self.window if p.status is PacketStatus.TRANSIT]

    def recent(self, limit: int = 5) -> List[Packet]:
        """Get the newest packets, newest first."""
        return list(itertools.islice(reversed(self.window), limit))

    def status_counts(self) -> Dict[PacketStatus, int]:
        """Count packets in the window per status."""
        counts = Counter(p.status for p in self.window)
        return {status: counts.get(status, 0) for status in PacketStatus}
