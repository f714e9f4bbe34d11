"""Packet class for the mesh dashboard.

This module defines the Packet class, which represents one synthetic datagram
moving between two mesh nodes.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from echo_mesh.core.enums import PacketStatus


def node_label(node: int) -> str:
    """Return the display name of a node, e.g. ``NODE_A`` for node 10."""
    return f"NODE_{node:X}"


@dataclass
class Packet:
    """Represents a simulated packet.

    Attributes:
        id: Unique identifier, monotonic by creation time.
        sender: Sending node index.
        receiver: Receiving node index.
        size: Size of packet in bytes.
        encrypted: Whether the packet is flagged as encrypted.
        created_at: Time when the packet was created, in milliseconds.
        payload: Synthetic payload bytes, for display only.
        status: Current lifecycle stage.
        outcome: Terminal status, fixed the first time the packet reaches
            terminal age.
    """

    id: int
    sender: int
    receiver: int
    size: int
    encrypted: bool
    created_at: float
    payload: bytes = b""
    status: PacketStatus = PacketStatus.PENDING
    outcome: Optional[PacketStatus] = field(default=None, repr=False)

    def age(self, now: float) -> float:
        """Get elapsed time since creation.

        Args:
            now: Current time in milliseconds.

        Returns:
            Age of the packet in milliseconds.
        """
        return now - self.created_at

    def update_status(
        self,
        now: float,
        resolve: Callable[[], PacketStatus],
        transit_after: float = 1000,
        terminal_after: float = 3000,
    ) -> PacketStatus:
        """Recompute the status from the packet's age.

        The terminal outcome is drawn from ``resolve`` once and then kept, so a
        delivered packet stays delivered however many times it is updated.

        Args:
            now: Current time in milliseconds.
            resolve: Called once to pick DELIVERED or FAILED.
            transit_after: Age at which the packet enters transit.
            terminal_after: Age at which the packet resolves.

        Returns:
            The updated status.
        """
        age = self.age(now)
        if self.outcome is not None:
            self.status = self.outcome
        elif age >= terminal_after:
            self.outcome = resolve()
            self.status = self.outcome
        elif age >= transit_after:
            self.status = PacketStatus.TRANSIT
        else:
            self.status = PacketStatus.PENDING
        return self.status

    @property
    def route(self) -> str:
        return f"{node_label(self.sender)} → {node_label(self.receiver)}"

    @property
    def is_loopback(self) -> bool:
        return self.sender == self.receiver

    def payload_hex(self) -> str:
        """Render the payload as space separated hex pairs."""
        return " ".join(f"{b:02x}" for b in self.payload)
