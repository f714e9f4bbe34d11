"""Enumerations for the mesh dashboard.

This module defines enumerations used throughout the simulators.
"""

from enum import Enum


class PacketStatus(Enum):
    """Enum for the stages of a packet's lifecycle.

    Attributes:
        PENDING: Created, not yet on the wire.
        TRANSIT: Moving between sender and receiver.
        DELIVERED: Reached its receiver.
        FAILED: Lost on the way.
    """

    PENDING = "pending"
    TRANSIT = "transit"
    DELIVERED = "delivered"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PacketStatus.DELIVERED, PacketStatus.FAILED)


class MessageSender(Enum):
    """Enum for the origin of a chat message.

    Attributes:
        LOCAL: Typed by the user.
        REMOTE: Injected by the simulated peer.
    """

    LOCAL = "local"
    REMOTE = "remote"
