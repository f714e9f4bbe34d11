"""Traffic generators for the mesh dashboard.

This module provides the factories that draw synthetic packet attributes and
chat responses. Each returns a zero-argument callable bound to a
``SyntheticSource`` so the simulators never touch randomness directly.
"""

from typing import Callable, Sequence, Tuple

from echo_mesh.core.enums import PacketStatus
from echo_mesh.utils.rng import SyntheticSource


def variable_size(
    source: SyntheticSource, min_size: int, span: int
) -> Callable[[], int]:
    """Generate variable size packets.

    Args:
        source: Random source to draw from.
        min_size: Minimum size of packets in bytes.
        span: Number of distinct sizes above min_size.

    Returns:
        Function that returns a size in [min_size, min_size + span).
    """
    return lambda: min_size + source.randint(0, span)


def fixed_size(size: int) -> Callable[[], int]:
    """Every packet carries exactly ``size`` bytes."""
    return lambda: size


def packet_size(
    source: SyntheticSource, min_size: int, span: int
) -> Callable[[], int]:
    """Pick the size factory for a configured size range.

    Args:
        source: Random source to draw from.
        min_size: Smallest packet in bytes.
        span: Number of distinct sizes; 0 pins every packet to min_size.

    Returns:
        Function that returns a packet size.
    """
    if span == 0:
        return fixed_size(min_size)
    return variable_size(source, min_size, span)


def encryption_flag(source: SyntheticSource, probability: float) -> Callable[[], bool]:
    """Generate encryption flags, True with the given probability."""
    return lambda: source.chance(probability)


def node_pairs(
    source: SyntheticSource, node_count: int, allow_loopback: bool = True
) -> Callable[[], Tuple[int, int]]:
    """Generate (sender, receiver) pairs of node indices.

    Args:
        source: Random source to draw from.
        node_count: Number of nodes in the mesh.
        allow_loopback: Whether sender and receiver may be the same node.

    Returns:
        Function that returns a random node pair.
    """

    def next_pair() -> Tuple[int, int]:
        sender = source.randint(0, node_count)
        if allow_loopback:
            return sender, source.randint(0, node_count)
        # shift past the sender so every other node stays equally likely
        receiver = source.randint(0, node_count - 1)
        if receiver >= sender:
            receiver += 1
        return sender, receiver

    return next_pair


def delivery_outcome(
    source: SyntheticSource, delivery_probability: float
) -> Callable[[], PacketStatus]:
    """Generate terminal packet outcomes.

    Args:
        source: Random source to draw from.
        delivery_probability: Probability that a packet is delivered.

    Returns:
        Function that returns DELIVERED or FAILED.
    """
    return lambda: (
        PacketStatus.DELIVERED
        if source.chance(delivery_probability)
        else PacketStatus.FAILED
    )


def canned_response(
    source: SyntheticSource, responses: Sequence[str]
) -> Callable[[], str]:
    """Generate remote chat lines picked from a closed set."""
    return lambda: source.choice(responses)
