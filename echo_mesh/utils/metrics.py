"""Metrics utilities for the mesh dashboard.

This module provides the formatting used by the status bar and packet log, and
a helper that writes the end-of-run figures to JSON.
"""

import json
import os
from dataclasses import asdict
from typing import Any, Dict, Iterable, List

from echo_mesh.core.enums import PacketStatus
from echo_mesh.core.packet import Packet
from echo_mesh.core.stats import Stats


def format_bytes(num_bytes: int) -> str:
    """Render a byte count as B, KB or MB."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.2f} MB"


def format_status_line(stats: Stats, connected: bool = True) -> str:
    """Render the dashboard status bar."""
    state = "MESH ACTIVE" if connected else "DISCONNECTED"
    return (
        f"{state} | PACKETS: {stats.packets_transmitted}"
        f" | TRANSFER: {format_bytes(stats.bytes_transferred)}"
        f" | ENCRYPTED: {stats.encryption_rate:.1f}%"
        f" | LATENCY: {stats.latency_ms:.0f}ms"
    )


def format_packet_log(packets: Iterable[Packet]) -> List[str]:
    """Render packet log lines, one per packet, in the order given."""
    return [
        f"[{p.status.value:>9}] {p.route} "
        f"{'ENC' if p.encrypted else 'PLN'} {p.size}B"
        for p in packets
    ]


def packet_summary(packets: Iterable[Packet]) -> Dict[str, Any]:
    """Summarise a packet window.

    Args:
        packets: Packets to summarise.

    Returns:
        Counts per status, the delivery ratio among resolved packets and the
        share of encrypted packets.
    """
    packets = list(packets)
    counts = {status.value: 0 for status in PacketStatus}
    for packet in packets:
        counts[packet.status.value] += 1

    resolved = counts["delivered"] + counts["failed"]
    delivery_ratio = counts["delivered"] / resolved if resolved > 0 else 0.0
    encrypted_share = (
        sum(p.encrypted for p in packets) / len(packets) if packets else 0.0
    )

    return {
        "status_counts": counts,
        "delivery_ratio": delivery_ratio,
        "encrypted_share": encrypted_share,
        "loopback_packets": sum(p.is_loopback for p in packets),
    }


def save_stats_to_json(
    stats: Stats,
    packets: Iterable[Packet] = (),
    filename: str = "results/stats.json",
    **extra: Any,
) -> None:
    """Save the final stats and a packet summary to a JSON file.

    Args:
        stats: Stats snapshot to save.
        packets: Packet window to summarise alongside.
        filename: Output filename.
        **extra: Additional top-level fields.
    """
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    document = {"stats": asdict(stats), "packets": packet_summary(packets)}
    document.update(extra)

    with open(filename, "w") as f:
        json.dump(document, f, indent=2)
