"""Configuration for a mesh dashboard session.

All times are in milliseconds of simulation time.
"""

import json
import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_RESPONSES: Tuple[str, ...] = (
    "SIGNAL RECEIVED. PROCESSING.",
    "ACKNOWLEDGED. ENCRYPTION VERIFIED.",
    "DATA INTEGRITY CONFIRMED.",
    "ROUTING THROUGH SECURE TUNNEL.",
    "HANDSHAKE COMPLETE. CHANNEL OPEN.",
)


@dataclass(frozen=True)
class DashboardConfig:
    # Mesh
    node_count: int = 8
    canvas_width: float = 400
    canvas_height: float = 400
    allow_loopback: bool = True

    # Cadences
    packet_period: float = 800
    stats_period: float = 1000
    remote_period: float = 3000

    # Packet lifecycle
    window_size: int = 20
    transit_after: float = 1000
    terminal_after: float = 3000
    delivery_probability: float = 0.9
    packet_encryption_probability: float = 0.8
    min_packet_size: int = 64
    packet_size_span: int = 1024
    payload_length: int = 32

    # Message exchange
    remote_probability: float = 0.3
    remote_encryption_probability: float = 0.8
    hash_length: int = 8
    responses: Tuple[str, ...] = field(default=DEFAULT_RESPONSES)

    # Ambient stats
    max_packets_per_tick: int = 10
    max_bytes_per_tick: int = 2048
    encryption_rate_range: Tuple[float, float] = (95.0, 100.0)
    latency_range: Tuple[float, float] = (8.0, 28.0)

    seed: Optional[int] = None

    def validate(self) -> "DashboardConfig":
        """Check the values for consistency.

        Returns:
            The config itself, so calls can be chained.

        Raises:
            ValueError: If any value is out of range.
        """
        if self.node_count < 2:
            raise ValueError(f"node_count must be at least 2, got {self.node_count}")
        if self.window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {self.window_size}")
        for name in ("packet_period", "stats_period", "remote_period"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if not 0 <= self.transit_after < self.terminal_after:
            raise ValueError("transit_after must lie in [0, terminal_after)")
        if self.min_packet_size < 1:
            raise ValueError("min_packet_size must be at least 1")
        # a span of 0 means every packet has min_packet_size bytes
        if self.packet_size_span < 0:
            raise ValueError("packet_size_span must not be negative")
        for name in (
            "max_packets_per_tick",
            "max_bytes_per_tick",
            "hash_length",
            "payload_length",
        ):
            value = getattr(self, name)
            if value < 1:
                raise ValueError(f"{name} must be at least 1, got {value}")
        for name in ("encryption_rate_range", "latency_range"):
            bounds = getattr(self, name)
            if len(bounds) != 2 or bounds[0] > bounds[1]:
                raise ValueError(f"{name} must be a (low, high) pair, got {bounds}")
        for name in (
            "delivery_probability",
            "packet_encryption_probability",
            "remote_probability",
            "remote_encryption_probability",
        ):
            value = getattr(self, name)
            if not 0 <= value <= 1:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError("canvas dimensions must be positive")
        if not self.responses:
            raise ValueError("responses must not be empty")
        return self

    def with_overrides(self, **overrides: Any) -> "DashboardConfig":
        """Return a copy with the given fields replaced, validated."""
        unknown = set(overrides) - {f.name for f in fields(self)}
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        for key in ("responses", "encryption_rate_range", "latency_range"):
            if key in overrides:
                overrides[key] = tuple(overrides[key])
        return replace(self, **overrides).validate()


def load_config(path: str, base: Optional[DashboardConfig] = None) -> DashboardConfig:
    """Load a config from a JSON object of overrides.

    Args:
        path: Path to the JSON file.
        base: Config to apply the overrides to (defaults to ``DashboardConfig()``).

    Returns:
        The resulting config.
    """
    with open(path) as f:
        overrides: Dict[str, Any] = json.load(f)
    if not isinstance(overrides, dict):
        raise ValueError(f"{path}: expected a JSON object")
    logger.info("Loaded %d config overrides from %s", len(overrides), path)
    return (base or DashboardConfig()).with_overrides(**overrides)
