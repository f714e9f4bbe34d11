"""Statistics accumulator for the mesh dashboard."""

import logging
from dataclasses import dataclass, replace

from echo_mesh.config import DashboardConfig
from echo_mesh.utils.rng import SyntheticSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stats:
    """Aggregate figures shown in the status bar.

    Attributes:
        packets_transmitted: Counter, never decreases.
        bytes_transferred: Counter, never decreases.
        encryption_rate: Percentage gauge, resampled every ambient tick.
        latency_ms: Latency gauge, resampled every ambient tick.
    """

    packets_transmitted: int = 0
    bytes_transferred: int = 0
    encryption_rate: float = 100.0
    latency_ms: float = 12.0


class StatsAccumulator:
    """Derives Stats from ambient ticks and sent messages."""

    def __init__(self, config: DashboardConfig, source: SyntheticSource):
        self.config = config
        self.source = source
        self._stats = Stats()

    def snapshot(self) -> Stats:
        return self._stats

    def on_ambient_tick(self, now: float) -> Stats:
        """Add background traffic and resample the gauges.

        Args:
            now: Current time in milliseconds.

        Returns:
            The updated Stats.
        """
        current = self._stats
        self._stats = Stats(
            packets_transmitted=current.packets_transmitted
            + self.source.randint(0, self.config.max_packets_per_tick),
            bytes_transferred=current.bytes_transferred
            + self.source.randint(0, self.config.max_bytes_per_tick),
            encryption_rate=self.source.uniform(*self.config.encryption_rate_range),
            latency_ms=self.source.uniform(*self.config.latency_range),
        )
        logger.debug("Ambient stats at %.0f ms: %s", now, self._stats)
        return self._stats

    def on_message_sent(self, content: str, encrypted: bool) -> Stats:
        """Account for one user message; encrypted content counts double."""
        current = self._stats
        self._stats = replace(
            current,
            packets_transmitted=current.packets_transmitted + 1,
            bytes_transferred=current.bytes_transferred
            + len(content) * (2 if encrypted else 1),
        )
        return self._stats
