import pytest

from echo_mesh.config import DashboardConfig
from echo_mesh.core.stats import Stats, StatsAccumulator
from echo_mesh.utils.rng import SyntheticSource


@pytest.fixture
def accumulator():
    return StatsAccumulator(DashboardConfig(), SyntheticSource(21))


def test_initial_stats(accumulator):
    assert accumulator.snapshot() == Stats(0, 0, 100.0, 12.0)


def test_message_sent_counts_encrypted_bytes_double(accumulator):
    accumulator.on_message_sent("hello", True)
    stats = accumulator.snapshot()
    assert stats.packets_transmitted == 1
    assert stats.bytes_transferred == 10

    accumulator.on_message_sent("hello", False)
    stats = accumulator.snapshot()
    assert stats.packets_transmitted == 2
    assert stats.bytes_transferred == 15


def test_message_sent_leaves_gauges_alone(accumulator):
    accumulator.on_message_sent("x", True)
    assert accumulator.snapshot().encryption_rate == 100.0
    assert accumulator.snapshot().latency_ms == 12.0


def test_ambient_tick_ranges(accumulator):
    previous = accumulator.snapshot()
    for tick in range(1, 500):
        stats = accumulator.on_ambient_tick(tick * 1000)
        assert 0 <= stats.packets_transmitted - previous.packets_transmitted < 10
        assert 0 <= stats.bytes_transferred - previous.bytes_transferred < 2048
        assert 95 <= stats.encryption_rate <= 100
        assert 8 <= stats.latency_ms <= 28
        previous = stats


def test_counters_never_decrease(accumulator):
    previous = accumulator.snapshot()
    for tick in range(1, 200):
        if tick % 3 == 0:
            accumulator.on_message_sent("msg" * tick, tick % 2 == 0)
        else:
            accumulator.on_ambient_tick(tick * 1000)
        current = accumulator.snapshot()
        assert current.packets_transmitted >= previous.packets_transmitted
        assert current.bytes_transferred >= previous.bytes_transferred
        previous = current


def test_snapshot_is_immutable(accumulator):
    snapshot = accumulator.snapshot()
    accumulator.on_ambient_tick(1000)
    assert snapshot == Stats()
    with pytest.raises(AttributeError):
        snapshot.packets_transmitted = 5


def test_snapshot_is_the_only_read_accessor(accumulator):
    assert not hasattr(accumulator, "stats")
    assert accumulator.snapshot() is accumulator.on_message_sent("hi", False)
