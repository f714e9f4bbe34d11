import json

import pytest

from echo_mesh.config import DEFAULT_RESPONSES, DashboardConfig, load_config


def test_defaults():
    config = DashboardConfig().validate()
    assert config.node_count == 8
    assert (config.packet_period, config.stats_period, config.remote_period) == (
        800,
        1000,
        3000,
    )
    assert config.window_size == 20
    assert config.responses == DEFAULT_RESPONSES
    assert len(config.responses) == 5


@pytest.mark.parametrize(
    "overrides",
    [
        {"node_count": 1},
        {"window_size": 0},
        {"packet_period": 0},
        {"remote_period": -5},
        {"delivery_probability": 1.5},
        {"remote_probability": -0.1},
        {"transit_after": 4000},
        {"transit_after": 3000},
        {"min_packet_size": 0},
        {"packet_size_span": -1},
        {"max_packets_per_tick": 0},
        {"max_bytes_per_tick": 0},
        {"hash_length": 0},
        {"payload_length": 0},
        {"latency_range": [5, 1]},
        {"encryption_rate_range": [95]},
        {"canvas_width": 0},
        {"responses": []},
    ],
)
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValueError):
        DashboardConfig().with_overrides(**overrides)


def test_unknown_key_is_rejected():
    with pytest.raises(ValueError, match="Unknown config keys"):
        DashboardConfig().with_overrides(node_cnt=4)


def test_load_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"seed": 5, "allow_loopback": False, "latency_range": [1, 2]})
    )
    config = load_config(str(path))
    assert config.seed == 5
    assert config.allow_loopback is False
    assert config.latency_range == (1, 2)


def test_load_config_requires_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_zero_size_span_is_accepted():
    config = DashboardConfig().with_overrides(packet_size_span=0)
    assert config.packet_size_span == 0
