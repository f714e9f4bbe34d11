import sys
from pathlib import Path

# Ensure package import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import matplotlib

matplotlib.use("Agg")

import pytest

from echo_mesh.config import DashboardConfig
from echo_mesh.core.simulator import MeshDashboard
from echo_mesh.utils.rng import SyntheticSource


@pytest.fixture
def config() -> DashboardConfig:
    return DashboardConfig(seed=1234)


@pytest.fixture
def source() -> SyntheticSource:
    return SyntheticSource(99)


@pytest.fixture
def dashboard(config):
    """A session that is torn down after the test."""

    session = MeshDashboard(config)
    yield session
    session.teardown()
