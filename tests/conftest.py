"""Shared test fixtures for phaseflow tests."""

import pytest

from phaseflow.config import Config
from phaseflow.engine import compute_layout
from phaseflow.models import FlowDataset
from phaseflow.sample_data import sample_dataset


@pytest.fixture()
def config():
    return Config()


@pytest.fixture()
def sample():
    """The bundled 7-project dataset."""
    return sample_dataset()


@pytest.fixture()
def sample_layout(sample, config):
    return compute_layout(sample, config)


@pytest.fixture()
def pair_dataset():
    """A (Jan 2022, size 50) → B (Aug 2022, size 60), 7 months, 4 phases."""
    return FlowDataset.from_records(
        projects=[
            {"id": "A", "name": "Alpha", "time": "2022-01-01", "size": 50, "color": "#3498db"},
            {"id": "B", "name": "Beta", "time": "2022-08-01", "size": 60, "color": "#e74c3c"},
        ],
        links=[{"source": "A", "target": "B", "strength": 10, "duration": 7, "phases": 4}],
    )


@pytest.fixture()
def pair_layout(pair_dataset, config):
    return compute_layout(pair_dataset, config)


@pytest.fixture()
def triangle_dataset():
    """A, B, C with links A→B and A→C plus a standalone phase on each of B and C."""
    return FlowDataset.from_records(
        projects=[
            {"id": "A", "name": "Alpha", "time": "2022-01-01", "size": 40},
            {"id": "B", "name": "Beta", "time": "2022-05-01", "size": 60},
            {"id": "C", "name": "Gamma", "time": "2022-07-01", "size": 20},
        ],
        links=[
            {"source": "A", "target": "B", "duration": 4, "phases": 2},
            {"source": "A", "target": "C", "duration": 6, "phases": 3},
        ],
        standalone=[
            {"source": "B", "duration": 2, "phases": 2},
            {"source": "C", "duration": 3, "phases": 1},
        ],
    )
