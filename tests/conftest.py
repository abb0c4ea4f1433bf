"""Pytest configuration and shared fixtures for vdjpool tests."""

import sys
from pathlib import Path

import pytest

# Add package to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from vdjpool.core.sample import Clonotype, Sample

# Import mock data generators
from tests.fixtures import (
    create_clonotype_pool,
    create_mock_samples,
    create_feature_matrix,
)


# ============================================================================
# Sample Fixtures
# ============================================================================


@pytest.fixture
def sample_a() -> Sample:
    """Sample with two clonotypes (AAA/V1/J1 x5, CCC/V2/J2 x2)."""
    return Sample(
        [
            Clonotype("AAA", "K", "V1", "J1", 5),
            Clonotype("CCC", "P", "V2", "J2", 2),
        ],
        sample_id="A",
    )


@pytest.fixture
def sample_b() -> Sample:
    """Sample sharing AAA/V1/J1 with sample_a (x3)."""
    return Sample([Clonotype("AAA", "K", "V1", "J1", 3)], sample_id="B")


@pytest.fixture
def clonotype_pool():
    """Shared pool of clonotype identities."""
    return create_clonotype_pool(n_entries=300, seed=42)


@pytest.fixture
def mock_samples():
    """Three overlapping samples of 200 clonotypes each."""
    return create_mock_samples(n_samples=3, n_clonotypes=200, pool_size=300, seed=42)


# ============================================================================
# Numeric Fixtures
# ============================================================================


@pytest.fixture
def feature_x():
    """Non-negative 20 x 5 feature matrix."""
    return create_feature_matrix(n_obs=20, n_features=5, seed=1)


@pytest.fixture
def feature_y():
    """Non-negative 20 x 3 feature matrix."""
    return create_feature_matrix(n_obs=20, n_features=3, seed=2)


# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    """Create a temporary output directory for tests."""
    output_dir = tmp_path / "output"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


@pytest.fixture
def sample_pooling_config(tmp_path) -> Path:
    """Create sample pooling configuration file."""
    import yaml

    config = {
        "pooling": {
            "key": "aa_vj",
            "aggregator": "max",
            "n_shards": 4,
            "n_jobs": 2,
        },
    }

    path = tmp_path / "pooling.yaml"
    with open(path, "w") as f:
        yaml.dump(config, f)

    return path
