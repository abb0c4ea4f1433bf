"""Test fixtures for vdjpool.

Provides mock sample generators and test utilities.
"""

from .mock_samples import (
    create_clonotype_pool,
    create_mock_sample,
    create_mock_samples,
    create_feature_matrix,
)

__all__ = [
    "create_clonotype_pool",
    "create_mock_sample",
    "create_mock_samples",
    "create_feature_matrix",
]
