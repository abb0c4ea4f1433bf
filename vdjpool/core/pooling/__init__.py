"""
Pooling module for merging samples by clonotype equivalence.

This module provides:
- Per-key buckets (storing / max representative policies)
- SampleAggregator for grouping clonotypes across samples
- PooledSample, the sorted immutable result of an aggregation
- PoolingEngine for configurable, optionally sharded pooling
"""

from .aggregator import (
    AGGREGATOR_TYPES,
    ClonotypeAggregator,
    StoringClonotypeAggregator,
    MaxClonotypeAggregator,
    SampleAggregator,
)
from .pooled import PooledSample
from .config import PoolingConfig
from .engine import PoolingEngine, PoolingResult, partition_by_key

__all__ = [
    # Aggregation
    "AGGREGATOR_TYPES",
    "ClonotypeAggregator",
    "StoringClonotypeAggregator",
    "MaxClonotypeAggregator",
    "SampleAggregator",
    # Result container
    "PooledSample",
    # Engine
    "PoolingConfig",
    "PoolingEngine",
    "PoolingResult",
    "partition_by_key",
]
