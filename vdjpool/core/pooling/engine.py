"""Pooling engine.

This module provides the PoolingEngine class that merges any number of
samples into one PooledSample, optionally sharding the key space across
worker threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union

from joblib import Parallel, delayed

from ...io import get_logger, log_yaml, release_logger
from ..join import ClonotypeKey, KeyRegistry
from ..sample import Clonotype, ClonotypeContainer
from .aggregator import AGGREGATOR_TYPES, ClonotypeAggregator, SampleAggregator
from .config import PoolingConfig
from .pooled import PooledSample

logger = logging.getLogger(__name__)

ShardItems = List[Tuple[Clonotype, Optional[str]]]


@dataclass
class PoolingResult:
    """Result of pooling samples.

    Attributes
    ----------
    pooled : PooledSample
        Pooled, sorted sample
    config : PoolingConfig
        Configuration used
    provenance : Dict[str, Any]
        Execution provenance (inputs, totals, timing)
    """

    pooled: PooledSample
    config: PoolingConfig = field(default_factory=PoolingConfig)
    provenance: Dict[str, Any] = field(default_factory=dict)

    def log_summary(
        self,
        log_path: Union[str, Path],
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Append the provenance record as a YAML document.

        Parameters
        ----------
        log_path : str or Path
            Destination log file (ignored when ``logger`` is given)
        logger : logging.Logger, optional
            Logger to write to instead of the file
        """
        log_yaml(log_path, {"pooling": self.provenance}, logger=logger)


def _aggregate_shard(
    items: ShardItems,
    key: Type[ClonotypeKey],
    aggregator_factory: Type[ClonotypeAggregator],
) -> SampleAggregator:
    """Aggregate one shard of (clonotype, sample_id) pairs."""
    aggregator = SampleAggregator(key=key, aggregator_factory=aggregator_factory)
    for clonotype, sample_id in items:
        aggregator.ingest(clonotype, sample_id=sample_id)
    return aggregator


def partition_by_key(
    samples: Sequence[ClonotypeContainer],
    key: Type[ClonotypeKey],
    n_shards: int,
) -> List[ShardItems]:
    """Split all clonotypes of ``samples`` into shards by key hash.

    Every clonotype of an equivalence class lands in the same shard, and
    ingestion order is preserved within each shard.

    Parameters
    ----------
    samples : Sequence[ClonotypeContainer]
        Input samples
    key : Type[ClonotypeKey]
        Equivalence key variant
    n_shards : int
        Number of shards

    Returns
    -------
    List[ShardItems]
        One list of (clonotype, sample_id) pairs per shard
    """
    shards: List[ShardItems] = [[] for _ in range(n_shards)]
    for sample in samples:
        sample_id = getattr(sample, "sample_id", None)
        for clonotype in sample:
            shards[key.hash_clonotype(clonotype) % n_shards].append((clonotype, sample_id))
    return shards


class PoolingEngine:
    """Engine for pooling samples by clonotype equivalence.

    Parameters
    ----------
    config : PoolingConfig, optional
        Configuration. Uses defaults if not provided.

    Example
    -------
    >>> from vdjpool.core.pooling import PoolingEngine, PoolingConfig
    >>> engine = PoolingEngine(PoolingConfig(key="aa_vj"))
    >>> result = engine.execute([sample_a, sample_b])
    >>> print(f"Pooled {result.pooled.diversity} clonotypes")
    """

    def __init__(self, config: Optional[PoolingConfig] = None):
        self.config = config or PoolingConfig.default()
        self.config.validate()
        self.key = KeyRegistry.get_key(self.config.key)
        self.aggregator_factory = AGGREGATOR_TYPES[self.config.aggregator]

    def aggregate(self, samples: Sequence[ClonotypeContainer]) -> SampleAggregator:
        """Aggregate samples into a single SampleAggregator.

        Parameters
        ----------
        samples : Sequence[ClonotypeContainer]
            Samples to pool

        Returns
        -------
        SampleAggregator
            Completed aggregation
        """
        n_shards = self.config.n_shards
        if n_shards == 1:
            return SampleAggregator(
                samples, key=self.key, aggregator_factory=self.aggregator_factory
            )

        shards = partition_by_key(samples, self.key, n_shards)
        logger.debug(
            "Partitioned into %d shards (sizes: %s)",
            n_shards, ", ".join(str(len(s)) for s in shards),
        )

        # Clonotypes hold weak references and cannot be pickled to worker processes
        shard_aggregators = Parallel(n_jobs=self.config.n_jobs, prefer="threads")(
            delayed(_aggregate_shard)(items, self.key, self.aggregator_factory)
            for items in shards
        )

        merged = SampleAggregator(key=self.key, aggregator_factory=self.aggregator_factory)
        for shard in shard_aggregators:
            merged.merge(shard)
        return merged

    def execute(
        self,
        samples: Sequence[ClonotypeContainer],
        log_path: Optional[Union[str, Path]] = None,
    ) -> PoolingResult:
        """Pool samples into one PooledSample.

        Parameters
        ----------
        samples : Sequence[ClonotypeContainer]
            Samples to pool
        log_path : str or Path, optional
            Base path of a run log. When given, progress messages and the
            provenance record are written to a timestamped file next to it.

        Returns
        -------
        PoolingResult
            Pooled sample and provenance

        Raises
        ------
        ValueError
            If no samples are given
        RuntimeError
            If the pooled total differs from the input total
        """
        samples = list(samples)
        if not samples:
            raise ValueError("At least one sample is required for pooling")

        run_logger, run_log_path = logger, None
        if log_path is not None:
            run_logger, run_log_path = get_logger(f"{__name__}.run", log_path)

        try:
            return self._execute(samples, run_logger, run_log_path)
        finally:
            if run_log_path is not None:
                release_logger(run_logger)

    def _execute(
        self,
        samples: List[ClonotypeContainer],
        run_logger: logging.Logger,
        run_log_path: Optional[Path],
    ) -> PoolingResult:
        start_time = datetime.now()
        input_count = sum(s.count for s in samples)
        n_input = sum(s.diversity for s in samples)

        run_logger.info(
            "Pooling %d samples (%s clonotypes, key=%s, aggregator=%s)",
            len(samples), f"{n_input:,}", self.config.key, self.config.aggregator,
        )

        aggregator = self.aggregate(samples)
        pooled = PooledSample(aggregator)

        if pooled.count != input_count:
            run_logger.error(
                "Pooled count %d differs from input count %d", pooled.count, input_count
            )
            raise RuntimeError(
                f"Pooled count {pooled.count} differs from input count {input_count}"
            )

        end_time = datetime.now()
        duration = (end_time - start_time).total_seconds()
        run_logger.info(
            "Pooled sample: diversity=%s, count=%s (%.2fs)",
            f"{pooled.diversity:,}", f"{pooled.count:,}", duration,
        )

        provenance = {
            "timestamp": start_time.isoformat(),
            "duration_seconds": duration,
            "n_samples": len(samples),
            "sample_ids": [getattr(s, "sample_id", None) for s in samples],
            "n_input_clonotypes": n_input,
            "input_count": input_count,
            "total_count": pooled.count,
            "diversity": pooled.diversity,
            "key": self.config.key,
            "aggregator": self.config.aggregator,
            "n_shards": self.config.n_shards,
        }

        result = PoolingResult(pooled=pooled, config=self.config, provenance=provenance)
        if run_log_path is not None:
            provenance["log_path"] = str(run_log_path)
            result.log_summary(run_log_path, logger=run_logger)
        return result
