"""Pooled sample built from a completed aggregation."""

from __future__ import annotations

from typing import Iterator, List, Tuple

import pandas as pd

from ..sample import Clonotype, ClonotypeContainer, check_index
from .aggregator import SampleAggregator


class PooledSample(ClonotypeContainer):
    """Immutable, sorted sample holding one clonotype per aggregated key.

    Clonotypes are finalized with the merged count of their bucket and a
    weak back-reference to this pooled sample, then sorted once by the
    natural clonotype ordering. A pooled sample is its own normalization
    basis, so ``freq`` is always 1.0.

    Parameters
    ----------
    sample_aggregator : SampleAggregator
        Completed aggregation. Not modified.
    """

    def __init__(self, sample_aggregator: SampleAggregator):
        entries: List[Tuple[Clonotype, int]] = []
        count = 0

        for bucket in sample_aggregator:
            x = bucket.count
            count += x
            entries.append((bucket.clonotype.attach(self, count=x), bucket.incidence))

        entries.sort(key=lambda entry: entry[0].sort_key)

        self._clonotypes = tuple(c for c, _ in entries)
        self._incidence = tuple(n for _, n in entries)
        self._count = count
        self.key_id = sample_aggregator.key_id
        self.sample_ids = frozenset(sample_aggregator.sample_ids)

    def __repr__(self) -> str:
        return (
            f"PooledSample(key={self.key_id!r}, diversity={self.diversity}, "
            f"count={self.count}, n_samples={len(self.sample_ids)})"
        )

    @property
    def freq(self) -> float:
        return 1.0

    @property
    def count(self) -> int:
        return self._count

    @property
    def diversity(self) -> int:
        return len(self._clonotypes)

    @property
    def is_sorted(self) -> bool:
        return True

    def get(self, index: int) -> Clonotype:
        check_index(index, self.diversity)
        return self._clonotypes[index]

    def incidence(self, index: int) -> int:
        """Number of source samples contributing to the clonotype at ``index``."""
        check_index(index, self.diversity)
        return self._incidence[index]

    def __iter__(self) -> Iterator[Clonotype]:
        return iter(self._clonotypes)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a DataFrame in sorted order, with an incidence column."""
        df = super().to_dataframe()
        df["incidence"] = list(self._incidence)
        return df
