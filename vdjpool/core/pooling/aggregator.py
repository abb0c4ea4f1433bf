"""Aggregation of clonotypes by equivalence key.

This module provides:
- ClonotypeAggregator: Per-key bucket with running count and sample provenance
- StoringClonotypeAggregator: Keeps the first clonotype seen as representative
- MaxClonotypeAggregator: Keeps the most abundant contributing clonotype
- SampleAggregator: Mapping from key to bucket, fed one clonotype at a time
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from typing import (
    Any,
    Callable,
    Dict,
    Hashable,
    Iterable,
    Iterator,
    Optional,
    Set,
    Type,
    Union,
)

from ..join import ClonotypeKey, KeyRegistry, NtVJKey
from ..sample import Clonotype, ClonotypeContainer

logger = logging.getLogger(__name__)


class ClonotypeAggregator(ABC):
    """Running total for one equivalence class of clonotypes.

    Parameters
    ----------
    clonotype : Clonotype
        First clonotype of the class; seeds the count and representative
    sample_id : str, optional
        Sample the clonotype came from

    Attributes
    ----------
    count : int
        Sum of counts of all combined clonotypes
    sample_ids : Set[str]
        Samples that contributed to this bucket
    """

    def __init__(self, clonotype: Clonotype, sample_id: Optional[str] = None):
        self.count = 0
        self.sample_ids: Set[str] = set()
        self._clonotype = clonotype
        self._representative_count = clonotype.count
        self.combine(clonotype, sample_id)

    @property
    def clonotype(self) -> Clonotype:
        """Representative clonotype carrying the identity fields."""
        return self._clonotype

    @property
    def incidence(self) -> int:
        """Number of distinct samples that contributed."""
        return len(self.sample_ids)

    @abstractmethod
    def _prefers(self, candidate_count: int) -> bool:
        """True if a clonotype with ``candidate_count`` should become representative."""
        pass

    def combine(self, clonotype: Clonotype, sample_id: Optional[str] = None) -> None:
        """Add a clonotype occurrence to this bucket."""
        self.count += clonotype.count
        if sample_id is not None:
            self.sample_ids.add(sample_id)
        if clonotype is not self._clonotype and self._prefers(clonotype.count):
            self._clonotype = clonotype
            self._representative_count = clonotype.count

    def absorb(self, other: "ClonotypeAggregator") -> None:
        """Fold another bucket of the same equivalence class into this one."""
        self.count += other.count
        self.sample_ids |= other.sample_ids
        if self._prefers(other._representative_count):
            self._clonotype = other._clonotype
            self._representative_count = other._representative_count

    def copy(self) -> "ClonotypeAggregator":
        """Return an independent copy of this bucket."""
        new = copy.copy(self)
        new.sample_ids = set(self.sample_ids)
        return new

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(count={self.count}, incidence={self.incidence}, "
            f"clonotype={self._clonotype!r})"
        )


class StoringClonotypeAggregator(ClonotypeAggregator):
    """Bucket whose representative is the first clonotype ingested."""

    def _prefers(self, candidate_count: int) -> bool:
        return False


class MaxClonotypeAggregator(ClonotypeAggregator):
    """Bucket whose representative is the largest single contributing clonotype.

    Ties keep the earlier clonotype.
    """

    def _prefers(self, candidate_count: int) -> bool:
        return candidate_count > self._representative_count


AGGREGATOR_TYPES: Dict[str, Type[ClonotypeAggregator]] = {
    "storing": StoringClonotypeAggregator,
    "max": MaxClonotypeAggregator,
}

KeyLike = Union[str, Type[ClonotypeKey], Callable[[Clonotype], Hashable]]


def _key_name(key: Any) -> str:
    return getattr(key, "__name__", repr(key))


class SampleAggregator:
    """Groups clonotype occurrences by equivalence key, summing counts.

    One aggregator owns its bucket mapping exclusively. To pool in
    parallel, build one aggregator per shard of the key space and
    combine them with :meth:`merge`.

    Parameters
    ----------
    samples : Iterable[ClonotypeContainer]
        Samples to ingest immediately
    key : str, Type[ClonotypeKey] or callable
        Equivalence key variant, as a class or registry identifier, or any
        function mapping a clonotype to a hashable key
    aggregator_factory : Type[ClonotypeAggregator]
        Bucket class created for each new equivalence class

    Example
    -------
    >>> aggregator = SampleAggregator([sample_a, sample_b], key="nt_vj")
    >>> aggregator.diversity
    2
    """

    def __init__(
        self,
        samples: Iterable[ClonotypeContainer] = (),
        key: KeyLike = NtVJKey,
        aggregator_factory: Type[ClonotypeAggregator] = StoringClonotypeAggregator,
    ):
        self.key = KeyRegistry.resolve(key)
        self.aggregator_factory = aggregator_factory
        self._buckets: Dict[Hashable, ClonotypeAggregator] = {}
        self._total_count = 0
        self._n_ingested = 0
        self._sample_ids: Set[str] = set()

        for sample in samples:
            self.ingest_sample(sample)

    def ingest(
        self,
        clonotype: Clonotype,
        key_fn: Optional[KeyLike] = None,
        sample_id: Optional[str] = None,
    ) -> ClonotypeAggregator:
        """Merge one clonotype occurrence into its bucket.

        Parameters
        ----------
        clonotype : Clonotype
            Clonotype to ingest. Zero counts still create or touch a bucket.
        key_fn : str or Type[ClonotypeKey], optional
            Key variant to use. Must match the aggregator's variant.
        sample_id : str, optional
            Source sample, recorded as bucket provenance

        Returns
        -------
        ClonotypeAggregator
            The bucket the clonotype was merged into

        Raises
        ------
        ValueError
            If ``key_fn`` is a different variant than the aggregator's key
        """
        if key_fn is not None and KeyRegistry.resolve(key_fn) is not self.key:
            raise ValueError(
                f"Aggregator is bound to {_key_name(self.key)}, got {key_fn!r}"
            )

        key = self.key(clonotype)
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = self.aggregator_factory(clonotype, sample_id)
            self._buckets[key] = bucket
        else:
            bucket.combine(clonotype, sample_id)

        self._total_count += clonotype.count
        self._n_ingested += 1
        if sample_id is not None:
            self._sample_ids.add(sample_id)
        return bucket

    def ingest_sample(self, sample: ClonotypeContainer) -> None:
        """Ingest every clonotype of ``sample``.

        The sample's ``sample_id`` attribute, if any, is used as provenance.
        """
        sample_id = getattr(sample, "sample_id", None)
        before = self.diversity
        for clonotype in sample:
            self.ingest(clonotype, sample_id=sample_id)
        logger.debug(
            "Ingested sample %s: %d clonotypes, %d new keys",
            sample_id, sample.diversity, self.diversity - before,
        )

    def merge(self, other: "SampleAggregator") -> None:
        """Fold the buckets of ``other`` into this aggregator.

        Raises
        ------
        ValueError
            If ``other`` uses a different key variant
        """
        if other.key is not self.key:
            raise ValueError(
                f"Cannot merge aggregator keyed by {_key_name(other.key)} "
                f"into one keyed by {_key_name(self.key)}"
            )

        for key, bucket in other._buckets.items():
            mine = self._buckets.get(key)
            if mine is None:
                self._buckets[key] = bucket.copy()
            else:
                mine.absorb(bucket)

        self._total_count += other._total_count
        self._n_ingested += other._n_ingested
        self._sample_ids |= other._sample_ids

    def get(self, clonotype: Clonotype) -> Optional[ClonotypeAggregator]:
        """Return the bucket holding ``clonotype``'s equivalence class, if any."""
        return self._buckets.get(self.key(clonotype))

    @property
    def key_id(self) -> str:
        """Registry identifier of the key, or the key function's name."""
        return getattr(self.key, "key_id", None) or _key_name(self.key)

    @property
    def diversity(self) -> int:
        """Number of distinct equivalence classes observed."""
        return len(self._buckets)

    @property
    def total_count(self) -> int:
        """Sum of counts of all ingested clonotypes."""
        return self._total_count

    @property
    def n_ingested(self) -> int:
        """Number of clonotype occurrences ingested."""
        return self._n_ingested

    @property
    def sample_ids(self) -> Set[str]:
        """Identifiers of the samples ingested so far."""
        return set(self._sample_ids)

    @property
    def n_samples(self) -> int:
        return len(self._sample_ids)

    def __iter__(self) -> Iterator[ClonotypeAggregator]:
        return iter(self._buckets.values())

    def __len__(self) -> int:
        return len(self._buckets)

    def __repr__(self) -> str:
        return (
            f"SampleAggregator(key={self.key_id!r}, diversity={self.diversity}, "
            f"total_count={self.total_count})"
        )
