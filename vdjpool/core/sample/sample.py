"""In-memory sample container.

A :class:`Sample` holds the clonotypes of one repertoire. It is built
from already-parsed records; reading samples from disk is left to the
caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional

import pandas as pd

from .clonotype import MISSING_SEGMENT, Clonotype
from .container import ClonotypeContainer, check_index

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("count", "cdr3nt", "cdr3aa", "v", "j")


class Sample(ClonotypeContainer):
    """A single repertoire sample.

    Parameters
    ----------
    clonotypes : Iterable[Clonotype]
        Clonotypes of the sample. Each is copied and attached to this sample.
    sample_id : str
        Sample identifier, recorded as provenance when pooling
    is_sorted : bool
        Declare that ``clonotypes`` already follow the natural ordering.
        Checked on construction.

    Raises
    ------
    ValueError
        If ``is_sorted`` is True but the clonotypes are out of order
    """

    def __init__(
        self,
        clonotypes: Iterable[Clonotype],
        sample_id: str = "sample",
        is_sorted: bool = False,
    ):
        self.sample_id = sample_id
        self._clonotypes = tuple(c.attach(self) for c in clonotypes)
        self._count = sum(c.count for c in self._clonotypes)

        if is_sorted:
            for prev, curr in zip(self._clonotypes, self._clonotypes[1:]):
                if curr < prev:
                    raise ValueError(
                        f"Sample '{sample_id}' declared sorted but clonotypes are out of order"
                    )
        self._is_sorted = is_sorted

    def __repr__(self) -> str:
        return (
            f"Sample(sample_id={self.sample_id!r}, diversity={self.diversity}, "
            f"count={self.count})"
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
        return self._is_sorted

    def get(self, index: int) -> Clonotype:
        check_index(index, self.diversity)
        return self._clonotypes[index]

    def __iter__(self) -> Iterator[Clonotype]:
        return iter(self._clonotypes)

    def sort(self) -> "Sample":
        """Return a copy of this sample in natural clonotype order."""
        return Sample(sorted(self._clonotypes), self.sample_id, is_sorted=True)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        sample_id: str = "sample",
    ) -> "Sample":
        """Create a sample from an iterable of mappings.

        Each mapping must provide count, cdr3nt, cdr3aa, v and j; d is
        optional.

        Parameters
        ----------
        records : Iterable[Mapping[str, Any]]
            Clonotype records
        sample_id : str
            Sample identifier

        Returns
        -------
        Sample
            Sample instance
        """
        clonotypes = []
        for i, record in enumerate(records):
            missing = [f for f in REQUIRED_FIELDS if f not in record]
            if missing:
                raise ValueError(
                    f"Record {i} of sample '{sample_id}' missing fields: {missing}"
                )
            d = record.get("d")
            clonotypes.append(Clonotype(
                cdr3nt=str(record["cdr3nt"]),
                cdr3aa=str(record["cdr3aa"]),
                v=str(record["v"]),
                j=str(record["j"]),
                count=int(record["count"]),
                d=MISSING_SEGMENT if d is None or pd.isna(d) else str(d),
            ))
        return cls(clonotypes, sample_id=sample_id)

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        sample_id: str = "sample",
        columns: Optional[Dict[str, str]] = None,
    ) -> "Sample":
        """Create a sample from a DataFrame with one row per clonotype.

        Parameters
        ----------
        df : pd.DataFrame
            Clonotype table
        sample_id : str
            Sample identifier
        columns : Dict[str, str], optional
            Mapping of clonotype field (count, cdr3nt, cdr3aa, v, d, j) to
            the DataFrame column holding it. Unmapped fields use their own name.

        Returns
        -------
        Sample
            Sample instance
        """
        columns = columns or {}
        rename = {columns[f]: f for f in columns}
        df = df.rename(columns=rename)

        for f in REQUIRED_FIELDS:
            if f not in df.columns:
                raise ValueError(f"Column '{columns.get(f, f)}' not found in DataFrame")

        keep = list(REQUIRED_FIELDS) + (["d"] if "d" in df.columns else [])
        logger.debug("Building sample %s from %d rows", sample_id, len(df))
        return cls.from_records(df[keep].to_dict("records"), sample_id=sample_id)
