"""Read-only clonotype container contract.

Every sample-like object consumed by downstream analyses implements
:class:`ClonotypeContainer`: a frequency basis, a total count, a
diversity, bounds-checked positional access, and restartable iteration.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

import pandas as pd

from ..errors import ClonotypeIndexError
from .clonotype import Clonotype

CLONOTYPE_COLUMNS = ["count", "freq", "cdr3nt", "cdr3aa", "v", "d", "j"]


def check_index(index: int, diversity: int) -> None:
    """Raise ClonotypeIndexError unless ``0 <= index < diversity``."""
    if not 0 <= index < diversity:
        raise ClonotypeIndexError(
            f"Index {index} out of range for container of diversity {diversity}"
        )


class ClonotypeContainer(ABC):
    """Abstract base class for clonotype containers.

    Subclasses must implement:
    - freq: Frequency basis of the container
    - count: Total clonotype count
    - diversity: Number of clonotypes
    - is_sorted: Whether iteration follows the natural clonotype ordering
    - get(index): Bounds-checked positional access
    - __iter__: Finite, restartable iteration
    """

    @property
    @abstractmethod
    def freq(self) -> float:
        """Frequency of this container relative to its normalization basis."""
        pass

    @property
    @abstractmethod
    def count(self) -> int:
        """Sum of clonotype counts."""
        pass

    @property
    @abstractmethod
    def diversity(self) -> int:
        """Number of clonotypes held."""
        pass

    @property
    @abstractmethod
    def is_sorted(self) -> bool:
        """True if clonotypes are held in natural (count descending) order."""
        pass

    @abstractmethod
    def get(self, index: int) -> Clonotype:
        """Return the clonotype at ``index``.

        Raises
        ------
        ClonotypeIndexError
            If index is outside ``[0, diversity)``
        """
        pass

    @abstractmethod
    def __iter__(self) -> Iterator[Clonotype]:
        pass

    def __len__(self) -> int:
        return self.diversity

    def __getitem__(self, index: int) -> Clonotype:
        return self.get(index)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert the container to a DataFrame, one row per clonotype.

        Returns
        -------
        pd.DataFrame
            Columns: count, freq, cdr3nt, cdr3aa, v, d, j
        """
        rows = [
            {
                "count": c.count,
                "freq": c.freq,
                "cdr3nt": c.cdr3nt,
                "cdr3aa": c.cdr3aa,
                "v": c.v,
                "d": c.d,
                "j": c.j,
            }
            for c in self
        ]
        return pd.DataFrame(rows, columns=CLONOTYPE_COLUMNS)
