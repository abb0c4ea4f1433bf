"""Clonotype record.

A clonotype is one receptor variant observed in a sample: its CDR3
sequence (nucleotide and translated), the V/D/J segments, and the
number of times it was observed. Records are immutable; a clonotype
that moves into another container is copied with :meth:`Clonotype.attach`.
"""

from __future__ import annotations

import math
import weakref
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Optional, Tuple

if TYPE_CHECKING:
    from .container import ClonotypeContainer

# Characters marking a non-coding CDR3 translation
STOP_CODON = "*"
FRAMESHIFT_CHARS = ("_", "?")

MISSING_SEGMENT = "."


@dataclass(frozen=True)
class Clonotype:
    """An immutable clonotype record.

    Attributes
    ----------
    cdr3nt : str
        CDR3 nucleotide sequence
    cdr3aa : str
        CDR3 amino-acid sequence
    v : str
        Variable segment identifier
    j : str
        Joining segment identifier
    count : int
        Number of observations (non-negative)
    d : str
        Diversity segment identifier ("." when not determined)
    parent_ref : weakref.ref, optional
        Non-owning reference to the container holding this clonotype.
        Excluded from equality and hashing.
    """

    cdr3nt: str
    cdr3aa: str
    v: str
    j: str
    count: int
    d: str = MISSING_SEGMENT
    parent_ref: Optional[weakref.ref] = field(
        default=None, compare=False, repr=False
    )

    def __post_init__(self):
        if self.count < 0:
            raise ValueError(
                f"Clonotype count must be non-negative, got {self.count}"
            )

    @property
    def parent(self) -> Optional["ClonotypeContainer"]:
        """Owning container, or None if unattached or already collected."""
        if self.parent_ref is None:
            return None
        return self.parent_ref()

    @property
    def freq(self) -> float:
        """Frequency of this clonotype within its parent container.

        Returns NaN when the clonotype has no parent or the parent is empty.
        """
        parent = self.parent
        if parent is None or parent.count <= 0:
            return math.nan
        return self.count / parent.count

    @property
    def is_coding(self) -> bool:
        """True if the CDR3 translation has no stop codon or frameshift."""
        if STOP_CODON in self.cdr3aa:
            return False
        return not any(ch in self.cdr3aa for ch in FRAMESHIFT_CHARS)

    @property
    def sort_key(self) -> Tuple[Any, ...]:
        """Natural ordering: count descending, then identity fields."""
        return (-self.count, self.cdr3nt, self.cdr3aa, self.v, self.d, self.j)

    def __lt__(self, other: "Clonotype") -> bool:
        if not isinstance(other, Clonotype):
            return NotImplemented
        return self.sort_key < other.sort_key

    def attach(
        self,
        parent: "ClonotypeContainer",
        count: Optional[int] = None,
    ) -> "Clonotype":
        """Return a copy of this clonotype owned by ``parent``.

        Parameters
        ----------
        parent : ClonotypeContainer
            New owning container (held by weak reference)
        count : int, optional
            Replacement count. Keeps the current count if None.

        Returns
        -------
        Clonotype
            Attached copy
        """
        return replace(
            self,
            count=self.count if count is None else count,
            parent_ref=weakref.ref(parent),
        )
