"""Clonotype equivalence keys.

A key wraps one clonotype and projects a fixed tuple of its identity
fields. Two keys of the same variant are equal iff their projections are
equal, and their hashes agree whenever they are equal. Keys of different
variants never compare equal.

New variants only declare ``key_id`` and ``fields``:

    >>> @KeyRegistry.register
    ... class AaVKey(ClonotypeKey):
    ...     key_id = "aa_v"
    ...     fields = ("cdr3aa", "v")
"""

from __future__ import annotations

import hashlib
from typing import Any, Tuple

from ..sample import Clonotype
from .registry import KeyRegistry

HASH_MULTIPLIER = 31
_HASH_MASK = (1 << 64) - 1


def _field_hash(value: Any) -> int:
    """64-bit hash of one field value, identical across interpreter runs."""
    digest = hashlib.md5(str(value).encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


class ClonotypeKey:
    """Base class for clonotype equivalence keys.

    Parameters
    ----------
    clonotype : Clonotype
        Clonotype whose identity this key represents

    Attributes
    ----------
    key_id : str
        Registry identifier of the variant
    fields : Tuple[str, ...]
        Clonotype attributes participating in equivalence, in hashing order
    """

    key_id: str = ""
    fields: Tuple[str, ...] = ()

    __slots__ = ("clonotype", "_hash")

    def __init__(self, clonotype: Clonotype):
        self.clonotype = clonotype
        self._hash = self.hash_clonotype(clonotype)

    @classmethod
    def project(cls, clonotype: Clonotype) -> Tuple[Any, ...]:
        """Return the values of this variant's fields for ``clonotype``."""
        return tuple(getattr(clonotype, f) for f in cls.fields)

    @classmethod
    def equivalent(cls, a: Clonotype, b: Clonotype) -> bool:
        """True if ``a`` and ``b`` agree on every field of this variant."""
        return all(getattr(a, f) == getattr(b, f) for f in cls.fields)

    @classmethod
    def hash_clonotype(cls, clonotype: Clonotype) -> int:
        """Order-sensitive hash of this variant's fields.

        Stable across processes, so shard assignment is reproducible.
        """
        h = 0
        for value in cls.project(clonotype):
            h = (h * HASH_MULTIPLIER + _field_hash(value)) & _HASH_MASK
        return h

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.equivalent(self.clonotype, other.clonotype)

    def __repr__(self) -> str:
        values = ", ".join(repr(v) for v in self.project(self.clonotype))
        return f"{type(self).__name__}({values})"


@KeyRegistry.register
class NtKey(ClonotypeKey):
    """Nucleotide CDR3 only."""

    key_id = "nt"
    fields = ("cdr3nt",)
    __slots__ = ()


@KeyRegistry.register
class AaKey(ClonotypeKey):
    """Amino-acid CDR3 only."""

    key_id = "aa"
    fields = ("cdr3aa",)
    __slots__ = ()


@KeyRegistry.register
class NtVJKey(ClonotypeKey):
    """Nucleotide CDR3 with V and J segments."""

    key_id = "nt_vj"
    fields = ("cdr3nt", "v", "j")
    __slots__ = ()


@KeyRegistry.register
class AaVJKey(ClonotypeKey):
    """Amino-acid CDR3 with V and J segments."""

    key_id = "aa_vj"
    fields = ("cdr3aa", "v", "j")
    __slots__ = ()


@KeyRegistry.register
class NtVJDKey(ClonotypeKey):
    """Nucleotide CDR3 with V, J and D segments."""

    key_id = "nt_vjd"
    fields = ("cdr3nt", "v", "j", "d")
    __slots__ = ()


@KeyRegistry.register
class AaVJDKey(ClonotypeKey):
    """Amino-acid CDR3 with V, J and D segments."""

    key_id = "aa_vjd"
    fields = ("cdr3aa", "v", "j", "d")
    __slots__ = ()
