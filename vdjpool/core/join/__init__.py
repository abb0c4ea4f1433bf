"""Clonotype equivalence keys.

This module provides:
- ClonotypeKey: Base class projecting a fixed tuple of clonotype fields
- Built-in variants: NtKey, AaKey, NtVJKey, AaVJKey, NtVJDKey, AaVJDKey
- KeyRegistry: Lookup of key variants by identifier (e.g. "nt_vj")
"""

from .registry import KeyRegistry
from .keys import (
    HASH_MULTIPLIER,
    ClonotypeKey,
    NtKey,
    AaKey,
    NtVJKey,
    AaVJKey,
    NtVJDKey,
    AaVJDKey,
)

__all__ = [
    "KeyRegistry",
    "HASH_MULTIPLIER",
    "ClonotypeKey",
    "NtKey",
    "AaKey",
    "NtVJKey",
    "AaVJKey",
    "NtVJDKey",
    "AaVJDKey",
]
