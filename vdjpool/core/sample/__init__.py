"""Clonotype records and sample containers.

This module provides:
- Clonotype: Immutable clonotype record with natural (count descending) ordering
- ClonotypeContainer: Read-only container contract used by all analyses
- Sample: In-memory container for a single repertoire
"""

from .clonotype import Clonotype, MISSING_SEGMENT
from .container import ClonotypeContainer, check_index
from .sample import Sample

__all__ = [
    "Clonotype",
    "MISSING_SEGMENT",
    "ClonotypeContainer",
    "check_index",
    "Sample",
]
