"""vdjpool: clonotype identity and sample pooling for immune repertoires.

This package provides tools for:
- Clonotype equivalence keys (nucleotide/amino-acid CDR3 with V/J/D segments)
- Aggregation of clonotypes from one or many samples by equivalence key
- Pooled samples: sorted, immutable containers built from aggregations
- Distance correlation between paired sets of repertoire feature vectors

Example usage:
    >>> from vdjpool.core.sample import Clonotype, Sample
    >>> from vdjpool.core.pooling import PoolingEngine
    >>>
    >>> sample = Sample([Clonotype("TGTGCC", "CA", "TRBV1", "TRBJ1", 5)], "S1")
    >>> result = PoolingEngine().execute([sample])
    >>> result.pooled.diversity
    1
"""

__version__ = "0.1.0"
