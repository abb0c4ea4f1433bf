"""Core computational modules for vdjpool.

This package contains:
- sample: Clonotype records and the read-only container contract
- join: Equivalence keys deciding when two clonotypes are the same
- pooling: Aggregation of samples into a pooled sample
"""
