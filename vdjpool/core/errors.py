"""Structural errors raised by vdjpool.

Both errors signal a violated caller contract and are never recovered
locally.
"""


class LengthMismatchError(ValueError):
    """Raised when two collections expected to match in length differ."""

    pass


class ClonotypeIndexError(IndexError):
    """Raised when a container is indexed outside ``[0, diversity)``."""

    pass
