"""Configuration for sample pooling.

The equivalence key and bucket representative policy are selected by
name so they can be set from YAML.
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

from ..join import KeyRegistry
from .aggregator import AGGREGATOR_TYPES


@dataclass
class PoolingConfig:
    """Configuration for pooling samples.

    Attributes
    ----------
    key : str
        Equivalence key identifier (nt, aa, nt_vj, aa_vj, nt_vjd, aa_vjd)
    aggregator : str
        Representative policy for each bucket (storing, max)
    n_shards : int
        Number of key-hash shards aggregated independently
    n_jobs : int
        Number of worker threads used when n_shards > 1
    """

    key: str = "nt_vj"
    aggregator: str = "storing"
    n_shards: int = 1
    n_jobs: int = 1

    def validate(self) -> None:
        """Check that every setting is usable.

        Raises
        ------
        KeyError
            If the key identifier is not registered
        ValueError
            If the aggregator is unknown or shard/job counts are not positive
        """
        KeyRegistry.get_key(self.key)
        if self.aggregator not in AGGREGATOR_TYPES:
            raise ValueError(
                f"Unknown aggregator '{self.aggregator}'. "
                f"Available: {', '.join(sorted(AGGREGATOR_TYPES))}"
            )
        if self.n_shards < 1:
            raise ValueError(f"n_shards must be >= 1, got {self.n_shards}")
        if self.n_jobs < 1:
            raise ValueError(f"n_jobs must be >= 1, got {self.n_jobs}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PoolingConfig":
        """Create from dictionary, ignoring unknown keys."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_yaml(cls, path: Path) -> "PoolingConfig":
        """Load configuration from YAML file.

        The settings may sit at the top level or under a ``pooling`` section.

        Parameters
        ----------
        path : Path
            Path to YAML configuration file

        Returns
        -------
        PoolingConfig
            Configuration instance
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data.get("pooling", data))

    @classmethod
    def default(cls) -> "PoolingConfig":
        """Create default configuration."""
        return cls()
