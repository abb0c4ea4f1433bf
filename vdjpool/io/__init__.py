"""I/O utilities for vdjpool.

Provides run log files and YAML provenance records.
"""

from .logging import get_logger, get_timestamped_log_path, log_yaml, release_logger

__all__ = [
    "get_logger",
    "get_timestamped_log_path",
    "log_yaml",
    "release_logger",
]
