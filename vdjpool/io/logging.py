"""Run logs for pooling.

A pooling run can write its progress messages and its provenance record
to one log file. Progress lines use ``LOG_FORMAT``; provenance is a YAML
document terminated by ``---`` so several runs can share a file.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import yaml

PathLike = Union[str, Path]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_timestamped_log_path(log_path: PathLike) -> Path:
    """Insert the current time into a log file name.

    Example: pooling.log -> pooling_20251209_080530.log
    """
    log_path = Path(log_path)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return log_path.with_name(f"{log_path.stem}_{timestamp}{log_path.suffix or '.log'}")


def release_logger(logger: logging.Logger) -> None:
    """Detach and close every handler of ``logger``."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def get_logger(
    name: str,
    log_path: PathLike,
    level: int = logging.INFO,
    timestamped: bool = True,
) -> Tuple[logging.Logger, Path]:
    """Bind a logger to a single run log file.

    Any handlers left from a previous run are closed first. The logger
    does not propagate, so run messages stay out of the root handlers.

    Parameters
    ----------
    name : str
        Logger name
    log_path : PathLike
        Base path for the log file
    level : int
        Logging level (default: INFO)
    timestamped : bool
        If True, write to a timestamped sibling of ``log_path`` so previous
        runs are kept. If False, replace ``log_path``.

    Returns
    -------
    Tuple[logging.Logger, Path]
        The logger and the file it writes to
    """
    if timestamped:
        run_log_path = get_timestamped_log_path(log_path)
    else:
        run_log_path = Path(log_path)
        run_log_path.unlink(missing_ok=True)
    run_log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    release_logger(logger)
    logger.setLevel(level)
    logger.propagate = False

    handler = logging.FileHandler(run_log_path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)
    return logger, run_log_path


def log_yaml(
    log_path: Optional[PathLike],
    record: dict[str, Any],
    *,
    logger: logging.Logger | None = None,
) -> None:
    """Append ``record`` as a YAML document.

    Parameters
    ----------
    log_path : PathLike, optional
        File to append to. Ignored when ``logger`` is given.
    record : dict
        Dictionary to serialize
    logger : logging.Logger, optional
        If provided, emit the document as one INFO message instead
    """
    message = yaml.safe_dump(record, sort_keys=False).rstrip("\n") + "\n---"
    if logger is not None:
        logger.info("%s", message)
        return
    if log_path is None:
        raise ValueError("log_path is required when no logger is given")

    path = Path(log_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(message + "\n")
