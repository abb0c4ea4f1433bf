"""Unit tests for run log utilities."""

import logging
import re

import pytest
import yaml

from vdjpool.io import get_logger, get_timestamped_log_path, log_yaml, release_logger


class TestLogPaths:
    """Tests for log path handling."""

    def test_timestamped_path(self, tmp_output_dir):
        """Test timestamp is inserted before the suffix."""
        path = get_timestamped_log_path(tmp_output_dir / "pooling.log")
        assert path.parent == tmp_output_dir
        assert re.fullmatch(r"pooling_\d{8}_\d{6}\.log", path.name)

    def test_timestamped_path_default_suffix(self, tmp_output_dir):
        """Test that a missing suffix defaults to .log."""
        path = get_timestamped_log_path(tmp_output_dir / "pooling")
        assert path.suffix == ".log"


class TestGetLogger:
    """Tests for get_logger and release_logger."""

    def test_writes_to_file(self, tmp_output_dir):
        """Test messages reach the log file."""
        logger, path = get_logger(
            "vdjpool.tests.file", tmp_output_dir / "logs" / "run.log", timestamped=False
        )
        logger.info("pooled %d samples", 3)
        release_logger(logger)

        assert path == tmp_output_dir / "logs" / "run.log"
        text = path.read_text()
        assert "INFO" in text
        assert "pooled 3 samples" in text

    def test_no_duplicate_handlers(self, tmp_output_dir):
        """Test that rebinding replaces the previous handler."""
        get_logger("vdjpool.tests.repeat", tmp_output_dir / "a.log", timestamped=False)
        logger, _ = get_logger(
            "vdjpool.tests.repeat", tmp_output_dir / "b.log", timestamped=False
        )
        assert len(logger.handlers) == 1
        release_logger(logger)
        assert logger.handlers == []

    def test_overwrite_when_not_timestamped(self, tmp_output_dir):
        """Test that an existing log is replaced."""
        path = tmp_output_dir / "run.log"
        path.write_text("stale\n")
        logger, _ = get_logger("vdjpool.tests.overwrite", path, timestamped=False)
        logger.warning("fresh")
        release_logger(logger)
        assert "stale" not in path.read_text()


class TestLogYaml:
    """Tests for YAML provenance records."""

    def test_log_yaml_file(self, tmp_output_dir):
        """Test that records are appended as YAML documents."""
        path = tmp_output_dir / "records.log"
        log_yaml(path, {"pooling": {"key": "nt_vj"}})
        log_yaml(path, {"pooling": {"key": "aa"}})

        documents = [d for d in yaml.safe_load_all(path.read_text()) if d]
        assert [d["pooling"]["key"] for d in documents] == ["nt_vj", "aa"]

    def test_log_yaml_logger(self, tmp_output_dir, caplog):
        """Test that a logger takes the record instead of the file."""
        path = tmp_output_dir / "unused.log"
        logger = logging.getLogger("vdjpool.tests.yaml")
        with caplog.at_level(logging.INFO, logger="vdjpool.tests.yaml"):
            log_yaml(path, {"pooling": {"diversity": 2}}, logger=logger)

        assert "diversity: 2" in caplog.text
        assert not path.exists()

    def test_log_yaml_requires_destination(self):
        """Test that a record needs either a path or a logger."""
        with pytest.raises(ValueError, match="log_path is required"):
            log_yaml(None, {"pooling": {}})
