"""
Smoke tests for smartmatch configuration, logging and CLI.
"""

import json
import logging
from pathlib import Path

import pytest

from smartmatch.app import load_config, main, parse_arguments
from smartmatch.config import Config
from smartmatch.logging_utils import LOGGER_NAME, log_error, setup_logger


class TestConfig:
    """Test configuration management."""

    def test_default_config(self):
        """Test default configuration values."""
        config = Config()
        assert config.similarity_threshold == 0.70
        assert config.best_match_threshold == 0.60
        assert config.cache_size == 10000
        assert config.fix_encoding is True
        assert config.log_level == "ERROR"

    def test_config_validation(self):
        """Test configuration validation."""
        # Valid config
        config = Config(similarity_threshold=0.8, cache_size=0)
        assert config.similarity_threshold == 0.8
        assert config.cache_size == 0

        with pytest.raises(ValueError, match="similarity_threshold must be between 0 and 1"):
            Config(similarity_threshold=1.5)

        with pytest.raises(ValueError, match="best_match_threshold must be between 0 and 1"):
            Config(best_match_threshold=-0.1)

        with pytest.raises(ValueError, match="cache_size cannot be negative"):
            Config(cache_size=-1)

        with pytest.raises(ValueError, match="debug_log_limit cannot be negative"):
            Config(debug_log_limit=-1)

        with pytest.raises(ValueError, match="log_level must be one of"):
            Config(log_level="LOUD")

    def test_log_level_uppercased(self):
        assert Config(log_level="debug").log_level == "DEBUG"

    def test_equal_thresholds_warn(self):
        with pytest.warns(UserWarning, match="are equal"):
            Config(similarity_threshold=0.6, best_match_threshold=0.6)


class TestLogging:
    """Test logging utilities."""

    def test_setup_logger(self):
        """Test logger setup."""
        config = Config()
        logger = setup_logger(config)

        assert logger.name == LOGGER_NAME
        assert len(logger.handlers) > 0

        # Test that subsequent calls don't add duplicate handlers
        logger2 = setup_logger(config)
        assert logger is logger2
        assert len(logger.handlers) == len(logger2.handlers)

    def test_module_loggers_are_children(self):
        setup_logger(Config())
        assert logging.getLogger("smartmatch.matcher").parent.name == LOGGER_NAME

    def test_level_follows_latest_config(self):
        """A later call changes the level without adding a handler."""
        logger = setup_logger(Config())
        handler_count = len(logger.handlers)

        setup_logger(Config(log_level="debug"))
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == handler_count

        setup_logger(Config())
        assert logger.level == logging.ERROR

    def test_log_error_writes_traceback(self):
        logger = setup_logger(Config())

        try:
            raise ValueError("bad table")
        except ValueError as e:
            log_error("Lookup failed", e)

        handler = logger.handlers[0]
        handler.flush()
        text = Path(handler.baseFilename).read_text(encoding="utf-8")
        assert "Lookup failed: bad table" in text
        assert "Traceback" in text


class TestCLI:
    """Test the command line interface."""

    def test_parse_arguments(self):
        args = parse_arguments(["rank", "chiken", "chicken", "beef", "--limit", "1"])

        assert args.command == "rank"
        assert args.query == "chiken"
        assert args.candidates == ["chicken", "beef"]
        assert args.limit == 1

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_arguments([])

    def test_normalize(self, capsys):
        assert main(["normalize", "Crépe", "burguer"]) == 0
        assert capsys.readouterr().out.splitlines() == ["krepe", "burger"]

    def test_variations(self, capsys):
        assert main(["variations", "crépe"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "krepe"
        assert "crepes" in lines

    def test_similar(self, capsys):
        assert main(["similar", "burguer", "burger"]) == 0
        assert capsys.readouterr().out.strip() == "true\t1.000"

        assert main(["similar", "pizza", "sushi"]) == 0
        assert capsys.readouterr().out.startswith("false\t")

    def test_best_match(self, capsys):
        assert main(["best-match", "pizza", "PIZZA", "pizzza", "burger"]) == 0
        assert capsys.readouterr().out.strip() == "PIZZA"

    def test_best_match_not_found(self, capsys):
        assert main(["best-match", "sushi", "pizza", "burger"]) == 1
        assert "no match" in capsys.readouterr().err

    def test_rank(self, capsys):
        assert main(["rank", "aaaa", "bbbb", "aaab", "aaaa", "--limit", "2"]) == 0
        assert capsys.readouterr().out.splitlines() == ["1.000\taaaa", "0.750\taaab"]

    def test_config_file(self, tmp_path, capsys):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"similarity_threshold": 0.95}))

        assert main(["--config", str(config_path), "similar", "aaaa", "aaab"]) == 0
        assert capsys.readouterr().out.strip() == "false\t0.750"

    def test_missing_config_file(self, capsys):
        assert main(["--config", "missing.json", "normalize", "pizza"]) == 1
        assert "Config file not found" in capsys.readouterr().err


class TestLoadConfig:
    """Test loading configuration files."""

    def test_defaults(self):
        assert load_config(None) == Config()

    def test_from_json(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"cache_size": 500, "fix_encoding": False}))

        config = load_config(str(config_path))

        assert config.cache_size == 500
        assert config.fix_encoding is False

    def test_invalid_values(self, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"cache_size": -5}))

        with pytest.raises(RuntimeError, match="cache_size cannot be negative"):
            load_config(str(config_path))

    def test_missing_file(self):
        with pytest.raises(RuntimeError, match="Failed to load config"):
            load_config("does-not-exist.json")
