"""
Configuration management for the smartmatch text matcher.

This module provides the settings shared by the normalizer, the variation
generator, the similarity engine and the logging helpers.

Key Components:
    - Config: Main configuration class with matching thresholds, cache
      sizing and logging options

Threshold Guide:
    Two thresholds are used on purpose and they are not interchangeable:

    1. **similarity_threshold** (default 0.70):
       - Used by ``is_similar`` for a yes/no answer
       - Stricter, because callers act on every positive answer
         (e.g. a record is kept in a filtered list)

    2. **best_match_threshold** (default 0.60):
       - Used by ``find_best_match`` and ``rank_matches``
       - Looser, because only the top-scoring candidate is returned
       - Comparisons are strict: a candidate scoring exactly 0.60 is rejected

Examples:
    Default settings for a search box:
    >>> config = Config()
    >>> config.similarity_threshold
    0.7

    Long-running service with a small memory footprint:
    >>> config = Config(cache_size=2000)

    Unbounded caches for a short-lived single-session process:
    >>> config = Config(cache_size=0)
"""

import os
from dataclasses import dataclass

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Config:
    """Configuration settings for smartmatch.

    Attributes:
        similarity_threshold: Minimum score (exclusive) for ``is_similar``
            (default: 0.70).
        best_match_threshold: Minimum score (exclusive) for
            ``find_best_match`` and ``rank_matches`` (default: 0.60).
        cache_size: Maximum entries per cache; 0 disables the bound
            (default: 10000).
        fix_encoding: Repair mojibake and Unicode oddities with ftfy before
            normalizing (default: True).
        debug_log_limit: Normalizations are logged at DEBUG level only while
            the normalization cache is smaller than this (default: 100).
        log_file: Path to the error log file (default: "smartmatch_error.log").
        max_log_size: Maximum log file size in bytes (default: 10MB).
        log_backup_count: Number of backup log files to keep (default: 3).
        log_level: Level of the ``smartmatch`` logger (default: "ERROR").

    Examples:
        >>> config = Config(similarity_threshold=0.8)
        >>> config.best_match_threshold
        0.6

        >>> Config(cache_size=-1)
        Traceback (most recent call last):
        ...
        ValueError: cache_size cannot be negative
    """

    # Matching thresholds
    similarity_threshold: float = 0.70
    best_match_threshold: float = 0.60

    # Normalization
    fix_encoding: bool = True

    # Cache configuration
    cache_size: int = 10000

    # Logging configuration
    log_file: str = os.getenv("SMARTMATCH_LOG_FILE", "smartmatch_error.log")
    max_log_size: int = 10 * 1024 * 1024  # 10MB
    log_backup_count: int = 3
    log_level: str = "ERROR"
    debug_log_limit: int = 100

    def __post_init__(self) -> None:
        """Validate configuration after initialization.

        Raises:
            ValueError: If any configuration values are invalid.
        """
        for name in ("similarity_threshold", "best_match_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")

        if self.cache_size < 0:
            raise ValueError("cache_size cannot be negative")

        if self.debug_log_limit < 0:
            raise ValueError("debug_log_limit cannot be negative")

        self.log_level = self.log_level.upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, "
                f"got '{self.log_level}'"
            )

        # Warn about conflicting settings
        if self.similarity_threshold == self.best_match_threshold:
            import warnings

            warnings.warn(
                "similarity_threshold and best_match_threshold are equal. "
                "find_best_match will now reject candidates it used to accept "
                "(or is_similar accept pairs it used to reject)."
            )
