"""Loguru configuration for scripts and notebooks that build charts."""

import sys
from pathlib import Path

from loguru import logger


def setup_logging(verbose: bool = False, log_dir: Path | None = None) -> None:
    """Configure Loguru sinks.

    The library itself only emits records (font fallbacks, dataset
    generation); callers decide where they go.
    """
    logger.remove()

    # Console: human-readable, colorized
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level:<8}</level> | "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if log_dir is None:
        return

    # File: detailed, rotated
    log_dir.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_dir / "apde_graphs_{time:YYYY-MM-DD}.log",
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}",
        rotation="10 MB",
        retention="30 days",
        encoding="utf-8",
    )
