# bargainer/config/logging_config.py

"""Per-run logging for bargainer.

Every run writes a full DEBUG log to ``logs/run_<timestamp>.log``;
provider failures that the aggregator turns into empty results keep
their tracebacks there. Stderr gets a shorter echo, and stdout is left
alone for JSON results and tool payloads.

Provider loggers are named ``bargainer.<provider id>``. A noisy
provider can be held to a higher console level with *provider_levels*
without losing anything from the run file.
"""

import logging
import sys
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from bargainer.config.settings import Settings

_ROOT = "bargainer"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(threadName)s | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(source)-12s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ProviderConsoleFilter(logging.Filter):
    """Console gate with a per-provider minimum level.

    Also stamps ``record.source`` with the logger name minus the
    ``bargainer.`` prefix, for the console format.
    """

    def __init__(self, levels: Mapping[str, int] | None = None) -> None:
        super().__init__()
        self.levels: dict[str, int] = dict(levels or {})

    def filter(self, record: logging.LogRecord) -> bool:
        _, _, source = record.name.partition(".")
        record.source = source or record.name
        minimum = self.levels.get(source.split(".")[0])
        return minimum is None or record.levelno >= minimum


def run_log_path(now: datetime | None = None) -> Path:
    """Log file for a run started at *now* (default: current time)."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return Settings.LOGS_DIR / f"run_{stamp}.log"


def _file_handler(log_file: Path) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def _console_handler(
    level: int, provider_levels: Mapping[str, int] | None,
) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(ProviderConsoleFilter(provider_levels))
    handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )
    return handler


def setup_logging(
    console_level: int = logging.WARNING,
    provider_levels: Mapping[str, int] | None = None,
) -> Path:
    """Attach the run file and stderr handlers to the ``bargainer`` logger.

    Args:
        console_level: Minimum level echoed to stderr.
        provider_levels: Provider id to minimum stderr level, applied
            on top of *console_level*. The run file is not affected.

    Returns:
        The path of this run's log file.
    """
    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    log_file = run_log_path()

    root_logger = logging.getLogger(_ROOT)
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, tool runs) keep the first run's handlers
    if root_logger.handlers:
        return log_file

    root_logger.addHandler(_file_handler(log_file))
    root_logger.addHandler(_console_handler(console_level, provider_levels))

    root_logger.info("Logging initialised, log file: %s", log_file)
    if provider_levels:
        root_logger.debug(
            "Console levels per provider: %s",
            {k: logging.getLevelName(v) for k, v in provider_levels.items()},
        )
    return log_file
