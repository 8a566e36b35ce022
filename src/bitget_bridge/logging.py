from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

# Third-party loggers that flood the output below WARNING
NOISY_LOGGERS = ("aiohttp.access", "aiohttp.client", "aiohttp.internal")


def configure_logging(log_dir: Path | None = None, filename: str = "bitget_bridge.log") -> None:
    """Install console and rotating file handlers on the root logger.

    The level comes from ``BITGET_BRIDGE_LOG_LEVEL``. aiohttp's loggers are
    held at WARNING unless the level is DEBUG.
    """
    level_name = os.environ.get("BITGET_BRIDGE_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        # 10MB per file, 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / filename,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    third_party_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)
