"""Loguru logging configuration for the FX deal service.

Every record goes to stderr in a human-readable format.  With a
``log_dir`` configured, records are also written to a rotating
``fx-deals.log``, and batch import summaries (records bound with
``json_output=True``) are appended as JSON lines to
``import-batches.jsonl`` as an audit trail of batch outcomes.
"""

import sys
from pathlib import Path

from loguru import logger

_LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} | {message}"

LOG_FILE_NAME = "fx-deals.log"
BATCH_LOG_FILE_NAME = "import-batches.jsonl"


def _is_batch_summary(record: dict) -> bool:
    return bool(record["extra"].get("json_output", False))


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Configure Loguru sinks.

    Args:
        log_level: Minimum log level to emit (case-insensitive).
        log_dir: Optional directory for the rotating text log and the
            JSON-lines batch audit log.
    """
    level = log_level.upper()
    logger.remove()
    logger.add(sys.stderr, level=level, format=_LOG_FORMAT)

    if not log_dir:
        return

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    logger.add(log_path / LOG_FILE_NAME, level=level, format=_LOG_FORMAT, rotation="24h", retention="7 days")
    # Batch summaries are logged at INFO; keep them even when the text log is quieter
    logger.add(
        log_path / BATCH_LOG_FILE_NAME,
        level="INFO",
        serialize=True,
        filter=_is_batch_summary,
        rotation="24h",
        retention="30 days",
    )
