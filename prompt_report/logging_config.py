"""Logging setup: brief console output plus a detailed per-session rotating file"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'

MAX_LOG_BYTES = 5 * 1024 * 1024  # 5MB
KEEP_SESSIONS = 5


def _prune_session_logs(log_dir: Path, base_name: str, keep: int) -> None:
    """Delete the oldest session logs so that at most `keep` remain after this start"""
    session_logs = sorted(log_dir.glob(f"{base_name}_*.log"), reverse=True)  # Newest first
    for old_log in session_logs[keep - 1:]:
        try:
            old_log.unlink()
        except OSError:
            pass  # Another process may hold or have removed it


def setup_logging(
    log_file: str = "logs/prompt-report.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure root logging for the service.

    - Console: levelname + message, `console_level` and above
    - File: timestamp, logger name and line, `file_level` and above
    - One file per process start: <stem>_<YYYYmmdd_HHMMSS>.log
    - Last KEEP_SESSIONS session files are kept, each rotated at MAX_LOG_BYTES

    Args:
        log_file: Base log path; the session timestamp is appended to its stem
        console_level: Console threshold
        file_level: File threshold

    Returns:
        Path of the session log file
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    _prune_session_logs(log_path.parent, log_path.stem, KEEP_SESSIONS)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_log = log_path.parent / f"{log_path.stem}_{timestamp}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Handlers do the filtering
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    file_handler = RotatingFileHandler(
        session_log,
        mode='a',
        maxBytes=MAX_LOG_BYTES,
        backupCount=3,
        encoding='utf-8'
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    # Quiet per-request access lines and multipart parser chatter
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)

    logging.info(
        f"Logging configured: console={logging.getLevelName(console_level)}, "
        f"file={session_log} ({logging.getLevelName(file_level)})"
    )

    return session_log
