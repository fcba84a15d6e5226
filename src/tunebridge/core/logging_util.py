import json as _json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
# Matches the append-only plugin.log layout: "[2024-01-31 12:00:00] ERROR: message"
FILE_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return _json.dumps(payload, ensure_ascii=False)


def setup_logging(
    *,
    json_logs: bool = False,
    verbose: bool | None = None,
    quiet: bool | None = None,
    log_file: Optional[Path] = None,
) -> None:
    """Configure root logging.

    - json_logs: emit JSON lines instead of plain text
    - verbose: DEBUG level if True
    - quiet: WARNING level if True
    - log_file: also append timestamped lines to this file (diagnostic log sink)
    Default level is INFO when neither verbose nor quiet is set. Console logs
    go to stderr; stdout carries command output.
    """
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    if quiet:
        level = max(level, logging.WARNING)

    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            h.close()
    root.handlers.clear()
    root.setLevel(level)

    handler = logging.StreamHandler(stream=sys.stderr)
    if json_logs:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)

    if log_file is not None:
        add_file_log(log_file)


def add_file_log(log_file: Path) -> Optional[logging.Handler]:
    """Attach an append-only file handler to the root logger.

    Returns the handler, or None when the file cannot be opened (the backend
    directory may not exist yet); console logging keeps working either way.
    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as e:
        logging.getLogger(__name__).warning("Cannot open log file %s: %s", log_file, e)
        return None
    fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
    logging.getLogger().addHandler(fh)
    return fh
