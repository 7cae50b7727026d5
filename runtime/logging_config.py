"""Logging setup shared by the viewer entrypoints.

    setup_logging(level="DEBUG", fmt="json")
    log = logging.getLogger(__name__)

Format examples:
    Human: 2026-10-17T13:45:12.345Z | INFO     | runtime.animation | animation loop started
    JSON:  {"t": "2026-10-17T13:45:12.345+00:00", "lvl": "INFO", "name": "...", "msg": "..."}

Idempotent: repeated setup_logging() calls replace our handler instead of
stacking another one.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

_HANDLER_NAME = "fishtank"


class ViewerFormatter(logging.Formatter):
    """Human-readable (optionally colored) or JSON-lines records."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, fmt_mode: str = "human", use_color: bool = True):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"unknown log format {fmt_mode!r}")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if self.fmt_mode == "json":
            return self._format_json(record, ts)
        return self._format_human(record, ts)

    def _format_json(self, record: logging.LogRecord, ts: datetime) -> str:
        log_dict = {
            't': ts.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'pid': os.getpid(),
            'msg': record.getMessage(),
        }
        if record.exc_info:
            log_dict['exc'] = self.formatException(record.exc_info)
        return json.dumps(log_dict)

    def _format_human(self, record: logging.LogRecord, ts: datetime) -> str:
        ts_str = ts.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'
        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"
        line = f"{ts_str} | {level} | {record.name} | {record.getMessage()}"
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    level: str = "INFO",
    fmt: str = "human",
    use_color: bool = True,
    stream=None,
) -> logging.Logger:
    """Install (or replace) the stderr handler on the root logger."""
    root = logging.getLogger()
    numeric = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(numeric, int):
        raise ValueError(f"unknown log level {level!r}")
    root.setLevel(numeric)

    for h in list(root.handlers):
        if h.get_name() == _HANDLER_NAME:
            root.removeHandler(h)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(ViewerFormatter(fmt_mode=fmt, use_color=use_color))
    root.addHandler(handler)
    return root
