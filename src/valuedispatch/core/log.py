
from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv

_configured = False

TEXT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s | %(message)s"

# record attributes a multimethod attaches via `extra=`
DISPATCH_EXTRAS = ("multimethod", "dispatch_value")


def _load_dotenv() -> None:
    # .env in the working directory; real environment variables win
    load_dotenv(find_dotenv(usecwd=True), override=False)


class JsonHandler(logging.StreamHandler):
    """One JSON object per log record on stdout."""
    def __init__(self, stream=None):
        super().__init__(stream=stream or sys.stdout)

    def to_obj(self, record: logging.LogRecord) -> Dict[str, Any]:
        obj: Dict[str, Any] = {
            "ts": record.created,
            "lvl": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        for k in ("filename", "lineno", "funcName"):
            obj[k] = getattr(record, k, None)
        for k in DISPATCH_EXTRAS:
            if hasattr(record, k):
                # dispatch values are arbitrary hashables
                obj[k] = repr(getattr(record, k)) if k == "dispatch_value" else getattr(record, k)
        return obj

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.stream.write(json.dumps(self.to_obj(record), ensure_ascii=False) + "\n")
            self.flush()
        except Exception:  # pragma: no cover
            self.handleError(record)


def _level_from(name: str) -> int:
    lvl = logging.getLevelName(name.upper())
    return lvl if isinstance(lvl, int) else logging.INFO


def setup(level: Optional[str] = None, json_mode: Optional[bool] = None, *, force: bool = False) -> None:
    """Configure the root logger.
    - Reads LOG_LEVEL, LOG_JSON from env (and .env) if args are None
    - If already configured, do nothing unless force=True
    """
    global _configured
    if _configured and not force:
        return

    _load_dotenv()

    py_level = _level_from(level or os.getenv("LOG_LEVEL", "INFO"))
    json_flag = json_mode if json_mode is not None else (os.getenv("LOG_JSON", "0") == "1")

    root = logging.getLogger()
    # Reset handlers to avoid duplicate logs (pytest re-runs etc.)
    root.handlers.clear()
    root.setLevel(py_level)

    if json_flag:
        root.addHandler(JsonHandler())
    else:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=TEXT_FORMAT))
        root.addHandler(handler)

    _configured = True


def get(name: str) -> logging.Logger:
    """Helper to get a namespaced logger."""
    return logging.getLogger(name)


def set_level(level: str) -> None:
    """Dynamically adjust root log level (e.g., during tests)."""
    logging.getLogger().setLevel(_level_from(level))
