from __future__ import annotations

import dataclasses
import json
import logging
import os
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from urllib.parse import urlsplit


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    parts = [f"event={event}"]
    for key, value in fields.items():
        parts.append(f"{key}={value}")
    logger.log(level, " ".join(parts))


def configure_logging(logger_name: str, default_level: str = "INFO") -> logging.Logger:
    level_name = os.environ.get("NEWSDESK_LOG_LEVEL", default_level).upper()
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, level_name, logging.INFO),
            format="%(asctime)s %(levelname)s %(message)s",
        )
    _ensure_stdout_handler(level_name)
    _maybe_add_file_handler(level_name)
    _apply_log_overrides()
    return logging.getLogger(logger_name)


def _apply_log_overrides() -> None:
    overrides = os.environ.get("NEWSDESK_LOG_LEVELS", "")
    if not overrides:
        return
    for item in overrides.split(","):
        if not item.strip() or "=" not in item:
            continue
        name, level = item.split("=", 1)
        logger = logging.getLogger(name.strip())
        logger.setLevel(getattr(logging, level.strip().upper(), logging.INFO))


def _maybe_add_file_handler(level_name: str) -> None:
    log_path = os.environ.get("NEWSDESK_LOG_FILE")
    if not log_path:
        return
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == os.path.abspath(
            log_path
        ):
            return
    log_dir = os.path.dirname(log_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    handler = logging.FileHandler(log_path)
    handler.setLevel(getattr(logging, level_name, logging.INFO))
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    root.addHandler(handler)


def _ensure_stdout_handler(level_name: str) -> None:
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is sys.stdout:
            return
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level_name, logging.INFO))
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    root.addHandler(handler)


def json_dumps(value: Any) -> str:
    return json.dumps(value, default=_json_default, sort_keys=True)


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if isinstance(value, (set, tuple)):
        return list(value)
    return str(value)


def hostname(url: str) -> str:
    if not url:
        return ""
    split = urlsplit(url.strip())
    return (split.hostname or "").lower()


def parse_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()
