import hashlib
import json
import logging
import threading
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..config import settings
from .context import current_run

logger = logging.getLogger(__name__)

# Free-text fields that may carry host paths or process output. In safe mode
# they are replaced by a length and digest of the original value.
REDACTED_FIELDS = frozenset({"command", "arguments", "command_line", "stdout", "stderr", "error"})

# Longest free-text field kept verbatim when redaction is off
MAX_FIELD_CHARS = 8000

_ERROR_KINDS = frozenset({"parse_error"})
_write_lock = threading.Lock()


def _digest(value: str) -> str:
    sha = hashlib.sha256(value.encode("utf-8")).hexdigest()[:12]
    return f"[REDACTED len={len(value)} sha256={sha}]"


def _clip(value: str) -> str:
    if len(value) <= MAX_FIELD_CHARS:
        return value
    return f"{value[:MAX_FIELD_CHARS]}... [truncated, len={len(value)}]"


def _scrub(event: dict[str, Any]) -> dict[str, Any]:
    redact = settings.RADIOSS_LOG_REDACT
    scrubbed: dict[str, Any] = {}
    for key, value in event.items():
        if key in REDACTED_FIELDS and isinstance(value, str) and value:
            value = _digest(value) if redact else _clip(value)
        scrubbed[key] = value
    return scrubbed


def _rotate(log_path: Path) -> None:
    if not log_path.exists() or log_path.stat().st_size <= settings.MAX_LOG_SIZE_BYTES:
        return
    # Keep exactly one previous generation next to the live log
    previous = log_path.with_suffix(log_path.suffix + ".1")
    log_path.replace(previous)
    logger.debug("Rotated event log to %s", previous)


def log_event(event: dict[str, Any]) -> None:
    """Append ``event`` to the JSON-lines event log.

    Events are flat dicts with a ``kind``. The active run's scenario and trace
    id, a timestamp and a level are added when missing. Failures to write are
    logged and swallowed so they never fail a workload run.
    """
    if not settings.RADIOSS_LOGGING:
        return

    record = {"timestamp": datetime.now(UTC).isoformat()}
    run = current_run()
    if run is not None:
        record["trace_id"] = run.trace_id
        record["scenario"] = run.scenario
    record["level"] = "error" if event.get("kind") in _ERROR_KINDS else "info"
    record.update(_scrub(event))

    try:
        line = json.dumps(record, ensure_ascii=False, default=str)
        log_path = settings.LOG_PATH
        with _write_lock:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            _rotate(log_path)
            with open(log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("Failed to write event log: %s", exc)
