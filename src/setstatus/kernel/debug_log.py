"""Opt-in JSONL debug log for status dispatches.

Each line is one JSON object (``ts_ms``, ``level``, ``component``, ``kind``,
``keyword``, ``service``, ``message``, ``data``). The active file is rotated
to ``debug.log.jsonl.1``, ``.2``, ... once it would grow past
``max_file_bytes``; only ``max_files`` rotated copies are kept.

Messages and payloads pass through :func:`redact_text` and
:func:`redact_value` unless redaction is ``"none"``.
"""

from __future__ import annotations

import json
import re
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from setstatus.kernel.types import now_ms

LOG_FILE_NAME = "debug.log.jsonl"
REDACTION_MODES = ("none", "default", "strict")
REDACTED = "***REDACTED***"

_SECRET_KEY_RE = re.compile(
    r"(secret|token|authorization|cookie|password|api[_-]?key|_pat$)",
    re.IGNORECASE,
)
_BEARER_RE = re.compile(r"(?i)\bbearer\s+[^\s,;]+")
_ASSIGNMENT_RE = re.compile(
    r"(?i)\b(token|secret|authorization|cookie|api[_-]?key|[a-z]+_pat)\b\s*[:=]\s*[^\s,;]+"
)
# xoxp-/xoxb- (Slack), ghp_/github_pat_ (GitHub), 1/<gid>:<secret> (Asana)
_TOKEN_SHAPES_RE = re.compile(
    r"\b(xox[abposr]-[A-Za-z0-9-]{8,}"
    r"|gh[pousr]_[A-Za-z0-9]{16,}"
    r"|github_pat_[A-Za-z0-9_]{16,}"
    r"|[0-9]/[0-9]{8,}:[A-Za-z0-9]{16,})"
)


def redact_text(text: str) -> str:
    if not text:
        return text
    text = _BEARER_RE.sub("Bearer " + REDACTED, text)
    text = _ASSIGNMENT_RE.sub(lambda match: "{0}={1}".format(match.group(1), REDACTED), text)
    return _TOKEN_SHAPES_RE.sub(REDACTED, text)


def redact_value(value: Any, mode: str = "default") -> Any:
    """Mask secrets inside ``value``.

    ``default`` masks secret-looking keys and token-shaped strings;
    ``strict`` additionally masks every scalar leaf.
    """

    if isinstance(value, dict):
        masked: Dict[str, Any] = {}
        for key, item in value.items():
            if _SECRET_KEY_RE.search(str(key)):
                masked[key] = REDACTED
            else:
                masked[key] = redact_value(item, mode)
        return masked
    if isinstance(value, list):
        return [redact_value(item, mode) for item in value]
    if mode == "strict":
        return REDACTED
    if isinstance(value, str):
        return redact_text(value)
    return value


class DebugLogWriter:
    """Append dispatch records; write failures are counted, never raised."""

    def __init__(
        self,
        *,
        logs_dir: Path,
        enabled: bool,
        max_file_bytes: int = 1024 * 1024,
        max_files: int = 3,
        redaction: str = "default",
    ) -> None:
        self._logs_dir = Path(logs_dir)
        self._enabled = bool(enabled)
        self._max_file_bytes = max(1, int(max_file_bytes or 0))
        self._max_files = max(1, int(max_files or 0))
        mode = str(redaction or "default").strip().lower()
        self._redaction = mode if mode in REDACTION_MODES else "default"
        self._write_errors = 0
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def active_log_file(self) -> Path:
        return self._logs_dir / LOG_FILE_NAME

    @property
    def write_errors(self) -> int:
        return self._write_errors

    def rotated_files(self) -> List[Path]:
        return [
            self._logs_dir / "{0}.{1}".format(LOG_FILE_NAME, index)
            for index in range(1, self._max_files + 1)
        ]

    def write_entry(
        self,
        *,
        level: str,
        component: str,
        kind: str,
        message: str,
        keyword: Optional[str] = None,
        service: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        ts_ms: Optional[int] = None,
    ) -> None:
        if not self._enabled:
            return

        message = str(message or "")
        payload = dict(data or {})
        if self._redaction != "none":
            message = redact_text(message)
            payload = redact_value(payload, self._redaction)

        record = {
            "ts_ms": int(ts_ms if ts_ms is not None else now_ms()),
            "level": str(level or "info"),
            "component": str(component or "cli"),
            "kind": str(kind or "diagnostic"),
            "keyword": str(keyword or ""),
            "service": str(service or ""),
            "message": message,
            "data": payload,
        }
        line = json.dumps(record, ensure_ascii=True, separators=(",", ":"), default=str) + "\n"
        self._append(line.encode("utf-8"))

    def _append(self, chunk: bytes) -> None:
        with self._lock:
            try:
                self._logs_dir.mkdir(parents=True, exist_ok=True)
                active = self.active_log_file
                size = active.stat().st_size if active.exists() else 0
                if size and size + len(chunk) > self._max_file_bytes:
                    self._shift_rotated(active)
                with active.open("ab") as handle:
                    handle.write(chunk)
            except OSError:
                self._write_errors += 1

    def _shift_rotated(self, active: Path) -> None:
        rotated = self.rotated_files()
        rotated[-1].unlink(missing_ok=True)
        # Oldest slot first.
        for older, newer in reversed(list(zip(rotated[1:], rotated[:-1]))):
            if newer.exists():
                newer.replace(older)
        active.replace(rotated[0])
