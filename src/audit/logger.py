"""Append-only JSON Lines audit log for gateway decisions.

Each entry carries ``prev_hash``, the SHA-256 of the line before it in the
same file. A file's first entry has ``prev_hash: null``, so every live file
and every rotated backup validates on its own, and any edit breaks the chain
from that point on.
"""

from __future__ import annotations

import fcntl
import hashlib
import json
import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from src.models import AuditEvent

_TAIL_CHUNK = 4096


def _digest(line: str) -> str:
    return hashlib.sha256(line.encode()).hexdigest()


def _tail_line(path: Path) -> str | None:
    """Return the last non-empty line of ``path``, reading backwards from EOF."""
    try:
        handle = open(path, "rb")
    except FileNotFoundError:
        return None
    with handle:
        position = handle.seek(0, os.SEEK_END)
        buffer = b""
        while position > 0:
            step = min(_TAIL_CHUNK, position)
            position -= step
            handle.seek(position)
            buffer = handle.read(step) + buffer
            body = buffer.rstrip(b"\n")
            if b"\n" in body:
                return body.rsplit(b"\n", 1)[1].decode("utf-8")
        body = buffer.rstrip(b"\n")
        return body.decode("utf-8") if body else None


@dataclass
class ChainValidationResult:
    valid: bool
    entries: int = 0
    broken_at_line: int | None = None


def validate_audit_chain(log_path: Path) -> ChainValidationResult:
    """Walk one log file and check every ``prev_hash`` link."""
    lines = [line for line in log_path.read_text(encoding="utf-8").split("\n") if line]
    expected: str | None = None
    for number, line in enumerate(lines, start=1):
        try:
            entry = json.loads(line)
        except json.JSONDecodeError:
            return ChainValidationResult(valid=False, entries=len(lines), broken_at_line=number)
        if not isinstance(entry, dict) or entry.get("prev_hash") != expected:
            return ChainValidationResult(valid=False, entries=len(lines), broken_at_line=number)
        expected = _digest(line)
    return ChainValidationResult(valid=True, entries=len(lines))


class AuditLogger:
    """Writes AuditEvents as hash-chained JSON lines.

    The chain head is read from the live file while holding the lock, so
    several loggers (or processes) sharing one path extend the same chain,
    and a rotation starts the new file at ``prev_hash: null``.
    """

    def __init__(
        self,
        log_path: str,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
    ) -> None:
        self.log_path = Path(log_path)
        self._max_bytes = max_bytes
        self._backup_count = backup_count

    @classmethod
    def from_env(cls, log_path: str) -> AuditLogger:
        return cls(
            log_path=log_path,
            max_bytes=int(os.environ.get("AUDIT_LOG_MAX_BYTES", "10485760")),
            backup_count=int(os.environ.get("AUDIT_LOG_BACKUP_COUNT", "5")),
        )

    def _backup(self, index: int) -> Path:
        return self.log_path.with_name(f"{self.log_path.name}.{index}")

    @contextmanager
    def _locked(self) -> Iterator[None]:
        lock_path = self.log_path.with_name(f".{self.log_path.name}.lock")
        with open(lock_path, "w") as lock:
            fcntl.flock(lock, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock, fcntl.LOCK_UN)

    def _rotate_if_needed(self) -> bool:
        if not self.log_path.exists() or self.log_path.stat().st_size < self._max_bytes:
            return False
        if self._backup_count < 1:
            self.log_path.unlink()
            return True
        self._backup(self._backup_count).unlink(missing_ok=True)
        for index in range(self._backup_count - 1, 0, -1):
            if self._backup(index).exists():
                self._backup(index).rename(self._backup(index + 1))
        self.log_path.rename(self._backup(1))
        return True

    def log(self, event: AuditEvent) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        record = event.model_dump(mode="json")

        with self._locked():
            head = None if self._rotate_if_needed() else _tail_line(self.log_path)
            record["prev_hash"] = _digest(head) if head is not None else None
            line = json.dumps(record, separators=(",", ":"), ensure_ascii=False)
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
