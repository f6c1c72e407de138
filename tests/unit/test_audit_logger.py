"""Tests for the audit logger."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pytest

from src.audit.logger import AuditLogger, validate_audit_chain
from src.models import AuditEventType
from tests.conftest import make_audit_event


def test_log_appends_json_line(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))
    logger.log(make_audit_event())

    lines = log_file.read_text().strip().split("\n")
    assert len(lines) == 1
    parsed = json.loads(lines[0])
    assert parsed["event_type"] == "signature_rejected"
    assert parsed["risk_level"] == "high"


def test_log_multiple_events_append(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))
    for i in range(3):
        logger.log(make_audit_event(action=f"action_{i}"))

    lines = log_file.read_text().strip().split("\n")
    assert [json.loads(line)["action"] for line in lines] == ["action_0", "action_1", "action_2"]


def test_log_creates_parent_directory(tmp_path: Path) -> None:
    log_file = tmp_path / "subdir" / "audit.jsonl"
    AuditLogger(log_path=str(log_file)).log(make_audit_event())
    assert log_file.exists()


def test_details_round_trip(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    AuditLogger(log_path=str(log_file)).log(make_audit_event(
        event_type=AuditEventType.INTERACTION_DISPATCHED,
        details={"name": "aww"},
        interaction_id="i-1",
    ))
    parsed = json.loads(log_file.read_text())
    assert parsed["details"] == {"name": "aww"}
    assert parsed["interaction_id"] == "i-1"


# --- Rotation tests ---


def test_rotation_triggers_at_threshold(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file), max_bytes=100, backup_count=3)
    for i in range(20):
        logger.log(make_audit_event(action=f"event-{i}"))
    assert (tmp_path / "audit.jsonl.1").exists()


def test_rotation_keeps_backup_count(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file), max_bytes=50, backup_count=2)
    for i in range(50):
        logger.log(make_audit_event(action=f"event-{i}"))
    assert (tmp_path / "audit.jsonl.2").exists()
    assert not (tmp_path / "audit.jsonl.3").exists()


def test_rotation_configurable_via_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("AUDIT_LOG_MAX_BYTES", "500")
    monkeypatch.setenv("AUDIT_LOG_BACKUP_COUNT", "7")
    logger = AuditLogger.from_env(str(tmp_path / "audit.jsonl"))
    assert logger._max_bytes == 500
    assert logger._backup_count == 7


# --- Hash chain tests ---


def test_first_entry_has_null_prev_hash(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    AuditLogger(log_path=str(log_file)).log(make_audit_event())
    assert json.loads(log_file.read_text())["prev_hash"] is None


def test_entries_chain_to_previous_line(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))
    logger.log(make_audit_event(action="first"))
    logger.log(make_audit_event(action="second"))
    lines = log_file.read_text().strip().split("\n")
    assert json.loads(lines[1])["prev_hash"] == hashlib.sha256(lines[0].encode()).hexdigest()


def test_chain_continues_across_instances(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    AuditLogger(log_path=str(log_file)).log(make_audit_event(action="first"))
    AuditLogger(log_path=str(log_file)).log(make_audit_event(action="second"))
    assert validate_audit_chain(log_file).valid


def test_validate_chain_passes_for_untampered(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))
    for i in range(5):
        logger.log(make_audit_event(action=f"event-{i}"))
    result = validate_audit_chain(log_file)
    assert result.valid
    assert result.entries == 5


def test_validate_chain_detects_tampering(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))
    for i in range(5):
        logger.log(make_audit_event(action=f"event-{i}"))
    lines = log_file.read_text().strip().split("\n")
    lines[2] = lines[2].replace("event-2", "TAMPERED")
    log_file.write_text("\n".join(lines) + "\n")
    result = validate_audit_chain(log_file)
    assert not result.valid
    # Line 4 still points at the original hash of line 3
    assert result.broken_at_line == 4


def test_validate_chain_detects_garbage_line(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    AuditLogger(log_path=str(log_file)).log(make_audit_event())
    with open(log_file, "a") as f:
        f.write("not json\n")
    result = validate_audit_chain(log_file)
    assert not result.valid
    assert result.broken_at_line == 2


def test_validate_empty_log(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    log_file.write_text("")
    assert validate_audit_chain(log_file).valid


def test_chain_validates_after_rotation(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file), max_bytes=300, backup_count=20)
    for i in range(10):
        logger.log(make_audit_event(action=f"event-{i}"))

    assert (tmp_path / "audit.jsonl.1").exists()
    assert validate_audit_chain(log_file).valid
    for backup in tmp_path.glob("audit.jsonl.*"):
        assert validate_audit_chain(backup).valid, backup.name


def test_rotated_file_starts_new_chain(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file), max_bytes=1, backup_count=2)
    logger.log(make_audit_event(action="first"))
    logger.log(make_audit_event(action="second"))
    assert json.loads(log_file.read_text())["prev_hash"] is None
    assert json.loads((tmp_path / "audit.jsonl.1").read_text())["action"] == "first"


def test_interleaved_loggers_share_one_chain(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    first = AuditLogger(log_path=str(log_file))
    second = AuditLogger(log_path=str(log_file))
    first.log(make_audit_event(action="a"))
    second.log(make_audit_event(action="b"))
    first.log(make_audit_event(action="c"))
    result = validate_audit_chain(log_file)
    assert result.valid
    assert result.entries == 3


def test_chain_survives_line_separator_in_details(tmp_path: Path) -> None:
    log_file = tmp_path / "audit.jsonl"
    logger = AuditLogger(log_path=str(log_file))
    logger.log(make_audit_event(details={"name": "a\u2028b"}))
    logger.log(make_audit_event())
    assert validate_audit_chain(log_file).valid
