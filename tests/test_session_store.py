from pathlib import Path

import pytest

from cmdgen.errors import SessionNotFoundError, SessionStoreError
from cmdgen.llm.types import CommandExplanation
from cmdgen.session import SessionRecord, SessionStore
from cmdgen.validation.report import ValidationReport


def _report() -> ValidationReport:
    return ValidationReport(syntax_ok=True, shell="sh", checked_binaries=["ls"])


def _record_with(commands: list[tuple[int, str]]) -> SessionRecord:
    record = SessionRecord.new("openai", "gpt-4o-mini")
    for timestamp, command in commands:
        turn = record.push_turn(f"request for {command}", command, "reason", [], _report())
        record.turns[-1] = turn.model_copy(update={"timestamp": timestamp})
    return record


def test_save_and_load(tmp_path: Path) -> None:
    store = SessionStore(tmp_path / "sessions")
    record = SessionRecord.new("openai", "gpt-4o-mini")
    explanation = CommandExplanation(kind="command", value="ls", explanation="list files")
    record.push_turn("list files", "ls", "list", [explanation], _report())

    path = store.save(record)

    assert path == tmp_path / "sessions" / f"{record.uuid}.json"
    assert '"type": "command"' in path.read_text(encoding="utf-8")
    loaded = store.load(record.uuid)
    assert loaded == record
    assert loaded.turns[0].validation.is_valid()


def test_load_missing_session(tmp_path: Path) -> None:
    with pytest.raises(SessionNotFoundError, match="session 'nope' not found"):
        SessionStore(tmp_path).load("nope")


def test_load_corrupt_session(tmp_path: Path) -> None:
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(SessionStoreError):
        SessionStore(tmp_path).load("broken")


def test_recent_commands_newest_first_and_deduplicated(tmp_path: Path) -> None:
    store = SessionStore(tmp_path)
    store.save(_record_with([(100, "ls"), (300, "pwd")]))
    store.save(_record_with([(200, "git status"), (400, "ls")]))
    (tmp_path / "garbage.json").write_text("[]", encoding="utf-8")

    assert store.list_recent_commands(10) == ["ls", "pwd", "git status"]
    assert store.list_recent_commands(2) == ["ls", "pwd"]
    assert store.list_recent_commands(0) == []


def test_recent_commands_without_directory(tmp_path: Path) -> None:
    assert SessionStore(tmp_path / "missing").list_recent_commands(5) == []


def test_recent_turns_keeps_tail_in_order() -> None:
    record = _record_with([(1, "a"), (2, "b"), (3, "c")])
    assert [turn.command for turn in record.recent_turns(2)] == ["b", "c"]
    assert record.recent_turns(0) == []
    assert len(record.recent_turns(10)) == 3


def test_push_turn_updates_timestamp() -> None:
    record = SessionRecord.new("openai", "gpt-4o-mini")
    record.created_at = record.updated_at = 0
    record.push_turn("x", "pwd", "", [], _report())
    assert record.updated_at > 0
    assert record.turns[0].timestamp == record.updated_at
