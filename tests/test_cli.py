import json
import time
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from cmdgen import cli
from cmdgen.config import Settings
from cmdgen.engine import HandleResult
from cmdgen.errors import AttemptsExhaustedError
from cmdgen.llm.types import CommandExplanation
from cmdgen.session import SessionRecord, SessionStore

runner = CliRunner()


class FakeEngine:
    def __init__(self, store: SessionStore, result: HandleResult | None = None, error: Exception | None = None) -> None:
        self._store = store
        self.result = result or HandleResult(command="ls -la")
        self.error = error
        self.calls: list[tuple[str, SessionRecord, Any]] = []

    @property
    def store(self) -> SessionStore:
        return self._store

    async def generate(self, user_input: str, session: SessionRecord, prompter: Any = None) -> HandleResult:
        self.calls.append((user_input, session, prompter))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CMDGEN_HOME", str(tmp_path))
    for name in (
        "CMDGEN_MODEL",
        "CMDGEN_API_KEY",
        "OPENAI_API_KEY",
        "GEMINI_API_KEY",
        "GOOGLE_API_KEY",
        "ANTHROPIC_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


def _install(monkeypatch: pytest.MonkeyPatch, engine: FakeEngine) -> dict[str, Any]:
    seen: dict[str, Any] = {}

    def _build(settings: Settings, *, copy: bool = False, explanation: bool = False) -> FakeEngine:
        seen.update(settings=settings, copy=copy, explanation=explanation)
        return engine

    monkeypatch.setattr(cli, "build_engine", _build)
    return seen


def test_once_prints_command(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    engine = FakeEngine(SessionStore(tmp_path))
    seen = _install(monkeypatch, engine)

    result = runner.invoke(
        cli.app, ["--once", "list files", "--model", "openai:gpt-4o-mini", "-k", "test-key", "--max-attempts", "5"]
    )

    assert result.exit_code == 0
    assert "ls -la" in result.output
    assert engine.calls[0][0] == "list files"
    assert engine.calls[0][2] is None
    assert seen["settings"].max_attempts == 5
    assert seen["copy"] is False


def test_once_with_explanations(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    explanation = CommandExplanation(kind="command", value="pwd", explanation="print cwd")
    engine = FakeEngine(SessionStore(tmp_path), HandleResult(command="pwd", explanations=[explanation]))
    seen = _install(monkeypatch, engine)

    result = runner.invoke(cli.app, ["--once", "where", "-m", "openai:gpt-4o-mini", "-k", "test-key", "-e", "-c"])

    assert result.exit_code == 0
    assert '"type": "command"' in result.output
    assert seen["explanation"] is True
    assert seen["copy"] is True


def test_once_failure_exits_with_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    engine = FakeEngine(SessionStore(tmp_path), error=AttemptsExhaustedError("boom"))
    _install(monkeypatch, engine)

    result = runner.invoke(cli.app, ["--once", "anything", "--model", "openai:gpt-4o-mini", "-k", "test-key"])

    assert result.exit_code == 1
    assert "error: boom" in result.output


def test_missing_api_key_is_reported() -> None:
    result = runner.invoke(cli.app, ["--once", "anything"])

    assert result.exit_code == 1
    assert "no API key found" in result.output


def test_resume_loads_existing_session(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = SessionStore(tmp_path / "sessions")
    record = SessionRecord.new("openai", "gpt-4o-mini")
    store.save(record)
    engine = FakeEngine(store)
    _install(monkeypatch, engine)

    result = runner.invoke(cli.app, ["--once", "again", "-k", "test-key", "--resume", record.uuid])

    assert result.exit_code == 0
    assert engine.calls[0][1].uuid == record.uuid


def test_resume_unknown_session(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, FakeEngine(SessionStore(tmp_path)))

    result = runner.invoke(cli.app, ["--once", "again", "-k", "test-key", "--resume", "missing"])

    assert result.exit_code == 1
    assert "session 'missing' not found" in result.output


def test_once_resolves_model_and_remembers_it(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    engine = FakeEngine(SessionStore(tmp_path / "sessions"))
    seen = _install(monkeypatch, engine)

    result = runner.invoke(cli.app, ["--once", "list files", "-m", "claude", "-k", "test-key"])

    assert result.exit_code == 0
    assert seen["settings"].model == "claude:claude-sonnet-4-5"
    assert seen["settings"].api_key == "test-key"
    session = engine.calls[0][1]
    assert (session.provider, session.model) == ("claude", "claude-sonnet-4-5")
    assert f"Session UUID: {session.uuid}" in result.output
    assert engine.store.path_for(session.uuid).is_file()
    meta = json.loads((tmp_path / ".cache" / "meta.json").read_text(encoding="utf-8"))
    assert meta["lastUsingModel"] == "claude:claude-sonnet-4-5"


def test_provider_key_in_environment_selects_provider(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
    engine = FakeEngine(SessionStore(tmp_path / "sessions"))
    seen = _install(monkeypatch, engine)

    result = runner.invoke(cli.app, ["--once", "list files"])

    assert result.exit_code == 0
    assert seen["settings"].model == "gemini:gemini-2.5-flash"
    assert seen["settings"].api_key == "gemini-key"


def test_resume_switches_session_to_requested_model(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = SessionStore(tmp_path / "sessions")
    record = SessionRecord.new("openai", "gpt-4o-mini")
    store.save(record)
    engine = FakeEngine(store)
    _install(monkeypatch, engine)

    result = runner.invoke(cli.app, ["--once", "again", "-m", "gpt-5.2", "-k", "test-key", "-r", record.uuid])

    assert result.exit_code == 0
    assert store.load(record.uuid).model == "gpt-5.2"


def test_show_models_list_prints_cached_models(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cache_dir = tmp_path / ".cache"
    cache_dir.mkdir()
    (cache_dir / "meta.json").write_text(
        json.dumps(
            {
                "lastFetchedModelDateTime": int(time.time()),
                "models": ["claude:claude-sonnet-4-5", "openai:gpt-4o-mini", "openai:gpt-5.2"],
            }
        ),
        encoding="utf-8",
    )

    def _unexpected(settings: Settings, **kwargs: Any) -> None:
        raise AssertionError("engine must not be built when listing models")

    monkeypatch.setattr(cli, "build_engine", _unexpected)

    result = runner.invoke(cli.app, ["--show-models-list", "-m", "openai"])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["openai:gpt-4o-mini", "openai:gpt-5.2"]


def test_show_models_list_without_key_or_cache_fails() -> None:
    result = runner.invoke(cli.app, ["--show-models-list"])

    assert result.exit_code == 1
    assert "API key is required to fetch models" in result.output
