"""JSON file store for session records."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from ..errors import SessionNotFoundError, SessionStoreError
from .record import SessionRecord

SESSION_FILE_SUFFIX = ".json"


class SessionStore:
    """One `<uuid>.json` file per session under `sessions_dir`."""

    def __init__(self, sessions_dir: Path) -> None:
        self._sessions_dir = sessions_dir

    @property
    def sessions_dir(self) -> Path:
        return self._sessions_dir

    def path_for(self, uuid: str) -> Path:
        return self._sessions_dir / f"{uuid}{SESSION_FILE_SUFFIX}"

    def load(self, uuid: str) -> SessionRecord:
        path = self.path_for(uuid)
        if not path.is_file():
            raise SessionNotFoundError(f"session '{uuid}' not found")
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SessionStoreError(f"failed to read session file: {path}") from exc
        try:
            return SessionRecord.model_validate_json(content)
        except ValidationError as exc:
            raise SessionStoreError(f"failed to parse session JSON: {path}") from exc

    def save(self, record: SessionRecord) -> Path:
        path = self.path_for(record.uuid)
        try:
            self._sessions_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(record.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        except OSError as exc:
            raise SessionStoreError(f"failed to write session file: {path}") from exc
        logger.debug("session.saved uuid={} turns={}", record.uuid, len(record.turns))
        return path

    def list_recent_commands(self, limit: int) -> list[str]:
        """Commands from every stored session, newest first, deduplicated."""

        if limit <= 0 or not self._sessions_dir.is_dir():
            return []

        items: list[tuple[int, str]] = []
        for path in self._sessions_dir.glob(f"*{SESSION_FILE_SUFFIX}"):
            if not path.is_file():
                continue
            try:
                record = SessionRecord.model_validate_json(path.read_text(encoding="utf-8"))
            except (OSError, ValidationError):
                logger.debug("session.skip_unreadable path={}", path)
                continue
            items.extend((turn.timestamp, turn.command) for turn in record.turns if turn.command.strip())

        items.sort(key=lambda item: item[0], reverse=True)
        commands: list[str] = []
        seen: set[str] = set()
        for _, command in items:
            if command in seen:
                continue
            seen.add(command)
            commands.append(command)
            if len(commands) >= limit:
                break
        return commands
