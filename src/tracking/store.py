"""
Session Store

Persists per-task session histories in a JSON data file:

    {
      "12345": [
        {"time": "2026-10-18T09:00:00", "status": "active"},
        {"time": "2026-10-18T10:30:00", "status": "inactive"}
      ]
    }

Histories are append-only. The current status of a task is derived from the
last session every time it is asked for; nothing else is cached.
"""

import os
import re
import json
import logging
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from .errors import StoreCorruptError, StoreWriteError
from .models import Session, SessionStatus


SessionMap = Dict[int, List[Session]]

# Canonical positive integer: no sign, no padding, no separators
TASK_ID_KEY = re.compile(r'[1-9][0-9]*')


class SessionStore:
    """JSON-file backed mapping of task identifier to session history"""

    def __init__(self, data_file: Union[str, Path]):
        """
        Initialize session store

        Args:
            data_file: Path to the JSON data file (created on first write)
        """
        self.logger = logging.getLogger("TaskTracker.Store")
        self.data_file = Path(data_file).expanduser()
        self._sessions: Optional[SessionMap] = None

    # ==================== Reading ====================

    def load(self) -> SessionMap:
        """
        Get a snapshot of all session histories

        Returns:
            Dict of task identifier to list of sessions (oldest first).
            Missing or empty data file gives an empty dict.

        Raises:
            StoreCorruptError: data file content is not a valid session map
        """
        if self._sessions is None:
            self._sessions = self._read_data_file()

        return {task_id: list(history) for task_id, history in self._sessions.items()}

    def reload(self) -> SessionMap:
        """Drop the in-memory snapshot and read the data file again"""
        self._sessions = None
        return self.load()

    def history_of(self, task_id: int) -> List[Session]:
        return list(self._snapshot().get(task_id, []))

    def most_recent_status(self, task_id: int) -> Optional[SessionStatus]:
        """Status of the last session for task_id, None if it has no history"""
        history = self._snapshot().get(task_id)
        if not history:
            return None
        return history[-1].status

    def task_ids(self) -> Set[int]:
        return set(self._snapshot())

    def active_task_ids(self) -> List[int]:
        """Identifiers whose most recent session is active"""
        return [
            task_id for task_id, history in self._snapshot().items()
            if history and history[-1].status == SessionStatus.ACTIVE
        ]

    # ==================== Writing ====================

    def append_session(self, task_id: int, session: Session) -> None:
        """
        Append one session to a task's history and persist

        Args:
            task_id: Task identifier (history is created if absent)
            session: Session to append
        """
        self.append_sessions([(task_id, session)])

    def append_sessions(self, entries: Iterable[Tuple[int, Session]]) -> None:
        """
        Append several sessions and persist them in a single write

        Either every session lands in the data file or none does: on a failed
        write the in-memory snapshot is restored to its prior state.

        Args:
            entries: (task_id, session) pairs, appended in order

        Raises:
            StoreWriteError: data file could not be written
        """
        entries = list(entries)
        if not entries:
            return

        sessions = self._snapshot()
        previous = {task_id: list(history) for task_id, history in sessions.items()}

        for task_id, session in entries:
            sessions.setdefault(task_id, []).append(session)

        try:
            self.persist()
        except StoreWriteError:
            self._sessions = previous
            raise

        for task_id, session in entries:
            self.logger.debug(f"Task {task_id}: appended {session.status.value} session")

    def persist(self) -> None:
        """
        Write the full mapping to the data file atomically (temp file + rename)

        Raises:
            StoreWriteError: data file could not be written
        """
        payload = {
            str(task_id): [session.to_dict() for session in history]
            for task_id, history in self._snapshot().items()
        }

        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=str(self.data_file.parent),
                prefix=".tmp_sessions_",
                suffix=self.data_file.suffix or ".json",
                text=True,
            )
        except OSError as e:
            raise StoreWriteError(f"Failed to write session data {self.data_file}: {e}") from e

        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
                f.write("\n")
            os.replace(temp_path, self.data_file)
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StoreWriteError(f"Failed to write session data {self.data_file}: {e}") from e

        self.logger.debug(f"Saved {len(payload)} task histories to {self.data_file}")

    # ==================== Internals ====================

    def _snapshot(self) -> SessionMap:
        if self._sessions is None:
            self._sessions = self._read_data_file()
        return self._sessions

    def _read_data_file(self) -> SessionMap:
        if not self.data_file.exists():
            self.logger.info(f"No session data at {self.data_file}, starting empty")
            return {}

        try:
            with open(self.data_file, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StoreCorruptError(f"Cannot read session data {self.data_file}: {e}") from e

        if not content.strip():
            return {}

        try:
            raw = json.loads(content, object_pairs_hook=self._reject_duplicate_keys)
        except json.JSONDecodeError as e:
            raise StoreCorruptError(f"Invalid session data JSON in {self.data_file}: {e}") from e

        return self._parse_sessions(raw)

    def _parse_sessions(self, raw) -> SessionMap:
        """
        Validate and convert the raw JSON mapping

        Raises:
            StoreCorruptError: any key, history or session is malformed
        """
        if not isinstance(raw, dict):
            raise StoreCorruptError(
                f"Session data must be a JSON object, got {type(raw).__name__}: {self.data_file}"
            )

        sessions: SessionMap = {}
        for key, history in raw.items():
            if not TASK_ID_KEY.fullmatch(key):
                raise StoreCorruptError(f"Invalid task identifier {key!r} in {self.data_file}")
            task_id = int(key)

            if not isinstance(history, list):
                raise StoreCorruptError(f"Sessions for task {key} must be a list: {self.data_file}")

            try:
                sessions[task_id] = [Session.from_dict(entry) for entry in history]
            except ValueError as e:
                raise StoreCorruptError(f"Invalid session for task {key} in {self.data_file}: {e}") from e

        self.logger.info(f"Loaded {len(sessions)} task histories from {self.data_file.name}")
        return sessions

    def _reject_duplicate_keys(self, pairs):
        """json object hook: a repeated key would silently drop a history"""
        result = {}
        for key, value in pairs:
            if key in result:
                raise StoreCorruptError(f"Duplicate key {key!r} in {self.data_file}")
            result[key] = value
        return result
