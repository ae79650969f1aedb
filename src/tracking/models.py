"""
Session data model

Sessions are immutable records appended to a task's history. The current
status of a task is always the status of its last session.
"""

from enum import Enum
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Any, Optional


class SessionStatus(str, Enum):
    """Status carried by a single session"""
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    COMPLETE = 'complete'


@dataclass(frozen=True)
class Session:
    """Point-in-time status record for one task"""
    time: datetime
    status: SessionStatus

    def to_dict(self) -> Dict[str, Any]:
        return {'time': self.time.isoformat(), 'status': self.status.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Session':
        """
        Build a session from its JSON form

        Accepts ISO-8601 timestamps, including the trailing 'Z' that
        JavaScript's Date.toJSON() produces.

        Raises:
            ValueError: missing keys, bad timestamp or unknown status
        """
        if not isinstance(data, dict):
            raise ValueError(f"Session must be an object, got {type(data).__name__}")
        if 'time' not in data or 'status' not in data:
            raise ValueError(f"Session is missing 'time' or 'status': {data}")

        raw_time = data['time']
        if not isinstance(raw_time, str):
            raise ValueError(f"Session time must be a string: {raw_time!r}")
        if raw_time.endswith('Z'):
            raw_time = raw_time[:-1] + '+00:00'

        return cls(
            time=datetime.fromisoformat(raw_time),
            status=SessionStatus(data['status'])
        )


@dataclass(frozen=True)
class TaskLine:
    """Structural view of a checklist line"""
    marker: str  # indentation + bullet + checkbox, e.g. "- [ ]"
    checked: bool
    identifier: Optional[int]
    description: str

    @property
    def has_identifier(self) -> bool:
        return self.identifier is not None
