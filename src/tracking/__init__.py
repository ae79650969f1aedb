"""
Time tracking for checklist tasks in Obsidian notes
"""

from .models import Session, SessionStatus, TaskLine
from .errors import (
    TaskTrackerError,
    StoreCorruptError,
    StoreWriteError,
    NoteNotFoundError,
    NoteWriteError,
    NoteReadError,
)
from .parser import parse_task_line, insert_identifier, mark_checked
from .ids import allocate_identifier
from .store import SessionStore
from .obsidian import NoteEditor
from .activation import activate_task, deactivate_task, complete_task

__all__ = [
    'Session', 'SessionStatus', 'TaskLine',
    'TaskTrackerError', 'StoreCorruptError', 'StoreWriteError', 'NoteNotFoundError', 'NoteWriteError', 'NoteReadError',
    'parse_task_line', 'insert_identifier', 'mark_checked',
    'allocate_identifier',
    'SessionStore', 'NoteEditor',
    'activate_task', 'deactivate_task', 'complete_task',
]
