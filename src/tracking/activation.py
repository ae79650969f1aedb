"""
Activation Engine

Ties the note and the session store together. The note and the data file are
written as two separate steps, note first: a failure in between leaves a
task with an identifier but no history, which the next activation simply
treats as never activated.
"""

import random
import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from .ids import allocate_identifier
from .models import Session, SessionStatus, TaskLine
from .obsidian import NoteEditor
from .parser import parse_task_line, insert_identifier, mark_checked
from .store import SessionStore


Clock = Callable[[], datetime]

logger = logging.getLogger("TaskTracker.Activation")


def activate_task(
    editor: NoteEditor,
    store: SessionStore,
    only_one_active: bool = True,
    clock: Clock = datetime.now,
    rng: Optional[random.Random] = None
) -> Optional[int]:
    """
    Make the task under the cursor the active one

    Steps:
    1. Not a task line → return None, nothing is touched
    2. No identifier → allocate one and write it into the note; the new
       task starts with an empty history
    3. Existing identifier → append an active session unless the last
       session already is active
    4. only_one_active → every other task whose last session is active
       gets an inactive session

    Args:
        editor: Note with the cursor on the task line
        store: Session store
        only_one_active: Deactivate other active tasks
        clock: Source of session timestamps
        rng: Random source for identifier allocation

    Returns:
        Task identifier, or None if the cursor is not on a task

    Raises:
        StoreCorruptError: data file cannot be parsed
        NoteReadError: note cannot be read
        NoteWriteError, StoreWriteError: a write failed (nothing is retried)
    """
    task = _task_at_cursor(editor)
    if task is None:
        logger.info(f"Line {editor.cursor + 1} is not a task, nothing to activate")
        return None

    now = clock()
    pending: List[Tuple[int, Session]] = []

    if task.has_identifier:
        task_id = task.identifier
        status = store.most_recent_status(task_id)
        if status == SessionStatus.ACTIVE:
            logger.info(f"Task {task_id} is already active")
        else:
            pending.append((task_id, Session(time=now, status=SessionStatus.ACTIVE)))
    else:
        # Identifier only; the new task gets its first session on its next activation
        task_id = allocate_identifier(store.task_ids(), rng=rng)
        line = editor.get_line(editor.cursor)
        editor.set_line(editor.cursor, insert_identifier(line, task_id))
        logger.info(f"Assigned identifier {task_id} to '{task.description[:40]}'")

    if only_one_active:
        for other_id in store.active_task_ids():
            if other_id != task_id:
                pending.append((other_id, Session(time=now, status=SessionStatus.INACTIVE)))
                logger.info(f"Deactivating task {other_id}")

    store.append_sessions(pending)

    logger.info(f"✅ Task {task_id} active")
    return task_id


def deactivate_task(editor: NoteEditor, store: SessionStore, clock: Clock = datetime.now) -> Optional[int]:
    """
    Stop the session of the task under the cursor

    Returns:
        Task identifier, or None if the line is not a task with an identifier
    """
    task = _task_at_cursor(editor)
    if task is None or not task.has_identifier:
        logger.info(f"Line {editor.cursor + 1} has no tracked task, nothing to deactivate")
        return None

    task_id = task.identifier
    if store.most_recent_status(task_id) != SessionStatus.ACTIVE:
        logger.info(f"Task {task_id} is not active")
        return task_id

    store.append_session(task_id, Session(time=clock(), status=SessionStatus.INACTIVE))
    logger.info(f"✅ Task {task_id} inactive")
    return task_id


def complete_task(editor: NoteEditor, store: SessionStore, clock: Clock = datetime.now) -> Optional[int]:
    """
    Tick the task under the cursor and close its history with a complete session

    The note is written before the data file, same as activation.

    Returns:
        Task identifier, or None if the line is not a task with an identifier
    """
    task = _task_at_cursor(editor)
    if task is None or not task.has_identifier:
        logger.info(f"Line {editor.cursor + 1} has no tracked task, nothing to complete")
        return None

    task_id = task.identifier
    if not task.checked:
        line = editor.get_line(editor.cursor)
        editor.set_line(editor.cursor, mark_checked(line))

    if store.most_recent_status(task_id) == SessionStatus.COMPLETE:
        logger.info(f"Task {task_id} is already complete")
        return task_id

    store.append_session(task_id, Session(time=clock(), status=SessionStatus.COMPLETE))
    logger.info(f"✅ Task {task_id} complete")
    return task_id


def _task_at_cursor(editor: NoteEditor) -> Optional[TaskLine]:
    line = editor.get_line(editor.cursor)
    if line is None:
        return None
    return parse_task_line(line)
