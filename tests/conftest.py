"""
Shared fixtures: a note on disk, a session data file, a fixed clock
"""

import json
import logging
import pytest
from datetime import datetime

from tracking import NoteEditor, SessionStore


FIXED_NOW = datetime(2026, 10, 18, 9, 30, 0)


@pytest.fixture
def note_file(tmp_path):
    return tmp_path / 'note.md'


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / 'data.json'


@pytest.fixture
def make_note(note_file, data_file):
    """Write note content and initial data, return (editor, store)"""
    def _setup(content, initial_data='{}', line=0):
        note_file.write_text(content, encoding='utf-8')
        if not isinstance(initial_data, str):
            initial_data = json.dumps(initial_data)
        data_file.write_text(initial_data, encoding='utf-8')
        return NoteEditor(note_file, line=line), SessionStore(data_file)
    return _setup


@pytest.fixture
def clock():
    return lambda: FIXED_NOW


@pytest.fixture(autouse=True)
def reset_tracker_logging():
    """Drop handlers bound to a previous test's captured stderr"""
    yield
    logger = logging.getLogger("TaskTracker")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
