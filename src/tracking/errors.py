"""
Tracking errors

Failures raised by the session store and the note editor. A line that is
not a task is never an error: the engines return None for it.
"""


class TaskTrackerError(Exception):
    """Base class for all task tracker failures"""


class StoreCorruptError(TaskTrackerError):
    """Session data file exists but cannot be parsed"""


class StoreWriteError(TaskTrackerError):
    """Session data file could not be written"""


class NoteNotFoundError(TaskTrackerError):
    """Note file does not exist"""


class NoteWriteError(TaskTrackerError):
    """Note file could not be written"""


class NoteReadError(TaskTrackerError):
    """Note file exists but could not be read or decoded"""
