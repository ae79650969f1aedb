"""
Obsidian Note Editor

Cursor-style access to a single note in an Obsidian vault via direct file
access. Every read goes to disk so the engines always see the current
note content.
"""

import os
import logging
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from .errors import NoteNotFoundError, NoteReadError, NoteWriteError


class NoteEditor:
    """Line-addressed view of one note with a cursor"""

    def __init__(self, note_path: Union[str, Path], line: int = 0, vault_path: Optional[Union[str, Path]] = None):
        """
        Initialize note editor

        Args:
            note_path: Path to the note (relative paths resolve against vault_path)
            line: Zero-based cursor line
            vault_path: Vault root used for relative note paths
        """
        self.logger = logging.getLogger("TaskTracker.Editor")

        note_path = Path(note_path).expanduser()
        if vault_path is not None and not note_path.is_absolute():
            note_path = Path(vault_path).expanduser() / note_path
        self.note_path = note_path

        self._cursor = 0
        self.set_cursor(line)

        if not self.note_path.exists():
            self.logger.warning(f"Note not found: {self.note_path}")

    @property
    def cursor(self) -> int:
        """Zero-based line the cursor sits on"""
        return self._cursor

    def set_cursor(self, line: int) -> None:
        if line < 0:
            raise ValueError(f"Cursor line must be >= 0, got {line}")
        self._cursor = line

    def read(self) -> str:
        """
        Read full note content

        Line endings are kept as they are on disk.

        Raises:
            NoteNotFoundError: note does not exist
            NoteReadError: note cannot be read or is not valid UTF-8
        """
        if not self.note_path.exists():
            raise NoteNotFoundError(f"Note not found: {self.note_path}")

        try:
            with open(self.note_path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise NoteReadError(f"Failed to read note {self.note_path}: {e}") from e

    def line_count(self) -> int:
        return len(self._lines())

    def get_line(self, line: Optional[int] = None) -> Optional[str]:
        """
        Get text of a line

        Args:
            line: Zero-based line number (default: cursor line)

        Returns:
            Line text without its line ending, or None past the end of the note
        """
        if line is None:
            line = self._cursor

        lines = self._lines()
        if line >= len(lines):
            return None

        return lines[line].rstrip('\r')

    def set_line(self, line: int, text: str) -> None:
        """
        Replace the text of one line, keeping every other byte of the note

        Args:
            line: Zero-based line number
            text: New line text, without line ending

        Raises:
            IndexError: line is past the end of the note
            NoteWriteError: note could not be written
        """
        lines = self._lines()
        if line >= len(lines):
            raise IndexError(f"Line {line} out of range for {self.note_path.name} ({len(lines)} lines)")

        ending = '\r' if lines[line].endswith('\r') else ''
        lines[line] = text + ending

        self._write('\n'.join(lines))
        self.logger.debug(f"Rewrote line {line + 1} of {self.note_path.name}")

    def _lines(self) -> List[str]:
        return self.read().split('\n')

    def _write(self, content: str) -> None:
        """Replace note content in one step (temp file + rename)"""
        try:
            fd, temp_path = tempfile.mkstemp(
                dir=str(self.note_path.parent),
                prefix=".tmp_note_",
                suffix=self.note_path.suffix or ".md",
                text=True,
            )
        except OSError as e:
            raise NoteWriteError(f"Failed to write note {self.note_path}: {e}") from e

        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
            os.replace(temp_path, self.note_path)
        except OSError as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise NoteWriteError(f"Failed to write note {self.note_path}: {e}") from e
