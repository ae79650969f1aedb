"""
Task line parsing

Recognises Obsidian checklist lines and rewrites them in place:

    - [ ] Write report           -> task, no identifier
    - [x] 12345 Write report     -> task 12345, checked
    Just a line                  -> not a task

The identifier always sits right after the checkbox and before the
description, separated by single spaces.
"""

import re
from typing import Optional

from .models import TaskLine


# Indentation, bullet, checkbox; body must be separated by a space
TASK_PATTERN = re.compile(r'^(?P<marker>\s*[-*+] \[(?P<check>[ xX])\])(?P<rest>(?: .*)?)$')
# Positive, unpadded: "0" or "007" stay part of the description
IDENTIFIER_PATTERN = re.compile(r'^(?P<id>[1-9][0-9]*)(?: (?P<description>.*))?$')


def parse_task_line(line: str) -> Optional[TaskLine]:
    """
    Parse a single line into a TaskLine

    Args:
        line: Raw line text, without line terminator

    Returns:
        TaskLine if the line is a checklist item, None otherwise
    """
    task_match = TASK_PATTERN.match(line)
    if not task_match:
        return None

    body = task_match.group('rest')[1:]
    identifier = None
    description = body

    id_match = IDENTIFIER_PATTERN.match(body)
    if id_match:
        identifier = int(id_match.group('id'))
        description = id_match.group('description') or ''

    return TaskLine(
        marker=task_match.group('marker'),
        checked=task_match.group('check') in 'xX',
        identifier=identifier,
        description=description
    )


def insert_identifier(line: str, identifier: int) -> str:
    """
    Embed an identifier right after the checkbox marker

    Args:
        line: Task line without an identifier
        identifier: Identifier to embed

    Returns:
        The rewritten line; everything after the marker is kept verbatim

    Raises:
        ValueError: line is not a task, or already carries another identifier
    """
    task = parse_task_line(line)
    if task is None:
        raise ValueError(f"Not a task line: {line!r}")

    if task.has_identifier:
        if task.identifier == identifier:
            return line
        raise ValueError(
            f"Task already has identifier {task.identifier}, refusing to add {identifier}"
        )

    body = line[len(task.marker) + 1:]
    if body:
        return f"{task.marker} {identifier} {body}"
    return f"{task.marker} {identifier}"


def mark_checked(line: str) -> str:
    """Tick the checkbox of a task line, leaving the rest untouched"""
    task = parse_task_line(line)
    if task is None:
        raise ValueError(f"Not a task line: {line!r}")
    if task.checked:
        return line

    marker = task.marker[:-2] + 'x]'
    return marker + line[len(task.marker):]
