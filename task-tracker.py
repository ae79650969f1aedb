#!/usr/bin/env python3
"""
task-tracker CLI

Time tracking for checklist tasks in Obsidian notes. Each task line gets a
numeric ID the first time it is activated; sessions are recorded per ID.

Usage:
    ./task-tracker.py activate --file <note> --line <n>     # Start working on a task
    ./task-tracker.py deactivate --file <note> --line <n>   # Pause a task
    ./task-tracker.py complete --file <note> --line <n>     # Tick a task off
    ./task-tracker.py status                                # Show active tasks
    ./task-tracker.py history --task-id <id>                # Show a task's sessions

Examples:
    # Start the task on line 12 of today's note (stops any other active task)
    ./task-tracker.py activate --file "Daily/2026-10-18.md" --line 12

    # Start it without stopping the others
    ./task-tracker.py activate --file "Daily/2026-10-18.md" --line 12 --allow-multiple
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / 'src'))

from task_tracker import main

if __name__ == '__main__':
    sys.exit(main())
