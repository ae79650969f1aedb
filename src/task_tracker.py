#!/usr/bin/env python3
"""
TaskTracker Agent

Time tracking for tasks written as checklist lines in Obsidian notes:
1. Assigns numeric identifiers to task lines on first activation
2. Records active / inactive / complete sessions per task in a JSON data file
3. Keeps at most one task active at a time (configurable)
4. Ticks tasks off in the note when they are completed
"""

import sys
import copy
import yaml
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional
from datetime import datetime


DEFAULT_CONFIG: Dict[str, Any] = {
    'tracking': {
        'data_file': '~/.task-tracker/sessions.json',
        'only_one_active': True,
        'vault_path': None,
    },
    'logging': {
        'level': 'INFO',
    },
}


class TaskTracker:
    """
    Self-contained task tracking agent

    Owns the configuration, the logger and the session store; notes are
    opened per call since every command targets a different line.
    """

    def __init__(self, config_path: Optional[str] = None):
        """Initialize TaskTracker with configuration"""
        self.logger = self._setup_logging()
        self.project_root = self._detect_project_root()
        self.config = self._load_config(config_path)
        self.logger.setLevel(self.config['logging']['level'].upper())

        from tracking import SessionStore

        tracking = self.config['tracking']
        self.only_one_active = bool(tracking['only_one_active'])
        self.vault_path = Path(tracking['vault_path']).expanduser() if tracking.get('vault_path') else None
        self._store = SessionStore(tracking['data_file'])

        self.logger.info("✅ TaskTracker initialized successfully")

    def _setup_logging(self) -> logging.Logger:
        """Setup logging for the agent"""
        logger = logging.getLogger("TaskTracker")

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - TaskTracker - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)

        return logger

    def _detect_project_root(self) -> Path:
        """Detect project root directory"""
        current_path = Path(__file__).resolve()

        # Look for project markers
        for parent in current_path.parents:
            if (parent / 'pyproject.toml').exists() or (parent / 'config').is_dir():
                return parent

        # Fallback
        return Path.cwd()

    def _load_config(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """Load configuration from YAML file, filling gaps from DEFAULT_CONFIG"""
        if config_path is None:
            config_path = self.project_root / 'config' / 'config.yaml'
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            # Try example config
            example_config = self.project_root / 'config' / 'config.example.yaml'
            if example_config.exists():
                self.logger.warning(
                    f"Config not found at {config_path}. "
                    f"Please copy {example_config} to {config_path} and customize."
                )
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f) or {}

        if not isinstance(loaded, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")

        config = copy.deepcopy(DEFAULT_CONFIG)
        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section].update(values)
            else:
                config[section] = values

        return config

    # ==================== Core Methods ====================

    def open_note(self, note_path: str, line: int = 0):
        """
        Open a note with the cursor on a line

        Relative paths are tried against the working directory first, then
        against the configured vault.

        Args:
            note_path: Note file path
            line: Zero-based cursor line

        Returns:
            NoteEditor for the note
        """
        from tracking import NoteEditor

        vault_path = None
        if not Path(note_path).expanduser().exists():
            vault_path = self.vault_path

        return NoteEditor(note_path, line=line, vault_path=vault_path)

    def activate(self, note_path: str, line: int, only_one_active: Optional[bool] = None) -> Optional[int]:
        """
        Activate the task on a note line

        Args:
            note_path: Note file path
            line: Zero-based line number
            only_one_active: Override the configured policy for this call

        Returns:
            Task identifier, or None if the line is not a task
        """
        from tracking import activate_task

        if only_one_active is None:
            only_one_active = self.only_one_active

        editor = self.open_note(note_path, line)
        self.logger.info(f"Activating task at {editor.note_path.name}:{line + 1}...")
        return activate_task(editor, self._store, only_one_active=only_one_active)

    def deactivate(self, note_path: str, line: int) -> Optional[int]:
        """Mark the task on a note line inactive"""
        from tracking import deactivate_task

        editor = self.open_note(note_path, line)
        return deactivate_task(editor, self._store)

    def complete(self, note_path: str, line: int) -> Optional[int]:
        """Tick the task on a note line and record a complete session"""
        from tracking import complete_task

        editor = self.open_note(note_path, line)
        return complete_task(editor, self._store)

    def active_tasks(self) -> List[int]:
        """Identifiers of all tasks whose last session is active"""
        return sorted(self._store.active_task_ids())

    def history(self, task_id: int) -> list:
        """Session history of a task, oldest first"""
        return self._store.history_of(task_id)


# ==================== CLI Interface ====================

def main(argv: Optional[List[str]] = None):
    """CLI entry point"""
    import argparse

    from tracking import TaskTrackerError

    parser = argparse.ArgumentParser(
        description="TaskTracker: time tracking for tasks in Obsidian notes"
    )
    parser.add_argument(
        'command',
        choices=['activate', 'deactivate', 'complete', 'status', 'history'],
        help='Command to execute'
    )
    parser.add_argument(
        '--file',
        help='Note containing the task (for activate/deactivate/complete)'
    )
    parser.add_argument(
        '--line',
        type=int,
        help='1-based line number of the task (for activate/deactivate/complete)'
    )
    parser.add_argument(
        '--task-id',
        type=int,
        help='Task ID (for history command)'
    )
    parser.add_argument(
        '--allow-multiple',
        action='store_true',
        help='Leave other active tasks active (for activate command)'
    )
    parser.add_argument(
        '--config',
        help='Path to config file'
    )

    args = parser.parse_args(argv)

    # Initialize agent
    try:
        agent = TaskTracker(config_path=args.config)
    except Exception as e:
        print(f"❌ Failed to initialize TaskTracker: {e}")
        return 1

    # Execute command
    if args.command in ('activate', 'deactivate', 'complete'):
        if not args.file or args.line is None:
            print(f"❌ --file and --line required for {args.command} command")
            return 1
        if args.line < 1:
            print("❌ --line must be 1 or greater")
            return 1

        line = args.line - 1
        try:
            if args.command == 'activate':
                only_one_active = False if args.allow_multiple else None
                task_id = agent.activate(args.file, line, only_one_active=only_one_active)
            elif args.command == 'deactivate':
                task_id = agent.deactivate(args.file, line)
            else:
                task_id = agent.complete(args.file, line)
        except TaskTrackerError as e:
            print(f"❌ {e}")
            return 1

        if task_id is None:
            print(f"⚠️  Line {args.line} of {args.file} is not a tracked task")
            return 1

        verb = {'activate': 'active', 'deactivate': 'inactive', 'complete': 'complete'}[args.command]
        print(f"✅ Task {task_id} {verb}")

    elif args.command == 'status':
        try:
            active = agent.active_tasks()
        except TaskTrackerError as e:
            print(f"❌ {e}")
            return 1

        print(f"\n⏱️  ACTIVE TASKS ({len(active)}):")
        print("=" * 60)
        if not active:
            print("   No task is currently active")
        now = datetime.now()
        for task_id in active:
            started = agent.history(task_id)[-1].time
            if started.tzinfo is not None:
                started = started.astimezone().replace(tzinfo=None)
            minutes = int((now - started).total_seconds() // 60)
            print(f"   {task_id:<12} since {started.strftime('%Y-%m-%d %H:%M')} ({minutes} min)")
        print()

    elif args.command == 'history':
        if args.task_id is None:
            print("❌ --task-id required for history command")
            return 1
        try:
            sessions = agent.history(args.task_id)
        except TaskTrackerError as e:
            print(f"❌ {e}")
            return 1

        print(f"\n📜 HISTORY FOR TASK {args.task_id} ({len(sessions)} sessions):")
        print("=" * 60)
        for session in sessions:
            print(f"   {session.time.isoformat(timespec='seconds')}  {session.status.value}")
        print()

    return 0


if __name__ == '__main__':
    sys.exit(main())
