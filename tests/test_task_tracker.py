"""
Tests for TaskTracker agent and CLI

Run with: pytest tests/
"""

import json
import pytest
import yaml

from task_tracker import TaskTracker, main
from tracking import SessionStatus


@pytest.fixture
def config_file(tmp_path, data_file):
    """Write a config file pointing at a temporary data file"""
    def _config(**tracking):
        settings = {'data_file': str(data_file), 'vault_path': str(tmp_path)}
        settings.update(tracking)
        path = tmp_path / 'config.yaml'
        path.write_text(yaml.safe_dump({'tracking': settings, 'logging': {'level': 'DEBUG'}}))
        return str(path)
    return _config


class TestTaskTracker:
    """Test suite for TaskTracker core functionality"""

    def test_missing_config_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            TaskTracker(config_path=str(tmp_path / 'nope.yaml'))

    def test_defaults_fill_missing_keys(self, tmp_path, data_file):
        path = tmp_path / 'config.yaml'
        path.write_text(yaml.safe_dump({'tracking': {'data_file': str(data_file)}}))

        agent = TaskTracker(config_path=str(path))

        assert agent.only_one_active is True
        assert agent.vault_path is None
        assert agent.config['logging']['level'] == 'INFO'

    def test_activate_uses_configured_policy(self, config_file, note_file, data_file):
        note_file.write_text("- [ ] 1 first\n- [ ] 2 second")
        agent = TaskTracker(config_path=config_file(only_one_active=False))

        assert agent.activate(str(note_file), 0) == 1
        assert agent.activate(str(note_file), 1) == 2

        assert agent.active_tasks() == [1, 2]

    def test_activate_policy_override(self, config_file, note_file):
        note_file.write_text("- [ ] 1 first\n- [ ] 2 second")
        agent = TaskTracker(config_path=config_file(only_one_active=False))

        agent.activate(str(note_file), 0)
        agent.activate(str(note_file), 1, only_one_active=True)

        assert agent.active_tasks() == [2]
        assert [s.status for s in agent.history(1)] == [SessionStatus.ACTIVE, SessionStatus.INACTIVE]

    def test_note_resolved_from_vault(self, config_file, tmp_path):
        (tmp_path / 'Projects').mkdir()
        note = tmp_path / 'Projects' / 'plan.md'
        note.write_text("- [ ] plan it")
        agent = TaskTracker(config_path=config_file())

        task_id = agent.activate('Projects/plan.md', 0)

        assert note.read_text() == f"- [ ] {task_id} plan it"


class TestCli:
    """Test suite for the command line interface"""

    def test_activate_then_status(self, config_file, note_file, data_file, capsys):
        note_file.write_text("- [ ] 12345 write report")
        config = config_file()

        assert main(['activate', '--file', str(note_file), '--line', '1', '--config', config]) == 0
        assert main(['status', '--config', config]) == 0

        output = capsys.readouterr().out
        assert "✅ Task 12345 active" in output
        assert "ACTIVE TASKS (1)" in output
        assert json.loads(data_file.read_text())['12345'][0]['status'] == 'active'

    def test_not_a_task_exits_nonzero(self, config_file, note_file, capsys):
        note_file.write_text("just text")

        assert main(['activate', '--file', str(note_file), '--line', '1', '--config', config_file()]) == 1
        assert "not a tracked task" in capsys.readouterr().out

    def test_missing_arguments(self, config_file, capsys):
        assert main(['activate', '--config', config_file()]) == 1
        assert main(['history', '--config', config_file()]) == 1

    def test_corrupt_data_reported(self, config_file, note_file, data_file, capsys):
        note_file.write_text("- [ ] task")
        data_file.write_text("{broken")

        assert main(['activate', '--file', str(note_file), '--line', '1', '--config', config_file()]) == 1
        assert "❌" in capsys.readouterr().out
        assert note_file.read_text() == "- [ ] task"

    def test_undecodable_note_reported(self, config_file, note_file, capsys):
        note_file.write_bytes(b"- [ ] caf\xe9")

        assert main(['activate', '--file', str(note_file), '--line', '1', '--config', config_file()]) == 1
        assert "❌" in capsys.readouterr().out

    def test_unwritable_note_reported(self, config_file, note_file, monkeypatch, capsys):
        note_file.write_text("- [ ] task")

        def failing_mkstemp(**kwargs):
            raise PermissionError("read-only dir")

        monkeypatch.setattr('tracking.obsidian.tempfile.mkstemp', failing_mkstemp)

        assert main(['activate', '--file', str(note_file), '--line', '1', '--config', config_file()]) == 1
        assert "❌" in capsys.readouterr().out
        assert note_file.read_text() == "- [ ] task"

    def test_complete_and_history(self, config_file, note_file, capsys):
        note_file.write_text("- [ ] 777 ship it")
        config = config_file()

        assert main(['activate', '--file', str(note_file), '--line', '1', '--config', config]) == 0
        assert main(['deactivate', '--file', str(note_file), '--line', '1', '--config', config]) == 0
        assert main(['complete', '--file', str(note_file), '--line', '1', '--config', config]) == 0
        assert main(['history', '--task-id', '777', '--config', config]) == 0

        output = capsys.readouterr().out
        assert "3 sessions" in output
        assert note_file.read_text() == "- [x] 777 ship it"

    def test_allow_multiple(self, config_file, note_file):
        note_file.write_text("- [ ] 1 first\n- [ ] 2 second")
        config = config_file(only_one_active=True)

        main(['activate', '--file', str(note_file), '--line', '1', '--config', config])
        main(['activate', '--file', str(note_file), '--line', '2', '--config', config, '--allow-multiple'])

        assert TaskTracker(config_path=config).active_tasks() == [1, 2]
