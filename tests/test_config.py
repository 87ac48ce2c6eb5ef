from pathlib import Path

from src.todo_app.config import PROJECT_ROOT, Config


def test_from_yaml(tmp_path):
    config_path = tmp_path / "app_config.yaml"
    config_path.write_text(
        """
database:
  path: var/todos.db
  timeout_seconds: 5
sweep:
  enabled: false
  interval_seconds: 15
log:
  level: DEBUG
  file: logs/test.log
server:
  port: 9000
""",
        encoding="utf-8",
    )

    config = Config.from_yaml(config_path)

    assert config.database.resolved_path() == PROJECT_ROOT / "var" / "todos.db"
    assert config.database.timeout_seconds == 5.0
    assert config.sweep.enabled is False
    assert config.sweep.interval_seconds == 15
    assert config.log_level == "DEBUG"
    assert config.server.host == "0.0.0.0"
    assert config.server.port == 9000


def test_missing_file_gives_defaults(tmp_path):
    config = Config.from_yaml(tmp_path / "missing.yaml")
    assert config.database.resolved_path() is None
    assert config.sweep.interval_seconds == 60
    assert config.sweep.enabled is True


def test_shipped_config_loads():
    config = Config.from_yaml()
    assert config.sweep.interval_seconds == 60
    assert config.database.path is None


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TODO_DB_PATH", str(tmp_path / "env.db"))
    monkeypatch.setenv("TODO_SWEEP_INTERVAL", "5")
    monkeypatch.setenv("TODO_SWEEP_ENABLED", "no")

    config = Config.from_env()

    assert config.database.resolved_path() == Path(tmp_path / "env.db")
    assert config.sweep.interval_seconds == 5
    assert config.sweep.enabled is False
