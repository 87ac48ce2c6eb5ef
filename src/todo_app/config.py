"""
設定管理モジュール

関連クラス:
  - todo.repository.TodoRepository: database設定を使用
  - todo.scheduler.PastDueScheduler: sweep設定を使用
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

PROJECT_ROOT = Path(__file__).parent.parent.parent


@dataclass
class DatabaseConfig:
    """データベース設定"""

    path: Optional[str] = None  # None: $TODO_DB_PATH または data/todo.db
    timeout_seconds: float = 30.0

    def resolved_path(self) -> Optional[Path]:
        """プロジェクトルート基準で解決したパス（未設定ならNone）"""
        if not self.path:
            return None
        path = Path(self.path)
        return path if path.is_absolute() else PROJECT_ROOT / path


@dataclass
class SweepConfig:
    """期限切れ一括更新設定"""

    enabled: bool = True
    interval_seconds: int = 60  # デフォルト1分


@dataclass
class ServerConfig:
    """HTTPサーバー設定"""

    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class Config:
    """アプリケーション設定クラス"""

    database: DatabaseConfig = None  # type: ignore
    sweep: SweepConfig = None  # type: ignore
    server: ServerConfig = None  # type: ignore

    # ログ設定
    log_level: str = "INFO"
    log_file: str = "logs/todo_service.log"

    def __post_init__(self):
        """デフォルト値の初期化"""
        if self.database is None:
            self.database = DatabaseConfig()
        if self.sweep is None:
            self.sweep = SweepConfig()
        if self.server is None:
            self.server = ServerConfig()

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """YAMLファイルから設定を読み込む

        Args:
            config_path: 設定ファイルパス（省略時はconfig/app_config.yamlを使用）

        Returns:
            Config: 設定インスタンス（ファイルが無ければデフォルト値）
        """
        if config_path is None:
            config_path = PROJECT_ROOT / "config" / "app_config.yaml"

        config_path = Path(config_path)
        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        # YAML構造から設定を抽出
        database_data = yaml_data.get("database") or {}
        sweep_data = yaml_data.get("sweep") or {}
        server_data = yaml_data.get("server") or {}
        log_data = yaml_data.get("log") or {}

        return cls(
            database=DatabaseConfig(
                path=database_data.get("path"),
                timeout_seconds=float(database_data.get("timeout_seconds", 30.0)),
            ),
            sweep=SweepConfig(
                enabled=bool(sweep_data.get("enabled", True)),
                interval_seconds=int(sweep_data.get("interval_seconds", 60)),
            ),
            server=ServerConfig(
                host=server_data.get("host", "0.0.0.0"),
                port=int(server_data.get("port", 8000)),
            ),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/todo_service.log"),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """環境変数から設定を読み込む"""
        return cls(
            database=DatabaseConfig(
                path=os.getenv("TODO_DB_PATH"),
                timeout_seconds=float(os.getenv("TODO_DB_TIMEOUT", "30")),
            ),
            sweep=SweepConfig(
                enabled=os.getenv("TODO_SWEEP_ENABLED", "true").lower() in ("1", "true", "yes"),
                interval_seconds=int(os.getenv("TODO_SWEEP_INTERVAL", "60")),
            ),
            server=ServerConfig(
                host=os.getenv("TODO_HOST", "0.0.0.0"),
                port=int(os.getenv("TODO_PORT", "8000")),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/todo_service.log"),
        )
