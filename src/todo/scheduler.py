"""
期限切れ(past due)一括更新スケジューラーモジュール

関連クラス:
  - service.TodoService: update_past_due_items() を定期的に呼び出す
"""

import logging
import threading
import time
from typing import Any, Dict, Optional


class PastDueScheduler:
    """期限切れTodoを定期的に一括更新するスケジューラークラス"""

    def __init__(
        self,
        service: Any,  # TodoService (update_past_due_items を持つもの)
        interval_seconds: int = 60,  # デフォルト1分
    ):
        """
        初期化

        Args:
            service: TodoServiceインスタンス
            interval_seconds: 実行間隔（秒）
        """
        if interval_seconds < 1:
            raise ValueError("Interval must be at least 1 second")

        self.service = service
        self.interval_seconds = interval_seconds
        self.logger = logging.getLogger(__name__)

        # 状態管理
        self._running = False
        self._lock = threading.Lock()
        self._run_count = 0
        self._last_updated_count: Optional[int] = None
        self._last_run_at: Optional[float] = None
        self._last_error: Optional[str] = None

        # スレッド
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """スケジューラーを開始（バックグラウンドスレッド起動）"""
        with self._lock:
            if self._running:
                self.logger.warning("Past due scheduler is already running")
                return

            self._running = True
            self._thread = threading.Thread(
                target=self._run_loop, name="past-due-sweep", daemon=True
            )
            self._thread.start()
            self.logger.info(
                "Past due scheduler started (interval: %s seconds)", self.interval_seconds
            )

    def stop(self) -> None:
        """スケジューラーを停止"""
        with self._lock:
            if not self._running:
                self.logger.warning("Past due scheduler is not running")
                return

            self._running = False
            self.logger.info("Stopping past due scheduler...")

        # スレッドの終了を待機
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
            self.logger.info("Past due scheduler stopped")

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def get_status(self) -> Dict[str, Any]:
        """現在の状態を取得"""
        with self._lock:
            return {
                "running": self._running,
                "interval_seconds": self.interval_seconds,
                "run_count": self._run_count,
                "last_run_at": self._last_run_at,
                "last_updated_count": self._last_updated_count,
                "last_error": self._last_error,
            }

    def set_interval(self, interval_seconds: int) -> None:
        """実行間隔を変更"""
        if interval_seconds < 1:
            raise ValueError("Interval must be at least 1 second")

        with self._lock:
            self.interval_seconds = interval_seconds
            self.logger.info("Sweep interval changed to %s seconds", interval_seconds)

    def run_once(self) -> Optional[int]:
        """
        一括更新を1回実行

        Returns:
            更新件数。失敗時はNone（例外はログに記録し、再送出しない）
        """
        self.logger.debug("Running scheduled past due check")
        try:
            updated = self.service.update_past_due_items()
        except Exception as e:
            self.logger.error(f"Past due sweep failed: {e}", exc_info=True)
            with self._lock:
                self._run_count += 1
                self._last_run_at = time.time()
                self._last_error = str(e)
            return None

        with self._lock:
            self._run_count += 1
            self._last_run_at = time.time()
            self._last_updated_count = updated
            self._last_error = None
        return updated

    def _run_loop(self) -> None:
        """
        メインループ（バックグラウンドスレッドで実行）

        interval_secondsごとにrun_onceを呼び出す。失敗しても次の周期で再実行する。
        """
        self.logger.info("Past due scheduler loop started")

        while True:
            # 次の実行までスリープ（1秒ごとに停止確認）
            for _ in range(self.interval_seconds):
                with self._lock:
                    if not self._running:
                        self.logger.info("Past due scheduler loop exited")
                        return
                time.sleep(1)

            self.run_once()
