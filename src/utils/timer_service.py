"""
遅延実行サービス

指定秒数の経過後にコールバックを一度だけ呼び出します。
"""
import threading
from typing import Callable, List

from src.utils.logging_config import get_logger

logger = get_logger(__name__)


class TimerService:
    """``threading.Timer`` による一回限りの遅延実行.

    登録後の取り消しはできません。同じ対象への複数の登録はそれぞれ独立して実行されます。
    """

    def __init__(self):
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()

    def schedule(self, callback: Callable[[], None], delay_seconds: float) -> None:
        """コールバックを ``delay_seconds`` 秒後に実行するよう登録.

        Args:
            callback: 実行する関数
            delay_seconds: 遅延秒数（0以上）
        """
        if delay_seconds < 0:
            raise ValueError("遅延秒数は0以上でなければなりません")

        def run():
            try:
                callback()
            except Exception as e:
                logger.error("遅延タスクの実行中にエラー: %s", e, exc_info=True)
            finally:
                with self._lock:
                    if timer in self._timers:
                        self._timers.remove(timer)

        timer = threading.Timer(delay_seconds, run)
        timer.daemon = True
        with self._lock:
            self._timers.append(timer)
        timer.start()
        logger.debug("%s秒後のタスクを登録しました", delay_seconds)

    def pending_count(self) -> int:
        with self._lock:
            return len(self._timers)

    def shutdown(self) -> None:
        """未実行のタイマーをすべて停止（アプリケーション終了時のみ使用）."""
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
