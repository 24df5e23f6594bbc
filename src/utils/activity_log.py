"""
操作履歴モジュール

ユーザー操作やスケジュール実行の履歴を、時刻付きの文字列として
追記専用で記録します。
"""
import threading
from datetime import datetime
from typing import Callable, List, Optional

from src.utils.logging_config import get_logger

logger = get_logger(__name__)


class ActivityLog:
    """時刻付きの操作履歴.

    エントリは追加された順に保持され、削除や変更はできません。
    """

    TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._entries: List[str] = []
        self._lock = threading.Lock()
        self._clock = clock or datetime.now

    def append(self, message: str) -> str:
        """メッセージに現在時刻を付けて追記.

        Returns:
            str: 追記されたエントリ
        """
        entry = f"[{self._clock().strftime(self.TIME_FORMAT)}] {message}"
        with self._lock:
            self._entries.append(entry)
        logger.info("(LOG) %s", entry)
        return entry

    def entries(self) -> List[str]:
        """全エントリのコピーを追加順で返す."""
        with self._lock:
            return list(self._entries)

    def dump(self) -> str:
        """表示用に全エントリを連結."""
        entries = self.entries()
        if not entries:
            return "履歴はまだありません"
        return "\n".join(entries)

    def __len__(self):
        with self._lock:
            return len(self._entries)
