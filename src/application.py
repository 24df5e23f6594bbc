"""スマートホーム デバイス管理アプリケーションのメインモジュール

設定・操作履歴・デバイス管理・表示インターフェースを組み立て、
タイマーから届く予約タスクをメインスレッドで実行するためのキューを管理します。
"""

import threading
from typing import Callable, Optional

from src.constants.constants import EventType
from src.iot.device_registry import DeviceRegistry
from src.utils.activity_log import ActivityLog
from src.utils.config_manager import ConfigManager
from src.utils.logging_config import get_logger
from src.utils.timer_service import TimerService

logger = get_logger(__name__)


class Application:
    """スマートホーム デバイス管理アプリケーション

    シングルトンパターンを使用して、アプリケーション全体で単一のインスタンスを保証します。

    電源OFF予約などのタイマー処理はタイマーのスレッドで直接実行せず、
    ``schedule()`` でタスクキューに積み、表示側がコマンドの合間に
    ``process_scheduled_tasks()`` で実行します。これによりデバイスの状態と
    操作履歴は常に一つのスレッドからのみ変更されます。
    """
    _instance = None

    @classmethod
    def get_instance(cls):
        """シングルトンインスタンスを取得

        Returns:
            Application: アプリケーションのシングルトンインスタンス
        """
        if cls._instance is None:
            logger.debug("Applicationシングルトンインスタンスを作成")
            cls._instance = Application()
        return cls._instance

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        timer_service: Optional[TimerService] = None,
    ):
        """アプリケーションを初期化

        Note:
            通常は直接呼び出さず、get_instance()を使用してください
        """
        if Application._instance is not None:
            logger.error("Applicationの複数インスタンス作成を試行")
            raise Exception("Applicationはシングルトンクラスです。get_instance()を使用してインスタンスを取得してください")
        Application._instance = self

        logger.debug("Applicationインスタンスを初期化")

        self.config = config or ConfigManager.get_instance()

        # タスクキューとロック
        self.main_tasks = []  # メインスレッドで実行されるタスクキュー
        self.mutex = threading.Lock()  # タスクキューの排他制御用
        self.events = {
            EventType.SCHEDULE_EVENT: threading.Event(),
        }

        self.activity_log = ActivityLog()
        self.timer_service = timer_service or TimerService()
        self.registry = DeviceRegistry(
            activity_log=self.activity_log,
            timer_service=self.timer_service,
            dispatcher=self.schedule,
        )

        self.display = None
        self.running = False
        logger.debug("Applicationインスタンスの初期化完了")

    def run(self, mode: str = "cli", io=None):
        """アプリケーションを起動し、表示が閉じられるまで戻りません

        Args:
            mode: 表示モード（現在は 'cli' のみ）
            io: CLIの入出力。省略時は標準入出力
        """
        logger.info("アプリケーションを起動、モード: %s", mode)
        self.running = True
        self.set_display_type(mode, io)
        self.display.start()
        self.running = False
        logger.info("表示インターフェースが終了しました")

    def set_display_type(self, mode: str, io=None):
        """表示インターフェースを初期化"""
        if mode != "cli":
            raise ValueError(f"サポートされていない表示モード: {mode}")
        from src.display.cli_display import CliDisplay

        self.display = CliDisplay(self, io)

    def schedule(self, callback: Callable[[], None]):
        """タスクをメインスレッドのキューに追加

        任意のスレッドから呼び出せます。

        Args:
            callback: 実行する関数またはラムダ
        """
        with self.mutex:
            self.main_tasks.append(callback)
        self.events[EventType.SCHEDULE_EVENT].set()

    def process_scheduled_tasks(self) -> int:
        """キューに溜まったタスクを登録順に実行

        Returns:
            int: 実行したタスク数
        """
        event = self.events[EventType.SCHEDULE_EVENT]
        if not event.is_set():
            return 0
        event.clear()

        with self.mutex:
            tasks = self.main_tasks.copy()
            self.main_tasks.clear()

        logger.debug("%d個のスケジュールタスクを処理", len(tasks))
        for task in tasks:
            try:
                task()
            except Exception as e:
                logger.error("スケジュールタスクの実行中にエラー: %s", e, exc_info=True)
        return len(tasks)

    def shutdown(self):
        """アプリケーションをシャットダウン

        未実行の電源OFF予約は破棄されます。
        """
        logger.info("アプリケーションをシャットダウン中...")
        self.running = False
        self.timer_service.shutdown()
        if self.display:
            self.display.on_close()
        logger.info("アプリケーションのシャットダウン完了")
