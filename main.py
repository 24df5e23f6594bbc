"""
スマートホーム デバイス管理 メインエントリーポイント

ランプとロボット掃除機をメニュー操作で管理するコンソールアプリケーション
- デバイスの追加・電源操作・明るさ/モード変更・充電
- ファイルへの保存と読み込み
- 電源OFFの予約と操作履歴の表示
"""
import signal
import sys
from pathlib import Path

from src.application import Application
from src.utils.config_manager import ConfigManager
from src.utils.logging_config import get_logger, setup_logging
from src.utils.resource_finder import get_project_root

# ロガーを初期化
logger = get_logger(__name__)


def signal_handler(sig, frame):
    """Ctrl+C シグナルを処理する."""
    logger.info("中断シグナルを受信しました。終了中...")
    app = Application.get_instance()
    app.shutdown()
    sys.exit(0)


def main():
    """プログラムのエントリーポイント."""
    signal.signal(signal.SIGINT, signal_handler)

    try:
        config = ConfigManager.get_instance()

        # ログを設定（相対パスはプロジェクトルート基準）
        log_dir = Path(config.get_config("LOGGING.LOG_DIR", "logs"))
        if not log_dir.is_absolute():
            log_dir = get_project_root() / log_dir
        setup_logging(
            log_dir=log_dir,
            level=config.get_config("LOGGING.LEVEL", "INFO"),
            backup_count=config.get_config("LOGGING.BACKUP_COUNT", 30),
        )

        app = Application.get_instance()

        logger.info("アプリケーションが開始されました。終了するには 0 を選択してください")

        app.run(mode="cli")

    except Exception as e:
        logger.error(f"プログラムでエラーが発生: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
