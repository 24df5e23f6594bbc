"""
ログ設定モジュール

アプリケーション全体のログシステムを設定・管理するモジュールです。
コンソール（カラー表示）とファイル（日次ローテーション）の両方に出力します。
"""
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from colorlog import ColoredFormatter


def setup_logging(
    log_dir: Optional[Union[str, Path]] = None,
    level: str = "INFO",
    backup_count: int = 30,
):
    """ログシステムを設定.

    ルートロガーにコンソールハンドラーと日次ローテーションのファイルハンドラーを
    追加します。既存のハンドラーは重複を避けるためにクリアされます。

    Args:
        log_dir: ログディレクトリ。省略時はプロジェクトルート下の logs
        level: ログレベル名
        backup_count: 保持するログファイルの日数

    Returns:
        Path: ログファイルのパス
    """
    if log_dir is None:
        from .resource_finder import get_project_root

        log_dir = get_project_root() / "logs"
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "app.log"
    log_level = logging.getLevelName(str(level).upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # 既存のハンドラーをクリア（重複追加を回避）
    if root_logger.handlers:
        root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)

    file_handler = TimedRotatingFileHandler(
        log_file,
        when="midnight",
        interval=1,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.suffix = "%Y-%m-%d.log"

    formatter = logging.Formatter(
        "%(asctime)s[%(name)s] - %(levelname)s - %(message)s - %(threadName)s"
    )

    color_formatter = ColoredFormatter(
        "%(green)s%(asctime)s%(reset)s[%(blue)s%(name)s%(reset)s] - "
        "%(log_color)s%(levelname)s%(reset)s - %(green)s%(message)s%(reset)s - "
        "%(cyan)s%(threadName)s%(reset)s",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "white",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        secondary_log_colors={"asctime": {"green": "green"}, "name": {"blue": "blue"}},
    )
    console_handler.setFormatter(color_formatter)
    file_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    logging.info("ログシステムが初期化されました。ログファイル: %s", log_file)

    return log_file


def get_logger(name):
    """統一設定されたロガーを取得.

    Args:
        name: ロガー名、通常はモジュール名

    Returns:
        logging.Logger: ``error_exc`` ヘルパー付きのロガー

    使用例:
        logger = get_logger(__name__)
        logger.error_exc("保存に失敗しました: %s", path)
    """
    logger = logging.getLogger(name)

    def log_error_with_exc(msg, *args, **kwargs):
        """エラーを記録し、自動的に例外スタックトレースを含める."""
        kwargs["exc_info"] = True
        logger.error(msg, *args, **kwargs)

    logger.error_exc = log_error_with_exc

    return logger
