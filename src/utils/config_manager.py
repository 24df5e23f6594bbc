# システム設定管理モジュール
# アプリケーションの設定ファイルの読み込み、保存、管理を行う

import copy
import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

from src.utils.logging_config import get_logger
from src.utils.resource_finder import find_config_dir, get_project_root

logger = get_logger(__name__)


class ConfigManager:
    """
    設定管理クラス - シングルトンパターン

    アプリケーションの全設定を一元管理し、設定ファイルの読み書きを行う。
    アプリケーション全体では get_instance() で同一のインスタンスを使用する。
    テストなどで別の設定ファイルを使う場合は、パスを指定して直接生成する。

    主な機能:
    - 設定ファイルの自動読み込み・保存
    - デフォルト設定との統合
    - ドット区切りパスによる設定値の取得・更新
    """

    _instance = None
    _lock = threading.Lock()

    # デフォルト設定値の定義
    DEFAULT_CONFIG = {
        "STORAGE": {
            "DEVICE_FILE": "devices.txt",  # 保存・読み込みの既定ファイル名
            "ENCODING": "utf-8",  # 保存ファイルの文字コード
        },
        "DEVICE_OPTIONS": {
            "LOW_BATTERY_THRESHOLD": 20,  # バッテリー残量一覧の既定しきい値(%)
        },
        "LOGGING": {
            "LEVEL": "INFO",  # ログレベル
            "LOG_DIR": "logs",  # ログディレクトリ（プロジェクトルートからの相対パス）
            "BACKUP_COUNT": 30,  # 保持するログファイルの日数
        },
    }

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        設定管理クラスの初期化

        Args:
            config_file: 設定ファイルのパス。省略時は config/config.json
        """
        if config_file is None:
            config_dir = find_config_dir() or get_project_root() / "config"
            config_file = config_dir / "config.json"
        self.config_file = Path(config_file)
        logger.info(f"設定ファイル: {self.config_file.absolute()}")

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        設定ファイルを読み込み、存在しない場合はデフォルト設定で作成する

        Returns:
            Dict[str, Any]: デフォルト設定とマージされた設定データ
        """
        defaults = copy.deepcopy(self.DEFAULT_CONFIG)
        try:
            if self.config_file.exists():
                config = json.loads(self.config_file.read_text(encoding="utf-8"))
                return self._merge_configs(defaults, config)

            self._save_config(defaults)
            return defaults
        except (OSError, ValueError) as e:
            logger.error(f"設定読み込みエラー: {e}")
            return defaults

    def _save_config(self, config: dict) -> bool:
        """
        設定をJSON形式でファイルに保存する

        Returns:
            bool: 保存に成功した場合True、失敗した場合False
        """
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            self.config_file.write_text(
                json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8"
            )
            return True
        except OSError as e:
            logger.error(f"設定保存エラー: {e}")
            return False

    @staticmethod
    def _merge_configs(default: dict, custom: dict) -> dict:
        """
        設定辞書を再帰的にマージする（カスタム設定が優先）

        Args:
            default (dict): デフォルト設定
            custom (dict): カスタム設定

        Returns:
            dict: マージされた設定
        """
        result = default.copy()
        for key, value in custom.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = ConfigManager._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def get_config(self, path: str, default: Any = None) -> Any:
        """
        パス指定で設定値を取得する

        Args:
            path (str): ドット区切りの設定パス（例: "STORAGE.DEVICE_FILE"）
            default (Any, optional): パスが存在しない場合のデフォルト値

        Returns:
            Any: 設定値またはデフォルト値

        Example:
            >>> config_manager.get_config("DEVICE_OPTIONS.LOW_BATTERY_THRESHOLD", 20)
        """
        try:
            value = self._config
            for key in path.split("."):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def update_config(self, path: str, value: Any) -> bool:
        """
        指定された設定項目を更新し、設定ファイルに保存する

        Args:
            path (str): ドット区切りの設定パス
            value (Any): 設定する値

        Returns:
            bool: 更新と保存に成功した場合True
        """
        current = self._config
        *parts, last = path.split(".")
        for part in parts:
            current = current.setdefault(part, {})
        current[last] = value
        return self._save_config(self._config)

    @classmethod
    def get_instance(cls):
        """
        設定管理クラスのインスタンスを取得する（スレッドセーフ）

        Returns:
            ConfigManager: シングルトンインスタンス
        """
        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
        return cls._instance
