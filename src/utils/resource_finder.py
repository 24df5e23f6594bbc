"""
リソースパス解決モジュール

プロジェクトルートと設定ディレクトリの場所を解決します。
"""
from pathlib import Path
from typing import Optional


def get_project_root() -> Path:
    """プロジェクトルート（main.py のあるディレクトリ）を取得."""
    return Path(__file__).resolve().parents[2]


def find_config_dir() -> Optional[Path]:
    """既存の config ディレクトリを探す.

    カレントディレクトリ、プロジェクトルートの順に探索します。

    Returns:
        Optional[Path]: 見つかったディレクトリ、なければ None
    """
    for base in (Path.cwd(), get_project_root()):
        candidate = base / "config"
        if candidate.is_dir():
            return candidate
    return None
