"""
デバイス管理で使用する例外

いずれもコマンド単位で捕捉され、メッセージとして表示されます。
プロセスを終了させることはありません。
"""
from typing import Optional


class InvalidAttributeError(ValueError):
    """名前・バッテリー・明るさ・モードなどの値が不正な場合に送出."""


class CorruptDataError(ValueError):
    """保存ファイルの行を解析できない場合に送出.

    Attributes:
        line_number: 問題のある行番号（1始まり）
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"{line_number}行目: {message}"
        super().__init__(message)
        self.line_number = line_number


class ResourceUnavailableError(OSError):
    """保存ファイルの読み書きができない場合に送出."""

    def __init__(self, path, cause: Optional[OSError] = None):
        reason = cause.strerror if cause is not None and cause.strerror else cause
        super().__init__(f"ファイルにアクセスできません: {path} ({reason})")
        self.path = path
        self.cause = cause
