import logging
from abc import ABC, abstractmethod


class BaseDisplay(ABC):
    """ディスプレイインターフェースの抽象基底クラス.

    異なる表示実装（現在はCLIのみ）の共通インターフェースを定義します。
    表示側はアプリケーションの操作を呼び出し、その結果を利用者に示すだけで、
    デバイスの状態を直接保持しません。
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.running = False

    @abstractmethod
    def start(self):
        """表示を開始し、終了まで操作を受け付けます."""

    @abstractmethod
    def on_close(self):
        """表示を閉じます."""

    @abstractmethod
    def show_message(self, text: str):
        """利用者にメッセージを表示します.

        Args:
            text: 表示するテキスト
        """
