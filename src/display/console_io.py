class ConsoleIO:
    """標準入出力による1行単位の入出力.

    CLI表示はこのクラスを通してのみ端末とやり取りするため、
    テストでは同じメソッドを持つオブジェクトに差し替えられます。
    """

    def read_line(self, prompt: str = "") -> str:
        """プロンプトを表示して1行読み込む.

        Raises:
            EOFError: 入力が終了した場合
        """
        return input(prompt)

    def write_line(self, text: str = "") -> None:
        print(text, flush=True)
