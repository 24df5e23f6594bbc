from typing import Callable, Dict, Optional

from src.display.base_display import BaseDisplay
from src.display.console_io import ConsoleIO
from src.iot.errors import CorruptDataError, InvalidAttributeError, ResourceUnavailableError
from src.iot.things.lamp import SmartLamp
from src.iot.things.robot_vacuum import RobotVacuum
from src.utils.logging_config import get_logger

MENU_ITEMS = [
    (1, "デバイスを追加"),
    (2, "すべてのデバイスをON"),
    (3, "すべてのデバイスをOFF"),
    (4, "すべてのデバイスの状態を表示"),
    (5, "名前でデバイスを検索"),
    (6, "ランプの明るさを変更"),
    (7, "ロボット掃除機のモードを変更"),
    (8, "バッテリー残量の少ないデバイスを表示"),
    (9, "デバイスをファイルに保存"),
    (10, "デバイスをファイルから読み込み"),
    (11, "デバイスの電源OFFを予約"),
    (12, "操作履歴を表示"),
    (13, "デバイスを充電"),
    (14, "デバイスの状態をJSONで表示"),
    (0, "終了"),
]


class CliDisplay(BaseDisplay):
    def __init__(self, app, io: Optional[ConsoleIO] = None):
        """CLIディスプレイを初期化.

        Args:
            app: デバイス管理・操作履歴・設定を持つアプリケーション
            io: 入出力。省略時は標準入出力
        """
        super().__init__()
        self.logger = get_logger(__name__)
        self.app = app
        self.io = io or ConsoleIO()

        self.commands: Dict[int, Callable[[], None]] = {
            1: self._add_device,
            2: self._turn_all_on,
            3: self._turn_all_off,
            4: self._print_statuses,
            5: self._search_device,
            6: self._change_brightness,
            7: self._change_mode,
            8: self._print_low_battery,
            9: self._save_devices,
            10: self._load_devices,
            11: self._schedule_turn_off,
            12: self._print_logs,
            13: self._charge_device,
            14: self._print_states_json,
            0: self.on_close,
        }

    @property
    def registry(self):
        return self.app.registry

    @property
    def activity_log(self):
        return self.app.activity_log

    def start(self):
        """CLIディスプレイを開始."""
        self.running = True
        try:
            while self.running:
                # 予約タスクはコマンドの合間にこのスレッドで実行する
                self.app.process_scheduled_tasks()
                self._print_menu()
                choice = self._read_int("選択: ")
                # 入力待ちの間に発火した予約もコマンドの前に反映する
                self.app.process_scheduled_tasks()
                self.handle_choice(choice)
        except (EOFError, KeyboardInterrupt):
            self.show_message("")
            self.on_close()

    def on_close(self):
        """CLIディスプレイを閉じる."""
        if self.running:
            self.show_message("スマートホームを終了します。さようなら！")
        self.running = False

    def show_message(self, text: str):
        self.io.write_line(text)

    def handle_choice(self, choice: int) -> None:
        """メニュー番号に対応するコマンドを実行.

        コマンド内のエラーはここで表示し、メニューには戻り続けます。
        """
        command = self.commands.get(choice)
        if command is None:
            self.show_message("無効な選択です。もう一度入力してください")
            return
        try:
            command()
        except (InvalidAttributeError, CorruptDataError, ResourceUnavailableError) as e:
            self.logger.warning("コマンド %s が失敗: %s", choice, e)
            self.show_message(f"エラー: {e}")

    def _print_menu(self):
        self.show_message("\n===== スマートホーム メニュー =====")
        for number, label in MENU_ITEMS:
            self.show_message(f"{number} - {label}")

    # ========== 入力補助 ==========

    def _read_int(self, prompt: str, default: Optional[int] = None) -> int:
        """整数が入力されるまで繰り返し読み込む（空行は既定値）."""
        while True:
            line = self.io.read_line(prompt).strip()
            if not line and default is not None:
                return default
            try:
                return int(line)
            except ValueError:
                self.show_message("有効な整数を入力してください")

    def _read_non_empty_line(self, prompt: str, default: Optional[str] = None) -> str:
        """空でない行が入力されるまで繰り返し読み込む（空行は既定値）."""
        while True:
            line = self.io.read_line(prompt).strip()
            if line:
                return line
            if default is not None:
                return default
            self.show_message("入力は空にできません")

    def _find_device(self, prompt: str):
        name = self._read_non_empty_line(prompt)
        return self.registry.find_by_name(name)

    # ========== コマンド ==========

    def _add_device(self):
        self.show_message("\nデバイスの種類: 1-ランプ, 2-ロボット掃除機")
        device_type = self._read_int("種類: ")
        if device_type not in (1, 2):
            self.show_message("不明なデバイスの種類です")
            return

        name = self._read_non_empty_line("デバイス名: ")
        battery = self._read_int("バッテリー残量 (0-100): ")
        try:
            if device_type == 1:
                brightness = self._read_int("明るさ (0-100): ")
                device = SmartLamp(name, battery, brightness)
            else:
                mode = self._read_non_empty_line("モード (eco/turbo/silent): ")
                device = RobotVacuum(name, battery, mode)
        except InvalidAttributeError as e:
            self.show_message(f"デバイスの作成中にエラー: {e}")
            return

        self.registry.add(device)
        self.show_message(f"追加しました: {device.describe()}")

    def _show_results(self, results):
        if not results:
            self.show_message("デバイスがまだ登録されていません")
        for result in results:
            self.show_message(result["message"])

    def _turn_all_on(self):
        self._show_results(self.registry.turn_all_on())

    def _turn_all_off(self):
        self._show_results(self.registry.turn_all_off())

    def _print_statuses(self):
        self.show_message("\n===== デバイスの状態 =====")
        if not len(self.registry):
            self.show_message("デバイスがまだ登録されていません")
            return
        for device in self.registry:
            self.show_message(device.describe())

    def _search_device(self):
        device = self._find_device("検索するデバイス名: ")
        if device is None:
            self.show_message("この名前のデバイスは見つかりません")
        else:
            self.show_message(f"見つかりました: {device.describe()}")

    def _change_brightness(self):
        device = self._find_device("ランプ名: ")
        if not isinstance(device, SmartLamp):
            self.show_message("ランプが見つからないか、ランプではありません")
            return
        value = self._read_int("新しい明るさ (0-100): ")
        device.set_brightness(value)
        self.activity_log.append(f"明るさを更新しました: {device.name} -> {value}")
        self.show_message("明るさを更新しました")

    def _change_mode(self):
        device = self._find_device("ロボット掃除機名: ")
        if not isinstance(device, RobotVacuum):
            self.show_message("ロボット掃除機が見つからないか、ロボット掃除機ではありません")
            return
        mode = self._read_non_empty_line("新しいモード (eco/turbo/silent): ")
        device.set_mode(mode)
        self.activity_log.append(f"モードを更新しました: {device.name} -> {device.mode}")
        self.show_message("モードを更新しました")

    def _print_low_battery(self):
        default = self.app.config.get_config("DEVICE_OPTIONS.LOW_BATTERY_THRESHOLD", 20)
        threshold = self._read_int(f"しきい値 (既定: {default}): ", default)
        self.show_message(f"\n===== バッテリー残量の少ないデバイス (<= {threshold}%) =====")
        devices = self.registry.low_battery(threshold)
        if not devices:
            self.show_message("バッテリー残量の少ないデバイスはありません")
        for device in devices:
            self.show_message(device.describe())

    def _storage_options(self, prompt: str):
        default = self.app.config.get_config("STORAGE.DEVICE_FILE", "devices.txt")
        encoding = self.app.config.get_config("STORAGE.ENCODING", "utf-8")
        path = self._read_non_empty_line(f"{prompt} (既定: {default}): ", default)
        return path, encoding

    def _save_devices(self):
        path, encoding = self._storage_options("保存するファイル名")
        try:
            self.registry.save_to_file(path, encoding)
        except ResourceUnavailableError as e:
            self.show_message(f"保存中にエラー: {e}")
            return
        self.show_message(f"{path} に保存しました")

    def _load_devices(self):
        path, encoding = self._storage_options("読み込むファイル名")
        try:
            count = self.registry.load_from_file(path, encoding)
        except ResourceUnavailableError as e:
            self.show_message(f"ファイルを読み込めません: {e}")
            return
        except CorruptDataError as e:
            self.show_message(f"読み込み中にエラー（デバイス一覧は空になりました）: {e}")
            return
        self.show_message(f"{path} から{count}台のデバイスを読み込みました")

    def _schedule_turn_off(self):
        device = self._find_device("電源OFFを予約するデバイス名: ")
        if device is None:
            self.show_message("デバイスが見つかりません")
            return
        seconds = self._read_int("何秒後にOFFにしますか？ ")
        self.registry.schedule_turn_off(device, seconds)
        self.show_message(f"{device.name} を{seconds}秒後にOFFにします")

    def _print_logs(self):
        self.show_message("\n===== 操作履歴 =====")
        self.show_message(self.activity_log.dump())

    def _charge_device(self):
        device = self._find_device("充電するデバイス名: ")
        if device is None:
            self.show_message("デバイスが見つかりません")
            return
        amount = self._read_int("充電量 (%): ")
        if amount < 0:
            self.show_message("充電量は0以上で指定してください。充電しませんでした")
            return
        result = device.charge_by(amount)
        self.activity_log.append(f"充電しました: {device.name} +{amount}%")
        self.show_message(result["message"])

    def _print_states_json(self):
        self.show_message(self.registry.get_states_json())
