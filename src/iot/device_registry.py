"""
デバイス管理モジュール

登録されたデバイスを追加順に保持し、名前検索・一括電源操作・バッテリー残量の
絞り込み・状態のJSON出力・保存ファイルの読み書き・電源OFFの予約を提供します。

保存ファイルは1行1デバイスの ``KIND;name;battery;powered;extra`` 形式です。
"""
import json
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from src.constants.constants import DeviceKind, PersistenceFormat
from src.iot.device import Device
from src.iot.errors import (
    CorruptDataError,
    InvalidAttributeError,
    ResourceUnavailableError,
)
from src.iot.things.lamp import SmartLamp
from src.iot.things.robot_vacuum import RobotVacuum
from src.utils.activity_log import ActivityLog
from src.utils.logging_config import get_logger
from src.utils.timer_service import TimerService

logger = get_logger(__name__)


# 符号付きのASCII数字のみ（空白や "_" 区切りは不可）
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def _parse_integer(token: str) -> Optional[int]:
    if not _INTEGER_PATTERN.fullmatch(token):
        return None
    return int(token)


def _build_lamp(name: str, battery: int, extra: str) -> Device:
    brightness = _parse_integer(extra)
    if brightness is None:
        raise InvalidAttributeError(f"明るさが整数ではありません: {extra!r}")
    return SmartLamp(name, battery, brightness)


def _build_vacuum(name: str, battery: int, extra: str) -> Device:
    return RobotVacuum(name, battery, extra)


# 種別タグ -> 保存ファイルの行からデバイスを組み立てる関数
DEVICE_KINDS: Dict[str, Callable[[str, int, str], Device]] = {
    DeviceKind.LAMP: _build_lamp,
    DeviceKind.VACUUM: _build_vacuum,
}


def _parse_battery(token: str, line_number: int) -> int:
    battery = _parse_integer(token)
    if battery is None:
        raise CorruptDataError(f"バッテリー残量が整数ではありません: {token!r}", line_number)
    if battery < 0 or battery > 100:
        raise CorruptDataError(f"バッテリー残量が範囲外です: {battery}", line_number)
    return battery


def _parse_powered(token: str, line_number: int) -> bool:
    lower = token.strip().lower()
    if lower == PersistenceFormat.TRUE:
        return True
    if lower == PersistenceFormat.FALSE:
        return False
    raise CorruptDataError(f"電源状態が true/false ではありません: {token!r}", line_number)


def _file_mode_for(path: Path) -> int:
    """保存先の権限を返す。新規ファイルの場合はumaskを適用した既定値."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class DeviceRegistry:
    """デバイス管理クラス.

    デバイスは追加順に保持され、表示や保存もその順序で行われます。
    同名のデバイスの追加は拒否せず、名前検索では最初に見つかったものを返します。
    """

    def __init__(
        self,
        activity_log: Optional[ActivityLog] = None,
        timer_service: Optional[TimerService] = None,
        dispatcher: Optional[Callable[[Callable[[], None]], None]] = None,
    ):
        """
        Args:
            activity_log: 操作履歴の記録先
            timer_service: 電源OFF予約に使う遅延実行サービス
            dispatcher: タイマー発火時の処理を実行コンテキストへ渡す関数。
                省略時はタイマーのスレッドで直接実行される
        """
        self.devices: List[Device] = []
        self.activity_log = activity_log if activity_log is not None else ActivityLog()
        self.timer_service = timer_service if timer_service is not None else TimerService()
        self.dispatcher = dispatcher

    def __len__(self):
        return len(self.devices)

    def __iter__(self):
        return iter(list(self.devices))

    def add(self, device: Device) -> None:
        self.devices.append(device)
        self.activity_log.append(f"デバイスを追加しました: {device.describe()}")

    def clear(self) -> None:
        self.devices.clear()

    def find_by_name(self, name: str) -> Optional[Device]:
        """名前でデバイスを検索（大文字小文字を区別しない）.

        Returns:
            Optional[Device]: 最初に一致したデバイス、なければ None
        """
        if name is None:
            return None
        target = name.strip().lower()
        for device in self.devices:
            if device.name.lower() == target:
                return device
        return None

    def turn_all_on(self) -> List[Dict]:
        results = []
        for device in list(self.devices):
            results.append(device.turn_on())
            self.activity_log.append(f"電源ONを要求しました: {device.name}")
        return results

    def turn_all_off(self) -> List[Dict]:
        results = []
        for device in list(self.devices):
            results.append(device.turn_off())
            self.activity_log.append(f"電源OFFを要求しました: {device.name}")
        return results

    def low_battery(self, threshold: int) -> List[Device]:
        """バッテリー残量がしきい値以下のデバイスを追加順で返す."""
        return [device for device in self.devices if device.battery <= threshold]

    # ========== 保存ファイル ==========

    def serialize(self) -> str:
        """全デバイスを保存ファイル形式の文字列に変換.

        種別タグを持たないデバイスは出力されません。
        """
        sep = PersistenceFormat.SEPARATOR
        lines = []
        for device in self.devices:
            if device.KIND not in DEVICE_KINDS:
                logger.warning("保存対象外の種別をスキップ: %s", device.__class__.__name__)
                continue
            powered = PersistenceFormat.TRUE if device.powered else PersistenceFormat.FALSE
            lines.append(
                sep.join(
                    [
                        device.KIND,
                        device.name,
                        str(device.battery),
                        powered,
                        device.extra_field(),
                    ]
                )
            )
        return "".join(line + "\n" for line in lines)

    def deserialize(self, text: str) -> int:
        """保存ファイル形式の文字列から全デバイスを置き換える.

        既存のデバイスは解析の成否に関わらず先に削除されます。解析に失敗した場合、
        それまでに読み込んだデバイスも破棄され、登録は空のままになります。
        電源ONで保存されていたデバイスは ``turn_on()`` をやり直すため、
        起動条件を満たさない場合はOFFのまま読み込まれます。

        Returns:
            int: 読み込んだデバイス数

        Raises:
            CorruptDataError: 数値・真偽値・固有属性を解析できない行がある場合
        """
        self.clear()
        loaded = []
        for line_number, line in enumerate(text.splitlines(), start=1):
            parts = line.split(PersistenceFormat.SEPARATOR)
            if len(parts) < PersistenceFormat.FIELD_COUNT:
                continue

            kind, name, battery_token, powered_token, extra = parts[:5]
            builder = DEVICE_KINDS.get(kind.strip().upper())
            if builder is None:
                logger.info("%d行目: 未知の種別をスキップ: %s", line_number, kind)
                continue

            battery = _parse_battery(battery_token, line_number)
            powered = _parse_powered(powered_token, line_number)
            try:
                device = builder(name, battery, extra)
            except InvalidAttributeError as e:
                raise CorruptDataError(str(e), line_number) from e

            if powered:
                result = device.turn_on()
                logger.debug("%d行目: %s", line_number, result["message"])
            loaded.append(device)

        self.devices.extend(loaded)
        return len(loaded)

    def save_to_file(self, path: Union[str, Path], encoding: str = "utf-8") -> Path:
        """全デバイスをファイルに保存（既存ファイルは上書き）.

        一時ファイルに書き込んでから置き換えるため、途中で失敗しても
        既存ファイルが中途半端な内容になることはありません。

        Raises:
            ResourceUnavailableError: 書き込めない場合
        """
        path = Path(path)
        data = self.serialize()
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
            with os.fdopen(fd, "w", encoding=encoding, newline="\n") as f:
                f.write(data)
            os.chmod(tmp_name, _file_mode_for(path))
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("保存エラー: %s", e)
            raise ResourceUnavailableError(path, e) from e

        self.activity_log.append(f"デバイスをファイルに保存しました: {path}")
        return path

    def load_from_file(self, path: Union[str, Path], encoding: str = "utf-8") -> int:
        """ファイルから全デバイスを読み込む.

        ファイルが読めない場合も既存のデバイスは削除されます。

        Returns:
            int: 読み込んだデバイス数

        Raises:
            ResourceUnavailableError: ファイルが存在しない、または読めない場合
            CorruptDataError: 内容を解析できない場合
        """
        path = Path(path)
        self.clear()
        try:
            text = path.read_text(encoding=encoding)
        except OSError as e:
            logger.error("読み込みエラー: %s", e)
            raise ResourceUnavailableError(path, e) from e
        except UnicodeDecodeError as e:
            raise CorruptDataError(f"文字コードを解釈できません: {e}") from e

        count = self.deserialize(text)
        self.activity_log.append(f"デバイスをファイルから読み込みました: {path}")
        return count

    # ========== 電源OFF予約 ==========

    def schedule_turn_off(self, device: Device, delay_seconds: int) -> None:
        """``delay_seconds`` 秒後にデバイスの電源をOFFにするよう予約.

        予約の取り消しはできません。同じデバイスへの複数の予約はそれぞれ実行されます。

        Raises:
            InvalidAttributeError: 遅延秒数が負の場合
        """
        if delay_seconds < 0:
            raise InvalidAttributeError("遅延秒数は0以上でなければなりません")

        def fire():
            device.turn_off()
            self.activity_log.append(f"予約された電源OFFを実行しました: {device.name}")

        def on_timer():
            if self.dispatcher is not None:
                self.dispatcher(fire)
            else:
                fire()

        self.timer_service.schedule(on_timer, delay_seconds)
        self.activity_log.append(
            f"電源OFFを予約しました: {device.name}（{delay_seconds}秒後）"
        )

    # ========== 状態JSON ==========

    def get_states_json(self) -> str:
        """全デバイスの状態をJSON配列の文字列で取得."""
        states = [device.get_state_json() for device in self.devices]
        return json.dumps(states, ensure_ascii=False)
