"""
ロボット掃除機デバイス

運転モード（eco / turbo / silent）を持つバッテリー駆動の掃除機です。
起動時にモードに応じたバッテリーを消費し、残量が少ない場合は起動を拒否します。
"""
from typing import Dict

from src.constants.constants import BatteryLimits, DeviceKind, PowerOutcome, VacuumMode
from src.iot.device import Device
from src.iot.errors import InvalidAttributeError


def normalize_mode(mode: str) -> str:
    """モード文字列を小文字に正規化して検証.

    Raises:
        InvalidAttributeError: 空、または許可されていないモードの場合
    """
    if mode is None or not str(mode).strip():
        raise InvalidAttributeError("モードは空にできません")
    lower = str(mode).strip().lower()
    if lower not in VacuumMode.ALLOWED:
        raise InvalidAttributeError(
            f"無効なモードです: {mode}（許可: {', '.join(VacuumMode.ALLOWED)}）"
        )
    return lower


class RobotVacuum(Device):
    """ロボット掃除機.

    Attributes:
        mode (str): 運転モード（小文字で保持）
    """

    KIND = DeviceKind.VACUUM
    LABEL = "ロボット掃除機"

    def __init__(self, name: str, battery: int, mode: str):
        super().__init__(name, battery, "運転モードを切り替えられるロボット掃除機")
        self._mode = normalize_mode(mode)

        self.add_property("mode", "運転モード", lambda: self.mode)

    @property
    def mode(self) -> str:
        return self._mode

    def set_mode(self, mode: str) -> None:
        self._mode = normalize_mode(mode)

    @property
    def drain(self) -> int:
        return VacuumMode.DRAIN[self.mode]

    def turn_on(self) -> Dict:
        """起動を試みる.

        残量が20%未満なら何も消費せずに拒否します。それ以外はモードに応じた
        バッテリーを先に消費し、残量が0になった場合は起動せずに停止します。
        """
        if self.battery < BatteryLimits.VACUUM_START_MIN:
            return self._result(
                PowerOutcome.BATTERY_TOO_LOW,
                f"{self.name} を起動できません。バッテリー残量が不足しています"
                f"（{BatteryLimits.VACUUM_START_MIN}%未満）",
            )

        self.consume_battery(self.drain)

        if self.battery <= 0:
            self.powered = False
            return self._result(
                PowerOutcome.DRAINED, f"{self.name} は起動中にバッテリーが尽きました。停止します"
            )

        return super().turn_on()

    def extra_field(self) -> str:
        return self.mode

    def extra_status(self) -> str:
        return f"モード: {self.mode}"
