"""
バッテリー駆動デバイスの共通モジュール

名前・バッテリー残量・電源状態を持つデバイスの基底クラスを提供します。
ランプやロボット掃除機などの具体的なデバイスはこのクラスを継承し、
種別タグ（KIND）と固有の属性を追加します。
"""
from abc import ABC, abstractmethod
from typing import Dict

from src.constants.constants import BatteryLimits, PowerOutcome
from src.iot.errors import InvalidAttributeError
from src.iot.thing import Thing
from src.utils.logging_config import get_logger

logger = get_logger(__name__)


def validate_percentage(value, label: str) -> int:
    """0から100の整数であることを確認して返す.

    Raises:
        InvalidAttributeError: 整数でない、または範囲外の場合
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAttributeError(f"{label}は整数で指定してください: {value!r}")
    if value < BatteryLimits.MIN or value > BatteryLimits.MAX:
        raise InvalidAttributeError(
            f"{label}は{BatteryLimits.MIN}から{BatteryLimits.MAX}の間でなければなりません"
        )
    return value


class Device(Thing, ABC):
    """バッテリー駆動デバイスの基底クラス.

    Attributes:
        KIND (str): 保存ファイルで使用する種別タグ
        LABEL (str): 状態表示で使用する種別名
        battery (int): バッテリー残量（0-100）
        powered (bool): 電源状態
    """

    KIND = None
    LABEL = "デバイス"

    def __init__(self, name: str, battery: int, description: str = ""):
        # 名前の検証はnameプロパティのセッターで行われる
        super().__init__(name, description or self.LABEL)
        self._battery = validate_percentage(battery, "バッテリー残量")
        self.powered = False

        self.add_property("battery", "バッテリー残量(%)", lambda: self.battery)
        self.add_property("power", "電源状態", lambda: self.powered)

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        if value is None or not str(value).strip():
            raise InvalidAttributeError("デバイス名は空にできません")
        self._name = str(value).strip()

    @property
    def battery(self) -> int:
        return self._battery

    @battery.setter
    def battery(self, value: int) -> None:
        self._battery = validate_percentage(value, "バッテリー残量")

    def consume_battery(self, amount: int) -> None:
        """バッテリーを消費する。0未満にはならない."""
        if amount < 0:
            return
        self._battery = max(BatteryLimits.MIN, self._battery - amount)

    def charge_by(self, amount: int) -> Dict:
        """バッテリーを充電する。100を超えない.

        Returns:
            dict: 充電後の残量を含む結果
        """
        if amount >= 0:
            self._battery = min(BatteryLimits.MAX, self._battery + amount)
        return {"status": "success", "message": f"{self.name} のバッテリー: {self.battery}%"}

    def turn_on(self) -> Dict:
        """電源をオンにする.

        Returns:
            dict: ``status`` に PowerOutcome の値、``message`` に表示用メッセージ
        """
        if self.powered:
            return self._result(PowerOutcome.ALREADY_ON, f"{self.name} は既にONです")
        if self.battery <= 0:
            return self._result(
                PowerOutcome.BATTERY_EMPTY, f"{self.name} をONにできません。バッテリーが空です"
            )
        self.powered = True
        return self._result(PowerOutcome.TURNED_ON, f"{self.name} をONにしました")

    def turn_off(self) -> Dict:
        """電源をオフにする."""
        if not self.powered:
            return self._result(PowerOutcome.ALREADY_OFF, f"{self.name} は既にOFFです")
        self.powered = False
        return self._result(PowerOutcome.TURNED_OFF, f"{self.name} をOFFにしました")

    @abstractmethod
    def extra_field(self) -> str:
        """保存ファイルの5番目のフィールド."""

    @abstractmethod
    def extra_status(self) -> str:
        """状態表示の末尾に付ける固有属性."""

    def describe(self) -> str:
        return (
            f"[{self.LABEL}] {self.name}"
            f" - バッテリー: {self.battery}%"
            f", 状態: {'ON' if self.powered else 'OFF'}"
            f", {self.extra_status()}"
        )

    def _result(self, outcome: str, message: str) -> Dict:
        logger.debug("%s: %s", outcome, message)
        return {"status": outcome, "message": message}

    def __repr__(self):
        return (
            f"{self.__class__.__name__}(name={self.name!r}, battery={self.battery}, "
            f"powered={self.powered})"
        )
