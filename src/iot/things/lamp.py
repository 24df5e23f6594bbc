"""
スマートランプデバイス

バッテリー駆動のランプを表すデバイスです。
電源のオン/オフに加えて、0から100の明るさを設定できます。
"""
from src.constants.constants import DeviceKind
from src.iot.device import Device, validate_percentage


class SmartLamp(Device):
    """スマートランプ.

    Attributes:
        brightness (int): 明るさ（0-100）
    """

    KIND = DeviceKind.LAMP
    LABEL = "ランプ"

    def __init__(self, name: str, battery: int, brightness: int):
        super().__init__(name, battery, "明るさを調整できるスマートランプ")
        self._brightness = validate_percentage(brightness, "明るさ")

        self.add_property("brightness", "明るさ(0-100)", lambda: self.brightness)

    @property
    def brightness(self) -> int:
        return self._brightness

    def set_brightness(self, value: int) -> None:
        self._brightness = validate_percentage(value, "明るさ")

    def extra_field(self) -> str:
        return str(self.brightness)

    def extra_status(self) -> str:
        return f"明るさ: {self.brightness}"
