class DeviceKind:
    """デバイス種別タグ（保存ファイルの先頭フィールド）."""

    LAMP = "LAMP"
    VACUUM = "VACUUM"


class VacuumMode:
    """ロボット掃除機の運転モード."""

    ECO = "eco"
    TURBO = "turbo"
    SILENT = "silent"

    # 起動時に一度だけ消費されるバッテリー量
    DRAIN = {
        TURBO: 15,
        ECO: 5,
        SILENT: 3,
    }

    ALLOWED = tuple(DRAIN)


class PowerOutcome:
    """電源操作の結果."""

    TURNED_ON = "turned_on"
    ALREADY_ON = "already_on"
    BATTERY_EMPTY = "battery_empty"
    BATTERY_TOO_LOW = "battery_too_low"
    DRAINED = "drained_while_starting"
    TURNED_OFF = "turned_off"
    ALREADY_OFF = "already_off"


class BatteryLimits:
    """バッテリーと明るさの範囲."""

    MIN = 0
    MAX = 100
    # これ未満ではロボット掃除機は起動しない
    VACUUM_START_MIN = 20


class PersistenceFormat:
    """デバイス保存ファイルの書式."""

    SEPARATOR = ";"
    FIELD_COUNT = 5
    TRUE = "true"
    FALSE = "false"


class EventType:
    """イベントタイプ."""

    SCHEDULE_EVENT = "schedule_event"
