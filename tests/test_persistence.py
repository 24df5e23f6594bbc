import os
import stat

import pytest

from src.iot.device import Device
from src.iot.errors import CorruptDataError, ResourceUnavailableError
from src.iot.things.lamp import SmartLamp
from src.iot.things.robot_vacuum import RobotVacuum


def _fields(device):
    return (type(device), device.name, device.battery, device.extra_field())


def test_serialize_format(registry):
    lamp = SmartLamp("Lamp1", 80, 40)
    lamp.turn_on()
    registry.add(lamp)
    registry.add(RobotVacuum("Robo", 60, "Turbo"))

    assert registry.serialize() == "LAMP;Lamp1;80;true;40\nVACUUM;Robo;60;false;turbo\n"


def test_serialize_skips_unknown_kinds(registry):
    class Thermostat(Device):
        KIND = "THERMOSTAT"

        def extra_field(self):
            return "21"

        def extra_status(self):
            return "温度: 21"

    registry.add(Thermostat("Heat", 50))
    registry.add(SmartLamp("Lamp1", 80, 40))
    assert registry.serialize() == "LAMP;Lamp1;80;false;40\n"


def test_round_trip_preserves_fields(registry):
    devices = [
        SmartLamp("Lamp1", 80, 40),
        RobotVacuum("Robo", 60, "silent"),
        SmartLamp("Lamp2", 0, 100),
    ]
    for device in devices:
        registry.add(device)
    text = registry.serialize()

    registry.deserialize(text)

    assert [_fields(d) for d in registry] == [_fields(d) for d in devices]


def test_round_trip_low_battery_vacuum_loads_off(registry):
    vacuum = RobotVacuum("Robo", 50, "eco")
    vacuum.turn_on()
    vacuum.battery = 10
    registry.add(vacuum)

    registry.deserialize(registry.serialize())

    loaded = registry.find_by_name("Robo")
    assert loaded is not vacuum
    assert loaded.battery == 10
    assert not loaded.powered


def test_powered_vacuum_drains_again_on_load(registry):
    registry.deserialize("vacuum;Robo;40;TRUE;TURBO\n")
    loaded = registry.find_by_name("robo")
    assert loaded.powered
    assert loaded.battery == 25
    assert loaded.mode == "turbo"


def test_unknown_kind_and_short_lines_are_skipped(registry):
    text = "\n".join(
        [
            "THERMOSTAT;Heat;abc;maybe;21",
            "LAMP;Short;50",
            "",
            "lamp;Lamp1;80;false;40",
        ]
    )
    assert registry.deserialize(text) == 1
    assert [d.name for d in registry] == ["Lamp1"]


def test_deserialize_clears_existing_devices(registry):
    registry.add(SmartLamp("Old", 10, 10))
    registry.deserialize("VACUUM;New;90;false;eco\n")
    assert [d.name for d in registry] == ["New"]


@pytest.mark.parametrize(
    "line",
    [
        "LAMP;Lamp1;eighty;false;40",
        "LAMP;Lamp1;101;false;40",
        "LAMP;Lamp1;80;yes;40",
        "LAMP;Lamp1;80;false;bright",
        "LAMP;Lamp1;80;false;140",
        "VACUUM;Robo;80;false;hyper",
        "LAMP; ;80;false;40",
        "LAMP;Lamp1;1_0;false;40",
        "LAMP;Lamp1; 10;false;40",
        "LAMP;Lamp1;80;false;4_0",
        "LAMP;Lamp1;80;false; 40",
    ],
)
def test_corrupt_line_aborts_and_leaves_registry_empty(registry, line):
    registry.add(SmartLamp("Old", 10, 10))
    text = "LAMP;Good;50;false;10\n" + line + "\nLAMP;After;50;false;10\n"

    with pytest.raises(CorruptDataError) as excinfo:
        registry.deserialize(text)

    assert excinfo.value.line_number == 2
    assert len(registry) == 0


def test_save_and_load_file(registry, activity_log, tmp_path):
    path = tmp_path / "devices.txt"
    registry.add(SmartLamp("Lamp1", 80, 40))
    registry.add(RobotVacuum("Robo", 60, "eco"))

    registry.save_to_file(path)
    assert path.read_text(encoding="utf-8") == registry.serialize()

    registry.add(SmartLamp("Extra", 1, 1))
    assert registry.load_from_file(path) == 2
    assert [d.name for d in registry] == ["Lamp1", "Robo"]
    assert "デバイスをファイルから読み込みました" in activity_log.entries()[-1]


def test_save_overwrites_existing_file(registry, tmp_path):
    path = tmp_path / "devices.txt"
    path.write_text("LAMP;Stale;1;false;1\nLAMP;Stale2;1;false;1\n", encoding="utf-8")
    registry.add(SmartLamp("Fresh", 10, 10))

    registry.save_to_file(path)

    assert path.read_text(encoding="utf-8") == "LAMP;Fresh;10;false;10\n"
    assert [p.name for p in tmp_path.iterdir()] == ["devices.txt"]


def test_load_missing_file_clears_registry(registry, tmp_path):
    registry.add(SmartLamp("Old", 10, 10))
    with pytest.raises(ResourceUnavailableError):
        registry.load_from_file(tmp_path / "missing.txt")
    assert len(registry) == 0


def test_save_to_missing_directory_fails(registry, tmp_path):
    registry.add(SmartLamp("Lamp1", 10, 10))
    with pytest.raises(ResourceUnavailableError):
        registry.save_to_file(tmp_path / "no" / "such" / "devices.txt")


def test_signed_integers_are_accepted(registry):
    registry.deserialize("LAMP;Lamp1;+80;false;+40\n")
    lamp = registry.find_by_name("Lamp1")
    assert (lamp.battery, lamp.brightness) == (80, 40)


posix_only = pytest.mark.skipif(os.name != "posix", reason="POSIXのファイル権限が必要")


@posix_only
def test_save_keeps_existing_file_mode(registry, tmp_path):
    path = tmp_path / "devices.txt"
    path.write_text("", encoding="utf-8")
    os.chmod(path, 0o640)
    registry.add(SmartLamp("Lamp1", 10, 10))

    registry.save_to_file(path)

    assert stat.S_IMODE(os.stat(path).st_mode) == 0o640


@posix_only
def test_save_new_file_follows_umask(registry, tmp_path):
    path = tmp_path / "devices.txt"
    registry.add(SmartLamp("Lamp1", 10, 10))
    previous = os.umask(0o022)
    try:
        registry.save_to_file(path)
    finally:
        os.umask(previous)

    assert stat.S_IMODE(os.stat(path).st_mode) == 0o644
