from src.iot.thing import Thing
from src.iot.things.lamp import SmartLamp
from src.iot.things.robot_vacuum import RobotVacuum


def test_state_json_tracks_current_values():
    vacuum = RobotVacuum("Robo", 50, "eco")
    vacuum.turn_on()
    assert vacuum.get_state_json() == {
        "name": "Robo",
        "state": {"battery": 45, "power": True, "mode": "eco"},
    }


def test_lamp_state_lists_properties_in_registration_order():
    lamp = SmartLamp("Lamp1", 50, 20)
    lamp.set_brightness(75)
    state = lamp.get_state_json()["state"]
    assert list(state) == ["battery", "power", "brightness"]
    assert state["brightness"] == 75


def test_property_getter_is_read_on_every_call():
    values = iter([1, 2])
    thing = Thing("counter", "テスト用")
    thing.add_property("value", "値", lambda: next(values))
    assert thing.get_state_json()["state"]["value"] == 1
    assert thing.get_state_json()["state"]["value"] == 2
