from datetime import datetime

import pytest

from src.application import Application
from src.iot.device_registry import DeviceRegistry
from src.utils.activity_log import ActivityLog
from src.utils.config_manager import ConfigManager


class FakeTimerService:
    """登録されたコールバックを保持し、テストから明示的に発火させるタイマー."""

    def __init__(self):
        self.scheduled = []

    def schedule(self, callback, delay_seconds):
        self.scheduled.append((callback, delay_seconds))

    def fire_all(self):
        scheduled, self.scheduled = self.scheduled, []
        for callback, _ in scheduled:
            callback()

    def shutdown(self):
        self.scheduled.clear()


class ScriptedIO:
    """あらかじめ用意した入力行を順に返し、出力を記録する入出力."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts = []
        self.output = []

    def read_line(self, prompt=""):
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)

    def write_line(self, text=""):
        self.output.append(text)

    @property
    def text(self):
        return "\n".join(self.output)


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 5, 1, 12, 30, 0)


@pytest.fixture
def activity_log(fixed_clock):
    return ActivityLog(clock=fixed_clock)


@pytest.fixture
def timer_service():
    return FakeTimerService()


@pytest.fixture
def registry(activity_log, timer_service):
    return DeviceRegistry(activity_log=activity_log, timer_service=timer_service)


@pytest.fixture
def config(tmp_path):
    return ConfigManager(tmp_path / "config" / "config.json")


@pytest.fixture
def app(config, timer_service):
    Application._instance = None
    application = Application(config=config, timer_service=timer_service)
    yield application
    Application._instance = None


@pytest.fixture
def scripted_io():
    return ScriptedIO
