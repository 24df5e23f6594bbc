from typing import Any, Callable, Dict


class Property:
    """デバイスの状態を表すプロパティ."""

    def __init__(self, name: str, description: str, getter: Callable[[], Any]):
        self.name = name
        self.description = description
        self.getter = getter

    def get_state_value(self) -> Any:
        return self.getter()


class Thing:
    """プロパティを公開するデバイスの基底クラス.

    サブクラスは ``add_property`` で自身の状態を登録し、
    状態JSONを共通の形式で提供します。
    """

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.properties: Dict[str, Property] = {}

    def add_property(self, name: str, description: str, getter: Callable) -> None:
        self.properties[name] = Property(name, description, getter)

    def get_state_json(self) -> Dict:
        return {
            "name": self.name,
            "state": {
                name: prop.get_state_value() for name, prop in self.properties.items()
            },
        }
