from typing import Dict
from microjathon.types import Value, type_name


class Environment:
    """Flat variable store for a single program run.

    There is exactly one scope: blocks, branches and loop bodies all read
    and write the same mapping. Reading a name that was never assigned
    yields Integer 0.
    """
    def __init__(self):
        self.values: Dict[str, Value] = {}

    def get(self, name: str) -> Value:
        return self.values.get(name, 0)

    def set(self, name: str, value: Value):
        # validates the value kind; replaces any previous value and type
        type_name(value)
        self.values[name] = value
