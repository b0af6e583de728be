"""Binding configuration: keyboard keys, per-player controls and loading from JSON."""

from __future__ import annotations

import argparse
import json
from dataclasses import dataclass, field
from typing import Any

DEFAULT_FILE = "bindings.json"
DEFAULT_NAME = "Wonderful World"
DIRECTION_NAMES = ("Up", "Down", "Left", "Right")


class ConfigError(ValueError):
    """Raised when a configuration document is malformed."""


@dataclass(frozen=True)
class Key:
    """A keyboard key: a named key such as ``Escape`` or ``Unicode`` with its character."""

    name: str
    value: str | int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ConfigError(f"invalid key name: {self.name!r}")
        if self.name == "Unicode" and not (
            isinstance(self.value, str) and len(self.value) == 1
        ):
            raise ConfigError(f"Unicode key needs a single character, got {self.value!r}")

    @classmethod
    def from_json(cls, value: Any) -> Key:
        """Build a key from its JSON form: ``"Escape"`` or ``{"Unicode": "a"}``."""
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, dict) and len(value) == 1:
            ((name, payload),) = value.items()
            if isinstance(payload, (str, int)) and not isinstance(payload, bool):
                return cls(name, payload)
        raise ConfigError(f"invalid key: {value!r}")

    def to_json(self) -> str | dict[str, str | int]:
        """Return the JSON form of the key."""
        if self.value is None:
            return self.name
        return {self.name: self.value}

    def __str__(self) -> str:
        return self.name if self.value is None else f"{self.name}({self.value})"


@dataclass
class Controls:
    """The keys one player uses: one per direction and an ordered list of actions."""

    directions: dict[str, Key] = field(default_factory=dict)
    actions: list[tuple[str, Key]] = field(default_factory=list)


@dataclass
class Config:
    """A named set of controls, one entry per player."""

    name: str
    controls: list[Controls] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> Config:
        """Build a configuration from a parsed JSON document."""
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a JSON object")
        name = data.get("name")
        if not isinstance(name, str):
            raise ConfigError("configuration needs a string 'name'")
        raw_controls = data.get("controls")
        if not isinstance(raw_controls, list):
            raise ConfigError("configuration needs a list 'controls'")
        return cls(name=name, controls=[_controls_from_json(c) for c in raw_controls])

    def to_json(self) -> dict[str, Any]:
        """Return the configuration as a JSON-compatible document."""
        return {
            "name": self.name,
            "controls": [
                {
                    "directions": {d: k.to_json() for d, k in c.directions.items()},
                    "actions": [[a, k.to_json()] for a, k in c.actions],
                }
                for c in self.controls
            ],
        }


def _controls_from_json(data: Any) -> Controls:
    if not isinstance(data, dict):
        raise ConfigError("each controls entry must be a JSON object")
    directions = data.get("directions")
    actions = data.get("actions")
    if not isinstance(directions, dict):
        raise ConfigError("controls need an object 'directions'")
    if not isinstance(actions, list):
        raise ConfigError("controls need a list 'actions'")
    parsed_actions = []
    for entry in actions:
        if not (isinstance(entry, list) and len(entry) == 2 and isinstance(entry[0], str)):
            raise ConfigError(f"invalid action entry: {entry!r}")
        parsed_actions.append((entry[0], Key.from_json(entry[1])))
    return Controls(
        directions={str(d): Key.from_json(k) for d, k in directions.items()},
        actions=parsed_actions,
    )


def default_config() -> Config:
    """Return the built-in two-player configuration."""
    letter = lambda c: Key("Unicode", c)  # noqa: E731
    escape = Key("Escape")
    p1 = Controls(
        directions={
            "Up": letter("t"),
            "Down": letter("b"),
            "Left": letter("f"),
            "Right": letter("h"),
        },
        actions=[
            ("Punch", letter("a")),
            ("Kick", letter("s")),
            ("Slash", letter("d")),
            ("Heavy Slash", letter("q")),
            ("Original Action", letter("w")),
            ("Special Action", letter("e")),
            ("Pause", escape),
        ],
    )
    p2 = Controls(
        directions={
            "Up": Key("Numpad8"),
            "Down": Key("Numpad2"),
            "Left": Key("Numpad4"),
            "Right": Key("Numpad6"),
        },
        actions=[
            ("Punch", letter("j")),
            ("Kick", letter("k")),
            ("Slash", letter("l")),
            ("Heavy Slash", letter("i")),
            ("Original Action", letter("o")),
            ("Special Action", letter("p")),
            ("Pause", escape),
        ],
    )
    return Config(name=DEFAULT_NAME, controls=[p1, p2])


def load_config(filename: str) -> Config:
    """Load a configuration file, falling back to the default when it cannot be opened."""
    try:
        handle = open(filename, encoding="utf-8")
    except OSError:
        print(f"Configuration file not loaded, defaulting to {DEFAULT_NAME}.")
        config = default_config()
    else:
        with handle:
            try:
                data = json.load(handle)
            except ValueError as exc:
                raise ConfigError(f"{filename}: {exc}") from exc
        config = Config.from_json(data)
    print(f"Loaded configuration for {config.name}.")
    return config


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse the command line."""
    parser = argparse.ArgumentParser(
        prog="buttonbinds",
        description=(
            "a program to quickly bind gamepad controls for offline multiplayer "
            "of games with no / bad controller support"
        ),
    )
    parser.add_argument("--version", "-V", action="version", version="%(prog)s 1.2.0")
    parser.add_argument("-d", "--debug", action="store_true", help="Output all events")
    parser.add_argument("-f", "--file", default=DEFAULT_FILE)
    return parser.parse_args(argv)