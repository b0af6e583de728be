"""Controller inputs, per-player key bindings and analog-to-digital tracking."""

from __future__ import annotations

import enum
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Protocol

from buttonbinds.config import Key

AXIS_MAX = 32767
ENGAGE_THRESHOLD = AXIS_MAX // 2


class Axis(enum.Enum):
    """Game controller axes."""

    LEFT_X = 0
    LEFT_Y = 1
    RIGHT_X = 2
    RIGHT_Y = 3
    TRIGGER_LEFT = 4
    TRIGGER_RIGHT = 5


class Button(enum.Enum):
    """Game controller buttons."""

    A = 0
    B = 1
    X = 2
    Y = 3
    BACK = 4
    GUIDE = 5
    START = 6
    LEFT_STICK = 7
    RIGHT_STICK = 8
    LEFT_SHOULDER = 9
    RIGHT_SHOULDER = 10
    DPAD_UP = 11
    DPAD_DOWN = 12
    DPAD_LEFT = 13
    DPAD_RIGHT = 14
    MISC1 = 15
    PADDLE1 = 16
    PADDLE2 = 17
    PADDLE3 = 18
    PADDLE4 = 19
    TOUCHPAD = 20


class Direction(enum.Enum):
    """Whether a key goes down or comes up."""

    PRESS = "press"
    RELEASE = "release"


@dataclass(frozen=True)
class ControllerInput:
    """A bindable input: an analog axis or a digital button."""

    source: Axis | Button

    def __post_init__(self) -> None:
        if not isinstance(self.source, (Axis, Button)):
            raise TypeError(f"not an axis or button: {self.source!r}")

    @property
    def analog(self) -> bool:
        return isinstance(self.source, Axis)


class Keyboard(Protocol):
    def key(self, key: Key, direction: Direction) -> None: ...


_DPAD_DIRECTIONS = (
    (Button.DPAD_UP, "Up"),
    (Button.DPAD_DOWN, "Down"),
    (Button.DPAD_LEFT, "Left"),
    (Button.DPAD_RIGHT, "Right"),
)


class Bindings:
    """For each player, the key bound to each input of each controller."""

    def __init__(self, num_players: int) -> None:
        if num_players < 0:
            raise ValueError("number of players must not be negative")
        self._players: list[dict[int, dict[ControllerInput, Key]]] = [
            {} for _ in range(num_players)
        ]

    def __len__(self) -> int:
        return len(self._players)

    def _player(self, player: int) -> dict[int, dict[ControllerInput, Key]]:
        if not 0 <= player < len(self._players):
            raise IndexError(f"no player {player}")
        return self._players[player]

    def bind(self, player: int, controller: int, control: ControllerInput, key: Key) -> bool:
        """Bind ``control`` to ``key``; return False if it was already bound."""
        controller_bindings = self._player(player).setdefault(controller, {})
        if control in controller_bindings:
            return False
        controller_bindings[control] = key
        return True

    def clear(self, player: int) -> None:
        """Remove every binding of a player."""
        self._player(player).clear()

    def bind_directions(
        self, player: int, controller: int, directions: Mapping[str, Key]
    ) -> None:
        """Bind the D-pad of a controller to the player's direction keys."""
        for button, name in _DPAD_DIRECTIONS:
            self.bind(player, controller, ControllerInput(button), directions[name])

    def keys_for(self, controller: int, control: ControllerInput) -> Iterator[Key]:
        """Yield the keys bound to an input, in player order."""
        for player in self._players:
            key = player.get(controller, {}).get(control)
            if key is not None:
                yield key

    def press(
        self,
        keyboard: Keyboard,
        controller: int,
        control: ControllerInput,
        direction: Direction,
    ) -> None:
        """Send every key bound to an input to the keyboard; key errors are ignored."""
        for key in self.keys_for(controller, control):
            try:
                keyboard.key(key, direction)
            except OSError:
                pass


def is_engaged(value: int) -> bool:
    """Whether an axis value is past the halfway point in either direction."""
    return abs(value) > ENGAGE_THRESHOLD


_TRIGGER_SLOTS = {Axis.TRIGGER_RIGHT: 0, Axis.TRIGGER_LEFT: 1}
_STICK_SLOTS = {Axis.LEFT_X: 2, Axis.LEFT_Y: 3}
_STICK_BUTTONS = {
    Axis.LEFT_X: (Button.DPAD_RIGHT, Button.DPAD_LEFT),
    Axis.LEFT_Y: (Button.DPAD_DOWN, Button.DPAD_UP),
}


class AnalogTracker:
    """Tracks trigger and left-stick state per controller to turn motion into presses."""

    def __init__(self) -> None:
        self._states: dict[int, list[bool]] = {}

    def __contains__(self, controller: object) -> bool:
        return controller in self._states

    def add_controller(self, controller: int) -> None:
        self._states[controller] = [False] * 4

    def remove_controller(self, controller: int) -> None:
        self._states.pop(controller, None)

    def _update(self, controller: int, slot: int, value: int) -> bool | None:
        states = self._states[controller]
        new_state = is_engaged(value)
        if states[slot] == new_state:
            return None
        states[slot] = new_state
        return new_state

    def trigger(self, controller: int, axis: Axis, value: int) -> Direction | None:
        """Return PRESS or RELEASE when a trigger crosses the threshold, else None."""
        try:
            slot = _TRIGGER_SLOTS[axis]
        except KeyError:
            raise ValueError(f"not a trigger axis: {axis!r}") from None
        changed = self._update(controller, slot, value)
        if changed is None:
            return None
        return Direction.PRESS if changed else Direction.RELEASE

    def stick(
        self, controller: int, axis: Axis, value: int
    ) -> list[tuple[ControllerInput, Direction]]:
        """Return the D-pad events a left-stick motion produces."""
        try:
            slot = _STICK_SLOTS[axis]
        except KeyError:
            raise ValueError(f"not a left stick axis: {axis!r}") from None
        positive, negative = _STICK_BUTTONS[axis]
        changed = self._update(controller, slot, value)
        if changed is None:
            return []
        if changed:
            button = positive if value > 0 else negative
            return [(ControllerInput(button), Direction.PRESS)]
        return [
            (ControllerInput(positive), Direction.RELEASE),
            (ControllerInput(negative), Direction.RELEASE),
        ]