"""The event loop that binds controller inputs to keys and replays them."""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from buttonbinds.bindings import (  # noqa: E402
    AnalogTracker,
    Axis,
    Bindings,
    Button,
    ControllerInput,
    Direction,
    Keyboard,
)
from buttonbinds.config import Config, Key, load_config, parse_args  # noqa: E402
from buttonbinds.keyboard import UInputKeyboard  # noqa: E402

_TRIGGERS = frozenset({Axis.TRIGGER_LEFT, Axis.TRIGGER_RIGHT})
_STICK = frozenset({Axis.LEFT_X, Axis.LEFT_Y})

OpenController = Callable[[int], "tuple[int, Any] | None"]


def _open_controller(device_index: int) -> tuple[int, Any] | None:
    from pygame._sdl2 import controller as sdl_controller

    try:
        handle = sdl_controller.Controller(device_index)
        return handle.as_joystick().get_instance_id(), handle
    except pygame.error:
        return None


@dataclass
class _Session:
    player: int
    actions: Iterator[tuple[str, Key]]
    key: Key | None = None
    controller: int = 0
    extra: dict = field(default_factory=dict)


class App:
    """Routes controller events to bindings, and runs interactive binding sessions."""

    def __init__(
        self,
        config: Config,
        keyboard: Keyboard,
        *,
        bind_event_type: int = pygame.USEREVENT,
        open_controller: OpenController = _open_controller,
        debug: bool = False,
        out: Callable[[str], None] = print,
    ) -> None:
        self.config = config
        self.keyboard = keyboard
        self.bindings = Bindings(len(config.controls))
        self.tracker = AnalogTracker()
        self.controllers: dict[int, Any] = {}
        self._bind_event_type = bind_event_type
        self._open = open_controller
        self._debug = debug
        self._out = out
        self._session: _Session | None = None

    @property
    def num_players(self) -> int:
        return len(self.config.controls)

    @property
    def binding_player(self) -> int | None:
        """The 1-based number of the player being bound, or None."""
        return None if self._session is None else self._session.player + 1

    def prompt(self) -> None:
        """Ask for a player number."""
        self._out(f"Please enter your player number, 1 - {self.num_players}.")

    def request_binding(self, player_number: int) -> bool:
        """Start binding for a 1-based player number; return whether it started."""
        if self._session is not None:
            return False
        player = player_number - 1
        if not 0 <= player < self.num_players:
            self.prompt()
            return False
        self._out(
            f"Binding buttons for Player {player_number}. "
            "Press the buttons you would like for the corresponding actions:"
        )
        self.bindings.clear(player)
        self._session = _Session(player, iter(self.config.controls[player].actions))
        self._advance()
        return True

    def _advance(self) -> None:
        session = self._session
        assert session is not None
        entry = next(session.actions, None)
        if entry is None:
            self._finish()
            return
        action, session.key = entry
        self._out(f"{action}:")

    def _finish(self) -> None:
        session = self._session
        assert session is not None
        self._session = None
        self.bindings.bind_directions(
            session.player,
            session.controller,
            self.config.controls[session.player].directions,
        )
        self._out("Finished with binding, please double check bindings in game.")
        self.prompt()

    def handle_event(self, event: Any) -> bool:
        """Process one event; return False when the program should stop."""
        if self._debug:
            self._out(str(event))
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.CONTROLLERDEVICEADDED:
            self._add_controller(event.device_index)
        elif event.type == pygame.CONTROLLERDEVICEREMOVED:
            self.controllers.pop(event.instance_id, None)
            self.tracker.remove_controller(event.instance_id)
        elif self._session is not None:
            self._handle_binding(event, self._session)
        else:
            self._handle_play(event)
        return True

    def _add_controller(self, device_index: int) -> None:
        opened = self._open(device_index)
        if opened is None:
            return
        instance_id, handle = opened
        self.tracker.add_controller(instance_id)
        self.controllers[instance_id] = handle

    def _handle_binding(self, event: Any, session: _Session) -> None:
        assert session.key is not None
        if event.type == pygame.CONTROLLERBUTTONDOWN:
            button = _button(event)
            if button is None:
                return
            session.controller = event.instance_id
            if self.bindings.bind(
                session.player, event.instance_id, ControllerInput(button), session.key
            ):
                self._advance()
        elif event.type == pygame.CONTROLLERAXISMOTION:
            axis = _axis(event)
            if axis not in _TRIGGERS or event.instance_id not in self.tracker:
                return
            direction = self.tracker.trigger(event.instance_id, axis, event.value)
            if direction is Direction.PRESS and self.bindings.bind(
                session.player, event.instance_id, ControllerInput(axis), session.key
            ):
                self._advance()

    def _handle_play(self, event: Any) -> None:
        if event.type in (pygame.CONTROLLERBUTTONDOWN, pygame.CONTROLLERBUTTONUP):
            button = _button(event)
            if button is None:
                return
            direction = (
                Direction.PRESS
                if event.type == pygame.CONTROLLERBUTTONDOWN
                else Direction.RELEASE
            )
            self._press([(ControllerInput(button), direction)], event.instance_id)
        elif event.type == pygame.CONTROLLERAXISMOTION:
            axis = _axis(event)
            controller = event.instance_id
            if controller not in self.tracker:
                return
            if axis in _TRIGGERS:
                direction = self.tracker.trigger(controller, axis, event.value)
                if direction is not None:
                    self._press([(ControllerInput(axis), direction)], controller)
            elif axis in _STICK:
                self._press(self.tracker.stick(controller, axis, event.value), controller)
        elif event.type == self._bind_event_type:
            self.request_binding(event.player)

    def _press(
        self, presses: Iterable[tuple[ControllerInput, Direction]], controller: int
    ) -> None:
        for control, direction in presses:
            self.bindings.press(self.keyboard, controller, control, direction)


def _button(event: Any) -> Button | None:
    try:
        return Button(event.button)
    except ValueError:
        return None


def _axis(event: Any) -> Axis | None:
    try:
        return Axis(event.axis)
    except ValueError:
        return None


def _read_player_numbers(app: App, bind_event_type: int, lines: Iterable[str]) -> None:
    for line in lines:
        try:
            number = int(line.strip())
        except ValueError:
            app.prompt()
            continue
        pygame.event.post(pygame.event.Event(bind_event_type, player=number))


def main(argv: list[str] | None = None) -> int:
    """Run the binder until the event queue reports quit."""
    args = parse_args(argv)
    config = load_config(args.file)
    os.environ.setdefault("SDL_JOYSTICK_THREAD", "1")
    os.environ.setdefault("SDL_JOYSTICK_ALLOW_BACKGROUND_EVENTS", "1")
    with UInputKeyboard() as keyboard:
        pygame.init()
        try:
            from pygame._sdl2 import controller as sdl_controller

            sdl_controller.init()
            bind_event_type = pygame.event.custom_type()
            app = App(config, keyboard, bind_event_type=bind_event_type, debug=args.debug)
            app.prompt()
            reader = threading.Thread(
                target=_read_player_numbers,
                args=(app, bind_event_type, sys.stdin),
                daemon=True,
            )
            reader.start()
            while app.handle_event(pygame.event.wait()):
                pass
        finally:
            pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())