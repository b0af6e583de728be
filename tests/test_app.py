import pygame
import pytest

from buttonbinds.app import App
from buttonbinds.bindings import Axis, Button, ControllerInput, Direction
from buttonbinds.config import Config, Controls, Key, default_config

PROMPT = "Please enter your player number, 1 - 2."
FINISHED = "Finished with binding, please double check bindings in game."
ACTION_BUTTONS = [
    Button.A,
    Button.B,
    Button.X,
    Button.Y,
    Button.LEFT_SHOULDER,
    Button.RIGHT_SHOULDER,
    Button.START,
]


class RecordingKeyboard:
    def __init__(self):
        self.events = []

    def key(self, key, direction):
        self.events.append((key, direction))


def fake_open(index):
    if index >= 5:
        return None
    return index + 100, f"pad{index}"


def button_down(cid, button):
    return pygame.event.Event(pygame.CONTROLLERBUTTONDOWN, instance_id=cid, button=button.value)


def button_up(cid, button):
    return pygame.event.Event(pygame.CONTROLLERBUTTONUP, instance_id=cid, button=button.value)


def axis(cid, ax, value):
    return pygame.event.Event(
        pygame.CONTROLLERAXISMOTION, instance_id=cid, axis=ax.value, value=value
    )


def added(index):
    return pygame.event.Event(pygame.CONTROLLERDEVICEADDED, device_index=index)


@pytest.fixture
def setup():
    lines = []
    keyboard = RecordingKeyboard()
    config = default_config()
    app = App(config, keyboard, open_controller=fake_open, out=lines.append)
    app.handle_event(added(0))
    return app, keyboard, lines, config


def bind_player_one(app, buttons=ACTION_BUTTONS):
    assert app.request_binding(1)
    for button in buttons:
        app.handle_event(button_down(100, button))


def test_device_added_registers_controller(setup):
    app, _, _, _ = setup
    assert app.controllers == {100: "pad0"}
    assert 100 in app.tracker


def test_failed_open_is_ignored(setup):
    app, _, _, _ = setup
    app.handle_event(added(5))
    assert list(app.controllers) == [100]


def test_unbound_button_sends_nothing(setup):
    app, keyboard, _, _ = setup
    assert app.handle_event(button_down(100, Button.A))
    assert keyboard.events == []


def test_full_binding_then_play(setup):
    app, keyboard, lines, config = setup
    bind_player_one(app)
    assert app.binding_player is None
    assert lines[-2:] == [FINISHED, PROMPT]
    app.handle_event(button_down(100, Button.A))
    app.handle_event(button_up(100, Button.A))
    punch = config.controls[0].actions[0][1]
    assert keyboard.events == [(punch, Direction.PRESS), (punch, Direction.RELEASE)]
    app.handle_event(button_down(100, Button.DPAD_UP))
    assert keyboard.events[-1] == (config.controls[0].directions["Up"], Direction.PRESS)


def test_binding_prints_actions_in_order(setup):
    app, _, lines, config = setup
    bind_player_one(app)
    expected = [f"{name}:" for name, _ in config.controls[0].actions]
    assert [line for line in lines if line.endswith(":") and " " not in line[:-1] or line in expected] == [
        line for line in lines if line in expected
    ]
    assert [line for line in lines if line in expected] == expected


def test_duplicate_button_does_not_advance(setup):
    app, _, lines, _ = setup
    app.request_binding(1)
    app.handle_event(button_down(100, Button.A))
    app.handle_event(button_down(100, Button.A))
    assert lines[-1] == "Kick:"
    assert "Slash:" not in lines
    assert app.binding_player == 1


def test_bind_request_event_starts_binding(setup):
    app, _, lines, _ = setup
    app.handle_event(pygame.event.Event(pygame.USEREVENT, player=2))
    assert app.binding_player == 2
    assert lines[-2:] == [
        "Binding buttons for Player 2. Press the buttons you would like for the corresponding actions:",
        "Punch:",
    ]


@pytest.mark.parametrize("number", [0, 3, -1])
def test_invalid_player_number_prompts(setup, number):
    app, _, lines, _ = setup
    assert app.request_binding(number) is False
    assert lines == [PROMPT]
    assert app.binding_player is None


def test_request_while_binding_is_refused(setup):
    app, _, _, _ = setup
    assert app.request_binding(1)
    assert app.request_binding(2) is False
    assert app.binding_player == 1


def test_bind_event_ignored_while_binding(setup):
    app, _, _, _ = setup
    app.request_binding(1)
    app.handle_event(pygame.event.Event(pygame.USEREVENT, player=2))
    assert app.binding_player == 1


def test_trigger_binding_and_play(setup):
    app, keyboard, lines, config = setup
    app.request_binding(1)
    app.handle_event(axis(100, Axis.TRIGGER_RIGHT, 30000))
    assert lines[-1] == "Kick:"
    for button in ACTION_BUTTONS[1:]:
        app.handle_event(button_down(100, button))
    assert app.binding_player is None
    punch = config.controls[0].actions[0][1]
    assert list(app.bindings.keys_for(100, ControllerInput(Axis.TRIGGER_RIGHT))) == [punch]
    app.handle_event(axis(100, Axis.TRIGGER_RIGHT, 0))
    app.handle_event(axis(100, Axis.TRIGGER_RIGHT, 30000))
    app.handle_event(axis(100, Axis.TRIGGER_RIGHT, 31000))
    assert keyboard.events == [(punch, Direction.RELEASE), (punch, Direction.PRESS)]


def test_stick_motion_presses_dpad_keys(setup):
    app, keyboard, _, config = setup
    bind_player_one(app)
    directions = config.controls[0].directions
    app.handle_event(axis(100, Axis.LEFT_X, 30000))
    app.handle_event(axis(100, Axis.LEFT_X, 0))
    assert keyboard.events == [
        (directions["Right"], Direction.PRESS),
        (directions["Right"], Direction.RELEASE),
        (directions["Left"], Direction.RELEASE),
    ]


def test_removed_controller_events_ignored(setup):
    app, keyboard, _, _ = setup
    bind_player_one(app)
    app.handle_event(pygame.event.Event(pygame.CONTROLLERDEVICEREMOVED, instance_id=100))
    app.handle_event(axis(100, Axis.LEFT_Y, -30000))
    assert keyboard.events == []
    assert 100 not in app.controllers


def test_quit_stops(setup):
    app, _, _, _ = setup
    assert app.handle_event(pygame.event.Event(pygame.QUIT)) is False
    app.request_binding(1)
    assert app.handle_event(pygame.event.Event(pygame.QUIT)) is False


def test_no_actions_binds_directions_immediately():
    lines = []
    directions = {"Up": Key("UpArrow"), "Down": Key("DownArrow"),
                  "Left": Key("LeftArrow"), "Right": Key("RightArrow")}
    config = Config("Solo", [Controls(directions=directions, actions=[])])
    app = App(config, RecordingKeyboard(), open_controller=fake_open, out=lines.append)
    assert app.request_binding(1)
    assert app.binding_player is None
    assert list(app.bindings.keys_for(0, ControllerInput(Button.DPAD_DOWN))) == [
        directions["Down"]
    ]
    assert lines[-1] == "Please enter your player number, 1 - 1."


def test_debug_prints_events():
    lines = []
    app = App(default_config(), RecordingKeyboard(), open_controller=fake_open,
              debug=True, out=lines.append)
    event = pygame.event.Event(pygame.CONTROLLERBUTTONDOWN, instance_id=9, button=0)
    app.handle_event(event)
    assert lines == [str(event)]