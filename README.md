# buttonbinds

Play local multiplayer with gamepads in games that only understand the
keyboard. `buttonbinds` listens to your connected controllers and presses
keyboard keys on their behalf, so every player can have their own pad mapped
onto their own set of keys.

## Installing

```
pip install .
```

Keys are sent through a virtual keyboard created with Linux `uinput`, so the
user running `buttonbinds` needs write access to `/dev/uinput`.

## Running

```
buttonbinds
```

Options:

- `-f`, `--file FILE` – the bindings file to load (default: `bindings.json`).
- `-d`, `--debug` – print every event as it arrives.
- `-V`, `--version` – print the version and exit.

If the bindings file cannot be opened, the built-in "Wonderful World" layout
for two players is used. A file that opens but is not valid JSON, or does not
have the shape described below, stops the program with a `ConfigError`.

The program runs until the event queue reports a quit event.

## Binding a controller

While `buttonbinds` is running it asks:

```
Please enter your player number, 1 - 2.
```

Type a player number and press Enter. You are then asked, one action at a
time, to press the button you want for that action. Buttons and the analog
triggers (pressed past halfway) can be used; an input already bound for that
player on that controller is ignored, so press a different one. Once every
action has an input, the D-pad of the controller whose button you last
pressed is bound to the player's four directions. Moving the left stick past
halfway presses the matching D-pad direction.

Entering a number again rebinds that player from scratch. Numbers outside the
range of players, and lines that are not numbers, show the prompt again. A
number entered while another player is still binding is ignored.

## The bindings file

A bindings file names the game and lists one set of controls per player. Each
player has the four directions `Up`, `Down`, `Left` and `Right`, and an ordered
list of actions; the actions are asked for in that order when binding.

A printable key is written as `{"Unicode": "a"}`; other keys are written by
name, such as `"Escape"`, `"Return"`, `"Space"`, `"F1"` to `"F12"`,
`"Numpad0"` to `"Numpad9"` or the arrow keys `"UpArrow"`, `"DownArrow"`,
`"LeftArrow"`, `"RightArrow"`. A Linux input key code can be given directly as
`{"Raw": 30}`.

```json
{
  "name": "Wonderful World",
  "controls": [
    {
      "directions": {
        "Up": {"Unicode": "t"},
        "Down": {"Unicode": "b"},
        "Left": {"Unicode": "f"},
        "Right": {"Unicode": "h"}
      },
      "actions": [
        ["Punch", {"Unicode": "a"}],
        ["Kick", {"Unicode": "s"}],
        ["Pause", "Escape"]
      ]
    },
    {
      "directions": {
        "Up": "Numpad8",
        "Down": "Numpad2",
        "Left": "Numpad4",
        "Right": "Numpad6"
      },
      "actions": [
        ["Punch", {"Unicode": "j"}],
        ["Kick", {"Unicode": "k"}],
        ["Pause", "Escape"]
      ]
    }
  ]
}
```

The number of players is the number of entries in `controls`.

## Limits

- Keys are only sent on Linux, through `/dev/uinput`; there is no output for
  other systems.
- Characters are sent as the plain key on a US layout, without Shift: `"A"`
  presses the same key as `"a"`. Keys the virtual keyboard has no code for are
  skipped silently when pressed.
- Bindings made at the prompt are kept only while the program runs; they are
  not written back to the bindings file.

## Using it as a library

`buttonbinds.config` loads and writes bindings files (`load_config`,
`default_config`, `Config.from_json`, `Config.to_json`).
`buttonbinds.bindings` holds the per-player `Bindings` table and the
`AnalogTracker` that turns trigger and stick motion into presses.
`buttonbinds.keyboard.UInputKeyboard` is the virtual keyboard, and
`buttonbinds.app.App` routes pygame controller events between them.

## Running the tests

```
pip install .[test]
pytest
```