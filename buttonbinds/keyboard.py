"""Keyboard output through the Linux uinput device."""

from __future__ import annotations

import os
import struct
from typing import BinaryIO

from buttonbinds.bindings import Direction
from buttonbinds.config import Key

EV_SYN = 0x00
EV_KEY = 0x01
SYN_REPORT = 0
BUS_USB = 0x03
KEY_MAX = 0x2FF

EVENT_FORMAT = "llHHi"
DEFAULT_DEVICE = "/dev/uinput"
DEFAULT_NAME = "buttonbinds virtual keyboard"

_UI_DEV_CREATE = 0x5501
_UI_DEV_DESTROY = 0x5502
_UI_SET_EVBIT = 0x40045564
_UI_SET_KEYBIT = 0x40045565
_DEVICE_FORMAT = "80sHHHHi256i"


def _row(chars: str, first: int) -> dict[str, int]:
    return {char: first + offset for offset, char in enumerate(chars)}


_CHAR_CODES: dict[str, int] = {
    **_row("1234567890", 2),
    **_row("qwertyuiop", 16),
    **_row("asdfghjkl", 30),
    **_row("zxcvbnm", 44),
    "-": 12,
    "=": 13,
    "\t": 15,
    "[": 26,
    "]": 27,
    "\n": 28,
    "\r": 28,
    ";": 39,
    "'": 40,
    "`": 41,
    "\\": 43,
    ",": 51,
    ".": 52,
    "/": 53,
    " ": 57,
}

_NAMED_CODES: dict[str, int] = {
    "Escape": 1,
    "Backspace": 14,
    "Tab": 15,
    "Return": 28,
    "Control": 29,
    "LControl": 29,
    "Shift": 42,
    "LShift": 42,
    "RShift": 54,
    "Multiply": 55,
    "Alt": 56,
    "Space": 57,
    "CapsLock": 58,
    **{f"F{n}": 58 + n for n in range(1, 11)},
    "NumLock": 69,
    "ScrollLock": 70,
    "Numpad7": 71,
    "Numpad8": 72,
    "Numpad9": 73,
    "Subtract": 74,
    "Numpad4": 75,
    "Numpad5": 76,
    "Numpad6": 77,
    "Add": 78,
    "Numpad1": 79,
    "Numpad2": 80,
    "Numpad3": 81,
    "Numpad0": 82,
    "Decimal": 83,
    "F11": 87,
    "F12": 88,
    "RControl": 97,
    "Divide": 98,
    "Home": 102,
    "UpArrow": 103,
    "PageUp": 104,
    "LeftArrow": 105,
    "RightArrow": 106,
    "End": 107,
    "DownArrow": 108,
    "PageDown": 109,
    "Insert": 110,
    "Delete": 111,
    "Meta": 125,
    "Super": 125,
    "Windows": 125,
    "Command": 125,
}


class KeyboardError(OSError):
    """Raised when a key cannot be sent."""


def key_code(key: Key) -> int:
    """Return the Linux input key code for a key; raise ValueError if it has none."""
    if key.name == "Unicode":
        char = str(key.value)
        code = _CHAR_CODES.get(char.lower())
        if code is None:
            raise ValueError(f"no key code for character {char!r}")
        return code
    if key.name == "Raw":
        if isinstance(key.value, int) and 0 < key.value <= KEY_MAX:
            return key.value
        raise ValueError(f"raw key code out of range: {key.value!r}")
    if key.value is None and key.name in _NAMED_CODES:
        return _NAMED_CODES[key.name]
    raise ValueError(f"unsupported key: {key}")


def _event(event_type: int, code: int, value: int) -> bytes:
    return struct.pack(EVENT_FORMAT, 0, 0, event_type, code, value)


class UInputKeyboard:
    """A virtual keyboard that sends key presses through uinput.

    When ``stream`` is given, events are written to it instead of a new device.
    """

    def __init__(
        self,
        path: str = DEFAULT_DEVICE,
        *,
        name: str = DEFAULT_NAME,
        stream: BinaryIO | None = None,
    ) -> None:
        if stream is None:
            self._stream: BinaryIO = self._create_device(path, name)
            self._is_device = True
        else:
            self._stream = stream
            self._is_device = False
        self._closed = False

    @staticmethod
    def _create_device(path: str, name: str) -> BinaryIO:
        import fcntl

        fd = os.open(path, os.O_WRONLY | os.O_NONBLOCK)
        try:
            fcntl.ioctl(fd, _UI_SET_EVBIT, EV_KEY)
            for code in range(1, KEY_MAX + 1):
                fcntl.ioctl(fd, _UI_SET_KEYBIT, code)
            description = struct.pack(
                _DEVICE_FORMAT,
                name.encode("utf-8")[:79],
                BUS_USB,
                0x1,
                0x1,
                1,
                0,
                *([0] * 256),
            )
            os.write(fd, description)
            fcntl.ioctl(fd, _UI_DEV_CREATE)
        except OSError:
            os.close(fd)
            raise
        return os.fdopen(fd, "wb", buffering=0)

    @property
    def closed(self) -> bool:
        return self._closed

    def key(self, key: Key, direction: Direction) -> None:
        """Press or release a key."""
        if self._closed:
            raise KeyboardError("keyboard is closed")
        try:
            code = key_code(key)
        except ValueError as exc:
            raise KeyboardError(str(exc)) from exc
        value = 1 if direction is Direction.PRESS else 0
        self._stream.write(_event(EV_KEY, code, value) + _event(EV_SYN, SYN_REPORT, 0))
        self._stream.flush()

    def close(self) -> None:
        """Remove the virtual device and release the stream."""
        if self._closed:
            return
        self._closed = True
        if self._is_device:
            import fcntl

            try:
                fcntl.ioctl(self._stream.fileno(), _UI_DEV_DESTROY)
            except OSError:
                pass
        self._stream.close()

    def __enter__(self) -> UInputKeyboard:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()