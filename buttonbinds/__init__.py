"""Bind gamepad buttons to keyboard keys for local multiplayer."""

__version__ = "1.2.0"