"""Layered modes: pending bindings, activation state and hooks."""

from .layer_mode import Hook, ModeLayer, ModeStateError, ModeTransitionError

__all__ = ["Hook", "ModeLayer", "ModeStateError", "ModeTransitionError"]
