"""Binding data model and the capture-once overlay."""

from .models import (
    INPUT_MODES,
    MODE_NAMES,
    Absent,
    BindingDescriptor,
    BindingKey,
    BindingOptions,
    Existing,
    OriginalBindingRecord,
    PendingBinding,
    PendingStore,
    UnknownInputModeError,
    normalize_modes,
)
from .overlay import BindingOverlay

__all__ = [
    "INPUT_MODES",
    "MODE_NAMES",
    "Absent",
    "BindingDescriptor",
    "BindingKey",
    "BindingOptions",
    "BindingOverlay",
    "Existing",
    "OriginalBindingRecord",
    "PendingBinding",
    "PendingStore",
    "UnknownInputModeError",
    "normalize_modes",
]
