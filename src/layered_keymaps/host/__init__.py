"""Host binding primitives and an in-memory reference host."""

from .protocol import BindingHost, HostBindingError
from .memory import InMemoryHost

__all__ = ["BindingHost", "HostBindingError", "InMemoryHost"]
