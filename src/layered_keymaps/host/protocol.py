"""Binding primitives a host application must provide."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from layered_keymaps.keymaps.models import BindingDescriptor, BindingOptions, Rhs


class HostBindingError(RuntimeError):
    """Raised by a host when a binding primitive fails."""

    def __init__(
        self, message: str, *, mode: str | None = None, lhs: str | None = None
    ):
        super().__init__(message)
        self.mode = mode
        self.lhs = lhs


@runtime_checkable
class BindingHost(Protocol):
    """Synchronous, authoritative view of what is currently bound.

    Every call runs to completion; failures surface as
    :class:`HostBindingError` and are never caught by the overlay engine.
    """

    def get_binding(self, mode: str, lhs: str) -> Optional[BindingDescriptor]:
        """Return the live binding for ``(mode, lhs)`` or ``None``."""

    def install_binding(
        self, mode: str, lhs: str, rhs: Rhs, options: BindingOptions
    ) -> None:
        """Bind ``lhs`` to ``rhs`` in ``mode``, replacing any live binding."""

    def remove_binding(self, mode: str, lhs: str) -> None:
        """Delete the live binding for ``(mode, lhs)``."""

    def reinstall_binding(self, descriptor: BindingDescriptor) -> None:
        """Put a previously captured binding back exactly as it was."""

    def execute(self, command: str) -> None:
        """Run a command string the way a string rhs would when triggered."""


__all__ = ["BindingHost", "HostBindingError"]
