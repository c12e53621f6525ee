"""In-process binding table usable as a host for tests and demos."""

from __future__ import annotations

from typing import Callable, Dict, Iterator, Optional

from layered_keymaps.keymaps.models import (
    BindingDescriptor,
    BindingKey,
    BindingOptions,
    Rhs,
    normalize_modes,
)

from .protocol import HostBindingError


class InMemoryHost:
    """Dictionary-backed implementation of :class:`BindingHost`.

    ``command_runner`` receives string actions passed to :meth:`execute`;
    every executed command is also appended to :attr:`executed`.
    """

    def __init__(
        self, *, command_runner: Callable[[str], None] | None = None
    ) -> None:
        self._table: Dict[BindingKey, BindingDescriptor] = {}
        self._command_runner = command_runner
        self.executed: list[str] = []

    def get_binding(self, mode: str, lhs: str) -> Optional[BindingDescriptor]:
        normalize_modes(mode)
        return self._table.get(BindingKey(mode, lhs))

    def install_binding(
        self,
        mode: str,
        lhs: str,
        rhs: Rhs,
        options: BindingOptions | None = None,
    ) -> None:
        normalize_modes(mode)
        if not lhs:
            raise HostBindingError("cannot bind an empty lhs", mode=mode, lhs=lhs)
        descriptor = BindingDescriptor(
            mode=mode,
            lhs=lhs,
            rhs=rhs,
            options=BindingOptions.coerce(options),
        )
        self._table[descriptor.key] = descriptor

    def remove_binding(self, mode: str, lhs: str) -> None:
        key = BindingKey(mode, lhs)
        if key not in self._table:
            raise HostBindingError(
                f"no binding for {lhs!r} in mode {mode!r}", mode=mode, lhs=lhs
            )
        del self._table[key]

    def reinstall_binding(self, descriptor: BindingDescriptor) -> None:
        normalize_modes(descriptor.mode)
        self._table[descriptor.key] = descriptor

    def execute(self, command: str) -> None:
        self.executed.append(command)
        if self._command_runner is not None:
            self._command_runner(command)

    def trigger(self, mode: str, lhs: str) -> object:
        """Fire the binding for ``(mode, lhs)`` like a key press would."""

        descriptor = self.get_binding(mode, lhs)
        if descriptor is None:
            raise HostBindingError(
                f"nothing bound to {lhs!r} in mode {mode!r}", mode=mode, lhs=lhs
            )
        if isinstance(descriptor.rhs, str):
            self.execute(descriptor.rhs)
            return None
        return descriptor.rhs()

    def bindings(
        self, mode: Optional[str] = None
    ) -> Dict[BindingKey, BindingDescriptor]:
        if mode is None:
            return dict(self._table)
        return {key: value for key, value in self._table.items() if key.mode == mode}

    def __iter__(self) -> Iterator[BindingDescriptor]:
        return iter(list(self._table.values()))

    def __len__(self) -> int:
        return len(self._table)

    def __bool__(self) -> bool:
        return True

    def __contains__(self, key: object) -> bool:
        return key in self._table


__all__ = ["InMemoryHost"]
