"""Dataclasses describing input modes, bindings and captured originals."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Tuple,
    Union,
)

INPUT_MODES: tuple[str, ...] = ("n", "i", "v", "x", "s", "o", "c", "t")

MODE_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "n": "normal",
        "i": "insert",
        "v": "visual+select",
        "x": "visual",
        "s": "select",
        "o": "operator-pending",
        "c": "command-line",
        "t": "terminal",
    }
)

Action = Callable[[], object]
Rhs = Union[Action, str]


class UnknownInputModeError(ValueError):
    """Raised when a mode name is not one of the host's input modes."""

    def __init__(self, mode: object):
        super().__init__(
            f"Unknown input mode {mode!r}; expected one of {', '.join(INPUT_MODES)}"
        )
        self.mode = mode


def normalize_modes(modes: str | Iterable[str]) -> tuple[str, ...]:
    """Accept a single mode name or a sequence of them.

    Duplicates are dropped while keeping the first occurrence's position.
    """

    if isinstance(modes, str):
        candidates: Iterable[str] = (modes,)
    else:
        candidates = modes
    result = tuple(dict.fromkeys(candidates))
    if not result:
        raise ValueError("at least one input mode is required")
    for mode in result:
        if mode not in INPUT_MODES:
            raise UnknownInputModeError(mode)
    return result


def _validate_lhs(lhs: str) -> str:
    if not isinstance(lhs, str) or not lhs:
        raise ValueError("lhs must be a non-empty string")
    return lhs


def _validate_rhs(rhs: object) -> Rhs:
    if isinstance(rhs, str) or callable(rhs):
        return rhs  # type: ignore[return-value]
    raise TypeError("rhs must be a callable or a command string")


@dataclass(frozen=True, slots=True)
class BindingKey:
    """Composite ``(mode, lhs)`` key, unique within a store."""

    mode: str
    lhs: str


@dataclass(frozen=True, slots=True)
class BindingOptions:
    """Flags and metadata handed to the host alongside a binding."""

    desc: Optional[str] = None
    silent: bool = False
    noremap: bool = True
    nowait: bool = False
    expr: bool = False
    buffer: Optional[int] = None
    extra: Mapping[str, Any] = field(default_factory=dict, hash=False)

    _FIELDS = ("desc", "silent", "noremap", "nowait", "expr", "buffer")

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def coerce(
        cls, value: "BindingOptions | Mapping[str, Any] | None"
    ) -> "BindingOptions":
        if value is None:
            return cls()
        if isinstance(value, BindingOptions):
            return value
        known: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, item in value.items():
            if key in cls._FIELDS:
                known[key] = item
            else:
                extra[key] = item
        return cls(**known, extra=extra)

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {name: getattr(self, name) for name in self._FIELDS}
        data.update(self.extra)
        return data


@dataclass(frozen=True, slots=True)
class BindingDescriptor:
    """Everything a host needs to reinstall a binding exactly as it was."""

    mode: str
    lhs: str
    rhs: Rhs
    options: BindingOptions = field(default_factory=BindingOptions)

    @property
    def key(self) -> BindingKey:
        return BindingKey(self.mode, self.lhs)


@dataclass(frozen=True, slots=True)
class Existing:
    """A binding existed before the overlay touched its key."""

    descriptor: BindingDescriptor


@dataclass(frozen=True, slots=True)
class Absent:
    """No binding existed before the overlay touched its key."""


OriginalBindingRecord = Union[Existing, Absent]


@dataclass(frozen=True, slots=True)
class PendingBinding:
    """A binding registered on a mode but not applied yet."""

    lhs: str
    rhs: Rhs
    options: BindingOptions = field(default_factory=BindingOptions)

    def __post_init__(self) -> None:
        _validate_lhs(self.lhs)
        _validate_rhs(self.rhs)
        object.__setattr__(self, "options", BindingOptions.coerce(self.options))

    @property
    def description(self) -> Optional[str]:
        return self.options.desc

    @classmethod
    def from_entry(cls, entry: "PendingBinding | Tuple[Any, ...]") -> "PendingBinding":
        """Build from ``(lhs, rhs)`` or ``(lhs, rhs, options)`` tuples."""

        if isinstance(entry, PendingBinding):
            return entry
        if len(entry) == 2:
            lhs, rhs = entry
            return cls(lhs, rhs)
        if len(entry) == 3:
            lhs, rhs, options = entry
            return cls(lhs, rhs, BindingOptions.coerce(options))
        raise ValueError(
            f"keymap entries need 2 or 3 items (lhs, rhs[, options]), got {len(entry)}"
        )


class PendingStore:
    """Per-mode ordered lists of pending bindings.

    Buckets are created explicitly through :meth:`bucket`; reads through
    :meth:`get` never create one. Iteration follows the order in which
    modes were first populated.
    """

    def __init__(self) -> None:
        self._buckets: Dict[str, list[PendingBinding]] = {}

    def bucket(self, mode: str) -> list[PendingBinding]:
        normalize_modes(mode)
        return self._buckets.setdefault(mode, [])

    def get(self, mode: str) -> tuple[PendingBinding, ...]:
        return tuple(self._buckets.get(mode, ()))

    def append(self, mode: str, binding: PendingBinding) -> None:
        self.bucket(mode).append(binding)

    def items(self) -> Iterator[tuple[str, tuple[PendingBinding, ...]]]:
        for mode, bindings in self._buckets.items():
            yield mode, tuple(bindings)

    def populated_modes(self) -> tuple[str, ...]:
        return tuple(mode for mode, bindings in self._buckets.items() if bindings)

    def snapshot(self) -> Mapping[str, tuple[PendingBinding, ...]]:
        return MappingProxyType(dict(self.items()))

    def __len__(self) -> int:
        return sum(len(bindings) for bindings in self._buckets.values())


__all__ = [
    "INPUT_MODES",
    "MODE_NAMES",
    "Action",
    "Rhs",
    "UnknownInputModeError",
    "normalize_modes",
    "BindingKey",
    "BindingOptions",
    "BindingDescriptor",
    "Existing",
    "Absent",
    "OriginalBindingRecord",
    "PendingBinding",
    "PendingStore",
]
