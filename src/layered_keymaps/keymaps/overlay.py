"""Temporary binding overrides that remember how to undo themselves."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterable, Mapping, Optional

from layered_keymaps.runtime.telemetry import span

from .models import (
    Absent,
    BindingKey,
    BindingOptions,
    Existing,
    OriginalBindingRecord,
    Rhs,
    normalize_modes,
)

if TYPE_CHECKING:  # pragma: no cover - typing only
    from layered_keymaps.host.protocol import BindingHost


class BindingOverlay:
    """Applies overrides against a host and restores the originals on ``clear``.

    The first ``set`` of a ``(mode, lhs)`` key captures what the host had
    bound there, either :class:`Existing` or :class:`Absent`. Later ``set``
    calls on the same key overwrite the live binding but never the capture,
    so ``clear`` always returns the key to its state before this overlay.

    Two overlays touching the same key are unsafe: the second one captures
    the first one's override as its "original".
    """

    def __init__(
        self, host: "BindingHost", *, logger_name: str | None = None
    ) -> None:
        self._host = host
        self._store: Dict[str, Dict[str, OriginalBindingRecord]] = {}
        self._logger_name = logger_name

    @property
    def host(self) -> "BindingHost":
        return self._host

    def _bucket(self, mode: str) -> Dict[str, OriginalBindingRecord]:
        return self._store.setdefault(mode, {})

    def set(
        self,
        modes: str | Iterable[str],
        lhs: str,
        rhs: Rhs,
        options: BindingOptions | Mapping[str, object] | None = None,
    ) -> None:
        normalized = normalize_modes(modes)
        opts = BindingOptions.coerce(options)
        with span(
            "overlay::set",
            logger_name=self._logger_name,
            component="overlay",
            metadata={"modes": ",".join(normalized), "lhs": lhs},
        ) as handle:
            for mode in normalized:
                bucket = self._bucket(mode)
                captured = lhs not in bucket
                if captured:
                    bucket[lhs] = self._capture(mode, lhs)
                    handle.add_metadata(
                        f"captured.{mode}", type(bucket[lhs]).__name__
                    )
                try:
                    self._host.install_binding(mode, lhs, rhs, opts)
                except Exception:
                    # the key was never overridden, nothing to restore
                    if captured:
                        del bucket[lhs]
                    raise

    def clear(self) -> None:
        """Restore every captured key and drain the store.

        Keys leave the store one at a time as they are restored; if the host
        raises part way through, the keys not yet processed stay recorded.
        """

        if self.is_empty:
            return
        with span(
            "overlay::clear",
            logger_name=self._logger_name,
            component="overlay",
            metadata={"keys": len(self)},
        ):
            for mode in list(self._store):
                bucket = self._store[mode]
                for lhs in list(bucket):
                    self._restore(mode, lhs, bucket[lhs])
                    del bucket[lhs]
                self._store[mode] = {}

    def record_for(self, mode: str, lhs: str) -> Optional[OriginalBindingRecord]:
        return self._store.get(mode, {}).get(lhs)

    def records(self) -> Mapping[BindingKey, OriginalBindingRecord]:
        return MappingProxyType(
            {
                BindingKey(mode, lhs): record
                for mode, bucket in self._store.items()
                for lhs, record in bucket.items()
            }
        )

    @property
    def is_empty(self) -> bool:
        return not any(self._store.values())

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._store.values())

    def __bool__(self) -> bool:
        return True

    def _capture(self, mode: str, lhs: str) -> OriginalBindingRecord:
        descriptor = self._host.get_binding(mode, lhs)
        if descriptor is None:
            return Absent()
        return Existing(descriptor)

    def _restore(self, mode: str, lhs: str, record: OriginalBindingRecord) -> None:
        if isinstance(record, Existing):
            self._host.reinstall_binding(record.descriptor)
        else:
            self._host.remove_binding(mode, lhs)


__all__ = ["BindingOverlay"]
