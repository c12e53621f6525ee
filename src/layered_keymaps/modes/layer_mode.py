"""Togglable modes that batch pending bindings into one overlay."""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from layered_keymaps.config import HelpOptions, ModeConfig, deep_merge
from layered_keymaps.help import HelpView, HelpViewMissingError, build_help_lines
from layered_keymaps.keymaps import (
    BindingOptions,
    BindingOverlay,
    PendingBinding,
    PendingStore,
    normalize_modes,
)
from layered_keymaps.keymaps.models import Rhs
from layered_keymaps.runtime import telemetry

if TYPE_CHECKING:  # pragma: no cover - typing only
    from layered_keymaps.host.protocol import BindingHost

Hook = Callable[[bool], None]
KeymapEntry = Union[PendingBinding, Tuple[Any, ...]]


class ModeStateError(RuntimeError):
    """Raised when a transition is requested from the wrong state."""


class ModeTransitionError(ModeStateError):
    """Raised when a transition starts while another one is still running."""

    def __init__(self, requested: str, running: str):
        super().__init__(
            f"Cannot {requested} while {running} is in progress on the same mode"
        )
        self.requested = requested
        self.running = running


class ModeLayer:
    """Pending bindings, lifecycle hooks and at most one live overlay.

    The live overlay doubles as the active flag: the mode is active exactly
    while ``_active`` holds a :class:`BindingOverlay`. Bindings added while
    active only take effect on the next activation.
    """

    def __init__(
        self,
        host: "BindingHost",
        *,
        config: ModeConfig | None = None,
        help_view: HelpView | None = None,
        name: str = "layer",
        logger_name: str | None = "layered_keymaps.modes",
    ) -> None:
        self.name = name
        self.config = config or ModeConfig()
        self._host = host
        self._help_view = help_view
        self._pending = PendingStore()
        self._hooks: list[Hook] = []
        self._active: Optional[BindingOverlay] = None
        self._transition: Optional[str] = None
        self._help_handle: Any = None
        self._logger_name = logger_name
        # overlay whose clear() failed during the last deactivate, if any
        self.stale_overlay: Optional[BindingOverlay] = None

    def __repr__(self) -> str:
        state = "active" if self.active() else "inactive"
        return f"<ModeLayer {self.name!r} {state} pending={len(self._pending)}>"

    # ------------------------------------------------------------------
    # pending bindings

    def add(
        self,
        modes: str | Iterable[str],
        lhs: str,
        rhs: Rhs,
        options: BindingOptions | Mapping[str, Any] | None = None,
    ) -> None:
        binding = PendingBinding(lhs, rhs, BindingOptions.coerce(options))
        for mode in normalize_modes(modes):
            self._pending.append(mode, binding)

    def keymaps(self, table: Mapping[str, Iterable[KeymapEntry]]) -> None:
        """Append many bindings at once.

        ``table`` maps a mode name to ``(lhs, rhs[, options])`` entries. Existing
        pending bindings are kept; later entries win on a shared ``lhs``.
        """

        staged = [
            (
                normalize_modes(mode)[0],
                [PendingBinding.from_entry(entry) for entry in entries],
            )
            for mode, entries in table.items()
        ]
        for mode, bindings in staged:
            for binding in bindings:
                self._pending.append(mode, binding)

    def pending(self) -> Mapping[str, tuple[PendingBinding, ...]]:
        return self._pending.snapshot()

    # ------------------------------------------------------------------
    # activation state machine

    def active(self) -> bool:
        return self._active is not None

    def activate(self) -> None:
        self._enter(oneshot=False)

    def oneshot(self) -> None:
        """Activate, but leave the mode after the first overlaid binding fires."""

        self._enter(oneshot=True)

    def deactivate(self) -> None:
        self._begin("deactivate")
        try:
            overlay = self._active
            if overlay is None:
                raise ModeStateError(f"Mode '{self.name}' is not active")
            with telemetry.span(
                "mode::deactivate",
                logger_name=self._logger_name,
                component="modes",
                metadata={"mode": self.name, "keys": len(overlay)},
            ):
                self._active = None
                try:
                    overlay.clear()
                except Exception:
                    self.stale_overlay = overlay
                    raise
            telemetry.record_event(
                "mode.deactivate",
                data={"mode": self.name},
                logger_name=self._logger_name,
            )
            self._run_hooks(False)
        finally:
            self._transition = None

    def toggle(self) -> None:
        if self.active():
            self.deactivate()
        else:
            self.activate()

    def add_hook(self, hook: Hook) -> None:
        if not callable(hook):
            raise TypeError("hook must be callable")
        self._hooks.append(hook)

    @property
    def hooks(self) -> Sequence[Hook]:
        return tuple(self._hooks)

    def _begin(self, requested: str) -> None:
        if self._transition is not None:
            raise ModeTransitionError(requested, self._transition)
        self._transition = requested

    def _enter(self, *, oneshot: bool) -> None:
        label = "oneshot" if oneshot else "activate"
        self._begin(label)
        try:
            if self._active is not None:
                raise ModeStateError(f"Mode '{self.name}' is already active")
            with telemetry.span(
                f"mode::{label}",
                logger_name=self._logger_name,
                component="modes",
                metadata={"mode": self.name, "pending": len(self._pending)},
            ):
                overlay = BindingOverlay(self._host, logger_name=self._logger_name)
                try:
                    for mode, bindings in self._pending.items():
                        for binding in bindings:
                            rhs = binding.rhs
                            if oneshot:
                                rhs = self._one_shot(rhs)
                            overlay.set(mode, binding.lhs, rhs, binding.options)
                except Exception:
                    overlay.clear()
                    raise
                self._active = overlay
            telemetry.record_event(
                f"mode.{label}",
                data={"mode": self.name, "keys": len(overlay)},
                logger_name=self._logger_name,
            )
            self._run_hooks(True)
        finally:
            self._transition = None

    def _one_shot(self, rhs: Rhs) -> Callable[[], object]:
        def fire() -> object:
            if isinstance(rhs, str):
                self._host.execute(rhs)
                result = None
            else:
                result = rhs()
            if self._active is not None:
                self.deactivate()
            return result

        return fire

    def _run_hooks(self, active: bool) -> None:
        for hook in list(self._hooks):
            hook(active)

    # ------------------------------------------------------------------
    # help view

    def auto_show_help(self) -> None:
        """Show help while active and dismiss it on deactivation."""

        def hook(active: bool) -> None:
            if active:
                self.show_help()
            else:
                self.dismiss_help()

        self.add_hook(hook)

    def show_help(
        self,
        opts: Mapping[str, Any] | None = None,
        view_config: Mapping[str, Any] | None = None,
        view_options: Mapping[str, Any] | None = None,
    ) -> None:
        if self._help_view is None:
            raise HelpViewMissingError(f"Mode '{self.name}' has no help view")
        help_opts = HelpOptions.from_mapping(
            deep_merge(self.config.help.as_dict(), opts)
        )
        lines = build_help_lines(self._pending.snapshot(), help_opts)

        merged_config = deep_merge(self.config.window.config, view_config)
        merged_config.setdefault("height", len(lines))
        merged_options = deep_merge(self.config.window.opts, view_options)

        if self._help_handle is not None:
            self.dismiss_help()
        self._help_handle = self._help_view.open(lines, merged_config, merged_options)

    def dismiss_help(self) -> None:
        if self._help_handle is None:
            return
        handle, self._help_handle = self._help_handle, None
        if self._help_view is not None:
            self._help_view.close(handle)

    def toggle_help(self) -> None:
        if self._help_handle is None:
            self.show_help()
        else:
            self.dismiss_help()

    def help_shown(self) -> bool:
        return self._help_handle is not None


__all__ = ["Hook", "ModeLayer", "ModeStateError", "ModeTransitionError"]
