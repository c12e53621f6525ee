"""Contract for the component that draws a mode's help listing."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable


class HelpViewMissingError(RuntimeError):
    """Raised when help is requested from a mode built without a view."""


@runtime_checkable
class HelpView(Protocol):
    """Opens and closes a textual listing of bindings.

    ``view_config`` carries placement (size, anchor, title, border) and
    ``view_options`` appearance; both are already merged with the mode's
    defaults when they reach the view.
    """

    def open(
        self,
        lines: Sequence[str],
        view_config: Mapping[str, Any],
        view_options: Mapping[str, Any],
    ) -> Any:
        """Draw ``lines`` and return a handle for :meth:`close`."""

    def close(self, handle: Any) -> None:
        """Remove the view identified by ``handle``."""


__all__ = ["HelpView", "HelpViewMissingError"]
