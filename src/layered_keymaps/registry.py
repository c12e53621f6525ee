"""Explicitly constructed entry point bundling host, config and factories."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from layered_keymaps.config import LayersConfig
from layered_keymaps.help import HelpView
from layered_keymaps.host import BindingHost
from layered_keymaps.keymaps import BindingOverlay
from layered_keymaps.modes import ModeLayer
from layered_keymaps.runtime import telemetry


class Layers:
    """Factory for overlays and modes sharing one host and one config.

    ``setup`` may be called any number of times; the merged configuration
    applies to modes created afterwards, existing modes keep theirs.
    """

    def __init__(
        self,
        host: BindingHost,
        *,
        help_view: HelpView | None = None,
        config: LayersConfig | Mapping[str, Any] | None = None,
        logger_name: str | None = "layered_keymaps",
    ) -> None:
        self.host = host
        self.help_view = help_view
        if isinstance(config, LayersConfig):
            self.config = config
        else:
            self.config = LayersConfig.from_mapping(config)
        self._logger_name = logger_name

    def setup(self, opts: Optional[Mapping[str, Any]] = None) -> "Layers":
        self.config = self.config.merged(opts)
        telemetry.record_event(
            "layers.setup",
            level="debug",
            data={"sections": ",".join(sorted(opts or {}))},
            logger_name=self._logger_name,
        )
        return self

    def new_map(self) -> BindingOverlay:
        return BindingOverlay(self.host, logger_name=self._logger_name)

    def new_mode(
        self, name: str = "layer", *, help_view: HelpView | None = None
    ) -> ModeLayer:
        return ModeLayer(
            self.host,
            config=self.config.mode,
            help_view=help_view if help_view is not None else self.help_view,
            name=name,
        )


__all__ = ["Layers"]
