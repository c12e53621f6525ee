"""Help listing rendered as a docked Textual panel."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from textual.app import App
from textual.widgets import Static

from layered_keymaps.help import widest_line
from layered_keymaps.runtime import telemetry

# window border names -> Textual border types
BORDER_TYPES: Mapping[str, str] = {
    "rounded": "round",
    "single": "solid",
    "solid": "solid",
    "double": "double",
    "shadow": "outer",
    "none": "none",
}


def highlight_classes(winhl: str | None) -> tuple[str, ...]:
    """``"Normal:LayersHelpWindow,Border:X"`` -> ``("LayersHelpWindow", "X")``."""

    if not winhl:
        return ()
    classes: list[str] = []
    for pair in winhl.split(","):
        _, _, group = pair.partition(":")
        group = group.strip()
        if group and group not in classes:
            classes.append(group)
    return tuple(classes)


class HelpPanel(Static):
    """Static panel listing one line per overlaid binding."""

    DEFAULT_CSS = """
    HelpPanel {
        padding: 0 1;
        background: $panel;
    }
    """


class TextualHelpView:
    """:class:`~layered_keymaps.help.HelpView` that mounts panels on an app.

    Recognised ``view_config`` keys: ``width``, ``height``, ``anchor``,
    ``title`` and ``border``. ``view_options["winhl"]`` becomes CSS classes.
    """

    def __init__(self, app: App[Any], *, logger_name: str | None = None) -> None:
        self.app = app
        self._logger_name = logger_name

    def open(
        self,
        lines: Sequence[str],
        view_config: Mapping[str, Any],
        view_options: Mapping[str, Any],
    ) -> HelpPanel:
        panel = HelpPanel("\n".join(lines), markup=False, classes="layers-help")
        for name in highlight_classes(view_options.get("winhl")):
            panel.add_class(name)

        border = BORDER_TYPES.get(str(view_config.get("border", "none")), "round")
        has_border = border != "none"
        if has_border:
            panel.styles.border = (border, "white")
        title = view_config.get("title")
        if title:
            panel.border_title = str(title)

        # border-box sizing: add the frame and the horizontal padding
        frame = 2 if has_border else 0
        width = int(view_config.get("width") or widest_line(lines)) + frame + 2
        height = int(view_config.get("height") or len(lines)) + frame
        panel.styles.width = width
        panel.styles.height = height

        anchor = str(view_config.get("anchor", "SE")).upper()
        panel.styles.dock = "bottom" if anchor.startswith("S") else "top"
        if anchor.endswith("E"):
            offset = max(self.app.size.width - width, 0)
            panel.styles.offset = (offset, 0)

        self.app.mount(panel)
        telemetry.record_event(
            "help.open",
            level="debug",
            data={"lines": len(lines), "anchor": anchor},
            logger_name=self._logger_name,
        )
        return panel

    def close(self, handle: HelpPanel) -> None:
        handle.remove()
        telemetry.record_event(
            "help.close", level="debug", logger_name=self._logger_name
        )


__all__ = ["BORDER_TYPES", "HelpPanel", "TextualHelpView", "highlight_classes"]
