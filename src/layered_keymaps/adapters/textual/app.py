"""Executable Textual demo that drives a layered mode from key presses."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use layered_keymaps.adapters.textual.app"
    ) from exc

from layered_keymaps.host import InMemoryHost
from layered_keymaps.modes import ModeLayer
from layered_keymaps.registry import Layers
from layered_keymaps.runtime import telemetry

from .help_view import TextualHelpView

NORMAL = "n"


@dataclass
class Cursor:
    row: int = 0
    col: int = 0

    def move(self, rows: int, cols: int) -> None:
        self.row = max(self.row + rows, 0)
        self.col = max(self.col + cols, 0)


class LayersDemoApp(App[None]):
    """Base bindings move a cursor; the "window" mode overlays them.

    ``m`` toggles the mode, ``o`` enters it for a single key, ``?`` toggles
    the help panel.
    """

    CSS = """
	Screen {
		layout: vertical;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#event-log {
		height: 1fr;
		padding: 1 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, auto_help: bool = True) -> None:
        super().__init__()
        self.caret = Cursor()
        self.binding_host = InMemoryHost(command_runner=self._run_command)
        self.keymap_layers = Layers(self.binding_host, help_view=TextualHelpView(self))
        self.layer_mode: ModeLayer = self._build_mode(auto_help)
        self.log_lines: list[str] = []
        self._status_widget: Static | None = None
        self._log_widget: Static | None = None
        self._install_base_bindings()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._log_widget = Static("", id="event-log")
        self._status_widget = Static("", id="status-line")
        yield self._log_widget
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_status()

    def on_key(self, event: events.Key) -> None:
        lhs = self._normalize_key(event)
        if lhs is None:
            return
        event.stop()
        if lhs == "m":
            self.layer_mode.toggle()
        elif lhs == "o" and not self.layer_mode.active():
            self.layer_mode.oneshot()
        elif lhs == "?":
            self.layer_mode.toggle_help()
        elif self.binding_host.get_binding(NORMAL, lhs) is not None:
            self.binding_host.trigger(NORMAL, lhs)
        else:
            self._append_log(f"unbound {lhs!r}")
        self._refresh_status()

    def _build_mode(self, auto_help: bool) -> ModeLayer:
        mode = self.keymap_layers.new_mode("window")
        mode.keymaps(
            {
                NORMAL: [
                    ("h", lambda: self._move(0, -8), {"desc": "jump left"}),
                    ("j", lambda: self._move(8, 0), {"desc": "jump down"}),
                    ("k", lambda: self._move(-8, 0), {"desc": "jump up"}),
                    ("l", lambda: self._move(0, 8), {"desc": "jump right"}),
                    ("x", "reset"),
                ]
            }
        )
        if auto_help:
            mode.auto_show_help()
        mode.add_hook(self._on_mode_change)
        return mode

    def _install_base_bindings(self) -> None:
        for lhs, rows, cols in (
            ("h", 0, -1),
            ("j", 1, 0),
            ("k", -1, 0),
            ("l", 0, 1),
        ):
            self.binding_host.install_binding(
                NORMAL,
                lhs,
                lambda rows=rows, cols=cols: self._move(rows, cols),
                {"desc": f"move {rows},{cols}"},
            )

    def _move(self, rows: int, cols: int) -> None:
        self.caret.move(rows, cols)
        self._append_log(f"cursor -> {self.caret.row},{self.caret.col}")

    def _run_command(self, command: str) -> None:
        if command == "reset":
            self.caret = Cursor()
        self._append_log(f"command {command!r}")

    def _on_mode_change(self, active: bool) -> None:
        self._append_log(f"mode {self.layer_mode.name} {'on' if active else 'off'}")
        telemetry.record_event(
            "demo.mode", data={"active": active}, logger_name="layered_keymaps.demo"
        )
        self._refresh_status()

    def _append_log(self, line: str) -> None:
        self.log_lines.append(line)
        if self._log_widget:
            self._log_widget.update("\n".join(self.log_lines[-20:]))

    def _refresh_status(self) -> None:
        if not self._status_widget:
            return
        state = "WINDOW" if self.layer_mode.active() else "NORMAL"
        self._status_widget.update(
            f"{state}  cursor {self.caret.row},{self.caret.col}"
        )

    @staticmethod
    def _normalize_key(event: events.Key) -> Optional[str]:
        if event.key in {"ctrl+c", "ctrl+q"}:
            return None
        if event.character and event.character.isprintable():
            return event.character
        return None


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the layered keymaps demo.")
    parser.add_argument(
        "--no-auto-help",
        action="store_true",
        help="Do not show the help panel automatically while the mode is active",
    )
    parser.add_argument(
        "--telemetry-preset",
        choices=("development", "production", "performance"),
        default=None,
        help="telelog preset used for the session",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.telemetry_preset:
        telemetry.configure(preset=args.telemetry_preset)
    app = LayersDemoApp(auto_help=not args.no_auto_help)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()

