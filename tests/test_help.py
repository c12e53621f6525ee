from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

import pytest

from layered_keymaps.config import HelpOptions, ModeConfig
from layered_keymaps.help import HelpViewMissingError, build_help_lines
from layered_keymaps.host import InMemoryHost
from layered_keymaps.keymaps import PendingBinding
from layered_keymaps.modes import ModeLayer


class RecordingView:
    def __init__(self) -> None:
        self.opened: List[Dict[str, Any]] = []
        self.closed: List[int] = []

    def open(
        self,
        lines: Sequence[str],
        view_config: Mapping[str, Any],
        view_options: Mapping[str, Any],
    ) -> int:
        self.opened.append(
            {
                "lines": list(lines),
                "config": dict(view_config),
                "options": dict(view_options),
            }
        )
        return len(self.opened)

    def close(self, handle: int) -> None:
        self.closed.append(handle)


def make_mode(view: RecordingView | None = None, **kwargs: Any) -> ModeLayer:
    if view is None:
        view = RecordingView()
    return ModeLayer(InMemoryHost(), help_view=view, **kwargs)


def test_single_mode_has_no_header() -> None:
    lines = build_help_lines(
        {"n": (PendingBinding("x", "cmd", {"desc": "delete"}),)}, HelpOptions()
    )

    assert lines == [" x: delete"]


def test_missing_description_uses_placeholder() -> None:
    lines = build_help_lines(
        {"n": (PendingBinding("x", "cmd"),)},
        HelpOptions(missing_desc_string="???"),
    )

    assert lines == [" x: ???"]


def test_empty_description_is_kept() -> None:
    lines = build_help_lines(
        {"n": (PendingBinding("x", "cmd", {"desc": ""}),)},
        HelpOptions(missing_desc_string="???"),
    )

    assert lines == [" x: "]


def test_headers_when_several_modes_populated() -> None:
    pending = {
        "n": (PendingBinding("a", "cmd", {"desc": "alpha"}),),
        "i": (PendingBinding("b", "cmd"),),
        "v": (),
    }

    lines = build_help_lines(pending, HelpOptions())

    assert lines == ["n:", " a: alpha", "i:", " b: unknown"]


def test_forced_headers_with_single_mode() -> None:
    lines = build_help_lines(
        {"n": (PendingBinding("a", "cmd"),)}, HelpOptions(force_mode_headers=True)
    )

    assert lines == ["n:", " a: unknown"]


def test_show_help_merges_defaults_with_call_site() -> None:
    view = RecordingView()
    mode = make_mode(view)
    mode.add("n", "j", "cmd", {"desc": "down"})
    mode.add("n", "k", "cmd")

    mode.show_help(
        {"missing_desc_string": "?"},
        {"width": 40, "title": "Window"},
        {"wrap": True},
    )

    opened = view.opened[-1]
    assert opened["lines"] == [" j: down", " k: ?"]
    assert opened["config"]["width"] == 40
    assert opened["config"]["title"] == "Window"
    assert opened["config"]["anchor"] == "SE"
    assert opened["config"]["height"] == 2
    assert opened["options"] == {"wrap": True, "winhl": "Normal:LayersHelpWindow"}
    assert mode.help_shown() is True


def test_show_help_keeps_explicit_height() -> None:
    view = RecordingView()
    mode = make_mode(view)
    mode.add("n", "j", "cmd")

    mode.show_help(view_config={"height": 10})

    assert view.opened[-1]["config"]["height"] == 10


def test_show_help_uses_mode_config_defaults() -> None:
    view = RecordingView()
    config = ModeConfig.from_mapping(
        {"help": {"force_mode_headers": True, "missing_desc_string": "-"}}
    )
    mode = make_mode(view, config=config)
    mode.add("n", "j", "cmd")

    mode.show_help()

    assert view.opened[-1]["lines"] == ["n:", " j: -"]


def test_show_help_twice_replaces_view() -> None:
    view = RecordingView()
    mode = make_mode(view)

    mode.show_help()
    mode.show_help()

    assert view.closed == [1]
    assert len(view.opened) == 2


def test_dismiss_without_view_is_noop() -> None:
    view = RecordingView()
    mode = make_mode(view)

    mode.dismiss_help()

    assert view.closed == []


def test_dismiss_on_mode_without_help_view_is_noop() -> None:
    mode = ModeLayer(InMemoryHost())

    mode.dismiss_help()

    assert mode.help_shown() is False


def test_toggle_help() -> None:
    view = RecordingView()
    mode = make_mode(view)

    mode.toggle_help()
    assert mode.help_shown() is True
    mode.toggle_help()

    assert mode.help_shown() is False
    assert view.closed == [1]


def test_auto_show_help_follows_activation() -> None:
    view = RecordingView()
    mode = make_mode(view)
    mode.add("n", "x", lambda: None, {"desc": "ex"})
    mode.auto_show_help()

    mode.activate()
    assert view.opened[-1]["lines"] == [" x: ex"]
    assert mode.help_shown() is True

    mode.deactivate()

    assert mode.help_shown() is False
    assert view.closed == [1]


def test_show_help_without_view_raises() -> None:
    mode = ModeLayer(InMemoryHost())

    with pytest.raises(HelpViewMissingError):
        mode.show_help()
