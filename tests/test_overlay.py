from __future__ import annotations

from typing import Optional

import pytest

from layered_keymaps.host import HostBindingError, InMemoryHost
from layered_keymaps.keymaps import (
    Absent,
    BindingDescriptor,
    BindingKey,
    BindingOptions,
    BindingOverlay,
    Existing,
    UnknownInputModeError,
)


def move_down() -> str:
    return "down"


def move_up() -> str:
    return "up"


class FlakyHost(InMemoryHost):
    """Fails restoring one chosen key."""

    def __init__(self, fail_lhs: str) -> None:
        super().__init__()
        self.fail_lhs = fail_lhs
        self.armed = False

    def remove_binding(self, mode: str, lhs: str) -> None:
        if self.armed and lhs == self.fail_lhs:
            raise HostBindingError("boom", mode=mode, lhs=lhs)
        super().remove_binding(mode, lhs)

    def reinstall_binding(self, descriptor: BindingDescriptor) -> None:
        if self.armed and descriptor.lhs == self.fail_lhs:
            raise HostBindingError("boom", mode=descriptor.mode, lhs=descriptor.lhs)
        super().reinstall_binding(descriptor)


def make_host(*bindings: tuple[str, str, object]) -> InMemoryHost:
    host = InMemoryHost()
    for mode, lhs, rhs in bindings:
        host.install_binding(mode, lhs, rhs, BindingOptions(desc=f"{lhs} original"))
    return host


def current(host: InMemoryHost, mode: str, lhs: str) -> Optional[BindingDescriptor]:
    return host.get_binding(mode, lhs)


def test_set_installs_binding_and_captures_absent() -> None:
    host = make_host()
    overlay = BindingOverlay(host)

    overlay.set("n", "x", move_up, {"desc": "delete"})

    descriptor = current(host, "n", "x")
    assert descriptor is not None
    assert descriptor.rhs is move_up
    assert descriptor.options.desc == "delete"
    assert overlay.record_for("n", "x") == Absent()


def test_clear_restores_existing_binding_verbatim() -> None:
    host = make_host(("n", "j", move_down))
    before = current(host, "n", "j")
    overlay = BindingOverlay(host)

    overlay.set("n", "j", move_up, {})
    assert host.trigger("n", "j") == "up"
    overlay.clear()

    assert current(host, "n", "j") == before
    assert host.trigger("n", "j") == "down"


def test_clear_removes_binding_that_was_absent() -> None:
    host = make_host()
    overlay = BindingOverlay(host)

    overlay.set("n", "x", move_up)
    overlay.clear()

    assert current(host, "n", "x") is None
    assert len(host) == 0


def test_capture_happens_once_per_key() -> None:
    host = make_host(("n", "j", move_down))
    before = current(host, "n", "j")
    overlay = BindingOverlay(host)

    overlay.set("n", "j", move_up)
    overlay.set("n", "j", lambda: "sideways")
    assert host.trigger("n", "j") == "sideways"

    record = overlay.record_for("n", "j")
    assert isinstance(record, Existing)
    assert record.descriptor == before

    overlay.clear()

    assert current(host, "n", "j") == before


def test_set_accepts_several_modes() -> None:
    host = make_host(("i", "<C-j>", move_down))
    overlay = BindingOverlay(host)

    overlay.set(["n", "i"], "<C-j>", move_up)

    assert host.trigger("n", "<C-j>") == "up"
    assert host.trigger("i", "<C-j>") == "up"
    assert set(overlay.records()) == {
        BindingKey("n", "<C-j>"),
        BindingKey("i", "<C-j>"),
    }

    overlay.clear()

    assert current(host, "n", "<C-j>") is None
    assert host.trigger("i", "<C-j>") == "down"


def test_set_rejects_unknown_mode() -> None:
    overlay = BindingOverlay(make_host())

    with pytest.raises(UnknownInputModeError):
        overlay.set("q", "x", move_up)


def test_clear_on_empty_overlay_is_noop() -> None:
    host = make_host(("n", "j", move_down))
    overlay = BindingOverlay(host)

    overlay.clear()
    overlay.clear()

    assert overlay.is_empty
    assert len(host) == 1


def test_clear_drains_store() -> None:
    host = make_host()
    overlay = BindingOverlay(host)
    overlay.set("n", "a", move_up)
    overlay.set("v", "b", move_up)

    overlay.clear()

    assert overlay.is_empty
    assert len(overlay) == 0
    assert dict(overlay.records()) == {}


def test_partial_clear_failure_keeps_unrestored_keys() -> None:
    host = FlakyHost(fail_lhs="b")
    overlay = BindingOverlay(host)
    overlay.set("n", "a", move_up)
    overlay.set("n", "b", move_up)
    overlay.set("n", "c", move_up)
    host.armed = True

    with pytest.raises(HostBindingError):
        overlay.clear()

    assert current(host, "n", "a") is None
    assert set(overlay.records()) == {BindingKey("n", "b"), BindingKey("n", "c")}

    host.armed = False
    overlay.clear()

    assert len(host) == 0
    assert overlay.is_empty


def test_install_errors_propagate() -> None:
    host = make_host()
    overlay = BindingOverlay(host)

    with pytest.raises(HostBindingError):
        overlay.set("n", "", move_up)

    assert overlay.record_for("n", "") is None
    assert overlay.is_empty
