from __future__ import annotations

import pytest

from layered_keymaps.keymaps import (
    Absent,
    BindingOptions,
    Existing,
    PendingBinding,
    PendingStore,
    UnknownInputModeError,
    normalize_modes,
)
from layered_keymaps.keymaps.models import BindingDescriptor


def test_normalize_modes_accepts_single_name_and_sequences() -> None:
    assert normalize_modes("n") == ("n",)
    assert normalize_modes(["n", "v", "n"]) == ("n", "v")
    assert normalize_modes(("i",)) == ("i",)


def test_normalize_modes_rejects_unknown_and_empty() -> None:
    with pytest.raises(UnknownInputModeError) as excinfo:
        normalize_modes(["n", "normal"])
    assert excinfo.value.mode == "normal"

    with pytest.raises(ValueError):
        normalize_modes([])


def test_options_coerce_splits_known_and_extra_keys() -> None:
    options = BindingOptions.coerce({"desc": "down", "silent": True, "remap_hint": 1})

    assert options.desc == "down"
    assert options.silent is True
    assert options.noremap is True
    assert dict(options.extra) == {"remap_hint": 1}
    assert options.as_dict()["remap_hint"] == 1
    assert BindingOptions.coerce(None) == BindingOptions()
    assert BindingOptions.coerce(options) is options


def test_descriptors_compare_by_value() -> None:
    def action() -> None:
        return None

    first = BindingDescriptor("n", "j", action, BindingOptions(desc="d"))
    second = BindingDescriptor("n", "j", action, BindingOptions.coerce({"desc": "d"}))

    assert first == second
    assert Existing(first) == Existing(second)
    assert Existing(first) != Absent()


def test_pending_binding_validation() -> None:
    with pytest.raises(ValueError):
        PendingBinding("", "cmd")
    with pytest.raises(TypeError):
        PendingBinding("x", 42)  # type: ignore[arg-type]


def test_pending_binding_from_entry() -> None:
    binding = PendingBinding.from_entry(("x", "cmd", {"desc": "ex"}))

    assert binding.lhs == "x"
    assert binding.description == "ex"
    assert PendingBinding.from_entry(binding) is binding
    assert PendingBinding.from_entry(("y", "cmd")).description is None


def test_pending_store_reads_do_not_create_buckets() -> None:
    store = PendingStore()

    assert store.get("n") == ()
    assert dict(store.snapshot()) == {}

    store.append("v", PendingBinding("a", "cmd"))
    store.append("n", PendingBinding("b", "cmd"))
    store.bucket("i")

    assert [mode for mode, _ in store.items()] == ["v", "n", "i"]
    assert store.populated_modes() == ("v", "n")
    assert len(store) == 2


def test_pending_store_rejects_unknown_mode() -> None:
    with pytest.raises(UnknownInputModeError):
        PendingStore().append("normal", PendingBinding("a", "cmd"))
