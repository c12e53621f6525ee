"""Flatten pending bindings into the text shown by a help view."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from layered_keymaps.config import HelpOptions
from layered_keymaps.keymaps.models import PendingBinding


def format_binding(binding: PendingBinding, missing_desc_string: str) -> str:
    description = binding.description
    if description is None:
        description = missing_desc_string
    return f" {binding.lhs}: {description}"


def build_help_lines(
    pending: Mapping[str, Sequence[PendingBinding]],
    options: HelpOptions,
) -> list[str]:
    """One line per binding, with ``"<mode>:"`` headers where needed.

    Headers appear when more than one mode has bindings, or always when
    ``options.force_mode_headers`` is set. Modes without bindings are skipped.
    """

    populated = [(mode, bindings) for mode, bindings in pending.items() if bindings]
    with_headers = len(populated) > 1 or options.force_mode_headers
    lines: list[str] = []
    for mode, bindings in populated:
        if with_headers:
            lines.append(f"{mode}:")
        lines.extend(
            format_binding(binding, options.missing_desc_string) for binding in bindings
        )
    return lines


def widest_line(lines: Iterable[str]) -> int:
    return max((len(line) for line in lines), default=0)


__all__ = ["build_help_lines", "format_binding", "widest_line"]
