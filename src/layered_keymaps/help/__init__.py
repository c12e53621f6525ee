"""Help listing helpers and the view contract."""

from .lines import build_help_lines, format_binding, widest_line
from .view import HelpView, HelpViewMissingError

__all__ = [
    "HelpView",
    "HelpViewMissingError",
    "build_help_lines",
    "format_binding",
    "widest_line",
]
