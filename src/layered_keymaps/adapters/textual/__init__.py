"""Textual rendering of mode help panels, plus a runnable demo."""

from .help_view import BORDER_TYPES, HelpPanel, TextualHelpView, highlight_classes

__all__ = ["BORDER_TYPES", "HelpPanel", "TextualHelpView", "highlight_classes"]
