"""Layered keymaps: restorable binding overlays and togglable modes."""

__all__ = [
    "adapters",
    "config",
    "help",
    "host",
    "keymaps",
    "modes",
    "registry",
    "runtime",
]

__version__ = "0.1.0"
