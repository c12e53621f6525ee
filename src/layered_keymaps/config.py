"""Configuration defaults for overlays, modes and the help window."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


class ConfigError(ValueError):
    """Raised for unknown sections or mistyped values in a config mapping."""


def deep_merge(
    base: Mapping[str, Any], override: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested mappings merge key by key; any other value in ``override`` replaces
    the one in ``base``. Neither input is mutated.
    """

    merged: Dict[str, Any] = {key: deepcopy(value) for key, value in base.items()}
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


def _check_keys(
    section: str, data: Mapping[str, Any], allowed: tuple[str, ...]
) -> None:
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise ConfigError(f"Unknown option(s) in '{section}': {', '.join(unknown)}")


DEFAULT_WINDOW_CONFIG: Mapping[str, Any] = MappingProxyType(
    {
        "relative": "editor",
        "width": 24,
        # height follows the number of help lines unless set explicitly
        "anchor": "SE",
        "style": "minimal",
        "title": "Overlaid Maps",
        "border": "rounded",
    }
)

DEFAULT_WINDOW_OPTS: Mapping[str, Any] = MappingProxyType(
    {
        "wrap": False,
        "winhl": "Normal:LayersHelpWindow",
    }
)


@dataclass(frozen=True, slots=True)
class HelpOptions:
    """How the help listing is laid out."""

    force_mode_headers: bool = False
    missing_desc_string: str = "unknown"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "HelpOptions":
        data = data or {}
        _check_keys("mode.help", data, ("force_mode_headers", "missing_desc_string"))
        options = cls(**data)
        if not isinstance(options.force_mode_headers, bool):
            raise ConfigError("mode.help.force_mode_headers must be a boolean")
        if not isinstance(options.missing_desc_string, str):
            raise ConfigError("mode.help.missing_desc_string must be a string")
        return options

    def as_dict(self) -> Dict[str, Any]:
        return {
            "force_mode_headers": self.force_mode_headers,
            "missing_desc_string": self.missing_desc_string,
        }


@dataclass(frozen=True, slots=True)
class WindowOptions:
    """Placement (``config``) and appearance (``opts``) of the help view."""

    config: Mapping[str, Any] = field(
        default_factory=lambda: dict(DEFAULT_WINDOW_CONFIG)
    )
    opts: Mapping[str, Any] = field(default_factory=lambda: dict(DEFAULT_WINDOW_OPTS))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "WindowOptions":
        data = data or {}
        _check_keys("mode.window", data, ("config", "opts"))
        for key in ("config", "opts"):
            if key in data and not isinstance(data[key], Mapping):
                raise ConfigError(f"mode.window.{key} must be a mapping")
        return cls(
            config=deep_merge(DEFAULT_WINDOW_CONFIG, data.get("config")),
            opts=deep_merge(DEFAULT_WINDOW_OPTS, data.get("opts")),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {"config": dict(self.config), "opts": dict(self.opts)}


@dataclass(frozen=True, slots=True)
class ModeConfig:
    """Defaults embedded into every new mode."""

    help: HelpOptions = field(default_factory=HelpOptions)
    window: WindowOptions = field(default_factory=WindowOptions)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ModeConfig":
        data = data or {}
        _check_keys("mode", data, ("help", "window"))
        return cls(
            help=HelpOptions.from_mapping(data.get("help")),
            window=WindowOptions.from_mapping(data.get("window")),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {"help": self.help.as_dict(), "window": self.window.as_dict()}


@dataclass(frozen=True, slots=True)
class LayersConfig:
    """Top-level configuration.

    ``map`` is reserved; overlays currently take no options.
    """

    mode: ModeConfig = field(default_factory=ModeConfig)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "LayersConfig":
        data = data or {}
        _check_keys("layers", data, ("map", "mode"))
        if data.get("map") is not None:
            raise ConfigError("'map' takes no options")
        return cls(mode=ModeConfig.from_mapping(data.get("mode")))

    def as_dict(self) -> Dict[str, Any]:
        return {"map": None, "mode": self.mode.as_dict()}

    def merged(self, overrides: Mapping[str, Any] | None) -> "LayersConfig":
        """Return a new config with ``overrides`` deep-merged on top."""

        return LayersConfig.from_mapping(deep_merge(self.as_dict(), overrides))


__all__ = [
    "ConfigError",
    "DEFAULT_WINDOW_CONFIG",
    "DEFAULT_WINDOW_OPTS",
    "HelpOptions",
    "LayersConfig",
    "ModeConfig",
    "WindowOptions",
    "deep_merge",
]
