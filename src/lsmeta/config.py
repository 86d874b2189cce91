from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .globs import IgnoreGlobs
from .models import Display, Layout

CONFIG_ENV_VAR = "LSMETA_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/lsmeta/config.toml")

_KNOWN_KEYS = {"dereference", "display", "layout", "depth", "ignore-globs", "total-size"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class WalkConfig:
    dereference: bool = False
    display: Display = Display.VISIBLE_ONLY
    layout: Layout = Layout.GRID
    depth: int | None = None
    ignore_globs: IgnoreGlobs = field(default_factory=IgnoreGlobs)
    total_size: bool = False

    def __post_init__(self) -> None:
        if self.depth is not None and self.depth < 0:
            raise ConfigError(f"depth must be zero or positive, got {self.depth}")

    def merged(self, **overrides: Any) -> WalkConfig:
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)

    def recursion_depth(self) -> int | None:
        """Depth handed to the walker for the root; None means unlimited.

        Without an explicit depth only the tree layout descends past the
        root's direct children.
        """
        if self.depth is not None:
            return self.depth
        return None if self.layout == Layout.TREE else 1


def default_config_path() -> Path:
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def _enum_value(enum_cls: type[Display] | type[Layout], key: str, raw: object) -> Any:
    try:
        return enum_cls(str(raw).replace("-", "_"))
    except ValueError:
        choices = ", ".join(item.value for item in enum_cls)
        raise ConfigError(f"invalid {key} {raw!r}; expected one of: {choices}") from None


def config_from_mapping(data: dict[str, Any]) -> WalkConfig:
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")

    config = WalkConfig()
    changes: dict[str, Any] = {}
    if "dereference" in data:
        if not isinstance(data["dereference"], bool):
            raise ConfigError("dereference must be a boolean")
        changes["dereference"] = data["dereference"]
    if "total-size" in data:
        if not isinstance(data["total-size"], bool):
            raise ConfigError("total-size must be a boolean")
        changes["total_size"] = data["total-size"]
    if "display" in data:
        changes["display"] = _enum_value(Display, "display", data["display"])
    if "layout" in data:
        changes["layout"] = _enum_value(Layout, "layout", data["layout"])
    if "depth" in data:
        depth = data["depth"]
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
            raise ConfigError("depth must be a non-negative integer")
        changes["depth"] = depth
    if "ignore-globs" in data:
        globs = data["ignore-globs"]
        if not isinstance(globs, list) or not all(isinstance(g, str) for g in globs):
            raise ConfigError("ignore-globs must be a list of strings")
        changes["ignore_globs"] = IgnoreGlobs(globs)
    return replace(config, **changes)


def load_config(path: Path | None = None) -> WalkConfig:
    """Load a TOML configuration file; a missing file yields the defaults."""
    config_path = path.expanduser() if path is not None else default_config_path()
    if not config_path.is_file():
        if path is not None:
            raise ConfigError(f"configuration file not found: {config_path}")
        return WalkConfig()
    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{config_path}: {exc}") from exc
    return config_from_mapping(data)
