"""gostub configuration ([tool.gostub] in pyproject.toml, or gostub.toml) loading and validation."""
from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gostub.internals.errors import ERR
from gostub.quickfix.resolver import NamingPolicy

CONFIG_NAME = "gostub.toml"
PYPROJECT_NAME = "pyproject.toml"

KNOWN_KEYS = frozenset({"naming", "color"})


class ConfigError(Exception):
    code = ERR.GS4001.code

    def __init__(self, path: Path | str, reason: str):
        super().__init__(ERR.GS4001.format(path=str(path), reason=reason))
        self.path = Path(path)


@dataclass
class StubConfig:
    naming_policy: NamingPolicy = NamingPolicy.IDENTIFIER
    use_color: Optional[bool] = None     # None: decide from the terminal
    source: Optional[Path] = None


def find_config(start: Path | None = None) -> Optional[Path]:
    """Nearest gostub.toml, or pyproject.toml with a [tool.gostub] table, at or above `start`."""
    directory = (start or Path.cwd()).resolve()
    for d in (directory, *directory.parents):
        candidate = d / CONFIG_NAME
        if candidate.is_file():
            return candidate
        pyproject = d / PYPROJECT_NAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def _has_tool_table(pyproject: Path) -> bool:
    try:
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return False
    tool = data.get("tool")
    return isinstance(tool, dict) and "gostub" in tool


def load_config(start: Path | None = None) -> StubConfig:
    """Load the nearest configuration; defaults when there is none."""
    path = find_config(start)
    if path is None:
        return StubConfig()
    return load_config_file(path)


def load_config_file(path: Path) -> StubConfig:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(path, str(e)) from e
    if path.name == PYPROJECT_NAME:
        tool = data.get("tool", {})
        data = tool.get("gostub", {}) if isinstance(tool, dict) else None
        if not isinstance(data, dict):
            raise ConfigError(path, "[tool.gostub] must be a table")
    return _parse_config(data, path)


def _parse_config(data: dict, path: Path) -> StubConfig:
    unknown = sorted(set(data) - KNOWN_KEYS)
    if unknown:
        raise ConfigError(path, f"unknown key '{unknown[0]}'")

    config = StubConfig(source=path)
    if "naming" in data:
        try:
            config.naming_policy = NamingPolicy(data["naming"])
        except ValueError:
            choices = ", ".join(p.value for p in NamingPolicy)
            raise ConfigError(path, f"naming must be one of {choices}, not {data['naming']!r}") from None
    if "color" in data:
        if not isinstance(data["color"], bool):
            raise ConfigError(path, "color must be true or false")
        config.use_color = data["color"]
    return config
