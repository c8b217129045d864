"""ShelfConfig: user config for the prompt store.

Location (first match wins):

    --config PATH / load_config(path)
    $PROMPTSHELF_CONFIG
    <user config dir>/promptshelf/promptshelf.toml

promptshelf.toml example:

    [storage]
    path = "~/Documents/prompts"   # absolute or ~/..., empty = default data directory
    format = "markdown"

    [logging]
    level = "WARNING"

The store only reads ``storage.path``, and only when it is handed the config
explicitly. Only the CLI writes this file.
"""

from __future__ import annotations

import logging
import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from promptshelf.errors import ShelfIOError, ValidationError

logger = logging.getLogger("promptshelf.config")

CONFIG_FILENAME = "promptshelf.toml"
CONFIG_ENV_VAR = "PROMPTSHELF_CONFIG"
_DEFAULT_FORMAT = "markdown"
_DEFAULT_LOG_LEVEL = "WARNING"

_STORAGE_PATH_RE = re.compile(r"^([ \t]*path[ \t]*=[ \t]*).*$", re.MULTILINE)
_STORAGE_SECTION_RE = re.compile(r"^\[storage\][ \t]*$", re.MULTILINE)


class ConfigError(ValidationError):
    """promptshelf.toml exists but cannot be parsed."""


@dataclass
class StorageConfig:
    path: str = ""                  # override root; empty = default data directory
    format: str = _DEFAULT_FORMAT


@dataclass
class LoggingConfig:
    level: str = _DEFAULT_LOG_LEVEL


@dataclass
class ShelfConfig:
    """Resolved configuration."""

    source: Path | None = None      # file the values came from, None if defaults
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def log_level(self) -> int:
        level = logging.getLevelName(self.logging.level.upper())
        return level if isinstance(level, int) else logging.WARNING


def default_config_path() -> Path:
    """$PROMPTSHELF_CONFIG, else the per-user config directory."""
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path(user_config_dir("promptshelf")) / CONFIG_FILENAME


def _section(raw: dict[str, Any], name: str, config_path: Path) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        msg = f"invalid config {config_path}: [{name}] must be a table"
        raise ConfigError(msg)
    return section


def load_config(path: Path | str | None = None) -> ShelfConfig:
    """Load promptshelf.toml. A missing file yields the defaults."""
    config_path = Path(path) if path else default_config_path()
    if not config_path.exists():
        logger.debug("no config at %s, using defaults", config_path)
        return ShelfConfig()

    try:
        with config_path.open("rb") as f:
            raw: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        msg = f"invalid config {config_path}: {exc}"
        raise ConfigError(msg) from exc
    except OSError as exc:
        msg = f"failed to read config {config_path}: {exc}"
        raise ShelfIOError(msg) from exc

    storage_section = _section(raw, "storage", config_path)
    logging_section = _section(raw, "logging", config_path)

    return ShelfConfig(
        source=config_path,
        storage=StorageConfig(
            path=str(storage_section.get("path", "")),
            format=str(storage_section.get("format", _DEFAULT_FORMAT)),
        ),
        logging=LoggingConfig(
            level=str(logging_section.get("level", _DEFAULT_LOG_LEVEL)),
        ),
    )


def _toml_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def init_config(path: Path, storage_path: str = "") -> Path:
    """Write a default promptshelf.toml at path. Raises if it already exists."""
    if path.exists():
        msg = f"{CONFIG_FILENAME} already exists at {path}"
        raise FileExistsError(msg)

    content = f"""\
[storage]
# Absolute path or ~/..., empty = default data directory (Documents/PromptShelf)
path = {_toml_string(storage_path)}
format = "{_DEFAULT_FORMAT}"

# [logging]
# level = "WARNING"   # DEBUG | INFO | WARNING | ERROR
"""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        msg = f"failed to write config {path}: {exc}"
        raise ShelfIOError(msg) from exc
    return path


def set_storage_path(path: Path, storage_path: str) -> Path:
    """Point ``storage.path`` at storage_path, keeping the rest of the file."""
    if not path.exists():
        return init_config(path, storage_path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"failed to read config {path}: {exc}"
        raise ShelfIOError(msg) from exc
    line = f"path = {_toml_string(storage_path)}"
    section = _STORAGE_SECTION_RE.search(text)
    if section is None:
        text = f"[storage]\n{line}\n\n{text}"
    else:
        # Only rewrite a path key inside [storage], i.e. before the next table.
        start = section.end()
        next_table = re.search(r"^\[", text[start:], re.MULTILINE)
        end = start + next_table.start() if next_table else len(text)
        body = text[start:end]
        if _STORAGE_PATH_RE.search(body):
            body = _STORAGE_PATH_RE.sub(lambda m: m.group(1) + _toml_string(storage_path), body, count=1)
        else:
            body = f"\n{line}{body}"
        text = text[:start] + body + text[end:]

    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        msg = f"failed to write config {path}: {exc}"
        raise ShelfIOError(msg) from exc
    return path
