"""Repository configuration: read/write .gitlet/config (INI format)."""

from __future__ import annotations

import configparser
import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .constants import CONFIG_FILENAME, SPLIT_DISTANCE_FIRST, SPLIT_DISTANCE_SHORTEST
from .errors import InvalidConfigKeyError
from .util import read_text_safe, write_text_atomic

if TYPE_CHECKING:
    from .repo import Repository

logger = logging.getLogger(__name__)

SPLIT_DISTANCE_KEY = "merge.splitdistance"


def _config_path(repo: "Repository") -> Path:
    return repo.gitlet_dir / CONFIG_FILENAME


def _parse_key(key: str) -> tuple[str, str]:
    """Return (section, option). Raises InvalidConfigKeyError if key invalid."""
    parts = key.split(".")
    if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
        raise InvalidConfigKeyError(f"invalid config key: {key!r} (expected section.option)")
    return parts[0].strip(), parts[1].strip()


def read_config(repo: "Repository") -> configparser.ConfigParser:
    """Read .gitlet/config. Return empty parser if file missing or unreadable."""
    repo.require_repo()
    path = _config_path(repo)
    cfg = configparser.ConfigParser()
    if path.exists():
        try:
            content = read_text_safe(path)
            if content:
                cfg.read_string(content)
        except configparser.Error as e:
            logger.warning("ignoring unreadable config %s: %s", path, e)
    return cfg


def write_config(repo: "Repository", cfg: configparser.ConfigParser) -> None:
    """Write config to .gitlet/config atomically."""
    repo.require_repo()
    buf = io.StringIO()
    cfg.write(buf)
    write_text_atomic(_config_path(repo), buf.getvalue())


def get_value(repo: "Repository", key: str) -> Optional[str]:
    """Get config value for key (section.option). Return None if missing."""
    section, option = _parse_key(key)
    cfg = read_config(repo)
    if cfg.has_section(section) and cfg.has_option(section, option):
        return cfg.get(section, option)
    return None


def set_value(repo: "Repository", key: str, value: str) -> None:
    """Set config value. Creates section if needed."""
    section, option = _parse_key(key)
    cfg = read_config(repo)
    if not cfg.has_section(section):
        cfg.add_section(section)
    cfg.set(section, option, value)
    write_config(repo, cfg)


def unset_value(repo: "Repository", key: str) -> bool:
    """Remove config option. Remove section if empty. Return True if something removed."""
    section, option = _parse_key(key)
    cfg = read_config(repo)
    if not cfg.has_section(section) or not cfg.has_option(section, option):
        return False
    cfg.remove_option(section, option)
    if not cfg.options(section):
        cfg.remove_section(section)
    write_config(repo, cfg)
    return True


def list_values(repo: "Repository") -> list[tuple[str, str]]:
    """Return [(key, value), ...] sorted by key (section.option)."""
    cfg = read_config(repo)
    result: list[tuple[str, str]] = []
    for section in sorted(cfg.sections()):
        for option in sorted(cfg.options(section)):
            result.append((f"{section}.{option}", cfg.get(section, option)))
    return result


def use_shortest_split_distance(repo: "Repository") -> bool:
    """True when merge.splitdistance selects minimum ancestor distances.

    Unknown values fall back to the first-recorded policy.
    """
    value = (get_value(repo, SPLIT_DISTANCE_KEY) or SPLIT_DISTANCE_FIRST).strip().lower()
    if value not in (SPLIT_DISTANCE_FIRST, SPLIT_DISTANCE_SHORTEST):
        logger.warning("unknown %s value %r, using %r", SPLIT_DISTANCE_KEY, value, SPLIT_DISTANCE_FIRST)
        return False
    return value == SPLIT_DISTANCE_SHORTEST
