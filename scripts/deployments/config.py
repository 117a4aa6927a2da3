"""Typed loader for defaults/deployments.yml.

Optional settings for the rendered comment: the title line and extra
project -> subdomain display names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .comment_body import DEFAULT_TITLE


class ConfigError(RuntimeError):
    """Data class for Config Error."""
    pass


@dataclass(frozen=True)
class CommentConfig:
    """Data class for Comment Config."""
    title: str = DEFAULT_TITLE
    subdomains: dict[str, str] = field(default_factory=dict)


def _require_mapping(value: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{ctx}: expected mapping")
    return value


def _require_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{ctx}: expected string")
    s = value.strip()
    if not s:
        raise ConfigError(f"{ctx}: must be non-empty")
    return s


def _load_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"missing config file: {path}") from None
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e


def load_comment_config(path: Path | None) -> CommentConfig:
    """Load comment config; no path means built-in defaults."""
    if path is None:
        return CommentConfig()

    raw = _load_yaml(path)
    # An empty file is a valid "use defaults" config.
    if raw is None:
        return CommentConfig()
    cfg = _require_mapping(raw, "config")

    title = DEFAULT_TITLE
    if cfg.get("title") is not None:
        title = _require_str(cfg.get("title"), "config.title")
        if "\n" in title:
            raise ConfigError("config.title: must be a single line")

    subdomains: dict[str, str] = {}
    subdomains_raw = cfg.get("subdomains")
    if subdomains_raw is not None:
        subdomains_map = _require_mapping(subdomains_raw, "config.subdomains")
        for project, display in subdomains_map.items():
            key = _require_str(project, f"config.subdomains key '{project}'")
            subdomains[key] = _require_str(display, f"config.subdomains[{key}]")

    return CommentConfig(title=title, subdomains=subdomains)
