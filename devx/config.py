from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import jsonschema

from .errors import ValidationError
from .utils.yamlio import read_yaml


DEFAULT_REPOSITORY = "ajndkr/devx"
DEFAULT_BINARY_NAME = "devx"
DEFAULT_BRANCH = "main"
COLOR_CHOICES = ("always", "never", "auto")


def _default_install_script_url(repository: str) -> str:
    return f"https://raw.githubusercontent.com/{repository}/main/install.sh"


CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "repository": {"type": "string", "pattern": r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$"},
        "binary_name": {"type": "string", "minLength": 1, "pattern": r"^[^/\s]+$"},
        "install_dir": {"type": "string", "minLength": 1},
        "default_branch": {"type": "string", "minLength": 1},
        "color": {"type": "string", "enum": list(COLOR_CHOICES)},
        "install_script_url": {"type": "string", "pattern": r"^https://"},
    },
    "additionalProperties": False,
}


@dataclass(frozen=True)
class Settings:
    repository: str = DEFAULT_REPOSITORY
    binary_name: str = DEFAULT_BINARY_NAME
    install_dir: Path = Path("~/.local/bin").expanduser()
    default_branch: str = DEFAULT_BRANCH
    color: str = "auto"
    install_script_url: str = _default_install_script_url(DEFAULT_REPOSITORY)
    config_path: Optional[Path] = None

    @property
    def install_path(self) -> Path:
        return self.install_dir / self.binary_name

    @property
    def config_dir(self) -> Path:
        return (self.config_path or default_config_path()).parent


def default_config_path() -> Path:
    base = str(os.environ.get("XDG_CONFIG_HOME", "") or "").strip()
    root = Path(base).expanduser() if base else Path("~/.config").expanduser()
    return (root / "devx" / "config.yml").resolve()


def resolve_config_path(cli_path: Optional[str] = None) -> Tuple[Path, bool]:
    """Resolve the config file path.

    Precedence:
      1) CLI flag --config
      2) DEVX_CONFIG
      3) $XDG_CONFIG_HOME/devx/config.yml (falls back to ~/.config)

    Returns the path and whether it was requested explicitly.
    """
    if cli_path and str(cli_path).strip():
        return Path(str(cli_path).strip()).expanduser().resolve(), True

    env_path = str(os.environ.get("DEVX_CONFIG", "") or "").strip()
    if env_path:
        return Path(env_path).expanduser().resolve(), True

    return default_config_path(), False


def validate_config(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    try:
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        where = f" ({path})" if path is not None else ""
        raise ValidationError(f"config validation failed{where}: {e.message}") from e


def load_settings(cli_path: Optional[str] = None) -> Settings:
    """Load settings from YAML, then apply environment overrides.

    Environment overrides:
      - DEVX_INSTALL_DIR
      - DEVX_COLOR (always|never|auto)
    """
    path, explicit = resolve_config_path(cli_path)
    data: Dict[str, Any] = {}
    if path.exists():
        data = read_yaml(path)
        validate_config(data, path)
    elif explicit:
        raise ValidationError(f"config file not found: {path}")

    repository = str(data.get("repository") or DEFAULT_REPOSITORY)
    install_dir = str(os.environ.get("DEVX_INSTALL_DIR", "") or "").strip() or str(data.get("install_dir") or "~/.local/bin")

    color = str(os.environ.get("DEVX_COLOR", "") or "").strip().lower() or str(data.get("color") or "auto")
    if color not in COLOR_CHOICES:
        raise ValidationError(f"DEVX_COLOR must be one of {list(COLOR_CHOICES)}, got {color!r}")

    return Settings(
        repository=repository,
        binary_name=str(data.get("binary_name") or DEFAULT_BINARY_NAME),
        install_dir=Path(install_dir).expanduser(),
        default_branch=str(data.get("default_branch") or DEFAULT_BRANCH),
        color=color,
        install_script_url=str(data.get("install_script_url") or _default_install_script_url(repository)),
        config_path=path if path.exists() else None,
    )
