"""Configuration loading for batctl from YAML, environment and defaults."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Hashable
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator, ValidationError

from batctl.core.errors import ConfigLoadError, ConfigValidationError
from batctl.core.model import Settings

DEFAULT_SOCKET_PATH = "/var/run/batctl.sock"
DEFAULT_LOG_LEVEL = "WARNING"
SOCKET_ENV = "BATCTL_SOCKET"
LOG_LEVEL_ENV = "BATCTL_LOG_LEVEL"
LOGGER = logging.getLogger(__name__)


class _StrictLoader(yaml.SafeLoader):
    """Safe loader whose mappings reject repeated keys."""

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        seen: set[Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


@lru_cache(maxsize=1)
def _schema_validator() -> Draft202012Validator:
    schema = resources.files("batctl.schemas").joinpath("config.schema.json")
    return Draft202012Validator(json.loads(schema.read_text(encoding="utf-8")))


def config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "batctl/config.yaml"


def _read_config(path: Path) -> dict[str, Any]:
    try:
        doc = yaml.load(path.read_text(encoding="utf-8"), Loader=_StrictLoader)
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    # An empty file means "all defaults".
    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")

    try:
        _schema_validator().validate(doc)
    except ValidationError as exc:
        field = ".".join(str(p) for p in exc.path) or "<root>"
        raise ConfigValidationError(f"Invalid setting {field} in {path}: {exc.message}") from exc
    return doc


def load_settings(path: Path | None = None) -> Settings:
    """Resolve settings from defaults, the config file and the environment.

    A missing config file is not an error; an unreadable or invalid one is.
    """
    source = path or config_path()
    doc: dict[str, Any] = {}
    if source.exists():
        doc = _read_config(source)
        LOGGER.debug("loaded config from %s", source)

    socket_path = os.environ.get(SOCKET_ENV) or doc.get("socket_path", DEFAULT_SOCKET_PATH)
    log_level = os.environ.get(LOG_LEVEL_ENV) or doc.get("log_level", DEFAULT_LOG_LEVEL)
    timeout_s = doc.get("timeout_s")

    return Settings(
        socket_path=socket_path,
        log_level=log_level.upper(),
        timeout_s=float(timeout_s) if timeout_s is not None else None,
    )
