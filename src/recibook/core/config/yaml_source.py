"""YAML settings source: base files merged with per-environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic_settings import PydanticBaseSettingsSource


if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict with ``override`` merged into ``base`` recursively."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _default_config_dir() -> Path:
    # src/recibook/core/config/yaml_source.py -> <project root>/config
    return Path(__file__).resolve().parents[4] / "config"


class MultiYamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load ``config/base/*.yaml`` then ``config/environments/{APP_ENV}/*.yaml``.

    Files in each directory are applied in name order; later files win.
    ``RECIBOOK_CONFIG_DIR`` points the loader at a different directory.
    """

    def __init__(self, settings_cls: type[Any]) -> None:
        super().__init__(settings_cls)
        override = os.getenv("RECIBOOK_CONFIG_DIR")
        self._config_dir = Path(override) if override else _default_config_dir()
        self._app_env = os.getenv("APP_ENV", "development")
        self._yaml_data = self._load()

    def _load(self) -> dict[str, Any]:
        merged: dict[str, Any] = {}
        for directory in (
            self._config_dir / "base",
            self._config_dir / "environments" / self._app_env,
        ):
            if not directory.exists():
                continue
            for yaml_file in sorted(directory.glob("*.yaml")):
                with yaml_file.open(encoding="utf-8") as f:
                    merged = deep_merge(merged, yaml.safe_load(f) or {})
        return merged

    def get_field_value(
        self,
        _field: FieldInfo,
        field_name: str,
    ) -> tuple[Any, str, bool]:
        value = self._yaml_data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, Any]:
        return self._yaml_data
