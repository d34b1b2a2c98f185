"""YAML settings source layering base files with per-environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic_settings import PydanticBaseSettingsSource


if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


# src/auth_gateway/core/config/yaml_source.py -> project root
_PROJECT_ROOT = Path(__file__).resolve().parents[4]


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested mappings are merged key by key; any other value (lists included)
    in ``override`` replaces the one in ``base``.
    """
    result = base.copy()
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


def load_yaml_directory(directory: Path) -> dict[str, Any]:
    """Merge every ``*.yaml`` file in ``directory`` in filename order.

    A missing directory yields an empty mapping.
    """
    merged: dict[str, Any] = {}
    if not directory.is_dir():
        return merged
    for yaml_file in sorted(directory.glob("*.yaml")):
        with yaml_file.open(encoding="utf-8") as f:
            merged = deep_merge(merged, yaml.safe_load(f) or {})
    return merged


class MultiYamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by ``config/base`` and ``config/environments/<APP_ENV>``.

    ``CONFIG_DIR`` points the source at another configuration tree, which is
    how deployments ship their own YAML without rebuilding the image.
    """

    def __init__(self, settings_cls: type[Any]) -> None:
        super().__init__(settings_cls)
        self._config_dir = Path(os.getenv("CONFIG_DIR", _PROJECT_ROOT / "config"))
        self._app_env = os.getenv("APP_ENV", "development")
        base = load_yaml_directory(self._config_dir / "base")
        overrides = load_yaml_directory(
            self._config_dir / "environments" / self._app_env
        )
        self._yaml_data = deep_merge(base, overrides)

    def get_field_value(
        self,
        _field: FieldInfo,
        field_name: str,
    ) -> tuple[Any, str, bool]:
        value = self._yaml_data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, Any]:
        return self._yaml_data
