"""Gateway: YAML configuration loader."""

from __future__ import annotations

from pathlib import Path

import yaml

from crazy_notes.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS


class YamlConfigLoader:
    """Reads the user's YAML config and merges command-line overrides on top."""

    def __init__(self, default_paths: list[Path] | None = None) -> None:
        self._default_paths = default_paths if default_paths is not None else DEFAULT_CONFIG_PATHS

    def load_raw(
        self,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> dict:
        """Return the merged YAML data as a raw dict (before Pydantic validation)."""
        data: dict = {}
        if config_path is not None:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f'Config file not found: {path}')
            data = _read_yaml(path)
        else:
            for default_path in self._default_paths:
                if default_path.exists():
                    data = _read_yaml(default_path)
                    break
        if overrides:
            deep_merge(data, overrides)
        return data


def _read_yaml(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    if not isinstance(data, dict):
        raise ValueError(f'Config file must contain a mapping: {path}')
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
