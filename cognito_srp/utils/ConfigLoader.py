#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import yaml
from pathlib import Path
from copy import deepcopy

# GLOBALS
_config = None

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "etc" / "config.yaml"


def _merge_dicts(base: dict, override: dict) -> dict:
    """
    Shallow+nested merge: values in override win; dict values are merged recursively.
    """
    result = deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _merge_dicts(result[k], v)
        else:
            result[k] = deepcopy(v)
    return result


def _read_yaml(filepath: Path) -> dict:
    try:
        with open(filepath, "r", encoding="utf-8") as file:
            data = yaml.safe_load(file) or {}
    except FileNotFoundError:
        raise RuntimeError(f"Configuration file not found at {filepath}.")
    except yaml.YAMLError as e:
        raise RuntimeError(f"Error parsing YAML file: {e}")

    if not isinstance(data, dict):
        raise RuntimeError(f"Configuration file {filepath} must contain a mapping.")
    return data


class ConfigLoader:
    @staticmethod
    def get_config() -> dict:
        """
        Returns the cached configuration, loading the packaged defaults on first use.
        """
        global _config
        if _config is None:
            _config = ConfigLoader.load_config()
        return _config

    @staticmethod
    def load_config(filepath: str | Path | None = None) -> dict:
        """
        Loads the configuration if not already cached.
        The packaged etc/config.yaml is read first; an optional user file
        at filepath is merged over it.
        """
        global _config

        if _config is None:
            base_cfg = _read_yaml(DEFAULT_CONFIG_PATH)
            if filepath is not None:
                base_cfg = _merge_dicts(base_cfg, _read_yaml(Path(filepath)))
            _config = base_cfg

        return _config

    @staticmethod
    def reload_config(filepath: str | Path | None = None) -> dict:
        """
        Reload the configuration from disk.

        Returns:
            dict: The reloaded configuration dictionary.
        """

        global _config
        _config = None

        return ConfigLoader.load_config(filepath)
