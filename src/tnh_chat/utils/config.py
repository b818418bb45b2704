"""Configuration file reader for the service.

Reads an optional JSON or YAML configuration file from the local filesystem.
Values from the file sit between the hard-coded defaults and the process
environment (see ``tnh_chat.settings``).
"""

import json
import os
from typing import Any, Dict

import yaml


def read_config(config_path: str) -> Dict[str, Any]:
    """Read configuration from a local JSON or YAML file.

    The file format is detected from the extension (.json, .yaml, .yml).

    Args:
        config_path: Path to the configuration file (e.g. 'config/service.yml').

    Returns:
        Dict[str, Any]: The configuration as a dictionary. An empty file
        yields an empty dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the extension is not supported or the top-level value
                   is not a mapping.
        json.JSONDecodeError: If the JSON file is malformed.
        yaml.YAMLError: If the YAML file is malformed.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        content = f.read()

    _, ext = os.path.splitext(config_path)
    ext = ext.lower()

    if ext == '.json':
        try:
            data = json.loads(content) if content.strip() else {}
        except json.JSONDecodeError as e:
            raise json.JSONDecodeError(
                f"Invalid JSON in config file: {config_path}",
                e.doc,
                e.pos
            )
    elif ext in ('.yaml', '.yml'):
        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file: {config_path}") from e
    else:
        raise ValueError(
            f"Unsupported file format: {ext}. Supported formats: .json, .yaml, .yml"
        )

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping at the top level: {config_path}")
    return data
