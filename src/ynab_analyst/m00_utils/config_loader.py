"""
config_loader.py

Utility for loading YAML (or JSON) documents used for server settings and
local budget datasets.
"""
from pathlib import Path

import yaml


def load_config(config_path: str | Path) -> dict:
    """
    Load a YAML document and return it as a dictionary.

    Args:
        config_path (str | Path): Path to the YAML or JSON file.

    Returns:
        dict: The parsed document, or an empty dict for an empty file.

    Raises:
        ValueError: If the document's top level is not a mapping.
    """
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Expected a mapping at the top of {config_path}")
    return config
