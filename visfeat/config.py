"""
Configuration management for visfeat
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_CONFIG = {
    "distance": {
        "normalize": True
    },
    "spatial_index": {
        "leafsize": 16
    },
    "text_io": {
        "comment_char": "%",
        "float_format": "%.17g"
    },
    "logging": {
        "level": "INFO",
        "log_dir": "logs"
    }
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file on top of the defaults.
    
    Args:
        config_path: Path to a YAML file (optional)
        
    Returns:
        Merged configuration dictionary
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    
    with open(Path(config_path), 'r') as f:
        user_config = yaml.safe_load(f) or {}
    
    if not isinstance(user_config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    
    return _deep_merge(DEFAULT_CONFIG, user_config)


def get_config(section: str, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return a copy of one configuration section."""
    source = config if config is not None else DEFAULT_CONFIG
    return copy.deepcopy(source[section])
