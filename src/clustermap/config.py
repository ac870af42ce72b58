"""
Configuration for the ClusterMap loader.
========================================

Module-level constants describing the supported clustering formats,
plus helpers for reading the YAML defaults shipped with the package.
"""

from pathlib import Path
from typing import Any, Dict

import yaml

CONFIG_DIR = Path(__file__).parent / "config_files"

# Extensions selecting the hierarchical parser
TREE_EXTENSIONS = ("tree", "ftree")

# Extensions selecting the flat-partition parser
CLU_EXTENSIONS = ("clu",)

SUPPORTED_EXTENSIONS = TREE_EXTENSIONS + CLU_EXTENSIONS

# Line classification prefixes
COMMENT_PREFIX = "#"
SECTION_PREFIX = "*"

# Node names in tree files are framed by double quotes
NAME_QUOTE = '"'

DEFAULT_ENCODING = "utf-8"

# Lines end at "\n" only; a bare "\r" may appear inside a node name
LINE_SEPARATOR = "\n"

# Undecodable bytes (e.g. Latin-1 node names) are carried through unchanged
DECODE_ERRORS = "surrogateescape"

# Field separators, as in the C locale
FIELD_WHITESPACE = " \t\n\v\f\r"


def load_config(config_name: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Parameters
    ----------
    config_name : str
        Name of the configuration file (without .yaml extension), or a
        path to a YAML file

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary
    """
    config_path = Path(config_name)
    if config_path.suffix not in (".yaml", ".yml"):
        config_path = CONFIG_DIR / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_loader_config() -> Dict[str, Any]:
    """Load the default loader configuration."""
    return load_config("loader_config")


__all__ = [
    "CONFIG_DIR",
    "TREE_EXTENSIONS",
    "CLU_EXTENSIONS",
    "SUPPORTED_EXTENSIONS",
    "COMMENT_PREFIX",
    "SECTION_PREFIX",
    "NAME_QUOTE",
    "DEFAULT_ENCODING",
    "LINE_SEPARATOR",
    "DECODE_ERRORS",
    "FIELD_WHITESPACE",
    "load_config",
    "load_loader_config",
]
