"""
Raw configuration sources layered underneath the process environment.

**Conceptual**: An operator may keep configuration in a directory of files
(e.g. 01-base.env, 02-local.env) and still override single values with
environment variables. This module flattens those sources into one
key -> string mapping, which is then handed to resolve_settings(). Type
parsing and defaults stay in settings.py; this module only decides which raw
string wins.

**Precedence** (highest first):
  1. Process environment (empty values ignored).
  2. Config-directory files, later files (lexical order) over earlier ones.
  3. Schema defaults (applied later by resolve_settings()).

Files are parsed with python-dotenv, so both `KEY=value` (.env) and the
simple `KEY=value` subset of .properties files are accepted.
"""

import os
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from dotenv import dotenv_values

CONFIG_FILE_SUFFIXES = (".env", ".properties")


def load_config_dir(config_dir: Union[str, Path]) -> Dict[str, str]:
    """
    Load every config file in a directory, in lexically sorted order.

    Later files overwrite earlier ones, so 02-bar.env takes precedence over
    01-foo.env. Files with other suffixes are ignored. Keys declared without
    a value (a bare `KEY` line) are skipped.

    Args:
        config_dir: Directory to scan (not recursive).

    Returns:
        Merged key -> value mapping.

    Raises:
        FileNotFoundError: If config_dir does not exist or is not a directory.
    """
    config_dir = Path(config_dir)
    if not config_dir.is_dir():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")

    merged: Dict[str, str] = {}
    paths = sorted(
        p for p in config_dir.iterdir()
        if p.is_file() and p.name.endswith(CONFIG_FILE_SUFFIXES)
    )
    for path in paths:
        for key, value in dotenv_values(path, encoding="utf-8").items():
            if value is not None:
                merged[key] = value

    return merged


def layered_environment(
    config_dir: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Config-directory values overridden by the process environment.

    Args:
        config_dir: Optional directory of config files. None means "environment only".
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        A new dict; neither input is modified.
    """
    if environ is None:
        environ = os.environ

    layered: Dict[str, str] = {}
    if config_dir is not None:
        layered.update(load_config_dir(config_dir))
    # empty counts as unset, so it must not mask a file value
    layered.update((key, value) for key, value in environ.items() if value != "")
    return layered
