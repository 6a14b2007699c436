# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0


"""Configuration file loading for spdxkit.

Options can live in a dedicated ``spdxkit.toml`` or in the
``[tool.spdxkit]`` table of ``pyproject.toml``; the first one found
walking up from the start directory wins::

    # spdxkit.toml
    sort_licenses = false
    registry = "ids/spdx.toml"          # relative to this file
    user_registry = "ids/internal.toml"

    # pyproject.toml
    [tool.spdxkit]
    case_sensitive_operators = true

Keys not listed in :data:`OPTION_KEYS` or :data:`PATH_KEYS` are
rejected, as are values of the wrong type.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from spdxkit.engine import ParseOptions
from spdxkit.errors import ConfigError
from spdxkit.logging import get_logger

__all__ = [
    'CONFIG_FILENAME',
    'OPTION_KEYS',
    'PATH_KEYS',
    'SpdxKitConfig',
    'load_config',
]

log = get_logger('spdxkit.config')

CONFIG_FILENAME = 'spdxkit.toml'
PYPROJECT_FILENAME = 'pyproject.toml'

OPTION_KEYS: frozenset[str] = frozenset(f.name for f in fields(ParseOptions))
PATH_KEYS: frozenset[str] = frozenset({'registry', 'user_registry'})


@dataclass(frozen=True)
class SpdxKitConfig:
    """Resolved configuration.

    Attributes:
        options: Parse options read from the file (defaults otherwise).
        registry_path: Registry TOML replacing the bundled SPDX list.
        user_registry_path: Registry TOML merged on top of the base list.
        source: The file the configuration came from, if any.
    """

    options: ParseOptions = field(default_factory=ParseOptions)
    registry_path: Path | None = None
    user_registry_path: Path | None = None
    source: Path | None = None


def _parse_options(raw: dict[str, Any]) -> ParseOptions:
    """Validate the option keys of a config table."""
    values: dict[str, bool] = {}
    for key, value in raw.items():
        if key in PATH_KEYS:
            continue
        if key not in OPTION_KEYS:
            allowed = ', '.join(sorted(OPTION_KEYS | PATH_KEYS))
            raise ConfigError(f'Unknown key {key!r} in spdxkit config. Allowed keys: {allowed}')
        if not isinstance(value, bool):
            raise ConfigError(f'{key} must be a boolean, got {type(value).__name__}')
        values[key] = value
    return ParseOptions(**values)


def _parse_path(raw: dict[str, Any], key: str, base_dir: Path) -> Path | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ConfigError(f'{key} must be a non-empty string path, got {value!r}')
    return (base_dir / value).resolve()


def _read_table(path: Path) -> dict[str, Any] | None:
    """Return the spdxkit table of *path*, or ``None`` if it has none."""
    try:
        with path.open('rb') as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f'{path}: invalid TOML: {exc}') from exc
    if path.name != PYPROJECT_FILENAME:
        return data
    table = data.get('tool', {}).get('spdxkit')
    if table is not None and not isinstance(table, dict):
        raise ConfigError(f'{path}: [tool.spdxkit] must be a table')
    return table


def _find_config(start_dir: Path) -> tuple[Path, dict[str, Any]] | None:
    for directory in (start_dir, *start_dir.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate, _read_table(candidate) or {}
        candidate = directory / PYPROJECT_FILENAME
        if candidate.is_file():
            table = _read_table(candidate)
            if table is not None:
                return candidate, table
    return None


def load_config(path: Path | None = None, start_dir: Path | None = None) -> SpdxKitConfig:
    """Load spdxkit configuration.

    Args:
        path: An explicit ``spdxkit.toml`` or ``pyproject.toml``; must exist.
        start_dir: Where to start searching when *path* is not given.
            Defaults to the current working directory.

    Returns:
        The resolved :class:`SpdxKitConfig`; all defaults if no
        configuration file was found.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    if path is not None:
        if not path.is_file():
            raise ConfigError(f'Config file not found: {path}')
        found: tuple[Path, dict[str, Any]] | None = (path, _read_table(path) or {})
    else:
        found = _find_config((start_dir or Path.cwd()).resolve())

    if found is None:
        log.debug('config_loaded', source=None)
        return SpdxKitConfig()

    source, raw = found
    config = SpdxKitConfig(
        options=_parse_options(raw),
        registry_path=_parse_path(raw, 'registry', source.parent),
        user_registry_path=_parse_path(raw, 'user_registry', source.parent),
        source=source,
    )
    log.debug('config_loaded', source=str(source), options=config.options)
    return config
