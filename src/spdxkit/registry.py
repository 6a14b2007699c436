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

r"""License and exception id registry consumed by the expression engine.

The expression engine never hard-codes the SPDX license list. It asks an
:class:`IdRegistry` which ids exist, how they are spelled canonically,
and whether they are deprecated.

Key Concepts (ELI5)::

    ┌──────────────────────┬──────────────────────────────────────────────┐
    │ Concept              │ Plain-English                                │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ Known id             │ An id on the registry's list. Only known ids │
    │                      │ are accepted by the grammar.                 │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ Canonical case       │ The official spelling: ``apache-2.0`` is     │
    │                      │ looked up and returned as ``Apache-2.0``.    │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ Deprecated           │ Still parseable, but superseded (e.g.        │
    │                      │ ``GPL-2.0`` → ``GPL-2.0-only``).             │
    └──────────────────────┴──────────────────────────────────────────────┘

Usage::

    from spdxkit.registry import SpdxIdRegistry

    registry = SpdxIdRegistry.load()  # SPDX list shipped with packaging
    registry = SpdxIdRegistry.load(user_toml=Path('ids.toml'))  # + overrides

    registry.canonical_case('apache-2.0')  # 'Apache-2.0'
    registry.is_deprecated('GPL-2.0')  # True

Registry TOML format::

    [licenses."Apache-2.0"]
    deprecated = false          # optional, defaults to false

    [exceptions."Classpath-exception-2.0"]
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from spdxkit.errors import RegistryDataError
from spdxkit.logging import get_logger

__all__ = [
    'IdRegistry',
    'RegistryDataError',
    'SpdxIdRegistry',
]

log = get_logger('spdxkit.registry')

_SECTIONS = ('licenses', 'exceptions')


@runtime_checkable
class IdRegistry(Protocol):
    """What the expression engine needs to know about license/exception ids."""

    def known_license_ids(self) -> frozenset[str]:
        """Return every registered license id, in canonical case."""
        ...

    def known_exception_ids(self) -> frozenset[str]:
        """Return every registered exception id, in canonical case."""
        ...

    def is_known_license_id(self, id: str) -> bool:  # noqa: A002
        """Return whether *id* is a registered license id (exact case)."""
        ...

    def is_known_exception_id(self, id: str) -> bool:  # noqa: A002
        """Return whether *id* is a registered exception id (exact case)."""
        ...

    def canonical_case(self, id: str) -> str | None:  # noqa: A002
        """Return the registered spelling of *id*, matched case-insensitively."""
        ...

    def is_deprecated(self, id: str) -> bool | None:  # noqa: A002
        """Return the deprecation flag of *id*, or ``None`` if it is unknown."""
        ...


@dataclass(frozen=True)
class SpdxIdRegistry:
    """Immutable snapshot of license and exception ids.

    Attributes:
        licenses: Mapping from canonical license id → deprecated flag.
        exceptions: Mapping from canonical exception id → deprecated flag.
    """

    licenses: Mapping[str, bool] = field(default_factory=dict)
    exceptions: Mapping[str, bool] = field(default_factory=dict)
    _case_index: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Build the case-insensitive lookup table."""
        index: dict[str, str] = {}
        # Licenses win over exceptions on a (theoretical) case-folded clash.
        for ids in (self.exceptions, self.licenses):
            index.update({i.lower(): i for i in ids})
        object.__setattr__(self, '_case_index', index)

    # ── Construction ─────────────────────────────────────────────────

    @classmethod
    def from_ids(
        cls,
        licenses: Iterable[str],
        exceptions: Iterable[str] = (),
        *,
        deprecated: Iterable[str] = (),
    ) -> SpdxIdRegistry:
        """Build a registry from plain id lists.

        Args:
            licenses: License ids, in canonical case.
            exceptions: Exception ids, in canonical case.
            deprecated: Ids (of either kind) to flag as deprecated.
        """
        flagged = frozenset(deprecated)
        return cls(
            licenses={i: i in flagged for i in licenses},
            exceptions={i: i in flagged for i in exceptions},
        )

    @classmethod
    def from_packaging(cls) -> SpdxIdRegistry:
        """Build a registry from the SPDX list bundled with ``packaging``."""
        # packaging.licenses only exposes canonicalize_license_expression; the id
        # tables with their deprecated flags live in the private _spdx module.
        from packaging.licenses._spdx import EXCEPTIONS, LICENSES  # noqa: PLC0415, PLC2701

        return cls(
            licenses={entry['id']: bool(entry['deprecated']) for entry in LICENSES.values()},
            exceptions={entry['id']: bool(entry['deprecated']) for entry in EXCEPTIONS.values()},
        )

    @classmethod
    def load(
        cls,
        *,
        registry_toml: Path | None = None,
        user_toml: Path | None = None,
    ) -> SpdxIdRegistry:
        """Load a registry snapshot.

        Args:
            registry_toml: Path to a registry TOML file. Defaults to the
                SPDX list bundled with the ``packaging`` distribution.
            user_toml: Optional TOML with additional (or re-flagged) ids
                merged on top of the base snapshot.

        Returns:
            A fully constructed :class:`SpdxIdRegistry`.

        Raises:
            RegistryDataError: If either TOML file fails validation.
        """
        if registry_toml is None:
            base = cls.from_packaging()
            source = 'packaging'
        else:
            base = cls(**_read_registry_toml(registry_toml))
            source = str(registry_toml)

        if user_toml is not None and user_toml.is_file():
            overlay = _read_registry_toml(user_toml)
            base = cls(
                licenses={**base.licenses, **overlay['licenses']},
                exceptions={**base.exceptions, **overlay['exceptions']},
            )

        log.debug(
            'registry_loaded',
            source=source,
            user_toml=str(user_toml) if user_toml else None,
            licenses=len(base.licenses),
            exceptions=len(base.exceptions),
        )
        return base

    # ── IdRegistry protocol ──────────────────────────────────────────

    def known_license_ids(self) -> frozenset[str]:
        """Return every registered license id."""
        return frozenset(self.licenses)

    def known_exception_ids(self) -> frozenset[str]:
        """Return every registered exception id."""
        return frozenset(self.exceptions)

    def is_known_license_id(self, id: str) -> bool:  # noqa: A002
        """Return whether *id* is a registered license id."""
        return id in self.licenses

    def is_known_exception_id(self, id: str) -> bool:  # noqa: A002
        """Return whether *id* is a registered exception id."""
        return id in self.exceptions

    def canonical_case(self, id: str) -> str | None:  # noqa: A002
        """Return the registered spelling of *id*, or ``None``."""
        return self._case_index.get(id.lower())

    def is_deprecated(self, id: str) -> bool | None:  # noqa: A002
        """Return whether *id* is deprecated, or ``None`` if unknown."""
        if id in self.licenses:
            return self.licenses[id]
        return self.exceptions.get(id)

    # ── Convenience queries ──────────────────────────────────────────

    def non_deprecated_license_ids(self) -> frozenset[str]:
        """Return the license ids that identify current licenses."""
        return frozenset(i for i, deprecated in self.licenses.items() if not deprecated)

    def non_deprecated_exception_ids(self) -> frozenset[str]:
        """Return the exception ids that identify current exceptions."""
        return frozenset(i for i, deprecated in self.exceptions.items() if not deprecated)


def _read_registry_toml(path: Path) -> dict[str, dict[str, bool]]:
    """Parse and validate a registry TOML file."""
    with path.open('rb') as f:
        data = tomllib.load(f)
    errors: list[str] = []
    for key in data:
        if key not in _SECTIONS:
            errors.append(f'[{key}]: unknown section, expected one of: {", ".join(_SECTIONS)}')
    parsed: dict[str, dict[str, bool]] = {}
    for section in _SECTIONS:
        entries = data.get(section, {})
        parsed[section] = {}
        if not isinstance(entries, dict):
            errors.append(f'[{section}]: expected a table, got {type(entries).__name__}')
            continue
        for spdx_id, info in entries.items():
            if not isinstance(info, dict):
                errors.append(f'[{section}.{spdx_id}]: expected a table, got {type(info).__name__}')
                continue
            if spdx_id.endswith('+') and section == 'exceptions':
                errors.append(f'[{section}.{spdx_id}]: exception ids cannot end with "+"')
            deprecated = info.get('deprecated', False)
            if not isinstance(deprecated, bool):
                errors.append(f'[{section}.{spdx_id}].deprecated: expected bool, got {type(deprecated).__name__}')
                continue
            unknown = sorted(set(info) - {'deprecated'})
            if unknown:
                errors.append(f'[{section}.{spdx_id}]: unknown field(s) {", ".join(unknown)}')
            parsed[section][spdx_id] = deprecated
    if errors:
        raise RegistryDataError(errors)
    return parsed
