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

r"""Rewrite deprecated SPDX ids to their current equivalents.

The GPL family is where most of the history lives::

    ┌───────────────────────────────────┬───────────────────────────────────┐
    │ Deprecated                        │ Current                           │
    ├───────────────────────────────────┼───────────────────────────────────┤
    │ GPL-2.0                           │ GPL-2.0-only                      │
    │ GPL-2.0+                          │ GPL-2.0-or-later                  │
    │ GPL-2.0-only+                     │ GPL-2.0-or-later                  │
    │ GPL-2.0-with-GCC-exception        │ GPL-2.0-only WITH                 │
    │                                   │   GCC-exception-2.0               │
    │ StandardML-NJ                     │ SMLNJ                             │
    │ ... WITH Nokia-Qt-exception-1.1   │ ... WITH Qt-LGPL-exception-1.1    │
    └───────────────────────────────────┴───────────────────────────────────┘

A compound id that already carries a *different* ``WITH`` exception
expands into two clauses joined by ``AND``, both on the current id::

    GPL-2.0-with-GCC-exception WITH Classpath-exception-2.0
    → GPL-2.0-only WITH Classpath-exception-2.0 AND GPL-2.0-only WITH GCC-exception-2.0

Rewrites only ever target ids that the registry knows; if a target is
missing from the snapshot the component is left as it was.
"""

from __future__ import annotations

import dataclasses
from typing import Final

from spdxkit._types import ExceptionId, Group, LicenseComponent, Node, Operator, SimpleLicense
from spdxkit.registry import IdRegistry
from spdxkit.transform import flatten

__all__ = [
    'DEPRECATED_COMPOUND_GPL_IDS',
    'DEPRECATED_SIMPLE_GPL_IDS',
    'RENAMED_EXCEPTION_IDS',
    'RENAMED_LICENSE_IDS',
    'normalise_deprecated_ids',
]

CURRENT_GPL_IDS: Final[frozenset[str]] = frozenset({
    'AGPL-1.0-only',
    'AGPL-1.0-or-later',
    'AGPL-3.0-only',
    'AGPL-3.0-or-later',
    'GPL-1.0-only',
    'GPL-1.0-or-later',
    'GPL-2.0-only',
    'GPL-2.0-or-later',
    'GPL-3.0-only',
    'GPL-3.0-or-later',
    'LGPL-2.0-only',
    'LGPL-2.0-or-later',
    'LGPL-2.1-only',
    'LGPL-2.1-or-later',
    'LGPL-3.0-only',
    'LGPL-3.0-or-later',
})

# The "+"-suffixed deprecated ids (GPL-2.0+ etc.) never get this far:
# the grammar reads them as the plain id plus the or-later flag.
DEPRECATED_SIMPLE_GPL_IDS: Final[dict[str, str]] = {
    'AGPL-1.0': 'AGPL-1.0-only',
    'AGPL-3.0': 'AGPL-3.0-only',
    'GPL-1.0': 'GPL-1.0-only',
    'GPL-2.0': 'GPL-2.0-only',
    'GPL-3.0': 'GPL-3.0-only',
    'LGPL-2.0': 'LGPL-2.0-only',
    'LGPL-2.1': 'LGPL-2.1-only',
    'LGPL-3.0': 'LGPL-3.0-only',
}

DEPRECATED_COMPOUND_GPL_IDS: Final[dict[str, tuple[str, str]]] = {
    'GPL-2.0-with-autoconf-exception': ('GPL-2.0-only', 'Autoconf-exception-2.0'),
    'GPL-2.0-with-bison-exception': ('GPL-2.0-only', 'Bison-exception-2.2'),
    'GPL-2.0-with-classpath-exception': ('GPL-2.0-only', 'Classpath-exception-2.0'),
    'GPL-2.0-with-font-exception': ('GPL-2.0-only', 'Font-exception-2.0'),
    'GPL-2.0-with-GCC-exception': ('GPL-2.0-only', 'GCC-exception-2.0'),
    'GPL-3.0-with-autoconf-exception': ('GPL-3.0-only', 'Autoconf-exception-3.0'),
    'GPL-3.0-with-GCC-exception': ('GPL-3.0-only', 'GCC-exception-3.1'),
}

RENAMED_LICENSE_IDS: Final[dict[str, str]] = {
    'StandardML-NJ': 'SMLNJ',
}

RENAMED_EXCEPTION_IDS: Final[dict[str, str]] = {
    'Nokia-Qt-exception-1.1': 'Qt-LGPL-exception-1.1',
}

_GPL_FAMILY_IDS: Final[frozenset[str]] = (
    CURRENT_GPL_IDS | frozenset(DEPRECATED_SIMPLE_GPL_IDS) | frozenset(DEPRECATED_COMPOUND_GPL_IDS)
)


def _normalise_gpl(license_: SimpleLicense, registry: IdRegistry) -> Node:
    """Rewrite a GPL-family license, possibly into an AND of two clauses."""
    implied: str | None = None
    new_id = license_.id
    if license_.id in DEPRECATED_COMPOUND_GPL_IDS:
        target, exception_id = DEPRECATED_COMPOUND_GPL_IDS[license_.id]
        if registry.is_known_license_id(target) and registry.is_known_exception_id(exception_id):
            new_id, implied = target, exception_id
    elif license_.id in DEPRECATED_SIMPLE_GPL_IDS:
        target = DEPRECATED_SIMPLE_GPL_IDS[license_.id]
        if registry.is_known_license_id(target):
            new_id = target

    or_later = license_.or_later
    if or_later:
        variant = new_id.replace('-only', '-or-later')
        if registry.is_known_license_id(variant) and not registry.is_deprecated(variant):
            new_id, or_later = variant, False

    own = license_.exception
    if implied is None:
        exception = own
    elif own is None or own == ExceptionId(implied):
        exception = ExceptionId(implied)
    else:
        return Group(
            Operator.AND,
            (
                SimpleLicense(id=new_id, or_later=or_later, exception=ExceptionId(implied)),
                SimpleLicense(id=new_id, or_later=or_later, exception=own),
            ),
        )
    return SimpleLicense(id=new_id, or_later=or_later, exception=exception)


def _normalise_component(component: LicenseComponent, registry: IdRegistry) -> Node:
    exception = component.exception
    if isinstance(exception, ExceptionId) and exception.id in RENAMED_EXCEPTION_IDS:
        renamed = RENAMED_EXCEPTION_IDS[exception.id]
        if registry.is_known_exception_id(renamed):
            component = dataclasses.replace(component, exception=ExceptionId(renamed))

    if not isinstance(component, SimpleLicense):
        return component
    if component.id in _GPL_FAMILY_IDS:
        return _normalise_gpl(component, registry)
    renamed = RENAMED_LICENSE_IDS.get(component.id)
    if renamed is not None and registry.is_known_license_id(renamed):
        return dataclasses.replace(component, id=renamed)
    return component


def normalise_deprecated_ids(tree: Node, registry: IdRegistry) -> Node:
    """Replace deprecated ids throughout *tree*.

    Args:
        tree: A parse tree.
        registry: Decides which replacement ids exist.

    Returns:
        A new tree; groups created by compound-id expansion are
        flattened into a parent ``AND`` group.
    """
    if isinstance(tree, Group):
        children = [normalise_deprecated_ids(child, registry) for child in tree.children]
        return Group(tree.operator, tuple(flatten(tree.operator, children)))
    return _normalise_component(tree, registry)
