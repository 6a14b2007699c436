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

r"""Parse tree types for SPDX license expressions.

This module must have **zero** imports from other ``spdxkit`` modules
to avoid circular-import chains. It is safe to import from anywhere.

A parse tree is either a bare *license component* or a :class:`Group`::

    ┌──────────────────────┬──────────────────────────────────────────────┐
    │ Type                 │ Example                                      │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ SimpleLicense        │ Apache-2.0, GPL-2.0+, MIT WITH Foo-exception │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ LicenseRef           │ DocumentRef-spdx:LicenseRef-Custom           │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ ExceptionId          │ Classpath-exception-2.0 (after WITH)         │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ AdditionRef          │ AdditionRef-Custom (after WITH)              │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ Group                │ (OR, (Apache-2.0, MIT))                      │
    └──────────────────────┴──────────────────────────────────────────────┘

All types are frozen dataclasses, so trees compare structurally and can
be used as dict keys or set members.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

__all__ = [
    'Addition',
    'AdditionRef',
    'ExceptionId',
    'Group',
    'LicenseComponent',
    'LicenseRef',
    'Node',
    'Operator',
    'SimpleLicense',
]


class Operator(enum.Enum):
    """Boolean operator joining the children of a :class:`Group`."""

    AND = 'AND'
    OR = 'OR'


@dataclass(frozen=True)
class ExceptionId:
    """A registered SPDX license exception identifier.

    Attributes:
        id: The canonical exception id (e.g. ``"Classpath-exception-2.0"``).
    """

    id: str

    def __str__(self) -> str:
        """Return the exception identifier."""
        return self.id


@dataclass(frozen=True)
class AdditionRef:
    """A user-defined exception reference (``AdditionRef-...``).

    Attributes:
        id: The id-string after the ``AdditionRef-`` prefix.
        document_ref: The id-string after an optional ``DocumentRef-`` prefix.
    """

    id: str
    document_ref: str | None = None

    def __str__(self) -> str:
        """Return the full ``[DocumentRef-x:]AdditionRef-y`` form."""
        prefix = f'DocumentRef-{self.document_ref}:' if self.document_ref else ''
        return f'{prefix}AdditionRef-{self.id}'


Addition = ExceptionId | AdditionRef


@dataclass(frozen=True)
class SimpleLicense:
    """A registered SPDX license id, optionally ``+`` and/or ``WITH`` an exception.

    Attributes:
        id: The canonical license id (e.g. ``"Apache-2.0"``).
        or_later: ``True`` if the ``+`` suffix was present.
        exception: The ``WITH`` clause attached to this license, if any.
    """

    id: str
    or_later: bool = False
    exception: Addition | None = None

    def __str__(self) -> str:
        """Return ``id[+][ WITH exception]``."""
        rendered = f'{self.id}+' if self.or_later else self.id
        if self.exception is not None:
            rendered = f'{rendered} WITH {self.exception}'
        return rendered


@dataclass(frozen=True)
class LicenseRef:
    """A user-defined license reference (``LicenseRef-...``).

    Attributes:
        id: The id-string after the ``LicenseRef-`` prefix.
        document_ref: The id-string after an optional ``DocumentRef-`` prefix.
        exception: The ``WITH`` clause attached to this reference, if any.
    """

    id: str
    document_ref: str | None = None
    exception: Addition | None = None

    @property
    def ref(self) -> str:
        """The ``[DocumentRef-x:]LicenseRef-y`` form, without any exception."""
        prefix = f'DocumentRef-{self.document_ref}:' if self.document_ref else ''
        return f'{prefix}LicenseRef-{self.id}'

    def __str__(self) -> str:
        """Return ``ref[ WITH exception]``."""
        if self.exception is not None:
            return f'{self.ref} WITH {self.exception}'
        return self.ref


LicenseComponent = SimpleLicense | LicenseRef


@dataclass(frozen=True)
class Group:
    """Two or more children joined by the same operator.

    A normalised group never holds a child group with the same
    operator; such nesting is flattened into the parent.

    Attributes:
        operator: :attr:`Operator.AND` or :attr:`Operator.OR`.
        children: The operands, in order.
    """

    operator: Operator
    children: tuple[Node, ...]


Node = SimpleLicense | LicenseRef | Group
