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

r"""SPDX license expression grammar, bound to a snapshot of registered ids.

Grammar (adapted from SPDX Specification 3.0.1 Annex B)::

    expression          = ows or-expression ows
    or-expression       = and-expression *(ws "OR" ws and-expression)
    and-expression      = component *(ws "AND" ws component)
    component           = license-component [ws "WITH" ws exception-component]
                        / "(" expression ")"
    license-component   = license-id ["+"] / license-ref
    exception-component = license-exception-id / addition-ref
    license-ref         = ["DocumentRef-" idstring ":"] "LicenseRef-" idstring
    addition-ref        = ["DocumentRef-" idstring ":"] "AdditionRef-" idstring
    idstring            = 1*(ALPHA / DIGIT / "-" / ".")

``license-id`` and ``license-exception-id`` are not patterns: they are
the literal ids of one registry snapshot, matched case-insensitively.
The handful of deprecated license ids that end in ``+`` (``GPL-2.0+``
and friends) are left out, since they are indistinguishable from an
id followed by the or-later suffix.

Operator precedence (tightest to loosest)::

    ( )  >  +  >  WITH  >  AND  >  OR

Building a :class:`Grammar` walks the whole registry, so callers build
one per registry snapshot and operator mode and keep it; it is
immutable and safe to share between threads.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from spdxkit.logging import get_logger

__all__ = [
    'ADDITION_REF_RE',
    'Grammar',
    'LICENSE_REF_RE',
    'MAX_NESTING_DEPTH',
    'OPERATORS',
    'TOKEN_RE',
    'build_grammar',
]

log = get_logger('spdxkit.grammar')

#: Deepest parenthesis nesting accepted; deeper input is a syntax failure.
MAX_NESTING_DEPTH = 128

#: Operator keywords, in canonical (upper) case.
OPERATORS = frozenset({'AND', 'OR', 'WITH'})

_IDSTRING = r'[A-Za-z0-9.\-]+'

LICENSE_REF_RE = re.compile(rf'(?:DocumentRef-(?P<document>{_IDSTRING}):)?LicenseRef-(?P<id>{_IDSTRING})')
ADDITION_REF_RE = re.compile(rf'(?:DocumentRef-(?P<document>{_IDSTRING}):)?AdditionRef-(?P<id>{_IDSTRING})')

# A "word" runs until whitespace, a parenthesis, or the or-later suffix;
# it is classified (operator, id, ref) by the parser.
TOKEN_RE = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<lparen>\()
    | (?P<rparen>\))
    | (?P<plus>\+)
    | (?P<word>[^\s()+]+)
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Grammar:
    """Terminal tables for one registry snapshot and operator mode.

    Attributes:
        license_ids: Lower-cased license id → registered spelling.
        exception_ids: Lower-cased exception id → registered spelling.
        case_sensitive_operators: If ``True`` only ``AND``/``OR``/``WITH``
            are operators; otherwise any letter case is accepted.
    """

    license_ids: Mapping[str, str]
    exception_ids: Mapping[str, str]
    case_sensitive_operators: bool = False

    def operator(self, word: str) -> str | None:
        """Return the canonical operator spelled by *word*, if it is one."""
        keyword = word if self.case_sensitive_operators else word.upper()
        return keyword if keyword in OPERATORS else None

    def is_license_id(self, word: str) -> bool:
        """Return whether *word* is one of the literal license ids."""
        return word.lower() in self.license_ids

    def is_exception_id(self, word: str) -> bool:
        """Return whether *word* is one of the literal exception ids."""
        return word.lower() in self.exception_ids


def build_grammar(
    license_ids: Iterable[str],
    exception_ids: Iterable[str],
    *,
    case_sensitive_operators: bool = False,
) -> Grammar:
    """Tie a set of registered ids into a :class:`Grammar`.

    Args:
        license_ids: Registered license ids (any ending in ``+`` are skipped).
        exception_ids: Registered exception ids.
        case_sensitive_operators: Whether operators must be upper case.

    Returns:
        An immutable :class:`Grammar`.
    """
    licenses = {i.lower(): i for i in license_ids if not i.endswith('+')}
    exceptions = {i.lower(): i for i in exception_ids}
    log.debug(
        'grammar_built',
        licenses=len(licenses),
        exceptions=len(exceptions),
        case_sensitive_operators=case_sensitive_operators,
    )
    return Grammar(
        license_ids=MappingProxyType(licenses),
        exception_ids=MappingProxyType(exceptions),
        case_sensitive_operators=case_sensitive_operators,
    )
