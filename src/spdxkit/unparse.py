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


"""Render parse trees back to strings, and collect the ids they mention.

Parentheses are only written around nested groups; the root group is
never wrapped::

    Group(OR, (MIT, Group(AND, (Apache-2.0, BSD-3-Clause))))
    → 'MIT OR (Apache-2.0 AND BSD-3-Clause)'
"""

from __future__ import annotations

from typing import Any

from spdxkit._types import AdditionRef, ExceptionId, LicenseComponent, LicenseRef, Node, Operator
from spdxkit.walker import TreeVisitor, walk

__all__ = [
    'extract_ids',
    'unparse',
]


class _Unparser(TreeVisitor):
    def visit_operator(self, operator: Operator) -> str:
        return f' {operator.value} '

    def visit_license(self, component: LicenseComponent) -> str:
        return str(component)

    def visit_group(self, depth: int, operator: Any, children: list[Any]) -> str:  # noqa: ANN401
        joined = operator.join(child for child in children if child)
        if depth > 0 and joined:
            return f'({joined})'
        return joined


class _IdCollector(TreeVisitor):
    def __init__(self, *, include_or_later: bool) -> None:
        self._include_or_later = include_or_later

    def visit_license(self, component: LicenseComponent) -> set[str]:
        if isinstance(component, LicenseRef):
            ids = {component.ref}
        else:
            ids = {f'{component.id}+' if self._include_or_later and component.or_later else component.id}
        if isinstance(component.exception, ExceptionId):
            ids.add(component.exception.id)
        elif isinstance(component.exception, AdditionRef):
            ids.add(str(component.exception))
        return ids

    def visit_group(self, depth: int, operator: Any, children: list[Any]) -> set[str]:  # noqa: ANN401
        return set().union(*children)


_UNPARSER = _Unparser()


def unparse(tree: Node | None) -> str | None:
    """Turn a parse tree back into an SPDX expression string.

    Args:
        tree: A tree produced by :func:`spdxkit.engine.parse`.

    Returns:
        The expression, or ``None`` if *tree* is ``None``, renders to
        nothing (an empty group), or is not a parse tree at all.
    """
    try:
        result = walk(tree, _UNPARSER)
    except TypeError:
        return None
    if not isinstance(result, str) or not result.strip():
        return None
    return result.strip()


def extract_ids(tree: Node | None, *, include_or_later: bool = False) -> set[str]:
    """Return every id mentioned in *tree*.

    License ids, exception ids, and the full text of ``LicenseRef`` and
    ``AdditionRef`` references are all included.

    Args:
        tree: A parse tree, or ``None``.
        include_or_later: Append ``+`` to license ids that carry the
            or-later flag (``Apache-2.0+``).

    Returns:
        A set of strings; empty for ``None``.
    """
    if tree is None:
        return set()
    return walk(tree, _IdCollector(include_or_later=include_or_later))
