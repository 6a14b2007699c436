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


r"""Canonical shape for parse trees: drop repeated clauses, then sort.

After both passes, logically equivalent spellings parse to one tree::

    'MIT OR Apache-2.0 OR MIT'  ─┐
    'Apache-2.0 OR MIT'          ├─→  Group(OR, (Apache-2.0, MIT))
    '(MIT) OR (apache-2.0)'     ─┘

Sort order within a group::

    ┌──────────────────────┬────────────────────────────────────────────┐
    │ Comparing            │ Order                                      │
    ├──────────────────────┼────────────────────────────────────────────┤
    │ component vs group   │ component first                            │
    │ component vs comp.   │ by rendered text (code point order)        │
    │ group vs group       │ fewer children first, then rendered text   │
    └──────────────────────┴────────────────────────────────────────────┘
"""

from __future__ import annotations

import functools

from spdxkit._types import Group, Node
from spdxkit.transform import flatten
from spdxkit.unparse import unparse

__all__ = [
    'collapse_redundant_clauses',
    'compare_nodes',
    'sort_tree',
]


def collapse_redundant_clauses(tree: Node) -> Node:
    """Remove repeated children from every group of *tree*.

    Children are compared after sorting, so ``(A AND B)`` and
    ``(B AND A)`` count as the same clause; the first one is kept where
    it stood. A group left with a single child is replaced by that
    child, and flattened into its parent if the operators match.
    """
    if not isinstance(tree, Group):
        return tree
    children = flatten(tree.operator, (collapse_redundant_clauses(child) for child in tree.children))
    seen: set[Node] = set()
    distinct: list[Node] = []
    for child in children:
        key = sort_tree(child)
        if key not in seen:
            seen.add(key)
            distinct.append(child)
    if len(distinct) == 1:
        return distinct[0]
    return Group(tree.operator, tuple(distinct))


def _compare_text(x: Node, y: Node) -> int:
    a, b = unparse(x) or '', unparse(y) or ''
    return (a > b) - (a < b)


def compare_nodes(x: Node, y: Node) -> int:
    """Three-way comparison used to order the children of a group.

    Returns:
        A negative number, zero or a positive number, as for
        :func:`functools.cmp_to_key`.
    """
    x_group, y_group = isinstance(x, Group), isinstance(y, Group)
    if x_group != y_group:
        return 1 if x_group else -1
    if isinstance(x, Group) and isinstance(y, Group) and len(x.children) != len(y.children):
        return len(x.children) - len(y.children)
    return _compare_text(x, y)


def sort_tree(tree: Node) -> Node:
    """Sort the children of every group of *tree*, innermost first.

    The sort is stable: children that compare equal keep their order.
    """
    if not isinstance(tree, Group):
        return tree
    children = sorted((sort_tree(child) for child in tree.children), key=functools.cmp_to_key(compare_nodes))
    return Group(tree.operator, tuple(children))
