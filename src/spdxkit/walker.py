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


"""Depth-first traversal of parse trees.

A :class:`TreeVisitor` has one hook per node kind. :func:`walk` visits a
group's operator, then its children, and finally hands the group hook
the already-visited children, so results flow bottom-up::

    walk(tree)                    # identity: rebuilds an equal tree
    walk(tree, MyVisitor())       # anything: strings, sets, counts, ...

The unparser and id extraction in :mod:`spdxkit.unparse` are both
visitors; custom analyses subclass :class:`TreeVisitor` the same way.

Example::

    class Depth(TreeVisitor):
        def visit_license(self, component):
            return 0

        def visit_group(self, depth, operator, children):
            return 1 + max(children)

    walk(parse('MIT OR (Apache-2.0 AND BSD-3-Clause)'), Depth())  # 2
"""

from __future__ import annotations

from typing import Any

from spdxkit._types import Group, LicenseComponent, LicenseRef, Node, Operator, SimpleLicense

__all__ = [
    'TreeVisitor',
    'walk',
]


class TreeVisitor:
    """Base visitor; every hook defaults to identity."""

    def visit_operator(self, operator: Operator) -> Any:  # noqa: ANN401
        """Visit the operator of a group, before its children."""
        return operator

    def visit_license(self, component: LicenseComponent) -> Any:  # noqa: ANN401
        """Visit a license component (a leaf)."""
        return component

    def visit_group(self, depth: int, operator: Any, children: list[Any]) -> Any:  # noqa: ANN401
        """Combine a group's visited operator and children.

        Args:
            depth: Nesting depth of the group; the root group is at 0.
            operator: Whatever :meth:`visit_operator` returned.
            children: Whatever the children's visits returned, in order.
        """
        return Group(operator, tuple(children))


_IDENTITY = TreeVisitor()


def _walk(node: Node, visitor: TreeVisitor, depth: int) -> Any:  # noqa: ANN401
    if isinstance(node, Group):
        operator = visitor.visit_operator(node.operator)
        children = [_walk(child, visitor, depth + 1) for child in node.children]
        return visitor.visit_group(depth, operator, children)
    if isinstance(node, (SimpleLicense, LicenseRef)):
        return visitor.visit_license(node)
    raise TypeError(f'not a parse tree node: {node!r}')


def walk(tree: Node | None, visitor: TreeVisitor | None = None, *, depth: int = 0) -> Any:  # noqa: ANN401
    """Walk *tree* depth-first with *visitor*.

    Args:
        tree: A parse tree, or ``None``.
        visitor: The hooks to apply; defaults to the identity visitor.
        depth: Depth reported for the root, if it is a group.

    Returns:
        The root's visit result, or ``None`` if *tree* is ``None``.

    Raises:
        TypeError: If the tree contains something that is not a node.
    """
    if tree is None:
        return None
    return _walk(tree, visitor or _IDENTITY, depth)
