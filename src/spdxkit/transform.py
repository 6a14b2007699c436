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

"""Turn a concrete parse tree into the canonical data model.

Each concrete rule has one handler, applied bottom-up:

- ``license-id`` / ``license-exception-id``: canonical case via the registry
  (``apache-2.0`` → ``Apache-2.0``).
- ``license-ref`` / ``addition-ref``: split off the ``DocumentRef-`` part.
- ``license-or-later``: set ``or_later`` on the license.
- ``with-expression``: attach the exception to the license.
- ``and-expression`` / ``or-expression``: a single child stands for
  itself; a child group with the same operator is spliced in.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from typing import cast

from spdxkit._types import (
    Addition,
    AdditionRef,
    ExceptionId,
    Group,
    LicenseComponent,
    LicenseRef,
    Node,
    Operator,
    SimpleLicense,
)
from spdxkit.parser import ConcreteNode, Production, Terminal
from spdxkit.registry import IdRegistry

__all__ = [
    'flatten',
    'transform',
]

_Value = Node | ExceptionId | AdditionRef


def flatten(operator: Operator, children: Iterable[Node]) -> list[Node]:
    """Splice children that are groups with the same *operator* into one list."""
    result: list[Node] = []
    for child in children:
        if isinstance(child, Group) and child.operator is operator:
            result.extend(child.children)
        else:
            result.append(child)
    return result


class _Transformer:
    """Bottom-up rule dispatcher over a concrete tree."""

    def __init__(self, registry: IdRegistry) -> None:
        self._registry = registry
        self._terminals: dict[str, Callable[[tuple[str, ...]], _Value]] = {
            'license-id': self._license_id,
            'license-exception-id': self._exception_id,
            'license-ref': self._license_ref,
            'addition-ref': self._addition_ref,
        }
        self._productions: dict[str, Callable[[list[_Value]], _Value]] = {
            'license-or-later': self._or_later,
            'with-expression': self._with,
            'and-expression': lambda children: self._sequence(Operator.AND, children),
            'or-expression': lambda children: self._sequence(Operator.OR, children),
        }

    def __call__(self, node: ConcreteNode) -> _Value:
        if isinstance(node, Terminal):
            return self._terminals[node.rule](node.parts)
        children = [self(child) for child in node.children]
        return self._productions[node.rule](children)

    def _canonical(self, text: str) -> str:
        return self._registry.canonical_case(text) or text

    def _license_id(self, parts: tuple[str, ...]) -> SimpleLicense:
        return SimpleLicense(id=self._canonical(parts[0]))

    def _exception_id(self, parts: tuple[str, ...]) -> ExceptionId:
        return ExceptionId(id=self._canonical(parts[0]))

    @staticmethod
    def _license_ref(parts: tuple[str, ...]) -> LicenseRef:
        if len(parts) == 2:
            return LicenseRef(id=parts[1], document_ref=parts[0])
        return LicenseRef(id=parts[0])

    @staticmethod
    def _addition_ref(parts: tuple[str, ...]) -> AdditionRef:
        if len(parts) == 2:
            return AdditionRef(id=parts[1], document_ref=parts[0])
        return AdditionRef(id=parts[0])

    # The grammar only admits exceptions as the second child of a
    # with-expression, so the casts below cannot be wrong.

    @staticmethod
    def _or_later(children: list[_Value]) -> SimpleLicense:
        license_ = cast(SimpleLicense, children[0])
        return dataclasses.replace(license_, or_later=True)

    @staticmethod
    def _with(children: list[_Value]) -> Node:
        license_ = cast(LicenseComponent, children[0])
        return dataclasses.replace(license_, exception=cast(Addition, children[1]))

    @staticmethod
    def _sequence(operator: Operator, children: list[_Value]) -> Node:
        nodes = cast('list[Node]', children)
        if len(nodes) == 1:
            return nodes[0]
        return Group(operator, tuple(flatten(operator, nodes)))


def transform(concrete: ConcreteNode, registry: IdRegistry) -> Node:
    """Convert a concrete parse tree into a canonical :data:`Node`.

    Args:
        concrete: Output of :func:`spdxkit.parser.parse_concrete`.
        registry: Supplies the canonical spelling of matched ids.

    Returns:
        The root :data:`Node`.
    """
    return cast(Node, _Transformer(registry)(concrete))
