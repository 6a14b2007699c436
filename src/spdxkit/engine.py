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


r"""Public operations on SPDX license expressions.

An :class:`ExpressionEngine` ties one id registry to the parsing
pipeline::

    string ─→ parse_concrete ─→ transform ─→ normalise_deprecated_ids
                                                       │
    string ←─ unparse ←─ sort_tree ←─ collapse_redundant_clauses

Malformed input never raises: :meth:`~ExpressionEngine.parse` returns
``None`` and :meth:`~ExpressionEngine.parse_with_info` returns a
:class:`~spdxkit.parser.ParseFailure`.

Module-level functions (:func:`parse`, :func:`normalise`, ...) use a
process-wide engine over the SPDX list bundled with ``packaging``::

    >>> normalise('apache-2.0 or mit or Apache-2.0')
    'Apache-2.0 OR MIT'
    >>> parse('GPL-2.0+')
    SimpleLicense(id='GPL-2.0-or-later', or_later=False, exception=None)
    >>> valid('MIT AND')
    False
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from spdxkit._types import Group, Node
from spdxkit.canonical import collapse_redundant_clauses, sort_tree
from spdxkit.grammar import Grammar, build_grammar
from spdxkit.logging import get_logger
from spdxkit.normalise import normalise_deprecated_ids
from spdxkit.parser import ParseError, ParseFailure, parse_concrete
from spdxkit.registry import IdRegistry, SpdxIdRegistry
from spdxkit.transform import transform
from spdxkit.unparse import extract_ids as _extract_ids
from spdxkit.unparse import unparse as _unparse
from spdxkit.walker import TreeVisitor
from spdxkit.walker import walk as _walk

__all__ = [
    'DEFAULT_OPTIONS',
    'ExpressionEngine',
    'ParseOptions',
    'compound',
    'default_engine',
    'extract_ids',
    'normalise',
    'parse',
    'parse_with_info',
    'reset_default_engine',
    'simple',
    'unparse',
    'valid',
    'walk',
]

log = get_logger('spdxkit.engine')


@dataclass(frozen=True)
class ParseOptions:
    """Which canonicalisation passes run.

    Attributes:
        normalise_deprecated_ids: Rewrite deprecated ids to current ones.
        case_sensitive_operators: Accept only upper-case ``AND``/``OR``/``WITH``.
        collapse_redundant_clauses: Drop repeated clauses within a group.
        sort_licenses: Sort the children of every group.
        include_or_later: Keep the ``+`` suffix in :meth:`ExpressionEngine.extract_ids`.
    """

    normalise_deprecated_ids: bool = True
    case_sensitive_operators: bool = False
    collapse_redundant_clauses: bool = True
    sort_licenses: bool = True
    include_or_later: bool = False


DEFAULT_OPTIONS = ParseOptions()


class ExpressionEngine:
    """Parses, validates and canonicalises expressions against one registry.

    The grammar for each operator mode is built on first use and then
    shared; an engine is safe to use from several threads.

    Args:
        registry: Source of known ids, canonical spellings and
            deprecation flags.
    """

    def __init__(self, registry: IdRegistry) -> None:
        """Bind the engine to *registry*."""
        self.registry = registry
        self._grammars: dict[bool, Grammar] = {}
        self._lock = threading.Lock()

    def grammar(self, *, case_sensitive_operators: bool = False) -> Grammar:
        """Return the grammar for one operator mode, building it if needed."""
        grammar = self._grammars.get(case_sensitive_operators)
        if grammar is not None:
            return grammar
        with self._lock:
            grammar = self._grammars.get(case_sensitive_operators)
            if grammar is None:
                grammar = build_grammar(
                    self.registry.known_license_ids(),
                    self.registry.known_exception_ids(),
                    case_sensitive_operators=case_sensitive_operators,
                )
                self._grammars[case_sensitive_operators] = grammar
            return grammar

    def warm_up(self) -> None:
        """Build both grammars now instead of on the first parse."""
        self.grammar(case_sensitive_operators=False)
        self.grammar(case_sensitive_operators=True)

    # ── Parsing ──────────────────────────────────────────────────────

    def parse_with_info(
        self,
        expression: str | None,
        options: ParseOptions | None = None,
    ) -> Node | ParseFailure | None:
        """Parse *expression*, describing the problem if it is invalid.

        Args:
            expression: An SPDX license expression.
            options: Passes to run; defaults to :data:`DEFAULT_OPTIONS`.

        Returns:
            The canonical tree, a :class:`ParseFailure` for invalid
            input, or ``None`` if *expression* is ``None`` or blank.
        """
        if expression is None or not expression.strip():
            return None
        opts = options or DEFAULT_OPTIONS
        grammar = self.grammar(case_sensitive_operators=opts.case_sensitive_operators)
        try:
            concrete = parse_concrete(expression, grammar)
        except ParseError as exc:
            log.debug(
                'parse_failed',
                expression=expression,
                position=exc.failure.position,
                detail=exc.failure.detail,
            )
            return exc.failure
        tree = transform(concrete, self.registry)
        if opts.normalise_deprecated_ids:
            tree = normalise_deprecated_ids(tree, self.registry)
        if opts.collapse_redundant_clauses:
            tree = collapse_redundant_clauses(tree)
        if opts.sort_licenses:
            tree = sort_tree(tree)
        return tree

    def parse(self, expression: str | None, options: ParseOptions | None = None) -> Node | None:
        """Parse *expression* into a canonical tree, or ``None`` if invalid."""
        result = self.parse_with_info(expression, options)
        if isinstance(result, ParseFailure):
            return None
        return result

    def valid(self, expression: str | None, options: ParseOptions | None = None) -> bool:
        """Return whether *expression* is a valid SPDX license expression."""
        if expression is None or not expression.strip():
            return False
        opts = options or DEFAULT_OPTIONS
        try:
            parse_concrete(expression, self.grammar(case_sensitive_operators=opts.case_sensitive_operators))
        except ParseError:
            return False
        return True

    def simple(self, expression: str | None, options: ParseOptions | None = None) -> bool | None:
        """Return whether *expression* is a single license component.

        Returns:
            ``True`` for a bare component, ``False`` for a group, and
            ``None`` if *expression* is invalid.
        """
        tree = self.parse(expression, options)
        if tree is None:
            return None
        return not isinstance(tree, Group)

    def compound(self, expression: str | None, options: ParseOptions | None = None) -> bool | None:
        """Return the negation of :meth:`simple`, keeping ``None``."""
        result = self.simple(expression, options)
        if result is None:
            return None
        return not result

    def normalise(self, expression: str | None, options: ParseOptions | None = None) -> str | None:
        """Return the canonical spelling of *expression*, or ``None`` if invalid."""
        return _unparse(self.parse(expression, options))

    def extract_ids(self, tree: Node | None, options: ParseOptions | None = None) -> set[str]:
        """Return every id in *tree*; see :func:`spdxkit.unparse.extract_ids`."""
        opts = options or DEFAULT_OPTIONS
        return _extract_ids(tree, include_or_later=opts.include_or_later)

    # ── Tree operations (registry independent) ───────────────────────

    unparse = staticmethod(_unparse)
    walk = staticmethod(_walk)


# ── Process-wide engine ──────────────────────────────────────────────

_default_engine: ExpressionEngine | None = None
_default_engine_lock = threading.Lock()


def default_engine() -> ExpressionEngine:
    """Return the shared engine over the bundled SPDX list, creating it on first use."""
    global _default_engine  # noqa: PLW0603
    with _default_engine_lock:
        if _default_engine is None:
            _default_engine = ExpressionEngine(SpdxIdRegistry.load())
        return _default_engine


def reset_default_engine() -> None:
    """Drop the shared engine (for testing)."""
    global _default_engine  # noqa: PLW0603
    with _default_engine_lock:
        _default_engine = None


def parse(expression: str | None, options: ParseOptions | None = None) -> Node | None:
    """Parse with the default engine; see :meth:`ExpressionEngine.parse`."""
    return default_engine().parse(expression, options)


def parse_with_info(expression: str | None, options: ParseOptions | None = None) -> Node | ParseFailure | None:
    """See :meth:`ExpressionEngine.parse_with_info`."""
    return default_engine().parse_with_info(expression, options)


def valid(expression: str | None, options: ParseOptions | None = None) -> bool:
    """See :meth:`ExpressionEngine.valid`."""
    return default_engine().valid(expression, options)


def simple(expression: str | None, options: ParseOptions | None = None) -> bool | None:
    """See :meth:`ExpressionEngine.simple`."""
    return default_engine().simple(expression, options)


def compound(expression: str | None, options: ParseOptions | None = None) -> bool | None:
    """See :meth:`ExpressionEngine.compound`."""
    return default_engine().compound(expression, options)


def normalise(expression: str | None, options: ParseOptions | None = None) -> str | None:
    """See :meth:`ExpressionEngine.normalise`."""
    return default_engine().normalise(expression, options)


def extract_ids(tree: Node | None, options: ParseOptions | None = None) -> set[str]:
    """See :meth:`ExpressionEngine.extract_ids`."""
    return _extract_ids(tree, include_or_later=(options or DEFAULT_OPTIONS).include_or_later)


def unparse(tree: Node | None) -> str | None:
    """See :func:`spdxkit.unparse.unparse`."""
    return _unparse(tree)


def walk(tree: Node | None, visitor: TreeVisitor | None = None) -> Any:  # noqa: ANN401
    """See :func:`spdxkit.walker.walk`."""
    return _walk(tree, visitor)
