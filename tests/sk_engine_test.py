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


"""Tests for spdxkit.engine public operations."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from spdxkit import engine as engine_module
from spdxkit.engine import (
    ExpressionEngine,
    ParseOptions,
    compound,
    default_engine,
    extract_ids,
    normalise,
    parse,
    reset_default_engine,
    simple,
    unparse,
    valid,
    walk,
)
from spdxkit.registry import SpdxIdRegistry

CASE_SENSITIVE = ParseOptions(case_sensitive_operators=True)
INCLUDE_OR_LATER = ParseOptions(include_or_later=True)

INVALID = ['+', 'AND', 'Apache', 'Classpath-exception-2.0']


@pytest.fixture
def custom_engine() -> ExpressionEngine:
    """Engine over a tiny in-house id list."""
    registry = SpdxIdRegistry.from_ids(
        ['MIT', 'Internal-1.0', 'GPL-2.0-only', 'GPL-2.0-or-later', 'GPL-2.0'],
        ['Internal-exception'],
        deprecated=['GPL-2.0'],
    )
    return ExpressionEngine(registry)


class TestValid:
    """Tests for valid()."""

    @pytest.mark.parametrize('expression', [None, '', *INVALID])
    def test_invalid(self, expression: str | None) -> None:
        """Invalid and blank expressions are not valid."""
        assert valid(expression) is False

    def test_case_sensitive(self) -> None:
        """Lower-case operators are invalid in case-sensitive mode."""
        assert valid('MIT or Apache-2.0', CASE_SENSITIVE) is False
        assert valid('MIT OR Apache-2.0', CASE_SENSITIVE) is True

    @pytest.mark.parametrize(
        'expression',
        [
            'Apache-2.0',
            'apache-2.0',
            'GPL-2.0+',
            'LicenseRef-foo',
            'DocumentRef-foo:LicenseRef-bar',
            'GPL-2.0 WITH Classpath-exception-2.0',
            '\tapache-2.0 OR\n( gpl-2.0\tWITH\nclasspath-exception-2.0\n\t\n\t)',
            '(APACHE-2.0 AND MIT) OR (((GPL-2.0 WITH CLASSPATH-EXCEPTION-2.0)))',
        ],
    )
    def test_valid(self, expression: str) -> None:
        """Well-formed expressions are valid."""
        assert valid(expression) is True


class TestSimpleAndCompound:
    """Tests for simple() and compound()."""

    @pytest.mark.parametrize('expression', [None, '', *INVALID])
    def test_invalid_is_none(self, expression: str | None) -> None:
        """Invalid input gives None from both."""
        assert simple(expression) is None
        assert compound(expression) is None

    def test_case_sensitive(self) -> None:
        """Options are honoured."""
        assert simple('MIT or Apache-2.0', CASE_SENSITIVE) is None
        assert compound('MIT or Apache-2.0', CASE_SENSITIVE) is None

    @pytest.mark.parametrize('expression', ['Apache-2.0', 'GPL-2.0-or-later WITH Classpath-exception-2.0'])
    def test_simple(self, expression: str) -> None:
        """A single component is simple."""
        assert simple(expression) is True
        assert compound(expression) is False

    @pytest.mark.parametrize(
        'expression',
        ['Apache-2.0 AND MIT', 'GPL-2.0-or-later WITH Classpath-exception-2.0 OR EPL-1.0'],
    )
    def test_compound(self, expression: str) -> None:
        """Groups are compound."""
        assert simple(expression) is False
        assert compound(expression) is True

    def test_collapsed_repeat_is_simple(self) -> None:
        """Simplicity is judged after canonicalisation."""
        assert simple('MIT OR MIT') is True


class TestNormalise:
    """Tests for normalise()."""

    @pytest.mark.parametrize('expression', [None, '', '  ', '\n\t'])
    def test_blank(self, expression: str | None) -> None:
        """Blank input gives None."""
        assert normalise(expression) is None

    @pytest.mark.parametrize(
        'expression',
        [
            'AND',
            'THIS-IS-NOT-A-LICENSE-ID',
            'DocumentRef-foo',
            'LicenseRef-this:is:invalid',
            '((BSD-2-Clause',
            'Classpath-exception-2.0',
        ],
    )
    def test_invalid(self, expression: str) -> None:
        """Invalid input gives None."""
        assert normalise(expression) is None

    def test_invalid_case_sensitive(self) -> None:
        """Options are honoured."""
        assert normalise('MIT and AGPL-3.0', CASE_SENSITIVE) is None

    @pytest.mark.parametrize(
        ('expression', 'expected'),
        [
            ('Apache-2.0', 'Apache-2.0'),
            ('aPaCHe-2.0', 'Apache-2.0'),
            ('((bsd-4-clause))', 'BSD-4-Clause'),
            ('LGPL-3.0', 'LGPL-3.0-only'),
            ('LGPL-3.0+', 'LGPL-3.0-or-later'),
            ('LGPL-3.0-or-later', 'LGPL-3.0-or-later'),
            ('LicenseRef-foo', 'LicenseRef-foo'),
            ('DocumentRef-foo:LicenseRef-bar', 'DocumentRef-foo:LicenseRef-bar'),
        ],
    )
    def test_simple(self, expression: str, expected: str) -> None:
        """Single components."""
        assert normalise(expression) == expected

    @pytest.mark.parametrize(
        ('expression', 'expected'),
        [
            ('MIT and AGPL-3.0', 'AGPL-3.0-only AND MIT'),
            ('(GPL-2.0 WITH Classpath-exception-2.0)', 'GPL-2.0-only WITH Classpath-exception-2.0'),
            (
                'BSD-2-Clause AND MIT or GPL-2.0+ WITH Classpath-exception-2.0',
                'GPL-2.0-or-later WITH Classpath-exception-2.0 OR (BSD-2-Clause AND MIT)',
            ),
            (
                '(BSD-2-Clause AND MIT) Or GPL-2.0+ WITH Classpath-exception-2.0',
                'GPL-2.0-or-later WITH Classpath-exception-2.0 OR (BSD-2-Clause AND MIT)',
            ),
            (
                'GPL-2.0-with-GCC-exception WiTh Classpath-exception-2.0',
                'GPL-2.0-only WITH Classpath-exception-2.0 AND GPL-2.0-only WITH GCC-exception-2.0',
            ),
            ('LicenseRef-foo WITH Classpath-exception-2.0', 'LicenseRef-foo WITH Classpath-exception-2.0'),
            ('Apache-2.0 WITH AdditionRef-foo', 'Apache-2.0 WITH AdditionRef-foo'),
            ('LicenseRef-foo with AdditionRef-blah', 'LicenseRef-foo WITH AdditionRef-blah'),
            (
                'DocumentRef-foo:LicenseRef-bar wItH DocumentRef-blah:AdditionRef-banana',
                'DocumentRef-foo:LicenseRef-bar WITH DocumentRef-blah:AdditionRef-banana',
            ),
        ],
    )
    def test_compound(self, expression: str, expected: str) -> None:
        """Expressions with operators."""
        assert normalise(expression) == expected

    @pytest.mark.parametrize(
        ('expression', 'expected'),
        [
            ('Apache-2.0 OR  (MIT or  BSD-3-Clause)', 'Apache-2.0 OR BSD-3-Clause OR MIT'),
            ('Apache-2.0 and (MIT AND BSD-3-Clause)', 'Apache-2.0 AND BSD-3-Clause AND MIT'),
            ('((((((Apache-2.0)))))) AND (MIT and BSD-3-Clause)', 'Apache-2.0 AND BSD-3-Clause AND MIT'),
            ('(Apache-2.0 or  MIT) or  BSD-3-Clause', 'Apache-2.0 OR BSD-3-Clause OR MIT'),
            ('(Apache-2.0 and MIT) and BSD-3-Clause', 'Apache-2.0 AND BSD-3-Clause AND MIT'),
            ('Apache-2.0 oR  MIT aNd BSD-3-Clause', 'Apache-2.0 OR (BSD-3-Clause AND MIT)'),
            ('Apache-2.0 AnD MIT Or  BSD-3-Clause', 'BSD-3-Clause OR (Apache-2.0 AND MIT)'),
            ('Apache-2.0 or  MIT and BSD-3-Clause or Unlicense', 'Apache-2.0 OR Unlicense OR (BSD-3-Clause AND MIT)'),
            (
                'Apache-2.0 AND MIT OR BSD-3-Clause and Unlicense',
                '(Apache-2.0 AND MIT) OR (BSD-3-Clause AND Unlicense)',
            ),
            ('Apache-2.0 OR (MIT and BSD-3-Clause OR Unlicense)', 'Apache-2.0 OR Unlicense OR (BSD-3-Clause AND MIT)'),
            (
                'mit or bsd-3-clause AND apache-2.0 and beerware OR epl-2.0 and mpl-2.0 OR unlicense and lgpl-3.0 '
                'OR wtfpl or glwtpl OR hippocratic-2.1',
                'GLWTPL OR Hippocratic-2.1 OR MIT OR WTFPL OR (EPL-2.0 AND MPL-2.0) OR (LGPL-3.0-only AND Unlicense) '
                'OR (Apache-2.0 AND BSD-3-Clause AND Beerware)',
            ),
            (
                'MIT or (BSD-3-Clause OR (Apache-2.0 OR (Beerware OR (EPL-2.0 OR (MPL-2.0 OR (Unlicense OR '
                '(LGPL-3.0-only OR (WTFPL OR (GLWTPL OR (Hippocratic-2.1))))))))))',
                'Apache-2.0 OR BSD-3-Clause OR Beerware OR EPL-2.0 OR GLWTPL OR Hippocratic-2.1 OR LGPL-3.0-only '
                'OR MIT OR MPL-2.0 OR Unlicense OR WTFPL',
            ),
            (
                'MIT and (BSD-3-Clause or (Apache-2.0 and (Beerware or (EPL-2.0 and (MPL-2.0 or (Unlicense and '
                '(LGPL-3.0-only or (WTFPL and (GLWTPL or Hippocratic-2.1)))))))))',
                'MIT AND (BSD-3-Clause OR (Apache-2.0 AND (Beerware OR (EPL-2.0 AND (MPL-2.0 OR (Unlicense AND '
                '(LGPL-3.0-only OR (WTFPL AND (GLWTPL OR Hippocratic-2.1)))))))))',
            ),
        ],
    )
    def test_precedence(self, expression: str, expected: str) -> None:
        """Only the parentheses precedence needs are written."""
        assert normalise(expression) == expected

    def test_collapse(self) -> None:
        """Repeated clauses are dropped."""
        assert normalise('Apache-2.0 OR Apache-2.0') == 'Apache-2.0'
        assert normalise('Apache-2.0 OR (Apache-2.0 AND (Apache-2.0 AND Apache-2.0) OR Apache-2.0)') == 'Apache-2.0'

    def test_order_independent(self) -> None:
        """Reordered clauses normalise the same."""
        assert normalise('Apache-2.0 OR MIT') == normalise('MIT OR Apache-2.0')

    @pytest.mark.parametrize(
        'expression',
        [
            'mit or bsd-3-clause AND apache-2.0 and beerware OR epl-2.0 and mpl-2.0',
            'GPL-2.0-with-GCC-exception+ WITH Classpath-exception-2.0 OR MIT',
            '(MIT AND Apache-2.0) OR (Apache-2.0 AND MIT) OR BSD-3-Clause',
            'LicenseRef-b OR DocumentRef-x:LicenseRef-a WITH AdditionRef-c AND GPL-3.0+',
        ],
    )
    def test_idempotent(self, expression: str) -> None:
        """Normalising a normalised expression changes nothing."""
        once = normalise(expression)
        assert once is not None
        assert normalise(once) == once


class TestUnparseAndExtract:
    """Tests for unparse() and extract_ids() on parsed trees."""

    @pytest.mark.parametrize(
        ('expression', 'expected'),
        [
            ('Apache-2.0', 'Apache-2.0'),
            ('APACHE-2.0', 'Apache-2.0'),
            ('((APACHE-2.0))', 'Apache-2.0'),
            ('Apache-2.0 OR GPL-2.0', 'Apache-2.0 OR GPL-2.0-only'),
            (
                'Apache-2.0 OR GPL-2.0+ WITH Classpath-exception-2.0',
                'Apache-2.0 OR GPL-2.0-or-later WITH Classpath-exception-2.0',
            ),
            (
                'Apache-2.0 OR (GPL-2.0+ WITH Classpath-exception-2.0)',
                'Apache-2.0 OR GPL-2.0-or-later WITH Classpath-exception-2.0',
            ),
            (
                '(Apache-2.0+ AND MIT) OR GPL-2.0+ WITH Classpath-exception-2.0 OR '
                '(BSD-2-Clause AND DocumentRef-bar:LicenseRef-foo)',
                'GPL-2.0-or-later WITH Classpath-exception-2.0 OR (Apache-2.0+ AND MIT) OR '
                '(BSD-2-Clause AND DocumentRef-bar:LicenseRef-foo)',
            ),
        ],
    )
    def test_unparse_parse(self, expression: str, expected: str) -> None:
        """unparse(parse(s)) is the canonical text."""
        assert unparse(parse(expression)) == expected

    @pytest.mark.parametrize(
        ('expression', 'expected'),
        [
            ('Apache-2.0', {'Apache-2.0'}),
            ('GPL-2.0+', {'GPL-2.0-or-later'}),
            ('Apache-2.0+', {'Apache-2.0'}),
            ('Apache-2.0 OR GPL-2.0', {'Apache-2.0', 'GPL-2.0-only'}),
            (
                'Apache-2.0 OR GPL-2.0 WITH Classpath-exception-2.0',
                {'Apache-2.0', 'GPL-2.0-only', 'Classpath-exception-2.0'},
            ),
            (
                '(Apache-2.0 AND MIT) OR (BSD-2-Clause AND (GPL-2.0+ WITH Classpath-exception-2.0))',
                {'Apache-2.0', 'MIT', 'BSD-2-Clause', 'GPL-2.0-or-later', 'Classpath-exception-2.0'},
            ),
        ],
    )
    def test_extract_ids(self, expression: str, expected: set[str]) -> None:
        """Ids of parsed expressions."""
        assert extract_ids(parse(expression)) == expected

    def test_extract_ids_include_or_later(self) -> None:
        """Only licenses without an -or-later id keep the '+'."""
        assert extract_ids(parse('Apache-2.0+'), INCLUDE_OR_LATER) == {'Apache-2.0+'}
        assert extract_ids(parse('Apache-2.0 OR GPL-2.0+ WITH Classpath-exception-2.0'), INCLUDE_OR_LATER) == {
            'Apache-2.0',
            'GPL-2.0-or-later',
            'Classpath-exception-2.0',
        }

    def test_extract_ids_none(self) -> None:
        """No tree, no ids."""
        assert extract_ids(None) == set()

    def test_walk_identity(self) -> None:
        """walk() without a visitor returns an equal tree."""
        expressions = [
            'Apache-2.0',
            'MIT OR Apache-2.0',
            'GPL-2.0-with-GCC-exception WiTh Classpath-exception-2.0 AND (Apache-2.0 OR MIT)',
        ]
        for expression in expressions:
            assert walk(parse(expression)) == parse(expression)
        assert walk(parse('INVALID SPDX EXPRESSION!!!!')) is None


class TestExpressionEngine:
    """Tests for ExpressionEngine itself."""

    def test_custom_registry(self, custom_engine: ExpressionEngine) -> None:
        """Only the registry's ids are accepted."""
        assert custom_engine.normalise('internal-1.0 or mit') == 'Internal-1.0 OR MIT'
        assert custom_engine.normalise('MIT WITH internal-exception') == 'MIT WITH Internal-exception'
        assert custom_engine.parse('Apache-2.0') is None
        assert custom_engine.valid('Apache-2.0') is False

    def test_custom_registry_normalises(self, custom_engine: ExpressionEngine) -> None:
        """Rewrites use the engine's registry."""
        assert custom_engine.normalise('GPL-2.0+') == 'GPL-2.0-or-later'

    def test_grammar_cached_per_mode(self, custom_engine: ExpressionEngine) -> None:
        """Each operator mode builds its grammar once."""
        lenient = custom_engine.grammar()
        assert custom_engine.grammar() is lenient
        strict = custom_engine.grammar(case_sensitive_operators=True)
        assert strict is not lenient
        assert strict.case_sensitive_operators is True

    def test_warm_up(self, custom_engine: ExpressionEngine) -> None:
        """warm_up builds both grammars."""
        custom_engine.warm_up()
        assert set(custom_engine._grammars) == {False, True}

    def test_concurrent_first_use(self, custom_engine: ExpressionEngine) -> None:
        """Threads racing on first use share one grammar."""
        with ThreadPoolExecutor(max_workers=8) as pool:
            grammars = list(pool.map(lambda _: custom_engine.grammar(), range(32)))
        assert all(g is grammars[0] for g in grammars)

    def test_static_tree_operations(self, custom_engine: ExpressionEngine) -> None:
        """unparse and walk need no registry."""
        tree = custom_engine.parse('MIT OR Internal-1.0')
        assert custom_engine.unparse(tree) == 'Internal-1.0 OR MIT'
        assert custom_engine.walk(tree) == tree


class TestDefaultEngine:
    """Tests for the process-wide engine."""

    def test_shared(self) -> None:
        """default_engine() returns one instance."""
        assert default_engine() is default_engine()

    def test_reset(self) -> None:
        """reset_default_engine() forces a new instance."""
        first = default_engine()
        reset_default_engine()
        try:
            assert default_engine() is not first
        finally:
            reset_default_engine()
            assert engine_module._default_engine is None
