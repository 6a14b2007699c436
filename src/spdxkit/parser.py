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

"""Tokenizer and recursive descent parser producing a concrete parse tree.

The concrete tree mirrors the grammar productions in
:mod:`spdxkit.grammar` one-to-one and keeps the raw token text; it is
turned into the canonical data model by :mod:`spdxkit.transform`.

Concrete nodes::

    Terminal('license-id', ('apache-2.0',), pos)
    Terminal('license-ref', ('doc', 'foo'), pos)        # DocumentRef-doc:LicenseRef-foo
    Production('license-or-later', (Terminal(...),))
    Production('with-expression', (license, exception))
    Production('and-expression', (component, ...))
    Production('or-expression', (and-expression, ...))
"""

from __future__ import annotations

from dataclasses import dataclass

from spdxkit.errors import SpdxKitError
from spdxkit.grammar import (
    ADDITION_REF_RE,
    LICENSE_REF_RE,
    MAX_NESTING_DEPTH,
    TOKEN_RE,
    Grammar,
)

__all__ = [
    'ConcreteNode',
    'ParseError',
    'ParseFailure',
    'Production',
    'Terminal',
    'parse_concrete',
]

# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParseFailure:
    """Why an expression was rejected.

    Attributes:
        expression: The original expression string.
        position: Character offset where the problem was detected.
        expected: Token classes that would have been accepted there.
        found: The offending token text, or ``"end of input"``.
        detail: Human-readable description of the problem.
    """

    expression: str
    position: int
    expected: tuple[str, ...]
    found: str
    detail: str

    def __str__(self) -> str:
        """Return a caret-style diagnostic."""
        marker = ' ' * self.position + '^'
        return f'SPDX parse error at position {self.position}: {self.detail}\n  {self.expression}\n  {marker}'


class ParseError(SpdxKitError):
    """Raised inside the parser; public operations turn it into a value.

    Attributes:
        failure: The structured :class:`ParseFailure`.
    """

    def __init__(self, failure: ParseFailure) -> None:
        """Initialize from a :class:`ParseFailure`."""
        self.failure = failure
        super().__init__(str(failure))


# ---------------------------------------------------------------------------
# Concrete tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Terminal:
    """A matched identifier.

    Attributes:
        rule: ``license-id``, ``license-exception-id``, ``license-ref``
            or ``addition-ref``.
        parts: The raw id text; for refs ``(id,)`` or ``(document, id)``.
        pos: Character offset of the token.
    """

    rule: str
    parts: tuple[str, ...]
    pos: int


@dataclass(frozen=True)
class Production:
    """A matched non-terminal and its children."""

    rule: str
    children: tuple[ConcreteNode, ...]


ConcreteNode = Terminal | Production

# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

_TOK_AND = 'AND'
_TOK_OR = 'OR'
_TOK_WITH = 'WITH'
_TOK_LPAREN = '('
_TOK_RPAREN = ')'
_TOK_PLUS = '+'
_TOK_WORD = 'WORD'
_TOK_EOF = 'EOF'

_EXPECT_COMPONENT = ('license-id', 'license-ref', '(')
_EXPECT_EXCEPTION = ('license-exception-id', 'addition-ref')


@dataclass(frozen=True)
class _Token:
    kind: str
    value: str
    pos: int
    spaced: bool  # whitespace immediately before this token

    def describe(self) -> str:
        return 'end of input' if self.kind == _TOK_EOF else self.value


def _tokenize(expr: str, grammar: Grammar) -> list[_Token]:
    """Split *expr* into tokens, classifying operator keywords."""
    tokens: list[_Token] = []
    spaced = True
    for m in TOKEN_RE.finditer(expr):
        kind = m.lastgroup
        text = m.group()
        if kind == 'ws':
            spaced = True
            continue
        if kind == 'lparen':
            tokens.append(_Token(_TOK_LPAREN, text, m.start(), spaced))
        elif kind == 'rparen':
            tokens.append(_Token(_TOK_RPAREN, text, m.start(), spaced))
        elif kind == 'plus':
            tokens.append(_Token(_TOK_PLUS, text, m.start(), spaced))
        else:
            operator = grammar.operator(text)
            tokens.append(_Token(operator or _TOK_WORD, text, m.start(), spaced))
        spaced = False
    tokens.append(_Token(_TOK_EOF, '', len(expr), True))
    return tokens


# ---------------------------------------------------------------------------
# Recursive descent parser
# ---------------------------------------------------------------------------
#
#   or_expr     = and_expr ("OR" and_expr)*
#   and_expr    = component ("AND" component)*
#   component   = "(" or_expr ")" / license ["WITH" exception]
#   license     = license-id ["+"] / license-ref


class _Parser:
    """Recursive descent parser over one token list."""

    def __init__(self, expr: str, tokens: list[_Token], grammar: Grammar) -> None:
        self._expr = expr
        self._tokens = tokens
        self._grammar = grammar
        self._pos = 0
        self._depth = 0

    def _peek(self, offset: int = 0) -> _Token:
        return self._tokens[min(self._pos + offset, len(self._tokens) - 1)]

    def _advance(self) -> _Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _fail(self, tok: _Token, expected: tuple[str, ...], detail: str) -> ParseError:
        return ParseError(
            ParseFailure(
                expression=self._expr,
                position=tok.pos,
                expected=expected,
                found=tok.describe(),
                detail=detail,
            )
        )

    def _accept_operator(self, kind: str) -> bool:
        """Consume operator *kind* if next; it must be whitespace-delimited."""
        tok = self._peek()
        if tok.kind != kind:
            return False
        if not tok.spaced or not self._peek(1).spaced:
            raise self._fail(tok, (kind,), f'{kind} must be surrounded by whitespace')
        self._advance()
        return True

    def parse(self) -> ConcreteNode:
        node = self._or_expr()
        tok = self._peek()
        if tok.kind != _TOK_EOF:
            expected = ('AND', 'OR', 'WITH', 'end of input') if tok.kind != _TOK_RPAREN else ('end of input',)
            raise self._fail(tok, expected, f'unexpected {tok.describe()!r} after expression')
        return node

    def _or_expr(self) -> Production:
        children: list[ConcreteNode] = [self._and_expr()]
        while self._accept_operator(_TOK_OR):
            children.append(self._and_expr())
        return Production('or-expression', tuple(children))

    def _and_expr(self) -> Production:
        children: list[ConcreteNode] = [self._component()]
        while self._accept_operator(_TOK_AND):
            children.append(self._component())
        return Production('and-expression', tuple(children))

    def _component(self) -> ConcreteNode:
        tok = self._peek()
        if tok.kind == _TOK_LPAREN:
            if self._depth >= MAX_NESTING_DEPTH:
                raise self._fail(tok, _EXPECT_COMPONENT[:2], f'parentheses nested deeper than {MAX_NESTING_DEPTH}')
            self._advance()
            self._depth += 1
            node = self._or_expr()
            closing = self._peek()
            if closing.kind != _TOK_RPAREN:
                raise self._fail(closing, ('AND', 'OR', ')'), f'expected ")", got {closing.describe()!r}')
            self._advance()
            self._depth -= 1
            if self._peek().kind == _TOK_WITH:
                raise self._fail(self._peek(), ('AND', 'OR', ')'), 'WITH must follow a single license, not a group')
            return node
        license_node = self._license()
        if self._accept_operator(_TOK_WITH):
            return Production('with-expression', (license_node, self._exception()))
        return license_node

    def _license(self) -> ConcreteNode:
        tok = self._peek()
        if tok.kind != _TOK_WORD:
            raise self._fail(tok, _EXPECT_COMPONENT, f'expected license identifier or "(", got {tok.describe()!r}')
        self._advance()
        ref = LICENSE_REF_RE.fullmatch(tok.value)
        if ref is not None:
            return Terminal('license-ref', _ref_parts(ref.group('document'), ref.group('id')), tok.pos)
        if not self._grammar.is_license_id(tok.value):
            raise self._fail(tok, _EXPECT_COMPONENT, f'unknown license identifier {tok.value!r}')
        node = Terminal('license-id', (tok.value,), tok.pos)
        plus = self._peek()
        if plus.kind == _TOK_PLUS:
            if plus.spaced:
                raise self._fail(plus, _EXPECT_COMPONENT, '"+" must directly follow a license identifier')
            self._advance()
            return Production('license-or-later', (node,))
        return node

    def _exception(self) -> Terminal:
        tok = self._peek()
        if tok.kind != _TOK_WORD:
            raise self._fail(tok, _EXPECT_EXCEPTION, f'expected exception identifier, got {tok.describe()!r}')
        self._advance()
        ref = ADDITION_REF_RE.fullmatch(tok.value)
        if ref is not None:
            return Terminal('addition-ref', _ref_parts(ref.group('document'), ref.group('id')), tok.pos)
        if not self._grammar.is_exception_id(tok.value):
            raise self._fail(tok, _EXPECT_EXCEPTION, f'unknown exception identifier {tok.value!r}')
        return Terminal('license-exception-id', (tok.value,), tok.pos)


def _ref_parts(document: str | None, ref_id: str) -> tuple[str, ...]:
    return (document, ref_id) if document is not None else (ref_id,)


def parse_concrete(expression: str, grammar: Grammar) -> ConcreteNode:
    """Parse *expression* into a concrete parse tree.

    Args:
        expression: An SPDX license expression string.
        grammar: The grammar (registered ids + operator mode) to parse with.

    Returns:
        The root :class:`Production` (always an ``or-expression``).

    Raises:
        ParseError: If the expression is blank or syntactically invalid.
    """
    tokens = _tokenize(expression, grammar)
    if tokens[0].kind == _TOK_EOF:
        raise ParseError(ParseFailure(expression, 0, _EXPECT_COMPONENT, 'end of input', 'empty expression'))
    return _Parser(expression, tokens, grammar).parse()
