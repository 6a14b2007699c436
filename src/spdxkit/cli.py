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


"""Command-line interface for spdxkit.

Usage::

    spdxkit normalise 'mit or Apache-2.0' 'GPL-2.0+'
    spdxkit check 'MIT AND (Apache-2.0' 'MIT'
    spdxkit ids --include-or-later 'Apache-2.0+ OR MIT WITH Classpath-exception-2.0'
    spdxkit tree 'MIT OR (Apache-2.0 AND BSD-3-Clause)'

Exit codes: ``0`` on success, ``1`` if any expression is invalid,
``2`` for configuration or registry errors.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from spdxkit._types import Group, Node
from spdxkit.config import load_config
from spdxkit.engine import ExpressionEngine, ParseOptions
from spdxkit.errors import SpdxKitError
from spdxkit.logging import configure_logging, get_logger
from spdxkit.parser import ParseFailure
from spdxkit.registry import SpdxIdRegistry
from spdxkit.unparse import unparse

__all__ = [
    'build_parser',
    'main',
    'run',
]

log = get_logger('spdxkit.cli')

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    """Return the ``spdxkit`` argument parser."""
    parser = argparse.ArgumentParser(
        prog='spdxkit',
        description='Parse, validate and normalise SPDX license expressions.',
    )
    parser.add_argument('--config', type=Path, help='spdxkit.toml or pyproject.toml to read options from.')
    parser.add_argument('--registry', type=Path, help='Registry TOML replacing the bundled SPDX list.')
    parser.add_argument(
        '--case-sensitive-operators',
        action='store_true',
        default=None,
        help='Only accept upper-case AND/OR/WITH.',
    )
    parser.add_argument(
        '--no-normalise-deprecated-ids',
        dest='normalise_deprecated_ids',
        action='store_false',
        default=None,
        help='Keep deprecated ids as written.',
    )
    parser.add_argument(
        '--no-collapse',
        dest='collapse_redundant_clauses',
        action='store_false',
        default=None,
        help='Keep repeated clauses.',
    )
    parser.add_argument(
        '--no-sort',
        dest='sort_licenses',
        action='store_false',
        default=None,
        help='Keep the written order of clauses.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Log as JSON lines.')

    sub = parser.add_subparsers(dest='command', required=True)

    normalise_cmd = sub.add_parser('normalise', help='Print the canonical form of each expression.')
    normalise_cmd.add_argument('expressions', nargs='+', metavar='EXPR')

    check_cmd = sub.add_parser('check', help='Report whether each expression is valid, simple or compound.')
    check_cmd.add_argument('expressions', nargs='+', metavar='EXPR')

    ids_cmd = sub.add_parser('ids', help='Print the ids used in an expression.')
    ids_cmd.add_argument('expression', metavar='EXPR')
    ids_cmd.add_argument(
        '--include-or-later',
        action='store_true',
        default=None,
        help='Keep the "+" suffix on or-later license ids.',
    )

    tree_cmd = sub.add_parser('tree', help='Show the canonical parse tree of an expression.')
    tree_cmd.add_argument('expression', metavar='EXPR')

    return parser


def _options(args: argparse.Namespace, base: ParseOptions) -> ParseOptions:
    """Apply command-line overrides on top of the configured options."""
    overrides = {
        f.name: getattr(args, f.name)
        for f in dataclasses.fields(ParseOptions)
        if getattr(args, f.name, None) is not None
    }
    return dataclasses.replace(base, **overrides)


def _print_failure(console: Console, failure: ParseFailure | None, expression: str) -> None:
    if failure is None:
        console.print(Text(f'error: empty expression {expression!r}', style='bold red'))
        return
    console.print(Text('error', style='bold red'), Text(f': {failure.detail}', style='bold'), sep='')
    console.print(Text(str(failure)), highlight=False)


def _render_tree(node: Node, tree: Tree | None = None) -> Tree:
    label = Text(node.operator.value, style='bold cyan') if isinstance(node, Group) else Text(str(node))
    branch = Tree(label) if tree is None else tree.add(label)
    if isinstance(node, Group):
        for child in node.children:
            _render_tree(child, branch)
    return branch


# ── Subcommands ──────────────────────────────────────────────────────


def _cmd_normalise(
    args: argparse.Namespace,
    engine: ExpressionEngine,
    options: ParseOptions,
    out: Console,
    err: Console,
) -> int:
    status = EXIT_OK
    for expression in args.expressions:
        result = engine.parse_with_info(expression, options)
        if result is None or isinstance(result, ParseFailure):
            _print_failure(err, result, expression)
            status = EXIT_INVALID
            continue
        out.print(Text(unparse(result) or ''), soft_wrap=True)
    return status


def _cmd_check(
    args: argparse.Namespace,
    engine: ExpressionEngine,
    options: ParseOptions,
    out: Console,
    err: Console,
) -> int:
    table = Table(show_header=True, header_style='bold', show_edge=False, pad_edge=False)
    table.add_column('Expression', style='bold')
    table.add_column('Status')
    table.add_column('Kind')
    table.add_column('Canonical', style='dim')

    failures: list[tuple[str, ParseFailure | None]] = []
    for expression in args.expressions:
        result = engine.parse_with_info(expression, options)
        if result is None or isinstance(result, ParseFailure):
            failures.append((expression, result))
            table.add_row(Text(expression), Text('❌ invalid', style='red'), '', '')
            continue
        kind = 'compound' if isinstance(result, Group) else 'simple'
        table.add_row(Text(expression), Text('✅ valid', style='green'), kind, Text(unparse(result) or ''))

    out.print(table)
    for expression, failure in failures:
        err.print()
        _print_failure(err, failure, expression)
    if failures:
        out.print(f'\n[bold red]{len(failures)}/{len(args.expressions)} expression(s) invalid.[/]')
        return EXIT_INVALID
    out.print(f'\n[bold green]{len(args.expressions)}/{len(args.expressions)} expression(s) valid.[/]')
    return EXIT_OK


def _cmd_ids(
    args: argparse.Namespace,
    engine: ExpressionEngine,
    options: ParseOptions,
    out: Console,
    err: Console,
) -> int:
    result = engine.parse_with_info(args.expression, options)
    if result is None or isinstance(result, ParseFailure):
        _print_failure(err, result, args.expression)
        return EXIT_INVALID
    for spdx_id in sorted(engine.extract_ids(result, options)):
        out.print(Text(spdx_id))
    return EXIT_OK


def _cmd_tree(
    args: argparse.Namespace,
    engine: ExpressionEngine,
    options: ParseOptions,
    out: Console,
    err: Console,
) -> int:
    result = engine.parse_with_info(args.expression, options)
    if result is None or isinstance(result, ParseFailure):
        _print_failure(err, result, args.expression)
        return EXIT_INVALID
    out.print(_render_tree(result))
    return EXIT_OK


_COMMANDS = {
    'normalise': _cmd_normalise,
    'check': _cmd_check,
    'ids': _cmd_ids,
    'tree': _cmd_tree,
}


def main(
    argv: Sequence[str] | None = None,
    *,
    console: Console | None = None,
    err_console: Console | None = None,
) -> int:
    """Run the ``spdxkit`` command line.

    Args:
        argv: Arguments, without the program name. Defaults to ``sys.argv[1:]``.
        console: Where results go. Defaults to stdout.
        err_console: Where diagnostics go. Defaults to stderr.

    Returns:
        The process exit code.
    """
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)
    out = console or Console()
    err = err_console or Console(stderr=True)

    try:
        config = load_config(args.config)
        registry = SpdxIdRegistry.load(
            registry_toml=args.registry or config.registry_path,
            user_toml=config.user_registry_path,
        )
    except (SpdxKitError, OSError) as exc:
        log.debug('setup_failed', error=str(exc))
        err.print(Text(f'error: {exc}', style='bold red'))
        return EXIT_CONFIG

    engine = ExpressionEngine(registry)
    options = _options(args, config.options)
    return _COMMANDS[args.command](args, engine, options, out, err)


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())
