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


"""structlog setup shared by the spdxkit library and CLI.

Library modules only ever call :func:`get_logger` and emit debug events
(``grammar_built``, ``registry_loaded``, ``parse_failed``,
``config_loaded``). Nothing is rendered until an application calls
:func:`configure_logging`; the ``spdxkit`` CLI does so from its flags.

Rendering::

    ┌──────────────┬───────────────────────────────────────────────┐
    │ Mode         │ Output (always on stderr)                     │
    ├──────────────┼───────────────────────────────────────────────┤
    │ console      │ structlog ConsoleRenderer, coloured on a TTY  │
    │ --json-log   │ one JSON object per event                     │
    └──────────────┴───────────────────────────────────────────────┘

Level: ``-q`` → WARNING, ``-v`` → DEBUG, otherwise ``$SPDXKIT_LOG_LEVEL``
(default INFO).

Expressions come straight from user input, so the ``expression`` field
of every event is cut to :data:`MAX_LOGGED_EXPRESSION` characters.

Usage::

    from spdxkit.logging import configure_logging, get_logger

    configure_logging(verbose=True)
    log = get_logger('spdxkit.engine')
    log.debug('parse_failed', expression='MIT AND', position=7)
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

__all__ = [
    'LOG_LEVEL_ENV_VAR',
    'MAX_LOGGED_EXPRESSION',
    'configure_logging',
    'get_logger',
    'truncate_expression',
]

#: Environment variable naming the default level (``debug``, ``warning``, ...).
LOG_LEVEL_ENV_VAR = 'SPDXKIT_LOG_LEVEL'

#: Longest ``expression`` value written to a log event.
MAX_LOGGED_EXPRESSION = 200


def _resolve_level(*, verbose: bool, quiet: bool) -> int:
    """Return the root level: flags first, then the environment."""
    if quiet:
        return logging.WARNING
    if verbose:
        return logging.DEBUG
    name = os.environ.get(LOG_LEVEL_ENV_VAR, '').strip().upper()
    level = logging.getLevelName(name) if name else logging.INFO
    return level if isinstance(level, int) else logging.INFO


def truncate_expression(
    logger: Any,  # noqa: ANN401
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """structlog processor shortening the ``expression`` field."""
    expression = event_dict.get('expression')
    if isinstance(expression, str) and len(expression) > MAX_LOGGED_EXPRESSION:
        hidden = len(expression) - MAX_LOGGED_EXPRESSION
        event_dict['expression'] = f'{expression[:MAX_LOGGED_EXPRESSION]}... ({hidden} more chars)'
    return event_dict


def _renderer(json_log: bool) -> structlog.types.Processor:
    if json_log:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
) -> None:
    """Route structlog events through the stdlib root logger on stderr.

    Safe to call again; the latest call wins.

    Args:
        verbose: Log debug events.
        quiet: Log only warnings and errors.
        json_log: Render JSON lines instead of console output.
    """
    logging.basicConfig(
        format='%(message)s',
        stream=sys.stderr,
        level=_resolve_level(verbose=verbose, quiet=quiet),
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt='iso'),
            truncate_expression,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(json_log),
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str = 'spdxkit') -> structlog.stdlib.BoundLogger:
    """Return the structlog logger called *name*.

    The logger wraps the stdlib logger of the same name, so events obey
    the stdlib configuration: an application that never configures
    logging sees no debug output, and nothing is ever written to stdout.
    """
    return structlog.wrap_logger(logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger)
