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


r"""SPDX license expression parsing and canonicalisation.

Every logically equivalent spelling of an SPDX license expression
normalises to one canonical string: operators upper-cased, ids in their
registered case, deprecated ids replaced, repeated clauses dropped and
clauses sorted.

Usage::

    from spdxkit import normalise, parse, valid

    normalise('Apache-2.0 AnD MIT Or BSD-3-Clause')
    # 'BSD-3-Clause OR (Apache-2.0 AND MIT)'

    parse('GPL-2.0-with-GCC-exception WiTh Classpath-exception-2.0')
    # Group(AND, (GPL-2.0-only WITH Classpath-exception-2.0,
    #             GPL-2.0-only WITH GCC-exception-2.0))

    valid('MIT AND')  # False

    # A custom id list:
    from spdxkit import ExpressionEngine, SpdxIdRegistry

    engine = ExpressionEngine(SpdxIdRegistry.from_ids(['MIT', 'Internal-1.0']))
    engine.normalise('internal-1.0 or mit')  # 'Internal-1.0 OR MIT'
"""

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
from spdxkit.engine import (
    DEFAULT_OPTIONS,
    ExpressionEngine,
    ParseOptions,
    compound,
    default_engine,
    extract_ids,
    normalise,
    parse,
    parse_with_info,
    simple,
    unparse,
    valid,
    walk,
)
from spdxkit.errors import ConfigError, RegistryDataError, SpdxKitError
from spdxkit.parser import ParseFailure
from spdxkit.registry import IdRegistry, SpdxIdRegistry
from spdxkit.walker import TreeVisitor

__all__ = [
    'DEFAULT_OPTIONS',
    'Addition',
    'AdditionRef',
    'ConfigError',
    'ExceptionId',
    'ExpressionEngine',
    'Group',
    'IdRegistry',
    'LicenseComponent',
    'LicenseRef',
    'Node',
    'Operator',
    'ParseFailure',
    'ParseOptions',
    'RegistryDataError',
    'SimpleLicense',
    'SpdxIdRegistry',
    'SpdxKitError',
    'TreeVisitor',
    'compound',
    'default_engine',
    'extract_ids',
    'normalise',
    'parse',
    'parse_with_info',
    'simple',
    'unparse',
    'valid',
    'walk',
]
