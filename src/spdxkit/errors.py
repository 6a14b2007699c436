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

"""Exception hierarchy for spdxkit.

Malformed license expressions are *not* errors: the public parsing
operations report them as ``None`` or as a
:class:`~spdxkit.parser.ParseFailure` value. The exceptions here cover
bad registry data and bad configuration.
"""

from __future__ import annotations

__all__ = [
    'ConfigError',
    'RegistryDataError',
    'SpdxKitError',
]


class SpdxKitError(ValueError):
    """Base class for all spdxkit errors."""


class ConfigError(SpdxKitError):
    """Raised when an spdxkit configuration file is invalid."""


class RegistryDataError(SpdxKitError):
    """Raised when license/exception registry TOML data fails validation.

    Attributes:
        errors: List of human-readable error strings.
    """

    def __init__(self, errors: list[str]) -> None:
        """Initialize with the list of validation errors."""
        self.errors = errors
        bullet_list = '\n'.join(f'  - {e}' for e in errors)
        super().__init__(f'Id registry has {len(errors)} validation error(s):\n{bullet_list}')
