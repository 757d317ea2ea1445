# Copyright 2025 Multikernel Technologies, Inc.
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

"""
Exception classes for dtpatch parsing, lookup and tooling errors.
"""

from typing import Optional, Sequence


class DtpatchError(Exception):
    """Base exception for all dtpatch errors."""


class ParseError(DtpatchError):
    """Raised when parsing DTS text fails."""


class MalformedDocumentError(ParseError):
    """Raised when DTS text is structurally inconsistent."""

    def __init__(self, message: str, line: Optional[int] = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class LookupFailedError(DtpatchError):
    """Raised by callers that require a node or property to exist."""

    def __init__(self, message: str, path: Sequence[str] = ()):
        super().__init__(message)
        self.path = tuple(path)


class NodeNotFoundError(LookupFailedError):
    """Raised when a required node is missing."""


class PropertyNotFoundError(LookupFailedError):
    """Raised when a required property is missing."""


class BootConfigError(DtpatchError):
    """Raised when the boot menu configuration is invalid."""


class CompilerError(DtpatchError):
    """Raised when dtc invocation or blob verification fails."""
