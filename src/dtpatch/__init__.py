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
dtpatch: Device Tree Source Patcher

Parses decompiled device tree source, patches nodes and properties by name,
re-emits source for dtc and registers the result as a new extlinux boot entry.
"""

__version__ = "0.1.0"

from .models import Node, Property, BootEntry, BootConfig, ROOT_NODE_NAME
from .dts import DeviceTreeSourceParser, parse_dts, stringify, index_brackets
from .patches import apply_patch, apply_patches, require_node, require_property
from .exceptions import (
    DtpatchError,
    ParseError,
    MalformedDocumentError,
    LookupFailedError,
    NodeNotFoundError,
    PropertyNotFoundError,
    BootConfigError,
    CompilerError,
)

__all__ = [
    # Tree model
    'Node',
    'Property',
    'BootEntry',
    'BootConfig',
    'ROOT_NODE_NAME',
    # Source handling
    'DeviceTreeSourceParser',
    'parse_dts',
    'stringify',
    'index_brackets',
    # Patching
    'apply_patch',
    'apply_patches',
    'require_node',
    'require_property',
    # Exceptions
    'DtpatchError',
    'ParseError',
    'MalformedDocumentError',
    'LookupFailedError',
    'NodeNotFoundError',
    'PropertyNotFoundError',
    'BootConfigError',
    'CompilerError',
]
