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
Device tree source module for dtpatch.

Internal module providing line classification, bracket indexing, parsing and
rendering of decompiled device tree source.
"""

from .indexer import classify_line, index_brackets
from .parser import DeviceTreeSourceParser, parse_dts
from .serializer import stringify

__all__ = [
    'classify_line',
    'index_brackets',
    'DeviceTreeSourceParser',
    'parse_dts',
    'stringify',
]
