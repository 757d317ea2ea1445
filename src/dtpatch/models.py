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
Data models for device tree source and boot menu representation.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple
from enum import Enum


ROOT_NODE_NAME = "/"


class BracketKind(Enum):
    """Structural brace events recorded by the bracket indexer."""
    OPEN = "open"
    CLOSE = "close"


class LineKind(Enum):
    """
    Classification of a single DTS source line.

    States:
    - BLANK: Empty or whitespace-only line
    - COMMENT: Line comment (starts with //)
    - DIRECTIVE: Version header or other /name/ directive
    - NODE_OPEN: Node header ending with {
    - NODE_CLOSE: Node terminator };
    - PROPERTY: key = value;
    - FLAG: key; (property without value)
    - UNKNOWN: Anything else
    """
    BLANK = "blank"
    COMMENT = "comment"
    DIRECTIVE = "directive"
    NODE_OPEN = "node-open"
    NODE_CLOSE = "node-close"
    PROPERTY = "property"
    FLAG = "flag"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BracketEvent:
    """Open or close brace tied to a 0-based source line."""
    line: int
    kind: BracketKind


@dataclass
class Property:
    """Device tree property. A value of None means the property has no value."""
    key: str
    value: Optional[str] = None


@dataclass
class Node:
    """Device tree node owning its properties and child nodes."""
    name: str
    properties: List[Property] = field(default_factory=list)
    children: List['Node'] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        """Whether this node carries the top-level root name."""
        return self.name == ROOT_NODE_NAME

    def find_property(self, key: str) -> Optional[Property]:
        """Get the first property of this node with exactly this key."""
        for prop in self.properties:
            if prop.key == key:
                return prop
        return None

    def find_child(self, name: str) -> Optional['Node']:
        """Get the first direct child with exactly this name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find_node(self, path: Sequence[str]) -> Optional['Node']:
        """
        Walk down a sequence of child names.

        Args:
            path: Child names, one per level. An empty path returns self.

        Returns:
            The node at the end of the path, or None if any step is missing
        """
        node = self
        for name in path:
            node = node.find_child(name)
            if node is None:
                return None
        return node


@dataclass
class BootEntry:
    """One LABEL block of an extlinux boot menu."""
    label: Optional[str] = None
    menu_label: Optional[str] = None
    linux: Optional[str] = None
    fdt: Optional[str] = None
    initrd: Optional[str] = None
    append: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """All six fields are populated."""
        return all(value is not None for value in (
            self.label, self.menu_label, self.linux,
            self.fdt, self.initrd, self.append
        ))


@dataclass
class BootConfig:
    """Parsed extlinux.conf contents."""
    timeout: Optional[int] = None
    default: Optional[str] = None
    menu_title: Optional[str] = None
    entries: List[BootEntry] = field(default_factory=list)

    def find_entry(self, label: str) -> Optional[BootEntry]:
        """Get the first entry with the given label."""
        for entry in self.entries:
            if entry.label == label:
                return entry
        return None

    def default_entry(self) -> Optional[BootEntry]:
        """Get the entry selected by DEFAULT, if any."""
        if self.default is None:
            return None
        return self.find_entry(self.default)


@dataclass
class PatchPaths:
    """File names derived from the device tree blob of a boot entry."""
    dtb: str
    dts: str
    new_dts: str
    new_dtb: str
    backup: str


class PatchStatus(Enum):
    """Outcome of applying a single property patch."""
    APPLIED = "applied"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class PropertyPatch:
    """Assignment of a value to a property of the node at path (relative to root)."""
    path: Tuple[str, ...]
    key: str
    value: Optional[str] = None
    optional: bool = False

    @property
    def location(self) -> str:
        """Human readable node path plus property key."""
        return "/" + "/".join(self.path) + ":" + self.key


@dataclass
class PatchResult:
    """Result of applying a PropertyPatch."""
    patch: PropertyPatch
    status: PatchStatus
    previous: Optional[str] = None
