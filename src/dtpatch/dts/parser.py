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
Device tree source parsing into a mutable node tree.
"""

from typing import Optional, Sequence, Tuple

from ..models import BracketEvent, BracketKind, LineKind, Node, Property
from ..exceptions import MalformedDocumentError
from .indexer import classify_line, index_brackets, KEY_VALUE_SEPARATOR, OPEN_MARKER


class DeviceTreeSourceParser:
    """Recursive-descent parser for decompiled device tree source."""

    def parse(self, dts_content: str) -> Node:
        """
        Parse DTS text into its root node.

        Args:
            dts_content: Complete DTS document

        Returns:
            Root Node of the document

        Raises:
            MalformedDocumentError: If the document is structurally inconsistent
        """
        lines = dts_content.splitlines()
        events = index_brackets(lines)

        cursor, root = self.parse_node(lines, events, 0)

        if cursor + 1 < len(events):
            extra = events[cursor + 1]
            raise MalformedDocumentError(
                "content after the top-level node is not supported", extra.line + 1
            )

        return root

    def parse_node(self, lines: Sequence[str], events: Sequence[BracketEvent],
                   cursor: int) -> Tuple[int, Node]:
        """
        Parse the node whose open event is events[cursor].

        Returns:
            Tuple of (index of the node's close event, parsed Node)
        """
        opening = events[cursor]
        if opening.kind is not BracketKind.OPEN:
            raise MalformedDocumentError("expected a node header", opening.line + 1)

        node = Node(name=self._parse_header(lines[opening.line], opening.line))
        line_no = opening.line

        while True:
            line_no += 1
            if line_no >= len(lines):
                raise MalformedDocumentError(
                    f"node '{node.name}' is never closed", opening.line + 1
                )

            following = cursor + 1
            if following < len(events) and events[following].line == line_no:
                if events[following].kind is BracketKind.OPEN:
                    cursor, child = self.parse_node(lines, events, following)
                    node.children.append(child)
                    line_no = events[cursor].line
                    continue
                return following, node

            prop = self._parse_property(lines[line_no], line_no)
            if prop is not None:
                node.properties.append(prop)

    def _parse_header(self, line: str, line_no: int) -> str:
        text = line.strip()
        if not text.endswith(OPEN_MARKER):
            raise MalformedDocumentError(
                f"node header does not end with '{OPEN_MARKER}': {text!r}", line_no + 1
            )
        return text[:-len(OPEN_MARKER)].strip()

    def _parse_property(self, line: str, line_no: int) -> Optional[Property]:
        """Build a Property from a body line, or None for lines that carry nothing."""
        kind = classify_line(line, line_no)
        text = line.strip()

        if kind is LineKind.PROPERTY:
            key, value = (part.strip() for part in text.split(KEY_VALUE_SEPARATOR, 1))
            if not value.endswith(';'):
                raise MalformedDocumentError(f"property is not terminated by ';': {text!r}", line_no + 1)
            value = value[:-1].strip()
            if not key or not value:
                raise MalformedDocumentError(f"incomplete property: {text!r}", line_no + 1)
            return Property(key=key, value=value)

        if kind is LineKind.FLAG:
            key = text[:-1].strip()
            if not key:
                raise MalformedDocumentError("property without a name", line_no + 1)
            return Property(key=key)

        if kind in (LineKind.BLANK, LineKind.COMMENT, LineKind.DIRECTIVE):
            return None

        # NODE_OPEN/NODE_CLOSE lines always coincide with an event
        raise MalformedDocumentError(f"unrecognized line: {text!r}", line_no + 1)


def parse_dts(dts_content: str) -> Node:
    """Parse DTS text into its root node."""
    return DeviceTreeSourceParser().parse(dts_content)

