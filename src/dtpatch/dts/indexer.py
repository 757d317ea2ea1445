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
Line classification and bracket indexing for DTS text.
"""

import re
from typing import List, Optional, Sequence

from ..models import BracketEvent, BracketKind, LineKind
from ..exceptions import MalformedDocumentError


COMMENT_MARKER = "//"
OPEN_MARKER = "{"
CLOSE_MARKER = "};"
KEY_VALUE_SEPARATOR = " = "

# /dts-v1/; /plugin/; /memreserve/ 0x0 0x1000;
_DIRECTIVE_RE = re.compile(r'^/[A-Za-z][A-Za-z0-9-]*/.*;$')


def classify_line(line: str, line_no: Optional[int] = None) -> LineKind:
    """
    Classify a single source line.

    Args:
        line: Raw line text (surrounding whitespace is ignored)
        line_no: 0-based line index, used only for error messages

    Returns:
        LineKind of the line

    Raises:
        MalformedDocumentError: If the line both opens and closes a node
    """
    text = line.strip()

    if not text:
        return LineKind.BLANK
    if text.startswith(COMMENT_MARKER):
        return LineKind.COMMENT

    opens = OPEN_MARKER in text
    closes = CLOSE_MARKER in text
    if opens and closes:
        raise MalformedDocumentError(
            f"line both opens and closes a node: {text!r}",
            None if line_no is None else line_no + 1
        )
    if opens:
        return LineKind.NODE_OPEN
    if closes:
        return LineKind.NODE_CLOSE

    if _DIRECTIVE_RE.match(text):
        return LineKind.DIRECTIVE
    if KEY_VALUE_SEPARATOR in text:
        return LineKind.PROPERTY
    if '=' not in text and text.endswith(';'):
        return LineKind.FLAG
    return LineKind.UNKNOWN


def index_brackets(lines: Sequence[str]) -> List[BracketEvent]:
    """
    Record an event for every structural brace, in line order.

    Raises:
        MalformedDocumentError: If the document has no nodes, closes a node
            that was never opened, or leaves nodes open at the end
    """
    events: List[BracketEvent] = []
    open_lines: List[int] = []

    for line_no, line in enumerate(lines):
        kind = classify_line(line, line_no)
        if kind is LineKind.NODE_OPEN:
            events.append(BracketEvent(line_no, BracketKind.OPEN))
            open_lines.append(line_no)
        elif kind is LineKind.NODE_CLOSE:
            if not open_lines:
                raise MalformedDocumentError("unexpected '};' without open node", line_no + 1)
            events.append(BracketEvent(line_no, BracketKind.CLOSE))
            open_lines.pop()

    if not events:
        raise MalformedDocumentError("document contains no nodes")
    if open_lines:
        raise MalformedDocumentError(
            f"{len(open_lines)} node(s) never closed", open_lines[-1] + 1
        )

    return events
