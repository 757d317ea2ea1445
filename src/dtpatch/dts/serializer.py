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
Node tree to DTS text rendering.
"""

from ..models import Node, Property


VERSION_HEADER = "/dts-v1/;"
INDENT = "\t"


def format_property(prop: Property) -> str:
    """Render a property without indentation."""
    if prop.value is None:
        return f"{prop.key};"
    return f"{prop.key} = {prop.value};"


def stringify(node: Node, depth: int = 0) -> str:
    """
    Render a node and its subtree as DTS text.

    The root node at depth 0 is preceded by the version header. Properties
    come first, then one blank line if the node has children, then the
    children separated by blank lines.

    Args:
        node: Node to render
        depth: Indentation level (one tab per level)

    Returns:
        DTS text ending with a newline
    """
    indent = INDENT * depth
    parts = []

    if depth == 0 and node.is_root:
        parts.append(f"{VERSION_HEADER}\n\n")

    parts.append(f"{indent}{node.name} {{\n")

    for prop in node.properties:
        parts.append(f"{indent}{INDENT}{format_property(prop)}\n")

    if node.children:
        parts.append("\n")
        parts.append("\n".join(stringify(child, depth + 1) for child in node.children))

    parts.append(f"{indent}}};\n")
    return "".join(parts)
