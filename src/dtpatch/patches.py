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
Property patches applied to a parsed device tree.

Lookups on the tree model return None when a node or property is absent. The
helpers here are for callers that treat absence as fatal: they raise
NodeNotFoundError or PropertyNotFoundError naming the path that failed.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from .models import Node, Property, PropertyPatch, PatchResult, PatchStatus
from .exceptions import NodeNotFoundError, PropertyNotFoundError


def split_path(path: str) -> Tuple[str, ...]:
    """Split 'a/b/c' into node names. '' and '/' address the root itself."""
    return tuple(part for part in path.strip().strip('/').split('/') if part)


def format_path(path: Sequence[str]) -> str:
    """Join node names into an absolute path, '/' for the root."""
    return "/" + "/".join(path)


def require_node(root: Node, path: Sequence[str]) -> Node:
    """
    Walk down from root, failing on the first missing child.

    Raises:
        NodeNotFoundError: If any node along the path does not exist
    """
    node = root
    for depth, name in enumerate(path):
        child = node.find_child(name)
        if child is None:
            raise NodeNotFoundError(
                f"Node '{name}' not found under '{format_path(path[:depth])}' "
                f"(looking up {format_path(path)})",
                path
            )
        node = child
    return node


def require_property(node: Node, key: str, path: Sequence[str] = ()) -> Property:
    """
    Raises:
        PropertyNotFoundError: If node has no property with this key
    """
    prop = node.find_property(key)
    if prop is None:
        raise PropertyNotFoundError(
            f"Property '{key}' not found in node {format_path(path)}", tuple(path) + (key,)
        )
    return prop


def apply_patch(root: Node, patch: PropertyPatch, create: bool = False) -> PatchResult:
    """
    Assign a patch's value to a property.

    Optional patches whose node is missing are skipped. A missing property
    is appended to the node when create is set and is an error otherwise.
    """
    if patch.optional and root.find_node(patch.path) is None:
        return PatchResult(patch=patch, status=PatchStatus.SKIPPED)

    node = require_node(root, patch.path)
    if create and node.find_property(patch.key) is None:
        node.properties.append(Property(key=patch.key, value=patch.value))
        return PatchResult(patch=patch, status=PatchStatus.APPLIED)

    prop = require_property(node, patch.key, patch.path)
    previous = prop.value

    if previous == patch.value:
        return PatchResult(patch=patch, status=PatchStatus.UNCHANGED, previous=previous)

    prop.value = patch.value
    return PatchResult(patch=patch, status=PatchStatus.APPLIED, previous=previous)


def apply_patches(root: Node, patches: Iterable[PropertyPatch],
                  create: bool = False) -> List[PatchResult]:
    """Apply patches in order, stopping at the first lookup failure."""
    return [apply_patch(root, patch, create) for patch in patches]


def parse_assignment(assignment: str, optional: bool = False) -> PropertyPatch:
    """
    Parse a 'node/path:key=value' assignment.

    'node/path:key' without '=' assigns no value (a flag property). A single
    trailing ';' on the value or flag name is dropped.

    Raises:
        ValueError: If the key is missing or '=' is followed by no value
    """
    target, sep, value = assignment.partition('=')
    path, colon, key = target.rpartition(':')
    if not colon:
        raise ValueError(f"Expected 'node/path:key=value', got {assignment!r}")

    key = key.strip()
    if not sep and key.endswith(';'):
        key = key[:-1].rstrip()
    if not key:
        raise ValueError(f"Missing property name in {assignment!r}")

    patch_value: Optional[str] = None
    if sep:
        patch_value = value.strip()
        if patch_value.endswith(';'):
            patch_value = patch_value[:-1].rstrip()
        if not patch_value:
            raise ValueError(f"Missing value after '=' in {assignment!r}")
    return PropertyPatch(path=split_path(path), key=key, value=patch_value, optional=optional)


def _camera_patches(sensor: str, modes: int) -> List[PropertyPatch]:
    sensor_path = ("cam_i2cmux", "i2c@0", sensor)
    patches = [
        PropertyPatch(sensor_path + (f"mode{i}",), "tegra_sinterface", '"serial_a"')
        for i in range(modes)
    ]
    patches.append(
        PropertyPatch(sensor_path + ("ports", "port@0", "endpoint"), "port-index", "<0x00>")
    )
    return patches


# Jetson Orin carrier board fixes: enable the microSD slot where present and
# route the IMX477/IMX219 camera modules to CSI port A.
DEFAULT_PATCHES: Tuple[PropertyPatch, ...] = tuple(
    [PropertyPatch(("sdhci@3440000",), "status", '"okay"', optional=True)]
    + _camera_patches("rbpcv3_imx477_a@1a", 2)
    + _camera_patches("rbpcv2_imx219_a@10", 5)
)
