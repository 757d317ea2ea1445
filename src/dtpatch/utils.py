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
Utility functions for device tree file handling.

This module provides shared helpers for deriving file names from a boot
entry's device tree blob and for reading, writing and backing up files.
"""

import shutil
from pathlib import Path

from .models import PatchPaths
from .exceptions import BootConfigError


DTB_SUFFIX = ".dtb"
DTS_SUFFIX = ".dts"
NEW_SUFFIX = "_new"
BACKUP_SUFFIX = ".backup"


def derive_patch_paths(dtb_path: str) -> PatchPaths:
    """
    Derive the working file names for a device tree blob.

    Args:
        dtb_path: Path to the blob, e.g. /boot/board.dtb

    Returns:
        PatchPaths (board.dts, board_new.dts, board_new.dtb, board.dtb.backup)

    Raises:
        BootConfigError: If the path does not end with .dtb
    """
    if not dtb_path.endswith(DTB_SUFFIX):
        raise BootConfigError(f"FDT path does not end with {DTB_SUFFIX}: {dtb_path}")

    stem = dtb_path[:-len(DTB_SUFFIX)]
    return PatchPaths(
        dtb=dtb_path,
        dts=stem + DTS_SUFFIX,
        new_dts=stem + NEW_SUFFIX + DTS_SUFFIX,
        new_dtb=stem + NEW_SUFFIX + DTB_SUFFIX,
        backup=dtb_path + BACKUP_SUFFIX,
    )


def backup_file(source: str, destination: str) -> None:
    """Copy a file, preserving metadata."""
    shutil.copy2(source, destination)


def read_text(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def write_text(path: str, content: str) -> None:
    """Write text, creating parent directories as needed."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(content)
