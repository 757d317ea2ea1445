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
extlinux boot menu reading and entry generation.

This module provides the ExtlinuxConfig class for reading the boot menu used by
U-Boot's extlinux support and for appending a new entry that points at a
patched device tree blob.
"""

import dataclasses
from pathlib import Path
from typing import Optional, Tuple

from .models import BootConfig, BootEntry
from .exceptions import BootConfigError


DEFAULT_EXTLINUX_PATH = "/boot/extlinux/extlinux.conf"
DEFAULT_PREFIX = "patched_"

# Longest keywords first so MENU LABEL is not taken for a bare keyword
_ENTRY_KEYWORDS = (
    ("MENU LABEL", "menu_label"),
    ("LINUX", "linux"),
    ("FDT", "fdt"),
    ("INITRD", "initrd"),
    ("APPEND", "append"),
)


def _split_keyword(line: str, keyword: str) -> Optional[str]:
    """Return the argument of line if it starts with keyword as whole words."""
    words = keyword.split()
    parts = line.split(None, len(words))
    if len(parts) < len(words):
        return None
    if [p.upper() for p in parts[:len(words)]] != words:
        return None
    return parts[len(words)].strip() if len(parts) > len(words) else ""


def parse_extlinux(content: str) -> BootConfig:
    """
    Parse extlinux.conf text.

    Args:
        content: File contents

    Returns:
        BootConfig with global settings and one BootEntry per LABEL block

    Raises:
        BootConfigError: If TIMEOUT is not an integer
    """
    config = BootConfig()
    entry: Optional[BootEntry] = None

    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith('#'):
            continue

        label = _split_keyword(line, "LABEL")
        if label is not None:
            entry = BootEntry(label=label)
            config.entries.append(entry)
            continue

        # Global settings may appear anywhere, including between LABEL blocks
        timeout = _split_keyword(line, "TIMEOUT")
        if timeout is not None:
            try:
                config.timeout = int(timeout)
            except ValueError:
                raise BootConfigError(f"Invalid TIMEOUT value: {timeout!r}")
            continue

        default = _split_keyword(line, "DEFAULT")
        if default is not None:
            config.default = default
            continue

        title = _split_keyword(line, "MENU TITLE")
        if title is not None:
            config.menu_title = title
            continue

        if entry is None:
            continue

        for keyword, attr in _ENTRY_KEYWORDS:
            value = _split_keyword(line, keyword)
            if value is not None:
                setattr(entry, attr, value)
                break

    return config


def make_patched_entry(entry: BootEntry, fdt_path: str, prefix: str = DEFAULT_PREFIX) -> BootEntry:
    """
    Copy a boot entry so that it boots with a different device tree blob.

    Raises:
        BootConfigError: If the source entry is incomplete
    """
    if not entry.is_complete:
        missing = [f.name for f in dataclasses.fields(entry) if getattr(entry, f.name) is None]
        raise BootConfigError(
            f"Boot entry '{entry.label}' is incomplete (missing: {', '.join(missing)})"
        )

    return dataclasses.replace(
        entry,
        label=prefix + entry.label,
        menu_label=prefix + entry.menu_label,
        fdt=fdt_path,
    )


def render_entry(entry: BootEntry) -> str:
    """Render a boot entry as an extlinux LABEL block."""
    lines = [f"LABEL {entry.label}"]
    fields: Tuple[Tuple[str, Optional[str]], ...] = (
        ("MENU LABEL", entry.menu_label),
        ("LINUX", entry.linux),
        ("FDT", entry.fdt),
        ("INITRD", entry.initrd),
        ("APPEND", entry.append),
    )
    for keyword, value in fields:
        if value is not None:
            lines.append(f"\t{keyword} {value}")
    return "\n".join(lines) + "\n"


class ExtlinuxConfig:
    """
    Reads and extends an extlinux.conf file.

    Attributes:
        path: Path to extlinux.conf
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or DEFAULT_EXTLINUX_PATH)

    def load(self) -> BootConfig:
        """Read and parse the configuration file."""
        with open(self.path, 'r', encoding='utf-8') as f:
            return parse_extlinux(f.read())

    def select_entry(self, label: Optional[str] = None) -> BootEntry:
        """
        Get the entry with the given label, or the DEFAULT entry.

        Raises:
            BootConfigError: If no matching entry exists
        """
        config = self.load()
        wanted = label or config.default
        if wanted is None:
            raise BootConfigError(f"No DEFAULT entry in {self.path} and no label given")

        entry = config.find_entry(wanted)
        if entry is None:
            available = ", ".join(e.label for e in config.entries) or "none"
            raise BootConfigError(
                f"Boot entry '{wanted}' not found in {self.path} (available: {available})"
            )
        return entry

    def append_entry(self, entry: BootEntry) -> None:
        """
        Append an entry to the end of the configuration file.

        Raises:
            BootConfigError: If an entry with the same label already exists
        """
        if self.load().find_entry(entry.label) is not None:
            raise BootConfigError(f"Boot entry '{entry.label}' already exists in {self.path}")

        with open(self.path, 'a', encoding='utf-8') as f:
            f.write("\n\n" + render_entry(entry))
