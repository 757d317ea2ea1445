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
Conversion between device tree blobs and source using the dtc binary.
"""

import subprocess
from typing import List

import libfdt

from .exceptions import CompilerError


DEFAULT_DTC = "dtc"


class DeviceTreeCompiler:
    """
    Runs dtc to convert between DTB and DTS and checks compiled blobs.

    Attributes:
        dtc: dtc executable name or path
    """

    def __init__(self, dtc: str = DEFAULT_DTC):
        self.dtc = dtc

    def decompile(self, dtb_path: str, dts_path: str) -> None:
        """Convert a blob to source text."""
        self._run(["-I", "dtb", "-O", "dts", dtb_path, "-o", dts_path])

    def compile(self, dts_path: str, dtb_path: str) -> None:
        """Convert source text to a blob."""
        self._run(["-I", "dts", "-O", "dtb", dts_path, "-o", dtb_path])

    def verify_blob(self, dtb_path: str) -> int:
        """
        Check that a blob loads and has a root node.

        Returns:
            Total size of the blob in bytes

        Raises:
            CompilerError: If the blob cannot be read or is not a valid FDT
        """
        try:
            with open(dtb_path, 'rb') as f:
                dtb_data = f.read()
        except OSError as e:
            raise CompilerError(f"Failed to read DTB file {dtb_path}: {e}")

        try:
            fdt = libfdt.Fdt(dtb_data)
            fdt.path_offset('/')
            return fdt.totalsize()
        except libfdt.FdtException as e:
            error_msg = f"FDT error: {e}"
            if hasattr(e, 'err'):
                error_msg += f" (error code: {e.err})"
            raise CompilerError(f"Invalid DTB file {dtb_path}: {error_msg}")

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        cmd = [self.dtc] + args
        try:
            return subprocess.run(cmd, capture_output=True, text=True, check=True)
        except FileNotFoundError:
            raise CompilerError(f"dtc executable not found: {self.dtc}")
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise CompilerError(f"{' '.join(cmd)} failed: {detail}")
