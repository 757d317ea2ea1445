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
Tests for dtc invocation and blob verification.
"""

import subprocess
from unittest.mock import patch

import pytest
from dtpatch.compiler import DeviceTreeCompiler
from dtpatch.exceptions import CompilerError


class TestDeviceTreeCompiler:
    """Test DeviceTreeCompiler."""

    @patch("dtpatch.compiler.subprocess.run")
    def test_decompile_arguments(self, mock_run):
        """Test decompilation runs dtc from dtb to dts."""
        DeviceTreeCompiler().decompile("/boot/a.dtb", "/boot/a.dts")

        mock_run.assert_called_once_with(
            ["dtc", "-I", "dtb", "-O", "dts", "/boot/a.dtb", "-o", "/boot/a.dts"],
            capture_output=True, text=True, check=True
        )

    @patch("dtpatch.compiler.subprocess.run")
    def test_compile_arguments(self, mock_run):
        """Test compilation runs the configured dtc from dts to dtb."""
        DeviceTreeCompiler("/usr/local/bin/dtc").compile("/boot/a_new.dts", "/boot/a_new.dtb")

        args = mock_run.call_args[0][0]
        assert args == ["/usr/local/bin/dtc", "-I", "dts", "-O", "dtb",
                        "/boot/a_new.dts", "-o", "/boot/a_new.dtb"]

    @patch("dtpatch.compiler.subprocess.run")
    def test_missing_executable(self, mock_run):
        """Test a missing dtc binary is reported."""
        mock_run.side_effect = FileNotFoundError("dtc")

        with pytest.raises(CompilerError, match="not found"):
            DeviceTreeCompiler().compile("a.dts", "a.dtb")

    @patch("dtpatch.compiler.subprocess.run")
    def test_failure_includes_stderr(self, mock_run):
        """Test dtc's stderr is carried in the error."""
        mock_run.side_effect = subprocess.CalledProcessError(
            1, ["dtc"], output="", stderr="Error: a.dts:12.3-4 syntax error\n"
        )

        with pytest.raises(CompilerError, match="syntax error"):
            DeviceTreeCompiler().compile("a.dts", "a.dtb")

    @patch("dtpatch.compiler.subprocess.run")
    def test_failure_without_stderr(self, mock_run):
        """Test the exit status is reported when dtc prints nothing."""
        mock_run.side_effect = subprocess.CalledProcessError(2, ["dtc"], output="", stderr="")

        with pytest.raises(CompilerError, match="exit status 2"):
            DeviceTreeCompiler().decompile("a.dtb", "a.dts")

    def test_verify_valid_blob(self, tmp_path, sample_dtb):
        """Test a valid blob reports its size."""
        path = tmp_path / "a.dtb"
        path.write_bytes(sample_dtb)

        assert DeviceTreeCompiler().verify_blob(str(path)) == len(sample_dtb)

    def test_verify_invalid_blob(self, tmp_path):
        """Test garbage data is rejected."""
        path = tmp_path / "a.dtb"
        path.write_bytes(b"not a valid dtb")

        with pytest.raises(CompilerError, match="Invalid DTB"):
            DeviceTreeCompiler().verify_blob(str(path))

    def test_verify_missing_blob(self, tmp_path):
        """Test a missing blob is reported."""
        with pytest.raises(CompilerError, match="Failed to read"):
            DeviceTreeCompiler().verify_blob(str(tmp_path / "missing.dtb"))
