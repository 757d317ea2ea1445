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
Pytest configuration and fixtures for dtpatch tests.
"""

import pytest
import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

import libfdt


# Trimmed `dtc -I dtb -O dts` output of a Jetson Orin NX carrier board
ORIN_DTS = """/dts-v1/;

/ {
\tcompatible = "nvidia,p3768-0000+p3767-0000\\0nvidia,tegra234";
\tmodel = "NVIDIA Jetson Orin NX Engineering Reference Developer Kit";
\t#address-cells = <0x02>;
\t#size-cells = <0x02>;
\tinterrupt-parent = <0x01>;

\tsdhci@3440000 {
\t\tcompatible = "nvidia,tegra234-sdhci\\0nvidia,tegra186-sdhci";
\t\treg = <0x00 0x3440000 0x00 0x10000>;
\t\tstatus = "disabled";
\t\tsupports-cqe;
\t};

\tcam_i2cmux {
\t\tcompatible = "i2c-mux-gpio";
\t\t#address-cells = <0x01>;
\t\t#size-cells = <0x00>;

\t\ti2c@0 {
\t\t\treg = <0x00>;
\t\t\t#address-cells = <0x01>;
\t\t\t#size-cells = <0x00>;

\t\t\trbpcv3_imx477_a@1a {
\t\t\t\tcompatible = "ridgerun,imx477";
\t\t\t\treg = <0x1a>;

\t\t\t\tmode0 {
\t\t\t\t\tmclk_khz = "24000";
\t\t\t\t\tnum_lanes = "2";
\t\t\t\t\ttegra_sinterface = "serial_b";
\t\t\t\t};

\t\t\t\tmode1 {
\t\t\t\t\tmclk_khz = "24000";
\t\t\t\t\ttegra_sinterface = "serial_b";
\t\t\t\t};

\t\t\t\tports {

\t\t\t\t\tport@0 {
\t\t\t\t\t\treg = <0x00>;

\t\t\t\t\t\tendpoint {
\t\t\t\t\t\t\tport-index = <0x01>;
\t\t\t\t\t\t\tbus-width = <0x02>;
\t\t\t\t\t\t};
\t\t\t\t\t};
\t\t\t\t};
\t\t\t};

\t\t\trbpcv2_imx219_a@10 {
\t\t\t\tcompatible = "sony,imx219";
\t\t\t\treg = <0x10>;

\t\t\t\tmode0 {
\t\t\t\t\ttegra_sinterface = "serial_b";
\t\t\t\t};

\t\t\t\tmode1 {
\t\t\t\t\ttegra_sinterface = "serial_b";
\t\t\t\t};

\t\t\t\tmode2 {
\t\t\t\t\ttegra_sinterface = "serial_b";
\t\t\t\t};

\t\t\t\tmode3 {
\t\t\t\t\ttegra_sinterface = "serial_b";
\t\t\t\t};

\t\t\t\tmode4 {
\t\t\t\t\ttegra_sinterface = "serial_b";
\t\t\t\t};

\t\t\t\tports {

\t\t\t\t\tport@0 {
\t\t\t\t\t\treg = <0x00>;

\t\t\t\t\t\tendpoint {
\t\t\t\t\t\t\tport-index = <0x01>;
\t\t\t\t\t\t\tbus-width = <0x02>;
\t\t\t\t\t\t};
\t\t\t\t\t};
\t\t\t\t};
\t\t\t};
\t\t};
\t};

\tchosen {
\t\tbootargs = "console=ttyTCU0,115200 firmware_class.path=/etc/firmware";
\t};
};
"""


EXTLINUX_CONF = """TIMEOUT 30
DEFAULT primary

MENU TITLE L4T boot options

LABEL primary
      MENU LABEL primary kernel
      LINUX /boot/Image
      FDT /boot/dtb/kernel_tegra234-p3768-0000+p3767-0000-nv.dtb
      INITRD /boot/initrd
      APPEND ${cbootargs} root=/dev/nvme0n1p1 rw rootwait rootfstype=ext4

# When testing a custom kernel, it is recommended that you create a new
# boot entry so that you can easily revert to the original kernel.

LABEL backup
      MENU LABEL backup kernel
      LINUX /boot/Image.backup
      FDT /boot/dtb/backup.dtb
      INITRD /boot/initrd
      APPEND ${cbootargs} root=/dev/nvme0n1p1 rw rootwait
"""


@pytest.fixture
def orin_dts():
    """Decompiled device tree source text."""
    return ORIN_DTS


@pytest.fixture
def extlinux_conf():
    """extlinux.conf contents with two entries."""
    return EXTLINUX_CONF


@pytest.fixture
def sample_dtb():
    """Build a minimal valid DTB with libfdt's sequential writer."""
    fdt_sw = libfdt.FdtSw()
    fdt_sw.finish_reservemap()
    fdt_sw.begin_node('')
    fdt_sw.property_string('model', 'dtpatch test board')
    fdt_sw.begin_node('chosen')
    fdt_sw.property_string('bootargs', 'console=ttyS0')
    fdt_sw.end_node()
    fdt_sw.end_node()

    dtb = fdt_sw.as_fdt()
    dtb.pack()
    return bytes(dtb.as_bytearray())


@pytest.fixture
def boot_dir(tmp_path, extlinux_conf):
    """A boot directory whose extlinux.conf points at files under tmp_path."""
    dtb_path = tmp_path / "board.dtb"
    dtb_path.write_bytes(b"\xd0\x0d\xfe\xed")
    conf = extlinux_conf.replace(
        "/boot/dtb/kernel_tegra234-p3768-0000+p3767-0000-nv.dtb", str(dtb_path)
    )
    conf_path = tmp_path / "extlinux.conf"
    conf_path.write_text(conf)
    return tmp_path
