"""Tests for system information parsers."""

from __future__ import annotations

from kiroboot.sysinfo.parsers import (
    format_bytes,
    format_hertz,
    parse_chipset_model,
    parse_cpuinfo,
    parse_df_device,
    parse_lspci_gpu,
    parse_meminfo,
    parse_os_release,
    parse_vm_stat_active,
)

OS_RELEASE = """\
NAME="Ubuntu"
VERSION_ID="22.04"
PRETTY_NAME="Ubuntu 22.04.4 LTS"
# comment
ID=ubuntu
"""

CPUINFO = """\
processor\t: 0
model name\t: Intel(R) Core(TM) i7-8650U CPU @ 1.90GHz
cpu MHz\t\t: 2112.000

processor\t: 1
model name\t: Intel(R) Core(TM) i7-8650U CPU @ 1.90GHz
cpu MHz\t\t: 1900.000
"""

MEMINFO = """\
MemTotal:       16303912 kB
MemFree:         1203452 kB
MemAvailable:    8151956 kB
SwapTotal:       2097148 kB
SwapFree:        2097148 kB
HugePages_Total:       0
"""

VM_STAT = """\
Mach Virtual Memory Statistics: (page size of 16384 bytes)
Pages free:                               12345.
Pages active:                            100000.
Pages inactive:                           90000.
"""

LSPCI = """\
00:00.0 Host bridge: Intel Corporation Xeon E3-1200 v6/7th Gen Core Processor Host Bridge
00:02.0 VGA compatible controller: Intel Corporation UHD Graphics 620 (rev 07)
"""


class TestParseOsRelease:
    def test_parses_quoted_values(self) -> None:
        values = parse_os_release(OS_RELEASE)
        assert values["PRETTY_NAME"] == "Ubuntu 22.04.4 LTS"
        assert values["VERSION_ID"] == "22.04"
        assert values["ID"] == "ubuntu"


class TestParseCpuinfo:
    def test_model_cores_frequency(self) -> None:
        info = parse_cpuinfo(CPUINFO)
        assert info["model"] == "Intel(R) Core(TM) i7-8650U CPU @ 1.90GHz"
        assert info["cores"] == "2"
        assert info["frequency"] == "2112.00 MHz"

    def test_empty(self) -> None:
        assert parse_cpuinfo("") == {}


class TestParseMeminfo:
    def test_converts_to_bytes(self) -> None:
        values = parse_meminfo(MEMINFO)
        assert values["MemTotal"] == 16303912 * 1024
        assert values["SwapFree"] == 2097148 * 1024
        assert values["HugePages_Total"] == 0


class TestDarwinParsers:
    def test_vm_stat_active(self) -> None:
        assert parse_vm_stat_active(VM_STAT) == 100000 * 16384

    def test_vm_stat_missing(self) -> None:
        assert parse_vm_stat_active("") is None

    def test_chipset_model(self) -> None:
        text = "Graphics/Displays:\n\n    Apple M1:\n\n      Chipset Model: Apple M1\n"
        assert parse_chipset_model(text) == "Apple M1"
        assert parse_chipset_model("") is None


class TestLinuxParsers:
    def test_lspci_gpu(self) -> None:
        assert parse_lspci_gpu(LSPCI) == "Intel Corporation UHD Graphics 620 (rev 07)"

    def test_lspci_without_gpu(self) -> None:
        assert parse_lspci_gpu(LSPCI.splitlines()[0]) is None

    def test_df_device(self) -> None:
        text = "Filesystem 1K-blocks Used Available Use% Mounted on\n/dev/sda1 100 50 50 50% /\n"
        assert parse_df_device(text) == "/dev/sda1"
        assert parse_df_device("") is None


class TestFormatting:
    def test_format_bytes(self) -> None:
        assert format_bytes(512) == "512 B"
        assert format_bytes(2048) == "2.00 KB"
        assert format_bytes(16 * 1024 ** 3) == "16.00 GB"
        assert format_bytes(3 * 1024 ** 4) == "3.00 TB"

    def test_format_hertz(self) -> None:
        assert format_hertz("3200000000") == "3.20 GHz"
        assert format_hertz("n/a") is None
