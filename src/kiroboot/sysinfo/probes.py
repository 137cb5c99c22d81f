"""Host probes for the system information report.

A probe gathers one report section at a time. Every data source is
optional: a missing file, tool or field yields "Not detected" for that row
and never aborts the report.
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from kiroboot.bootstrap.platform import PlatformInfo
from kiroboot.core.logging import get_logger
from kiroboot.core.subprocess_runner import run_command
from kiroboot.sysinfo import parsers

LOGGER = get_logger(__name__)

NOT_DETECTED = "Not detected"
PROBE_TIMEOUT = 15

Row = Tuple[str, str]
CommandRunner = Callable[..., subprocess.CompletedProcess]


@dataclass
class Section:
    """A titled block of (label, value) rows."""

    title: str
    rows: List[Row] = field(default_factory=list)

    def add(self, label: str, value: Optional[str]) -> None:
        self.rows.append((label, value if value else NOT_DETECTED))


class SystemProbe:
    """Base probe; reports only the detected platform.

    Subclasses fill in the sections for the platforms they understand.
    """

    os_type = "Unknown"

    def __init__(
        self,
        runner: CommandRunner = run_command,
        root: Path = Path("/"),
        info: Optional[PlatformInfo] = None,
    ) -> None:
        self._runner = runner
        self._root = root
        self._info = info

    def sections(self) -> List[Section]:
        return [
            self.os_section(),
            self.cpu_section(),
            self.memory_section(),
            self.gpu_section(),
            self.disk_section(),
            self.swap_section(),
        ]

    def os_section(self) -> Section:
        section = Section("Operating System")
        if self._info is None:
            section.add("OS Type", self.os_type)
            return section
        section.add("OS Type", self._info.display_name)
        section.add("Architecture", self._info.arch)
        section.add("Kernel", self._info.release)
        return section

    def cpu_section(self) -> Section:
        return Section("CPU Information")

    def memory_section(self) -> Section:
        return Section("Memory Information")

    def gpu_section(self) -> Section:
        return Section("GPU Information")

    def disk_section(self) -> Section:
        section = Section("Hard Disk Information")
        section.add("Device", parsers.parse_df_device(self._command(["df", str(self._root)]) or ""))
        try:
            usage = shutil.disk_usage(str(self._root))
        except OSError as e:
            LOGGER.debug(f"disk_usage failed: {e}")
            usage = None
        section.add("Total Size", parsers.format_bytes(usage.total) if usage else None)
        section.add("Used Space", parsers.format_bytes(usage.used) if usage else None)
        section.add("Free Space", parsers.format_bytes(usage.free) if usage else None)
        return section

    def swap_section(self) -> Section:
        return Section("SWAP Memory Information")

    def _command(self, cmd: List[str]) -> Optional[str]:
        """Run a probe command; None when it is missing or fails."""
        if shutil.which(cmd[0]) is None:
            LOGGER.debug(f"{cmd[0]} not found on PATH")
            return None
        try:
            result = self._runner(cmd, tool_name=cmd[0], timeout=PROBE_TIMEOUT)
        except (OSError, subprocess.TimeoutExpired) as e:
            LOGGER.debug(f"{cmd[0]} failed: {e}")
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    @staticmethod
    def _read(path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            LOGGER.debug(f"Cannot read {path}: {e}")
            return None


class LinuxProbe(SystemProbe):
    """Reads /etc/os-release, /proc and lspci."""

    os_type = "Linux"

    def __init__(
        self,
        runner: CommandRunner = run_command,
        root: Path = Path("/"),
        etc_dir: Path = Path("/etc"),
        proc_dir: Path = Path("/proc"),
        info: Optional[PlatformInfo] = None,
    ) -> None:
        super().__init__(runner, root, info)
        self._etc = etc_dir
        self._proc = proc_dir

    def os_section(self) -> Section:
        section = super().os_section()
        release = parsers.parse_os_release(self._read(self._etc / "os-release") or "")
        section.add("OS Version", release.get("PRETTY_NAME"))
        section.add("Version ID", release.get("VERSION_ID"))
        return section

    def cpu_section(self) -> Section:
        section = super().cpu_section()
        cpu = parsers.parse_cpuinfo(self._read(self._proc / "cpuinfo") or "")
        section.add("Model", cpu.get("model"))
        section.add("Cores", cpu.get("cores"))
        section.add("Frequency", cpu.get("frequency"))
        return section

    def memory_section(self) -> Section:
        section = super().memory_section()
        mem = self._meminfo()
        total = mem.get("MemTotal")
        available = mem.get("MemAvailable")
        section.add("Total Memory", _fmt(total))
        section.add(
            "Used Memory",
            _fmt(total - available) if total is not None and available is not None else None,
        )
        section.add("Available Memory", _fmt(available))
        return section

    def gpu_section(self) -> Section:
        section = super().gpu_section()
        if shutil.which("lspci") is None:
            section.add("GPU", "lspci not available")
            return section
        section.add("GPU", parsers.parse_lspci_gpu(self._command(["lspci"]) or ""))
        return section

    def swap_section(self) -> Section:
        section = super().swap_section()
        mem = self._meminfo()
        total = mem.get("SwapTotal")
        free = mem.get("SwapFree")
        section.add("Total SWAP", _fmt(total))
        section.add(
            "Used SWAP",
            _fmt(total - free) if total is not None and free is not None else None,
        )
        section.add("Free SWAP", _fmt(free))
        return section

    def _meminfo(self) -> Dict[str, int]:
        return parsers.parse_meminfo(self._read(self._proc / "meminfo") or "")


class DarwinProbe(SystemProbe):
    """Queries sw_vers, sysctl, vm_stat and system_profiler."""

    os_type = "macOS"
    DEFAULT_GPU = "Integrated GPU (Apple Silicon or Intel)"

    def os_section(self) -> Section:
        section = super().os_section()
        section.add("OS Version", self._command(["sw_vers", "-productVersion"]))
        section.add("Build", self._command(["sw_vers", "-buildVersion"]))
        return section

    def cpu_section(self) -> Section:
        section = super().cpu_section()
        section.add("Model", self._sysctl("machdep.cpu.brand_string"))
        section.add("Cores", self._sysctl("hw.ncpu"))
        frequency = self._sysctl("hw.cpufrequency_max")
        section.add("Max Frequency", parsers.format_hertz(frequency) if frequency else None)
        return section

    def memory_section(self) -> Section:
        section = super().memory_section()
        memsize = self._sysctl("hw.memsize")
        section.add(
            "Total Memory",
            parsers.format_bytes(int(memsize)) if memsize and memsize.isdigit() else None,
        )
        active = parsers.parse_vm_stat_active(self._command(["vm_stat"]) or "")
        section.add("Used Memory", _fmt(active))
        return section

    def gpu_section(self) -> Section:
        section = super().gpu_section()
        output = self._command(["system_profiler", "SPDisplaysDataType"]) or ""
        section.add("GPU", parsers.parse_chipset_model(output) or self.DEFAULT_GPU)
        return section

    def swap_section(self) -> Section:
        section = super().swap_section()
        section.add("SWAP Usage", self._sysctl("vm.swapusage"))
        return section

    def _sysctl(self, name: str) -> Optional[str]:
        return self._command(["sysctl", "-n", name])


def _fmt(amount: Optional[int]) -> Optional[str]:
    return parsers.format_bytes(amount) if amount is not None else None


def select_probe(info: Optional[PlatformInfo]) -> SystemProbe:
    """Pick the probe for a platform; unknown platforms get the base probe."""
    if info is not None and info.is_linux:
        return LinuxProbe(info=info)
    if info is not None and info.is_macos:
        return DarwinProbe(info=info)
    return SystemProbe(info=info)
