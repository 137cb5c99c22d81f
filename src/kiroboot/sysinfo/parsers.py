"""Parsers for the text sources the system probes read.

Each parser takes the raw text of a file or command output and returns
plain Python values; nothing here touches the system.
"""

from __future__ import annotations

import re
import shlex
from typing import Dict, List, Optional

_VM_STAT_PAGE_SIZE = re.compile(r"page size of (\d+) bytes")
_VM_STAT_ACTIVE = re.compile(r"^Pages active:\s+(\d+)\.?\s*$", re.MULTILINE)
_GPU_CLASS = re.compile(r"vga|3d|display", re.IGNORECASE)


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse /etc/os-release KEY=value lines (values may be quoted)."""
    values: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw = line.partition("=")
        try:
            parts = shlex.split(raw)
        except ValueError:
            continue
        values[key.strip()] = parts[0] if parts else ""
    return values


def parse_cpuinfo(text: str) -> Dict[str, str]:
    """Extract model, processor count and frequency from /proc/cpuinfo."""
    info: Dict[str, str] = {}
    processors = 0
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()
        if key == "processor":
            processors += 1
        elif key == "model name" and "model" not in info:
            info["model"] = value
        elif key == "cpu MHz" and "frequency" not in info:
            try:
                info["frequency"] = f"{float(value):.2f} MHz"
            except ValueError:
                pass
    if processors:
        info["cores"] = str(processors)
    return info


def parse_meminfo(text: str) -> Dict[str, int]:
    """Parse /proc/meminfo into a mapping of field name to bytes."""
    values: Dict[str, int] = {}
    for line in text.splitlines():
        key, sep, rest = line.partition(":")
        if not sep:
            continue
        fields = rest.split()
        if not fields or not fields[0].isdigit():
            continue
        amount = int(fields[0])
        if len(fields) > 1 and fields[1].lower() == "kb":
            amount *= 1024
        values[key.strip()] = amount
    return values


def parse_vm_stat_active(text: str) -> Optional[int]:
    """Return the bytes held by active pages in `vm_stat` output."""
    active = _VM_STAT_ACTIVE.search(text)
    if not active:
        return None
    page_size = _VM_STAT_PAGE_SIZE.search(text)
    size = int(page_size.group(1)) if page_size else 4096
    return int(active.group(1)) * size


def parse_lspci_gpu(text: str) -> Optional[str]:
    """Return the device description of the first display controller."""
    for line in text.splitlines():
        if not _GPU_CLASS.search(line):
            continue
        # "00:02.0 VGA compatible controller: Intel Corporation ..."
        parts = line.split(":", 2)
        if len(parts) == 3 and parts[2].strip():
            return parts[2].strip()
    return None


def parse_chipset_model(text: str) -> Optional[str]:
    """Return the first "Chipset Model" entry of system_profiler output."""
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip() == "Chipset Model" and value.strip():
            return value.strip()
    return None


def parse_df_device(text: str) -> Optional[str]:
    """Return the device column of the last line of `df` output."""
    lines: List[str] = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        return None
    return lines[-1].split()[0]


def format_bytes(amount: int) -> str:
    """Format a byte count using binary units (e.g. "15.49 GB")."""
    size = float(amount)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.2f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.2f} TB"


def format_hertz(raw: str) -> Optional[str]:
    try:
        return f"{int(raw) / 1_000_000_000:.2f} GHz"
    except ValueError:
        return None
