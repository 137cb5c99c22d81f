"""Plain-text table output for the system information report."""

from __future__ import annotations

from typing import IO, List, Sequence

from kiroboot.sysinfo.probes import Section

LABEL_WIDTH = 30
SEPARATOR = "━" * 56


class SysinfoTableReport:
    """Writes sections as two-column tables."""

    def report(self, sections: Sequence[Section], output: IO[str]) -> None:
        lines = self._format(sections)
        output.write("\n".join(lines))
        output.write("\n")

    def _format(self, sections: Sequence[Section]) -> List[str]:
        lines: List[str] = []
        for section in sections:
            lines.append("")
            lines.append(f" {section.title} ")
            lines.append(SEPARATOR)
            for label, value in section.rows:
                lines.append(f"{label:<{LABEL_WIDTH}} {value}")
        lines.append("")
        lines.append(SEPARATOR)
        return lines
