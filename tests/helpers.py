"""Shared builders for test fixtures."""

from __future__ import annotations


def make_report_xml(violations_per_file: list[int], namespace: str | None = None) -> str:
    """Build PMD report XML with one <file> per entry and that many violations."""
    xmlns = f' xmlns="{namespace}"' if namespace else ""
    parts = ['<?xml version="1.0" encoding="UTF-8"?>', f'<pmd version="6.22.0"{xmlns}>']
    for index, count in enumerate(violations_per_file):
        parts.append(f'  <file name="/src/classes/Class{index}.cls">')
        for line in range(count):
            parts.append(
                f'    <violation beginline="{line + 1}" rule="ApexDoc" priority="3">Missing ApexDoc</violation>'
            )
        parts.append("  </file>")
    parts.append("</pmd>")
    return "\n".join(parts)
