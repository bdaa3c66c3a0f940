"""Locate and parse the PMD XML report written by sfpowerkit."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import defusedxml.ElementTree as ET  # Secure XML parsing (prevents XXE)
from defusedxml import DefusedXmlException

VENDOR_DIR = "sfpowerkit"
REPORT_FILENAME = "sf-pmd-output.xml"

STATUS_PARSED = "parsed"
STATUS_EMPTY = "empty"
STATUS_UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class AnalysisAggregate:
    violation_count: int = 0
    affected_file_count: int = 0

    def to_payload(self) -> dict[str, int]:
        return {
            "violation_count": self.violation_count,
            "affected_file_count": self.affected_file_count,
        }


@dataclass(frozen=True)
class ParsedReport:
    """Aggregate plus how the report looked, for logging only."""

    aggregate: AnalysisAggregate
    status: str


def locate_report(home_dir: Path | str, version: str) -> Path:
    """Return where sfpowerkit leaves the XML report for a PMD version."""
    return Path(home_dir) / VENDOR_DIR / "pmd" / f"pmd-bin-{version}" / REPORT_FILENAME


def get_xml_namespace(root: ET.Element) -> str:
    tag = root.tag
    if isinstance(tag, str) and tag.startswith("{"):
        return tag.split("}")[0][1:]
    return ""


def ns_tag(namespace: str, tag: str) -> str:
    if not namespace:
        return tag
    return f"{{{namespace}}}{tag}"


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def aggregate_report_text(text: str) -> ParsedReport:
    """Count violations and affected files in PMD report XML.

    Text that is not XML, or XML whose root is not ``pmd``, yields an empty
    aggregate with status ``unrecognized``. A ``pmd`` root without ``file``
    entries is a clean run.
    """
    try:
        root = ET.fromstring(text)
    except (ET.ParseError, DefusedXmlException):
        return ParsedReport(AnalysisAggregate(), STATUS_UNRECOGNIZED)

    if _local_name(root.tag) != "pmd":
        return ParsedReport(AnalysisAggregate(), STATUS_UNRECOGNIZED)

    namespace = get_xml_namespace(root)
    files = root.findall(ns_tag(namespace, "file"))
    if not files:
        return ParsedReport(AnalysisAggregate(), STATUS_EMPTY)

    violations = 0
    affected = 0
    for file_elem in files:
        count = len(file_elem.findall(ns_tag(namespace, "violation")))
        if count:
            affected += 1
            violations += count
    return ParsedReport(
        AnalysisAggregate(violation_count=violations, affected_file_count=affected),
        STATUS_PARSED,
    )


def parse_report(report_path: Path) -> ParsedReport:
    """Read and aggregate a report; OSError from reading the file propagates."""
    try:
        text = report_path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return ParsedReport(AnalysisAggregate(), STATUS_UNRECOGNIZED)
    return aggregate_report_text(text)
