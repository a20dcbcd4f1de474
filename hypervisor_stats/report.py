# report.py

"""Report assembly and text rendering."""

import logging
import math
from typing import List, Optional

from .aggregator import probe_divergence
from .config import RULE_WIDTH, UNDEFINED_RATIO
from .models import GuestRow, HostFailure, HostRecord, Report, UtilizationResult

logger = logging.getLogger(__name__)

def build_report(host: HostRecord, result: UtilizationResult) -> Report:
    """Assemble the report for a host, with guest rows in name order."""
    rows = tuple(
        GuestRow(
            name=guest.name,
            state=guest.raw_state,
            cores=guest.cores,
            max_memory=str(guest.max_memory),
            used_memory=str(guest.used_memory) if guest.used_memory is not None else ""
        )
        for guest in sorted(host.guests.values(), key=lambda g: g.name)
    )

    notes = probe_divergence(host, result)
    for note in notes:
        logger.warning(f"{host.name}: {note}")

    return Report(
        host=host.name,
        last_probe_time=host.last_probe_time,
        total_cores=host.total_cores,
        total_memory=host.total_memory,
        probe_guest_cpu_total=host.probe_guest_cpu_total,
        probe_guest_maxmemory_total=host.probe_guest_maxmemory_total,
        probe_guest_usedmemory_total=host.probe_guest_usedmemory_total,
        utilization=result,
        guests=rows,
        notes=tuple(notes)
    )

def utilization_percent(ratio: Optional[float]) -> Optional[int]:
    """Whole percentage for display, rounded half up; None when undefined."""
    if ratio is None or not math.isfinite(ratio * 100):
        return None
    # half up: round() would turn 12.5 into 12
    return int(math.floor(ratio * 100 + 0.5))

def format_percent(ratio: Optional[float]) -> str:
    percent = utilization_percent(ratio)
    return UNDEFINED_RATIO if percent is None else f"{percent}%"

def _display(value: Optional[str]) -> str:
    return value if value is not None else UNDEFINED_RATIO

def render_report(report: Report) -> str:
    """Render a report as the text block printed for each host."""
    probe_time = report.last_probe_time.isoformat(sep=" ") if report.last_probe_time else "unknown"
    lines = [
        "",
        "%-41s %-30s" % (f"Host: {report.host}", f"Chef Run: {probe_time}"),
        f"Host Mem: {report.total_memory}",
        f"Host Cores: {report.total_cores}",
        f"Guest CPU Total: {_display(report.probe_guest_cpu_total)}",
        f"Guest Max Mem Total: {_display(report.probe_guest_maxmemory_total)}",
        f"Guest Used Mem Total: {_display(report.probe_guest_usedmemory_total)}",
        "",
        "%-10s %-17s %-9s %-15s %-14s %-20s" % (
            "Guests:", "Host", "Cores", "Max Memory", "Used Memory", "State"
        ),
    ]

    for row in report.guests:
        lines.append(
            "%-10s %-20s %-2s %15s %15s %10s" % (
                "", row.name, row.cores, row.max_memory, row.used_memory, row.state
            )
        )

    lines.append("")
    lines.append(
        f"Resource Statistics - Cores: {format_percent(report.utilization.core_utilization_ratio)}"
        f"  Memory: {format_percent(report.utilization.memory_utilization_ratio)}"
    )
    for note in report.notes:
        lines.append(f"* {note}")
    lines.append("-" * RULE_WIDTH)

    return "\n".join(lines)

def render_failures(failures: List[HostFailure]) -> str:
    """Render the list of skipped hosts."""
    lines = ["", f"Skipped hosts: {len(failures)}"]
    for failure in failures:
        lines.append(f"  {failure.node}: {failure.reason}")
    return "\n".join(lines)
