# aggregator.py

"""Utilization aggregation over a hypervisor's running guests."""

import logging
import math
from functools import reduce
from typing import List, NamedTuple, Optional

from .config import BASE_UNIT
from .exceptions import ParseError
from .models import GuestRecord, HostRecord, UtilizationResult
from .parsing import SizeQuantity, parse_count, parse_size

logger = logging.getLogger(__name__)

class _Totals(NamedTuple):
    guests: int = 0
    cores: int = 0
    memory_kib: float = 0.0

def _accumulate(totals: _Totals, guest: GuestRecord) -> _Totals:
    if not guest.is_running:
        return totals
    return _Totals(
        guests=totals.guests + 1,
        cores=totals.cores + guest.cores,
        memory_kib=totals.memory_kib + guest.max_memory.kib
    )

def _ratio(used: float, capacity: float) -> Optional[float]:
    if capacity <= 0:
        return None
    try:
        ratio = used / capacity
    except OverflowError:
        return None
    # denormal capacities overflow to inf
    return ratio if math.isfinite(ratio) else None

def aggregate(host: HostRecord) -> UtilizationResult:
    """
    Sum cores and max memory of running guests and compare with capacity.

    Guests in any other state are ignored. Ratios are not capped, so an
    overcommitted host reports values above 1.0; a ratio is None when the
    matching host capacity is zero or too small to give a finite ratio.

    Args:
        host: Parsed hypervisor record

    Returns:
        UtilizationResult for the host
    """
    totals = reduce(_accumulate, host.guests.values(), _Totals())

    return UtilizationResult(
        running_guests=totals.guests,
        running_core_total=totals.cores,
        running_memory_total=SizeQuantity(kib=totals.memory_kib, unit=BASE_UNIT),
        core_utilization_ratio=_ratio(totals.cores, host.total_cores),
        memory_utilization_ratio=_ratio(totals.memory_kib, host.total_memory.kib)
    )

def probe_divergence(host: HostRecord, result: UtilizationResult) -> List[str]:
    """
    Compare the probe's precomputed guest totals with the computed ones.

    The probe totals may be stale or include non-running guests, so they are
    only reported alongside the computed figures, never substituted.
    """
    notes = []

    if host.probe_guest_cpu_total is not None:
        try:
            probe_cores = parse_count(host.probe_guest_cpu_total)
        except ParseError as e:
            logger.debug(f"{host.name}: ignoring probe guest_cpu_total: {e}")
        else:
            if probe_cores != result.running_core_total:
                notes.append(
                    f"Probe guest CPU total ({probe_cores}) differs from running "
                    f"guest cores ({result.running_core_total})"
                )

    if host.probe_guest_maxmemory_total is not None:
        try:
            probe_memory = parse_size(host.probe_guest_maxmemory_total)
        except ParseError as e:
            logger.debug(f"{host.name}: ignoring probe guest_maxmemory_total: {e}")
        else:
            if probe_memory.kib != result.running_memory_total.kib:
                notes.append(
                    f"Probe guest max memory total ({probe_memory}) differs from "
                    f"running guest max memory ({result.running_memory_total.kib:g} {BASE_UNIT})"
                )

    return notes
