# models.py

"""Data models for Hypervisor Stats."""

from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, List, Mapping, NamedTuple, Optional, Tuple

from .config import (
    PROBE_PATH, PROBE_TIME_KEY, HARDWARE_KEY, MEMORY_SIZE_KEY, CPUS_KEY,
    GUESTS_KEY, GUEST_STATE_KEY, GUEST_MAX_MEMORY_KEY, GUEST_USED_MEMORY_KEY,
    GUEST_CPU_TOTAL_KEY, GUEST_MAXMEMORY_TOTAL_KEY, GUEST_USEDMEMORY_TOTAL_KEY,
    RUNNING_STATES, PAUSED_STATES, STOPPED_STATES
)
from .exceptions import ParseError, SchemaError
from .parsing import SizeQuantity, parse_count, parse_size

class GuestState(Enum):
    """Run state of a guest, collapsed from the virsh domain state."""
    RUNNING = "running"
    STOPPED = "stopped"
    PAUSED = "paused"
    UNKNOWN = "unknown"

    @classmethod
    def from_probe(cls, raw: Optional[str]) -> "GuestState":
        if not isinstance(raw, str):
            return cls.UNKNOWN
        state = raw.strip().lower()
        if state in RUNNING_STATES:
            return cls.RUNNING
        if state in PAUSED_STATES:
            return cls.PAUSED
        if state in STOPPED_STATES:
            return cls.STOPPED
        return cls.UNKNOWN

def _require(mapping: Mapping[str, Any], key: str, path: str) -> Any:
    if key not in mapping or mapping[key] is None:
        raise SchemaError(f"Missing required attribute {path}")
    return mapping[key]

def _require_mapping(mapping: Mapping[str, Any], key: str, path: str) -> Mapping[str, Any]:
    value = _require(mapping, key, path)
    if not isinstance(value, Mapping):
        raise SchemaError(f"Attribute {path} is not a mapping")
    return value

def _passthrough(value: Any) -> Optional[str]:
    return None if value is None else str(value)

class GuestRecord(NamedTuple):
    """A guest virtual machine as seen by the probe on its host."""
    name: str
    state: GuestState
    raw_state: str
    cores: int
    max_memory: SizeQuantity
    used_memory: Optional[SizeQuantity]

    @property
    def is_running(self) -> bool:
        return self.state is GuestState.RUNNING

    @classmethod
    def from_attributes(cls, name: str, raw: Any, path: str = GUESTS_KEY) -> "GuestRecord":
        """
        Build a GuestRecord from one entry of the probe's guest mapping.

        A missing state falls back to GuestState.UNKNOWN so it can never count
        as running. CPU(s) and Max memory are required.

        Raises:
            SchemaError: required guest attribute is missing
            ParseError: core count or memory figure is malformed
        """
        guest_path = f"{path}.{name}"
        if not isinstance(raw, Mapping):
            raise SchemaError(f"Attribute {guest_path} is not a mapping")

        raw_state = raw.get(GUEST_STATE_KEY)
        try:
            cores = parse_count(_require(raw, CPUS_KEY, f"{guest_path}.{CPUS_KEY}"))
            max_memory = parse_size(
                _require(raw, GUEST_MAX_MEMORY_KEY, f"{guest_path}.{GUEST_MAX_MEMORY_KEY}")
            )
            used_raw = raw.get(GUEST_USED_MEMORY_KEY)
            used_memory = parse_size(used_raw) if used_raw is not None else None
        except ParseError as e:
            raise ParseError(f"{guest_path}: {e}") from e

        return cls(
            name=name,
            state=GuestState.from_probe(raw_state),
            raw_state=raw_state if isinstance(raw_state, str) else GuestState.UNKNOWN.value,
            cores=cores,
            max_memory=max_memory,
            used_memory=used_memory
        )

class HostRecord(NamedTuple):
    """A hypervisor node with its hardware capacity and guests."""
    name: str
    total_cores: int
    total_memory: SizeQuantity
    last_probe_time: Optional[datetime]
    probe_guest_cpu_total: Optional[str]
    probe_guest_maxmemory_total: Optional[str]
    probe_guest_usedmemory_total: Optional[str]
    guests: Mapping[str, GuestRecord]

    @classmethod
    def from_attributes(cls, name: str, raw: Any) -> "HostRecord":
        """
        Build a HostRecord from a node's full attribute tree.

        Args:
            name: Node identifier in the inventory
            raw: Node attribute tree containing automatic.virtualization.kvm

        Raises:
            SchemaError: the KVM probe data or a required field is missing
            ParseError: a capacity or guest figure is malformed
        """
        if not isinstance(raw, Mapping):
            raise SchemaError(f"Attribute tree for {name} is not a mapping")

        node = raw
        path = ""
        for key in PROBE_PATH:
            path = f"{path}.{key}" if path else key
            node = _require_mapping(node, key, path)
        kvm = node

        automatic = raw[PROBE_PATH[0]]
        last_probe_time = None
        if automatic.get(PROBE_TIME_KEY) is not None:
            try:
                last_probe_time = datetime.fromtimestamp(float(automatic[PROBE_TIME_KEY]))
            except (TypeError, ValueError, OverflowError, OSError) as e:
                raise ParseError(
                    f"{PROBE_PATH[0]}.{PROBE_TIME_KEY} is not a timestamp: {e}"
                ) from e

        hardware_path = f"{path}.{HARDWARE_KEY}"
        hardware = _require_mapping(kvm, HARDWARE_KEY, hardware_path)
        try:
            total_memory = parse_size(
                _require(hardware, MEMORY_SIZE_KEY, f"{hardware_path}[{MEMORY_SIZE_KEY}]")
            )
            total_cores = parse_count(
                _require(hardware, CPUS_KEY, f"{hardware_path}[{CPUS_KEY}]")
            )
        except ParseError as e:
            raise ParseError(f"{hardware_path}: {e}") from e

        guests_path = f"{path}.{GUESTS_KEY}"
        raw_guests = _require_mapping(kvm, GUESTS_KEY, guests_path)
        guests = {
            str(guest_name): GuestRecord.from_attributes(str(guest_name), attrs, guests_path)
            for guest_name, attrs in raw_guests.items()
        }

        return cls(
            name=name,
            total_cores=total_cores,
            total_memory=total_memory,
            last_probe_time=last_probe_time,
            probe_guest_cpu_total=_passthrough(kvm.get(GUEST_CPU_TOTAL_KEY)),
            probe_guest_maxmemory_total=_passthrough(kvm.get(GUEST_MAXMEMORY_TOTAL_KEY)),
            probe_guest_usedmemory_total=_passthrough(kvm.get(GUEST_USEDMEMORY_TOTAL_KEY)),
            guests=MappingProxyType(guests)
        )

class UtilizationResult(NamedTuple):
    """Resources committed to running guests versus host capacity."""
    running_guests: int
    running_core_total: int
    running_memory_total: SizeQuantity
    core_utilization_ratio: Optional[float]  # None when host has no cores
    memory_utilization_ratio: Optional[float]  # None when host has no memory

class GuestRow(NamedTuple):
    """Display row for a single guest."""
    name: str
    state: str
    cores: int
    max_memory: str
    used_memory: str

class Report(NamedTuple):
    """Per-host utilization report."""
    host: str
    last_probe_time: Optional[datetime]
    total_cores: int
    total_memory: SizeQuantity
    probe_guest_cpu_total: Optional[str]
    probe_guest_maxmemory_total: Optional[str]
    probe_guest_usedmemory_total: Optional[str]
    utilization: UtilizationResult
    guests: Tuple[GuestRow, ...]
    notes: Tuple[str, ...]

class NodeAttributes(NamedTuple):
    """Raw attribute tree of one inventory node."""
    name: str
    attributes: Mapping[str, Any]

class HostFailure(NamedTuple):
    """A node skipped because its attributes could not be processed."""
    node: str
    reason: str

class HostOutcome(NamedTuple):
    """Result of processing one node: a report or a failure."""
    node: str
    report: Optional[Report]
    failure: Optional[HostFailure]

    @property
    def ok(self) -> bool:
        return self.report is not None

class FleetReport(NamedTuple):
    """Reports for all processed nodes plus the nodes that were skipped."""
    reports: List[Report]
    failures: List[HostFailure]
