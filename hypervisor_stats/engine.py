# engine.py

"""Per-host processing of node attribute trees into reports."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from .aggregator import aggregate
from .config import DEFAULT_MAX_WORKERS
from .exceptions import ParseError, SchemaError
from .models import FleetReport, HostFailure, HostOutcome, HostRecord, NodeAttributes
from .report import build_report

logger = logging.getLogger(__name__)

def process_node(node: NodeAttributes) -> HostOutcome:
    """Parse, aggregate and report a single node, capturing schema failures."""
    try:
        host = HostRecord.from_attributes(node.name, node.attributes)
    except (SchemaError, ParseError) as e:
        reason = f"{type(e).__name__}: {e}"
        logger.warning(f"Skipping {node.name}: {reason}")
        return HostOutcome(node=node.name, report=None, failure=HostFailure(node.name, reason))

    result = aggregate(host)
    logger.debug(
        f"{host.name}: {result.running_guests} running guests, "
        f"{result.running_core_total} cores, {result.running_memory_total.kib:g} KiB"
    )
    return HostOutcome(node=node.name, report=build_report(host, result), failure=None)

def build_reports(nodes: Sequence[NodeAttributes],
                  max_workers: Optional[int] = DEFAULT_MAX_WORKERS) -> FleetReport:
    """
    Build reports for every node, keeping the input order.

    Nodes that fail schema validation are skipped and listed in the
    returned failures instead of aborting the run.

    Args:
        nodes: Node attribute trees tagged with their node names
        max_workers: Size of the worker pool; 1 or less runs sequentially

    Returns:
        FleetReport with reports and failures, both in input order
    """
    if not max_workers or max_workers <= 1 or len(nodes) <= 1:
        outcomes: List[HostOutcome] = [process_node(node) for node in nodes]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            outcomes = list(executor.map(process_node, nodes))

    reports = [outcome.report for outcome in outcomes if outcome.ok]
    failures = [outcome.failure for outcome in outcomes if not outcome.ok]

    logger.info(f"Processed {len(nodes)} nodes: {len(reports)} reported, {len(failures)} skipped")
    return FleetReport(reports=reports, failures=failures)
