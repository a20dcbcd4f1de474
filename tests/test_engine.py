import pytest

from conftest import make_attributes, make_guest
from hypervisor_stats import engine
from hypervisor_stats.models import NodeAttributes


def fleet_nodes():
    return [
        NodeAttributes("hv1", make_attributes(guests={"a": make_guest("running", "4")})),
        NodeAttributes("broken", {"automatic": {"virtualization": {}}}),
        NodeAttributes("hv2", make_attributes(guests={"b": make_guest("running", "8")})),
        NodeAttributes("badmem", make_attributes(memory="abc KiB")),
        NodeAttributes("hv3", make_attributes()),
    ]


@pytest.mark.parametrize("workers", [1, 4])
def test_build_reports_keeps_input_order_and_isolates_failures(workers):
    fleet = engine.build_reports(fleet_nodes(), max_workers=workers)

    assert [report.host for report in fleet.reports] == ["hv1", "hv2", "hv3"]
    assert [report.utilization.running_core_total for report in fleet.reports] == [4, 8, 0]
    assert [failure.node for failure in fleet.failures] == ["broken", "badmem"]
    assert fleet.failures[0].reason.startswith("SchemaError:")
    assert fleet.failures[1].reason.startswith("ParseError:")


def test_parallel_and_sequential_results_match():
    sequential = engine.build_reports(fleet_nodes(), max_workers=1)
    parallel = engine.build_reports(fleet_nodes(), max_workers=3)
    assert sequential == parallel


def test_process_node_tags_outcome():
    ok = engine.process_node(NodeAttributes("hv1", make_attributes()))
    assert ok.ok
    assert ok.failure is None

    failed = engine.process_node(NodeAttributes("hv2", {}))
    assert not failed.ok
    assert failed.report is None
    assert failed.failure.node == "hv2"


def test_build_reports_logs_skipped_hosts(caplog):
    with caplog.at_level("WARNING"):
        engine.build_reports([NodeAttributes("hv2", {})], max_workers=1)
    assert "Skipping hv2: SchemaError" in caplog.text


def test_build_reports_empty_inventory():
    fleet = engine.build_reports([])
    assert fleet.reports == []
    assert fleet.failures == []


def test_oversized_and_tiny_hosts_do_not_stop_the_run():
    nodes = [
        NodeAttributes("huge", make_attributes(guests={"a": make_guest("running", "2", "1e308 TiB")})),
        NodeAttributes("tiny", make_attributes(memory="1e-320 KiB", guests={"a": make_guest("running")})),
        NodeAttributes("hv1", make_attributes()),
    ]
    fleet = engine.build_reports(nodes, max_workers=1)

    assert [report.host for report in fleet.reports] == ["tiny", "hv1"]
    assert fleet.reports[0].utilization.memory_utilization_ratio is None
    assert [failure.node for failure in fleet.failures] == ["huge"]
    assert fleet.failures[0].reason.startswith("ParseError:")
