import json

import pytest
import requests

from conftest import make_attributes
from hypervisor_stats.exceptions import InventoryError
from hypervisor_stats.inventory import ChefServerInventory, JsonFileInventory


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        return self.responses.pop(0)


def node(name):
    data = make_attributes()
    data["name"] = name
    return data


def test_search_follows_pages():
    session = FakeSession([
        FakeResponse({"total": 3, "start": 0, "rows": [node("hv1"), node("hv2")]}),
        FakeResponse({"total": 3, "start": 2, "rows": [node("hv3")]}),
    ])
    inventory = ChefServerInventory("http://chef:4000/", session, page_size=2)

    nodes = inventory.fetch_nodes()

    assert [n.name for n in nodes] == ["hv1", "hv2", "hv3"]
    assert session.calls[0] == (
        "http://chef:4000/search/node", {"q": "role:hypervisor", "start": 0, "rows": 2}
    )
    assert session.calls[1][1]["start"] == 2


def test_search_stops_on_empty_page():
    session = FakeSession([FakeResponse({"total": 5, "start": 0, "rows": []})])
    assert ChefServerInventory("http://chef:4000", session).fetch_nodes() == []
    assert len(session.calls) == 1


def test_single_hypervisor_uses_node_endpoint():
    session = FakeSession([FakeResponse(node("hv1.example.com"))])
    inventory = ChefServerInventory("http://chef:4000", session, node_name="hv1.example.com")

    nodes = inventory.fetch_nodes()

    assert [n.name for n in nodes] == ["hv1.example.com"]
    assert session.calls[0][0] == "http://chef:4000/nodes/hv1.example.com"
    assert nodes[0].attributes["automatic"]["virtualization"]["kvm"]["hardware"]["CPU(s)"] == "16"


def test_http_error_raises_inventory_error():
    session = FakeSession([FakeResponse({}, status_code=404)])
    inventory = ChefServerInventory("http://chef:4000", session, node_name="missing")
    with pytest.raises(InventoryError):
        inventory.fetch_nodes()


def test_invalid_json_raises_inventory_error():
    session = FakeSession([FakeResponse(ValueError("Expecting value"))])
    with pytest.raises(InventoryError):
        ChefServerInventory("http://chef:4000", session).fetch_nodes()


def test_search_response_without_rows_raises_inventory_error():
    session = FakeSession([FakeResponse({"total": 0})])
    with pytest.raises(InventoryError):
        ChefServerInventory("http://chef:4000", session).fetch_nodes()


def test_json_file_inventory_formats(tmp_path):
    single = tmp_path / "hv1.json"
    single.write_text(json.dumps(node("hv1")))
    unnamed = tmp_path / "hv2.json"
    unnamed.write_text(json.dumps(make_attributes()))
    listing = tmp_path / "list.json"
    listing.write_text(json.dumps([node("hv3"), node("hv4")]))
    search = tmp_path / "search.json"
    search.write_text(json.dumps({"total": 1, "start": 0, "rows": [node("hv5")]}))

    nodes = JsonFileInventory([str(single), str(unnamed), str(listing), str(search)]).fetch_nodes()

    assert [n.name for n in nodes] == ["hv1", "hv2", "hv3", "hv4", "hv5"]


def test_json_file_inventory_errors(tmp_path):
    with pytest.raises(InventoryError):
        JsonFileInventory([str(tmp_path / "missing.json")]).fetch_nodes()

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(InventoryError):
        JsonFileInventory([str(broken)]).fetch_nodes()

    nameless = tmp_path / "nameless.json"
    nameless.write_text(json.dumps([make_attributes()]))
    with pytest.raises(InventoryError):
        JsonFileInventory([str(nameless)]).fetch_nodes()
