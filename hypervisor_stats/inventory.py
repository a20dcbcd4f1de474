# inventory.py

"""Sources of node attribute trees: the Chef server API and JSON dumps."""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional
from urllib.parse import quote

import requests

from .config import DEFAULT_NODE_QUERY, REQUEST_TIMEOUT, SEARCH_PAGE_SIZE
from .exceptions import InventoryError
from .models import NodeAttributes

logger = logging.getLogger(__name__)

class InventorySource:
    """Supplies the attribute trees of the nodes to report on."""

    def fetch_nodes(self) -> List[NodeAttributes]:
        raise NotImplementedError

def _node_from_json(data: Any, default_name: Optional[str] = None) -> NodeAttributes:
    if not isinstance(data, dict):
        raise InventoryError(f"Node record is not a JSON object: {type(data).__name__}")
    name = data.get("name") or default_name
    if not name:
        raise InventoryError("Node record has no name")
    return NodeAttributes(name=str(name), attributes=data)

class ChefServerInventory(InventorySource):
    """Loads nodes from a Chef server via the search or node endpoints."""

    def __init__(self, url: str, session: requests.Session,
                 query: str = DEFAULT_NODE_QUERY, node_name: Optional[str] = None,
                 page_size: int = SEARCH_PAGE_SIZE):
        self.url = url.rstrip('/')
        self.session = session
        self.query = query
        self.node_name = node_name
        self.page_size = page_size

    def _get(self, path: str, params: Optional[dict] = None) -> Any:
        try:
            response = self.session.get(
                f"{self.url}{path}", params=params, timeout=REQUEST_TIMEOUT
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise InventoryError(f"Chef server request {path} failed: {e}") from e
        except ValueError as e:
            raise InventoryError(f"Chef server returned invalid JSON for {path}: {e}") from e

    def fetch_node(self, name: str) -> NodeAttributes:
        """Load a single node by name."""
        return _node_from_json(self._get(f"/nodes/{quote(name, safe='')}"), name)

    def search(self) -> List[NodeAttributes]:
        """Run the node search query, following result pages."""
        nodes: List[NodeAttributes] = []
        start = 0
        while True:
            result = self._get("/search/node", params={
                "q": self.query, "start": start, "rows": self.page_size
            })
            if not isinstance(result, dict) or not isinstance(result.get("rows"), list):
                raise InventoryError("Chef search response has no rows")

            rows = result["rows"]
            nodes.extend(_node_from_json(row) for row in rows)
            total = result.get("total", len(nodes))
            logger.debug(f"Search {self.query!r}: {len(nodes)} of {total} nodes")

            start += len(rows)
            if not rows or start >= total:
                break
        return nodes

    def fetch_nodes(self) -> List[NodeAttributes]:
        if self.node_name:
            return [self.fetch_node(self.node_name)]
        nodes = self.search()
        logger.info(f"Found {len(nodes)} nodes matching {self.query!r}")
        return nodes

class JsonFileInventory(InventorySource):
    """
    Loads nodes from JSON files saved from the Chef server.

    Each file may hold a single node (knife node show -l -F json), a list of
    nodes, or a saved search response with a "rows" list.
    """

    def __init__(self, paths: Iterable[str]):
        self.paths = [Path(p) for p in paths]

    def _load(self, path: Path) -> List[NodeAttributes]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise InventoryError(f"Cannot read {path}: {e}") from e
        except ValueError as e:
            raise InventoryError(f"Invalid JSON in {path}: {e}") from e

        if isinstance(data, dict) and isinstance(data.get("rows"), list):
            return [_node_from_json(row) for row in data["rows"]]
        if isinstance(data, list):
            return [_node_from_json(item) for item in data]
        return [_node_from_json(data, path.stem)]

    def fetch_nodes(self) -> List[NodeAttributes]:
        nodes: List[NodeAttributes] = []
        for path in self.paths:
            nodes.extend(self._load(path))
        logger.info(f"Loaded {len(nodes)} nodes from {len(self.paths)} files")
        return nodes
