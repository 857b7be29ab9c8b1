"""Shared fixtures: the classroom graph, small hand-built graphs, the Flask app."""

from typing import List

import pytest

from graph import Graph, Node, Edge
from algorithms import Step, run_double_labeling
from main import create_app


def make_graph(node_ids, edges) -> Graph:
    """edges: [(edge_id, a, b, weight), ...]"""
    return Graph(
        [Node(id=nid) for nid in node_ids],
        [Edge(id=eid, a=a, b=b, weight=w) for eid, a, b, w in edges],
    )


@pytest.fixture
def example_graph() -> Graph:
    return Graph.default()


@pytest.fixture
def example_trace(example_graph: Graph) -> List[Step]:
    return run_double_labeling(example_graph, "v1", "v6")


@pytest.fixture
def app():
    return create_app({"TESTING": True, "SECRET_KEY": "test-secret"})


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
