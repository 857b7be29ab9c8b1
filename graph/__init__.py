"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Node, Edge
    from graph import NodeStatus, NodeLabelState
    from graph import GraphInvalid, GraphCheck
"""

from graph.node   import Node,  NodeStatus, NodeLabelState, INF
from graph.edge   import Edge
from graph.errors import GraphInvalid, GraphCheck
from graph.graph  import Graph

__all__ = [
    "Node",         "NodeStatus",   "NodeLabelState",   "INF",
    "Edge",
    "GraphInvalid", "GraphCheck",
    "Graph",
]
