"""
errors.py — Graph Validation Errors
====================================
Every structural problem with a graph / start / end combination is
reported as a single exception type, GraphInvalid.  The `check`
attribute says WHICH rule was broken so the UI can point at it.
"""

from enum import Enum
from typing import Optional


class GraphCheck(Enum):
    MALFORMED_DOCUMENT = "malformed_document"   # JSON missing id / endpoints
    EMPTY_GRAPH        = "empty_graph"
    DUPLICATE_NODE_ID  = "duplicate_node_id"
    DUPLICATE_EDGE_ID  = "duplicate_edge_id"
    DANGLING_EDGE      = "dangling_edge"        # endpoint not in node set
    NON_NUMERIC_WEIGHT = "non_numeric_weight"
    NEGATIVE_WEIGHT    = "negative_weight"
    UNKNOWN_START      = "unknown_start"
    UNKNOWN_END        = "unknown_end"


class GraphInvalid(ValueError):
    """
    Raised before any Step is produced.

    Attributes:
        check   : GraphCheck that failed.
        subject : id of the offending node / edge, when there is one.
    """

    def __init__(self, check: GraphCheck, message: str, subject: Optional[str] = None):
        super().__init__(message)
        self.check   = check
        self.subject = subject

    def to_dict(self) -> dict:
        return {
            "error":   str(self),
            "check":   self.check.value,
            "subject": self.subject,
        }
