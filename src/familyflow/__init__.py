"""
FamilyFlow - Automatic layout for family trees

Positions the people of a family tree given parent/child and spouse
relationships, using a layered (Sugiyama-style) layout for generations and
placing spouses next to their partner.

Example:
    >>> from familyflow import Edge, EdgeKind, Node, layout_family_tree
    >>> nodes = [Node("1"), Node("2"), Node("3")]
    >>> edges = [
    ...     Edge("e1-2", "1", "2"),
    ...     Edge("e1-3", "1", "3", kind=EdgeKind.PAIRING),
    ... ]
    >>> nodes, edges = layout_family_tree(nodes, edges, direction="TB")

Debug Mode Example:
    >>> result = FamilyTreeLayout().compute(nodes, edges, debug=True)
    >>> print(result.trace.summary())
"""

from .config import LayoutConfig
from .document import (
    DocumentError,
    FamilyDocument,
    dumps_document,
    load_document,
    parse_document,
    save_document,
)
from .editing import EditError, FamilyTree
from .engine import FamilyTreeLayout, TreeLayoutResult, layout_family_tree
from .layout import HierarchyLayout, LayoutResult, NodeLayout
from .models import (
    Direction,
    Edge,
    EdgeKind,
    HandleSide,
    Node,
    Placement,
    Position,
)
from .partition import Partition, partition_graph
from .positioning import Bounds, PositionCalculator, compute_bounds
from .templates import load_template, template_names
from .tracer import LayoutTrace, NodePlacement, PipelineStage

__version__ = "0.1.0"

__all__ = [
    # Main API
    "FamilyTreeLayout",
    "TreeLayoutResult",
    "layout_family_tree",
    "LayoutConfig",
    # Models
    "Direction",
    "Edge",
    "EdgeKind",
    "HandleSide",
    "Node",
    "Placement",
    "Position",
    # Pipeline stages
    "Partition",
    "partition_graph",
    "HierarchyLayout",
    "LayoutResult",
    "NodeLayout",
    "PositionCalculator",
    "Bounds",
    "compute_bounds",
    # Documents and editing
    "FamilyDocument",
    "DocumentError",
    "parse_document",
    "load_document",
    "save_document",
    "dumps_document",
    "FamilyTree",
    "EditError",
    "load_template",
    "template_names",
    # Debug/Tracing
    "LayoutTrace",
    "NodePlacement",
    "PipelineStage",
]
