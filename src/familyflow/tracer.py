"""
Debug tracing for the layout pipeline.

When debug mode is enabled, the engine records a snapshot of every pipeline
stage and how each node ended up where it is. Useful for:
1. Understanding why a person sits where they do
2. Seeing intermediate states (ranks before ordering, satellites...)
3. Writing targeted tests against a single placement decision

Usage:
    >>> engine = FamilyTreeLayout()
    >>> result = engine.compute(nodes, edges, debug=True)
    >>> print(result.trace.summary())
    >>> result.trace.dump_to_file("layout_trace.txt")

The trace captures:
- Pipeline stages (partition, cycle_removal, ranking, ordering,
  coordinates, satellites)
- One placement record per node with its path, rank, order and position
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .models import Placement, Position


@dataclass
class NodePlacement:
    """
    Record of where a single node was placed and why.

    Attributes:
        node_id: The node that was placed.
        placement: Which path placed it (hierarchy, satellite or fallback).
        position: Final top-left position.
        rank: Rank for hierarchy nodes, None otherwise.
        order: Order within rank for hierarchy nodes, None otherwise.
        reason: Short explanation (e.g., "ranked", "partner of 'A'").
    """

    node_id: str
    placement: Placement
    position: Position
    rank: Optional[int] = None
    order: Optional[int] = None
    reason: str = ""

    def __str__(self) -> str:
        grid = ""
        if self.rank is not None:
            grid = f" rank={self.rank} order={self.order}"
        return (
            f"{self.node_id}: ({self.position.x:g},{self.position.y:g}) "
            f"[{self.placement.value}]{grid} {self.reason}".rstrip()
        )


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class LayoutTrace:
    """
    Complete trace of one layout run.

    Attributes:
        stages: Pipeline stages with their data
        placements: One record per placed node, in input order
        direction: The flow direction (TB or LR)
    """

    stages: List[PipelineStage] = field(default_factory=list)
    placements: List[NodePlacement] = field(default_factory=list)
    direction: str = "TB"

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """Add a pipeline stage snapshot."""
        self.stages.append(PipelineStage(name, data.copy()))

    def add_placement(self, placement: NodePlacement) -> None:
        self.placements.append(placement)

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_placement(self, node_id: str) -> Optional[NodePlacement]:
        for record in self.placements:
            if record.node_id == node_id:
                return record
        return None

    def get_placements_by_path(self, placement: Placement) -> List[NodePlacement]:
        """Get all placement records that took the given path."""
        return [p for p in self.placements if p.placement is placement]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with the direction, the stages that ran and the
        number of nodes per placement path.
        """
        lines = [
            "=" * 60,
            "LAYOUT TRACE SUMMARY",
            "=" * 60,
            "",
            f"Direction: {self.direction}",
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]

        for stage in self.stages:
            lines.append(f"  - {stage.name}")

        lines.extend(["", f"Total nodes placed: {len(self.placements)}"])

        lines.append("Placements by path:")
        for path in Placement:
            count = len(self.get_placements_by_path(path))
            lines.append(f"  {path.value}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """
        Generate a complete human-readable dump of the trace.

        Includes all stages with their full data and all placements.
        """
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]

        lines.append("PIPELINE STAGES:")
        lines.append("-" * 40)
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("NODE PLACEMENTS:")
        lines.append("-" * 40)
        for record in self.placements:
            lines.append(str(record))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
