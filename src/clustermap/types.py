"""
Data Types
==========

Records and containers produced by the clustering-file readers.

NodePath
    A state node and its 1-based path in the module hierarchy.
TreeMode
    Tree sub-dialect discovered while parsing a tree file.
ClusterFormat
    Format selected from the file extension.
ClusterData
    Collections accumulated by a single load call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, NamedTuple, Optional, Tuple

# layer_id -> (node_id -> state_id)
MultilayerRemapTable = Mapping[int, Mapping[int, int]]

FlowData = Dict[int, float]
ClusterIds = Dict[int, int]


class NodePath(NamedTuple):
    """
    Location of a state node in the module hierarchy.

    state_id: Effective state id (after multilayer remapping)
    path: 1-based child indices from the root to the leaf
    """

    state_id: int
    path: Tuple[int, ...]


class TreeMode(Enum):
    """Tree sub-dialect, discovered lazily from the first data lines."""

    UNDETERMINED = "undetermined"
    PLAIN_TREE = "plain_tree"
    HIGHER_ORDER_TREE = "higher_order_tree"

    def observe(self, has_physical_id: bool) -> "TreeMode":
        """
        Return the mode after seeing a line with or without a physical id.

        Raises ValueError when a higher-order parse meets a line without
        the physical node id.
        """
        if has_physical_id:
            return TreeMode.HIGHER_ORDER_TREE
        if self is TreeMode.HIGHER_ORDER_TREE:
            raise ValueError("Missing physical node id in higher-order tree")
        return TreeMode.PLAIN_TREE

    @property
    def is_higher_order(self) -> bool:
        return self is TreeMode.HIGHER_ORDER_TREE


class ClusterFormat(Enum):
    """Clustering file format, selected by extension."""

    TREE = "tree"
    FTREE = "ftree"
    CLU = "clu"

    @property
    def is_hierarchical(self) -> bool:
        return self is not ClusterFormat.CLU

    @classmethod
    def from_extension(cls, extension: str) -> Optional["ClusterFormat"]:
        """Return the format for an extension, or None if unsupported."""
        for fmt in cls:
            if fmt.value == extension:
                return fmt
        return None


@dataclass
class ClusterData:
    """
    Result of loading one clustering file.

    ``node_paths`` is filled by tree/ftree files and ``cluster_ids`` by
    clu files. ``flow_data`` is only filled when flow retention was
    requested.
    """

    format: ClusterFormat
    source: Optional[str] = None
    node_paths: List[NodePath] = field(default_factory=list)
    flow_data: FlowData = field(default_factory=dict)
    cluster_ids: ClusterIds = field(default_factory=dict)

    # First-line comment of a tree file, e.g. '# Codelength = 3.46 bits.'
    header: Optional[str] = None
    # Section line ('*...') that stopped a tree parse
    section: Optional[str] = None
    mode: TreeMode = TreeMode.UNDETERMINED
    # Lines dropped because the multilayer lookup missed
    num_skipped: int = 0

    @property
    def is_higher_order(self) -> bool:
        return self.mode.is_higher_order

    @property
    def num_nodes(self) -> int:
        if self.format.is_hierarchical:
            return len(self.node_paths)
        return len(self.cluster_ids)


__all__ = [
    "MultilayerRemapTable",
    "FlowData",
    "ClusterIds",
    "NodePath",
    "TreeMode",
    "ClusterFormat",
    "ClusterData",
]
