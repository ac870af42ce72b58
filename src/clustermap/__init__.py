"""
ClusterMap
==========

Loader for network clustering results: hierarchical module trees
(.tree, .ftree) and flat partitions (.clu), with optional remapping of
multilayer (node, layer) pairs to state ids.

Modules
-------
cluster_map
    Format dispatch and the ClusterMap loader
tree_reader
    Tree and ftree line parser
clu_reader
    Clu line parser
multilayer
    Multilayer remap table lookup and construction
conversion
    Partitions, hierarchy graphs and tables built from loaded results
protocol
    Job events and result bundles of an external clustering engine
"""

__version__ = "0.1.0"

from . import conversion
from . import protocol
from .cluster_map import ClusterMap, detect_format, get_extension, load_cluster_data
from .conversion import (
    build_hierarchy,
    compare_partitions,
    flow_array,
    module_table,
    modules_at_level,
    to_communities,
    top_modules,
)
from .errors import (
    ClusterMapError,
    FileFormatError,
    NameExtractionError,
    UnsupportedFormatError,
)
from .multilayer import build_remap_table, lookup_state_id, read_remap_table
from .protocol import (
    JobData,
    JobError,
    JobFinished,
    JobLedger,
    ProtocolError,
    ResultBundle,
    reimport,
)
from .types import ClusterData, ClusterFormat, NodePath, TreeMode

__all__ = [
    "conversion",
    "protocol",
    "ClusterMap",
    "load_cluster_data",
    "detect_format",
    "get_extension",
    "ClusterData",
    "ClusterFormat",
    "NodePath",
    "TreeMode",
    "ClusterMapError",
    "FileFormatError",
    "NameExtractionError",
    "UnsupportedFormatError",
    "build_remap_table",
    "lookup_state_id",
    "read_remap_table",
    "modules_at_level",
    "top_modules",
    "to_communities",
    "build_hierarchy",
    "flow_array",
    "module_table",
    "compare_partitions",
    "ResultBundle",
    "JobData",
    "JobError",
    "JobFinished",
    "JobLedger",
    "ProtocolError",
    "reimport",
    "__version__",
]
