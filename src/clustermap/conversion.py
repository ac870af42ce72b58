"""
Conversion Utilities
====================

Views over loaded clustering results, for use with network analysis code.

Partitions are exchanged in the two usual shapes:

- Dict: {state_id: module}
- List of sets: [{state_id, ...}, {state_id, ...}]

Hierarchies are rebuilt as a ``networkx.DiGraph`` whose nodes are path
prefixes, so ``()`` is the root, ``(1,)`` the first top module and
``(1, 2, 3)`` a leaf.
"""

import logging
from typing import Dict, Hashable, List, Optional, Sequence, Set, Tuple

import networkx as nx
import numpy as np
import pandas as pd
from sklearn.metrics import adjusted_rand_score, normalized_mutual_info_score

from .types import ClusterIds, FlowData, NodePath

logger = logging.getLogger(__name__)


def modules_at_level(
    node_paths: Sequence[NodePath],
    level: int = 1,
) -> Dict[int, Tuple[int, ...]]:
    """
    Assign each state node to its module at a given hierarchy level.

    Parameters
    ----------
    node_paths : sequence of NodePath
        Node paths as read from a tree file
    level : int
        Depth of the module to report; 1 gives top modules. Nodes whose
        module path is shorter than ``level`` report their deepest module,
        and a leaf directly under the root reports the root ``()``.

    Returns
    -------
    Dict[int, tuple]
        Mapping state_id -> module path prefix

    Examples
    --------
    >>> paths = [NodePath(1, (1, 1, 1)), NodePath(2, (1, 2, 1)), NodePath(3, (2, 1))]
    >>> modules_at_level(paths, level=2)
    {1: (1, 1), 2: (1, 2), 3: (2,)}
    >>> modules_at_level([NodePath(4, (3,))])
    {4: ()}
    """
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")

    assignment: Dict[int, Tuple[int, ...]] = {}
    for state_id, path in node_paths:
        # The last path element is the leaf's rank within its module
        module_depth = min(level, max(len(path) - 1, 0))
        assignment[state_id] = tuple(path[:module_depth])
    return assignment


def top_modules(node_paths: Sequence[NodePath]) -> Dict[int, int]:
    """
    Assign each state node to its top-level module index.

    Leaves directly under the root belong to no top module and are left out.

    Examples
    --------
    >>> top_modules([NodePath(1, (1, 1)), NodePath(2, (2, 1))])
    {1: 1, 2: 2}
    """
    return {state_id: path[0] for state_id, path in node_paths if len(path) > 1}


def to_communities(assignment: Dict[int, Hashable]) -> List[Set[int]]:
    """
    Convert a {node: module} mapping into a list of node sets.

    Communities are ordered by the first appearance of their module.

    Examples
    --------
    >>> to_communities({1: 2, 2: 2, 3: 1})
    [{1, 2}, {3}]
    """
    communities: Dict[Hashable, Set[int]] = {}
    for node, module in assignment.items():
        communities.setdefault(module, set()).add(node)
    return list(communities.values())


def build_hierarchy(
    node_paths: Sequence[NodePath],
    flow_data: Optional[FlowData] = None,
) -> nx.DiGraph:
    """
    Rebuild the module tree from node paths.

    Parameters
    ----------
    node_paths : sequence of NodePath
        Node paths in file order
    flow_data : dict, optional
        Flow per state id; when given, every tree node gets a ``flow``
        attribute summed over the leaves below it

    Returns
    -------
    networkx.DiGraph
        Tree rooted at ``()``. Children are added in first-seen order.
        Leaf nodes carry a ``state_id`` attribute.

    Raises
    ------
    ValueError
        If two state nodes share the same path
    """
    tree = nx.DiGraph()
    tree.add_node((), depth=0)

    for state_id, path in node_paths:
        if path in tree and "state_id" in tree.nodes[path]:
            raise ValueError(
                f"State nodes {tree.nodes[path]['state_id']} and {state_id} "
                f"share path {':'.join(map(str, path))}"
            )
        for depth in range(1, len(path) + 1):
            prefix = path[:depth]
            if prefix not in tree:
                tree.add_node(prefix, depth=depth)
                tree.add_edge(prefix[:-1], prefix)
        tree.nodes[path]["state_id"] = state_id

    if flow_data is not None:
        for node in nx.dfs_postorder_nodes(tree, source=()):
            attrs = tree.nodes[node]
            if "state_id" in attrs:
                attrs["flow"] = flow_data.get(attrs["state_id"], 0.0)
            else:
                attrs["flow"] = 0.0
            attrs["flow"] += sum(tree.nodes[child]["flow"] for child in tree.successors(node))

    logger.debug(
        f"Built hierarchy with {tree.number_of_nodes()} nodes from "
        f"{len(node_paths)} node paths"
    )
    return tree


def flow_array(
    node_paths: Sequence[NodePath],
    flow_data: FlowData,
) -> np.ndarray:
    """
    Flow values aligned with node path order.

    Missing flow values are NaN.
    """
    return np.array(
        [flow_data.get(state_id, np.nan) for state_id, _ in node_paths],
        dtype=float,
    )


def module_table(
    cluster_ids: ClusterIds,
    flow_data: Optional[FlowData] = None,
) -> pd.DataFrame:
    """
    Summarize a flat partition per module.

    Parameters
    ----------
    cluster_ids : dict
        Mapping state_id -> module_id
    flow_data : dict, optional
        Mapping state_id -> flow

    Returns
    -------
    pd.DataFrame
        Columns ``module``, ``size`` and ``flow`` (NaN when no flow is
        known for any member), one row per module, sorted by module id
    """
    df = pd.DataFrame({
        "state_id": list(cluster_ids.keys()),
        "module": list(cluster_ids.values()),
    })
    if flow_data is not None:
        df["flow"] = [flow_data.get(s, np.nan) for s in df["state_id"]]
    else:
        df["flow"] = np.nan

    table = (
        df.groupby("module")
        .agg(size=("state_id", "size"), flow=("flow", lambda x: x.sum(min_count=1)))
        .reset_index()
        .sort_values("module")
        .reset_index(drop=True)
    )
    return table


def compare_partitions(
    partition_a: Dict[int, Hashable],
    partition_b: Dict[int, Hashable],
    nodes: Optional[List[int]] = None,
) -> Dict[str, float]:
    """
    Compare two partitions with NMI and ARI.

    Parameters
    ----------
    partition_a, partition_b : dict
        Mappings state_id -> module
    nodes : list of int, optional
        Nodes to consider. If None, uses the state ids both share.

    Returns
    -------
    dict
        {'nmi': float, 'ari': float, 'n_nodes': int}

    Examples
    --------
    >>> compare_partitions({1: 1, 2: 1, 3: 2}, {1: 5, 2: 5, 3: 7})
    {'nmi': 1.0, 'ari': 1.0, 'n_nodes': 3}
    """
    if nodes is None:
        nodes = sorted(set(partition_a.keys()) & set(partition_b.keys()))

    if len(nodes) == 0:
        logger.warning("Partitions share no nodes")
        return {"nmi": 0.0, "ari": 0.0, "n_nodes": 0}

    labels_a = [str(partition_a.get(n, -1)) for n in nodes]
    labels_b = [str(partition_b.get(n, -1)) for n in nodes]

    return {
        "nmi": float(normalized_mutual_info_score(labels_a, labels_b)),
        "ari": float(adjusted_rand_score(labels_a, labels_b)),
        "n_nodes": len(nodes),
    }


__all__ = [
    "modules_at_level",
    "top_modules",
    "to_communities",
    "build_hierarchy",
    "flow_array",
    "module_table",
    "compare_partitions",
]
