#!/usr/bin/env python3
"""
Cluster File Inspector
======================

Load a tree, ftree or clu file and report what was read.

Usage:
    python -m clustermap.cli network.tree [--flow] [--level 2]
    clustermap-inspect network.clu --remap states.txt --json
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import pandas as pd

from .cluster_map import load_cluster_data
from .config import load_config, load_loader_config
from .conversion import modules_at_level, module_table
from .errors import ClusterMapError
from .multilayer import read_remap_table
from .types import ClusterData

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Inspect a clustering result file (.tree, .ftree or .clu)"
    )
    parser.add_argument(
        "filename",
        type=str,
        help="Clustering file to load",
    )
    parser.add_argument(
        "--flow",
        action="store_true",
        default=None,
        help="Keep per-node flow values",
    )
    parser.add_argument(
        "--remap",
        type=str,
        default=None,
        help="Multilayer remap file with 'state_id node_id layer_id' lines",
    )
    parser.add_argument(
        "--level",
        type=int,
        default=None,
        help="Hierarchy level used to group tree nodes into modules",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML config name or path (default: packaged loader_config)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary as JSON",
    )
    return parser.parse_args(argv)


def summarize(data: ClusterData, level: int = 1, max_rows: int = 20) -> Dict[str, Any]:
    """
    Build a JSON-serializable summary of a loaded file.

    Tree files are grouped into modules at ``level`` before tabulating.
    """
    flow_data = data.flow_data if data.flow_data else None
    if data.format.is_hierarchical:
        modules = modules_at_level(data.node_paths, level)
        # Tabulate by rank so module paths sort numerically, not as text
        ordered = sorted(set(modules.values()))
        rank = {module: i for i, module in enumerate(ordered)}
        table = module_table({s: rank[m] for s, m in modules.items()}, flow_data)
        table["module"] = [
            ":".join(map(str, ordered[r])) if ordered[r] else "root"
            for r in table["module"]
        ]
    else:
        table = module_table(data.cluster_ids, flow_data)

    summary = {
        "source": data.source,
        "format": data.format.value,
        "header": data.header,
        "section": data.section,
        "higher_order": data.is_higher_order,
        "num_nodes": data.num_nodes,
        "num_modules": len(table),
        "num_skipped": data.num_skipped,
        "modules": [
            {
                "module": str(row.module),
                "size": int(row.size),
                "flow": None if pd.isna(row.flow) else float(row.flow),
            }
            for row in table.head(max_rows).itertuples(index=False)
        ],
    }
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    config = load_config(args.config) if args.config else load_loader_config()
    loader_cfg = config.get("loader", {})
    inspect_cfg = config.get("inspect", {})

    logging.basicConfig(
        level=config.get("logging", {}).get("level", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    include_flow = args.flow if args.flow is not None else loader_cfg.get("include_flow", False)
    level = args.level if args.level is not None else inspect_cfg.get("level", 1)

    remap = None
    if args.remap:
        remap = read_remap_table(args.remap)

    try:
        data = load_cluster_data(
            args.filename,
            include_flow=include_flow,
            layer_node_to_state_id=remap,
            encoding=loader_cfg.get("encoding", "utf-8"),
        )
    except (ClusterMapError, OSError) as e:
        logger.error(str(e))
        return 1

    summary = summarize(data, level=level, max_rows=inspect_cfg.get("max_table_rows", 20))

    if args.json:
        print(json.dumps(summary, indent=2))
        return 0

    logger.info("=" * 70)
    logger.info(f"File: {summary['source']} ({summary['format']})")
    if summary["header"]:
        logger.info(f"Header: {summary['header']}")
    if summary["section"]:
        logger.info(f"Stopped at section: {summary['section']}")
    logger.info(f"Nodes: {summary['num_nodes']}, modules: {summary['num_modules']}")
    if summary["num_skipped"]:
        logger.info(f"Skipped (not in remap table): {summary['num_skipped']}")
    logger.info("-" * 70)
    for row in summary["modules"]:
        flow = f"{row['flow']:.6f}" if row["flow"] is not None else "-"
        logger.info(f"  {row['module']:>12}  size={row['size']:<6} flow={flow}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
