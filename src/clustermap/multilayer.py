"""
Multilayer Remapping
====================

In multilayer networks a physical node appears once per layer, and each
(node, layer) pair is a separate state node. Clustering files written for
such networks identify nodes by ``node_id`` and ``layer_id``; the remap
table translates those pairs into the state ids used by the caller.

The table is a two-level mapping ``layer_id -> (node_id -> state_id)``.
It is only ever read here, so one table may be shared by any number of
concurrent loads.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from .config import (
    COMMENT_PREFIX,
    DECODE_ERRORS,
    DEFAULT_ENCODING,
    FIELD_WHITESPACE,
    LINE_SEPARATOR,
    SECTION_PREFIX,
)
from .errors import FileFormatError
from .tokenizer import LineScanner
from .types import MultilayerRemapTable

logger = logging.getLogger(__name__)


def lookup_state_id(
    table: MultilayerRemapTable,
    layer_id: int,
    node_id: int,
) -> Optional[int]:
    """
    Translate a (node, layer) pair into a state id.

    Parameters
    ----------
    table : Mapping[int, Mapping[int, int]]
        Remap table, layer_id -> (node_id -> state_id)
    layer_id : int
        Layer the node was read from
    node_id : int
        Physical node id

    Returns
    -------
    int or None
        The state id, or None when either the layer or the node in that
        layer is unknown. A miss is a filtering outcome, not an error.

    Examples
    --------
    >>> table = {1: {10: 100}, 2: {10: 200}}
    >>> lookup_state_id(table, 2, 10)
    200
    >>> lookup_state_id(table, 3, 10) is None
    True
    """
    layer = table.get(layer_id)
    if layer is None:
        return None
    return layer.get(node_id)


def build_remap_table(
    state_nodes: Iterable[Tuple[int, int, int]],
) -> Dict[int, Dict[int, int]]:
    """
    Build a remap table from (state_id, node_id, layer_id) triples.

    Parameters
    ----------
    state_nodes : iterable of tuples
        One (state_id, node_id, layer_id) triple per state node

    Returns
    -------
    Dict[int, Dict[int, int]]
        layer_id -> (node_id -> state_id)

    Raises
    ------
    ValueError
        If the same (node_id, layer_id) pair maps to two state ids
    """
    table: Dict[int, Dict[int, int]] = {}
    for state_id, node_id, layer_id in state_nodes:
        layer = table.setdefault(layer_id, {})
        existing = layer.get(node_id)
        if existing is not None and existing != state_id:
            raise ValueError(
                f"Node {node_id} in layer {layer_id} maps to both state "
                f"{existing} and state {state_id}"
            )
        layer[node_id] = state_id

    logger.debug(
        f"Built remap table with {len(table)} layers and "
        f"{sum(len(layer) for layer in table.values())} state nodes"
    )
    return table


def read_remap_table(
    filename: str,
    encoding: str = DEFAULT_ENCODING,
) -> Dict[int, Dict[int, int]]:
    """
    Read a remap table from a ``state_id node_id layer_id`` text file.

    Blank lines and ``#`` comments are skipped; a line starting with ``*``
    ends the table so a states section can be read out of a larger file.
    Extra columns after the layer id are ignored.
    """
    state_nodes = []
    with open(
        filename, "r", encoding=encoding, errors=DECODE_ERRORS, newline=LINE_SEPARATOR
    ) as f:
        for line_number, raw in enumerate(f, start=1):
            line = raw.rstrip("\r\n")
            if not line.strip(FIELD_WHITESPACE) or line.startswith(COMMENT_PREFIX):
                continue
            if line.startswith(SECTION_PREFIX):
                break

            scanner = LineScanner(line)
            state_id = scanner.read_uint()
            node_id = scanner.read_uint()
            layer_id = scanner.read_uint()
            if layer_id is None:
                raise FileFormatError(
                    "Couldn't parse state id, node id and layer id",
                    filename=filename,
                    line_number=line_number,
                    line=line,
                )
            state_nodes.append((state_id, node_id, layer_id))

    logger.info(f"Read {len(state_nodes)} state nodes from '{filename}'")
    return build_remap_table(state_nodes)


__all__ = [
    "lookup_state_id",
    "build_remap_table",
    "read_remap_table",
]
