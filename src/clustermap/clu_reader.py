"""
Clu Reader
==========

Parser for flat partition files (``.clu``).

Sample::

    # stateId module flow
    1 2 0.25
    2 2 0.25
    3 1 0.5

Columns are ``stateId moduleId [flow]``, and for multilayer networks
``stateId moduleId flow nodeId layerId``. Comment, section and blank
lines are all skipped; clu files have no header or sub-sections.
"""

import logging
from typing import Iterable, Optional

from .config import COMMENT_PREFIX, FIELD_WHITESPACE, SECTION_PREFIX
from .errors import FileFormatError
from .multilayer import lookup_state_id
from .tokenizer import LineScanner
from .types import ClusterData, ClusterFormat, MultilayerRemapTable

logger = logging.getLogger(__name__)


def read_clu(
    lines: Iterable[str],
    include_flow: bool = False,
    layer_node_to_state_id: Optional[MultilayerRemapTable] = None,
    filename: Optional[str] = None,
) -> ClusterData:
    """
    Parse clu-format lines into a flat partition.

    Parameters
    ----------
    lines : iterable of str
        Line source, e.g. an open file
    include_flow : bool
        Whether to keep the optional flow column
    layer_node_to_state_id : Mapping[int, Mapping[int, int]], optional
        Multilayer remap table. When given, node id and layer id columns
        are required and lines missing from the table are dropped.
    filename : str, optional
        Source name used in error messages

    Returns
    -------
    ClusterData
        Partition in ``cluster_ids``; a state id seen twice keeps the
        module of its last line

    Raises
    ------
    FileFormatError
        If a required column is missing or malformed
    """
    is_multilayer = layer_node_to_state_id is not None
    result = ClusterData(format=ClusterFormat.CLU, source=filename)

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip(FIELD_WHITESPACE) or line.startswith(COMMENT_PREFIX) or line.startswith(SECTION_PREFIX):
            continue

        scanner = LineScanner(line)

        state_id = scanner.read_uint()
        module_id = scanner.read_uint()
        if module_id is None:
            raise _format_error("Couldn't parse node key and cluster id", filename, line_number, line)

        flow = scanner.read_float()

        if is_multilayer:
            node_id = scanner.read_uint()
            if node_id is None:
                raise _format_error("Couldn't parse node key", filename, line_number, line)
            layer_id = scanner.read_uint()
            if layer_id is None:
                raise _format_error("Couldn't parse layer id", filename, line_number, line)

            mapped = lookup_state_id(layer_node_to_state_id, layer_id, node_id)
            if mapped is None:
                logger.debug(
                    f"Skipping node {node_id} in layer {layer_id}: not in remap table"
                )
                result.num_skipped += 1
                continue
            state_id = mapped

        result.cluster_ids[state_id] = module_id

        if flow is not None and include_flow:
            result.flow_data[state_id] = flow

    logger.debug(f"Parsed {len(result.cluster_ids)} cluster ids")
    return result


def _format_error(
    message: str,
    filename: Optional[str],
    line_number: int,
    line: str,
) -> FileFormatError:
    return FileFormatError(message, filename=filename, line_number=line_number, line=line)


__all__ = ["read_clu"]
