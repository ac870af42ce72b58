"""
Tree Reader
===========

Parser for hierarchical clustering files (``.tree`` and ``.ftree``).

Sample::

    # Codelength = 3.46227314 bits.
    # path flow name physicalId
    1:1:1 0.0384615 "1" 1
    1:1:2 0.025641 "2" 2
    1:1:3 0.0384615 "3" 3
    1:2:1 0.0384615 "4" 4

Data lines are positional: ``path flow "name" stateId [nodeId [layerId]]``.
The optional ``nodeId`` column marks a higher-order tree; once a line has
carried it, every later line of the same file must carry it as well.
``layerId`` is read only when a multilayer remap table is given. Parsing
stops at the first ``*`` section line (e.g. ``*Links directed`` in ftree
files), which is handed back on the result.
"""

import logging
from typing import Iterable, Optional, Tuple

from .config import COMMENT_PREFIX, FIELD_WHITESPACE, NAME_QUOTE, SECTION_PREFIX
from .errors import ClusterMapError, FileFormatError, NameExtractionError
from .multilayer import lookup_state_id
from .tokenizer import LineScanner, decode_path
from .types import ClusterData, ClusterFormat, MultilayerRemapTable, NodePath, TreeMode

logger = logging.getLogger(__name__)


def read_tree(
    lines: Iterable[str],
    include_flow: bool = False,
    layer_node_to_state_id: Optional[MultilayerRemapTable] = None,
    filename: Optional[str] = None,
    fmt: ClusterFormat = ClusterFormat.TREE,
) -> ClusterData:
    """
    Parse tree-format lines into node paths.

    Parameters
    ----------
    lines : iterable of str
        Line source, e.g. an open file
    include_flow : bool
        Whether to keep the flow value of each node
    layer_node_to_state_id : Mapping[int, Mapping[int, int]], optional
        Multilayer remap table. When given, every data line must carry a
        physical node id and a layer id, and lines whose pair is not in
        the table are dropped.
    filename : str, optional
        Source name used in error messages
    fmt : ClusterFormat
        Format marker recorded on the result

    Returns
    -------
    ClusterData
        Node paths in file order, flow data, header and stopping section

    Raises
    ------
    FileFormatError
        If a positional field is missing or malformed
    NameExtractionError
        If the quoted node name cannot be delimited
    """
    is_multilayer = layer_node_to_state_id is not None
    result = ClusterData(format=fmt, source=filename)
    mode = TreeMode.UNDETERMINED

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        stripped = line.strip(FIELD_WHITESPACE)
        if not stripped:
            continue
        if stripped.startswith(COMMENT_PREFIX):
            if line_number == 1:
                result.header = line  # e.g. '# Codelength = 8.45977 bits.'
            continue
        if line.startswith(SECTION_PREFIX):
            # New section, tree parsing ends here
            result.section = line
            break

        try:
            entry, mode = _parse_tree_line(line, mode, is_multilayer)
        except ClusterMapError as e:
            raise type(e)(
                e.message, filename=filename, line_number=line_number, line=line
            ) from None

        path, flow, state_id, node_id, layer_id = entry

        if is_multilayer:
            mapped = lookup_state_id(layer_node_to_state_id, layer_id, node_id)
            if mapped is None:
                logger.debug(
                    f"Skipping node {node_id} in layer {layer_id}: not in remap table"
                )
                result.num_skipped += 1
                continue
            state_id = mapped

        try:
            decoded = decode_path(path)
        except ValueError as e:
            raise FileFormatError(
                str(e), filename=filename, line_number=line_number, line=line
            ) from e

        result.node_paths.append(NodePath(state_id, decoded))

        if include_flow:
            result.flow_data[state_id] = flow

    result.mode = mode
    return result


def _parse_tree_line(
    line: str,
    mode: TreeMode,
    is_multilayer: bool,
) -> Tuple[Tuple[str, float, int, Optional[int], Optional[int]], TreeMode]:
    """
    Split one data line into its positional fields.

    Returns ((path, flow, state_id, node_id, layer_id), mode) where the
    path is still the raw token and mode is the tree mode after this line.
    """
    scanner = LineScanner(line)

    path = scanner.read_token()
    if path is None:
        raise FileFormatError("Couldn't parse tree path")
    flow = scanner.read_float()
    if flow is None:
        raise FileFormatError("Couldn't parse node flow")
    # Name is everything between the next pair of quotes
    if scanner.read_quoted(NAME_QUOTE) is None:
        raise NameExtractionError("Can't parse node name")
    state_id = scanner.read_uint()
    if state_id is None:
        raise FileFormatError("Couldn't parse node id")

    node_id = scanner.read_uint()
    try:
        mode = mode.observe(node_id is not None)
    except ValueError:
        raise FileFormatError("Missing physical node id for node") from None

    layer_id = None
    if is_multilayer:
        layer_id = scanner.read_uint()
        if layer_id is None:
            raise FileFormatError("Couldn't parse layer id")

    return (path, flow, state_id, node_id, layer_id), mode


__all__ = ["read_tree"]
