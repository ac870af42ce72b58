"""
Cluster Map
===========

Entry point for re-importing clustering results.

The file extension selects the parser:

- ``.tree`` / ``.ftree``: hierarchical module paths per node
- ``.clu``: flat module id per node

Examples
--------
>>> cluster_map = ClusterMap()
>>> data = cluster_map.read_cluster_data("network.tree", include_flow=True)  # doctest: +SKIP
>>> data.node_paths[0]  # doctest: +SKIP
NodePath(state_id=1, path=(1, 1, 1))
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .clu_reader import read_clu
from .config import DECODE_ERRORS, DEFAULT_ENCODING, LINE_SEPARATOR
from .errors import UnsupportedFormatError
from .tree_reader import read_tree
from .types import (
    ClusterData,
    ClusterFormat,
    ClusterIds,
    FlowData,
    MultilayerRemapTable,
    NodePath,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def get_extension(filename: PathLike) -> str:
    """
    Return the extension of a file name without the leading dot.

    Examples
    --------
    >>> get_extension("results/network.ftree")
    'ftree'
    >>> get_extension("network")
    ''
    """
    name = Path(filename).name
    base, dot, extension = name.rpartition(".")
    if not dot or not base:
        return ""
    return extension


def detect_format(filename: PathLike) -> ClusterFormat:
    """
    Select the clustering format from a file name.

    Raises
    ------
    UnsupportedFormatError
        If the extension is not 'tree', 'ftree' or 'clu'
    """
    extension = get_extension(filename)
    fmt = ClusterFormat.from_extension(extension)
    if fmt is None:
        raise UnsupportedFormatError(str(filename), extension)
    return fmt


def parse_cluster_lines(
    lines: Iterable[str],
    fmt: ClusterFormat,
    include_flow: bool = False,
    layer_node_to_state_id: Optional[MultilayerRemapTable] = None,
    filename: Optional[str] = None,
) -> ClusterData:
    """Parse lines of an already selected format."""
    if fmt.is_hierarchical:
        return read_tree(
            lines,
            include_flow=include_flow,
            layer_node_to_state_id=layer_node_to_state_id,
            filename=filename,
            fmt=fmt,
        )
    return read_clu(
        lines,
        include_flow=include_flow,
        layer_node_to_state_id=layer_node_to_state_id,
        filename=filename,
    )


class ClusterMap:
    """
    Loader for tree, ftree and clu clustering files.

    Each read replaces the previous result; nothing is carried over
    between calls. The remap table passed to a read is only looked up,
    never copied or modified.

    Attributes
    ----------
    data : ClusterData or None
        Result of the most recent successful read
    """

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.encoding = encoding
        self.data: Optional[ClusterData] = None

    def read_cluster_data(
        self,
        filename: PathLike,
        include_flow: bool = False,
        layer_node_to_state_id: Optional[MultilayerRemapTable] = None,
    ) -> ClusterData:
        """
        Read a clustering file, selecting the parser by extension.

        Parameters
        ----------
        filename : str or Path
            Path to a .tree, .ftree or .clu file
        include_flow : bool
            Whether to keep per-node flow values
        layer_node_to_state_id : Mapping[int, Mapping[int, int]], optional
            Multilayer remap table, layer_id -> (node_id -> state_id)

        Returns
        -------
        ClusterData
            Parsed collections for this file

        Raises
        ------
        UnsupportedFormatError
            If the extension is unknown (raised before the file is opened)
        FileFormatError, NameExtractionError
            If the content is malformed
        OSError
            If the file cannot be opened or read
        """
        fmt = detect_format(filename)
        source = str(filename)

        if fmt.is_hierarchical:
            logger.info(f"Read tree from '{source}'...")
        else:
            logger.info(f"Read initial partition from '{source}'...")

        with open(
            filename,
            "r",
            encoding=self.encoding,
            errors=DECODE_ERRORS,
            newline=LINE_SEPARATOR,
        ) as f:
            data = parse_cluster_lines(
                f,
                fmt,
                include_flow=include_flow,
                layer_node_to_state_id=layer_node_to_state_id,
                filename=source,
            )

        self._log_summary(data)
        self.data = data
        return data

    def read_cluster_text(
        self,
        text: str,
        fmt: Union[ClusterFormat, str],
        include_flow: bool = False,
        layer_node_to_state_id: Optional[MultilayerRemapTable] = None,
        source: Optional[str] = None,
    ) -> ClusterData:
        """
        Parse clustering content held in memory.

        Parameters
        ----------
        text : str
            File content
        fmt : ClusterFormat or str
            Format, or its extension ('tree', 'ftree', 'clu')
        include_flow : bool
            Whether to keep per-node flow values
        layer_node_to_state_id : Mapping[int, Mapping[int, int]], optional
            Multilayer remap table
        source : str, optional
            Name used in error messages
        """
        if not isinstance(fmt, ClusterFormat):
            extension = fmt
            fmt = ClusterFormat.from_extension(extension)
            if fmt is None:
                raise UnsupportedFormatError(source or "<text>", extension)

        data = parse_cluster_lines(
            text.split(LINE_SEPARATOR),
            fmt,
            include_flow=include_flow,
            layer_node_to_state_id=layer_node_to_state_id,
            filename=source,
        )
        self._log_summary(data)
        self.data = data
        return data

    def _log_summary(self, data: ClusterData) -> None:
        if data.format.is_hierarchical:
            logger.info(
                f"Parsed {len(data.node_paths)} node paths"
                f"{' (higher order)' if data.is_higher_order else ''}"
            )
            if data.section is not None:
                logger.debug(f"Stopped at section '{data.section}'")
        else:
            logger.info(f"Parsed {len(data.cluster_ids)} cluster ids")
        if data.num_skipped:
            logger.info(f"Skipped {data.num_skipped} nodes not in the multilayer remap table")

    @property
    def extension(self) -> Optional[str]:
        return self.data.format.value if self.data is not None else None

    @property
    def node_paths(self) -> List[NodePath]:
        return self.data.node_paths if self.data is not None else []

    @property
    def flow_data(self) -> FlowData:
        return self.data.flow_data if self.data is not None else {}

    @property
    def cluster_ids(self) -> ClusterIds:
        return self.data.cluster_ids if self.data is not None else {}

    @property
    def is_higher_order(self) -> bool:
        return self.data is not None and self.data.is_higher_order


def load_cluster_data(
    filename: PathLike,
    include_flow: bool = False,
    layer_node_to_state_id: Optional[MultilayerRemapTable] = None,
    encoding: str = DEFAULT_ENCODING,
) -> ClusterData:
    """
    Load a clustering file in one call.

    Convenience wrapper around :meth:`ClusterMap.read_cluster_data`.
    """
    return ClusterMap(encoding=encoding).read_cluster_data(
        filename,
        include_flow=include_flow,
        layer_node_to_state_id=layer_node_to_state_id,
    )


__all__ = [
    "get_extension",
    "detect_format",
    "parse_cluster_lines",
    "ClusterMap",
    "load_cluster_data",
]
