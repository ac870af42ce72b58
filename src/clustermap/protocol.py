"""
Execution Host Protocol
=======================

Message types exchanged with an out-of-process clustering engine, and the
re-import of its text outputs through :class:`ClusterMap`.

The engine itself is not part of this package. A host runs it for a job
(numeric id) given a network file and an argument string, and reports:

- ``JobData``: an intermediate chunk of log text
- ``JobError``: the job failed
- ``JobFinished``: the job completed with a :class:`ResultBundle`

Each job has at most one terminal event (error or finished).
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Union

from .cluster_map import ClusterMap
from .types import ClusterData, ClusterFormat, MultilayerRemapTable

logger = logging.getLogger(__name__)


class ProtocolError(RuntimeError):
    """A host broke the job event protocol."""


@dataclass
class ResultBundle:
    """Outputs of a finished job, one optional field per serialization."""

    clu: Optional[str] = None
    clu_states: Optional[str] = None
    tree: Optional[str] = None
    tree_states: Optional[str] = None
    ftree: Optional[str] = None
    ftree_states: Optional[str] = None
    newick: Optional[str] = None
    newick_states: Optional[str] = None
    json: Optional[Dict[str, Any]] = None
    json_states: Optional[Dict[str, Any]] = None
    csv: Optional[str] = None
    csv_states: Optional[str] = None

    @classmethod
    def from_dict(cls, content: Dict[str, Any]) -> "ResultBundle":
        """Build a bundle from a host response, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(content) - known
        if unknown:
            logger.debug(f"Ignoring unknown result fields: {sorted(unknown)}")
        return cls(**{k: v for k, v in content.items() if k in known})

    def available(self) -> List[str]:
        """Names of the fields the engine produced."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]


@dataclass
class JobData:
    job_id: int
    content: str


@dataclass
class JobError:
    job_id: int
    message: str


@dataclass
class JobFinished:
    job_id: int
    result: ResultBundle


JobEvent = Union[JobData, JobError, JobFinished]


@dataclass
class JobRecord:
    """Accumulated state of one job."""

    job_id: int
    output: List[str] = field(default_factory=list)
    error: Optional[str] = None
    result: Optional[ResultBundle] = None

    @property
    def is_done(self) -> bool:
        return self.error is not None or self.result is not None


class JobLedger:
    """
    Bookkeeping for host events, keyed by job id.

    Enforces the protocol invariant that a job receives at most one
    terminal event, and that no output arrives after it.

    Examples
    --------
    >>> ledger = JobLedger()
    >>> record = ledger.start(1)
    >>> ledger.dispatch(JobData(1, "Found 2 modules"))
    >>> ledger.dispatch(JobError(1, "out of memory"))
    >>> ledger.get(1).error
    'out of memory'
    """

    def __init__(self):
        self._jobs: Dict[int, JobRecord] = {}
        self._next_id = 0

    def start(self, job_id: Optional[int] = None) -> JobRecord:
        """Register a new job, allocating an id if none is given."""
        if job_id is None:
            job_id = self._next_id
        if job_id in self._jobs:
            raise ProtocolError(f"Job {job_id} is already registered")
        self._next_id = max(self._next_id, job_id + 1)
        record = JobRecord(job_id)
        self._jobs[job_id] = record
        return record

    def get(self, job_id: int) -> JobRecord:
        try:
            return self._jobs[job_id]
        except KeyError:
            raise ProtocolError(f"Unknown job {job_id}") from None

    def dispatch(self, event: JobEvent) -> None:
        """Apply a host event to its job."""
        record = self.get(event.job_id)
        if record.is_done:
            raise ProtocolError(
                f"Job {event.job_id} received {type(event).__name__} after it terminated"
            )

        if isinstance(event, JobData):
            record.output.append(event.content)
        elif isinstance(event, JobError):
            logger.error(f"Job {event.job_id} failed: {event.message}")
            record.error = event.message
        elif isinstance(event, JobFinished):
            logger.info(
                f"Job {event.job_id} finished with outputs: "
                f"{', '.join(event.result.available()) or 'none'}"
            )
            record.result = event.result
        else:
            raise ProtocolError(f"Unknown event type: {type(event).__name__}")

    def pending(self) -> List[int]:
        """Ids of jobs without a terminal event."""
        return [job_id for job_id, record in self._jobs.items() if not record.is_done]


# Result fields that ClusterMap can read back, with their format
REIMPORT_FORMATS = {
    "clu": ClusterFormat.CLU,
    "clu_states": ClusterFormat.CLU,
    "tree": ClusterFormat.TREE,
    "tree_states": ClusterFormat.TREE,
    "ftree": ClusterFormat.FTREE,
    "ftree_states": ClusterFormat.FTREE,
}


def reimport(
    bundle: ResultBundle,
    field_name: str,
    include_flow: bool = False,
    layer_node_to_state_id: Optional[MultilayerRemapTable] = None,
) -> ClusterData:
    """
    Parse one text output of a finished job.

    Parameters
    ----------
    bundle : ResultBundle
        Result of a finished job
    field_name : str
        One of 'clu', 'clu_states', 'tree', 'tree_states', 'ftree',
        'ftree_states'
    include_flow : bool
        Whether to keep per-node flow values
    layer_node_to_state_id : Mapping[int, Mapping[int, int]], optional
        Multilayer remap table

    Raises
    ------
    ValueError
        If the field cannot be re-imported or is missing from the bundle
    """
    fmt = REIMPORT_FORMATS.get(field_name)
    if fmt is None:
        raise ValueError(
            f"Cannot re-import '{field_name}'. Must be one of: "
            f"{', '.join(REIMPORT_FORMATS)}"
        )
    text = getattr(bundle, field_name)
    if text is None:
        raise ValueError(f"Result has no '{field_name}' output")

    return ClusterMap().read_cluster_text(
        text,
        fmt,
        include_flow=include_flow,
        layer_node_to_state_id=layer_node_to_state_id,
        source=f"<result:{field_name}>",
    )


__all__ = [
    "ProtocolError",
    "ResultBundle",
    "JobData",
    "JobError",
    "JobFinished",
    "JobEvent",
    "JobRecord",
    "JobLedger",
    "REIMPORT_FORMATS",
    "reimport",
]
