"""
Tests for protocol module.
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clustermap.protocol import (
    JobData,
    JobError,
    JobFinished,
    JobLedger,
    ProtocolError,
    ResultBundle,
    reimport,
)
from clustermap.types import ClusterFormat, NodePath


TREE_TEXT = '# Codelength = 1 bits.\n1:1 0.5 "a" 1\n1:2 0.5 "b" 2\n'


class TestResultBundle:
    """Tests for result bundles."""

    def test_from_dict_ignores_unknown(self):
        bundle = ResultBundle.from_dict({"clu": "1 1\n", "unknown": 3})

        assert bundle.clu == "1 1\n"
        assert bundle.available() == ["clu"]

    def test_empty_bundle(self):
        assert ResultBundle().available() == []


class TestJobLedger:
    """Tests for job event bookkeeping."""

    def test_allocates_ids(self):
        ledger = JobLedger()

        assert ledger.start().job_id == 0
        assert ledger.start().job_id == 1
        assert ledger.start(10).job_id == 10
        assert ledger.start().job_id == 11

    def test_duplicate_job_id(self):
        ledger = JobLedger()
        ledger.start(1)

        with pytest.raises(ProtocolError):
            ledger.start(1)

    def test_finished_job(self):
        """Test intermediate output followed by a result."""
        ledger = JobLedger()
        ledger.start(3)
        ledger.dispatch(JobData(3, "Trial 1/1"))
        ledger.dispatch(JobData(3, "Found 2 modules"))
        ledger.dispatch(JobFinished(3, ResultBundle(tree=TREE_TEXT)))

        record = ledger.get(3)
        assert record.output == ["Trial 1/1", "Found 2 modules"]
        assert record.result.tree == TREE_TEXT
        assert record.is_done
        assert ledger.pending() == []

    def test_at_most_one_terminal_event(self):
        """Test a second terminal event is rejected."""
        ledger = JobLedger()
        ledger.start(1)
        ledger.dispatch(JobError(1, "bad input"))

        with pytest.raises(ProtocolError, match="after it terminated"):
            ledger.dispatch(JobFinished(1, ResultBundle()))
        assert ledger.get(1).result is None

    def test_no_output_after_terminal(self):
        ledger = JobLedger()
        ledger.start(1)
        ledger.dispatch(JobFinished(1, ResultBundle()))

        with pytest.raises(ProtocolError):
            ledger.dispatch(JobData(1, "late"))

    def test_unknown_job(self):
        with pytest.raises(ProtocolError, match="Unknown job"):
            JobLedger().dispatch(JobData(4, "x"))

    def test_pending(self):
        ledger = JobLedger()
        ledger.start(1)
        ledger.start(2)
        ledger.dispatch(JobError(1, "failed"))

        assert ledger.pending() == [2]


class TestReimport:
    """Tests for re-importing engine outputs."""

    def test_reimport_tree(self):
        data = reimport(ResultBundle(tree=TREE_TEXT), "tree", include_flow=True)

        assert data.node_paths == [NodePath(1, (1, 1)), NodePath(2, (1, 2))]
        assert data.flow_data == {1: 0.5, 2: 0.5}
        assert data.format is ClusterFormat.TREE

    def test_reimport_clu_states(self):
        data = reimport(ResultBundle(clu_states="1 1 0.5\n2 2 0.5\n"), "clu_states")

        assert data.cluster_ids == {1: 1, 2: 2}
        assert data.format is ClusterFormat.CLU

    def test_reimport_ftree(self):
        data = reimport(ResultBundle(ftree=TREE_TEXT + "*Links directed\n"), "ftree")

        assert data.format is ClusterFormat.FTREE
        assert data.section == "*Links directed"

    def test_missing_field(self):
        with pytest.raises(ValueError, match="no 'clu'"):
            reimport(ResultBundle(), "clu")

    def test_field_not_reimportable(self):
        with pytest.raises(ValueError, match="Cannot re-import"):
            reimport(ResultBundle(newick="(a,b);"), "newick")
