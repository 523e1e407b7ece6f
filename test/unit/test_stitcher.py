"""Tests for stitch_logs_into_call_trace: receipt logs attached to call nodes."""

import pytest

from tracestitch.core.call_tree import iter_call_nodes
from tracestitch.core.stitcher import (
    ALIGNMENT_AUTHORITATIVE,
    ALIGNMENT_SEQUENTIAL,
    IssueKind,
    stitch_logs_into_call_trace,
)
from tracestitch.utils.exceptions import StitchError

ROOT = "0x1111111111111111111111111111111111111111"
TOKEN_A = "0xaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
TOKEN_B = "0xbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbbb"


def _steps(*specs):
    return [{"op": op, "depth": depth, "pc": i} for i, (op, depth) in enumerate(specs)]


def _log(address, topic="0x01"):
    return {"address": address, "topics": [topic], "data": "0x"}


def _kinds(result):
    return [issue.kind for issue in result.issues]


class TestSiblingCalls:
    def _inputs(self):
        tree = {
            "type": "CALL", "from": "0xeoa", "to": ROOT,
            "calls": [
                {"type": "CALL", "from": ROOT, "to": TOKEN_A},
                {"type": "CALL", "from": ROOT, "to": TOKEN_B},
            ],
        }
        steps = _steps(
            ("CALL", 1), ("LOG3", 2), ("RETURN", 2),
            ("CALL", 1), ("LOG3", 2), ("RETURN", 2),
            ("STOP", 1),
        )
        return tree, steps

    def test_each_sibling_receives_its_log(self):
        tree, steps = self._inputs()
        receipt = {"logs": [_log(TOKEN_A), _log(TOKEN_B.upper().replace("0X", "0x"))]}

        result = stitch_logs_into_call_trace(tree, steps, receipt)

        assert result.warnings == []
        assert result.alignment == ALIGNMENT_AUTHORITATIVE
        assert result.root is tree
        assert tree["logs"] == []
        assert [log["address"] for log in tree["calls"][0]["logs"]] == [TOKEN_A]
        assert len(tree["calls"][1]["logs"]) == 1

    def test_attached_logs_are_copies(self):
        tree, steps = self._inputs()
        logs = [_log(TOKEN_A), _log(TOKEN_B)]

        stitch_logs_into_call_trace(tree, steps, logs)

        attached = tree["calls"][0]["logs"][0]
        assert attached == logs[0]
        assert attached is not logs[0]

    def test_global_order_is_preserved(self):
        tree, steps = self._inputs()
        logs = [_log(TOKEN_A, "0x0a"), _log(TOKEN_B, "0x0b")]

        result = stitch_logs_into_call_trace(tree, steps, logs)

        attached = [log for node in iter_call_nodes(result.root) for log in node["logs"]]
        assert [log["topics"][0] for log in attached] == ["0x0a", "0x0b"]


class TestRevertedChild:
    def test_reverted_frame_log_is_not_matched(self):
        tree = {"type": "CALL", "to": ROOT, "calls": [{"type": "CALL", "to": TOKEN_A}]}
        steps = _steps(("CALL", 1), ("LOG1", 2), ("REVERT", 2), ("STOP", 1))
        receipt = {"logs": [_log(TOKEN_A)]}

        result = stitch_logs_into_call_trace(tree, steps, receipt, suppress_warnings=True)

        assert result.events == []
        assert _kinds(result) == [IssueKind.COUNT_MISMATCH, IssueKind.UNMAPPED_LEFTOVER]
        assert "(0) != receipt logs (1)" in result.warnings[0]
        assert result.warnings[1] == "leftover receipt log #0 not mapped"
        assert result.alignment == ALIGNMENT_SEQUENTIAL
        assert all(node["logs"] == [] for node in iter_call_nodes(tree))

    def test_default_mode_raises_with_every_warning(self):
        tree = {"type": "CALL", "to": ROOT, "calls": [{"type": "CALL", "to": TOKEN_A}]}
        steps = _steps(("CALL", 1), ("LOG1", 2), ("REVERT", 2), ("STOP", 1))

        with pytest.raises(StitchError) as excinfo:
            stitch_logs_into_call_trace(tree, steps, [_log(TOKEN_A)])

        assert len(excinfo.value.warnings) == 2
        assert excinfo.value.message.startswith(StitchError.HEADER)
        assert "leftover receipt log #0 not mapped" in excinfo.value.message
        assert excinfo.value.to_dict()["warnings"] == excinfo.value.warnings


class TestAddressCheck:
    def _delegate_tree(self):
        return {
            "type": "CALL", "to": ROOT,
            "calls": [{"type": "DELEGATECALL", "from": ROOT, "to": TOKEN_A}],
        }

    def _steps(self):
        return _steps(("DELEGATECALL", 1), ("LOG1", 2), ("RETURN", 2), ("STOP", 1))

    def test_delegatecall_log_from_caller_passes(self):
        tree = self._delegate_tree()

        result = stitch_logs_into_call_trace(tree, self._steps(), [_log(ROOT)])

        assert result.warnings == []
        assert len(tree["calls"][0]["logs"]) == 1

    def test_delegatecall_log_from_target_is_flagged_but_attached(self):
        tree = self._delegate_tree()

        result = stitch_logs_into_call_trace(tree, self._steps(), [_log(TOKEN_A)], suppress_warnings=True)

        assert _kinds(result) == [IssueKind.ADDRESS_MISMATCH]
        assert result.warnings[0] == (
            f"address mismatch at path [0]: expected {ROOT}, got {TOKEN_A} (log #0)"
        )
        assert result.issues[0].path == "0"
        assert len(tree["calls"][0]["logs"]) == 1

    def test_address_check_can_be_disabled(self):
        tree = self._delegate_tree()

        result = stitch_logs_into_call_trace(tree, self._steps(), [_log(TOKEN_A)], check_addresses=False)

        assert result.warnings == []


class TestStructuralMismatch:
    def test_missing_node_is_reported_and_skipped(self):
        tree = {"type": "CALL", "to": ROOT}
        steps = _steps(("CALL", 1), ("LOG1", 2), ("RETURN", 2), ("LOG1", 1), ("STOP", 1))
        logs = [_log(TOKEN_A), _log(ROOT)]

        result = stitch_logs_into_call_trace(tree, steps, logs, suppress_warnings=True)

        assert _kinds(result) == [IssueKind.STRUCTURAL_MISMATCH]
        assert result.warnings[0] == "no callTracer node for path [0] at receipt log #0"
        assert result.issues[0].log_index == 0
        assert tree["logs"] == [logs[1]]


class TestCountMismatch:
    def test_more_events_than_logs_pairs_prefix(self):
        tree = {"type": "CALL", "to": ROOT}
        steps = _steps(("LOG1", 1), ("LOG1", 1), ("STOP", 1))

        result = stitch_logs_into_call_trace(tree, steps, [_log(ROOT)], suppress_warnings=True)

        assert _kinds(result) == [IssueKind.COUNT_MISMATCH]
        assert "Will attach sequentially" in result.warnings[0]
        assert len(tree["logs"]) == 1


class TestTopLevelCallList:
    def _roots(self):
        return [
            {"type": "CALL", "from": ROOT, "to": TOKEN_A},
            {"type": "CALL", "from": ROOT, "to": TOKEN_B, "calls": [{"type": "STATICCALL", "to": TOKEN_A}]},
        ]

    def test_depth_one_calls_map_to_list_entries(self):
        roots = self._roots()
        steps = _steps(
            ("CALL", 1), ("LOG1", 2), ("RETURN", 2),
            ("CALL", 1), ("STATICCALL", 2), ("RETURN", 3), ("LOG2", 2), ("RETURN", 2),
            ("STOP", 1),
        )
        logs = [_log(TOKEN_A, "0x0a"), _log(TOKEN_B, "0x0b")]

        result = stitch_logs_into_call_trace(roots, steps, {"logs": logs})

        assert result.warnings == []
        assert result.root is roots
        assert [e.call_path for e in result.events] == [(0,), (1,)]
        assert roots[0]["logs"] == [logs[0]]
        assert roots[1]["logs"] == [logs[1]]
        assert roots[1]["calls"][0]["_path"] == [1, 0]
        assert roots[1]["calls"][0]["logs"] == []

    def test_depth_one_log_has_no_node_in_a_list(self):
        roots = self._roots()
        steps = _steps(("LOG1", 1), ("STOP", 1))

        result = stitch_logs_into_call_trace(roots, steps, [_log(ROOT)], suppress_warnings=True)

        assert _kinds(result) == [IssueKind.STRUCTURAL_MISMATCH]
        assert result.warnings[0] == "no callTracer node for path [] at receipt log #0"


class TestNoLogs:
    def test_tree_without_logs_stitches_cleanly(self):
        tree = {
            "type": "CALL", "to": ROOT,
            "calls": [{"type": "CALL", "to": TOKEN_A, "calls": [{"type": "STATICCALL", "to": TOKEN_B}]}],
        }
        steps = _steps(("CALL", 1), ("CALL", 2), ("RETURN", 3), ("RETURN", 2), ("STOP", 1))

        result = stitch_logs_into_call_trace(tree, steps, {"logs": []})

        assert result.warnings == []
        assert [node["logs"] for node in iter_call_nodes(tree)] == [[], [], []]
        assert [node["_path"] for node in iter_call_nodes(tree)] == [[], [0], [0, 0]]
