"""Tests for TreeSerializer."""

import json

from hexbytes import HexBytes

from tracestitch.core.serializer import TreeSerializer
from tracestitch.core.stitcher import stitch_logs_into_call_trace


def test_to_serializable_converts_evm_values():
    serializer = TreeSerializer()

    converted = serializer.to_serializable({
        "hash": HexBytes("0xabcd"),
        "raw": b"\x01\x02",
        "pair": (1, 2 ** 255),
        "flag": True,
        "small": 12,
    })

    assert converted == {
        "hash": "0xabcd",
        "raw": "0x0102",
        "pair": [1, str(2 ** 255)],
        "flag": True,
        "small": 12,
    }


def test_serialize_result_document():
    tree = {"type": "CALL", "to": "0x1111111111111111111111111111111111111111"}
    steps = [{"op": "LOG1", "depth": 1, "pc": 7}, {"op": "STOP", "depth": 1, "pc": 8}]
    logs = [{"address": "0x1111111111111111111111111111111111111111", "topics": ["0x01"], "data": "0x"}]
    result = stitch_logs_into_call_trace(tree, steps, logs)

    document = json.loads(TreeSerializer().to_json(result))

    assert document["alignment"] == "authoritative"
    assert document["warnings"] == []
    assert document["events"] == [
        {"op": "LOG1", "pc": 7, "depth": 1, "callPath": [], "eventIdxInCall": 0},
    ]
    assert document["calls"]["_path"] == []
    assert document["calls"]["logs"] == logs
