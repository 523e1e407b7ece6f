"""Tests for method/event decoration of stitched call trees."""

import json

import pytest

from tracestitch.core.enricher import (
    UNKNOWN_METHOD,
    CompositeSignatureLookup,
    EventDescriptor,
    MappingSignatureLookup,
    enrich_trace,
    method_name_for_input,
    parse_event,
)
from tracestitch.utils.exceptions import TraceInputError

TRANSFER_SELECTOR = "0xa9059cbb"
TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"


@pytest.fixture
def lookup():
    return MappingSignatureLookup(
        selectors={TRANSFER_SELECTOR: "transfer"},
        topics={
            TRANSFER_TOPIC: EventDescriptor(
                name="Transfer",
                parser=lambda log: {"topicCount": len(log["topics"])},
            ),
        },
    )


class TestMethodName:
    def test_known_selector(self, lookup):
        assert method_name_for_input(TRANSFER_SELECTOR + "00" * 64, lookup) == "transfer"

    def test_selector_match_is_case_insensitive(self, lookup):
        assert method_name_for_input("0xA9059CBB" + "00" * 4, lookup) == "transfer"

    def test_unknown_selector_is_returned_raw(self, lookup):
        assert method_name_for_input("0xDEADBEEF0000", lookup) == "0xdeadbeef"

    def test_missing_or_short_input(self, lookup):
        assert method_name_for_input(None, lookup) == UNKNOWN_METHOD
        assert method_name_for_input("0x", lookup) == UNKNOWN_METHOD
        assert method_name_for_input("0xa9059c", lookup) == UNKNOWN_METHOD


class TestParseEvent:
    def test_known_topic_uses_descriptor_parser(self, lookup):
        log = {"topics": [TRANSFER_TOPIC, "0x01", "0x02"], "data": "0x"}

        assert parse_event(log, lookup) == {"name": "Transfer", "params": {"topicCount": 3}}

    def test_unknown_topic_passes_through(self, lookup):
        log = {"topics": ["0x1234"], "data": "0xff"}

        assert parse_event(log, lookup) == {"topics": ["0x1234"], "data": "0xff"}

    def test_log_without_topics(self, lookup):
        assert parse_event({"topics": [], "data": "0x"}, lookup) == {"topics": [], "data": "0x"}

    def test_bytes_topic_is_hex_encoded_for_lookup(self, lookup):
        log = {"topics": [bytes.fromhex(TRANSFER_TOPIC[2:])], "data": "0x"}

        assert parse_event(log, lookup)["name"] == "Transfer"

    def test_name_only_descriptor_returns_raw_params(self):
        names_only = MappingSignatureLookup(topics={"0xabc": "Ping"})
        log = {"topics": ["0xABC"], "data": "0x00"}

        assert parse_event(log, names_only) == {
            "name": "Ping", "params": {"topics": ["0xABC"], "data": "0x00"},
        }


class TestCompositeLookup:
    def test_first_hit_wins(self):
        first = MappingSignatureLookup(selectors={"0x11111111": "first"})
        second = MappingSignatureLookup(
            selectors={"0x11111111": "shadowed", "0x22222222": "second"},
            topics={"0xaa": {"name": "Only"}},
        )
        lookup = CompositeSignatureLookup(first, second)

        assert lookup.method_name("0x11111111") == "first"
        assert lookup.method_name("0x22222222") == "second"
        assert lookup.method_name("0x33333333") is None
        assert lookup.event_descriptor("0xaa").name == "Only"
        assert lookup.event_descriptor("0xbb") is None


class TestSignaturesFile:
    def test_loads_selectors_and_events(self, tmp_path):
        path = tmp_path / "sigs.json"
        path.write_text(json.dumps({
            "selectors": {TRANSFER_SELECTOR: "transfer"},
            "events": {TRANSFER_TOPIC: "Transfer"},
        }))

        lookup = MappingSignatureLookup.from_json_file(str(path))

        assert lookup.method_name(TRANSFER_SELECTOR) == "transfer"
        assert lookup.event_descriptor(TRANSFER_TOPIC).name == "Transfer"

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "sigs.json"
        path.write_text("[1, 2]")

        with pytest.raises(TraceInputError):
            MappingSignatureLookup.from_json_file(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(TraceInputError):
            MappingSignatureLookup.from_json_file(str(tmp_path / "nope.json"))


class TestEnrichTrace:
    def test_decorates_every_node_and_log(self, lookup):
        receipt_log = {"address": "0xa", "topics": [TRANSFER_TOPIC], "data": "0x"}
        tree = {
            "input": TRANSFER_SELECTOR + "00" * 64,
            "logs": [],
            "calls": [{"input": "0x", "logs": [receipt_log]}],
        }

        result = enrich_trace(tree, lookup)

        assert result is tree
        assert tree["method"] == "transfer"
        assert tree["calls"][0]["method"] == UNKNOWN_METHOD
        enriched = tree["calls"][0]["logs"][0]
        assert enriched["parsed"] == {"name": "Transfer", "params": {"topicCount": 1}}
        assert enriched["address"] == "0xa"
        assert "parsed" not in receipt_log

    def test_forest_input(self, lookup):
        roots = [{"input": TRANSFER_SELECTOR}, {"input": ""}]

        enrich_trace(roots, lookup)

        assert [node["method"] for node in roots] == ["transfer", UNKNOWN_METHOD]
