"""
Call and event decoration for stitched call trees.

Resolves method names from selectors and decodes attached logs through a
pluggable ``SignatureLookup``, so the stitcher stays free of any ABI
knowledge. Anything that cannot be resolved passes through undecoded.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

from eth_utils import encode_hex

from tracestitch.utils.exceptions import TraceInputError
from tracestitch.utils.logging import get_logger
from .call_tree import CallTree, iter_call_nodes

logger = get_logger('enricher')

UNKNOWN_METHOD = "unknown"

# '0x' + 4 selector bytes
SELECTOR_HEX_LENGTH = 10

LogParser = Callable[[Mapping[str, Any]], Any]


def raw_log_parser(log: Mapping[str, Any]) -> Dict[str, Any]:
    """Parser for events known by name only."""
    return {"topics": list(log.get('topics') or []), "data": log.get('data')}


@dataclass(frozen=True)
class EventDescriptor:
    """Name and parameter parser of one event type."""
    name: str
    parser: LogParser = raw_log_parser


class SignatureLookup(ABC):
    """Resolves selectors and topic hashes to human-readable descriptions."""

    @abstractmethod
    def method_name(self, selector: str) -> Optional[str]:
        """Method name for a '0x'-prefixed 4-byte selector, or None."""

    @abstractmethod
    def event_descriptor(self, topic_hash: str) -> Optional[EventDescriptor]:
        """Descriptor for an event's first topic, or None."""


class MappingSignatureLookup(SignatureLookup):
    """
    Lookup backed by plain dicts.

    ``topics`` values may be ``EventDescriptor`` instances, ``{"name",
    "parser"}`` dicts, or bare names. Keys match case-insensitively.
    """

    def __init__(
        self,
        selectors: Optional[Mapping[str, str]] = None,
        topics: Optional[Mapping[str, Union[EventDescriptor, Mapping[str, Any], str]]] = None,
    ):
        self.selectors = {k.lower(): v for k, v in (selectors or {}).items()}
        self.topics: Dict[str, EventDescriptor] = {}
        for topic, value in (topics or {}).items():
            self.topics[topic.lower()] = self._to_descriptor(value)

    @staticmethod
    def _to_descriptor(value) -> EventDescriptor:
        if isinstance(value, EventDescriptor):
            return value
        if isinstance(value, str):
            return EventDescriptor(name=value)
        return EventDescriptor(name=value['name'], parser=value.get('parser') or raw_log_parser)

    @classmethod
    def from_json_file(cls, path: str) -> "MappingSignatureLookup":
        """Load ``{"selectors": {sel: name}, "events": {topic: name}}``."""
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise TraceInputError(f"Could not read signatures file {path}: {e}", source=path)
        if not isinstance(data, dict):
            raise TraceInputError(f"Signatures file {path} must contain a JSON object", source=path)
        return cls(selectors=data.get('selectors'), topics=data.get('events'))

    def method_name(self, selector: str) -> Optional[str]:
        return self.selectors.get(selector.lower())

    def event_descriptor(self, topic_hash: str) -> Optional[EventDescriptor]:
        return self.topics.get(topic_hash.lower())


class CompositeSignatureLookup(SignatureLookup):
    """Tries several lookups in order; the first hit wins."""

    def __init__(self, *lookups: SignatureLookup):
        self.lookups = list(lookups)

    def method_name(self, selector: str) -> Optional[str]:
        for lookup in self.lookups:
            name = lookup.method_name(selector)
            if name is not None:
                return name
        return None

    def event_descriptor(self, topic_hash: str) -> Optional[EventDescriptor]:
        for lookup in self.lookups:
            descriptor = lookup.event_descriptor(topic_hash)
            if descriptor is not None:
                return descriptor
        return None


def method_name_for_input(input_data: Optional[str], lookup: SignatureLookup) -> str:
    """Resolve a call's method name from its calldata."""
    if not input_data or len(input_data) < SELECTOR_HEX_LENGTH:
        return UNKNOWN_METHOD
    selector = input_data[:SELECTOR_HEX_LENGTH].lower()
    name = lookup.method_name(selector)
    return name if name is not None else selector


def parse_event(log: Mapping[str, Any], lookup: SignatureLookup) -> Dict[str, Any]:
    """Decode a log via its first topic, or return it raw."""
    topics = log.get('topics') or []
    descriptor = None
    if topics:
        topic = topics[0]
        if isinstance(topic, (bytes, bytearray)):
            topic = encode_hex(topic)
        descriptor = lookup.event_descriptor(topic)
    if descriptor is None:
        return {"topics": list(topics), "data": log.get('data')}
    return {"name": descriptor.name, "params": descriptor.parser(log)}


def enrich_trace(tree: CallTree, lookup: SignatureLookup) -> CallTree:
    """
    Set ``method`` on every call and ``parsed`` on every attached log.

    Logs are replaced by decorated copies so the receipt dicts stay
    untouched. Returns the same tree object.
    """
    calls = 0
    decoded = 0
    for node in iter_call_nodes(tree):
        calls += 1
        node['method'] = method_name_for_input(node.get('input'), lookup)
        if node.get('logs'):
            enriched_logs = []
            for log in node['logs']:
                parsed = parse_event(log, lookup)
                if 'name' in parsed:
                    decoded += 1
                enriched_logs.append({**log, 'parsed': parsed})
            node['logs'] = enriched_logs
    logger.debug(f"Enriched {calls} call(s), decoded {decoded} event(s)")
    return tree
