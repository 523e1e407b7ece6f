"""
Core module for tracestitch.

This module contains the reconciliation pipeline:
- derive_event_paths: attributes LOG steps of a structLogs trace to call frames
- annotate_call_paths: indexes callTracer nodes by structural path
- stitch_logs_into_call_trace: attaches receipt logs to call nodes
- enrich_trace: resolves method names and decodes attached events
- TreeSerializer / format_call_tree: JSON and text output
"""

from .types import TraceStep, EventPath, Frame, PendingCall, path_key
from .event_paths import derive_event_paths
from .call_tree import annotate_call_paths, iter_call_nodes, expected_log_address
from .stitcher import (
    stitch_logs_into_call_trace,
    StitchResult,
    StitchIssue,
    IssueKind,
    ALIGNMENT_AUTHORITATIVE,
    ALIGNMENT_SEQUENTIAL,
)
from .enricher import (
    enrich_trace,
    SignatureLookup,
    MappingSignatureLookup,
    CompositeSignatureLookup,
    EventDescriptor,
    UNKNOWN_METHOD,
)
from .serializer import TreeSerializer
from .printer import format_call_tree, print_call_tree

__all__ = [
    'TraceStep',
    'EventPath',
    'Frame',
    'PendingCall',
    'path_key',
    'derive_event_paths',
    'annotate_call_paths',
    'iter_call_nodes',
    'expected_log_address',
    'stitch_logs_into_call_trace',
    'StitchResult',
    'StitchIssue',
    'IssueKind',
    'ALIGNMENT_AUTHORITATIVE',
    'ALIGNMENT_SEQUENTIAL',
    'enrich_trace',
    'SignatureLookup',
    'MappingSignatureLookup',
    'CompositeSignatureLookup',
    'EventDescriptor',
    'UNKNOWN_METHOD',
    'TreeSerializer',
    'format_call_tree',
    'print_call_tree',
]
