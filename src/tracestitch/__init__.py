"""
tracestitch - attribute transaction receipt logs to the calls that emitted them
"""

__version__ = "0.1.0"

# Core components
from .core import (
    TraceStep,
    EventPath,
    derive_event_paths,
    annotate_call_paths,
    stitch_logs_into_call_trace,
    StitchResult,
    StitchIssue,
    IssueKind,
    enrich_trace,
    SignatureLookup,
    MappingSignatureLookup,
    CompositeSignatureLookup,
    EventDescriptor,
    TreeSerializer,
)

# Parsers
from .parsers import (
    AbiSignatureLookup,
    load_struct_logs,
    load_call_tree,
    load_receipt_logs,
)

# Configuration
from .config import StitchConfig

# Utilities
from .utils import (
    TracestitchError,
    StitchError,
    TraceInputError,
    setup_logging,
)

# Main entry point
from .cli.main import main

__all__ = [
    # Version
    '__version__',
    # Main
    'main',
    # Core
    'TraceStep',
    'EventPath',
    'derive_event_paths',
    'annotate_call_paths',
    'stitch_logs_into_call_trace',
    'StitchResult',
    'StitchIssue',
    'IssueKind',
    'enrich_trace',
    'SignatureLookup',
    'MappingSignatureLookup',
    'CompositeSignatureLookup',
    'EventDescriptor',
    'TreeSerializer',
    # Parsers
    'AbiSignatureLookup',
    'load_struct_logs',
    'load_call_tree',
    'load_receipt_logs',
    # Config
    'StitchConfig',
    # Utils
    'TracestitchError',
    'StitchError',
    'TraceInputError',
    'setup_logging',
]
