"""
Parsers module for tracestitch.

This module contains the input loaders and the ABI-backed signature lookup:
- trace_inputs: structLogs, callTracer and receipt JSON loaders
- abi: selector/topic tables and event decoding from contract ABIs
"""

from .trace_inputs import (
    load_json,
    unwrap_rpc_result,
    load_struct_logs,
    load_call_tree,
    load_receipt_logs,
)
from .abi import (
    AbiSignatureLookup,
    abi_signature,
    decode_event_log,
    format_abi_type,
)

__all__ = [
    # Inputs
    'load_json',
    'unwrap_rpc_result',
    'load_struct_logs',
    'load_call_tree',
    'load_receipt_logs',
    # ABI
    'AbiSignatureLookup',
    'abi_signature',
    'decode_event_log',
    'format_abi_type',
]
