"""
Loaders for the three JSON inputs of a stitch.

Each input may be a raw JSON-RPC response (``{"jsonrpc", "id", "result"}``)
as saved from ``debug_traceTransaction`` / ``eth_getTransactionReceipt``,
or just its ``result``.
"""

import json
from typing import Any, Dict, List, Union

from tracestitch.core.types import TraceStep
from tracestitch.utils.exceptions import TraceInputError
from tracestitch.utils.logging import get_logger

logger = get_logger('inputs')


def load_json(path: str) -> Any:
    """Read a JSON file."""
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except OSError as e:
        raise TraceInputError(f"Could not read {path}: {e}", source=path)
    except ValueError as e:
        raise TraceInputError(f"Invalid JSON in {path}: {e}", source=path)


def unwrap_rpc_result(blob: Any, source: str = None) -> Any:
    """Strip a JSON-RPC envelope if there is one."""
    if isinstance(blob, dict) and 'jsonrpc' in blob:
        if blob.get('error'):
            error = blob['error']
            message = error.get('message', error) if isinstance(error, dict) else error
            raise TraceInputError(f"RPC returned an error: {message}", source=source)
        if 'result' not in blob:
            raise TraceInputError("RPC response has no result", source=source)
        return blob['result']
    return blob


def load_struct_logs(blob: Any) -> List[TraceStep]:
    """Steps from a default-tracer ``debug_traceTransaction`` result."""
    result = unwrap_rpc_result(blob, source="structLogs")
    if isinstance(result, dict):
        if 'structLogs' not in result:
            raise TraceInputError("Trace has no 'structLogs' member", source="structLogs")
        result = result['structLogs']
    if not isinstance(result, list):
        raise TraceInputError(
            f"structLogs must be a list, got {type(result).__name__}", source="structLogs"
        )
    steps = [TraceStep.from_dict(step) for step in result]
    logger.debug(f"Loaded {len(steps)} structLogs step(s)")
    return steps


def load_call_tree(blob: Any) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    """Call tree from a ``callTracer`` result: one node or a list of top-level nodes."""
    result = unwrap_rpc_result(blob, source="callTracer")
    if isinstance(result, dict):
        return result
    if isinstance(result, list) and all(isinstance(node, dict) for node in result):
        return result
    raise TraceInputError(
        f"callTracer result must be a call object or a list of them, got {type(result).__name__}",
        source="callTracer"
    )


def load_receipt_logs(blob: Any) -> List[Dict[str, Any]]:
    """Ordered log list from a transaction receipt."""
    result = unwrap_rpc_result(blob, source="receipt")
    if isinstance(result, dict):
        if 'logs' not in result:
            raise TraceInputError("Receipt has no 'logs' member", source="receipt")
        result = result['logs']
    if not isinstance(result, list):
        raise TraceInputError(
            f"Receipt logs must be a list, got {type(result).__name__}", source="receipt"
        )
    logger.debug(f"Loaded {len(result)} receipt log(s)")
    return result
