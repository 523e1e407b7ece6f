"""
Call tree indexing for callTracer output.

Gives every node the same structural path the event-path deriver assigns
to frames, so events and nodes can be joined on it.
"""

from typing import Any, Dict, Iterator, List, Optional, Union

from .types import CALLER_CONTEXT_CALL_TYPES, path_key

CallTree = Union[Dict[str, Any], List[Dict[str, Any]]]


def annotate_call_paths(root: CallTree) -> Dict[str, Dict[str, Any]]:
    """
    Write ``_path`` on every node and return a path-key -> node map.

    A single root sits at path ``[]``; when ``root`` is a list, the i-th
    top-level call sits at ``[i]``. The j-th child of a node is at the
    node's path plus ``[j]``.
    """
    path_map: Dict[str, Dict[str, Any]] = {}

    def visit(node: Dict[str, Any], prefix: List[int]):
        node['_path'] = list(prefix)
        path_map[path_key(prefix)] = node
        for i, child in enumerate(node.get('calls') or []):
            visit(child, prefix + [i])

    if isinstance(root, list):
        for i, node in enumerate(root):
            visit(node, [i])
    else:
        visit(root, [])

    return path_map


def iter_call_nodes(root: CallTree) -> Iterator[Dict[str, Any]]:
    """Yield every node depth-first, parents before children."""
    stack = list(reversed(root)) if isinstance(root, list) else [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.get('calls') or []))


def expected_log_address(node: Optional[Dict[str, Any]]) -> Optional[str]:
    """
    Address that logs emitted directly by ``node`` should carry.

    DELEGATECALL and CALLCODE run the callee's code in the caller's
    context, so their logs come from ``from``. For every other call type,
    CREATE/CREATE2 included, callTracer puts the executing address in ``to``.
    """
    if not node:
        return None
    if (node.get('type') or '').upper() in CALLER_CONTEXT_CALL_TYPES:
        addr = node.get('from')
    else:
        addr = node.get('to')
    return addr.lower() if addr else None
