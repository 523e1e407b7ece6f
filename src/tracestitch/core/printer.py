"""
Text rendering of stitched call trees.
"""

from typing import Any, Dict, List, Mapping

from tracestitch.utils.colors import address, bold, cyan, dim, info, success, warning
from .call_tree import CallTree, iter_call_nodes
from .types import path_key


def _event_label(log: Mapping[str, Any]) -> str:
    parsed = log.get('parsed')
    if parsed and 'name' in parsed:
        return success(parsed['name'])
    topics = log.get('topics') or []
    if topics:
        topic = topics[0]
        if isinstance(topic, (bytes, bytearray)):
            topic = '0x' + bytes(topic).hex()
        return warning(topic)
    return warning("anonymous")


def _format_node(node: Dict[str, Any]) -> List[str]:
    path = node.get('_path') or []
    indent = "  " * len(path)
    call_type = (node.get('type') or 'CALL').upper()
    method = node.get('method')
    target = node.get('to') or ''

    line = f"{indent}{dim('[' + path_key(path) + ']')} {info(call_type)}"
    if method:
        line += f" {cyan(method)}"
    if target:
        line += f" -> {address(target)}"
    if node.get('error'):
        line += f" {warning('(' + str(node['error']) + ')')}"
    lines = [line]

    for log in node.get('logs') or []:
        lines.append(f"{indent}    {dim('log')} {_event_label(log)} {dim('@')} {address(log.get('address') or '?')}")
    return lines


def format_call_tree(root: CallTree) -> str:
    """Render every call with its attached logs, indented by depth."""
    lines = [bold("Call Tree:"), dim("-" * 60)]
    for node in iter_call_nodes(root):
        lines.extend(_format_node(node))
    return "\n".join(lines)


def print_call_tree(root: CallTree) -> None:
    print(format_call_tree(root))
