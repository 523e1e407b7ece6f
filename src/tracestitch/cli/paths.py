"""
Event-paths command implementation.

Prints which call path emitted each retained LOG of a structLogs trace,
without needing the call tree or the receipt.
"""

import json

from tracestitch.core.event_paths import derive_event_paths
from tracestitch.parsers.trace_inputs import load_json, load_struct_logs
from tracestitch.utils.colors import bold, dim, info, opcode, pc_value
from tracestitch.utils.exceptions import TracestitchError
from tracestitch.cli.common import configure_logging, handle_command_error


def event_paths_command(args) -> int:
    """
    Execute the event-paths command.

    Args:
        args: Parsed command arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    json_mode = getattr(args, 'json', False)
    configure_logging(args)

    try:
        steps = load_struct_logs(load_json(args.struct_logs))
    except TracestitchError as e:
        return handle_command_error(e, json_mode)

    events = derive_event_paths(steps)

    if json_mode:
        print(json.dumps([event.to_dict() for event in events], indent=2))
        return 0

    print(bold("Event Paths:"))
    print(dim("-" * 60))
    if not events:
        print(dim("No retained LOG steps"))
    for i, event in enumerate(events):
        print(
            f"#{i} {opcode(event.op)} pc={pc_value(event.pc)} depth={event.depth} "
            f"path=[{info(event.key)}] idx={event.event_index_in_call}"
        )
    return 0
