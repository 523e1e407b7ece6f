"""
Stitch command implementation.

Loads a structLogs trace, a callTracer tree and a receipt, attaches every
receipt log to the call that emitted it and prints the annotated tree.
"""

from tracestitch.core.call_tree import iter_call_nodes
from tracestitch.core.enricher import enrich_trace
from tracestitch.core.printer import print_call_tree
from tracestitch.core.serializer import TreeSerializer
from tracestitch.core.stitcher import ALIGNMENT_SEQUENTIAL, StitchResult, stitch_logs_into_call_trace
from tracestitch.parsers.trace_inputs import load_call_tree, load_json, load_receipt_logs, load_struct_logs
from tracestitch.utils.colors import bold, dim, info, warning
from tracestitch.utils.exceptions import TracestitchError
from tracestitch.utils.logging import logger
from tracestitch.cli.common import (
    build_signature_lookup,
    configure_logging,
    handle_command_error,
    load_config,
)


def stitch_command(args) -> int:
    """
    Execute the stitch command.

    Args:
        args: Parsed command arguments

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    json_mode = getattr(args, 'json', False)
    configure_logging(args)

    try:
        config = load_config(args)
        steps = load_struct_logs(load_json(args.struct_logs))
        calls = load_call_tree(load_json(args.calls))
        receipt_logs = load_receipt_logs(load_json(args.receipt))

        result = stitch_logs_into_call_trace(
            calls,
            steps,
            receipt_logs,
            suppress_warnings=config.lenient,
            check_addresses=config.check_addresses,
        )

        if config.enrich:
            enrich_trace(result.root, build_signature_lookup(config))

        if getattr(args, 'save_config', False):
            config.save_to_config_file(args.config)
            logger.info(f"Saved configuration to {args.config}")

        serializer = TreeSerializer()
        if args.output:
            with open(args.output, 'w') as f:
                f.write(serializer.to_json(result))
            logger.info(f"Wrote stitched trace to {args.output}")
    except (TracestitchError, OSError) as e:
        return handle_command_error(e, json_mode)

    if json_mode:
        print(serializer.to_json(result))
    else:
        _print_result(result)

    return 0


def _print_result(result: StitchResult) -> None:
    """Print the annotated tree followed by the warning list."""
    print_call_tree(result.root)
    attached = sum(len(node.get('logs') or []) for node in iter_call_nodes(result.root))
    print(dim("-" * 60))
    print(f"{dim('Derived events:')} {info(str(len(result.events)))}")
    print(f"{dim('Attached logs:')} {info(str(attached))}")
    if result.alignment == ALIGNMENT_SEQUENTIAL:
        print(f"{dim('Alignment:')} {warning(result.alignment)}")
    else:
        print(f"{dim('Alignment:')} {info(result.alignment)}")

    if result.warnings:
        print(f"\n{bold('Warnings:')}")
        for line in result.warnings:
            print(f"  {warning(line)}")
