#!/usr/bin/env python3
"""
Main entry point for tracestitch

This module serves as the CLI entry point, handling argument parsing
and routing to the appropriate command implementations in the cli/ module.
"""

import sys
import argparse

from tracestitch import __version__
from tracestitch.config import DEFAULT_CONFIG_FILE
from .stitch import stitch_command
from .paths import event_paths_command


def _add_logging_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--debug', action='store_true', help='Show debug log output')
    parser.add_argument('--verbose', action='store_true', help='Log every replayed step (implies --debug)')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress log output')
    parser.add_argument('--log-file', default=None, help='Also write the log to this file')


def main(argv=None):
    """Main entry point for tracestitch CLI."""
    parser = argparse.ArgumentParser(description='tracestitch - attribute receipt logs to the calls that emitted them')
    parser.add_argument('--version', '-v', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')
    subparsers.required = True

    # stitch command
    stitch_parser = subparsers.add_parser('stitch', help='Attach receipt logs to a callTracer call tree')
    stitch_parser.add_argument('--struct-logs', '-s', required=True, help='debug_traceTransaction (default tracer) JSON file')
    stitch_parser.add_argument('--calls', '-c', required=True, help='debug_traceTransaction callTracer JSON file')
    stitch_parser.add_argument('--receipt', '-r', required=True, help='eth_getTransactionReceipt JSON file')
    stitch_parser.add_argument('--abi', '-a', action='append', help='ABI or artifact file used to decode methods and events. Can be specified multiple times')
    stitch_parser.add_argument('--signatures', help='JSON file with {"selectors": {...}, "events": {...}} name mappings')
    stitch_parser.add_argument('--lenient', action='store_true', help='Print the stitched tree with its warnings instead of failing')
    stitch_parser.add_argument('--no-address-check', action='store_true', help='Skip the emitter address sanity check')
    stitch_parser.add_argument('--no-enrich', action='store_true', help='Do not resolve method names or decode events')
    stitch_parser.add_argument('--json', action='store_true', help='Output the stitched tree as JSON')
    stitch_parser.add_argument('--output', '-o', default=None, help='Also write the JSON result to this file')
    stitch_parser.add_argument('--config', default=DEFAULT_CONFIG_FILE, help=f'Configuration file (default: {DEFAULT_CONFIG_FILE})')
    stitch_parser.add_argument('--save-config', action='store_true', help='Save the effective configuration to the config file')
    _add_logging_arguments(stitch_parser)

    # event-paths command
    paths_parser = subparsers.add_parser('event-paths', help='Show the call path of every retained LOG in a trace')
    paths_parser.add_argument('--struct-logs', '-s', required=True, help='debug_traceTransaction (default tracer) JSON file')
    paths_parser.add_argument('--json', action='store_true', help='Output event paths as JSON')
    _add_logging_arguments(paths_parser)

    args = parser.parse_args(argv)

    if args.command == 'stitch':
        return stitch_command(args)
    elif args.command == 'event-paths':
        return event_paths_command(args)

    return 0


if __name__ == '__main__':
    sys.exit(main())
