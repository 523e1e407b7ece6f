"""
Common utilities for CLI commands.

This module provides shared functionality used across the CLI commands
to ensure consistent behavior.
"""

import sys
from typing import Any

from tracestitch.config import StitchConfig
from tracestitch.core.enricher import CompositeSignatureLookup, MappingSignatureLookup, SignatureLookup
from tracestitch.parsers.abi import AbiSignatureLookup
from tracestitch.utils.exceptions import format_error
from tracestitch.utils.logging import logger, setup_logging


def configure_logging(args: Any) -> None:
    """Set up logging from the shared --debug/--verbose/--quiet/--log-file flags."""
    setup_logging(
        quiet=getattr(args, 'quiet', False),
        debug=getattr(args, 'debug', False),
        verbose=getattr(args, 'verbose', False),
        log_file=getattr(args, 'log_file', None),
    )


def load_config(args: Any) -> StitchConfig:
    """
    Load the config file and apply command-line overrides.

    Args:
        args: Parsed command arguments

    Returns:
        Effective configuration
    """
    config = StitchConfig.from_config_file(args.config)
    logger.debug(f"Loaded configuration from {args.config}")

    if getattr(args, 'lenient', False):
        config.lenient = True
    if getattr(args, 'no_address_check', False):
        config.check_addresses = False
    if getattr(args, 'no_enrich', False):
        config.enrich = False
    for abi_path in getattr(args, 'abi', None) or []:
        # Paths already in the config file are kept once
        if abi_path not in config.abi_paths:
            config.abi_paths.append(abi_path)
    if getattr(args, 'signatures', None):
        config.signatures_file = args.signatures

    return config


def build_signature_lookup(config: StitchConfig) -> SignatureLookup:
    """
    Build the lookup used by the enricher.

    Entries of the signatures file take precedence over ABI-derived ones.
    """
    lookups = []
    if config.signatures_file:
        lookups.append(MappingSignatureLookup.from_json_file(config.signatures_file))
        logger.debug(f"Loaded signatures from {config.signatures_file}")

    if config.abi_paths:
        abi_lookup = AbiSignatureLookup()
        for abi_path in config.abi_paths:
            abi_lookup.load_abi(abi_path)
        lookups.append(abi_lookup)

    return CompositeSignatureLookup(*lookups)


def handle_command_error(
    e: Exception,
    json_mode: bool = False,
    exit_code: int = 1
) -> int:
    """
    Handle command errors uniformly.

    Args:
        e: The exception that occurred
        json_mode: If True, output as JSON
        exit_code: Exit code to return

    Returns:
        Exit code
    """
    error_output = format_error(e, json_mode)
    if json_mode:
        print(error_output)
    else:
        print(error_output, file=sys.stderr)
    return exit_code
