"""
CLI module for tracestitch commands.

This module provides the command-line interface for tracestitch,
including the stitch and event-paths commands.
"""

from .main import main

__all__ = [
    'main',
    'stitch_command',
    'event_paths_command',
]

# Lazy imports to avoid circular dependencies
def stitch_command(args):
    """Execute the stitch command."""
    from .stitch import stitch_command as _stitch_command
    return _stitch_command(args)

def event_paths_command(args):
    """Execute the event-paths command."""
    from .paths import event_paths_command as _event_paths_command
    return _event_paths_command(args)
