"""
Event path derivation from opcode traces.

Replays the depth/opcode sequence of a ``structLogs`` trace to work out
which call frame emitted each LOG, dropping logs of frames that reverted.
The EVM itself is never executed.
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from tracestitch.utils.logging import get_logger, TRACE
from .types import ENTER_OPCODES, EventPath, Frame, PendingCall, TraceStep, path_key

logger = get_logger('event_paths')


def _coerce_step(step: Union[TraceStep, Dict[str, Any]]) -> TraceStep:
    if isinstance(step, TraceStep):
        return step
    return TraceStep.from_dict(step)


def derive_event_paths(steps: Iterable[Union[TraceStep, Dict[str, Any]]]) -> List[EventPath]:
    """
    Derive the call path of every retained LOG in a trace.

    A CALL/CREATE-family step only reserves a child index on the current
    frame. The reservation becomes a frame when the next step runs deeper;
    otherwise the callee never executed (no code, precompile, failed
    pre-checks) and the reservation is discarded. The index stays consumed
    either way, matching how callTracer numbers its children.

    Frames are popped when the depth drops back to or below their level.
    Popping a frame that executed REVERT drops every log it emitted, both
    its own and those of callees that returned normally beneath it, since
    the EVM discards the whole sub-tree's logs. A callee that returns
    normally hands its logs to its parent, so a later revert further up
    still reaches them.

    Args:
        steps: structLogs entries (``TraceStep`` or raw dicts) in execution order

    Returns:
        Retained events in execution order, each with its per-path ordinal
    """
    frames: List[Frame] = [Frame(path=())]
    events: List[EventPath] = []
    pending: Optional[PendingCall] = None
    tracing = logger.isEnabledFor(TRACE)

    for i, raw_step in enumerate(steps):
        step = _coerce_step(raw_step)
        op, depth = step.op, step.depth
        if tracing:
            logger.trace(f"step {i}: {op} depth={depth} pc={step.pc} frames={len(frames)}")

        if pending is not None:
            if depth > pending.depth:
                frame = Frame(path=pending.parent.path + (pending.reserved_index,))
                frames.append(frame)
                logger.debug(f"Entered frame [{path_key(frame.path)}] at step {i}")
            else:
                logger.debug(
                    f"Zero-step call at child slot {pending.reserved_index} of "
                    f"[{path_key(pending.parent.path)}], no frame created"
                )
            pending = None

        # The root frame stands for depth 1 and is never popped
        while len(frames) > max(depth, 1):
            frame = frames.pop()
            emitted = frame.log_indices + frame.nested_log_indices
            if frame.reverted:
                for idx in emitted:
                    events[idx].dropped = True
                if emitted:
                    logger.debug(
                        f"Dropped {len(emitted)} log(s) of reverted frame [{path_key(frame.path)}]"
                    )
            else:
                frames[-1].nested_log_indices.extend(emitted)

        current = frames[-1]

        if op in ENTER_OPCODES:
            pending = PendingCall(parent=current, reserved_index=current.next_child, depth=depth)
            current.next_child += 1

        if op.startswith("LOG"):
            current.log_indices.append(len(events))
            events.append(EventPath(op=op, pc=step.pc, depth=depth, call_path=current.path))

        if op == "REVERT":
            current.reverted = True

    if pending is not None:
        logger.debug("Trace ended right after a call; discarding its reservation")

    counters: Dict[str, int] = {}
    retained = []
    for event in events:
        if event.dropped:
            continue
        key = event.key
        event.event_index_in_call = counters.get(key, 0)
        counters[key] = event.event_index_in_call + 1
        retained.append(event)

    logger.debug(f"Derived {len(retained)} event(s), dropped {len(events) - len(retained)}")
    return retained
