"""
Receipt log stitching.

Attaches every receipt log to the callTracer node that emitted it, using
the event paths derived from the opcode trace, and reports every
disagreement between trace, call tree and receipt.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from tracestitch.utils.exceptions import StitchError, TraceInputError
from tracestitch.utils.logging import get_logger
from .call_tree import CallTree, annotate_call_paths, expected_log_address
from .event_paths import derive_event_paths
from .types import EventPath, TraceStep

logger = get_logger('stitcher')

ALIGNMENT_AUTHORITATIVE = "authoritative"
ALIGNMENT_SEQUENTIAL = "sequential"


class IssueKind(Enum):
    """Kinds of reconciliation anomalies."""
    STRUCTURAL_MISMATCH = "StructuralMismatch"
    ADDRESS_MISMATCH = "AddressMismatch"
    COUNT_MISMATCH = "CountMismatch"
    UNMAPPED_LEFTOVER = "UnmappedLeftover"


@dataclass
class StitchIssue:
    """One non-fatal anomaly found while stitching."""
    kind: IssueKind
    message: str
    log_index: Optional[int] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        return self.message


@dataclass
class StitchResult:
    """Outcome of a stitch: the mutated tree plus everything that looked off."""
    root: CallTree
    issues: List[StitchIssue] = field(default_factory=list)
    events: List[EventPath] = field(default_factory=list)
    alignment: str = ALIGNMENT_AUTHORITATIVE

    @property
    def warnings(self) -> List[str]:
        return [issue.message for issue in self.issues]


def receipt_logs_of(receipt: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]) -> List[Mapping[str, Any]]:
    """Accept either a receipt (with ``logs``) or a bare log list."""
    if isinstance(receipt, Mapping):
        if 'logs' not in receipt:
            raise TraceInputError("Receipt has no 'logs' member", source="receipt")
        return list(receipt['logs'] or [])
    return list(receipt)


def stitch_logs_into_call_trace(
    calls: CallTree,
    struct_logs: Sequence[Union[TraceStep, Dict[str, Any]]],
    receipt: Union[Mapping[str, Any], Sequence[Mapping[str, Any]]],
    suppress_warnings: bool = False,
    check_addresses: bool = True,
) -> StitchResult:
    """
    Attach receipt logs to the call tree, in place.

    The i-th retained event of the trace is paired with the i-th receipt
    log. When both counts agree this pairing is authoritative; otherwise it
    is a best-effort sequential pairing and is reported as such.

    Args:
        calls: callTracer result, a node dict or a list of top-level nodes
        struct_logs: structLogs of the same transaction
        receipt: the transaction receipt or its ``logs`` list
        suppress_warnings: return warnings instead of raising on them
        check_addresses: compare each log's address with the node's emitter

    Returns:
        StitchResult holding the same ``calls`` object

    Raises:
        StitchError: if any issue was found and ``suppress_warnings`` is False
    """
    logs = receipt_logs_of(receipt)
    events = derive_event_paths(struct_logs)
    path_map = annotate_call_paths(calls)
    result = StitchResult(root=calls, events=events)

    def report(kind: IssueKind, message: str, log_index: Optional[int] = None, path: Optional[str] = None):
        logger.debug(f"{kind.value}: {message}")
        result.issues.append(StitchIssue(kind, message, log_index, path))

    if len(events) != len(logs):
        result.alignment = ALIGNMENT_SEQUENTIAL
        report(
            IssueKind.COUNT_MISMATCH,
            f"events from structLogs ({len(events)}) != receipt logs ({len(logs)}). "
            f"Will attach sequentially (best effort, not path-authoritative)."
        )

    for node in path_map.values():
        node['logs'] = []

    aligned = min(len(events), len(logs))
    for li in range(aligned):
        event = events[li]
        key = event.key
        node = path_map.get(key)
        if node is None:
            report(
                IssueKind.STRUCTURAL_MISMATCH,
                f"no callTracer node for path [{key}] at receipt log #{li}",
                log_index=li, path=key
            )
            continue

        log = logs[li]
        if check_addresses:
            expected = expected_log_address(node)
            actual = log.get('address')
            if expected and actual and expected != actual.lower():
                report(
                    IssueKind.ADDRESS_MISMATCH,
                    f"address mismatch at path [{key}]: expected {expected}, got {actual.lower()} (log #{li})",
                    log_index=li, path=key
                )
        node['logs'].append(dict(log))

    for li in range(aligned, len(logs)):
        report(IssueKind.UNMAPPED_LEFTOVER, f"leftover receipt log #{li} not mapped", log_index=li)

    logger.info(
        f"Paired {aligned} of {len(logs)} receipt log(s) into {len(path_map)} call node(s) "
        f"({result.alignment}, {len(result.issues)} warning(s))"
    )

    if result.issues and not suppress_warnings:
        raise StitchError(result.warnings)

    return result
