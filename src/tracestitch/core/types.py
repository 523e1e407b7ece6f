"""
Data types shared by the event-path deriver, the call-tree indexer and the stitcher.

Call nodes and receipt logs stay plain dicts, exactly as the node returns
them; only the opcode replay state gets dedicated types.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from tracestitch.utils.exceptions import TraceInputError

CallPath = Tuple[int, ...]

# Opcodes that may enter a new call frame
ENTER_OPCODES = frozenset([
    "CALL",
    "STATICCALL",
    "DELEGATECALL",
    "CALLCODE",
    "CREATE",
    "CREATE2",
])

# Call types whose logs are emitted under the caller's address
CALLER_CONTEXT_CALL_TYPES = frozenset(["DELEGATECALL", "CALLCODE"])


def path_key(path) -> str:
    """Serialize a call path, e.g. (0, 2) -> '0/2' and () -> ''."""
    return "/".join(str(i) for i in path)


@dataclass(frozen=True)
class TraceStep:
    """One executed instruction of a structLogs trace."""
    op: str
    depth: int
    pc: int = 0

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "TraceStep":
        """Build a step from a raw structLogs entry, ignoring gas/stack/memory."""
        try:
            return cls(op=str(raw['op']), depth=int(raw['depth']), pc=int(raw.get('pc', 0)))
        except (KeyError, TypeError, ValueError) as e:
            raise TraceInputError(f"Invalid structLogs step {raw!r}: {e}", source="structLogs")


@dataclass
class Frame:
    """Simulated call-stack entry."""
    path: CallPath
    next_child: int = 0
    # Events emitted directly in this frame
    log_indices: List[int] = field(default_factory=list)
    # Events of callees that already returned without reverting
    nested_log_indices: List[int] = field(default_factory=list)
    reverted: bool = False


@dataclass
class PendingCall:
    """Child slot reserved by a CALL/CREATE step, confirmed only if the next step goes deeper."""
    parent: Frame
    reserved_index: int
    depth: int


@dataclass
class EventPath:
    """A LOG step attributed to the call frame that emitted it."""
    op: str
    pc: int
    depth: int
    call_path: CallPath
    event_index_in_call: Optional[int] = None
    dropped: bool = False

    @property
    def key(self) -> str:
        return path_key(self.call_path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "op": self.op,
            "pc": self.pc,
            "depth": self.depth,
            "callPath": list(self.call_path),
            "eventIdxInCall": self.event_index_in_call,
        }
