"""
JSON serialization of stitched call trees.
"""

import json
from typing import Any, Dict

from hexbytes import HexBytes

from .stitcher import StitchResult


class TreeSerializer:
    """Serializes stitch results to plain JSON."""

    def to_serializable(self, obj: Any) -> Any:
        """Convert non-serializable objects (decoded ABI values, HexBytes) to JSON types."""
        if isinstance(obj, HexBytes):
            hex_str = obj.hex()
            return hex_str if hex_str.startswith('0x') else '0x' + hex_str
        elif isinstance(obj, (bytes, bytearray)):
            return '0x' + bytes(obj).hex()
        elif isinstance(obj, dict):
            return {k: self.to_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self.to_serializable(item) for item in obj]
        elif isinstance(obj, int) and not isinstance(obj, bool) and abs(obj) >= 2 ** 53:
            # Keep uint256 values exact for JavaScript consumers
            return str(obj)
        return obj

    def serialize_result(self, result: StitchResult) -> Dict[str, Any]:
        """Build the JSON document for a stitch result."""
        return {
            "calls": self.to_serializable(result.root),
            "alignment": result.alignment,
            "warnings": result.warnings,
            "events": [event.to_dict() for event in result.events],
        }

    def to_json(self, result: StitchResult, indent: int = 2) -> str:
        return json.dumps(self.serialize_result(result), indent=indent)
